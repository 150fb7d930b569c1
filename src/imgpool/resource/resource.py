"""
Pooled resource types.

Anything stored in an image pool may be returned to callers more than once
only through duplicates, so resources that take part in multi-copy deposits
implement the Duplicable capability.
"""

import uuid
from abc import ABC, abstractmethod
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


class Duplicable(ABC):
    """Capability for resources that can produce an independent copy of themselves."""

    @abstractmethod
    def duplicate(self) -> "Duplicable":
        """
        Return a structurally equal but independent copy.

        Mutating the copy must never affect the original.
        """
        pass


def duplicate_of(instance: Any) -> Any:
    """
    Duplicate an instance through its capability.

    Raises:
        TypeError: If the instance cannot be duplicated
    """
    duplicate = getattr(instance, "duplicate", None)
    if not callable(duplicate):
        raise TypeError(
            f"{type(instance).__name__} does not support duplicate(); "
            f"pass an explicit instance instead"
        )
    return duplicate()


@dataclass(eq=False)
class ImageResource(Duplicable):
    """
    A fetched image, ready to be attached to a display.

    Equality is structural (source, payload, content type, metadata);
    ``resource_id`` identifies the individual instance and is never
    shared between duplicates.
    """

    src: str
    data: bytes = b""
    content_type: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    resource_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def size(self) -> int:
        return len(self.data)

    def duplicate(self) -> "ImageResource":
        return ImageResource(
            src=self.src,
            data=self.data,
            content_type=self.content_type,
            metadata=deepcopy(self.metadata),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ImageResource):
            return NotImplemented
        return (
            self.src == other.src
            and self.data == other.data
            and self.content_type == other.content_type
            and self.metadata == other.metadata
        )

    __hash__ = object.__hash__

    def __repr__(self) -> str:
        return (
            f"ImageResource(src={self.src!r}, size={self.size}, "
            f"id={self.resource_id[:8]})"
        )
