"""Load request state for the image loader.

- LoadOptions: Normalized per-call options (callback, pool name, copies)
- normalize_load_args: The one place positional overloads are resolved
- LoadRequest: One queued fetch, consumed exactly once

Lifecycle:
    1. load() normalizes its arguments and creates a LoadRequest (WAITING)
    2. The drain loop pops it and starts the fetch (RUNNING)
    3. The fetch succeeds or fails; the request is FINISHED and never requeued
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Optional

# Result delivered for a failed fetch, in place of the resource.
LOAD_FAILED = False

LoadCallback = Callable[[Any], Any]


class RequestStatus(Enum):
    """Lifecycle states for a load request."""
    WAITING = auto()    # Queued, no quota yet
    RUNNING = auto()    # Fetch in flight
    FINISHED = auto()   # Succeeded or failed


@dataclass(frozen=True)
class LoadOptions:
    """
    Options for a load call.

    Attributes:
        callback: Called once with the result (a list of results for batches)
        pool_name: When set, successful loads are deposited into this pool
        copies: Number of instances to deposit (default 1)
    """
    callback: Optional[LoadCallback] = None
    pool_name: Optional[str] = None
    copies: Optional[int] = None

    def __post_init__(self):
        if self.callback is not None and not callable(self.callback):
            raise TypeError(f"callback must be callable, got {type(self.callback).__name__}")
        if self.pool_name is not None and not isinstance(self.pool_name, str):
            raise TypeError(f"pool_name must be a string, got {type(self.pool_name).__name__}")
        if self.copies is not None:
            if not isinstance(self.copies, int) or isinstance(self.copies, bool):
                raise TypeError(f"copies must be an integer, got {type(self.copies).__name__}")
            if self.copies < 1:
                raise ValueError(f"copies must be at least 1, got {self.copies}")

    @property
    def deposit(self) -> bool:
        return self.pool_name is not None

    @property
    def copy_count(self) -> int:
        return self.copies or 1

    def without_callback(self) -> "LoadOptions":
        return LoadOptions(pool_name=self.pool_name, copies=self.copies)


_UNSET = object()


def normalize_load_args(
    *args: Any,
    callback: Any = _UNSET,
    pool_name: Any = _UNSET,
    copies: Any = _UNSET,
) -> LoadOptions:
    """
    Resolve the positional forms of load() into LoadOptions.

    Positional arguments after the source are (callback, pool_name, copies),
    except that when the first of them is a string it is the pool name and
    the callback is omitted:

        load(src, callback)
        load(src, callback, pool_name[, copies])
        load(src, pool_name[, copies])

    Keyword arguments may be used instead but not for a slot already
    filled positionally.

    Raises:
        TypeError: On too many arguments or a slot given twice
    """
    positional = list(args)
    if positional and isinstance(positional[0], str):
        positional.insert(0, None)
    if len(positional) > 3:
        raise TypeError(
            f"load() takes at most 3 arguments after the source ({len(args)} given)"
        )

    slots = {"callback": None, "pool_name": None, "copies": None}
    for name, value in zip(("callback", "pool_name", "copies"), positional):
        slots[name] = value

    for name, value in (("callback", callback), ("pool_name", pool_name), ("copies", copies)):
        if value is _UNSET:
            continue
        if slots[name] is not None:
            raise TypeError(f"load() got multiple values for {name!r}")
        slots[name] = value

    return LoadOptions(**slots)


@dataclass
class LoadRequest:
    """
    A single queued fetch.

    Attributes:
        request_id: Monotonic id assigned by the loader
        src: Source identifier, used to fetch and as the pool key
        options: Normalized options for this request
        future: Resolved with the resource or LOAD_FAILED
        resource: The fetched resource (None until a successful fetch)
        status: Current lifecycle state
        task: The running fetch task (None until dispatched)
    """
    request_id: int
    src: str
    options: LoadOptions
    future: "asyncio.Future[Any]"
    resource: Optional[Any] = None
    status: RequestStatus = RequestStatus.WAITING
    task: Optional["asyncio.Task[Any]"] = field(default=None, repr=False)

    def is_finished(self) -> bool:
        return self.status == RequestStatus.FINISHED
