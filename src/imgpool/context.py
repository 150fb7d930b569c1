"""
ImageContext - One application's image pool and loader.

Owns the registry and the loader together so an application creates them
once, wires its lifecycle transitions to transition(), and closes them on
shutdown.
"""

from typing import Any, Optional

from imgpool.loader.image_loader import ImageLoader
from imgpool.pool.image_pool import ImagePool, PoolHandle


class ImageContext:
    """
    Usage:
        async with create_context() as images:
            await images.load("a.png", "gallery", 2)
            img = images.pool("gallery").get("a.png")

            images.transition()   # e.g. on navigation
    """

    def __init__(self, image_pool: ImagePool, loader: ImageLoader):
        self.image_pool = image_pool
        self.loader = loader
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def pool(self, name: Optional[str] = None) -> PoolHandle:
        return self.image_pool.pool(name)

    def load(self, src, *args: Any, **kwargs: Any):
        """Shortcut for ImageLoader.load()."""
        return self.loader.load(src, *args, **kwargs)

    def load_many(self, srcs, *args: Any, **kwargs: Any):
        """Shortcut for ImageLoader.load_many()."""
        return self.loader.load_many(srcs, *args, **kwargs)

    def transition(self) -> int:
        """Signal a lifecycle transition; returns the number of pools flushed."""
        return self.image_pool.on_transition()

    async def aclose(self) -> None:
        """Flush every pool and close the loader's fetcher. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self.image_pool.flush()
        await self.loader.aclose()

    async def __aenter__(self) -> "ImageContext":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"ImageContext({self.image_pool!r}, {self.loader!r})"
