"""
ImageSlot - Display-agnostic binding between one image slot and a pool.

The slot shows at most one pooled instance at a time. Attaching and
detaching the instance to an actual display tree is delegated to the
``attach`` / ``detach`` callables supplied by the caller.
"""

from typing import Any, Callable, Optional

from imgpool.logger.logger import get_logger
from imgpool.pool.image_pool import ImagePool, PoolHandle
from imgpool.settings.app_settings import appConfiguration

logger = get_logger(
    "binding",
    log_file=appConfiguration.LoggerConfiguration.LogFile,
    level=appConfiguration.LoggerConfiguration.BindingLevel,
)


def _noop(_resource: Any) -> None:
    pass


class ImageSlot:
    """
    Binds a changing source to instances taken from a pool.

    Usage:
        slot = ImageSlot(images, pool_name="gallery", attach=container.append,
                         detach=container.remove)
        slot.show("a.png")   # takes an instance from the pool
        slot.show("b.png")   # returns a.png to the pool, takes b.png
        slot.release()       # returns b.png to the pool
    """

    def __init__(
        self,
        image_pool: ImagePool,
        pool_name: Optional[str] = None,
        loader: Optional[Any] = None,
        attach: Optional[Callable[[Any], Any]] = None,
        detach: Optional[Callable[[Any], Any]] = None,
    ):
        """
        Args:
            image_pool: Registry to take instances from and return them to
            pool_name: Pool to use (default pool when None)
            loader: Optional ImageLoader; on a miss a load into this pool is requested
            attach: Called with an instance when it becomes visible
            detach: Called with an instance when it stops being visible
        """
        self.pool: PoolHandle = image_pool.pool(pool_name)
        self.pool_name = pool_name
        self.loader = loader
        self._attach = attach or _noop
        self._detach = detach or _noop
        self._current: Optional[Any] = None
        self._current_src: Optional[str] = None

    @property
    def current(self) -> Optional[Any]:
        return self._current

    @property
    def current_src(self) -> Optional[str]:
        return self._current_src

    def show(self, src: Optional[str]) -> Optional[Any]:
        """
        Display the image for src.

        Returns:
            The attached instance, or None on a miss or an empty src
        """
        if self._current is not None:
            if src == self._current_src:
                return self._current
            self._put_back()

        if not src:
            return None

        resource = self.pool.get(src)
        if resource is None:
            logger.error(f"[ImageSlot] Pool failed to hit: {src}")
            if self.loader is not None:
                self.loader.load(src, pool_name=self.pool.name)
            return None

        self._attach(resource)
        self._current = resource
        self._current_src = src
        return resource

    def release(self) -> None:
        """Detach the current instance and return it to the pool."""
        if self._current is not None:
            self._put_back()

    def _put_back(self) -> None:
        resource, src = self._current, self._current_src
        self._current = None
        self._current_src = None
        self._detach(resource)
        self.pool.put(src, resource)
        logger.debug(f"[ImageSlot] Returned {src} to {self.pool.id}")

    def __repr__(self) -> str:
        return f"ImageSlot(pool={self.pool.id!r}, src={self._current_src!r})"
