"""
ImagePool - Named pools of ready-to-attach image instances.

Every pool is a PoolStore whose values are stacks (lists) of instances:
- put() pushes, duplicating the bottom instance when no instance is given
- get() pops the most recently deposited instance, None on a miss
- flush() clears and destroys every store this registry created
"""

from typing import Any, Dict, Optional, Tuple

from imgpool.logger.logger import get_logger
from imgpool.pool.pool_store import PoolStore, StoreFactory
from imgpool.resource.resource import duplicate_of
from imgpool.settings.app_settings import PoolConfig, appConfiguration

logger = get_logger(
    "image_pool",
    log_file=appConfiguration.LoggerConfiguration.LogFile,
    level=appConfiguration.LoggerConfiguration.PoolLevel,
)


class PoolHandle:
    """
    Stack-of-instances view over one named store.

    A handle is stable for its name: after the store is destroyed (directly
    or by a flush) the next call transparently works on a fresh store.
    """

    def __init__(self, registry: "ImagePool", name: str):
        self._registry = registry
        self.name = name
        self.id = registry.store_id(name)

    @property
    def store(self) -> PoolStore:
        return self._registry._ensure_store(self.name)

    def put(self, key: str, instance: Any = None) -> Any:
        """
        Push an instance onto the stack for key.

        When instance is omitted and key already holds a stack, a duplicate
        of the first instance in the stack is pushed instead.

        Args:
            key: Source identifier
            instance: Instance to deposit (optional when key holds instances)

        Returns:
            The instance actually pushed

        Raises:
            ValueError: If instance is omitted and there is nothing to duplicate
        """
        store = self.store
        stack = store.get(key)

        if isinstance(stack, list):
            if instance is None:
                if not stack:
                    raise ValueError(
                        f"[ImagePool] Nothing to duplicate for {key!r} in {self.id}"
                    )
                instance = duplicate_of(stack[0])
            stack.append(instance)
        else:
            if instance is None:
                raise ValueError(
                    f"[ImagePool] put() needs an instance for new key {key!r} in {self.id}"
                )
            store.put(key, [instance])

        logger.debug(f"[ImagePool] Put {key} into {self.id} (stored: {self.size(key)})")
        return instance

    def get(self, key: str) -> Optional[Any]:
        """Pop the most recently deposited instance for key, or None on a miss."""
        stack = self.store.get(key)
        if isinstance(stack, list) and len(stack) > 0:
            instance = stack.pop()
            logger.debug(f"[ImagePool] Hit {key} in {self.id} (left: {len(stack)})")
            return instance

        logger.debug(f"[ImagePool] Miss {key} in {self.id}")
        return None

    def size(self, key: str) -> int:
        """Number of instances currently stored under key."""
        stack = self.store.get(key)
        return len(stack) if isinstance(stack, list) else 0

    def info(self) -> Dict[str, Any]:
        return self.store.info()

    def remove(self, key: str) -> None:
        self.store.remove(key)

    def remove_all(self) -> None:
        self.store.remove_all()

    def destroy(self) -> None:
        store = self._registry._factory.get(self.id)
        if store is not None:
            store.destroy()
            logger.info(f"[ImagePool] Destroyed {self.id}")

    def __repr__(self) -> str:
        return f"PoolHandle(id={self.id!r})"


class ImagePool:
    """
    Registry of named image pools.

    Usage:
        images = ImagePool(PoolConfig(default_pool_name="default"))

        gallery = images.pool("gallery")
        gallery.put("a.png", resource)
        resource = gallery.get("a.png")

        images.on_transition()  # flushes when flush_on_transition is set
    """

    def __init__(
        self,
        config: Optional[PoolConfig] = None,
        factory: Optional[StoreFactory] = None,
    ):
        """
        Initialize the registry.

        Args:
            config: Pool options (defaults to values from the environment)
            factory: Store factory; pass a shared one to share stores by id
        """
        self.config = config or PoolConfig()
        self.config.validate()
        self._factory = factory if factory is not None else StoreFactory()
        self._handles: Dict[str, PoolHandle] = {}
        # Ordered set of ids this registry has created; used only by flush()
        self._created_ids: Dict[str, bool] = {}

    def store_id(self, name: Optional[str] = None) -> str:
        return f"{self.config.id_prefix}.{name or self.config.default_pool_name}"

    def pool(self, name: Optional[str] = None) -> PoolHandle:
        """
        Get the handle for a named pool, creating the pool on first use.

        Args:
            name: Pool name; None or "" selects the default pool

        Returns:
            The same PoolHandle object for every call with this name
        """
        name = name or self.config.default_pool_name
        handle = self._handles.get(name)
        if handle is None:
            handle = PoolHandle(self, name)
            self._handles[name] = handle
        self._ensure_store(name)
        return handle

    __call__ = pool

    def _ensure_store(self, name: str) -> PoolStore:
        store_id = self.store_id(name)
        store = self._factory.get(store_id)
        if store is None:
            store = self._factory.create(store_id)
            logger.debug(f"[ImagePool] Created {store_id}")
        self._created_ids[store_id] = True
        return store

    @property
    def created_ids(self) -> Tuple[str, ...]:
        return tuple(self._created_ids)

    def flush(self) -> int:
        """
        Clear and destroy every store this registry created.

        Instances already handed out are unaffected.

        Returns:
            Number of stores flushed
        """
        flushed = 0
        for store_id in list(self._created_ids):
            store = self._factory.get(store_id)
            if store is not None:
                store.remove_all()
                store.destroy()
                flushed += 1
        self._created_ids.clear()

        if flushed:
            logger.info(f"[ImagePool] Flushed {flushed} pools")
        return flushed

    def on_transition(self) -> int:
        """Lifecycle transition hook; flushes when configured to."""
        if not self.config.flush_on_transition:
            logger.debug("[ImagePool] Transition ignored (flush_on_transition is off)")
            return 0
        return self.flush()

    def info(self) -> Dict[str, Dict[str, Any]]:
        return {
            store_id: info
            for store_id, info in self._factory.info().items()
            if store_id in self._created_ids
        }

    def __repr__(self) -> str:
        return f"ImagePool(prefix={self.config.id_prefix!r}, pools={len(self._created_ids)})"
