"""
PoolStore - Plain keyed store backing one named image pool.

Holds single values per key; the stack-of-instances behavior lives in
PoolHandle. Entries are never evicted: they stay until removed, cleared,
or the store is destroyed.
"""

from typing import Any, Dict, Optional


class PoolStore:
    """
    In-memory keyed store.

    Usage:
        factory = StoreFactory()
        store = factory.create("pool.gallery")
        store.put("a.png", [img])
        store.get("a.png")
        store.destroy()  # factory.get("pool.gallery") is now None
    """

    def __init__(self, store_id: str, factory: Optional["StoreFactory"] = None):
        self.id = store_id
        self._data: Dict[str, Any] = {}
        self._factory = factory
        self._destroyed = False

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def put(self, key: str, value: Any) -> Any:
        """Store value under key, replacing any previous value, and return it."""
        self._data[key] = value
        return value

    def get(self, key: str) -> Optional[Any]:
        """Return the value under key or None."""
        return self._data.get(key)

    def remove(self, key: str) -> None:
        """Remove key if present."""
        self._data.pop(key, None)

    def remove_all(self) -> None:
        """Remove every entry."""
        self._data.clear()

    def info(self) -> Dict[str, Any]:
        return {"id": self.id, "size": len(self._data)}

    def destroy(self) -> None:
        """
        Drop all entries and unregister from the owning factory.

        Safe to call more than once.
        """
        self._data.clear()
        if self._factory is not None:
            self._factory._unregister(self)
        self._destroyed = True

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        return f"PoolStore(id={self.id!r}, size={len(self._data)})"


class StoreFactory:
    """Creates stores by id and remembers them until they are destroyed."""

    def __init__(self):
        self._stores: Dict[str, PoolStore] = {}

    def create(self, store_id: str) -> PoolStore:
        """
        Create a new store.

        Raises:
            ValueError: If a live store with the same id already exists
        """
        if store_id in self._stores:
            raise ValueError(f"Store id already taken: {store_id}")
        store = PoolStore(store_id, factory=self)
        self._stores[store_id] = store
        return store

    def get(self, store_id: str) -> Optional[PoolStore]:
        return self._stores.get(store_id)

    def get_or_create(self, store_id: str) -> PoolStore:
        store = self._stores.get(store_id)
        if store is None:
            store = self.create(store_id)
        return store

    def info(self) -> Dict[str, Dict[str, Any]]:
        return {store_id: store.info() for store_id, store in self._stores.items()}

    def _unregister(self, store: PoolStore) -> None:
        # Only drop the entry if it still points at this store
        if self._stores.get(store.id) is store:
            del self._stores[store.id]

    def __contains__(self, store_id: str) -> bool:
        return store_id in self._stores

    def __len__(self) -> int:
        return len(self._stores)
