"""
Image Pool module.

Provides keyed pools of reusable image instances:
- ImagePool: Registry of named pools with flush support
- PoolHandle: Stack-of-instances view over one pool
- PoolStore / StoreFactory: Plain keyed storage underneath
"""

from imgpool.pool.pool_store import PoolStore, StoreFactory
from imgpool.pool.image_pool import ImagePool, PoolHandle

__all__ = [
    "ImagePool",
    "PoolHandle",
    "PoolStore",
    "StoreFactory",
]
