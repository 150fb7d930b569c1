"""
Loader module.

Provides bounded-concurrency image loading:
- ImageLoader: FIFO scheduler with a fixed in-flight quota
- LoadOptions / LoadRequest: Per-call options and queued request state
- LOAD_FAILED: Result delivered for failed fetches
"""

from imgpool.loader.load_request import (
    LOAD_FAILED,
    LoadOptions,
    LoadRequest,
    RequestStatus,
    normalize_load_args,
)
from imgpool.loader.image_loader import ImageLoader

__all__ = [
    "ImageLoader",
    "LOAD_FAILED",
    "LoadOptions",
    "LoadRequest",
    "RequestStatus",
    "normalize_load_args",
]
