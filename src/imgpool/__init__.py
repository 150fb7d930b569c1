"""
imgpool - Pools of reusable loaded images with bounded-concurrency loading.

Keeps ready-to-attach image instances in named pools so they are not fetched
twice, and fetches new ones through a FIFO loader that never runs more than
a fixed number of requests at once.
"""

__version__ = "0.1.0"

# Pool
from imgpool.pool import ImagePool, PoolHandle, PoolStore, StoreFactory

# Resources and fetchers
from imgpool.resource import (
    Duplicable,
    FetchError,
    FileImageFetcher,
    HttpImageFetcher,
    ImageFetcher,
    ImageLoadError,
    ImageResource,
    RoutingImageFetcher,
)

# Loader
from imgpool.loader import LOAD_FAILED, ImageLoader, LoadOptions, LoadRequest

# Binding and context
from imgpool.binding import ImageSlot
from imgpool.context import ImageContext
from imgpool.factory import create_context

# Logger
from imgpool.logger import get_logger, ColorFormatter

# Settings
from imgpool.settings.app_settings import (
    AppConfig,
    LoaderConfig,
    LoggerConfig,
    PoolConfig,
    appConfiguration,
    load_configuration,
)

__all__ = [
    # Version
    "__version__",
    # Pool
    "ImagePool",
    "PoolHandle",
    "PoolStore",
    "StoreFactory",
    # Resources
    "Duplicable",
    "FetchError",
    "FileImageFetcher",
    "HttpImageFetcher",
    "ImageFetcher",
    "ImageLoadError",
    "ImageResource",
    "RoutingImageFetcher",
    # Loader
    "LOAD_FAILED",
    "ImageLoader",
    "LoadOptions",
    "LoadRequest",
    # Binding / context
    "ImageSlot",
    "ImageContext",
    "create_context",
    # Logger
    "get_logger",
    "ColorFormatter",
    # Settings
    "AppConfig",
    "LoaderConfig",
    "LoggerConfig",
    "PoolConfig",
    "appConfiguration",
    "load_configuration",
]
