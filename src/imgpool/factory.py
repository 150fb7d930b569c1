from copy import deepcopy
from typing import Optional

from imgpool.context import ImageContext
from imgpool.loader.image_loader import ImageLoader
from imgpool.pool.image_pool import ImagePool
from imgpool.pool.pool_store import StoreFactory
from imgpool.resource.fetcher import ImageFetcher
from imgpool.settings import app_settings
from imgpool.settings.app_settings import LoaderConfig, PoolConfig


def create_context(
    pool_config: Optional[PoolConfig] = None,
    loader_config: Optional[LoaderConfig] = None,
    fetcher: Optional[ImageFetcher] = None,
    store_factory: Optional[StoreFactory] = None,
) -> ImageContext:
    """Factory function to create an image pool and loader that work together.

    Args:
        pool_config: Pool options (copy of the application configuration if omitted)
        loader_config: Loader options (copy of the application configuration if omitted)
        fetcher: Fetcher for the loader (http/file routing if omitted)
        store_factory: Optional store factory shared with other registries

    Returns:
        ImageContext owning both components

    Raises:
        ValueError: If either configuration is invalid
    """
    if pool_config is None:
        pool_config = deepcopy(app_settings.appConfiguration.PoolConfiguration)
    if loader_config is None:
        loader_config = deepcopy(app_settings.appConfiguration.LoaderConfiguration)

    image_pool = ImagePool(pool_config, factory=store_factory)
    loader = ImageLoader(image_pool, fetcher=fetcher, config=loader_config)
    return ImageContext(image_pool, loader)
