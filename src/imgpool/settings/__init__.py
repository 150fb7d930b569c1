"""
Settings module
"""

from imgpool.settings.app_settings import (
    AppConfig,
    LoaderConfig,
    LoggerConfig,
    PoolConfig,
    appConfiguration,
    load_configuration,
)

__all__ = [
    "AppConfig",
    "LoaderConfig",
    "LoggerConfig",
    "PoolConfig",
    "appConfiguration",
    "load_configuration",
]
