from copy import deepcopy
from dataclasses import asdict, dataclass, field, fields, replace
import os
from typing import Any, Mapping, Optional, Union

from dotenv import load_dotenv

load_dotenv(dotenv_path="config/options/options.env", override=True)


def parse_bool_string(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class _ConfigurableMixin:
    """
    Three-way accessor shared by pool and loader configs.

    configure({"a": 1})  -> merge keys
    configure("a", 1)    -> set one key
    configure("a")       -> read one key
    configure()          -> copy of the whole config as a dict
    """

    def _field_names(self):
        return {f.name for f in fields(self)}

    def _apply(self, values: Mapping[str, Any]) -> None:
        # replace() runs __post_init__, so a rejected value never reaches self
        candidate = replace(self, **values)
        for key in values:
            setattr(self, key, getattr(candidate, key))

    def configure(
        self,
        name_or_values: Union[None, str, Mapping[str, Any]] = None,
        value: Any = None,
        **kwargs,
    ) -> Any:
        if isinstance(name_or_values, Mapping) or kwargs:
            values = dict(name_or_values or {})
            values.update(kwargs)
            unknown = set(values) - self._field_names()
            if unknown:
                raise KeyError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
            self._apply(values)
            return None

        if isinstance(name_or_values, str):
            if name_or_values not in self._field_names():
                raise KeyError(f"Unknown configuration key: {name_or_values}")
            if value is None:
                return getattr(self, name_or_values)
            self._apply({name_or_values: value})
            return None

        return deepcopy(asdict(self))

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        pass


@dataclass
class PoolConfig(_ConfigurableMixin):
    """Options for the image pool registry."""

    flush_on_transition: bool = field(
        default_factory=lambda: parse_bool_string(
            os.getenv("IMGPOOL_FLUSH_ON_TRANSITION"), True
        )
    )
    id_prefix: str = field(default_factory=lambda: os.getenv("IMGPOOL_ID_PREFIX", "pool"))
    default_pool_name: str = field(
        default_factory=lambda: os.getenv("IMGPOOL_DEFAULT_POOL_NAME", "default")
    )

    def validate(self) -> None:
        if not isinstance(self.id_prefix, str) or not self.id_prefix:
            raise ValueError("id_prefix must be a non-empty string")
        if not isinstance(self.default_pool_name, str) or not self.default_pool_name:
            raise ValueError("default_pool_name must be a non-empty string")


@dataclass
class LoaderConfig(_ConfigurableMixin):
    """Options for the image loader."""

    request_limit: int = field(
        default_factory=lambda: int(os.getenv("IMGPOOL_REQUEST_LIMIT", "2"))
    )
    http_timeout: float = field(
        default_factory=lambda: float(os.getenv("IMGPOOL_HTTP_TIMEOUT", "30.0"))
    )

    def validate(self) -> None:
        # bool is an int subclass but never a meaningful limit
        if (
            not isinstance(self.request_limit, int)
            or isinstance(self.request_limit, bool)
            or self.request_limit <= 0
        ):
            raise ValueError(
                f"request_limit must be a positive integer, got {self.request_limit!r}"
            )
        if self.http_timeout is not None and self.http_timeout <= 0:
            raise ValueError(f"http_timeout must be positive, got {self.http_timeout!r}")


@dataclass
class LoggerConfig:
    PoolLevel: str = field(default_factory=lambda: os.getenv("LOG_POOL_LEVEL", "INFO"))
    LoaderLevel: str = field(default_factory=lambda: os.getenv("LOG_LOADER_LEVEL", "INFO"))
    FetcherLevel: str = field(default_factory=lambda: os.getenv("LOG_FETCHER_LEVEL", "INFO"))
    BindingLevel: str = field(default_factory=lambda: os.getenv("LOG_BINDING_LEVEL", "INFO"))
    LogFile: Optional[str] = field(default_factory=lambda: os.getenv("LOG_FILE"))


@dataclass
class AppConfig:
    LoggerConfiguration: LoggerConfig = field(default_factory=LoggerConfig)
    PoolConfiguration: PoolConfig = field(default_factory=PoolConfig)
    LoaderConfiguration: LoaderConfig = field(default_factory=LoaderConfig)


def load_configuration(dotenv_path: Optional[str] = None) -> AppConfig:
    """
    Rebuild the module-level configuration.

    Args:
        dotenv_path: Optional env file loaded (with override) before reading
            the environment.

    Returns:
        The new AppConfig, also stored as ``appConfiguration``.
    """
    global appConfiguration
    if dotenv_path:
        load_dotenv(dotenv_path=dotenv_path, override=True)
    appConfiguration = AppConfig()
    appConfiguration.PoolConfiguration.validate()
    appConfiguration.LoaderConfiguration.validate()
    return appConfiguration


appConfiguration: AppConfig = AppConfig()
