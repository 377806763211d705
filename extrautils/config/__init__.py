from .config import (
    CONFIG_FILE_ENV,
    DEFAULTS,
    ENV_PREFIX,
    Config,
    get_default_config,
)
from .schemas import (
    ExtraUtilsConfig,
    InjectConfig,
    LoggingConfig,
    WatchConfig,
    validate_config,
)

__all__ = [
    "Config",
    "get_default_config",
    "DEFAULTS",
    "ENV_PREFIX",
    "CONFIG_FILE_ENV",
    "ExtraUtilsConfig",
    "LoggingConfig",
    "WatchConfig",
    "InjectConfig",
    "validate_config",
]
