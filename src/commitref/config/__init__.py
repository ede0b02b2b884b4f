"""commitref configuration.

This module provides loading, validation, and typed access to commitref
settings.

Example:
    >>> from commitref.config import Settings
    >>> settings = Settings.load()
    >>> settings.history.page_size
    30
"""

from commitref.exceptions import ConfigError, ConfigLoadError

from ._defaults import CONFIG_FILENAME, DEFAULT_CONFIG, ENV_PREFIX
from ._load import safe_load_settings
from ._loader import (
    deep_merge,
    parse_env_vars,
    read_toml_file,
    set_nested_key,
)
from ._models import (
    HashAlgorithm,
    HistoryConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    ObjectIdConfig,
    Settings,
)

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
    "ENV_PREFIX",
    "ConfigError",
    "ConfigLoadError",
    "HashAlgorithm",
    "HistoryConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "ObjectIdConfig",
    "Settings",
    "deep_merge",
    "parse_env_vars",
    "read_toml_file",
    "safe_load_settings",
    "set_nested_key",
]
