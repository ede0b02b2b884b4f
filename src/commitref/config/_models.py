# pyright: reportExplicitAny=false, reportAny=false
"""Configuration models.

This module provides the Pydantic models for commitref settings and the
Settings container that loads them from defaults, TOML, and environment.
"""

from collections.abc import Mapping
from enum import StrEnum
from pathlib import Path
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from commitref.config._defaults import CONFIG_FILENAME, DEFAULT_CONFIG, ENV_PREFIX
from commitref.config._loader import deep_merge, parse_env_vars, read_toml_file
from commitref.exceptions import ConfigError
from commitref.objectid import MIN_ABBREV_LENGTH, SHA1_HEX_LENGTH, SHA256_HEX_LENGTH


class LogLevel(StrEnum):
    """Log level threshold values."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class HashAlgorithm(StrEnum):
    """Object id hash algorithms."""

    SHA1 = "sha1"
    SHA256 = "sha256"


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty logs to stderr).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.WARNING
    format: LogFormat = LogFormat.JSON
    file: str = ""


class HistoryConfig(BaseModel):
    """History pagination settings.

    Attributes:
        page_size: Commits per page when the caller gives no limit.
        max_page_size: Upper bound for a caller-supplied limit.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    page_size: int = Field(default=30, ge=1)
    max_page_size: int = Field(default=50, ge=1)

    @model_validator(mode="after")
    def _check_page_bounds(self) -> Self:
        if self.page_size > self.max_page_size:
            msg = (
                f"page_size ({self.page_size}) must not exceed "
                f"max_page_size ({self.max_page_size})"
            )
            raise ValueError(msg)
        return self


class ObjectIdConfig(BaseModel):
    """Object id recognition settings.

    Attributes:
        hash_algorithm: Repository hash; fixes the full id length.
        min_abbrev_length: Shortest hex string accepted as an abbreviation.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    hash_algorithm: HashAlgorithm = HashAlgorithm.SHA1
    min_abbrev_length: int = Field(default=MIN_ABBREV_LENGTH, ge=MIN_ABBREV_LENGTH)

    @property
    def hex_length(self) -> int:
        """Length of a full object id in hex digits."""
        if self.hash_algorithm is HashAlgorithm.SHA256:
            return SHA256_HEX_LENGTH
        return SHA1_HEX_LENGTH

    @model_validator(mode="after")
    def _check_abbrev_length(self) -> Self:
        if self.min_abbrev_length >= self.hex_length:
            msg = (
                f"min_abbrev_length ({self.min_abbrev_length}) must be shorter "
                f"than a full object id ({self.hex_length})"
            )
            raise ValueError(msg)
        return self


class Settings(BaseModel):
    """Settings container with typed access.

    Use the factory methods rather than the constructor so that defaults,
    files, and environment variables are merged consistently.

    Example:
        >>> settings = Settings.from_dict({"history": {"page_size": 10}})
        >>> settings.history.page_size
        10
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    history: HistoryConfig = Field(default_factory=HistoryConfig)
    objectid: ObjectIdConfig = Field(default_factory=ObjectIdConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Build settings from a dictionary merged over the defaults.

        Args:
            data: Partial configuration; missing keys take default values.

        Returns:
            Validated settings.

        Raises:
            ConfigError: If any value fails validation.
        """
        merged = deep_merge(DEFAULT_CONFIG, dict(data))
        try:
            return cls.model_validate(merged)
        except ValidationError as e:
            msg = f"Invalid configuration: {e}"
            raise ConfigError(msg) from e

    @classmethod
    def from_file(cls, path: Path, *, include_env: bool = False) -> Self:
        """Load settings from a TOML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigError: If any value fails validation.
        """
        data = read_toml_file(path)
        if include_env:
            data = deep_merge(data, parse_env_vars(ENV_PREFIX))
        return cls.from_dict(data)

    @classmethod
    def load(
        cls,
        config_path: Path | None = None,
        *,
        search_dir: Path | None = None,
        include_env: bool = True,
        environ: Mapping[str, str] | None = None,
    ) -> Self:
        """Load settings from defaults, a TOML file, and the environment.

        Precedence, lowest first: built-in defaults, the TOML file, then
        ``COMMITREF_SECTION__KEY`` environment variables.

        Args:
            config_path: Explicit TOML file. When None, ``commitref.toml`` in
                ``search_dir`` (or the current directory) is used if present.
            search_dir: Directory searched for ``commitref.toml``.
            include_env: Whether to apply environment variable overrides.
            environ: Mapping to read instead of ``os.environ``.

        Returns:
            Validated settings.

        Raises:
            FileNotFoundError: If an explicit config_path does not exist.
            ConfigLoadError: If the TOML file cannot be parsed.
            ConfigError: If any value fails validation.
        """
        data: dict[str, Any] = {}
        if config_path is not None:
            data = read_toml_file(config_path)
        else:
            candidate = (search_dir or Path.cwd()) / CONFIG_FILENAME
            if candidate.is_file():
                data = read_toml_file(candidate)

        if include_env:
            data = deep_merge(data, parse_env_vars(ENV_PREFIX, environ))

        return cls.from_dict(data)
