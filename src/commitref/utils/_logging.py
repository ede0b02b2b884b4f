"""Logging utilities for commitref.

This module provides standalone structlog logger factories that write
JSON-formatted or text-formatted logs to a file or to stderr. Each logger is
self-contained and does not modify global structlog configuration.
"""

import logging
import sys
from functools import cache
from logging.handlers import RotatingFileHandler
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LogFormatType = Literal["json", "text"]

# Library default: quiet unless the environment asks for more.
_DEFAULT_LIBRARY_LEVEL = "warning"


def _log_level_from_string(level: str, *, respect_env: bool = False) -> int:
    """Convert a log level string to a logging level integer.

    Args:
        level: Log level string (debug, info, warning, error).
        respect_env: If True, COMMITREF_DEBUG overrides to DEBUG level.

    Returns:
        The logging level as an integer.
    """
    if respect_env and getenv("COMMITREF_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.INFO)


def _get_log_level(default: str = "info") -> int:
    """Get the log level from environment variables.

    Checks COMMITREF_DEBUG first (sets DEBUG if present), then
    COMMITREF_LOG_LEVEL, then falls back to ``default``.
    """
    if getenv("COMMITREF_DEBUG", None):
        return logging.DEBUG
    return _log_level_from_string(getenv("COMMITREF_LOG_LEVEL", default))


def create_logger(
    *,
    level: str | None = None,
    log_format: LogFormatType = "json",
    log_file: str = "",
    max_bytes: int | None = None,
    backup_count: int | None = None,
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a standalone structlog logger.

    The log level is determined by (in order of precedence):
    1. COMMITREF_DEBUG environment variable (if set, enables DEBUG level)
    2. The `level` parameter (if provided)
    3. COMMITREF_LOG_LEVEL environment variable
    4. Default: INFO

    Args:
        level: Log level threshold (debug, info, warning, error).
        log_format: Output format, either "json" or "text".
        log_file: Path to the log file. Empty writes to stderr.
        max_bytes: Maximum size in bytes before rotation. Must be set with
            backup_count (and a log_file) for rotation to be enabled.
        backup_count: Number of rotated log files to keep.

    Returns:
        A configured FilteringBoundLogger instance.
    """
    effective_level = (
        _log_level_from_string(level, respect_env=True)
        if level is not None
        else _get_log_level()
    )

    stdlib_logger: logging.Logger | None = None
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        if max_bytes is not None and backup_count is not None:
            stdlib_logger = logging.getLogger(f"commitref.{log_path.stem}.{id(log_path)}")
            stdlib_logger.handlers.clear()
            stdlib_logger.propagate = False
            stdlib_logger.setLevel(effective_level)

            handler = RotatingFileHandler(
                log_path,
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
            handler.setLevel(effective_level)
            handler.setFormatter(logging.Formatter("%(message)s"))
            stdlib_logger.addHandler(handler)
            logger_factory = structlog.stdlib.LoggerFactory()
        else:
            logger_factory = structlog.WriteLoggerFactory(file=log_path.open("a"))
    else:
        logger_factory = structlog.WriteLoggerFactory(file=sys.stderr)

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    wrapper_class = structlog.make_filtering_bound_logger(effective_level)
    raw_logger = stdlib_logger if stdlib_logger is not None else logger_factory()

    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            raw_logger,
            processors=processors,
            wrapper_class=wrapper_class,
            context_class=dict,
        ),
    )


@cache
def get_default_logger() -> "FilteringBoundLogger":  # noqa: UP037
    """Return the shared stderr logger used when callers pass none.

    Level comes from COMMITREF_DEBUG / COMMITREF_LOG_LEVEL and defaults to
    warning, so library use stays silent unless asked.
    """
    return create_logger(
        level=getenv("COMMITREF_LOG_LEVEL", _DEFAULT_LIBRARY_LEVEL),
        log_format="text",
    )
