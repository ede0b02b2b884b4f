# pyright: reportExplicitAny=false
"""Shared CLI utilities for commands.

This module provides common utilities used across CLI command implementations:
- Standardized exit codes
- JSON output formatting
- Mapping of resolution errors to exit codes
"""

from enum import IntEnum
from typing import TYPE_CHECKING, Any, Never

from rich.markup import escape

from commitref.exceptions import (
    CommitRefError,
    ConfigError,
    InvalidPageError,
    InvalidReferenceError,
    ReferenceNotFoundError,
    StoreUnavailableError,
)

if TYPE_CHECKING:
    from rich.console import Console

# Type alias for formattable data - uses Any to match library signatures
FormattableData = dict[str, Any] | list[Any]

__all__ = [
    "ExitCode",
    "FormattableData",
    "exit_code_for",
    "exit_with_error",
    "format_json",
    "get_error_console",
]


class ExitCode(IntEnum):
    """Standard exit codes for commitref CLI commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    VALIDATION_ERROR = 2
    NOT_FOUND = 3
    IO_ERROR = 4
    INTERNAL_ERROR = 5


def exit_code_for(error: CommitRefError) -> ExitCode:
    """Map a commitref error to its CLI exit code.

    Invalid input maps to VALIDATION_ERROR, unresolved references to
    NOT_FOUND, and unreadable stores to IO_ERROR.
    """
    if isinstance(error, InvalidReferenceError | InvalidPageError):
        return ExitCode.VALIDATION_ERROR
    if isinstance(error, ReferenceNotFoundError):
        return ExitCode.NOT_FOUND
    if isinstance(error, StoreUnavailableError):
        return ExitCode.IO_ERROR
    if isinstance(error, ConfigError):
        return ExitCode.LOAD_ERROR
    return ExitCode.INTERNAL_ERROR


def format_json(data: FormattableData, *, indent: bool = True) -> str:
    """Format data as JSON.

    Args:
        data: Dictionary or list to format as JSON.
        indent: Whether to pretty-print with indentation.

    Returns:
        JSON-formatted string representation.
    """
    import orjson

    options = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(data, option=options).decode("utf-8")


def get_error_console() -> "Console":
    """Get a Rich console configured for error output to stderr."""
    from rich.console import Console

    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.INTERNAL_ERROR,
    *,
    console: "Console | None" = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = get_error_console()

    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
    raise SystemExit(code)
