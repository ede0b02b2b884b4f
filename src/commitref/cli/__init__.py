"""Command-line interface for commitref."""

from ._app import create_app, main
from ._context import CLIContext, OutputFormat
from ._shared import ExitCode, exit_code_for

__all__ = ["CLIContext", "ExitCode", "OutputFormat", "create_app", "exit_code_for", "main"]
