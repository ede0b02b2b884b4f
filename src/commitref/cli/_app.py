"""The command-line interface for commitref."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from commitref.config import LogLevel, safe_load_settings
from commitref.utils import create_logger

from ._commands import register_commands
from ._context import CLIContext

_HELP = "Resolve git references to commits and page through history."


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="commitref",
        help=_HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        verbose: Annotated[
            bool, Parameter(help="Log resolution and paging decisions")
        ] = False,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
    ) -> None:
        """Launch commitref with global options.

        Args:
            tokens: Command tokens to pass to subcommands.
            verbose: Enable debug logging.
            config: Explicit path to config file.
        """
        settings, config_error = safe_load_settings(config_path=config)

        level = LogLevel.DEBUG if verbose else settings.logging.level
        logger = create_logger(
            level=level.value,
            log_format=settings.logging.format.value,  # type: ignore[arg-type]
            log_file=settings.logging.file,
        )
        if config_error is not None:
            logger.warning("config_fallback", error=config_error)

        CLIContext.set_current(
            CLIContext(settings=settings, config_error=config_error, logger=logger)
        )
        try:
            app(tokens)
        finally:
            CLIContext.reset()

    register_commands(app)
    return app


def main() -> None:
    """Default entrypoint for the `commitref` CLI."""
    app = create_app()
    app.meta()


if __name__ == "__main__":
    main()
