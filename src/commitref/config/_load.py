import os
import sys
from pathlib import Path

from commitref.exceptions import ConfigError

from ._models import Settings


def safe_load_settings(
    *,
    config_path: Path | None = None,
    search_dir: Path | None = None,
) -> tuple[Settings, str | None]:
    """Load settings with error handling.

    Attempts to load settings and handles errors based on the
    COMMITREF_STRICT_CONFIG environment variable:
    - If unset or "0": warn to stderr and return default settings
    - If "1": fail fast with sys.exit(1)

    When config_path is provided, the file must exist (explicit user request).

    Args:
        config_path: Explicit path to config file (--config flag).
        search_dir: Directory searched for commitref.toml.

    Returns:
        Tuple of (Settings, error_message). On success, error_message is None.
        On failure (non-strict mode), returns default settings with the error.
    """
    strict_mode = os.environ.get("COMMITREF_STRICT_CONFIG", "0") == "1"

    if config_path is not None and not config_path.exists():
        print(f"Error: Config file not found: {config_path}", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    try:
        settings = Settings.load(config_path, search_dir=search_dir)
    except (ConfigError, OSError) as e:
        error_msg = f"Failed to load config: {e}"
        if strict_mode:
            print(f"Error: {error_msg}", file=sys.stderr)  # noqa: T201
            sys.exit(1)
        print(f"Warning: {error_msg}", file=sys.stderr)  # noqa: T201
        return Settings.from_dict({}), error_msg
    else:
        return settings, None
