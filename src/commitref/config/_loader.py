# pyright: reportAny=false, reportExplicitAny=false
"""Configuration sources: TOML files and environment variables.

Both sources produce plain nested dictionaries. Values are left as the
source delivers them; the settings models coerce and validate on load.
"""

import copy
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from commitref.config._defaults import ENV_PREFIX
from commitref.exceptions import ConfigLoadError

# Separates the section from the key in an environment variable name.
_SECTION_SEPARATOR = "__"


def read_toml_file(path: Path) -> dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file is not valid TOML.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Failed to parse TOML file: {e}"
        raise ConfigLoadError(
            msg,
            path=path,
            line=getattr(e, "lineno", None),
            column=getattr(e, "colno", None),
        ) from e


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge override over base into a new dictionary.

    Tables present on both sides merge key by key; any other override value
    replaces the base value outright. Neither input is modified.
    """
    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def set_nested_key(d: dict[str, Any], key_path: str, value: Any) -> None:
    """Set a value at a dotted key path, creating tables along the way.

    Example:
        >>> d = {}
        >>> set_nested_key(d, "history.page_size", "10")
        >>> d
        {'history': {'page_size': '10'}}
    """
    *tables, leaf = key_path.split(".")
    for name in tables:
        child = d.get(name)
        if not isinstance(child, dict):
            child = d[name] = {}
        d = child
    d[leaf] = value


def parse_env_vars(
    prefix: str = ENV_PREFIX,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Collect ``<PREFIX><SECTION>__<KEY>`` variables into nested tables.

    ``COMMITREF_HISTORY__PAGE_SIZE=10`` becomes
    ``{"history": {"page_size": "10"}}``. Values stay strings. Variables
    without a section separator (``COMMITREF_DEBUG``, ``COMMITREF_LOG_LEVEL``)
    are read by the logging utilities and skipped here.

    Args:
        prefix: Variable name prefix.
        environ: Mapping to read instead of ``os.environ``.
    """
    source = os.environ if environ is None else environ
    result: dict[str, Any] = {}

    for name, value in source.items():
        if not name.startswith(prefix):
            continue
        key = name.removeprefix(prefix)
        if _SECTION_SEPARATOR in key:
            set_nested_key(result, key.replace(_SECTION_SEPARATOR, ".").lower(), value)

    return result
