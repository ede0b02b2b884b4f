"""Default configuration values.

DEFAULT_CONFIG is a plain dict so it can be passed straight to deep_merge,
which copies its inputs.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "history": {
        "page_size": 30,
        "max_page_size": 50,
    },
    "objectid": {
        "hash_algorithm": "sha1",
        "min_abbrev_length": 4,
    },
    "logging": {
        "level": "warning",
        "format": "json",
        "file": "",
    },
}

CONFIG_FILENAME = "commitref.toml"
ENV_PREFIX = "COMMITREF_"
