"""Utilities shared across commitref modules."""

from ._common import decode_bytes, short_sha
from ._logging import LogFormatType, create_logger, get_default_logger

__all__ = [
    "LogFormatType",
    "create_logger",
    "decode_bytes",
    "get_default_logger",
    "short_sha",
]
