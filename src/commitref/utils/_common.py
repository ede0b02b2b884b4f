"""Common helper functions."""


def decode_bytes(value: bytes | str) -> str:
    """Decode bytes to str if needed.

    Args:
        value: A bytes or str value.

    Returns:
        The value as a string.
    """
    if isinstance(value, bytes):
        return value.decode()
    return value


def short_sha(sha: str, length: int = 8) -> str:
    """Shorten an object id for display."""
    return sha[:length]
