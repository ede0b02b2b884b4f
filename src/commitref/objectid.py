"""Object id and reference name classification.

Every reference string is classified here before the object store is
touched. Classification is pure: no repository access, no I/O.

Ref-name validity follows git-check-ref-format, as implemented by
``dulwich.refs.check_ref_format``, plus the single-level rules git applies
to branch names (no leading ``-``, no lone ``@``, no empty components).
A string that survives these rules cannot act as a relative path token.
"""

import string
from enum import StrEnum
from typing import Final

from dulwich.refs import check_ref_format

from commitref.exceptions import InvalidReferenceError

SHA1_HEX_LENGTH: Final = 40
SHA256_HEX_LENGTH: Final = 64
MIN_ABBREV_LENGTH: Final = 4

BRANCH_PREFIX: Final = "refs/heads/"
TAG_PREFIX: Final = "refs/tags/"

_HEX_DIGITS: Final = frozenset(string.hexdigits)


class ReferenceKind(StrEnum):
    """Classification of a caller-supplied reference string."""

    FULL_OBJECT_ID = "full_object_id"
    ABBREVIATED_OBJECT_ID = "abbreviated_object_id"
    SYMBOLIC_NAME = "symbolic_name"
    MALFORMED = "malformed"


def is_hex(value: str) -> bool:
    """Check whether a non-empty string consists only of hex digits.

    Args:
        value: The string to check.

    Returns:
        True if every character is a hex digit (either case).
    """
    return bool(value) and all(c in _HEX_DIGITS for c in value)


def is_full_object_id(value: str, *, hex_length: int = SHA1_HEX_LENGTH) -> bool:
    """Check whether a string is a full-length object id."""
    return len(value) == hex_length and is_hex(value)


def is_object_id_like(
    value: str,
    *,
    hex_length: int = SHA1_HEX_LENGTH,
    min_abbrev_length: int = MIN_ABBREV_LENGTH,
) -> bool:
    """Check whether a string is a full or abbreviated object id.

    Args:
        value: The string to check.
        hex_length: Length of a full object id for the repository's hash.
        min_abbrev_length: Shortest accepted abbreviation.

    Returns:
        True if the string is all hex and its length is within
        ``[min_abbrev_length, hex_length]``.
    """
    return min_abbrev_length <= len(value) <= hex_length and is_hex(value)


def malformed_reason(ref: str) -> str | None:
    """Explain why a string cannot be used as a reference name.

    Args:
        ref: The reference string.

    Returns:
        A short reason if the string is malformed, None if it is an
        acceptable symbolic name.
    """
    if not ref:
        return "empty"
    if any(c.isspace() for c in ref):
        return "whitespace"
    if ref in {".", ".."}:
        return "relative-path"
    if ref == "@":
        return "lone-at"
    if ref.startswith(("/", "-")):
        return "leading-character"
    if "//" in ref:
        return "empty-component"

    full_name = ref if ref.startswith("refs/") else BRANCH_PREFIX + ref
    try:
        encoded = full_name.encode("utf-8")
    except UnicodeEncodeError:
        return "encoding"
    if not check_ref_format(encoded):
        return "invalid-ref-format"
    return None


def classify(
    ref: str,
    *,
    hex_length: int = SHA1_HEX_LENGTH,
    min_abbrev_length: int = MIN_ABBREV_LENGTH,
) -> ReferenceKind:
    """Classify a reference string.

    Args:
        ref: Caller-supplied reference (branch, tag, short or full id).
        hex_length: Length of a full object id for the repository's hash.
        min_abbrev_length: Shortest hex string treated as an abbreviation.
            Shorter hex strings are treated as symbolic names.

    Returns:
        The reference kind. Hex strings are checked before name rules, so
        ``"65f1"`` is an abbreviation and ``"master"`` is a symbolic name.

    Example:
        >>> classify("65f1bf27bc3bf70f64657658635e66094edbcb4d")
        <ReferenceKind.FULL_OBJECT_ID: 'full_object_id'>
        >>> classify("..")
        <ReferenceKind.MALFORMED: 'malformed'>
    """
    if is_hex(ref):
        if len(ref) == hex_length:
            return ReferenceKind.FULL_OBJECT_ID
        if min_abbrev_length <= len(ref) < hex_length:
            return ReferenceKind.ABBREVIATED_OBJECT_ID
    if malformed_reason(ref) is not None:
        return ReferenceKind.MALFORMED
    return ReferenceKind.SYMBOLIC_NAME


def validate_reference(
    ref: str,
    *,
    hex_length: int = SHA1_HEX_LENGTH,
    min_abbrev_length: int = MIN_ABBREV_LENGTH,
) -> ReferenceKind:
    """Classify a reference, rejecting malformed input.

    Args:
        ref: Caller-supplied reference.
        hex_length: Length of a full object id for the repository's hash.
        min_abbrev_length: Shortest hex string treated as an abbreviation.

    Returns:
        The reference kind, never ``MALFORMED``.

    Raises:
        InvalidReferenceError: If the reference is malformed.
    """
    kind = classify(ref, hex_length=hex_length, min_abbrev_length=min_abbrev_length)
    if kind is ReferenceKind.MALFORMED:
        reason = malformed_reason(ref) or "malformed"
        msg = f"Invalid reference: {ref!r}"
        raise InvalidReferenceError(msg, reference=ref, reason=reason)
    return kind
