"""commitref exceptions."""

from pathlib import Path


class CommitRefError(Exception):
    """Base exception for commitref errors."""


# =============================================================================
# Reference Exceptions
# =============================================================================


class InvalidReferenceError(CommitRefError, ValueError):
    """Raised when a reference string is structurally unsafe or empty.

    The reference never reaches the object store. Callers map this to a
    client-input error.

    Attributes:
        reference: The rejected reference string.
        reason: Short machine-readable explanation.
    """

    def __init__(self, message: str, *, reference: str, reason: str = "") -> None:
        """Initialize with error message and reference context.

        Args:
            message: Human-readable error message.
            reference: The rejected reference string.
            reason: Short machine-readable explanation.
        """
        super().__init__(message)
        self.reference: str = reference
        self.reason: str = reason


class ReferenceNotFoundError(CommitRefError, KeyError):
    """Raised when a well-formed reference does not match exactly one commit.

    Covers missing object ids, unknown branch and tag names, ambiguous
    abbreviations, and references whose target is not a commit.

    Attributes:
        reference: The reference string that could not be resolved.
        reason: Short machine-readable explanation.
    """

    def __init__(self, message: str, *, reference: str, reason: str = "") -> None:
        """Initialize with error message and reference context.

        Args:
            message: Human-readable error message.
            reference: The reference string that could not be resolved.
            reason: Short machine-readable explanation.
        """
        super().__init__(message)
        self.reference: str = reference
        self.reason: str = reason

    def __str__(self) -> str:
        # KeyError.__str__ wraps the message in quotes
        return str(self.args[0]) if self.args else ""


class InvalidPageError(CommitRefError, ValueError):
    """Raised when a page window request is out of range.

    Attributes:
        page: The requested page number.
        limit: The requested page size, if one was given.
    """

    def __init__(self, message: str, *, page: int, limit: int | None = None) -> None:
        """Initialize with error message and page context."""
        super().__init__(message)
        self.page: int = page
        self.limit: int | None = limit


# =============================================================================
# Store Exceptions
# =============================================================================


class StoreUnavailableError(CommitRefError):
    """Raised when the underlying object store cannot be read.

    Attributes:
        path: The repository path, if known.
        object_id: The object being read when the failure occurred, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        object_id: str | None = None,
    ) -> None:
        """Initialize with error message and store context.

        Args:
            message: Human-readable error message.
            path: The repository path, if known.
            object_id: The object being read when the failure occurred.
        """
        super().__init__(message)
        self.path: Path | None = path
        self.object_id: str | None = object_id


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(CommitRefError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column
