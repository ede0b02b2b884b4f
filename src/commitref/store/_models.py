# ruff: noqa: TC003  # datetime needed at runtime for dataclass fields
"""Object store models.

This module defines the immutable records the object store hands back to
the resolver and the history paginator.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any


class ObjectKind(StrEnum):
    """Git object types."""

    COMMIT = "commit"
    TREE = "tree"
    BLOB = "blob"
    TAG = "tag"


@dataclass(frozen=True, slots=True)
class Signature:
    """Author or committer identity with a timestamp.

    Attributes:
        name: Identity name.
        email: Identity email (empty if the line had none).
        timestamp: When the signature was made, timezone-aware.
    """

    name: str
    email: str
    timestamp: datetime


@dataclass(frozen=True, slots=True)
class Commit:
    """A resolved commit.

    Attributes:
        sha: Full-length lowercase commit id hex string.
        tree_sha: Id of the commit's root tree.
        parent_shas: Parent ids in recorded order (empty tuple for root commits).
        author: Author signature.
        committer: Committer signature.
        message: Complete commit message (subject + body).
    """

    sha: str
    tree_sha: str
    parent_shas: tuple[str, ...]
    author: Signature
    committer: Signature
    message: str

    @property
    def timestamp(self) -> datetime:
        """Committer timestamp, used for history ordering."""
        return self.committer.timestamp

    @property
    def subject(self) -> str:
        """First line of the commit message."""
        return self.message.splitlines()[0] if self.message else ""

    @property
    def is_merge(self) -> bool:
        """True if the commit has more than one parent."""
        return len(self.parent_shas) > 1


@dataclass(frozen=True, slots=True)
class StoredObject:
    """An object as returned by an object store lookup.

    Attributes:
        object_id: Full-length object id hex string.
        kind: The object type.
        commit: The commit record, set only when kind is COMMIT.
        target_id: Id of the tagged object, set only when kind is TAG.
    """

    object_id: str
    kind: ObjectKind
    commit: Commit | None = None
    target_id: str | None = None


@dataclass(frozen=True, slots=True)
class CommitPage:
    """One page of commit history.

    Attributes:
        commits: Commits on this page, newest first in traversal order.
        page: 1-based page number.
        page_size: Maximum number of commits per page.
        has_more: True if at least one commit follows this page.
    """

    commits: tuple[Commit, ...]
    page: int
    page_size: int
    has_more: bool

    def __len__(self) -> int:
        return len(self.commits)

    @property
    def is_empty(self) -> bool:
        """True if the page holds no commits."""
        return not self.commits


def _signature_to_dict(signature: Signature) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    return {
        "name": signature.name,
        "email": signature.email,
        "date": signature.timestamp.isoformat(),
    }


def commit_to_dict(commit: Commit) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Convert a commit to a plain dictionary for upstream encoders.

    Args:
        commit: The commit to convert.

    Returns:
        Dictionary with the full sha, tree sha, parent shas, signatures,
        message, and ISO-8601 timestamp.
    """
    return {
        "sha": commit.sha,
        "tree": {"sha": commit.tree_sha},
        "parents": [{"sha": sha} for sha in commit.parent_shas],
        "author": _signature_to_dict(commit.author),
        "committer": _signature_to_dict(commit.committer),
        "message": commit.message,
        "timestamp": commit.timestamp.isoformat(),
    }
