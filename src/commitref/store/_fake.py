# ruff: noqa: TC003  # datetime needed at runtime for method signatures
"""Fake object store for testing.

This module provides a FakeStore class that implements ObjectStoreProtocol
in memory, without requiring a Git repository.
"""

import hashlib
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import TracebackType
from typing import Self

from commitref.objectid import BRANCH_PREFIX, SHA1_HEX_LENGTH, TAG_PREFIX
from commitref.store._models import Commit, ObjectKind, Signature, StoredObject


def fake_object_id(seed: str) -> str:
    """Derive a deterministic full-length object id from a seed string."""
    return hashlib.sha1(seed.encode("utf-8")).hexdigest()  # noqa: S324


@dataclass(slots=True)
class FakeStore:
    """In-memory object store for testing.

    Implements ObjectStoreProtocol. Objects, branches, and tags are plain
    dictionaries that tests populate directly or through the helper methods.
    Every protocol call is appended to ``calls`` so tests can assert that an
    operation never touched the store.

    Example:
        >>> store = FakeStore()
        >>> root = store.add_commit("initial", timestamp=100)
        >>> child = store.add_commit("second", parents=[root.sha], timestamp=200)
        >>> store.set_branch("main", child.sha)
        >>> store.resolve_branch("main") == child.sha
        True
    """

    objects: dict[str, StoredObject] = field(default_factory=dict)
    branches: dict[str, str] = field(default_factory=dict)
    tags: dict[str, str] = field(default_factory=dict)
    head: str | None = "main"
    calls: list[tuple[str, str]] = field(default_factory=list)
    _hex_length: int = field(default=SHA1_HEX_LENGTH)

    # =========================================================================
    # Context Manager Protocol
    # =========================================================================

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    # =========================================================================
    # ObjectStoreProtocol Methods
    # =========================================================================

    @property
    def hex_length(self) -> int:
        return self._hex_length

    def close(self) -> None:
        """Close the store (no-op for fake)."""

    def lookup_object(self, object_id: str) -> StoredObject | None:
        self.calls.append(("lookup_object", object_id))
        return self.objects.get(object_id.lower())

    def iter_object_ids(self, prefix: str) -> Iterator[str]:
        self.calls.append(("iter_object_ids", prefix))
        for object_id in sorted(self.objects):
            if object_id.startswith(prefix.lower()):
                yield object_id

    def resolve_branch(self, name: str) -> str | None:
        self.calls.append(("resolve_branch", name))
        if name.startswith("refs/"):
            if not name.startswith(BRANCH_PREFIX):
                return None
            name = name.removeprefix(BRANCH_PREFIX)
        return self.branches.get(name)

    def resolve_tag(self, name: str) -> str | None:
        self.calls.append(("resolve_tag", name))
        if name.startswith("refs/"):
            if not name.startswith(TAG_PREFIX):
                return None
            name = name.removeprefix(TAG_PREFIX)
        return self.tags.get(name)

    def default_branch(self) -> str | None:
        self.calls.append(("default_branch", ""))
        return self.head

    # =========================================================================
    # Test Helpers
    # =========================================================================

    def add_commit(
        self,
        message: str,
        *,
        parents: Sequence[str] = (),
        timestamp: int = 0,
        sha: str | None = None,
        author: str = "Test User",
        email: str = "test@example.com",
    ) -> Commit:
        """Add a commit to the store.

        Args:
            message: Commit message. Also seeds the generated id.
            parents: Parent ids in order.
            timestamp: Unix timestamp used for author and committer.
            sha: Explicit object id. Generated from the message and parents
                when omitted.
            author: Author and committer name.
            email: Author and committer email.

        Returns:
            The stored Commit.
        """
        object_id = sha or fake_object_id(f"commit\0{message}\0{','.join(parents)}")
        signature = Signature(
            name=author,
            email=email,
            timestamp=datetime.fromtimestamp(timestamp, tz=UTC),
        )
        commit = Commit(
            sha=object_id,
            tree_sha=fake_object_id(f"tree\0{object_id}"),
            parent_shas=tuple(parents),
            author=signature,
            committer=signature,
            message=message,
        )
        self.objects[object_id] = StoredObject(
            object_id=object_id, kind=ObjectKind.COMMIT, commit=commit
        )
        return commit

    def add_blob(self, content: str) -> str:
        """Add a blob and return its id."""
        object_id = fake_object_id(f"blob\0{content}")
        self.objects[object_id] = StoredObject(object_id=object_id, kind=ObjectKind.BLOB)
        return object_id

    def add_annotated_tag(self, name: str, target_id: str) -> str:
        """Add an annotated tag object and point the tag ref at it.

        Args:
            name: Tag name.
            target_id: Id of the tagged object (commit, tag, or other).

        Returns:
            The id of the tag object.
        """
        object_id = fake_object_id(f"tag\0{name}\0{target_id}")
        self.objects[object_id] = StoredObject(
            object_id=object_id, kind=ObjectKind.TAG, target_id=target_id
        )
        self.tags[name] = object_id
        return object_id

    def set_branch(self, name: str, object_id: str) -> None:
        """Point a branch at an object id."""
        self.branches[name] = object_id

    def set_tag(self, name: str, object_id: str) -> None:
        """Point a lightweight tag at an object id."""
        self.tags[name] = object_id

    def reset_calls(self) -> None:
        """Forget recorded protocol calls."""
        self.calls.clear()
