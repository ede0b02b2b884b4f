"""commitref object stores.

This package provides the read interface the resolver and history
paginator depend on, plus two implementations.

Classes:
    ObjectStoreProtocol: Runtime-checkable protocol for dependency injection.
    DulwichStore: Store over an on-disk or in-memory dulwich repository.
    FakeStore: In-memory store for tests.

Models:
    Commit: A resolved commit.
    Signature: Author or committer identity with timestamp.
    StoredObject: Result of an object lookup.
    ObjectKind: Git object type.
    CommitPage: One page of commit history.

Example:
    >>> from commitref.store import DulwichStore
    >>> with DulwichStore("/srv/git/project.git") as store:
    ...     branch = store.default_branch()
"""

from commitref.store._dulwich import DulwichStore, commit_from_dulwich, parse_signature
from commitref.store._fake import FakeStore, fake_object_id
from commitref.store._models import (
    Commit,
    CommitPage,
    ObjectKind,
    Signature,
    StoredObject,
    commit_to_dict,
)
from commitref.store._protocol import ObjectStoreProtocol

__all__ = [
    "Commit",
    "CommitPage",
    "DulwichStore",
    "FakeStore",
    "ObjectKind",
    "ObjectStoreProtocol",
    "Signature",
    "StoredObject",
    "commit_from_dulwich",
    "commit_to_dict",
    "fake_object_id",
    "parse_signature",
]
