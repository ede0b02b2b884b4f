"""commitref: resolve git references to commits and page through history.

Example:
    >>> from commitref import DulwichStore, list_commits, resolve_commit
    >>> with DulwichStore("/srv/git/project.git") as store:
    ...     commit = resolve_commit(store, "v1.1")
    ...     page = list_commits(store, "main", page=2)
"""

from commitref.exceptions import (
    CommitRefError,
    ConfigError,
    ConfigLoadError,
    InvalidPageError,
    InvalidReferenceError,
    ReferenceNotFoundError,
    StoreUnavailableError,
)
from commitref.history import (
    HistoryCache,
    count_commits,
    iter_history,
    list_commits,
    page_count,
)
from commitref.objectid import ReferenceKind, classify, validate_reference
from commitref.resolver import get_commit_by_sha, resolve_commit, resolve_commit_id
from commitref.store import (
    Commit,
    CommitPage,
    DulwichStore,
    FakeStore,
    ObjectKind,
    ObjectStoreProtocol,
    Signature,
    StoredObject,
    commit_to_dict,
)

__all__ = [
    "Commit",
    "CommitPage",
    "CommitRefError",
    "ConfigError",
    "ConfigLoadError",
    "DulwichStore",
    "FakeStore",
    "HistoryCache",
    "InvalidPageError",
    "InvalidReferenceError",
    "ObjectKind",
    "ObjectStoreProtocol",
    "ReferenceKind",
    "ReferenceNotFoundError",
    "Signature",
    "StoreUnavailableError",
    "StoredObject",
    "classify",
    "commit_to_dict",
    "count_commits",
    "get_commit_by_sha",
    "iter_history",
    "list_commits",
    "page_count",
    "resolve_commit",
    "resolve_commit_id",
    "validate_reference",
]
