"""Object store protocol for type-safe dependency injection.

This module defines a runtime-checkable Protocol that both DulwichStore
and FakeStore satisfy. The resolver and history paginator depend only on
this read interface.
"""

from collections.abc import Iterator
from types import TracebackType
from typing import Protocol, Self, runtime_checkable

from commitref.store._models import StoredObject


@runtime_checkable
class ObjectStoreProtocol(Protocol):
    """Read-only access to a repository's objects and ref namespaces.

    Implementations never write. All ids cross this boundary as full-length
    lowercase hex strings.

    Example:
        >>> def head_commit(store: ObjectStoreProtocol) -> str | None:
        ...     branch = store.default_branch()
        ...     return store.resolve_branch(branch) if branch else None
    """

    @property
    def hex_length(self) -> int:
        """Length of a full object id for this store's hash algorithm."""
        ...

    def lookup_object(self, object_id: str) -> StoredObject | None:
        """Look up an object by its full id.

        Args:
            object_id: Full-length object id hex string.

        Returns:
            The stored object, or None if absent.

        Raises:
            StoreUnavailableError: If the store cannot be read.
        """
        ...

    def iter_object_ids(self, prefix: str) -> Iterator[str]:
        """Iterate the ids of all objects whose id starts with prefix.

        Args:
            prefix: Lowercase hex prefix.

        Returns:
            Iterator over matching full object ids. Callers may stop early.
        """
        ...

    def resolve_branch(self, name: str) -> str | None:
        """Resolve a branch name to the object id it points at.

        Args:
            name: Short branch name (``main``), or a full ``refs/heads/`` name.

        Returns:
            The object id, or None if the branch does not exist.
        """
        ...

    def resolve_tag(self, name: str) -> str | None:
        """Resolve a tag name to the object id it points at.

        Annotated tags return the id of the tag object, not its target.

        Args:
            name: Short tag name (``v1.0``), or a full ``refs/tags/`` name.

        Returns:
            The object id, or None if the tag does not exist.
        """
        ...

    def default_branch(self) -> str | None:
        """Short name of the branch HEAD points at, or None if detached/absent."""
        ...

    def close(self) -> None:
        """Release any resources held by the store."""
        ...

    def __enter__(self) -> Self: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...
