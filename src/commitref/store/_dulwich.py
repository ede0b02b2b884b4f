"""Dulwich-backed object store.

This module adapts a dulwich repository (on disk or in memory) to the
ObjectStoreProtocol read interface.
"""

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path
from types import TracebackType
from typing import Final, Self, cast

from dulwich.errors import ChecksumMismatch, NotGitRepository, ObjectFormatException
from dulwich.objects import Commit as DulwichCommit, ShaFile, Tag as DulwichTag
from dulwich.refs import check_ref_format
from dulwich.repo import BaseRepo, Repo

from commitref.exceptions import StoreUnavailableError
from commitref.objectid import BRANCH_PREFIX, SHA1_HEX_LENGTH, TAG_PREFIX, is_hex
from commitref.store._models import Commit, ObjectKind, Signature, StoredObject
from commitref.utils import decode_bytes

# Errors dulwich raises when the object database is unreadable or corrupt.
_STORE_ERRORS: Final = (OSError, ObjectFormatException, ChecksumMismatch)

_HEAD: Final = b"HEAD"

# datetime.timezone only accepts offsets strictly inside one day.
_MAX_TZ_OFFSET: Final = timedelta(hours=24)


def parse_signature(identity: bytes, when: int, tz_offset: int) -> Signature:
    """Parse a git identity line into a Signature.

    Args:
        identity: Identity bytes in "Name <email>" format.
        when: Unix timestamp.
        tz_offset: Timezone offset in seconds east of UTC, as dulwich reports it.

    Returns:
        Signature with a timezone-aware timestamp in the recorded offset.
        Offsets of a day or more (git fsck reports them as badTimezone)
        fall back to UTC.
    """
    identity_str = identity.decode("utf-8", errors="replace")
    if "<" in identity_str and identity_str.endswith(">"):
        name_part = identity_str.rsplit("<", 1)[0].strip()
        email_part = identity_str.rsplit("<", 1)[1].rstrip(">")
    else:
        name_part = identity_str
        email_part = ""

    offset = timedelta(seconds=tz_offset)
    tz = timezone(offset) if abs(offset) < _MAX_TZ_OFFSET else UTC
    return Signature(
        name=name_part,
        email=email_part,
        timestamp=datetime.fromtimestamp(when, tz=tz),
    )


def commit_from_dulwich(commit: DulwichCommit) -> Commit:
    """Convert a dulwich commit object to a Commit record.

    Args:
        commit: The dulwich commit.

    Returns:
        Commit with full-length ids, parents in recorded order, and parsed
        author and committer signatures.
    """
    # Explicit casts; dulwich attribute stubs are incomplete
    author = parse_signature(
        cast("bytes", commit.author),
        cast("int", commit.author_time),
        cast("int", commit.author_timezone),
    )
    committer = parse_signature(
        cast("bytes", commit.committer),
        cast("int", commit.commit_time),
        cast("int", commit.commit_timezone),
    )
    message_bytes = cast("bytes", commit.message)
    return Commit(
        sha=decode_bytes(commit.id),
        tree_sha=decode_bytes(commit.tree),
        parent_shas=tuple(decode_bytes(p) for p in commit.parents),
        author=author,
        committer=committer,
        message=message_bytes.decode("utf-8", errors="replace"),
    )


class DulwichStore:
    """Read-only object store over a dulwich repository.

    Implements ObjectStoreProtocol. Use as a context manager so the
    underlying repository's file handles are released.

    Example:
        >>> with DulwichStore(Path("/srv/git/project.git")) as store:
        ...     sha = store.resolve_branch("main")
    """

    __slots__: Final = ("_hex_length", "_path", "_repo")
    _repo: BaseRepo
    _path: Path | None
    _hex_length: int

    def __init__(
        self,
        path: Path | str | None = None,
        *,
        repo: BaseRepo | None = None,
        hex_length: int = SHA1_HEX_LENGTH,
    ) -> None:
        """Open a repository.

        Args:
            path: Path to a working tree or bare repository. Ignored when
                ``repo`` is given.
            repo: An already-open dulwich repository (e.g. a MemoryRepo).
            hex_length: Length of a full object id for the repository's hash.

        Raises:
            StoreUnavailableError: If no repository can be opened at path.
            ValueError: If neither path nor repo is given.
        """
        self._hex_length = hex_length
        if repo is not None:
            self._repo = repo
            self._path = None
            return
        if path is None:
            msg = "Either path or repo is required"
            raise ValueError(msg)

        self._path = Path(path)
        try:
            self._repo = Repo(str(self._path))
        except NotGitRepository as e:
            msg = f"Not a git repository: {self._path}"
            raise StoreUnavailableError(msg, path=self._path) from e
        except OSError as e:
            msg = f"Cannot open repository: {self._path}: {e}"
            raise StoreUnavailableError(msg, path=self._path) from e

    @classmethod
    def from_repo(cls, repo: BaseRepo, *, hex_length: int = SHA1_HEX_LENGTH) -> Self:
        """Wrap an already-open dulwich repository."""
        return cls(repo=repo, hex_length=hex_length)

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

    def close(self) -> None:
        """Close the underlying dulwich repository."""
        if isinstance(self._repo, Repo):
            self._repo.close()
        else:
            self._repo.object_store.close()

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def path(self) -> Path | None:
        """Repository path, or None for a wrapped in-memory repository."""
        return self._path

    @property
    def hex_length(self) -> int:
        return self._hex_length

    # =========================================================================
    # Object Lookup
    # =========================================================================

    def _read(self, object_id: str) -> ShaFile | None:
        try:
            return self._repo.object_store[object_id.encode("ascii")]
        except KeyError:
            return None
        except _STORE_ERRORS as e:
            msg = f"Cannot read object {object_id}: {e}"
            raise StoreUnavailableError(
                msg, path=self._path, object_id=object_id
            ) from e

    def lookup_object(self, object_id: str) -> StoredObject | None:
        """Look up an object by its full id.

        Args:
            object_id: Full-length object id hex string.

        Returns:
            The stored object with commit or tag target populated, or None
            if the id is not in the store.

        Raises:
            StoreUnavailableError: If the object database cannot be read.
        """
        if len(object_id) != self._hex_length or not is_hex(object_id):
            return None

        obj = self._read(object_id.lower())
        if obj is None:
            return None

        kind = ObjectKind(decode_bytes(obj.type_name))
        if isinstance(obj, DulwichCommit):
            return StoredObject(
                object_id=decode_bytes(obj.id),
                kind=kind,
                commit=commit_from_dulwich(obj),
            )
        if isinstance(obj, DulwichTag):
            _, target = obj.object
            return StoredObject(
                object_id=decode_bytes(obj.id),
                kind=kind,
                target_id=decode_bytes(target),
            )
        return StoredObject(object_id=decode_bytes(obj.id), kind=kind)

    def iter_object_ids(self, prefix: str) -> Iterator[str]:
        """Iterate ids of objects whose id starts with prefix.

        Args:
            prefix: Lowercase hex prefix.

        Yields:
            Matching full object ids, loose and packed.

        Raises:
            StoreUnavailableError: If the object database cannot be read.
        """
        if not is_hex(prefix):
            return
        try:
            for sha in self._repo.object_store.iter_prefix(prefix.lower().encode("ascii")):
                yield decode_bytes(sha)
        except _STORE_ERRORS as e:
            msg = f"Cannot scan objects with prefix {prefix}: {e}"
            raise StoreUnavailableError(msg, path=self._path) from e

    # =========================================================================
    # Ref Namespaces
    # =========================================================================

    def _read_ref(self, refname: str) -> str | None:
        encoded = refname.encode("utf-8")
        # Never hand a name that fails git's ref rules to a path-based container
        if not check_ref_format(encoded):
            return None
        try:
            sha = self._repo.refs[encoded]
        except KeyError:
            return None
        except OSError as e:
            msg = f"Cannot read ref {refname}: {e}"
            raise StoreUnavailableError(msg, path=self._path) from e
        return decode_bytes(sha)

    def resolve_branch(self, name: str) -> str | None:
        if name.startswith("refs/"):
            if not name.startswith(BRANCH_PREFIX):
                return None
            return self._read_ref(name)
        return self._read_ref(BRANCH_PREFIX + name)

    def resolve_tag(self, name: str) -> str | None:
        if name.startswith("refs/"):
            if not name.startswith(TAG_PREFIX):
                return None
            return self._read_ref(name)
        return self._read_ref(TAG_PREFIX + name)

    def default_branch(self) -> str | None:
        """Short name of the branch HEAD points at.

        Returns:
            The branch name (``master``), or None if HEAD is detached,
            missing, or points outside ``refs/heads/``.
        """
        try:
            symrefs = self._repo.refs.get_symrefs()
        except OSError as e:
            msg = f"Cannot read HEAD: {e}"
            raise StoreUnavailableError(msg, path=self._path) from e

        target = symrefs.get(_HEAD)
        if target is None:
            return None
        target_str = decode_bytes(target)
        if not target_str.startswith(BRANCH_PREFIX):
            return None
        return target_str.removeprefix(BRANCH_PREFIX)
