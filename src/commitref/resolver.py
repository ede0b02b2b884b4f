"""Reference resolution.

Turns a caller-supplied reference into exactly one commit, or raises a
typed error. Malformed references are rejected before any store access.

Resolution order:
    1. Full object id: direct lookup.
    2. Abbreviated object id: prefix scan; must match exactly one object.
    3. Symbolic name: branch namespace, then tag namespace (branch wins).

Annotated tags are peeled through tag-of-tag chains. A reference whose
final target is not a commit is reported as not found.
"""

from typing import TYPE_CHECKING, Final

from commitref.config import Settings
from commitref.exceptions import InvalidReferenceError, ReferenceNotFoundError
from commitref.objectid import ReferenceKind, validate_reference
from commitref.store import Commit, ObjectKind, ObjectStoreProtocol
from commitref.utils import get_default_logger

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

_DEFAULT_SETTINGS: Final = Settings()


def _not_found(ref: str, reason: str) -> ReferenceNotFoundError:
    msg = f"Reference not found: {ref!r} ({reason})"
    return ReferenceNotFoundError(msg, reference=ref, reason=reason)


def _find_unique_prefix_match(store: ObjectStoreProtocol, ref: str) -> str:
    """Find the single object whose id starts with an abbreviation.

    Stops scanning at the second distinct match.

    Raises:
        ReferenceNotFoundError: If no object or more than one object matches.
    """
    matches: set[str] = set()
    for object_id in store.iter_object_ids(ref.lower()):
        matches.add(object_id)
        if len(matches) > 1:
            raise _not_found(ref, "ambiguous-abbreviation")
    if not matches:
        raise _not_found(ref, "no-such-object")
    return matches.pop()


def _lookup_name(store: ObjectStoreProtocol, ref: str) -> str:
    object_id = store.resolve_branch(ref)
    if object_id is None:
        object_id = store.resolve_tag(ref)
    if object_id is None:
        raise _not_found(ref, "no-such-name")
    return object_id


def _validate(
    store: ObjectStoreProtocol,
    ref: str,
    settings: Settings,
    logger: "FilteringBoundLogger",
) -> ReferenceKind:
    try:
        return validate_reference(
            ref,
            hex_length=store.hex_length,
            min_abbrev_length=settings.objectid.min_abbrev_length,
        )
    except InvalidReferenceError as e:
        logger.info("reference_rejected", reference=ref, reason=e.reason)
        raise


def peel_to_commit(store: ObjectStoreProtocol, object_id: str, *, ref: str) -> Commit:
    """Dereference an object id to a commit.

    Annotated tags are followed until a non-tag object is reached.

    Args:
        store: The object store.
        object_id: Full object id of a commit or tag.
        ref: The original reference, for error reporting.

    Returns:
        The commit the id ultimately points at.

    Raises:
        ReferenceNotFoundError: If the object (or a tag target) is missing,
            or the chain ends at something other than a commit.
    """
    seen: set[str] = set()
    obj = store.lookup_object(object_id)
    while obj is not None and obj.kind is ObjectKind.TAG:
        if obj.target_id is None or obj.object_id in seen:
            raise _not_found(ref, "broken-tag")
        seen.add(obj.object_id)
        obj = store.lookup_object(obj.target_id)

    if obj is None:
        raise _not_found(ref, "no-such-object")
    if obj.kind is not ObjectKind.COMMIT or obj.commit is None:
        raise _not_found(ref, f"not-a-commit:{obj.kind.value}")
    return obj.commit


def resolve_commit(
    store: ObjectStoreProtocol,
    ref: str,
    *,
    settings: Settings | None = None,
    logger: "FilteringBoundLogger | None" = None,
) -> Commit:
    """Resolve a reference to a commit.

    Args:
        store: The object store for the repository.
        ref: Branch name, tag name, abbreviated id, full id, or a full
            ``refs/heads/`` or ``refs/tags/`` name.
        settings: Settings supplying the minimum abbreviation length.
        logger: Logger for diagnostics. Defaults to the shared stderr logger.

    Returns:
        The resolved commit. ``Commit.sha`` is always the full-length id.

    Raises:
        InvalidReferenceError: If the reference is malformed. The store is
            never called in this case.
        ReferenceNotFoundError: If nothing, or more than one object, matches.
        StoreUnavailableError: If the store cannot be read.

    Example:
        >>> commit = resolve_commit(store, "65f1")
        >>> len(commit.sha)
        40
    """
    settings = settings or _DEFAULT_SETTINGS
    if logger is None:
        logger = get_default_logger()

    kind = _validate(store, ref, settings, logger)
    logger.debug("reference_classified", reference=ref, kind=kind.value)

    try:
        match kind:
            case ReferenceKind.FULL_OBJECT_ID:
                object_id = ref.lower()
            case ReferenceKind.ABBREVIATED_OBJECT_ID:
                object_id = _find_unique_prefix_match(store, ref)
            case _:
                object_id = _lookup_name(store, ref)
        commit = peel_to_commit(store, object_id, ref=ref)
    except ReferenceNotFoundError as e:
        logger.info("reference_not_found", reference=ref, reason=e.reason)
        raise

    logger.debug("reference_resolved", reference=ref, sha=commit.sha)
    return commit


def resolve_commit_id(
    store: ObjectStoreProtocol,
    ref: str,
    *,
    settings: Settings | None = None,
    logger: "FilteringBoundLogger | None" = None,
) -> str:
    """Resolve a reference to a full commit id.

    Same rules and errors as resolve_commit.
    """
    return resolve_commit(store, ref, settings=settings, logger=logger).sha


def get_commit_by_sha(
    store: ObjectStoreProtocol,
    sha: str,
    *,
    settings: Settings | None = None,
    logger: "FilteringBoundLogger | None" = None,
) -> Commit:
    """Look up a single commit by object id only.

    Unlike resolve_commit, symbolic names are rejected: this is the strict
    lookup behind "get commit by sha" endpoints.

    Args:
        store: The object store for the repository.
        sha: Full or abbreviated object id.
        settings: Settings supplying the minimum abbreviation length.
        logger: Logger for diagnostics.

    Returns:
        The commit.

    Raises:
        InvalidReferenceError: If sha is malformed or is not an object id
            (e.g. ``"master"``).
        ReferenceNotFoundError: If no single commit matches.
        StoreUnavailableError: If the store cannot be read.
    """
    settings = settings or _DEFAULT_SETTINGS
    if logger is None:
        logger = get_default_logger()

    kind = _validate(store, sha, settings, logger)
    if kind is ReferenceKind.SYMBOLIC_NAME:
        reason = "not-an-object-id"
        logger.info("reference_rejected", reference=sha, reason=reason)
        msg = f"Not an object id: {sha!r}"
        raise InvalidReferenceError(msg, reference=sha, reason=reason)
    return resolve_commit(store, sha, settings=settings, logger=logger)
