"""Commit history traversal and pagination.

History is linearized in reverse topological order: a commit is always
yielded after every child of it that is part of the same walk. Among
commits with no ordering constraint between them, the newest committer
timestamp comes first. Each reachable commit appears exactly once, even
when merges create several paths to it.
"""

import heapq
import math
from collections import OrderedDict, defaultdict
from collections.abc import Iterator
from dataclasses import dataclass
from itertools import islice
from typing import TYPE_CHECKING, Final

from commitref.config import Settings
from commitref.exceptions import InvalidPageError, ReferenceNotFoundError
from commitref.objectid import BRANCH_PREFIX
from commitref.resolver import resolve_commit
from commitref.store import Commit, CommitPage, ObjectKind, ObjectStoreProtocol
from commitref.utils import get_default_logger

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

_DEFAULT_SETTINGS: Final = Settings()

# Heap entries sort newest first, then by discovery order.
type _ReadyEntry = tuple[float, int, str]


@dataclass(frozen=True, slots=True)
class _HistoryGraph:
    """Commits reachable from one start commit.

    Attributes:
        commits: Reachable commits by id.
        discovered: Order in which the graph read reached each commit.
        child_count: Number of reachable children of each commit.
    """

    commits: dict[str, Commit]
    discovered: dict[str, int]
    child_count: dict[str, int]


def _load_commit(store: ObjectStoreProtocol, sha: str) -> Commit | None:
    obj = store.lookup_object(sha)
    if obj is None or obj.kind is not ObjectKind.COMMIT:
        return None
    return obj.commit


def _read_graph(store: ObjectStoreProtocol, start_sha: str) -> _HistoryGraph:
    commits: dict[str, Commit] = {}
    discovered: dict[str, int] = {}
    child_count: defaultdict[str, int] = defaultdict(int)

    stack = [start_sha]
    while stack:
        sha = stack.pop()
        if sha in commits:
            continue
        commit = _load_commit(store, sha)
        if commit is None:
            continue
        commits[sha] = commit
        discovered[sha] = len(discovered)
        for parent in commit.parent_shas:
            child_count[parent] += 1
            if parent not in commits:
                stack.append(parent)

    return _HistoryGraph(
        commits=commits, discovered=discovered, child_count=dict(child_count)
    )


class HistoryCache:
    """History graphs kept between page requests.

    Reading the graph is the expensive part of a page request. Object ids
    are content hashes, so the graph reachable from a commit id does not
    change while a store is open; keep one cache per store and pass it to
    each ``list_commits`` call. The least recently used graph is evicted
    once more than ``max_entries`` start commits are held.

    Example:
        >>> cache = HistoryCache()
        >>> first = list_commits(store, "main", 1, cache=cache)
        >>> second = list_commits(store, "main", 2, cache=cache)
        >>> len(cache)
        1
    """

    __slots__ = ("_graphs", "_max_entries")

    def __init__(self, max_entries: int = 8) -> None:
        if max_entries < 1:
            msg = f"max_entries must be at least 1, got {max_entries}"
            raise ValueError(msg)
        self._graphs: OrderedDict[str, _HistoryGraph] = OrderedDict()
        self._max_entries = max_entries

    def __len__(self) -> int:
        return len(self._graphs)

    def __contains__(self, start_sha: object) -> bool:
        return start_sha in self._graphs

    def clear(self) -> None:
        """Drop every cached graph."""
        self._graphs.clear()

    def _graph_for(self, store: ObjectStoreProtocol, start_sha: str) -> _HistoryGraph:
        graph = self._graphs.get(start_sha)
        if graph is not None:
            self._graphs.move_to_end(start_sha)
            return graph

        graph = _read_graph(store, start_sha)
        # Unknown start commits are not cached.
        if start_sha in graph.commits:
            self._graphs[start_sha] = graph
            if len(self._graphs) > self._max_entries:
                _ = self._graphs.popitem(last=False)
        return graph


def _ready_entry(commit: Commit, seq: int) -> _ReadyEntry:
    return (-commit.timestamp.timestamp(), seq, commit.sha)


def iter_history(
    store: ObjectStoreProtocol,
    start_sha: str,
    *,
    cache: HistoryCache | None = None,
) -> Iterator[Commit]:
    """Walk the history reachable from a commit.

    The reachable graph is read once up front to count each commit's
    children inside the walk; commits are then yielded on demand, so a
    caller that stops early never builds the rest of the sequence. Calling
    the function again restarts the walk. With a cache, the graph read is
    shared between walks from the same start commit.

    Parents missing from the store (shallow boundaries) are skipped.

    Args:
        store: The object store.
        start_sha: Full id of the starting commit.
        cache: Graph cache for this store.

    Yields:
        Commits in reverse topological order, newest first among peers.
    """
    if cache is None:
        graph = _read_graph(store, start_sha)
    else:
        graph = cache._graph_for(store, start_sha)  # pyright: ignore[reportPrivateUsage]

    if start_sha not in graph.commits:
        return

    remaining = dict(graph.child_count)
    ready: list[_ReadyEntry] = [_ready_entry(graph.commits[start_sha], 0)]
    while ready:
        _, _, sha = heapq.heappop(ready)
        commit = graph.commits[sha]
        yield commit
        for parent in commit.parent_shas:
            if parent not in graph.commits:
                continue
            remaining[parent] -= 1
            if remaining[parent] == 0:
                heapq.heappush(
                    ready, _ready_entry(graph.commits[parent], graph.discovered[parent])
                )


def _effective_page_size(limit: int | None, page: int, settings: Settings) -> int:
    if limit is None:
        return settings.history.page_size
    if limit < 1:
        msg = f"Page size must be at least 1, got {limit}"
        raise InvalidPageError(msg, page=page, limit=limit)
    return min(limit, settings.history.max_page_size)


def _start_reference(store: ObjectStoreProtocol, ref: str | None) -> str:
    if ref is not None:
        return ref
    branch = store.default_branch()
    if branch is None:
        msg = "Repository has no default branch"
        raise ReferenceNotFoundError(msg, reference="HEAD", reason="no-default-branch")
    # Always the branch namespace, even for hex-only names.
    return BRANCH_PREFIX + branch


def list_commits(
    store: ObjectStoreProtocol,
    ref: str | None = None,
    page: int = 1,
    *,
    limit: int | None = None,
    settings: Settings | None = None,
    cache: HistoryCache | None = None,
    logger: "FilteringBoundLogger | None" = None,
) -> CommitPage:
    """List one page of commit history.

    Args:
        store: The object store for the repository.
        ref: Starting reference (branch, tag, or id). None uses the
            repository's default branch.
        page: 1-based page number.
        limit: Page size override, capped at ``history.max_page_size``.
            None uses ``history.page_size``.
        settings: Pagination and object id settings.
        cache: Graph cache shared by repeated requests against this store.
        logger: Logger for diagnostics.

    Returns:
        The requested page. A page past the end of history is empty with
        ``has_more`` False; it is not an error.

    Raises:
        InvalidPageError: If page or limit is below 1.
        InvalidReferenceError: If ref is malformed.
        ReferenceNotFoundError: If ref (or the default branch) does not
            resolve to a commit.
        StoreUnavailableError: If the store cannot be read.

    Example:
        >>> first = list_commits(store, "main", page=1)
        >>> second = list_commits(store, "main", page=2)
        >>> set(first.commits).isdisjoint(second.commits)
        True
    """
    settings = settings or _DEFAULT_SETTINGS
    if logger is None:
        logger = get_default_logger()

    if page < 1:
        msg = f"Page must be at least 1, got {page}"
        raise InvalidPageError(msg, page=page, limit=limit)
    page_size = _effective_page_size(limit, page, settings)

    start = resolve_commit(
        store, _start_reference(store, ref), settings=settings, logger=logger
    )

    offset = (page - 1) * page_size
    # One extra commit tells us whether another page follows.
    history = iter_history(store, start.sha, cache=cache)
    window = list(islice(history, offset, offset + page_size + 1))
    has_more = len(window) > page_size
    commits = tuple(window[:page_size])

    logger.debug(
        "history_page",
        reference=ref,
        start=start.sha,
        page=page,
        page_size=page_size,
        count=len(commits),
        has_more=has_more,
    )
    return CommitPage(
        commits=commits,
        page=page,
        page_size=page_size,
        has_more=has_more,
    )


def count_commits(
    store: ObjectStoreProtocol,
    ref: str | None = None,
    *,
    settings: Settings | None = None,
    cache: HistoryCache | None = None,
    logger: "FilteringBoundLogger | None" = None,
) -> int:
    """Count the commits reachable from a reference.

    Raises:
        InvalidReferenceError: If ref is malformed.
        ReferenceNotFoundError: If ref does not resolve to a commit.
    """
    start = resolve_commit(
        store, _start_reference(store, ref), settings=settings, logger=logger
    )
    return sum(1 for _ in iter_history(store, start.sha, cache=cache))


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed to show total commits."""
    return math.ceil(total / page_size) if total > 0 else 0
