"""Shared test fixtures for commitref tests."""

from collections.abc import Iterator, Sequence
from pathlib import Path

import pytest
from dulwich.objects import Blob, Commit, Tag, Tree
from dulwich.repo import BaseRepo, MemoryRepo, Repo
from rich.console import Console

from commitref import DulwichStore, FakeStore
from commitref.cli import CLIContext

DEFAULT_IDENTITY = b"Test User <test@example.com>"


class RepoBuilder:
    """Write commits, branches, and tags straight into a dulwich repository.

    Timestamps are explicit so that history order is deterministic.
    """

    def __init__(self, repo: BaseRepo) -> None:
        self.repo: BaseRepo = repo

    def commit(
        self,
        message: str,
        *,
        parents: Sequence[str] = (),
        timestamp: int = 1_700_000_000,
        tz_offset: int = 0,
        branch: str | None = None,
        identity: bytes = DEFAULT_IDENTITY,
    ) -> str:
        """Create a commit with a single-file tree and return its id."""
        blob = Blob.from_string(message.encode("utf-8"))
        tree = Tree()
        tree.add(b"file.txt", 0o100644, blob.id)

        commit = Commit()
        commit.tree = tree.id
        commit.parents = [p.encode("ascii") for p in parents]
        commit.author = commit.committer = identity
        commit.author_time = commit.commit_time = timestamp
        commit.author_timezone = commit.commit_timezone = tz_offset
        commit.encoding = b"UTF-8"
        commit.message = message.encode("utf-8")

        for obj in (blob, tree, commit):
            self.repo.object_store.add_object(obj)

        if branch is not None:
            self.set_branch(branch, commit.id.decode("ascii"))
        return commit.id.decode("ascii")

    def set_branch(self, name: str, sha: str) -> None:
        self.repo.refs[b"refs/heads/" + name.encode("utf-8")] = sha.encode("ascii")

    def lightweight_tag(self, name: str, sha: str) -> None:
        self.repo.refs[b"refs/tags/" + name.encode("utf-8")] = sha.encode("ascii")

    def annotated_tag(
        self,
        name: str,
        target: str,
        *,
        target_type: type[Commit | Tag | Blob | Tree] = Commit,
        ref: bool = True,
    ) -> str:
        """Create an annotated tag object and (by default) its ref."""
        tag = Tag()
        tag.tagger = DEFAULT_IDENTITY
        tag.tag_time = 1_700_000_000
        tag.tag_timezone = 0
        tag.name = name.encode("utf-8")
        tag.message = f"Release {name}\n".encode()
        tag.object = (target_type, target.encode("ascii"))
        self.repo.object_store.add_object(tag)
        if ref:
            self.lightweight_tag(name, tag.id.decode("ascii"))
        return tag.id.decode("ascii")

    def blob(self, content: str) -> str:
        blob = Blob.from_string(content.encode("utf-8"))
        self.repo.object_store.add_object(blob)
        return blob.id.decode("ascii")

    def set_head(self, branch: str) -> None:
        self.repo.refs.set_symbolic_ref(b"HEAD", b"refs/heads/" + branch.encode("utf-8"))


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )


@pytest.fixture(autouse=True)
def _reset_cli_context() -> Iterator[None]:
    yield
    CLIContext.reset()


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def memory_builder() -> RepoBuilder:
    """Builder over an empty in-memory repository with HEAD on master."""
    builder = RepoBuilder(MemoryRepo())
    builder.set_head("master")
    return builder


@pytest.fixture
def memory_store(memory_builder: RepoBuilder) -> Iterator[DulwichStore]:
    with DulwichStore.from_repo(memory_builder.repo) as store:
        yield store


@pytest.fixture
def disk_repo_path(tmp_path: Path) -> Path:
    """An initialised (empty) on-disk repository with HEAD on master."""
    path = tmp_path / "repo"
    repo = Repo.init(str(path), mkdir=True)
    try:
        repo.refs.set_symbolic_ref(b"HEAD", b"refs/heads/master")
    finally:
        repo.close()
    return path


@pytest.fixture
def disk_builder(disk_repo_path: Path) -> Iterator[RepoBuilder]:
    repo = Repo(str(disk_repo_path))
    try:
        yield RepoBuilder(repo)
    finally:
        repo.close()
