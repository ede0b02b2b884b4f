"""Tests for DulwichStore over an in-memory repository."""

from datetime import timedelta
from typing import TYPE_CHECKING

import pytest
from dulwich.repo import MemoryRepo
from pytest_mock import MockerFixture

from commitref.exceptions import StoreUnavailableError
from commitref.store import DulwichStore, ObjectKind, ObjectStoreProtocol
from commitref.store._dulwich import parse_signature

if TYPE_CHECKING:
    from tests.conftest import RepoBuilder

# =============================================================================
# parse_signature Tests
# =============================================================================


class TestParseSignature:
    def test_name_and_email(self) -> None:
        sig = parse_signature(b"Jane Doe <jane@example.com>", 0, 0)

        assert sig.name == "Jane Doe"
        assert sig.email == "jane@example.com"

    def test_positive_offset_is_east_of_utc(self) -> None:
        sig = parse_signature(b"Jane <j@x>", 1_700_000_000, 3600)

        assert sig.timestamp.utcoffset() == timedelta(hours=1)
        assert sig.timestamp.timestamp() == 1_700_000_000

    def test_negative_offset(self) -> None:
        sig = parse_signature(b"Jane <j@x>", 0, -5 * 3600)
        assert sig.timestamp.utcoffset() == timedelta(hours=-5)

    @pytest.mark.parametrize("tz_offset", [24 * 3600, 100 * 3600, -30 * 3600])
    def test_out_of_range_offset_falls_back_to_utc(self, tz_offset: int) -> None:
        sig = parse_signature(b"Jane <j@x>", 1_700_000_000, tz_offset)

        assert sig.timestamp.utcoffset() == timedelta(0)
        assert sig.timestamp.timestamp() == 1_700_000_000

    def test_missing_email(self) -> None:
        sig = parse_signature(b"just a name", 0, 0)

        assert sig.name == "just a name"
        assert sig.email == ""


# =============================================================================
# Construction Tests
# =============================================================================


class TestDulwichStoreConstruction:
    def test_conforms_to_protocol(self, memory_store: DulwichStore) -> None:
        assert isinstance(memory_store, ObjectStoreProtocol) is True

    def test_wrapped_repo_has_no_path(self, memory_store: DulwichStore) -> None:
        assert memory_store.path is None

    def test_requires_path_or_repo(self) -> None:
        with pytest.raises(ValueError, match="path or repo"):
            _ = DulwichStore()

    def test_custom_hex_length(self) -> None:
        store = DulwichStore.from_repo(MemoryRepo(), hex_length=64)
        assert store.hex_length == 64


# =============================================================================
# Object Lookup Tests
# =============================================================================


class TestDulwichStoreLookupObject:
    def test_commit(self, memory_builder: "RepoBuilder", memory_store: DulwichStore) -> None:
        root = memory_builder.commit("root\n", timestamp=1000)
        sha = memory_builder.commit(
            "child\n\nbody\n", parents=[root], timestamp=2000, tz_offset=-7200
        )

        obj = memory_store.lookup_object(sha)

        assert obj is not None
        assert obj.kind is ObjectKind.COMMIT
        assert obj.commit is not None
        assert obj.commit.sha == sha
        assert obj.commit.parent_shas == (root,)
        assert obj.commit.message == "child\n\nbody\n"
        assert obj.commit.author.name == "Test User"
        assert obj.commit.timestamp.timestamp() == 2000
        assert obj.commit.timestamp.utcoffset() == timedelta(hours=-2)
        assert len(obj.commit.tree_sha) == 40

    def test_commit_with_bad_timezone(
        self, memory_builder: "RepoBuilder", memory_store: DulwichStore
    ) -> None:
        sha = memory_builder.commit("skewed\n", timestamp=5000, tz_offset=100 * 3600)

        obj = memory_store.lookup_object(sha)

        assert obj is not None
        assert obj.commit is not None
        assert obj.commit.timestamp.timestamp() == 5000
        assert obj.commit.timestamp.utcoffset() == timedelta(0)

    def test_uppercase_id(
        self, memory_builder: "RepoBuilder", memory_store: DulwichStore
    ) -> None:
        sha = memory_builder.commit("root")
        obj = memory_store.lookup_object(sha.upper())
        assert obj is not None
        assert obj.object_id == sha

    def test_annotated_tag(
        self, memory_builder: "RepoBuilder", memory_store: DulwichStore
    ) -> None:
        sha = memory_builder.commit("root")
        tag_id = memory_builder.annotated_tag("v1", sha)

        obj = memory_store.lookup_object(tag_id)

        assert obj is not None
        assert obj.kind is ObjectKind.TAG
        assert obj.target_id == sha
        assert obj.commit is None

    def test_blob(self, memory_builder: "RepoBuilder", memory_store: DulwichStore) -> None:
        blob_id = memory_builder.blob("data")

        obj = memory_store.lookup_object(blob_id)

        assert obj is not None
        assert obj.kind is ObjectKind.BLOB

    def test_missing_object(self, memory_store: DulwichStore) -> None:
        assert memory_store.lookup_object("0" * 40) is None

    @pytest.mark.parametrize("object_id", ["abc", "z" * 40, "0" * 41])
    def test_non_id_input_returns_none(
        self, memory_store: DulwichStore, object_id: str
    ) -> None:
        assert memory_store.lookup_object(object_id) is None

    def test_read_failure_raises_store_unavailable(
        self, memory_store: DulwichStore, mocker: MockerFixture
    ) -> None:
        broken = mocker.MagicMock()
        broken.__getitem__.side_effect = OSError("disk gone")
        mocker.patch.object(memory_store._repo, "object_store", broken)  # pyright: ignore[reportPrivateUsage]

        with pytest.raises(StoreUnavailableError) as exc_info:
            _ = memory_store.lookup_object("1" * 40)

        assert exc_info.value.object_id == "1" * 40


class TestDulwichStoreIterObjectIds:
    def test_prefix_match(
        self, memory_builder: "RepoBuilder", memory_store: DulwichStore
    ) -> None:
        sha = memory_builder.commit("root")

        assert sha in set(memory_store.iter_object_ids(sha[:6]))

    def test_full_id_prefix_matches_only_itself(
        self, memory_builder: "RepoBuilder", memory_store: DulwichStore
    ) -> None:
        sha = memory_builder.commit("root")
        assert list(memory_store.iter_object_ids(sha)) == [sha]

    def test_non_hex_prefix_yields_nothing(self, memory_store: DulwichStore) -> None:
        assert list(memory_store.iter_object_ids("xyz")) == []


# =============================================================================
# Ref Namespace Tests
# =============================================================================


class TestDulwichStoreRefs:
    def test_branch(self, memory_builder: "RepoBuilder", memory_store: DulwichStore) -> None:
        sha = memory_builder.commit("root", branch="master")

        assert memory_store.resolve_branch("master") == sha
        assert memory_store.resolve_branch("refs/heads/master") == sha

    def test_branch_with_slash(
        self, memory_builder: "RepoBuilder", memory_store: DulwichStore
    ) -> None:
        sha = memory_builder.commit("root", branch="feature/login")
        assert memory_store.resolve_branch("feature/login") == sha

    def test_tag(self, memory_builder: "RepoBuilder", memory_store: DulwichStore) -> None:
        sha = memory_builder.commit("root")
        memory_builder.lightweight_tag("v1", sha)

        assert memory_store.resolve_tag("v1") == sha
        assert memory_store.resolve_tag("refs/tags/v1") == sha

    def test_namespaces_are_separate(
        self, memory_builder: "RepoBuilder", memory_store: DulwichStore
    ) -> None:
        sha = memory_builder.commit("root", branch="only-branch")

        assert memory_store.resolve_tag("only-branch") is None
        assert memory_store.resolve_branch("refs/tags/only-branch") is None
        assert memory_store.resolve_tag("refs/heads/only-branch") is None
        assert memory_store.resolve_branch("only-branch") == sha

    def test_missing_branch(self, memory_store: DulwichStore) -> None:
        assert memory_store.resolve_branch("nope") is None

    def test_invalid_ref_name_returns_none(self, memory_store: DulwichStore) -> None:
        assert memory_store.resolve_branch("../../config") is None

    def test_default_branch(self, memory_store: DulwichStore) -> None:
        assert memory_store.default_branch() == "master"

    def test_default_branch_follows_head(
        self, memory_builder: "RepoBuilder", memory_store: DulwichStore
    ) -> None:
        memory_builder.set_head("trunk")
        assert memory_store.default_branch() == "trunk"

    def test_no_head(self) -> None:
        store = DulwichStore.from_repo(MemoryRepo())
        assert store.default_branch() is None
