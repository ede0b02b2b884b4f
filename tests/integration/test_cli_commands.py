"""Integration tests for the commitref CLI."""

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

import orjson
import pytest

from commitref.cli import ExitCode

if TYPE_CHECKING:
    from tests.integration.conftest import SampleRepo


@pytest.fixture(autouse=True)
def _isolated(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    for name in ("COMMITREF_DEBUG", "COMMITREF_LOG_LEVEL", "COMMITREF_STRICT_CONFIG"):
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# show
# =============================================================================


class TestShowCommand:
    def test_text_output(
        self,
        run_cli: Callable[..., int],
        sample_repo: "SampleRepo",
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = run_cli("show", "master", "--repo", str(sample_repo.path))

        out = capsys.readouterr().out
        assert code == ExitCode.SUCCESS
        assert f"commit {sample_repo.master[0]}" in out
        assert "with a body" in out

    def test_json_output(
        self,
        run_cli: Callable[..., int],
        sample_repo: "SampleRepo",
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = run_cli(
            "show", "v1.1", "--repo", str(sample_repo.path), "--format", "json"
        )

        data = orjson.loads(capsys.readouterr().out)
        assert code == ExitCode.SUCCESS
        assert data["sha"] == sample_repo.master[1]
        assert data["parents"] == [{"sha": sample_repo.master[2]}]

    def test_short_sha(
        self,
        run_cli: Callable[..., int],
        sample_repo: "SampleRepo",
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        short = sample_repo.good_sign[:8]

        code = run_cli("show", short, "-C", str(sample_repo.path), "-f", "json")

        assert code == ExitCode.SUCCESS
        assert orjson.loads(capsys.readouterr().out)["sha"] == sample_repo.good_sign

    def test_malformed_reference_exits_validation_error(
        self,
        run_cli: Callable[..., int],
        sample_repo: "SampleRepo",
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = run_cli("show", "..", "--repo", str(sample_repo.path))

        assert code == ExitCode.VALIDATION_ERROR
        assert "Invalid reference" in capsys.readouterr().err

    def test_unknown_branch_exits_not_found(
        self,
        run_cli: Callable[..., int],
        sample_repo: "SampleRepo",
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = run_cli("show", "branch-not-exist", "--repo", str(sample_repo.path))

        assert code == ExitCode.NOT_FOUND
        assert "branch-not-exist" in capsys.readouterr().err

    def test_sha_only_rejects_branch_name(
        self, run_cli: Callable[..., int], sample_repo: "SampleRepo"
    ) -> None:
        code = run_cli("show", "master", "--sha-only", "--repo", str(sample_repo.path))
        assert code == ExitCode.VALIDATION_ERROR

    def test_sha_only_unknown_sha(
        self, run_cli: Callable[..., int], sample_repo: "SampleRepo"
    ) -> None:
        code = run_cli("show", "12345", "--sha-only", "--repo", str(sample_repo.path))
        assert code == ExitCode.NOT_FOUND

    def test_not_a_repository_exits_io_error(
        self, run_cli: Callable[..., int], tmp_path: Path
    ) -> None:
        code = run_cli("show", "master", "--repo", str(tmp_path))
        assert code == ExitCode.IO_ERROR


# =============================================================================
# log
# =============================================================================


class TestLogCommand:
    def test_default_branch_json(
        self,
        run_cli: Callable[..., int],
        sample_repo: "SampleRepo",
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = run_cli("log", "--repo", str(sample_repo.path), "--format", "json")

        data = orjson.loads(capsys.readouterr().out)
        assert code == ExitCode.SUCCESS
        assert [c["sha"] for c in data["commits"]] == list(sample_repo.master)
        assert data["page"] == 1
        assert data["page_size"] == 30
        assert data["has_more"] is False

    def test_page_two_is_empty(
        self,
        run_cli: Callable[..., int],
        sample_repo: "SampleRepo",
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = run_cli(
            "log", "--page", "2", "--repo", str(sample_repo.path), "--format", "json"
        )

        data = orjson.loads(capsys.readouterr().out)
        assert code == ExitCode.SUCCESS
        assert data["commits"] == []
        assert data["has_more"] is False

    def test_limit_and_ref(
        self,
        run_cli: Callable[..., int],
        sample_repo: "SampleRepo",
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = run_cli(
            "log",
            "--ref",
            "good-sign",
            "--limit",
            "1",
            "--repo",
            str(sample_repo.path),
            "--format",
            "json",
        )

        data = orjson.loads(capsys.readouterr().out)
        assert code == ExitCode.SUCCESS
        assert [c["sha"] for c in data["commits"]] == [sample_repo.good_sign]
        assert data["page_size"] == 1

    def test_text_output(
        self,
        run_cli: Callable[..., int],
        sample_repo: "SampleRepo",
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = run_cli("log", "--limit", "2", "--repo", str(sample_repo.path))

        out = capsys.readouterr().out
        assert code == ExitCode.SUCCESS
        assert sample_repo.master[0][:8] in out
        assert "third" in out
        assert "more on page 2" in out

    def test_zero_page_exits_validation_error(
        self, run_cli: Callable[..., int], sample_repo: "SampleRepo"
    ) -> None:
        code = run_cli("log", "--page", "0", "--repo", str(sample_repo.path))
        assert code == ExitCode.VALIDATION_ERROR

    def test_config_file_sets_page_size(
        self,
        run_cli: Callable[..., int],
        sample_repo: "SampleRepo",
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        config = tmp_path / "custom.toml"
        _ = config.write_text("[history]\npage_size = 2\n")

        code = run_cli(
            "--config",
            str(config),
            "log",
            "--repo",
            str(sample_repo.path),
            "--format",
            "json",
        )

        data = orjson.loads(capsys.readouterr().out)
        assert code == ExitCode.SUCCESS
        assert data["page_size"] == 2
        assert data["has_more"] is True

    def test_missing_config_file_exits_load_error(
        self, run_cli: Callable[..., int], tmp_path: Path
    ) -> None:
        code = run_cli("--config", str(tmp_path / "absent.toml"), "classify", "x")
        assert code == ExitCode.LOAD_ERROR


# =============================================================================
# classify
# =============================================================================


class TestClassifyCommand:
    @pytest.mark.parametrize(
        ("ref", "kind"),
        [
            ("master", "symbolic_name"),
            ("65f1", "abbreviated_object_id"),
            ("65f1bf27bc3bf70f64657658635e66094edbcb4d", "full_object_id"),
            ("..", "malformed"),
        ],
    )
    def test_kinds(
        self,
        run_cli: Callable[..., int],
        capsys: pytest.CaptureFixture[str],
        ref: str,
        kind: str,
    ) -> None:
        code = run_cli("classify", ref)

        assert code == ExitCode.SUCCESS
        assert capsys.readouterr().out.strip() == kind
