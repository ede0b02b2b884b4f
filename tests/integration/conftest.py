from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from rich.console import Console

from commitref.cli import create_app

if TYPE_CHECKING:
    from tests.conftest import RepoBuilder


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.integration)


@dataclass(frozen=True, slots=True)
class SampleRepo:
    """An on-disk repository with a known layout.

    Layout:
        master:     first <- second <- third   (HEAD)
        good-sign:  signed                      (unrelated root)
        v1.1:       annotated tag on second
        v1.0:       lightweight tag on first
    """

    path: Path
    master: tuple[str, ...]
    good_sign: str
    tag_object: str


@pytest.fixture
def sample_repo(disk_repo_path: Path, disk_builder: "RepoBuilder") -> SampleRepo:
    first = disk_builder.commit("first\n", timestamp=1_600_000_000)
    second = disk_builder.commit("second\n", parents=[first], timestamp=1_600_000_100)
    third = disk_builder.commit(
        "third\n\nwith a body\n",
        parents=[second],
        timestamp=1_600_000_200,
        branch="master",
    )
    signed = disk_builder.commit("signed\n", timestamp=1_600_000_300, branch="good-sign")
    tag_object = disk_builder.annotated_tag("v1.1", second)
    disk_builder.lightweight_tag("v1.0", first)
    return SampleRepo(
        path=disk_repo_path,
        master=(third, second, first),
        good_sign=signed,
        tag_object=tag_object,
    )


@pytest.fixture
def run_cli(console: Console) -> Callable[..., int]:
    """Run the commitref CLI and return its exit code (0 if no SystemExit)."""

    def _run(*args: str) -> int:
        app = create_app(console=console, error_console=console)
        try:
            app.meta(list(args))
        except SystemExit as e:
            return e.code if isinstance(e.code, int) else 1
        else:
            return 0

    return _run
