# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415, FBT002, TC003  # Path needed at runtime for cyclopts parameter parsing
"""commitref commands."""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console
from rich.markup import escape

from commitref.exceptions import CommitRefError
from commitref.history import list_commits
from commitref.objectid import classify
from commitref.resolver import get_commit_by_sha, resolve_commit
from commitref.store import Commit, CommitPage, DulwichStore, commit_to_dict
from commitref.utils import short_sha

from ._context import CLIContext, OutputFormat
from ._shared import exit_code_for, exit_with_error, format_json

RepoOption = Annotated[
    Path,
    Parameter(name=["--repo", "-C"], help="Path to the git repository"),
]
FormatOption = Annotated[
    OutputFormat,
    Parameter(name=["--format", "-f"], help="Output format"),
]


@contextmanager
def _open_store(repo: Path) -> Iterator[DulwichStore]:
    """Open the repository and translate commitref errors to exit codes."""
    ctx = CLIContext.get_current()
    try:
        with DulwichStore(repo, hex_length=ctx.settings.objectid.hex_length) as store:
            yield store
    except CommitRefError as e:
        if ctx.logger is not None:
            ctx.logger.warning(
                "command_failed", error=type(e).__name__, message=str(e)
            )
        exit_with_error(str(e), exit_code_for(e))


def _print_commit(console: Console, commit: Commit) -> None:
    console.print(f"[yellow]commit {commit.sha}[/yellow]")
    console.print(f"Tree:      {commit.tree_sha}")
    for parent in commit.parent_shas:
        console.print(f"Parent:    {parent}")
    console.print(
        f"Author:    {escape(commit.author.name)} <{escape(commit.author.email)}>"
    )
    console.print(f"Date:      {commit.timestamp.strftime('%Y-%m-%d %H:%M:%S %z')}")
    console.print()
    for line in commit.message.rstrip("\n").splitlines():
        console.print(f"    {escape(line)}", highlight=False)


def _print_page(console: Console, page: CommitPage) -> None:
    if page.is_empty:
        console.print(f"[dim]No commits on page {page.page}[/dim]")
        return

    for commit in page.commits:
        subject = commit.subject or "(no message)"
        console.print(
            f"[yellow]{short_sha(commit.sha)}[/yellow] {escape(subject)}",
            highlight=False,
        )
        console.print(
            f"  [dim]{escape(commit.author.name)} "
            f"{commit.timestamp.strftime('%Y-%m-%d %H:%M:%S %z')}[/dim]"
        )

    footer = f"page {page.page}, {len(page)} commit(s)"
    if page.has_more:
        footer += f", more on page {page.page + 1}"
    console.print(f"\n[dim]{footer}[/dim]")


def _show(
    ref: Annotated[str, Parameter(help="Branch, tag, short or full commit id")],
    *,
    repo: RepoOption = Path(),
    sha_only: Annotated[
        bool,
        Parameter(name="--sha-only", help="Accept object ids only, not names"),
    ] = False,
    output: FormatOption = OutputFormat.TEXT,
) -> None:
    """Show the commit a reference resolves to"""
    ctx = CLIContext.get_current()

    with _open_store(repo) as store:
        lookup = get_commit_by_sha if sha_only else resolve_commit
        commit = lookup(store, ref, settings=ctx.settings, logger=ctx.logger)

    if output is OutputFormat.JSON:
        print(format_json(commit_to_dict(commit)))  # noqa: T201
        return
    _print_commit(Console(), commit)


def _log(
    *,
    ref: Annotated[
        str | None,
        Parameter(name=["--ref", "--sha"], help="Starting reference (default branch if omitted)"),
    ] = None,
    page: Annotated[int, Parameter(name=["--page", "-p"], help="Page number")] = 1,
    limit: Annotated[
        int | None,
        Parameter(name=["--limit", "-n"], help="Commits per page"),
    ] = None,
    repo: RepoOption = Path(),
    output: FormatOption = OutputFormat.TEXT,
) -> None:
    """List one page of commit history"""
    ctx = CLIContext.get_current()

    with _open_store(repo) as store:
        result = list_commits(
            store,
            ref,
            page,
            limit=limit,
            settings=ctx.settings,
            logger=ctx.logger,
        )

    if output is OutputFormat.JSON:
        data = {
            "commits": [commit_to_dict(c) for c in result.commits],
            "page": result.page,
            "page_size": result.page_size,
            "has_more": result.has_more,
        }
        print(format_json(data))  # noqa: T201
        return
    _print_page(Console(), result)


def _classify(
    ref: Annotated[str, Parameter(help="Reference string to classify")],
) -> None:
    """Classify a reference string without opening a repository"""
    console = Console()
    objectid = CLIContext.get_current().settings.objectid
    kind = classify(
        ref,
        hex_length=objectid.hex_length,
        min_abbrev_length=objectid.min_abbrev_length,
    )
    console.print(kind.value)


def register_commands(app: App) -> None:
    """Register all commitref commands on an app."""
    app.command(_show, name="show")
    app.command(_log, name="log")
    app.command(_classify, name="classify")
