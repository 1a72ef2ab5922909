"""
Command line interface for Sprout.

Usage:
    sprout init
    sprout add notes.txt
    sprout commit "Add notes"
    sprout checkout -- notes.txt
    sprout checkout 3f2a9c1 -- notes.txt
    sprout checkout feature
    sprout merge feature
"""

import sys
from pathlib import Path
from typing import Any, List, NoReturn

import click

from sprout import __version__
from sprout.config import config
from sprout.logging import get_sprout_logger, initialize_logging
from sprout.version_control import Commit, MergeOutcome, Repository
from sprout.version_control.errors import SproutError

logger = get_sprout_logger("cli")


class RawArgsCommand(click.Command):
    """Command that also records its arguments as typed, ``--`` included."""

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        ctx.meta["raw_args"] = list(args)
        return super().parse_args(ctx, args)


def format_commit(commit: Commit) -> str:
    """Render one log entry."""
    short = config.repository.short_id_length
    lines = ["===", f"commit {commit.commit_id}"]
    if commit.is_merge:
        assert commit.parent_id is not None and commit.second_parent_id is not None
        lines.append(
            f"Merge: {commit.parent_id[:short]} {commit.second_parent_id[:short]}"
        )
    lines.append(f"Date: {commit.timestamp}")
    lines.append(commit.message)
    return "\n".join(lines) + "\n"


def _fail(error: SproutError) -> NoReturn:
    logger.debug(f"{type(error).__name__}: {error}")
    click.echo(str(error))
    sys.exit(1)


def _open(ctx: click.Context) -> Repository:
    try:
        return Repository(ctx.obj["root"])
    except SproutError as e:
        _fail(e)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--directory",
    "-C",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    help="Run as if started in this directory",
)
@click.pass_context
def cli(ctx: click.Context, directory: Path) -> None:
    """Sprout: snapshot, branch, and merge a working directory."""
    root = directory.resolve()
    log_config = config.logging
    initialize_logging(
        log_dir=root / config.repository.control_dir / log_config.log_dir,
        level=log_config.level,
        format_string=log_config.format,
        rotation=log_config.rotation,
        retention=log_config.retention,
        enable_file_logging=log_config.enable_file_logging
        and (root / config.repository.control_dir).is_dir(),
        enable_console_logging=log_config.enable_console_logging,
    )
    ctx.obj = {"root": root}


@cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Create a repository in the current directory."""
    try:
        Repository.init(ctx.obj["root"])
    except SproutError as e:
        _fail(e)


@cli.command()
@click.argument("filename")
@click.pass_context
def add(ctx: click.Context, filename: str) -> None:
    """Stage FILENAME for the next commit."""
    try:
        _open(ctx).add(filename)
    except SproutError as e:
        _fail(e)


@cli.command()
@click.argument("message", required=False, default="")
@click.pass_context
def commit(ctx: click.Context, message: str) -> None:
    """Commit staged changes with MESSAGE."""
    try:
        _open(ctx).commit(message)
    except SproutError as e:
        _fail(e)


@cli.command()
@click.argument("filename")
@click.pass_context
def rm(ctx: click.Context, filename: str) -> None:
    """Unstage FILENAME, or stage it for removal."""
    try:
        _open(ctx).rm(filename)
    except SproutError as e:
        _fail(e)


@cli.command()
@click.pass_context
def log(ctx: click.Context) -> None:
    """Show history of the current branch."""
    try:
        for entry in _open(ctx).log():
            click.echo(format_commit(entry))
    except SproutError as e:
        _fail(e)


@cli.command(name="global-log")
@click.pass_context
def global_log(ctx: click.Context) -> None:
    """Show every commit ever made."""
    try:
        for entry in _open(ctx).global_log():
            click.echo(format_commit(entry))
    except SproutError as e:
        _fail(e)


@cli.command()
@click.argument("message")
@click.pass_context
def find(ctx: click.Context, message: str) -> None:
    """Print ids of commits whose message is MESSAGE."""
    try:
        for commit_id in _open(ctx).find(message):
            click.echo(commit_id)
    except SproutError as e:
        _fail(e)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show branches, staged files, and working-tree changes."""
    try:
        click.echo(_open(ctx).status().format())
    except SproutError as e:
        _fail(e)


@cli.command(
    cls=RawArgsCommand,
    context_settings={"ignore_unknown_options": True},
)
@click.argument("operands", nargs=-1)
@click.pass_context
def checkout(ctx: click.Context, operands: Any) -> None:
    """
    Restore files or switch branches.

    \b
    checkout -- FILE          restore FILE from HEAD
    checkout COMMIT -- FILE   restore FILE from COMMIT
    checkout BRANCH           switch to BRANCH
    """
    raw = ctx.meta.get("raw_args", list(operands))
    try:
        if len(raw) == 2 and raw[0] == "--":
            _open(ctx).checkout_file(raw[1])
        elif len(raw) == 3 and raw[1] == "--":
            _open(ctx).checkout_commit_file(raw[0], raw[2])
        elif len(raw) == 1 and raw[0] != "--":
            _open(ctx).checkout_branch(raw[0])
        else:
            click.echo("Incorrect operands.")
            sys.exit(1)
    except SproutError as e:
        _fail(e)


@cli.command()
@click.argument("name")
@click.pass_context
def branch(ctx: click.Context, name: str) -> None:
    """Create branch NAME at HEAD."""
    try:
        _open(ctx).branch(name)
    except SproutError as e:
        _fail(e)


@cli.command(name="rm-branch")
@click.argument("name")
@click.pass_context
def rm_branch(ctx: click.Context, name: str) -> None:
    """Delete branch NAME."""
    try:
        _open(ctx).rm_branch(name)
    except SproutError as e:
        _fail(e)


@cli.command()
@click.argument("commit_id")
@click.pass_context
def reset(ctx: click.Context, commit_id: str) -> None:
    """Check out COMMIT_ID and move the current branch to it."""
    try:
        _open(ctx).reset(commit_id)
    except SproutError as e:
        _fail(e)


@cli.command()
@click.argument("branch_name")
@click.pass_context
def merge(ctx: click.Context, branch_name: str) -> None:
    """Merge BRANCH_NAME into the current branch."""
    try:
        result = _open(ctx).merge(branch_name)
    except SproutError as e:
        _fail(e)

    if result.outcome != MergeOutcome.MERGED:
        click.echo(result.summary())
    elif result.has_conflicts:
        click.echo("Encountered a merge conflict.")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
