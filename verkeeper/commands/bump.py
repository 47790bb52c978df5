"""Bump command implementation for verkeeper.

Increments the project version and rewrites every declaration of it.

The command first runs the bump as a dry run to show the plan, asks for
confirmation (unless ``--yes``), then performs the real bump. Every file is
verified against the current version before anything is written; a single
disagreeing file aborts the command with nothing changed.

Typical usage::

    # Preview a patch bump
    $ verkeeper bump patch --dry-run

    # Bump the minor version without a prompt
    $ verkeeper bump minor -y
"""

from __future__ import annotations

import sys

import click

from verkeeper.core import BumpResult, Increment, bump as bump_version
from verkeeper.exceptions import RewriteFailure, VerKeeperError
from verkeeper.context import pass_context, VerKeeperContext
from verkeeper.commands._display import display_occurrences, display_path
from verkeeper.utils import get_logger, print_error, print_success, print_warning

logger = get_logger("commands.bump")


@click.command()
@click.argument(
    "part",
    type=click.Choice([i.value for i in Increment], case_sensitive=False),
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Preview changes without applying them.",
)
@click.option(
    "--yes",
    "-y",
    is_flag=True,
    help="Skip confirmation prompt.",
)
@pass_context
def bump(ctx: VerKeeperContext, part: str, dry_run: bool, yes: bool) -> None:
    """Increment the MAJOR, MINOR or PATCH version.

    \b
    Examples:
      verkeeper bump patch          1.2.3 -> 1.2.4
      verkeeper bump minor          1.2.3 -> 1.3.0
      verkeeper bump major          1.2.3 -> 2.0.0

    Exits:
        0 if the version was bumped (or the dry run succeeded), 1 if an
        error occurred.
    """
    increment = Increment(part.lower())
    try:
        project = ctx.load_project()
        plan = bump_version(project, increment, dry_run=True)
        _display_plan(plan, ctx, dry_run)

        if dry_run:
            print_warning("Dry run mode - no changes applied")
            return

        if not yes and not _confirm_bump(plan):
            logger.info("Bump cancelled by user")
            return

        result = bump_version(project, increment)
        print_success(
            f"Version {result.old} -> {result.new} "
            f"({len(result.updated_files)} file(s) updated)"
        )

    except RewriteFailure as e:
        print_error(f"{e}")
        root = ctx.project_dir.resolve()
        for path in e.updated:
            print_warning(f"updated: {display_path(path, root)}")
        for path in e.pending:
            print_warning(f"NOT updated: {display_path(path, root)}")
        sys.exit(1)
    except VerKeeperError as e:
        print_error(f"{e}")
        sys.exit(1)
    except click.exceptions.Abort:
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        logger.exception("Error in bump command")
        sys.exit(1)


def _display_plan(plan: BumpResult, ctx: VerKeeperContext, dry_run: bool) -> None:
    title = f"Bump Plan {plan.old} -> {plan.new}"
    if dry_run:
        title += " (Dry Run)"
    display_occurrences(
        plan.occurrences,
        ctx.project_dir.resolve(),
        title=title,
        new_version=str(plan.new),
    )


def _confirm_bump(plan: BumpResult) -> bool:
    """Prompt user to confirm the bump. Defaults to 'yes'."""
    response = click.prompt(
        f"\nUpdate {plan.old} -> {plan.new} in {len(plan.occurrences)} place(s)?",
        type=click.Choice(["y", "n"], case_sensitive=False),
        default="y",
        show_choices=True,
    )
    return response.lower() == "y"
