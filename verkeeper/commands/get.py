"""Get command implementation for verkeeper.

Prints the project version and every file declaring it. Fails when a file
declares another version or when no file declares it at all.

Typical usage::

    $ verkeeper get
    $ verkeeper get --quiet
"""

from __future__ import annotations

import sys

import click

from verkeeper.core import describe_version
from verkeeper.exceptions import VerKeeperError
from verkeeper.context import pass_context, VerKeeperContext
from verkeeper.commands._display import display_occurrences
from verkeeper.utils import get_logger, print_error, print_info, print_success

logger = get_logger("commands.get")


@click.command()
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Print only the version.",
)
@pass_context
def get(ctx: VerKeeperContext, quiet: bool) -> None:
    """Show the project version and where it is declared.

    Exits:
        0 if every declaration agrees, 1 on a mismatch or any other error.
    """
    try:
        project = ctx.load_project()
        version, occurrences = describe_version(project)
    except VerKeeperError as e:
        print_error(f"{e}")
        sys.exit(1)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        logger.exception("Error in get command")
        sys.exit(1)

    if quiet:
        print_info(str(version))
        return

    display_occurrences(
        occurrences,
        project.directory,
        title=f"Version {version}",
    )
    print_success(f"Version {version} declared in {len(occurrences)} place(s)")
