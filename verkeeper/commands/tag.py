"""Tag command implementation for verkeeper.

Records the current version as a ``Version_<semver>`` git tag. Only files
declaring the version may have uncommitted changes; they are committed
first unless ``--no-commit`` is given.

Typical usage::

    $ verkeeper tag
    $ verkeeper tag --no-commit
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from verkeeper.core import tag as create_tag
from verkeeper.exceptions import UncommittedChanges, VerKeeperError
from verkeeper.context import pass_context, VerKeeperContext
from verkeeper.utils import get_logger, print_error, print_success, print_warning

logger = get_logger("commands.tag")


@click.command()
@click.option(
    "--commit/--no-commit",
    default=None,
    help="Commit modified version files before tagging "
    "(default: the commit_on_tag setting).",
)
@pass_context
def tag(ctx: VerKeeperContext, commit: Optional[bool]) -> None:
    """Create the git tag for the current version.

    Exits:
        0 if the tag was created, 1 if an error occurred.
    """
    try:
        project = ctx.load_project()
        tag_name = create_tag(project, commit=commit)
        print_success(f"Created tag {tag_name}")

    except UncommittedChanges as e:
        print_error(f"{e.message}")
        print_warning(f"Please commit or stash: {', '.join(e.files)}")
        sys.exit(1)
    except VerKeeperError as e:
        print_error(f"{e}")
        sys.exit(1)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        logger.exception("Error in tag command")
        sys.exit(1)
