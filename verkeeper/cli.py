"""
Command-line interface for verkeeper.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from verkeeper.config import load_config
from verkeeper.__version__ import __version__
from verkeeper.context import VerKeeperContext
from verkeeper.exceptions import ConfigError, VerKeeperError
from verkeeper.utils.console import print_error, print_warning, reconfigure_console
from verkeeper.utils.logger import get_logger, level_for_verbosity, setup_logging

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="VERKEEPER_CONFIG",
)
@click.option(
    "--project-dir",
    "-C",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Directory holding the build file.",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="VERKEEPER_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="verkeeper",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    project_dir: Path,
    verbose: int,
    color: bool,
) -> None:
    """verkeeper — keep a project's version in sync everywhere.

    \b
    Available commands:
      verkeeper get                Show the version and where it is declared
      verkeeper bump PART          Increment major, minor or patch
      verkeeper tag                Create the Version_<semver> git tag

    \b
    Examples:
      verkeeper get
      verkeeper bump patch --dry-run
      verkeeper -C path/to/project tag

    Use ``verkeeper COMMAND --help`` for command-specific options.
    """
    _configure_logging(verbose)

    try:
        loaded_config = load_config(config, directory=project_dir)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    verkeeper_ctx = VerKeeperContext()
    verkeeper_ctx.config_path = config or loaded_config.source_path
    verkeeper_ctx.project_dir = project_dir
    verkeeper_ctx.color = color
    verkeeper_ctx.verbose = verbose
    verkeeper_ctx.config = loaded_config
    ctx.obj = verkeeper_ctx

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    logger.debug("verkeeper v%s", __version__)
    logger.debug("Project directory: %s", project_dir)
    logger.debug("Config path: %s", verkeeper_ctx.config_path)
    if loaded_config.source_path:
        logger.debug("Loaded configuration: %s", loaded_config.to_log_dict())
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


def _configure_logging(verbose: int) -> None:
    """Configure logging level based on verbosity flags."""
    level = level_for_verbosity(verbose)
    setup_logging(level=level, verbose=verbose >= 2)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


# Register CLI subcommands
try:
    from verkeeper.commands.get import get
    from verkeeper.commands.bump import bump
    from verkeeper.commands.tag import tag

    cli.add_command(get)
    cli.add_command(bump)
    cli.add_command(tag)

except ImportError as exc:
    sys.stderr.write(f"FATAL: Failed to import CLI commands: {exc}\n")
    sys.exit(1)


def main() -> int:
    """Main entry point for the verkeeper CLI.

    Returns:
        Exit code:
            0   Success
            1   Application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        result = cli(standalone_mode=False)
        return result if isinstance(result, int) else 0

    except click.exceptions.Abort:
        print_warning("Operation cancelled by user")
        return 130

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except VerKeeperError as exc:
        print_error(str(exc))
        logger.debug(
            "VerKeeperError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
