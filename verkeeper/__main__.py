"""
Executable module for verkeeper.

Running:
    python -m verkeeper

is equivalent to:
    verkeeper

This module simply forwards execution to the CLI entrypoint defined in
`verkeeper.cli`.
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entrypoint when executing `python -m verkeeper`.

    Returns:
        Exit code returned by the CLI.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from verkeeper.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


def _print_startup_error(exc: ImportError) -> None:
    """Report a CLI import failure on stderr."""
    sys.stderr.write("verkeeper CLI could not be loaded.\n")
    sys.stderr.write(f"Python version : {sys.version}\n")
    try:
        from verkeeper.__version__ import __version__

        sys.stderr.write(f"verkeeper version: {__version__}\n")
    except ImportError:
        sys.stderr.write("verkeeper version: <unknown>\n")
    sys.stderr.write(f"ImportError: {exc}\n")


if __name__ == "__main__":
    sys.exit(main())
