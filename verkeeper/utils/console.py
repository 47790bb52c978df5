"""
Console output utilities for verkeeper using Rich.

User-facing output of the CLI commands goes through this module; diagnostic
output goes through :mod:`verkeeper.utils.logger`.
"""

from __future__ import annotations

import os
import sys
from typing import Any, Dict, List, Optional

from rich.table import Table
from rich.theme import Theme
from rich.console import Console

VERKEEPER_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "version": "bold magenta",
        "dim": "dim",
    }
)

_console: Optional[Console] = None


def _should_use_color() -> bool:
    """Return True if colored output should be enabled."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def get_console() -> Console:
    """Return the shared Rich console, creating it on first use."""
    global _console

    if _console is None:
        use_color = _should_use_color()
        _console = Console(
            theme=VERKEEPER_THEME,
            no_color=not use_color,
            highlight=False,
        )
    return _console


def reconfigure_console() -> None:
    """Drop the shared console so the next call re-reads ``NO_COLOR``."""
    global _console
    _console = None


def _emit(message: str, style: Optional[str] = None) -> None:
    get_console().print(message, style=style, markup=False, soft_wrap=True)


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    _emit(f"{prefix} {message}", "success")


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    _emit(f"{prefix} {message}", "error")


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _emit(f"{prefix} {message}", "warning")


def print_info(message: str) -> None:
    _emit(message)


def print_table(
    data: List[Dict[str, Any]],
    *,
    headers: Optional[List[str]] = None,
    title: Optional[str] = None,
    column_styles: Optional[Dict[str, Dict[str, Any]]] = None,
) -> None:
    """Render rows as a Rich table.

    Args:
        data: List of row dictionaries.
        headers: Column order. Defaults to keys of the first row.
        title: Optional table title.
        column_styles: Per-column ``style``, ``justify`` and ``no_wrap``.
    """
    if not data:
        return

    if headers is None:
        headers = list(data[0].keys())

    table = Table(title=title, show_header=True, header_style="bold")

    column_styles = column_styles or {}
    for header in headers:
        config = column_styles.get(header, {})
        table.add_column(
            header,
            style=config.get("style"),
            justify=config.get("justify", "left"),
            no_wrap=config.get("no_wrap", False),
            overflow="fold",
        )

    for row in data:
        table.add_row(*(str(row.get(h, "")) for h in headers))

    get_console().print(table)
