"""Table rendering shared by the ``get`` and ``bump`` commands."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from rich.markup import escape

from verkeeper.models import VersionOccurrence
from verkeeper.utils import print_table


def display_path(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` when it lies inside it."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


def display_occurrences(
    occurrences: List[VersionOccurrence],
    root: Path,
    *,
    title: str,
    new_version: Optional[str] = None,
) -> None:
    """Print one table row per declaration.

    With ``new_version`` the table is a plan: each row shows the line as it
    will be written. File names and source text are escaped so brackets in
    them are printed as-is.
    """
    data: List[Dict[str, str]] = []
    for occurrence in occurrences:
        row = {
            "File": escape(display_path(occurrence.file, root)),
            "Line": str(occurrence.line),
            "Version": occurrence.version,
        }
        if new_version is not None:
            row["New Version"] = f"[bold green]{new_version}[/bold green]"
            row["Replacement"] = escape(occurrence.replacement.strip())
        data.append(row)

    column_styles = {
        "File": {"style": "bold cyan", "no_wrap": True},
        "Line": {"justify": "right", "style": "dim"},
        "Version": {"justify": "center"},
        "New Version": {"justify": "center"},
        "Replacement": {"style": "dim"},
    }

    print_table(data, title=title, column_styles=column_styles)
