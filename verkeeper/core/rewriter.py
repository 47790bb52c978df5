"""Atomic, line-preserving rewriting of version declarations.

Files are processed one at a time: the whole file is read, a sibling
temporary file receives every line verbatim except the matched ones, and
the temporary file replaces the original in a single rename. Replaced lines
use the terminator the file already uses.

There is no rollback across files. When a swap fails after other files
were already rewritten, :class:`~verkeeper.exceptions.RewriteFailure` lists
exactly which files were updated and which were not.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List

from verkeeper.exceptions import FileOperationError, RewriteFailure
from verkeeper.models import VersionOccurrence
from verkeeper.utils import detect_line_terminator, get_logger, replace_lines


class AtomicRewriter:
    """Apply precomputed replacement lines to their files."""

    def __init__(self) -> None:
        self.logger = get_logger("rewriter")

    def apply(self, occurrences: Iterable[VersionOccurrence]) -> List[Path]:
        """Rewrite every occurrence, one file at a time.

        Args:
            occurrences: Occurrences from a scan; several may share a file.

        Returns:
            The rewritten files, in processing order.

        Raises:
            RewriteFailure: A file could not be rewritten. Earlier files stay
                rewritten.
        """
        grouped: Dict[Path, List[VersionOccurrence]] = {}
        for occurrence in occurrences:
            grouped.setdefault(occurrence.file, []).append(occurrence)

        files = list(grouped)
        updated: List[Path] = []

        for index, path in enumerate(files):
            items = grouped[path]
            try:
                terminator = detect_line_terminator(path)
                replace_lines(
                    path,
                    {o.line: o.replacement for o in items},
                    terminator=terminator,
                )
            except FileOperationError as exc:
                pending = files[index:]
                self.logger.error(
                    "Failed to replace file %s; updated: [%s]; not updated: [%s]",
                    path,
                    ", ".join(map(str, updated)),
                    ", ".join(map(str, pending)),
                )
                raise RewriteFailure(
                    file_path=path,
                    updated=updated,
                    pending=pending,
                    original_error=exc,
                ) from exc

            for occurrence in items:
                self.logger.info(
                    "Updating file '%s' at line %d: %s",
                    path,
                    occurrence.line,
                    occurrence.replacement.strip(),
                )
            updated.append(path)

        return updated
