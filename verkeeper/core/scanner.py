"""Line-oriented version scanner.

:class:`VersionScanner` walks a set of candidate files and applies the
pattern catalog of :mod:`verkeeper.core.patterns` to each one, 1-indexed,
line by line:

- **Source files** (``.java``, ``.kt``) use their :class:`Dialect`: an inline
  declaration settles the file immediately; a ``getVersion()`` header arms
  the scanner so that the next ``return "X"`` line settles it.
- **The build descriptor** settles on the first line that is, in its
  entirety, a version assignment.
- **The README** tracks its ``Maven Info`` and ``Gradle Info`` sections
  independently; each settles on the first value inside its fenced block
  that equals the old version. Other coordinates in the block belong to
  other dependencies and are skipped.

A settled value equal to the old version becomes a
:class:`VersionOccurrence` whose replacement line swaps in the new version.
Any other value becomes a :class:`VersionDiscrepancy` and a warning; the
file then contributes nothing. Only the first value per file is considered;
README sections only settle on the old version.

Nothing is cached: every scan re-reads the files from disk.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Set, Union

from verkeeper.constants import BUILD_FILE_NAMES, README_FILE_NAME
from verkeeper.models import (
    ScanReport,
    SemanticVersion,
    VersionDiscrepancy,
    VersionOccurrence,
)
from verkeeper.utils import get_logger, read_lines, strip_terminator
from verkeeper.core.patterns import (
    RETURN_KEYWORD_PATTERN,
    Dialect,
    LineMatch,
    ReadmeSection,
    is_comment,
    is_fence,
    match_build_line,
)

PathLike = Union[str, Path]


class VersionScanner:
    """Find version declarations in candidate files.

    Args:
        build_file: The project's build descriptor. When omitted, any file
            named like a Gradle build file is treated as one.

    Example::

        >>> scanner = VersionScanner(build_file=Path("build.gradle.kts"))
        >>> old = SemanticVersion.parse("2.4")
        >>> occurrences = scanner.scan(files, old, old.increment_patch())
        >>> [(o.file.name, o.line) for o in occurrences]
        [('Library.java', 12), ('build.gradle.kts', 9)]
    """

    def __init__(self, build_file: Optional[PathLike] = None) -> None:
        self.logger = get_logger("scanner")
        self.build_file: Optional[Path] = (
            Path(build_file).resolve() if build_file is not None else None
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def scan(
        self,
        files: Iterable[PathLike],
        old_version: SemanticVersion,
        new_version: Optional[SemanticVersion] = None,
    ) -> List[VersionOccurrence]:
        """Return every occurrence of ``old_version`` in ``files``.

        Values that differ from ``old_version`` are logged and skipped.

        Args:
            files: Candidate files, scanned in the given order.
            old_version: Version the files are expected to declare.
            new_version: Version used for the replacement lines; defaults to
                ``old_version``.
        """
        return self.scan_report(files, old_version, new_version).occurrences

    def scan_report(
        self,
        files: Iterable[PathLike],
        old_version: SemanticVersion,
        new_version: Optional[SemanticVersion] = None,
    ) -> ScanReport:
        """Like :meth:`scan`, but also return the discrepancies found."""
        old_text = str(old_version)
        new_text = str(new_version if new_version is not None else old_version)

        report = ScanReport()
        for file_path in files:
            self._scan_file(Path(file_path), old_text, new_text, report)

        self.logger.debug(
            "Scan for %s found %d occurrence(s) and %d discrepancy(ies)",
            old_text,
            len(report.occurrences),
            len(report.discrepancies),
        )
        return report

    # ------------------------------------------------------------------
    # Per-kind scanning
    # ------------------------------------------------------------------

    def _scan_file(
        self,
        path: Path,
        old_text: str,
        new_text: str,
        report: ScanReport,
    ) -> None:
        if self._is_build_file(path):
            self._scan_build_file(path, old_text, new_text, report)
        elif path.name.lower() == README_FILE_NAME:
            self._scan_readme(path, old_text, new_text, report)
        else:
            dialect = Dialect.for_path(path)
            if dialect is None:
                self.logger.debug("Skipping %s: unrecognized file kind", path)
                return
            self._scan_source(path, dialect, old_text, new_text, report)

    def _scan_source(
        self,
        path: Path,
        dialect: Dialect,
        old_text: str,
        new_text: str,
        report: ScanReport,
    ) -> None:
        armed = False

        for number, raw in enumerate(read_lines(path), start=1):
            line = strip_terminator(raw)
            if is_comment(line, dialect.comment_markers):
                continue

            found = dialect.match_inline(line)
            if found is None:
                header_end = dialect.match_header(line)
                if header_end is not None:
                    armed = True
                    found = dialect.match_value(line, header_end)
                elif armed:
                    found = dialect.match_value(line)
                    if found is None and RETURN_KEYWORD_PATTERN.search(line):
                        # getVersion() returns something other than a literal
                        armed = False

            if found is not None:
                self._settle(path, number, line, found, old_text, new_text, report)
                return

    def _scan_build_file(
        self,
        path: Path,
        old_text: str,
        new_text: str,
        report: ScanReport,
    ) -> None:
        for number, raw in enumerate(read_lines(path), start=1):
            line = strip_terminator(raw)
            found = match_build_line(line)
            if found is not None:
                self._settle(path, number, line, found, old_text, new_text, report)
                return

    def _scan_readme(
        self,
        path: Path,
        old_text: str,
        new_text: str,
        report: ScanReport,
    ) -> None:
        settled: Set[ReadmeSection] = set()
        heading: Optional[ReadmeSection] = None
        block: Optional[ReadmeSection] = None

        for number, raw in enumerate(read_lines(path), start=1):
            line = strip_terminator(raw)

            if block is not None:
                if is_fence(line):
                    self.logger.debug(
                        "%s: '%s' block closed without a version",
                        path,
                        block.heading,
                    )
                    settled.add(block)
                    block = None
                else:
                    found = block.match_value(line)
                    if found is not None and found.version != old_text:
                        # another dependency listed in the same block
                        self.logger.debug(
                            "%s @ %d: skipping coordinate %s in '%s' block",
                            path,
                            number,
                            found.version,
                            block.heading,
                        )
                    elif found is not None:
                        self._settle(
                            path, number, line, found, old_text, new_text, report
                        )
                        settled.add(block)
                        block = None
                if len(settled) == len(ReadmeSection):
                    return
                continue

            if heading is not None and is_fence(line):
                block, heading = heading, None
                continue

            for section in ReadmeSection:
                if section not in settled and section.is_heading(line):
                    heading = section
                    break

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _is_build_file(self, path: Path) -> bool:
        if self.build_file is None:
            return path.name in BUILD_FILE_NAMES
        return path.resolve() == self.build_file

    def _settle(
        self,
        path: Path,
        number: int,
        line: str,
        found: LineMatch,
        old_text: str,
        new_text: str,
        report: ScanReport,
    ) -> None:
        if found.version == old_text:
            report.occurrences.append(
                VersionOccurrence(
                    file=path,
                    line=number,
                    version=found.version,
                    replacement=found.splice(line, new_text),
                )
            )
            self.logger.debug("Found version %s in %s @ %d", old_text, path, number)
            return

        report.discrepancies.append(
            VersionDiscrepancy(
                file=path,
                line=number,
                expected=old_text,
                found=found.version,
            )
        )
        self.logger.warning(
            "Version mismatch in %s at line %d: expected %s, found %s",
            path,
            number,
            old_text,
            found.version,
        )
