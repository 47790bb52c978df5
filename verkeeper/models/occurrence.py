"""
Scan result records for verkeeper.

A scan produces two kinds of findings for each matched version value:

- :class:`VersionOccurrence` when the value is the expected version. It
  carries the full replacement line so the rewriter never has to re-match.
- :class:`VersionDiscrepancy` when the value is some other version.

Both are transient: they live for one scan/rewrite pair and are never
persisted.
"""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(frozen=True)
class VersionOccurrence:
    """A single located version declaration.

    Attributes:
        file: File holding the declaration.
        line: 1-based line number.
        version: Version text captured on that line.
        replacement: Full line text (without terminator) to write instead.
    """

    file: Path
    line: int
    version: str
    replacement: str

    def to_display_string(self) -> str:
        return f"{self.file} @ {self.line}"


@dataclass(frozen=True)
class VersionDiscrepancy:
    """A matched version value that is not the expected version."""

    file: Path
    line: int
    expected: str
    found: str

    def to_display_string(self) -> str:
        return (
            f"{self.file} @ {self.line}: expected {self.expected}, "
            f"found {self.found}"
        )


@dataclass
class ScanReport:
    """Everything a scan found, in file order."""

    occurrences: List[VersionOccurrence] = field(default_factory=list)
    discrepancies: List[VersionDiscrepancy] = field(default_factory=list)

    @property
    def files(self) -> List[Path]:
        """Files with at least one occurrence, without duplicates."""
        return list(dict.fromkeys(o.file for o in self.occurrences))

    def by_file(self) -> Dict[Path, List[VersionOccurrence]]:
        grouped: Dict[Path, List[VersionOccurrence]] = {}
        for occurrence in self.occurrences:
            grouped.setdefault(occurrence.file, []).append(occurrence)
        return grouped
