"""Version-consistency verification.

The scanner treats a file declaring another version as a soft diagnostic.
The verifier turns that into a hard stop: before anything is rewritten,
every matched value in the candidate set must be the expected version.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Union

from verkeeper.core.project import Project
from verkeeper.core.scanner import VersionScanner
from verkeeper.exceptions import VersionMismatch
from verkeeper.models import SemanticVersion, VersionOccurrence
from verkeeper.utils import get_logger

PathLike = Union[str, Path]


class VersionVerifier:
    """Check that every declaration in a project agrees on one version."""

    def __init__(self) -> None:
        self.logger = get_logger("verifier")

    def verify(
        self,
        project: Project,
        version: SemanticVersion,
        files: Optional[Iterable[PathLike]] = None,
    ) -> List[VersionOccurrence]:
        """Return every declaration of ``version`` in the project.

        Calling it twice without a change on disk yields the same result.

        Args:
            project: Project whose candidate files are scanned.
            version: Version every declaration must carry.
            files: Candidate files to use instead of
                :meth:`Project.candidate_files`.

        Raises:
            VersionMismatch: A matched declaration carries another version.
        """
        return self.find_changes(project, version, version, files)

    def find_changes(
        self,
        project: Project,
        old_version: SemanticVersion,
        new_version: SemanticVersion,
        files: Optional[Iterable[PathLike]] = None,
    ) -> List[VersionOccurrence]:
        """Verify against ``old_version`` and prepare lines for ``new_version``.

        Raises:
            VersionMismatch: For the first disagreeing declaration; all of
                them are logged.
        """
        candidates = project.candidate_files() if files is None else list(files)
        scanner = VersionScanner(build_file=project.build_file)
        report = scanner.scan_report(candidates, old_version, new_version)

        if report.discrepancies:
            for discrepancy in report.discrepancies:
                self.logger.error(
                    "Version information mismatch: %s",
                    discrepancy.to_display_string(),
                )
            first = report.discrepancies[0]
            raise VersionMismatch(
                file_path=first.file,
                line=first.line,
                expected=first.expected,
                found=first.found,
            )

        return report.occurrences
