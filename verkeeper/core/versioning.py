"""
Versioning operations: get, bump and tag.

These are the three entry points the CLI exposes. Each runs synchronously
against the file system and fails fast: the first error aborts the
operation and propagates as a :class:`~verkeeper.exceptions.VerKeeperError`.

A bump walks a fixed sequence of stages::

    IDLE -> SCANNING -> VERIFIED -> REWRITING -> REVERIFIED -> DONE

and ends in ``FAILED`` on any error. The candidate file set is computed once
and reused for the scan and the re-scan, so a file appearing or
disappearing mid-run cannot change what is compared.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from verkeeper.core.git import GitRepository, VersionControl
from verkeeper.core.project import Project
from verkeeper.core.rewriter import AtomicRewriter
from verkeeper.core.scanner import VersionScanner
from verkeeper.core.verifier import VersionVerifier
from verkeeper.models import Increment, SemanticVersion, VersionOccurrence
from verkeeper.constants import (
    COMMIT_MESSAGE_TEMPLATE,
    DEFAULT_PROJECT_VERSION,
    TAG_NAME_TEMPLATE,
)
from verkeeper.exceptions import (
    IncompleteUpdate,
    TagAlreadyExists,
    UncommittedChanges,
    VersionMismatch,
    VersionNotFound,
    VersionUnset,
)
from verkeeper.utils import get_logger

logger = get_logger("versioning")


class BumpStage(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    VERIFIED = "verified"
    REWRITING = "rewriting"
    REVERIFIED = "reverified"
    DONE = "done"
    FAILED = "failed"


@dataclass
class BumpResult:
    """Outcome of :func:`bump`.

    Attributes:
        old: Version before the bump.
        new: Version after the bump.
        occurrences: Declarations of ``old`` that were (or, for a dry run,
            would be) rewritten.
        updated_files: Files actually rewritten; empty for a dry run.
        stage: Final stage reached (``DONE``, or ``VERIFIED`` for a dry run).
    """

    old: SemanticVersion
    new: SemanticVersion
    occurrences: List[VersionOccurrence] = field(default_factory=list)
    updated_files: List[Path] = field(default_factory=list)
    stage: BumpStage = BumpStage.IDLE

    @property
    def dry_run(self) -> bool:
        return self.stage is BumpStage.VERIFIED


class _StageTracker:
    """Record and log the stage a bump is in."""

    def __init__(self) -> None:
        self.stage = BumpStage.IDLE

    def advance(self, stage: BumpStage, detail: str = "") -> None:
        logger.debug(
            "Bump stage %s -> %s%s",
            self.stage.value,
            stage.value,
            f" ({detail})" if detail else "",
        )
        self.stage = stage


# ---------------------------------------------------------------------------
# get
# ---------------------------------------------------------------------------


def get_current_version(project: Project) -> SemanticVersion:
    """Return the version the project declares.

    Raises:
        VersionUnset: The declared version is blank or ``"unspecified"``.
        InvalidVersionFormat: The declared version is not a semantic version.
    """
    declared = (project.version or "").strip()
    if not declared or declared == DEFAULT_PROJECT_VERSION:
        raise VersionUnset(project.version or None)
    return SemanticVersion.parse(declared)


def describe_version(
    project: Project,
) -> Tuple[SemanticVersion, List[VersionOccurrence]]:
    """Return the current version and every place declaring it.

    Raises:
        VersionUnset: The project does not declare a version.
        VersionMismatch: A file declares a different version.
        VersionNotFound: No candidate file declares the version.
    """
    version = get_current_version(project)
    occurrences = VersionVerifier().verify(project, version)
    if not occurrences:
        raise VersionNotFound(str(version))

    for occurrence in occurrences:
        logger.info("Version %s found in %s", version, occurrence.to_display_string())
    return version, occurrences


# ---------------------------------------------------------------------------
# bump
# ---------------------------------------------------------------------------


def bump(
    project: Project,
    increment: Union[Increment, str],
    *,
    dry_run: bool = False,
) -> BumpResult:
    """Increment the project version and rewrite every declaration of it.

    Args:
        project: Project to bump.
        increment: Component to increment.
        dry_run: Stop once every declaration is verified; nothing is written.

    Returns:
        The :class:`BumpResult`.

    Raises:
        VersionUnset: The project does not declare a version.
        VersionMismatch: A file declares a different version; nothing is
            written.
        VersionNotFound: No candidate file declares the current version.
        RewriteFailure: A file could not be swapped; earlier files stay
            rewritten.
        IncompleteUpdate: A file declaring the old version before the rewrite
            does not declare the new one afterwards.
    """
    tracker = _StageTracker()
    try:
        old = get_current_version(project)
        new = old.increment(increment)
        logger.info("Incrementing version %s -> %s", old, new)

        candidates = project.candidate_files()
        verifier = VersionVerifier()

        tracker.advance(BumpStage.SCANNING, str(old))
        occurrences = verifier.find_changes(project, old, new, candidates)
        if not occurrences:
            raise VersionNotFound(str(old))
        tracker.advance(BumpStage.VERIFIED, f"{len(occurrences)} occurrence(s)")

        result = BumpResult(old=old, new=new, occurrences=occurrences)
        if dry_run:
            result.stage = tracker.stage
            return result

        tracker.advance(BumpStage.REWRITING)
        result.updated_files = AtomicRewriter().apply(occurrences)

        scanner = VersionScanner(build_file=project.build_file)
        rescanned = scanner.scan_report(candidates, new)

        found = {o.file for o in rescanned.occurrences}
        missing = [p for p in dict.fromkeys(o.file for o in occurrences) if p not in found]
        if missing:
            raise IncompleteUpdate(missing)
        if rescanned.discrepancies:
            first = rescanned.discrepancies[0]
            raise VersionMismatch(
                file_path=first.file,
                line=first.line,
                expected=first.expected,
                found=first.found,
            )
        tracker.advance(BumpStage.REVERIFIED)

        tracker.advance(BumpStage.DONE)
        result.stage = tracker.stage
        return result
    except Exception:
        tracker.advance(BumpStage.FAILED)
        raise


# ---------------------------------------------------------------------------
# tag
# ---------------------------------------------------------------------------


def tag(
    project: Project,
    repository: Optional[VersionControl] = None,
    *,
    commit: Optional[bool] = None,
) -> str:
    """Create the ``Version_<semver>`` tag for the current version.

    Only files declaring the version may have uncommitted changes. When they
    do and ``commit`` is true, they are committed before tagging.

    Args:
        project: Project to tag.
        repository: Version control to use; discovered upward from the
            project directory if omitted.
        commit: Commit dirty version files first. Defaults to the project's
            ``commit_on_tag`` setting.

    Returns:
        The created tag name.

    Raises:
        RepositoryNotFound: No ``.git`` above the project directory.
        UncommittedChanges: Other files have uncommitted changes.
        TagAlreadyExists: The tag is already present.
        VersionControlError: A git command failed.
    """
    if commit is None:
        commit = project.commit_on_tag

    version = get_current_version(project)
    if repository is None:
        repository = GitRepository.discover(project.directory)

    occurrences = VersionVerifier().verify(project, version)
    version_paths = {
        relative
        for relative in (_relative_path(repository.root, o.file) for o in occurrences)
        if relative is not None
    }

    status = repository.status()
    changed = set(status.changed_paths)
    others = changed - version_paths
    if others:
        raise UncommittedChanges(others)

    tag_name = TAG_NAME_TEMPLATE.format(version=version)
    if tag_name in repository.list_tags():
        raise TagAlreadyExists(tag_name)

    dirty = sorted(changed & version_paths)
    if dirty:
        if commit:
            for path in dirty:
                repository.add_to_index(path)
            repository.commit(COMMIT_MESSAGE_TEMPLATE.format(version=version))
            logger.info("Committed version files: %s", ", ".join(dirty))
        else:
            logger.warning(
                "Tagging with uncommitted version files: %s", ", ".join(dirty)
            )

    repository.create_tag(tag_name)
    return tag_name


def _relative_path(root: Path, path: Path) -> Optional[str]:
    try:
        return Path(path).resolve().relative_to(Path(root).resolve()).as_posix()
    except ValueError:
        return None
