from __future__ import annotations

from verkeeper.models import Increment
from verkeeper.core.scanner import VersionScanner
from verkeeper.core.verifier import VersionVerifier
from verkeeper.core.rewriter import AtomicRewriter
from verkeeper.core.patterns import Dialect, ReadmeSection
from verkeeper.core.project import Project, load_project
from verkeeper.core.git import GitRepository, RepositoryStatus, VersionControl
from verkeeper.core.versioning import (
    BumpResult,
    BumpStage,
    bump,
    describe_version,
    get_current_version,
    tag,
)

__all__ = [
    "AtomicRewriter",
    "BumpResult",
    "BumpStage",
    "Dialect",
    "GitRepository",
    "Increment",
    "Project",
    "ReadmeSection",
    "RepositoryStatus",
    "VersionControl",
    "VersionScanner",
    "VersionVerifier",
    "bump",
    "describe_version",
    "get_current_version",
    "load_project",
    "tag",
]
