"""Version-control collaborator backed by the ``git`` command line.

The versioning engine only needs five operations from version control,
described by the :class:`VersionControl` protocol. :class:`GitRepository`
implements them by running ``git`` in the repository root; every call is
sequential and blocking, and a failing command raises
:class:`~verkeeper.exceptions.VersionControlError` without retrying.

The repository is located by walking upward from the project directory
until a ``.git`` marker is found.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from dataclasses import dataclass
from typing import FrozenSet, List, Protocol, Set, Union

from verkeeper.constants import NO_COMMIT_HASH, REPOSITORY_MARKER
from verkeeper.exceptions import RepositoryNotFound, VersionControlError
from verkeeper.utils import get_logger

logger = get_logger("git")

PathLike = Union[str, Path]


@dataclass(frozen=True)
class RepositoryStatus:
    """Uncommitted state of tracked files.

    Attributes:
        has_uncommitted_changes: Whether anything is staged or modified.
        changed_paths: Repository-relative POSIX paths of changed files.
    """

    has_uncommitted_changes: bool
    changed_paths: FrozenSet[str]


class VersionControl(Protocol):
    """What the versioning engine needs from a repository."""

    root: Path

    def status(self) -> RepositoryStatus: ...

    def list_tags(self) -> Set[str]: ...

    def add_to_index(self, path: str) -> None: ...

    def commit(self, message: str) -> None: ...

    def create_tag(self, name: str) -> None: ...


def find_repository_root(start: PathLike) -> Path:
    """Return the closest directory at or above ``start`` holding ``.git``.

    Raises:
        RepositoryNotFound: No marker up to the file-system root.
    """
    current = Path(start).resolve()
    for candidate in (current, *current.parents):
        if (candidate / REPOSITORY_MARKER).exists():
            return candidate
    raise RepositoryNotFound(start)


class GitRepository:
    """A git working tree driven through the ``git`` executable.

    Args:
        root: Working tree root (the directory holding ``.git``).
        executable: Name or path of the ``git`` binary.
    """

    def __init__(self, root: PathLike, *, executable: str = "git") -> None:
        self.root = Path(root).resolve()
        self.executable = executable

    @classmethod
    def discover(cls, start: PathLike, *, executable: str = "git") -> "GitRepository":
        root = find_repository_root(start)
        logger.debug("Using git repository at %s", root)
        return cls(root, executable=executable)

    # ------------------------------------------------------------------
    # VersionControl
    # ------------------------------------------------------------------

    def status(self) -> RepositoryStatus:
        """Return staged and unstaged changes to tracked files.

        Untracked files are not uncommitted changes.
        """
        output = self._run("status", "--porcelain=v1", "-z", "--untracked-files=no")
        changed = _parse_porcelain(output)
        return RepositoryStatus(
            has_uncommitted_changes=bool(changed),
            changed_paths=frozenset(changed),
        )

    def list_tags(self) -> Set[str]:
        output = self._run("tag", "--list")
        return {line.strip() for line in output.splitlines() if line.strip()}

    def add_to_index(self, path: str) -> None:
        self._run("add", "--", path)

    def commit(self, message: str) -> None:
        self._run("commit", "-m", message)

    def create_tag(self, name: str) -> None:
        head = self.commit_hash()
        self._run("tag", name)
        logger.info("Created git tag %s at %s", name, head)

    def commit_hash(self, length: int = 7) -> str:
        """Return the abbreviated hash of ``HEAD``.

        Returns ``NO_HASH`` when the repository has no commits yet.
        """
        try:
            full = self._run("rev-parse", "--verify", "--quiet", "HEAD").strip()
        except VersionControlError as exc:
            # --quiet exits 1 when HEAD does not resolve
            if exc.returncode != 1:
                raise
            full = ""
        if not full:
            return NO_COMMIT_HASH
        return full[:length]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def relative_path(self, path: PathLike) -> str:
        """Return ``path`` relative to the repository root, POSIX style.

        Raises:
            ValueError: ``path`` is outside the repository.
        """
        return Path(path).resolve().relative_to(self.root).as_posix()

    def _run(self, *args: str) -> str:
        command = [self.executable, *args]
        logger.debug("Running: %s", " ".join(command))
        try:
            completed = subprocess.run(
                command,
                cwd=str(self.root),
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as exc:
            raise VersionControlError(
                f"Failed to run {self.executable}: {exc}",
                command=command,
            ) from exc

        if completed.returncode != 0:
            raise VersionControlError(
                f"git {args[0]} failed",
                command=command,
                returncode=completed.returncode,
                stderr=completed.stderr,
            )
        return completed.stdout


def _parse_porcelain(output: str) -> List[str]:
    """Parse ``git status --porcelain=v1 -z`` into changed paths.

    Each entry is ``XY PATH``; renames and copies are followed by an extra
    entry holding the original path, which is skipped.
    """
    paths: List[str] = []
    entries = output.split("\0")
    index = 0
    while index < len(entries):
        entry = entries[index]
        index += 1
        if len(entry) < 4:
            continue
        code, path = entry[:2], entry[3:]
        paths.append(path)
        if "R" in code or "C" in code:
            index += 1
    return paths
