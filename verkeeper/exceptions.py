"""
Custom exception hierarchy for verkeeper.

This module defines structured exception types used across verkeeper.
All exceptions inherit from :class:`VerKeeperError` and carry optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.

Every error here is fatal to the current invocation. None of them are
retried; the CLI reports the error and exits with status ``1``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, List, Mapping, MutableMapping, Optional, Union

PathLike = Union[str, Path]


class VerKeeperError(Exception):
    """Base exception for all verkeeper errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _path_list(paths: Iterable[PathLike]) -> List[str]:
    return [str(p) for p in paths]


# ---------------------------------------------------------------------------
# Version values
# ---------------------------------------------------------------------------


class InvalidVersionFormat(VerKeeperError):
    """Raised when text is not a ``MAJOR.MINOR.PATCH[-PRE][+BUILD]`` version.

    Args:
        text: The rejected input.
        reason: Which rule the input broke.
    """

    __slots__ = ("text", "reason")

    def __init__(self, text: str, *, reason: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "reason", reason)
        super().__init__(f"Invalid version format: {text!r}", details)
        self.text = text
        self.reason = reason


class VersionUnset(VerKeeperError):
    """Raised when the project does not declare a version."""

    __slots__ = ("declared",)

    def __init__(self, declared: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {}
        if declared:
            details["declared"] = declared
        super().__init__(
            "Project version information is unset. "
            "Please set it in the build file, e.g. `version = \"1.0.0\"`",
            details,
        )
        self.declared = declared


class VersionNotFound(VerKeeperError):
    """Raised when no candidate file declares the project version."""

    __slots__ = ("version",)

    def __init__(self, version: str) -> None:
        super().__init__(
            "Expecting files with version information, but none were found",
            {"version": version},
        )
        self.version = version


class VersionMismatch(VerKeeperError):
    """Raised when a located file declares a different version than expected.

    Args:
        file_path: File holding the disagreeing declaration.
        line: 1-based line number of the declaration.
        expected: Version every file should declare.
        found: Version actually declared on that line.
    """

    __slots__ = ("file_path", "line", "expected", "found")

    def __init__(
        self,
        *,
        file_path: PathLike,
        line: int,
        expected: str,
        found: str,
    ) -> None:
        super().__init__(
            f"Version information mismatch, expected {expected}, got {found}",
            {"file": str(file_path), "line": line},
        )
        self.file_path = Path(file_path)
        self.line = line
        self.expected = expected
        self.found = found


# ---------------------------------------------------------------------------
# Rewriting
# ---------------------------------------------------------------------------


class RewriteFailure(VerKeeperError):
    """Raised when a temporary file cannot be swapped into place.

    Files already rewritten are *not* rolled back; ``updated`` and
    ``pending`` enumerate exactly which files changed and which did not.

    Args:
        file_path: File whose rewrite failed.
        updated: Files already rewritten before the failure.
        pending: Files not rewritten (including ``file_path``).
        original_error: Exception that triggered the failure.
    """

    __slots__ = ("file_path", "updated", "pending", "original_error")

    def __init__(
        self,
        *,
        file_path: PathLike,
        updated: Iterable[PathLike] = (),
        pending: Iterable[PathLike] = (),
        original_error: Optional[Exception] = None,
    ) -> None:
        self.file_path = Path(file_path)
        self.updated: List[Path] = [Path(p) for p in updated]
        self.pending: List[Path] = [Path(p) for p in pending]
        self.original_error = original_error

        details: MutableMapping[str, Any] = {"file": str(self.file_path)}
        details["updated"] = _path_list(self.updated)
        details["pending"] = _path_list(self.pending)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )
        super().__init__(f"Failed to replace file {self.file_path}", details)


class IncompleteUpdate(VerKeeperError):
    """Raised when a re-scan after rewriting misses previously found files."""

    __slots__ = ("files",)

    def __init__(self, files: Iterable[PathLike]) -> None:
        self.files: List[Path] = [Path(p) for p in files]
        super().__init__(
            "Version information in files was not successfully updated",
            {"files": ", ".join(_path_list(self.files))},
        )


# ---------------------------------------------------------------------------
# Version control
# ---------------------------------------------------------------------------


class RepositoryNotFound(VerKeeperError):
    """Raised when no repository marker exists above the project directory."""

    __slots__ = ("start",)

    def __init__(self, start: PathLike) -> None:
        super().__init__("Cannot find '.git' directory", {"start": str(start)})
        self.start = Path(start)


class UncommittedChanges(VerKeeperError):
    """Raised when files other than version files have uncommitted changes."""

    __slots__ = ("files",)

    def __init__(self, files: Iterable[str]) -> None:
        self.files: List[str] = sorted(files)
        super().__init__(
            "Cannot create a tag while files have not been committed",
            {"files": ", ".join(self.files)},
        )


class TagAlreadyExists(VerKeeperError):
    """Raised when the version tag is already present in the repository."""

    __slots__ = ("tag",)

    def __init__(self, tag: str) -> None:
        super().__init__(
            f"Tag {tag} already exists. "
            "Please delete the old tag in order to continue."
        )
        self.tag = tag


class VersionControlError(VerKeeperError):
    """Raised when a git command fails.

    Args:
        message: Error description.
        command: Command line that was executed.
        returncode: Process exit status, if the process ran.
        stderr: Captured error output.
    """

    __slots__ = ("command", "returncode", "stderr")

    def __init__(
        self,
        message: str,
        *,
        command: Optional[Iterable[str]] = None,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "command", " ".join(command) if command else None)
        _add_if(details, "returncode", returncode)
        _add_if(details, "stderr", stderr.strip() if stderr else None)
        super().__init__(message, details)
        self.command = list(command) if command else []
        self.returncode = returncode
        self.stderr = stderr


# ---------------------------------------------------------------------------
# Configuration and files
# ---------------------------------------------------------------------------


class ConfigError(VerKeeperError):
    """Raised when configuration cannot be loaded or is invalid.

    Args:
        message: Error description.
        config_path: Path of the offending configuration file.
        option: Name of the offending option, if any.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)
        super().__init__(message, details)
        self.config_path = config_path
        self.option = option


class FileOperationError(VerKeeperError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/write/validate).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error
