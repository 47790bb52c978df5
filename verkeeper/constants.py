"""
Centralized constants for verkeeper.

This module defines immutable configuration values used across verkeeper,
including project discovery defaults, tag naming, file reading limits and
logging formats. All values are intended to be treated as read-only.
"""

from typing import Final, Sequence

# ---------------------------------------------------------------------------
# Project discovery
# ---------------------------------------------------------------------------

#: Build descriptor file names, in lookup order.
BUILD_FILE_NAMES: Final[Sequence[str]] = (
    "build.gradle.kts",
    "build.gradle",
)

#: Documentation file scanned next to the build descriptor (case-insensitive).
README_FILE_NAME: Final[str] = "readme.md"

#: Placeholder the build tool reports when no version was declared.
DEFAULT_PROJECT_VERSION: Final[str] = "unspecified"

#: Source directories scanned when the configuration does not name any.
DEFAULT_SOURCE_DIRS: Final[Sequence[str]] = ("src", "test")

#: Whether the README next to the build descriptor is scanned by default.
DEFAULT_SCAN_README: Final[bool] = True

#: Whether ``tag`` commits dirty version files before tagging by default.
DEFAULT_COMMIT_ON_TAG: Final[bool] = True

# ---------------------------------------------------------------------------
# Version control
# ---------------------------------------------------------------------------

#: Directory marking the root of a git repository.
REPOSITORY_MARKER: Final[str] = ".git"

#: Tag name template. ``{version}`` is the canonical semantic version.
TAG_NAME_TEMPLATE: Final[str] = "Version_{version}"

#: Commit message used when version files are committed before tagging.
COMMIT_MESSAGE_TEMPLATE: Final[str] = "Version {version}"

#: Reported instead of a commit hash when the repository has no commits.
NO_COMMIT_HASH: Final[str] = "NO_HASH"

# ---------------------------------------------------------------------------
# File handling
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when scanning candidate files.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

#: Chunk size used while looking for the first line terminator.
TERMINATOR_PROBE_SIZE: Final[int] = 4096

#: Line terminator used for files that contain none.
DEFAULT_LINE_TERMINATOR: Final[str] = "\n"

#: Encoding used for every scanned and rewritten file.
FILE_ENCODING: Final[str] = "utf-8"

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
