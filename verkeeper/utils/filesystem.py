"""
Filesystem utilities for verkeeper.

This module provides the helpers used to read candidate files line by line,
discover the line terminator a file uses, and rewrite selected lines through
a temporary file that is atomically swapped into place. All filesystem
errors are normalized to ``FileOperationError``.

Files are always opened with ``newline=""`` so line terminators are neither
translated on read nor on write.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Union

from verkeeper.utils.logger import get_logger
from verkeeper.exceptions import FileOperationError
from verkeeper.constants import (
    DEFAULT_LINE_TERMINATOR,
    FILE_ENCODING,
    MAX_FILE_SIZE,
    README_FILE_NAME,
    TERMINATOR_PROBE_SIZE,
)

logger = get_logger("filesystem")

PathLike = Union[str, Path]

_TERMINATOR_CHARS = "\r\n"


def _validated_file(path: Path, *, max_size: Optional[int] = MAX_FILE_SIZE) -> Path:
    """Validate and resolve a file path."""
    if not path.exists():
        raise FileOperationError(
            f"File not found: {path}",
            file_path=str(path),
            operation="read",
        )
    if not path.is_file():
        raise FileOperationError(
            f"Not a file: {path}",
            file_path=str(path),
            operation="read",
        )

    size = path.stat().st_size
    if max_size is not None and size > max_size:
        raise FileOperationError(
            f"File too large: {size} bytes (max {max_size})",
            file_path=str(path),
            operation="read",
        )
    return path.resolve()


def strip_terminator(line: str) -> str:
    """Return ``line`` without its trailing ``\\r\\n``, ``\\n`` or ``\\r``."""
    return line.rstrip(_TERMINATOR_CHARS)


def read_lines(file_path: PathLike) -> List[str]:
    """Read a text file into lines, each keeping its own terminator.

    ``\\r\\n``, ``\\n`` and lone ``\\r`` all end a line; no other character
    does.

    Raises:
        FileOperationError: The file is missing, too large or unreadable.
    """
    path = _validated_file(Path(file_path))
    try:
        with open(path, "r", encoding=FILE_ENCODING, newline="") as fh:
            return fh.readlines()
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def detect_line_terminator(file_path: PathLike) -> str:
    """Return the first line terminator actually present in a file.

    Reads only as far as needed to see the first terminator. A ``\\r`` at
    the end of a chunk is resolved by looking at the next chunk.

    Returns:
        ``"\\r\\n"``, ``"\\n"`` or ``"\\r"``; ``"\\n"`` when the file has no
        terminator at all.
    """
    path = Path(file_path)
    try:
        with open(path, "rb") as fh:
            pending_cr = False
            while True:
                chunk = fh.read(TERMINATOR_PROBE_SIZE)
                if not chunk:
                    return "\r" if pending_cr else DEFAULT_LINE_TERMINATOR
                if pending_cr:
                    return "\r\n" if chunk.startswith(b"\n") else "\r"

                cr = chunk.find(b"\r")
                lf = chunk.find(b"\n")
                if lf != -1 and (cr == -1 or lf < cr):
                    return "\n"
                if cr != -1:
                    if cr + 1 < len(chunk):
                        return "\r\n" if chunk[cr + 1 : cr + 2] == b"\n" else "\r"
                    pending_cr = True
    except OSError as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def replace_lines(
    file_path: PathLike,
    replacements: Mapping[int, str],
    *,
    terminator: Optional[str] = None,
) -> None:
    """Atomically replace whole lines of a file.

    Every line is copied verbatim except those whose 1-based number is a key
    of ``replacements``. A replaced line is written with ``terminator``
    (detected from the file when omitted), or with no terminator if the
    original line had none. The content goes to a temporary file next to the
    original, which then replaces the original in one rename.

    Args:
        file_path: File to rewrite.
        replacements: Line number to new line text (without terminator).
        terminator: Terminator for replaced lines.

    Raises:
        FileOperationError: A line number does not exist, or the file cannot
            be read, written or swapped.
    """
    path = Path(file_path)
    lines = read_lines(path)

    missing = sorted(n for n in replacements if n < 1 or n > len(lines))
    if missing:
        raise FileOperationError(
            f"Line(s) {', '.join(map(str, missing))} not found",
            file_path=str(path),
            operation="write",
        )

    if terminator is None:
        terminator = detect_line_terminator(path)

    output: List[str] = []
    for number, line in enumerate(lines, start=1):
        if number in replacements:
            ending = terminator if strip_terminator(line) != line else ""
            output.append(replacements[number] + ending)
        else:
            output.append(line)

    _atomic_write(path, output)


def _atomic_write(target: Path, lines: Iterable[str]) -> None:
    """Write lines to a sibling temporary file, then replace ``target``."""
    temp_path: Optional[Path] = None

    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding=FILE_ENCODING,
            newline="",
            dir=str(target.parent),
            delete=False,
            prefix=f".{target.name}.",
            suffix=".tmp",
        ) as tmp:
            temp_path = Path(tmp.name)
            tmp.writelines(lines)
            tmp.flush()
            os.fsync(tmp.fileno())

        shutil.copymode(target, temp_path)
        temp_path.replace(target)

    except Exception as exc:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
                logger.debug("Cleaned up temporary file: %s", temp_path)
            except OSError as cleanup_exc:
                logger.warning(
                    "Failed to clean up temporary file %s: %s",
                    temp_path,
                    cleanup_exc,
                )

        raise FileOperationError(
            f"Atomic write failed: {exc}",
            file_path=str(target),
            operation="write",
            original_error=exc,
        ) from exc


def find_readme(directory: PathLike) -> Optional[Path]:
    """Return the ``README.md`` in ``directory``, matched case-insensitively."""
    root = Path(directory)
    if not root.is_dir():
        return None

    for entry in sorted(root.iterdir()):
        if entry.name.lower() == README_FILE_NAME and entry.is_file():
            return entry
    return None


def find_files(directory: PathLike, extensions: Iterable[str]) -> List[Path]:
    """Recursively find files under ``directory`` with one of ``extensions``."""
    root = Path(directory)
    if not root.is_dir():
        return []

    wanted = {ext.lower() for ext in extensions}
    return sorted(
        path
        for path in root.rglob("*")
        if path.suffix.lower() in wanted and path.is_file()
    )
