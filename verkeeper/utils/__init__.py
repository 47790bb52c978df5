"""
Utility helpers for verkeeper.

This package provides reusable utilities used across verkeeper:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Line-preserving, atomic file helpers

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from verkeeper.utils.filesystem import (
    detect_line_terminator,
    find_files,
    find_readme,
    read_lines,
    replace_lines,
    strip_terminator,
)

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from verkeeper.utils.logger import (
    get_logger,
    is_logging_configured,
    level_for_verbosity,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from verkeeper.utils.console import (
    get_console,
    print_error,
    print_info,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

__all__ = [
    # Console
    "get_console",
    "print_error",
    "print_info",
    "print_success",
    "print_table",
    "print_warning",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    "level_for_verbosity",
    "is_logging_configured",
    # Filesystem
    "read_lines",
    "replace_lines",
    "strip_terminator",
    "detect_line_terminator",
    "find_files",
    "find_readme",
]
