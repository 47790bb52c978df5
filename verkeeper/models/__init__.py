"""
Unified data model exports for verkeeper.

Example:
    >>> from verkeeper.models import SemanticVersion, VersionOccurrence
"""

from __future__ import annotations

from verkeeper.models.semver import Increment, SemanticVersion
from verkeeper.models.occurrence import (
    ScanReport,
    VersionDiscrepancy,
    VersionOccurrence,
)

__all__ = [
    "Increment",
    "SemanticVersion",
    "ScanReport",
    "VersionDiscrepancy",
    "VersionOccurrence",
]
