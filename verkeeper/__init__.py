"""
verkeeper — keep a project's declared version in sync everywhere.

verkeeper discovers the version declared by a Java/Kotlin project, checks
that every place repeating it (``getVersion()`` methods, ``const val
version`` declarations, the Gradle build file and the README dependency
snippets) agrees, rewrites all of them atomically when the version is
bumped, and records the result as a ``Version_<semver>`` git tag.

Typical library usage::

    from verkeeper import Increment, bump, load_project

    project = load_project(".")
    result = bump(project, Increment.PATCH)
    print(result.new)
"""

from __future__ import annotations

from verkeeper.__version__ import __version__
from verkeeper.models import SemanticVersion, VersionOccurrence
from verkeeper.core import (
    Increment,
    Project,
    bump,
    describe_version,
    get_current_version,
    load_project,
    tag,
)

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "verkeeper Contributors"
__license__ = "Apache-2.0"
__description__ = "Version discovery, synchronization and tagging for JVM projects."

__all__ = [
    "__version__",
    "Increment",
    "Project",
    "SemanticVersion",
    "VersionOccurrence",
    "bump",
    "describe_version",
    "get_current_version",
    "load_project",
    "tag",
]
