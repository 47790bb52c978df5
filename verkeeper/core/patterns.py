"""Pattern catalog: where a version is declared, per file kind.

Matching is line oriented. Nothing here parses Java, Kotlin, Groovy or
Markdown; each file kind has a few regular expressions that recognise the
lines declaring the project version.

Source dialects
    Each :class:`Dialect` carries *header* patterns (a line introducing a
    version-returning function), a *value* pattern (the ``return "X"`` line
    that follows a header) and *inline* patterns (a declaration carrying the
    literal on the same line). Adding a dialect means adding a member.

Build descriptor
    :data:`BUILD_VERSION_PATTERN` must match the *whole* trimmed line, so
    lines like ``id("org.example.plugin") version "1.2"`` never count.

README
    :class:`ReadmeSection` describes the ``Maven Info`` and ``Gradle Info``
    sections, each a heading followed by a fenced code block.

A line that is a comment for its file kind never matches anything.

All patterns are compiled once at import time and never mutated.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from dataclasses import dataclass
from typing import NamedTuple, Optional, Pattern, Sequence, Tuple

#: Single-line comment marker shared by Java, Kotlin and Gradle files.
LINE_COMMENT: str = "//"

#: Comment opener inside the Maven (XML) README block.
XML_COMMENT: str = "<!--"

#: Fenced code block marker in Markdown (only three ticks are required).
FENCE: str = "```"

_VERSION = r"(?P<version>[^\"]*)"

# return "1.0.0"
RETURN_VALUE_PATTERN: Pattern[str] = re.compile(r"\breturn\s+\"" + _VERSION + r"\"")

# any return statement; one without a literal ends the version function
RETURN_KEYWORD_PATTERN: Pattern[str] = re.compile(r"\breturn\b")

# version = "1.0.0" / project.version = '1.0.0' / const val version = "1.0.0"
BUILD_VERSION_PATTERN: Pattern[str] = re.compile(
    r"(?:project\s*\.\s*|const\s+(?:val\s+)?)?version\s*=\s*"
    r"(?P<quote>['\"])(?P<version>[^'\"]*)(?P=quote)\s*;?"
)

# <version>3.14</version>
MAVEN_VERSION_PATTERN: Pattern[str] = re.compile(
    r"<version>\s*(?P<version>[^<\s]*)\s*</version>"
)

# compile 'com.dorkbox:SystemTray:3.14'
GRADLE_COORDINATE_PATTERN: Pattern[str] = re.compile(
    r"(?P<quote>['\"])[^'\"\s:]+:[^'\"\s:]+:(?P<version>[^'\"\s:]+)(?P=quote)"
)


class LineMatch(NamedTuple):
    """A captured version literal and its span within the line."""

    version: str
    start: int
    end: int

    def splice(self, line: str, replacement: str) -> str:
        """Return ``line`` with the captured span replaced."""
        return line[: self.start] + replacement + line[self.end :]


def capture(pattern: Pattern[str], line: str, pos: int = 0) -> Optional[LineMatch]:
    """Search ``line`` for ``pattern`` and return its ``version`` group."""
    match = pattern.search(line, pos)
    if match is None:
        return None
    return LineMatch(match.group("version"), match.start("version"), match.end("version"))


def is_comment(line: str, markers: Sequence[str] = (LINE_COMMENT,)) -> bool:
    """Return ``True`` if the trimmed line starts with a comment marker."""
    stripped = line.lstrip()
    return any(stripped.startswith(marker) for marker in markers)


def is_fence(line: str) -> bool:
    return line.strip().startswith(FENCE)


def match_build_line(line: str) -> Optional[LineMatch]:
    """Match a build descriptor version assignment spanning the whole line."""
    if is_comment(line):
        return None

    stripped = line.strip()
    match = BUILD_VERSION_PATTERN.fullmatch(stripped)
    if match is None:
        return None

    offset = len(line) - len(line.lstrip())
    return LineMatch(
        match.group("version"),
        offset + match.start("version"),
        offset + match.end("version"),
    )


# ---------------------------------------------------------------------------
# Source dialects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DialectPatterns:
    extensions: Tuple[str, ...]
    headers: Tuple[Pattern[str], ...]
    value: Pattern[str]
    inline: Tuple[Pattern[str], ...]
    comment_markers: Tuple[str, ...] = (LINE_COMMENT,)


class Dialect(Enum):
    """Supported source dialects and their version patterns."""

    JAVA = DialectPatterns(
        extensions=(".java",),
        headers=(
            # String getVersion() {
            re.compile(r"\bString\s+getVersion\s*\(\s*\)\s*(?:\{|$)"),
        ),
        value=RETURN_VALUE_PATTERN,
        inline=(
            # static final String VERSION = "1.0.0";
            re.compile(
                r"\b(?:static\s+final|final\s+static)\s+String\s+(?i:version)\s*=\s*\""
                + _VERSION
                + r"\""
            ),
        ),
    )

    KOTLIN = DialectPatterns(
        extensions=(".kt",),
        headers=(
            # fun getVersion() : String {
            re.compile(r"\bfun\s+getVersion\s*\(\s*\)\s*:\s*String\s*(?:\{|$)"),
        ),
        value=RETURN_VALUE_PATTERN,
        inline=(
            # const val version = "1.0.0"
            re.compile(
                r"\bconst\s+val\s+(?i:version)\s*(?::\s*String\s*)?=\s*\""
                + _VERSION
                + r"\""
            ),
            # fun getVersion(): String = "1.0.0"
            re.compile(
                r"\bfun\s+getVersion\s*\(\s*\)\s*(?::\s*String\s*)?=\s*\""
                + _VERSION
                + r"\""
            ),
        ),
    )

    @property
    def extensions(self) -> Tuple[str, ...]:
        return self.value.extensions

    @property
    def comment_markers(self) -> Tuple[str, ...]:
        return self.value.comment_markers

    @classmethod
    def for_path(cls, path: Path) -> Optional["Dialect"]:
        """Return the dialect owning ``path``'s extension, if any."""
        suffix = path.suffix.lower()
        for dialect in cls:
            if suffix in dialect.extensions:
                return dialect
        return None

    def match_inline(self, line: str) -> Optional[LineMatch]:
        for pattern in self.value.inline:
            found = capture(pattern, line)
            if found is not None:
                return found
        return None

    def match_header(self, line: str) -> Optional[int]:
        """Return the end offset of a header on ``line``, or ``None``."""
        for pattern in self.value.headers:
            match = pattern.search(line)
            if match is not None:
                return match.end()
        return None

    def match_value(self, line: str, pos: int = 0) -> Optional[LineMatch]:
        return capture(self.value.value, line, pos)


# ---------------------------------------------------------------------------
# README sections
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SectionPatterns:
    heading: str
    value: Pattern[str]
    comment_markers: Tuple[str, ...]


class ReadmeSection(Enum):
    """Dependency snippets in the README that repeat the version."""

    MAVEN = SectionPatterns(
        heading="Maven Info",
        value=MAVEN_VERSION_PATTERN,
        comment_markers=(XML_COMMENT,),
    )
    GRADLE = SectionPatterns(
        heading="Gradle Info",
        value=GRADLE_COORDINATE_PATTERN,
        comment_markers=(LINE_COMMENT,),
    )

    @property
    def heading(self) -> str:
        return self.value.heading

    def is_heading(self, line: str) -> bool:
        """Match ``Maven Info`` as well as ``## Maven Info``."""
        return line.strip().lstrip("#").strip() == self.value.heading

    def match_value(self, line: str) -> Optional[LineMatch]:
        if is_comment(line, self.value.comment_markers):
            return None
        return capture(self.value.value, line)
