"""
Semantic version value type for verkeeper.

:class:`SemanticVersion` is an immutable ``MAJOR.MINOR.PATCH[-PRE][+BUILD]``
value with semver 2.0 ordering. Its string form is the exact text the
scanner looks for and the rewriter writes, so ``parse(str(v)) == v`` holds
for every valid version.

Short forms such as ``"2.4"`` are accepted as well. The number of written
numeric components is remembered as :attr:`SemanticVersion.precision` so
that the short form round-trips; missing components count as ``0`` for
equality and ordering.
"""

from __future__ import annotations

import re
from enum import Enum
from functools import total_ordering
from dataclasses import dataclass, field
from typing import Any, Tuple, Union

from verkeeper.exceptions import InvalidVersionFormat

Identifier = Union[int, str]

_VERSION_PATTERN = re.compile(
    r"(?P<major>0|[1-9][0-9]*)"
    r"(?:\.(?P<minor>0|[1-9][0-9]*)"
    r"(?:\.(?P<patch>0|[1-9][0-9]*))?)?"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
)

_IDENTIFIER_PATTERN = re.compile(r"[0-9A-Za-z-]+")


class Increment(str, Enum):
    """Version component to increment."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    @property
    def index(self) -> int:
        return _INCREMENT_ORDER.index(self)


_INCREMENT_ORDER = (Increment.MAJOR, Increment.MINOR, Increment.PATCH)


def _is_numeric(identifier: str) -> bool:
    return identifier.isascii() and identifier.isdigit()


def _prerelease_identifier(text: str, *, source: str) -> Identifier:
    """Convert one dot-separated pre-release identifier."""
    if not _IDENTIFIER_PATTERN.fullmatch(text):
        raise InvalidVersionFormat(source, reason=f"invalid identifier {text!r}")
    if _is_numeric(text):
        if len(text) > 1 and text.startswith("0"):
            raise InvalidVersionFormat(
                source,
                reason=f"numeric identifier {text!r} has a leading zero",
            )
        return int(text)
    return text


def _normalize_identifier(identifier: Identifier) -> Identifier:
    if isinstance(identifier, bool):
        raise InvalidVersionFormat(repr(identifier), reason="invalid identifier")
    if isinstance(identifier, int):
        if identifier < 0:
            raise InvalidVersionFormat(
                str(identifier), reason="numeric identifier is negative"
            )
        return identifier
    return _prerelease_identifier(identifier, source=identifier)


def _identifier_key(identifier: Identifier) -> Tuple[int, Any]:
    # numeric identifiers sort before alphanumeric ones
    if isinstance(identifier, int):
        return (0, identifier)
    return (1, identifier)


@total_ordering
@dataclass(frozen=True, eq=False)
class SemanticVersion:
    """An immutable semantic version.

    Attributes:
        major: Major version number.
        minor: Minor version number.
        patch: Patch version number.
        prerelease: Pre-release identifiers (``int`` for numeric ones).
        build: Build metadata identifiers; ignored for comparisons.
        precision: Number of numeric components written (1 to 3).

    Example::

        >>> v = SemanticVersion.parse("1.2.3-beta.2+exp.sha.5114f85")
        >>> v.prerelease
        ('beta', 2)
        >>> str(v.increment_minor())
        '1.3.0'
    """

    major: int
    minor: int = 0
    patch: int = 0
    prerelease: Tuple[Identifier, ...] = ()
    build: Tuple[str, ...] = ()
    precision: int = field(default=3, repr=False)

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidVersionFormat(
                    str(value),
                    reason=f"{name} must be a non-negative integer",
                )

        if self.precision not in (1, 2, 3):
            raise InvalidVersionFormat(
                str(self.precision), reason="precision must be 1, 2 or 3"
            )
        if self.precision < 3 and self.patch:
            raise InvalidVersionFormat(
                f"{self.major}.{self.minor}.{self.patch}",
                reason="patch is set but not written",
            )
        if self.precision < 2 and self.minor:
            raise InvalidVersionFormat(
                f"{self.major}.{self.minor}",
                reason="minor is set but not written",
            )

        prerelease = tuple(_normalize_identifier(i) for i in self.prerelease)
        object.__setattr__(self, "prerelease", prerelease)

        for identifier in self.build:
            if not _IDENTIFIER_PATTERN.fullmatch(str(identifier)):
                raise InvalidVersionFormat(
                    str(identifier), reason="invalid build identifier"
                )
        object.__setattr__(self, "build", tuple(str(b) for b in self.build))

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> "SemanticVersion":
        """Parse ``MAJOR[.MINOR[.PATCH]][-PRERELEASE][+BUILD]``.

        Args:
            text: Version text. Surrounding whitespace is not accepted.

        Returns:
            The parsed version.

        Raises:
            InvalidVersionFormat: ``text`` is not a valid semantic version.
        """
        if not isinstance(text, str):
            raise InvalidVersionFormat(repr(text), reason="not a string")

        match = _VERSION_PATTERN.fullmatch(text)
        if match is None:
            raise InvalidVersionFormat(
                text,
                reason="expected MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]",
            )

        groups = match.groupdict()
        precision = 1 + (groups["minor"] is not None) + (groups["patch"] is not None)

        prerelease: Tuple[Identifier, ...] = ()
        if groups["prerelease"] is not None:
            prerelease = tuple(
                _prerelease_identifier(part, source=text)
                for part in groups["prerelease"].split(".")
            )

        build: Tuple[str, ...] = ()
        if groups["build"] is not None:
            build = tuple(groups["build"].split("."))

        return cls(
            major=int(groups["major"]),
            minor=int(groups["minor"] or 0),
            patch=int(groups["patch"] or 0),
            prerelease=prerelease,
            build=build,
            precision=precision,
        )

    # ------------------------------------------------------------------
    # Increments
    # ------------------------------------------------------------------

    def increment(self, part: Union[Increment, str]) -> "SemanticVersion":
        """Return a new version with ``part`` incremented.

        Lower components reset to ``0``; pre-release and build metadata are
        cleared. On a short form the lowest *written* component stands in
        for one that is not written, so ``2.4`` patch-increments to ``2.5``.
        """
        if not isinstance(part, Increment):
            part = Increment(part.lower())
        index = min(part.index, self.precision - 1)
        components = [self.major, self.minor, self.patch]
        components[index] += 1
        for lower in range(index + 1, 3):
            components[lower] = 0

        return SemanticVersion(
            major=components[0],
            minor=components[1],
            patch=components[2],
            precision=self.precision,
        )

    def increment_major(self) -> "SemanticVersion":
        return self.increment(Increment.MAJOR)

    def increment_minor(self) -> "SemanticVersion":
        return self.increment(Increment.MINOR)

    def increment_patch(self) -> "SemanticVersion":
        return self.increment(Increment.PATCH)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def _key(self) -> Tuple[Any, ...]:
        if self.prerelease:
            pre_key: Tuple[Any, ...] = (
                0,
                tuple(_identifier_key(i) for i in self.prerelease),
            )
        else:
            pre_key = (1, ())
        return (self.major, self.minor, self.patch) + pre_key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        text = ".".join(
            str(c) for c in (self.major, self.minor, self.patch)[: self.precision]
        )
        if self.prerelease:
            text += "-" + ".".join(str(i) for i in self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text

    def __repr__(self) -> str:
        return f"SemanticVersion({str(self)!r})"
