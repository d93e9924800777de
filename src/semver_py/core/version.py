"""Semantic version arithmetic.

Versions handled here are plain ``major.minor.patch`` triples. Shorter
inputs such as the Xcode default ``1.0`` are left-padded with zero
components, keeping the rightmost three, so ``1.0`` reads as ``0.1.0``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from semver_py.exceptions import InvalidVersionError


class BumpType(StrEnum):
    """Version bump level, ordered ``none < patch < minor < major``."""

    NONE = "none"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    @property
    def rank(self) -> int:
        """Position in the bump order, usable as a sort key."""
        return _BUMP_RANKS[self]


_BUMP_RANKS = {
    BumpType.NONE: 0,
    BumpType.PATCH: 1,
    BumpType.MINOR: 2,
    BumpType.MAJOR: 3,
}


@dataclass(frozen=True, order=True)
class Version:
    """An immutable ``major.minor.patch`` version."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a dotted numeric version of one to three components.

        Args:
            text: Version string such as ``"1.2.3"``, ``"1.0"`` or ``"7"``

        Returns:
            Parsed version, left-padded with zeros to three components

        Raises:
            InvalidVersionError: If a component is not a non-negative integer
        """
        parts = text.strip().split(".")
        if not all(part.isdigit() for part in parts):
            raise InvalidVersionError(f"Invalid version '{text}': expected dotted numbers")

        numbers = [0, 0, *(int(part) for part in parts)][-3:]
        return cls(*numbers)

    def bump(self, bump_type: BumpType) -> Version:
        """Return a new version with the given bump applied."""
        if bump_type == BumpType.MAJOR:
            return Version(self.major + 1, 0, 0)
        if bump_type == BumpType.MINOR:
            return Version(self.major, self.minor + 1, 0)
        if bump_type == BumpType.PATCH:
            return Version(self.major, self.minor, self.patch + 1)
        return self

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def increase_version(current_version: str, bump_type: BumpType) -> str:
    """Apply a bump to a version string.

    Any real bump yields exactly three components:
    ``increase_version("1.0", BumpType.MINOR) == "0.2.0"``. A ``NONE``
    bump returns the input untouched so that an unchanged version never
    compares as different from the current one.
    """
    if bump_type == BumpType.NONE:
        return current_version
    return str(Version.parse(current_version).bump(bump_type))
