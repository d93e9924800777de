"""Core business logic for semver-py.

This module contains the fundamental building blocks:
- Version arithmetic on ``major.minor.patch`` triples
- Conventional commit parsing and bump resolution
- Changelog rendering
- Versioning info orchestration (see ``semver_py.core.versioning``)
"""

from __future__ import annotations

from semver_py.core.changelog import build_changelog, write_changelog
from semver_py.core.commits import (
    ParsedCommit,
    calculate_bump,
    group_commits,
    parse_commits,
    parse_conventional_commit,
)
from semver_py.core.version import BumpType, Version, increase_version

__all__ = [
    # Version
    "BumpType",
    # Commits
    "ParsedCommit",
    "Version",
    # Changelog
    "build_changelog",
    "calculate_bump",
    "group_commits",
    "increase_version",
    "parse_commits",
    "parse_conventional_commit",
    "write_changelog",
]
