"""Conventional commit parsing and bump resolution.

A commit header has the form ``type(scope)!: subject``, optionally
followed by a blank line and a free-form body. Inside the body a
``BREAKING CHANGE: <note>`` line marks a breaking change.

Commits whose header does not match, or whose type is not allowed, are
dropped rather than reported: parsing is a filter.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

from semver_py.core.version import BumpType

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from semver_py.config.models import CommitsConfig
    from semver_py.vcs.git import Commit

logger = logging.getLogger(__name__)

# Key used in bump maps and changelog type maps for breaking change notes.
BREAKING_KEY = "breaking"

DEFAULT_ALLOWED_TYPES: tuple[str, ...] = (
    "build",
    "ci",
    "docs",
    "feat",
    "fix",
    "perf",
    "refactor",
    "style",
    "test",
    "chore",
    "revert",
    "bump",
    "init",
)

DEFAULT_BUMP_MAP: dict[str, BumpType] = {
    BREAKING_KEY: BumpType.MAJOR,
    "feat": BumpType.MINOR,
    "fix": BumpType.PATCH,
}

_HEADER_TEMPLATE = (
    r"^(?P<type>{types})"
    r"(?:\((?P<scope>\S+)\))?"
    r"(?P<major>{major})"
    r":\s+(?P<subject>[^\n\r]+)"
    r"(?:\Z|\n\n(?P<body>.*)\Z)"
)

# Header of any type, accepted only with the major marker
UNKNOWN_MAJOR_PATTERN = re.compile(
    _HEADER_TEMPLATE.format(types=r"[\w-]+", major="!"),
    re.MULTILINE | re.DOTALL,
)

BREAKING_NOTE_PATTERN = re.compile(r"^BREAKING CHANGES?: (?P<note>.+)$", re.MULTILINE)


@dataclass(frozen=True)
class ParsedCommit:
    """A commit message classified as a conventional commit.

    Attributes:
        commit_type: Commit type, e.g. ``"feat"``
        subject: Header text after ``type(scope)!:``
        scope: Optional scope from the header
        body: Everything after the first blank line, if any
        breaking: Note from a ``BREAKING CHANGE:`` line in the body
        is_major: True when the header carries the ``!`` marker
        bump: Bump level derived from the fields above and the bump map
        raw_message: The original commit message
        sha: Commit hash, when the message came from git
    """

    commit_type: str
    subject: str
    scope: str | None = None
    body: str | None = None
    breaking: str | None = None
    is_major: bool = False
    bump: BumpType = BumpType.NONE
    raw_message: str = ""
    sha: str = ""


@lru_cache(maxsize=32)
def _header_pattern(allowed_types: tuple[str, ...]) -> re.Pattern[str]:
    types = "|".join(re.escape(commit_type) for commit_type in allowed_types)
    return re.compile(
        _HEADER_TEMPLATE.format(types=types, major="!?"),
        re.MULTILINE | re.DOTALL,
    )


def commit_bump_type(
    commit_type: str,
    *,
    is_major: bool,
    breaking: str | None,
    bump_map: Mapping[str, BumpType],
) -> BumpType:
    """Derive the bump level of a single commit.

    The ``!`` marker always means major. Otherwise a breaking note maps
    through the ``breaking`` key, and anything else through its type.
    """
    if is_major:
        return BumpType.MAJOR
    if breaking is not None:
        return bump_map.get(BREAKING_KEY, BumpType.NONE)
    return bump_map.get(commit_type, BumpType.NONE)


def parse_conventional_commit(
    message: str,
    allowed_types: Sequence[str] = DEFAULT_ALLOWED_TYPES,
    bump_map: Mapping[str, BumpType] = DEFAULT_BUMP_MAP,
    *,
    accept_unknown_major: bool = False,
    sha: str = "",
) -> ParsedCommit | None:
    """Parse one commit message.

    Args:
        message: Full commit message
        allowed_types: Commit types to accept
        bump_map: Bump level per commit type, plus the ``breaking`` key
        accept_unknown_major: Also accept ``type!:`` headers whose type is
            not in ``allowed_types``
        sha: Commit hash to carry along

    Returns:
        The parsed commit, or None if the message is not a conventional
        commit of an accepted type
    """
    match = _header_pattern(tuple(allowed_types)).search(message)
    if match is None and accept_unknown_major:
        match = UNKNOWN_MAJOR_PATTERN.search(message)
    if match is None:
        return None

    body = match.group("body")
    breaking = None
    if body:
        note = BREAKING_NOTE_PATTERN.search(body)
        if note:
            breaking = note.group("note")

    commit_type = match.group("type")
    is_major = bool(match.group("major"))

    return ParsedCommit(
        commit_type=commit_type,
        subject=match.group("subject"),
        scope=match.group("scope"),
        body=body,
        breaking=breaking,
        is_major=is_major,
        bump=commit_bump_type(
            commit_type, is_major=is_major, breaking=breaking, bump_map=bump_map
        ),
        raw_message=message,
        sha=sha,
    )


def parse_commits(commits: Iterable[Commit], config: CommitsConfig) -> list[ParsedCommit]:
    """Parse commits, keeping only conventional commits of accepted types.

    Input order is preserved.
    """
    parsed = []
    total = 0
    for commit in commits:
        total += 1
        pc = parse_conventional_commit(
            commit.message,
            config.allowed_types,
            config.bump_map,
            accept_unknown_major=config.accept_unknown_major,
            sha=commit.sha,
        )
        if pc is None:
            logger.debug(
                "Skipping non-conventional commit %s: %s", commit.short_sha, commit.subject
            )
            continue
        parsed.append(pc)

    logger.debug("Parsed %d of %d commits as conventional", len(parsed), total)
    return parsed


def calculate_bump(
    commits: Iterable[ParsedCommit],
    force_type: BumpType | None = None,
) -> BumpType:
    """Reduce a sequence of commits to a single bump level.

    Args:
        commits: Parsed commits, oldest first
        force_type: Minimum bump level to apply regardless of commits

    Returns:
        The highest bump level found, never lower than ``force_type``
    """
    if force_type == BumpType.MAJOR:
        return BumpType.MAJOR

    result = force_type or BumpType.NONE

    for commit in commits:
        if commit.is_major or commit.bump == BumpType.MAJOR:
            return BumpType.MAJOR
        if commit.bump.rank > result.rank:
            result = commit.bump

    return result


def group_commits(
    commits: Iterable[ParsedCommit],
    section_types: Sequence[str],
) -> dict[str | None, list[ParsedCommit]]:
    """Group commits into changelog buckets.

    One bucket is created per entry of ``section_types``, in order, plus a
    trailing ``None`` bucket for major commits whose type has no section.
    A commit with a breaking note lands in the ``breaking`` bucket (when
    that section exists) in addition to its own type's bucket.
    """
    result: dict[str | None, list[ParsedCommit]] = {key: [] for key in section_types}
    result[None] = []

    for commit in commits:
        if commit.breaking is not None and BREAKING_KEY in result:
            result[BREAKING_KEY].append(commit)

        if commit.commit_type not in section_types:
            if commit.is_major:
                result[None].append(commit)
            continue

        result[commit.commit_type].append(commit)

    return result
