"""Changelog generation from parsed commits.

A changelog section starts with a ``## <version> (<date>)`` title and
lists commits under one ``### <title>:`` heading per configured type.
Major commits of a type without a heading are listed last, under an
empty heading line.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from semver_py.core.commits import BREAKING_KEY, group_commits
from semver_py.exceptions import ChangelogError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

    from semver_py.core.commits import ParsedCommit

logger = logging.getLogger(__name__)

DEFAULT_TYPE_MAP: dict[str, str] = {
    BREAKING_KEY: "BREAKING CHANGES",
    "feat": "Features",
    "fix": "Bug Fixes",
}


def build_changelog(
    version: str,
    commits: Sequence[ParsedCommit],
    type_map: Mapping[str, str] = DEFAULT_TYPE_MAP,
    name: str | None = None,
    *,
    today: date | None = None,
) -> str:
    """Render the changelog section for an upcoming release.

    Args:
        version: Version being released
        commits: Parsed commits, oldest first
        type_map: Section title per commit type; only these types are listed
        name: Optional release name shown after the version
        today: Release date, defaults to the local current date

    Returns:
        Markdown text ending with a blank line
    """
    release_date = (today or date.today()).isoformat()
    title = " ".join(part for part in (version, name, f"({release_date})") if part)

    lines = [f"## {title}", ""]

    grouped = group_commits(commits, list(type_map))
    for key, section_commits in grouped.items():
        if not section_commits:
            continue

        if key is not None:
            lines.append(f"### {type_map[key]}:")
        lines.append("")

        for commit in section_commits:
            entry = commit.breaking if key == BREAKING_KEY else commit.subject
            lines.append(f"- {entry}")

        lines.append("")

    return "\n".join(lines) + "\n"


def write_changelog(path: Path, changelog: str) -> None:
    """Write a changelog section in front of an existing changelog.

    The previous content, if any, follows the new section after one
    blank line.

    Raises:
        ChangelogError: If the file cannot be read or written
    """
    try:
        existing = path.read_text(encoding="utf-8") if path.exists() else None

        content = changelog if existing is None else f"{changelog}\n{existing}"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ChangelogError(f"Could not write changelog {path}: {e}") from e

    logger.debug("Wrote changelog section to %s", path)
