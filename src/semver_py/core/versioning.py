"""Versioning info and semantic bump orchestration.

:func:`get_versioning_info` combines the current version, the commits
since its tag, the resulting bump and the changelog into a
:class:`VersioningInfo`. :func:`semantic_bump` applies such info: it
writes the new version and changelog and commits them.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from semver_py.config.models import VERSION_PLACEHOLDER
from semver_py.core.changelog import build_changelog, write_changelog
from semver_py.core.commits import ParsedCommit, calculate_bump, parse_commits
from semver_py.core.version import BumpType, increase_version
from semver_py.exceptions import BumpError
from semver_py.project.systems import get_version_number, set_version_number

if TYPE_CHECKING:
    from semver_py.config.models import SemverPyConfig
    from semver_py.vcs.git import GitRepository

logger = logging.getLogger(__name__)

INITIAL_VERSION = "0.0.0"

_VERSION_GLOB = "[0-9]*.[0-9]*.[0-9]*"


@dataclass(frozen=True)
class VersioningInfo:
    """Facts about the upcoming release.

    Attributes:
        current_version: Version the bump starts from
        current_tag: Tag name of the current version
        bump_type: Resolved bump level
        new_version: Version after the bump
        changelog: Changelog section for the new version
        bumpable: True when the new version differs from the current one
        versioning_system: System the version was read from
        commits: Conventional commits since the current tag, oldest first
    """

    current_version: str
    current_tag: str
    bump_type: BumpType
    new_version: str
    changelog: str
    bumpable: bool
    versioning_system: str
    commits: tuple[ParsedCommit, ...] = field(default=(), repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_version": self.current_version,
            "current_tag": self.current_tag,
            "bump_type": str(self.bump_type),
            "new_version": self.new_version,
            "changelog": self.changelog,
            "bumpable": self.bumpable,
            "versioning_system": self.versioning_system,
        }


def formatted_tag(version: str, tag_format: str) -> str:
    """Build a tag name, e.g. ``formatted_tag("1.2.0", "v$version") == "v1.2.0"``."""
    return tag_format.replace(VERSION_PLACEHOLDER, version, 1)


def previous_version(repo: GitRepository, tag_format: str) -> str:
    """Get the version of the most recent tag matching ``tag_format``.

    Returns:
        The tagged version, or ``0.0.0`` when no tag matches
    """
    tag = repo.get_latest_tag(formatted_tag(_VERSION_GLOB, tag_format))
    if not tag:
        logger.debug("No tag matches %s, starting from %s", tag_format, INITIAL_VERSION)
        return INITIAL_VERSION

    prefix, _, suffix = tag_format.partition(VERSION_PLACEHOLDER)
    pattern = rf"{re.escape(prefix)}(?P<version>\d+\.\d+\.\d+){re.escape(suffix)}"
    match = re.search(pattern, tag)
    if match is None:
        logger.warning("Tag %s does not match format %s", tag, tag_format)
        return INITIAL_VERSION
    return match.group("version")


def get_versioning_info(
    repo: GitRepository,
    config: SemverPyConfig,
    *,
    path: Path | None = None,
    current_version: str | None = None,
) -> VersioningInfo:
    """Determine the next version and changelog from commit history.

    The current version is taken from ``current_version`` when given,
    otherwise from the latest matching tag in update mode, otherwise from
    the configured versioning system. Commits are read after the tag of
    that version if it exists, else from the beginning of history.

    Args:
        repo: Repository to read tags and commits from
        config: Configuration
        path: Project directory, defaults to the repository root
        current_version: Version to start from, skipping the lookup

    Returns:
        The versioning facts
    """
    project_path = path or repo.path
    version_config = config.version

    if current_version is None:
        if version_config.update:
            current_version = previous_version(repo, version_config.tag_format)
        else:
            current_version = get_version_number(
                version_config.versioning_system, project_path, version_config.target
            )

    current_tag = formatted_tag(current_version, version_config.tag_format)
    since = current_tag if repo.tag_exists(current_tag) else None
    if since is None:
        logger.debug("Tag %s not found, reading the full history", current_tag)

    # git reports newest first; parse and render oldest first
    commits = list(reversed(repo.get_commits_since_tag(since)))
    parsed = parse_commits(commits, config.commits)

    bump_type = calculate_bump(parsed, config.commits.force_type)
    new_version = increase_version(current_version, bump_type)
    changelog = build_changelog(
        new_version,
        parsed,
        config.changelog.type_map,
        config.changelog.release_name,
    )
    logger.debug("Bump %s: %s -> %s", bump_type, current_version, new_version)

    return VersioningInfo(
        current_version=current_version,
        current_tag=current_tag,
        bump_type=bump_type,
        new_version=new_version,
        changelog=changelog,
        bumpable=new_version != current_version,
        versioning_system=version_config.versioning_system,
        commits=tuple(parsed),
    )


def bump_message(template: str, info: VersioningInfo) -> str:
    """Build the bump commit message from a template.

    ``$current_version`` and ``$new_version`` are substituted.
    """
    message = template.replace("$current_version", info.current_version, 1)
    message = message.replace("$new_version", info.new_version, 1)
    return f"bump: {message}"


def semantic_bump(
    info: VersioningInfo | None,
    repo: GitRepository,
    config: SemverPyConfig,
    *,
    path: Path | None = None,
    commit: bool = True,
) -> bool:
    """Apply a version bump.

    Writes the new version through the versioning system, prepends the
    changelog section to the changelog file and commits both.

    Args:
        info: Facts from :func:`get_versioning_info`
        repo: Repository to commit to
        config: Configuration
        path: Project directory, defaults to the repository root
        commit: Whether to create the bump commit

    Returns:
        True if the version was bumped, False if there was nothing to bump

    Raises:
        BumpError: If ``info`` is missing
    """
    if info is None:
        raise BumpError("No semver information found. Please run get_versioning_info beforehand.")

    if not info.bumpable:
        logger.info("No version bump detected.")
        return False

    project_path = path or repo.path
    changed: list[Path] = [
        set_version_number(
            info.versioning_system, project_path, info.new_version, config.version.target
        )
    ]

    if config.changelog.enabled:
        changelog_path = project_path / config.changelog.path
        write_changelog(changelog_path, info.changelog)
        changed.append(changelog_path)

    if commit:
        sha = repo.commit(bump_message(config.version.bump_message, info), changed)
        logger.info("Committed version %s as %s", info.new_version, sha[:7])

    return True
