"""Versioning system dispatch.

A versioning system decides where a project's version number lives:

- ``manual``: ``MARKETING_VERSION`` build setting in the Xcode project
- ``apple-generic``: ``CFBundleShortVersionString`` in the target's Info.plist
- ``pyproject``: ``version`` in pyproject.toml
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from semver_py.config.models import VERSIONING_SYSTEMS
from semver_py.exceptions import ConfigValidationError
from semver_py.project import info_plist, pyproject, xcodeproj

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def verify_versioning_system(value: str) -> None:
    """Raise ConfigValidationError unless ``value`` names a known system."""
    if value not in VERSIONING_SYSTEMS:
        raise ConfigValidationError(
            f"'versioning_system' must be one of {list(VERSIONING_SYSTEMS)}, got '{value}'"
        )


def get_version_number(system: str, path: Path | None = None, target: str | None = None) -> str:
    """Read the current version from the given versioning system."""
    verify_versioning_system(system)

    if system == "apple-generic":
        version = info_plist.get_bundle_version(path, target)
    elif system == "pyproject":
        version = pyproject.get_pyproject_version(path)
    else:
        version = xcodeproj.get_marketing_version(path, target)

    logger.debug("Current version from %s system: %s", system, version)
    return version


def set_version_number(
    system: str,
    path: Path | None,
    new_version: str,
    target: str | None = None,
) -> Path:
    """Write a new version through the given versioning system.

    Returns:
        The file that was changed
    """
    verify_versioning_system(system)

    if system == "apple-generic":
        return info_plist.set_bundle_version(path, new_version, target)
    if system == "pyproject":
        return pyproject.update_pyproject_version(path, new_version)
    return xcodeproj.set_marketing_version(path, new_version, target)
