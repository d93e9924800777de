"""Info.plist version handling for the apple-generic versioning system.

With apple-generic versioning the marketing version lives in the
target's Info.plist as ``CFBundleShortVersionString`` and the build
number as ``CFBundleVersion``.
"""

from __future__ import annotations

import logging
import plistlib
from pathlib import Path

from semver_py.exceptions import ProjectError, VersionNotFoundError
from semver_py.project import xcodeproj

logger = logging.getLogger(__name__)

SHORT_VERSION_KEY = "CFBundleShortVersionString"
BUNDLE_VERSION_KEY = "CFBundleVersion"


def info_plist_path(path: Path | None = None, target: str | None = None) -> Path:
    """Resolve the Info.plist of a target from its ``INFOPLIST_FILE`` setting.

    Raises:
        ProjectError: If the target has no INFOPLIST_FILE setting
    """
    setting = xcodeproj.get_build_setting(path, "INFOPLIST_FILE", target)
    if not setting:
        raise ProjectError(
            "Target has no INFOPLIST_FILE build setting. Run 'semver-py prepare' first."
        )
    return xcodeproj.source_root(path) / setting.removeprefix("$(SRCROOT)/")


def read_info_plist(plist: Path) -> dict:
    try:
        with plist.open("rb") as fp:
            return plistlib.load(fp)
    except FileNotFoundError as e:
        raise ProjectError(f"Info.plist not found: {plist}") from e
    except plistlib.InvalidFileException as e:
        raise ProjectError(f"Invalid property list {plist}: {e}") from e
    except OSError as e:
        raise ProjectError(f"Could not read {plist}: {e}") from e


def write_info_plist(plist: Path, values: dict) -> None:
    try:
        with plist.open("wb") as fp:
            plistlib.dump(values, fp, sort_keys=False)
    except OSError as e:
        raise ProjectError(f"Could not write {plist}: {e}") from e


def ensure_info_plist(plist: Path) -> bool:
    """Create an empty Info.plist if missing.

    Returns:
        True if the file was created
    """
    if plist.exists():
        return False
    plist.parent.mkdir(parents=True, exist_ok=True)
    write_info_plist(plist, {})
    logger.debug("Created %s", plist)
    return True


def get_bundle_version(path: Path | None = None, target: str | None = None) -> str:
    """Get the marketing version from a target's Info.plist.

    Raises:
        VersionNotFoundError: If the short version string is missing or
            still refers to a build setting
    """
    plist = info_plist_path(path, target)
    version = read_info_plist(plist).get(SHORT_VERSION_KEY)
    if not isinstance(version, str) or not version or version.startswith("$("):
        raise VersionNotFoundError(f"No literal {SHORT_VERSION_KEY} in {plist}")
    return version


def set_bundle_version(path: Path | None, new_version: str, target: str | None = None) -> Path:
    plist = info_plist_path(path, target)
    values = read_info_plist(plist)
    values[SHORT_VERSION_KEY] = new_version
    write_info_plist(plist, values)
    logger.debug("Set %s to %s in %s", SHORT_VERSION_KEY, new_version, plist)
    return plist
