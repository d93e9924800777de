"""Xcode project build settings.

This module reads and updates build settings such as
``MARKETING_VERSION`` in ``project.pbxproj``.

Like the pyproject.toml support, it edits the file with targeted regex
replacements instead of parsing and re-serializing it, so formatting
and unrelated objects are left untouched.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

from semver_py.exceptions import ProjectError, VersionNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

_OBJECT_ID = r"[0-9A-Fa-f]{24}"

_CONFIGURATION_LIST = (
    r'/\* Build configuration list for PBXNativeTarget "(?P<target>{target})" \*/ = \{{'
    r"\s*isa = XCConfigurationList;"
    r"\s*buildConfigurations = \((?P<ids>.*?)\);"
)

_BUILD_CONFIGURATION = re.compile(
    rf"^\s*(?P<id>{_OBJECT_ID})(?: /\*[^*]*\*/)? = \{{"
    r"\s*isa = XCBuildConfiguration;"
    r"\s*buildSettings = \{(?P<settings>.*?)\n(?P<indent>[ \t]*)\};",
    re.MULTILINE | re.DOTALL,
)

_UNQUOTED_VALUE = re.compile(r"[\w.$/]+")


def find_xcodeproj(path: Path | None = None) -> Path:
    """Locate an ``.xcodeproj`` bundle.

    Args:
        path: An ``.xcodeproj`` path, or a directory containing one.
              Defaults to the current directory.

    Raises:
        ProjectError: If no Xcode project can be found
    """
    path = path or Path.cwd()
    if path.suffix == ".xcworkspace":
        raise ProjectError("Please pass the path to the project, not the workspace")
    if path.suffix == ".xcodeproj":
        if not path.is_dir():
            raise ProjectError(f"Could not find Xcode project {path}")
        return path

    candidates = sorted(path.glob("*.xcodeproj"))
    if not candidates:
        raise ProjectError(f"Unable to find an *.xcodeproj in {path}")
    return candidates[0]


def pbxproj_path(path: Path | None = None) -> Path:
    pbxproj = find_xcodeproj(path) / "project.pbxproj"
    if not pbxproj.is_file():
        raise ProjectError(f"Missing {pbxproj}")
    return pbxproj


def _read(pbxproj: Path) -> str:
    try:
        return pbxproj.read_text(encoding="utf-8")
    except OSError as e:
        raise ProjectError(f"Could not read {pbxproj}: {e}") from e


def _write(pbxproj: Path, content: str) -> None:
    try:
        pbxproj.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ProjectError(f"Could not write {pbxproj}: {e}") from e


def source_root(path: Path | None = None) -> Path:
    """Directory containing the ``.xcodeproj``, i.e. ``$(SRCROOT)``."""
    return find_xcodeproj(path).parent


def _target_configuration_ids(content: str, target: str | None) -> tuple[str, list[str]]:
    pattern = _CONFIGURATION_LIST.format(target=re.escape(target) if target else r'[^"]+')
    match = re.search(pattern, content, re.DOTALL)
    if match is None:
        if target:
            raise ProjectError(f"Target '{target}' not found in Xcode project")
        raise ProjectError("No native target found in Xcode project")
    return match.group("target"), re.findall(_OBJECT_ID, match.group("ids"))


def _settings_matches(content: str, target: str | None) -> list[re.Match[str]]:
    _, ids = _target_configuration_ids(content, target)
    return [m for m in _BUILD_CONFIGURATION.finditer(content) if m.group("id") in ids]


def _setting_pattern(key: str) -> re.Pattern[str]:
    return re.compile(
        rf'^(?P<prefix>[ \t]*{re.escape(key)} = )"?(?P<value>[^";\n]*)"?;$',
        re.MULTILINE,
    )


def _quote(value: str) -> str:
    return value if _UNQUOTED_VALUE.fullmatch(value) else f'"{value}"'


def target_name(path: Path | None = None, target: str | None = None) -> str:
    """Name of ``target``, or of the first native target when None."""
    content = _read(pbxproj_path(path))
    name, _ = _target_configuration_ids(content, target)
    return name


def get_build_setting(path: Path | None, key: str, target: str | None = None) -> str | None:
    """Read a build setting from the first configuration of a target that sets it."""
    content = _read(pbxproj_path(path))
    pattern = _setting_pattern(key)
    for match in _settings_matches(content, target):
        setting = pattern.search(match.group("settings"))
        if setting:
            return setting.group("value")
    return None


def update_build_settings(
    path: Path | None,
    target: str | None = None,
    *,
    values: Mapping[str, str] | None = None,
    remove: Iterable[str] = (),
) -> Path:
    """Set and remove build settings in every configuration of a target.

    Args:
        path: Xcode project, or directory containing it
        target: Target name; defaults to the first native target
        values: Settings to set, added when missing
        remove: Setting names to delete

    Returns:
        Path to the updated project.pbxproj
    """
    pbxproj = pbxproj_path(path)
    content = _read(pbxproj)
    values = values or {}
    remove = list(remove)

    # Edit from the end so earlier offsets stay valid
    for match in reversed(_settings_matches(content, target)):
        settings = match.group("settings")
        indent = match.group("indent") + "\t"

        for key in remove:
            settings = re.sub(rf"\n[ \t]*{re.escape(key)} = [^\n]*;(?=\n|$)", "", settings)

        for key, value in values.items():
            settings, count = _setting_pattern(key).subn(
                lambda m, v=value: f"{m.group('prefix')}{_quote(v)};", settings, count=1
            )
            if count == 0:
                settings += f"\n{indent}{key} = {_quote(value)};"

        content = content[: match.start("settings")] + settings + content[match.end("settings") :]

    _write(pbxproj, content)
    return pbxproj


def get_marketing_version(path: Path | None = None, target: str | None = None) -> str:
    """Get ``MARKETING_VERSION`` of a target.

    Raises:
        VersionNotFoundError: If the target has no MARKETING_VERSION
    """
    version = get_build_setting(path, "MARKETING_VERSION", target)
    if not version:
        raise VersionNotFoundError(
            "Could not find MARKETING_VERSION in Xcode project. "
            "Projects prepared for agvtool use the apple-generic versioning system."
        )
    return version


def set_marketing_version(path: Path | None, new_version: str, target: str | None = None) -> Path:
    """Set ``MARKETING_VERSION`` in every configuration of a target that defines it.

    Raises:
        VersionNotFoundError: If no configuration defines MARKETING_VERSION
    """
    pbxproj = pbxproj_path(path)
    content = _read(pbxproj)
    pattern = _setting_pattern("MARKETING_VERSION")

    updated = 0
    for match in reversed(_settings_matches(content, target)):
        settings, count = pattern.subn(
            lambda m: f"{m.group('prefix')}{_quote(new_version)};", match.group("settings")
        )
        updated += count
        content = content[: match.start("settings")] + settings + content[match.end("settings") :]

    if updated == 0:
        raise VersionNotFoundError(f"Could not find MARKETING_VERSION to update in {pbxproj}")

    _write(pbxproj, content)
    logger.debug("Set MARKETING_VERSION to %s in %d configurations", new_version, updated)
    return pbxproj
