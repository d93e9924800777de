"""pyproject.toml version manipulation.

This module reads and updates the version number in pyproject.toml,
either ``[project].version`` (PEP 621) or ``[tool.poetry].version``.

It preserves formatting and comments by using regex-based
replacement rather than full TOML parsing and rewriting.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from semver_py.config.loader import find_pyproject_toml
from semver_py.exceptions import ProjectError, VersionNotFoundError

if TYPE_CHECKING:
    from pathlib import Path

# Sections that may carry the project version, in lookup order
VERSION_SECTIONS = (r"project", r"tool\.poetry")

_VERSION_LINE = re.compile(r'^(version\s*=\s*)["\']([^"\']+)["\']', re.MULTILINE)


def _resolve(path: Path | None) -> Path:
    if path is None:
        return find_pyproject_toml()
    if path.is_dir():
        return find_pyproject_toml(path)
    return path


def _section(content: str, name: str) -> re.Match[str] | None:
    # The section body runs up to the next table header or EOF
    return re.search(rf"^\[{name}\].*?(?=^\[|\Z)", content, re.MULTILINE | re.DOTALL)


def _read(pyproject_path: Path) -> str:
    try:
        return pyproject_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ProjectError(f"Could not read {pyproject_path}: {e}") from e


def _write(pyproject_path: Path, content: str) -> None:
    try:
        pyproject_path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ProjectError(f"Could not write {pyproject_path}: {e}") from e


def get_pyproject_version(path: Path | None = None) -> str:
    """Get the version from pyproject.toml.

    Args:
        path: Path to pyproject.toml or directory to search from

    Raises:
        VersionNotFoundError: If version cannot be found
    """
    pyproject_path = _resolve(path)
    content = _read(pyproject_path)

    for name in VERSION_SECTIONS:
        section = _section(content, name)
        version = _VERSION_LINE.search(section.group(0)) if section else None
        if version:
            return version.group(2)

    raise VersionNotFoundError(
        f"Could not find version in {pyproject_path}. "
        "Expected [project].version or [tool.poetry].version."
    )


def update_pyproject_version(path: Path | None, new_version: str) -> Path:
    """Update the version in pyproject.toml.

    Returns:
        Path to the updated pyproject.toml

    Raises:
        VersionNotFoundError: If version cannot be found
    """
    pyproject_path = _resolve(path)
    content = _read(pyproject_path)

    for name in VERSION_SECTIONS:
        section = _section(content, name)
        if section is None:
            continue
        body, count = _VERSION_LINE.subn(rf'\g<1>"{new_version}"', section.group(0), count=1)
        if count:
            content = content[: section.start()] + body + content[section.end() :]
            _write(pyproject_path, content)
            return pyproject_path

    raise VersionNotFoundError(
        f"Could not find version to update in {pyproject_path}. "
        "Expected [project].version or [tool.poetry].version."
    )
