"""Helpers shared by CLI commands: option parsing and setup."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import typer

from semver_py.config import load_config
from semver_py.exceptions import SemverPyError
from semver_py.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

    from semver_py.config import SemverPyConfig


def parse_list(value: str | None) -> list[str] | None:
    """Parse ``"a,b,c"`` into a list."""
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_mapping(value: str | None, option: str) -> dict[str, str] | None:
    """Parse ``"key=value,key=value"`` into a dict, keeping order.

    Raises:
        typer.BadParameter: If an item has no ``=``
    """
    if value is None:
        return None

    result: dict[str, str] = {}
    for item in parse_list(value) or []:
        key, sep, val = item.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"expected key=value pairs, got '{item}'", param_hint=option)
        result[key.strip()] = val.strip()
    return result


def build_overrides(
    *,
    allowed_types: str | None = None,
    bump_map: str | None = None,
    force_type: str | None = None,
    accept_unknown_major: bool | None = None,
    type_map: str | None = None,
    release_name: str | None = None,
    changelog_file: Path | None = None,
    tag_format: str | None = None,
    versioning_system: str | None = None,
    target: str | None = None,
    bump_message: str | None = None,
    update: bool | None = None,
    allow_dirty: bool | None = None,
) -> dict[str, Any]:
    """Translate command line options into nested configuration overrides."""
    return {
        "allow_dirty": allow_dirty,
        "commits": {
            "allowed_types": parse_list(allowed_types),
            "bump_map": parse_mapping(bump_map, "--bump-map"),
            "force_type": force_type,
            "accept_unknown_major": accept_unknown_major,
        },
        "changelog": {
            "type_map": parse_mapping(type_map, "--type-map"),
            "release_name": release_name,
            "path": changelog_file,
        },
        "version": {
            "tag_format": tag_format,
            "versioning_system": versioning_system,
            "target": target,
            "bump_message": bump_message,
            "update": update,
        },
    }


def load_project(
    path: str | None,
    overrides: dict[str, Any],
    err_console: Console,
) -> tuple[Path, SemverPyConfig, GitRepository]:
    """Load configuration and open the repository, exiting on errors."""
    project_path = Path(path).resolve() if path else Path.cwd()

    try:
        config = load_config(project_path, overrides)
    except SemverPyError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise SystemExit(1) from e

    try:
        repo = GitRepository(project_path)
    except SemverPyError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    return project_path, config, repo
