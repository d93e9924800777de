"""Configuration loading from pyproject.toml."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from semver_py.config.models import SemverPyConfig
from semver_py.exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

TOOL_NAME = "semver-py"


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find the nearest pyproject.toml, searching upwards.

    Args:
        start: Directory to start from (defaults to cwd)

    Raises:
        ConfigNotFoundError: If no pyproject.toml is found
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    raise ConfigNotFoundError(f"No pyproject.toml found in {current} or its parents")


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Config file not found: {path}")
    try:
        with path.open("rb") as fp:
            return tomllib.load(fp)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_semver_py_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.semver-py]`` table, or an empty dict."""
    table = pyproject.get("tool", {}).get(TOOL_NAME, {})
    if not isinstance(table, dict):
        raise ConfigValidationError(f"[tool.{TOOL_NAME}] must be a table")
    return table


def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    # Sections merge key by key; values inside a section (including maps) replace
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict):
            section = merged.get(key)
            section = dict(section) if isinstance(section, dict) else {}
            section.update({k: v for k, v in value.items() if v is not None})
            merged[key] = section
        elif value is not None:
            merged[key] = value
    return merged


def build_config(data: dict[str, Any]) -> SemverPyConfig:
    """Validate raw configuration data.

    Raises:
        ConfigValidationError: If the data does not match the models
    """
    try:
        return SemverPyConfig.model_validate(data)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigValidationError(f"Invalid configuration: {errors}") from e


def load_config(
    path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> SemverPyConfig:
    """Load configuration for a project.

    Values from ``[tool.semver-py]`` are used when a pyproject.toml is
    found; ``overrides`` (e.g. from command line options) win over them.
    ``None`` values in ``overrides`` are ignored.

    Args:
        path: Project directory to search from
        overrides: Nested configuration values to apply on top

    Raises:
        ConfigValidationError: If the resulting configuration is invalid
    """
    data: dict[str, Any] = {}
    try:
        pyproject_path = find_pyproject_toml(path)
    except ConfigNotFoundError:
        logger.debug("No pyproject.toml found, using default configuration")
    else:
        data = extract_semver_py_config(load_pyproject_toml(pyproject_path))
        logger.debug("Loaded [tool.%s] from %s", TOOL_NAME, pyproject_path)

    if overrides:
        data = _merge(data, overrides)

    return build_config(data)
