"""Configuration management for semver-py."""

from __future__ import annotations

from semver_py.config.loader import load_config
from semver_py.config.models import (
    ChangelogConfig,
    CommitsConfig,
    SemverPyConfig,
    VersionConfig,
)

__all__ = [
    "ChangelogConfig",
    "CommitsConfig",
    "SemverPyConfig",
    "VersionConfig",
    "load_config",
]
