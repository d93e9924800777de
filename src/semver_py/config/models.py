"""Configuration models.

Configuration is read from ``[tool.semver-py]`` in pyproject.toml and
validated with pydantic when the models are built, so malformed maps or
unknown bump levels fail before any git access happens.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator

from semver_py.core.changelog import DEFAULT_TYPE_MAP
from semver_py.core.commits import DEFAULT_ALLOWED_TYPES, DEFAULT_BUMP_MAP
from semver_py.core.version import BumpType

VersioningSystem = Literal["manual", "apple-generic", "pyproject"]

VERSIONING_SYSTEMS: tuple[str, ...] = get_args(VersioningSystem)

VERSION_PLACEHOLDER = "$version"


class CommitsConfig(BaseModel):
    """How commits are classified and mapped to bump levels."""

    model_config = ConfigDict(extra="forbid")

    allowed_types: list[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_TYPES))
    bump_map: dict[str, BumpType] = Field(default_factory=lambda: dict(DEFAULT_BUMP_MAP))
    force_type: BumpType | None = None
    accept_unknown_major: bool = False

    @field_validator("allowed_types")
    @classmethod
    def _non_empty_types(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("allowed_types must not be empty")
        if any(not t or not t.replace("-", "").replace("_", "").isalnum() for t in value):
            raise ValueError("commit types must be alphanumeric words")
        return value


class ChangelogConfig(BaseModel):
    """Changelog sections and output file."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    path: Path = Path("CHANGELOG.md")
    type_map: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_TYPE_MAP))
    release_name: str | None = None


class VersionConfig(BaseModel):
    """Where the version lives and how tags and bump commits look."""

    model_config = ConfigDict(extra="forbid")

    tag_format: str = VERSION_PLACEHOLDER
    versioning_system: VersioningSystem = "manual"
    target: str | None = None
    bump_message: str = "version $current_version → $new_version"
    update: bool = False

    @field_validator("tag_format")
    @classmethod
    def _has_placeholder(cls, value: str) -> str:
        if VERSION_PLACEHOLDER not in value:
            raise ValueError(f"tag_format must contain '{VERSION_PLACEHOLDER}'")
        return value


class SemverPyConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(extra="forbid")

    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    version: VersionConfig = Field(default_factory=VersionConfig)
    commit: bool = True
    allow_dirty: bool = False
