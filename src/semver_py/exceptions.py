"""Exception hierarchy for semver-py.

All errors raised by the library derive from :class:`SemverPyError`,
so the CLI can catch a single type and turn it into a user-facing
message. Commits that do not follow the conventional format are not
errors; they are filtered out during parsing.
"""

from __future__ import annotations


class SemverPyError(Exception):
    """Base class for all semver-py errors."""


# Configuration


class ConfigError(SemverPyError):
    """Configuration could not be loaded or is invalid."""


class ConfigNotFoundError(ConfigError):
    """A configuration file was expected but not found."""


class ConfigValidationError(ConfigError):
    """Configuration values have the wrong shape or an unsupported value."""


# Versions


class VersionError(SemverPyError):
    """Version handling failed."""


class InvalidVersionError(VersionError):
    """A version string is not a dotted numeric version."""


# Project files


class ProjectError(SemverPyError):
    """A project file (xcodeproj, Info.plist, pyproject.toml) could not be used."""


class VersionNotFoundError(ProjectError):
    """No version could be located in a project file."""


# Git


class GitError(SemverPyError):
    """A git command failed."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr

    def __str__(self) -> str:
        message = super().__str__()
        if self.stderr:
            return f"{message}: {self.stderr.strip()}"
        return message


class NotARepositoryError(GitError):
    """The path is not inside a git work tree."""


# Changelog and bumping


class ChangelogError(SemverPyError):
    """The changelog could not be written."""


class BumpError(SemverPyError):
    """A version bump was requested without the facts it depends on."""
