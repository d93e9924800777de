"""Version control access."""

from __future__ import annotations

from semver_py.vcs.git import Commit, GitRepository

__all__ = ["Commit", "GitRepository"]
