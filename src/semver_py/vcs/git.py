"""Git repository access through the ``git`` executable.

Only read operations (log, tags, status) and the final bump commit are
needed, so the repository is driven with plain ``git`` subprocesses.
A :class:`GitRepository` holds no cached state; create a new one, or
reuse an existing one, freely.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from semver_py.exceptions import GitError, NotARepositoryError

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%an", "%ae", "%aI", "%B"]) + _RECORD_SEP


@dataclass(frozen=True)
class Commit:
    """A single git commit."""

    sha: str
    message: str
    author_name: str
    author_email: str
    date: datetime

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def subject(self) -> str:
        return self.message.split("\n", 1)[0]


class GitRepository:
    """A git work tree.

    Args:
        path: Any directory inside the work tree

    Raises:
        NotARepositoryError: If ``path`` is not inside a git work tree
    """

    def __init__(self, path: Path | str | None = None) -> None:
        start = Path(path) if path else Path.cwd()
        try:
            toplevel = self._git(start, "rev-parse", "--show-toplevel")
        except GitError as e:
            raise NotARepositoryError(f"Not a git repository: {start}", stderr=e.stderr) from e
        self.path = Path(toplevel.strip())

    def __repr__(self) -> str:
        return f"GitRepository({str(self.path)!r})"

    @staticmethod
    def _git(cwd: Path, *args: str) -> str:
        try:
            result = subprocess.run(
                ["git", *args],
                capture_output=True,
                text=True,
                check=True,
                cwd=cwd,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise GitError(f"git {args[0]} failed with exit code {e.returncode}", stderr=e.stderr) from e
        return result.stdout

    def run(self, *args: str, strip: bool = True) -> str:
        """Run a git command in the work tree and return its output.

        Args:
            args: git arguments
            strip: Strip surrounding whitespace from the output
        """
        logger.debug("git %s", " ".join(args))
        output = self._git(self.path, *args)
        return output.strip() if strip else output

    def has_commits(self) -> bool:
        try:
            self.run("rev-parse", "--verify", "--quiet", "HEAD")
        except GitError:
            return False
        return True

    def is_dirty(self) -> bool:
        return bool(self.run("status", "--porcelain"))

    def tags(self) -> list[str]:
        output = self.run("tag", "--list")
        return output.splitlines() if output else []

    def tag_exists(self, tag: str) -> bool:
        return tag in self.tags()

    def get_latest_tag(self, pattern: str | None = None) -> str | None:
        """Get the most recent tag reachable from HEAD.

        Args:
            pattern: Optional glob the tag name must match

        Returns:
            Tag name, or None if no matching tag exists
        """
        args = ["describe", "--tags", "--abbrev=0"]
        if pattern:
            args.extend(["--match", pattern])
        try:
            return self.run(*args) or None
        except GitError:
            return None

    def get_commits_since_tag(self, tag: str | None = None) -> list[Commit]:
        """Get commits after ``tag`` up to HEAD, newest first.

        Args:
            tag: Tag to start after, or None for the whole history

        Returns:
            Commits in the order git log reports them
        """
        if not self.has_commits():
            return []

        args = ["log", f"--format={_LOG_FORMAT}"]
        if tag:
            args.append(f"{tag}..HEAD")

        # The separators count as whitespace for str.strip(), keep them
        output = self.run(*args, strip=False)
        commits = []
        for record in output.split(_RECORD_SEP):
            record = record.strip("\n")
            if not record:
                continue
            sha, author_name, author_email, authored, message = record.split(_FIELD_SEP, 4)
            commits.append(
                Commit(
                    sha=sha,
                    message=message.strip(),
                    author_name=author_name,
                    author_email=author_email,
                    date=datetime.fromisoformat(authored),
                )
            )

        logger.debug("Found %d commits since %s", len(commits), tag or "the beginning")
        return commits

    def commit(self, message: str, paths: Sequence[Path | str]) -> str:
        """Stage ``paths`` and commit only those paths.

        Relative paths are taken relative to the current directory, not
        to the repository root.

        Returns:
            SHA of the new commit
        """
        files = [str(Path(p).resolve()) for p in paths]
        self.run("add", "--", *files)
        self.run("commit", "--message", message, "--", *files)
        return self.run("rev-parse", "HEAD")
