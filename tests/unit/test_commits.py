"""Tests for conventional commit parsing and bump resolution."""

from __future__ import annotations

import itertools
from datetime import datetime

import pytest

from semver_py.config.models import CommitsConfig
from semver_py.core.commits import (
    DEFAULT_ALLOWED_TYPES,
    DEFAULT_BUMP_MAP,
    ParsedCommit,
    calculate_bump,
    commit_bump_type,
    group_commits,
    parse_commits,
    parse_conventional_commit,
)
from semver_py.core.version import BumpType
from semver_py.vcs.git import Commit


def parse(message: str, **kwargs) -> ParsedCommit | None:
    return parse_conventional_commit(message, DEFAULT_ALLOWED_TYPES, DEFAULT_BUMP_MAP, **kwargs)


class TestParseConventionalCommit:
    """Tests for parse_conventional_commit()."""

    def test_first_line_does_not_match(self):
        """Messages that are not conventional commits are rejected."""
        assert parse("This is an invalid commit message") is None

    def test_second_line_not_blank(self):
        """A header must be followed by a blank line or the end of the message."""
        assert parse("feat: new feature\ninvalid second line") is None

    def test_unknown_type_rejected(self):
        """Types outside the allowed set are rejected."""
        assert parse("oops: bad") is None

    def test_missing_space_after_colon(self):
        """The subject must be separated from the colon."""
        assert parse("feat:no space") is None

    def test_simple_message(self):
        """Parse a simple feat commit."""
        pc = parse("feat: add new feature")

        assert pc is not None
        assert pc.commit_type == "feat"
        assert pc.scope is None
        assert pc.subject == "add new feature"
        assert pc.body is None
        assert pc.breaking is None
        assert not pc.is_major
        assert pc.bump == BumpType.MINOR

    def test_with_scope(self):
        """Parse commit with scope."""
        pc = parse("feat(my-scope): add new feature")

        assert pc.commit_type == "feat"
        assert pc.scope == "my-scope"
        assert pc.subject == "add new feature"

    def test_with_body(self):
        """Everything after the first blank line is the body."""
        pc = parse("feat(my-scope): add new feature\n\nThis is the body\nCloses: #42")

        assert pc.subject == "add new feature"
        assert pc.body == "This is the body\nCloses: #42"
        assert pc.breaking is None

    def test_with_footer_kept_in_body(self):
        """Footers stay part of the body."""
        pc = parse("fix: repair\n\nThis is the body\n\nThe footer")

        assert pc.body == "This is the body\n\nThe footer"

    def test_breaking_change_in_body(self):
        """A BREAKING CHANGE line sets the breaking note."""
        pc = parse(
            "feat(my-scope): add new feature\n\nThis is the body\nCloses: #42\n\n"
            "BREAKING CHANGE: It barfs everything"
        )

        assert pc.body == "This is the body\nCloses: #42\n\nBREAKING CHANGE: It barfs everything"
        assert pc.breaking == "It barfs everything"
        assert pc.bump == BumpType.MAJOR
        assert not pc.is_major

    def test_breaking_changes_plural(self):
        """BREAKING CHANGES: is accepted as well."""
        pc = parse("fix: x\n\nBREAKING CHANGES: several things")

        assert pc.breaking == "several things"

    def test_only_first_breaking_note(self):
        """Only the first BREAKING CHANGE line is used."""
        pc = parse("feat: x\n\nBREAKING CHANGE: first\nBREAKING CHANGE: second")

        assert pc.breaking == "first"

    def test_breaking_marker_must_start_line(self):
        """A BREAKING CHANGE text inside a line is not a breaking note."""
        pc = parse("feat: incredible change\n\nno BREAKING CHANGE: nothing")

        assert pc.breaking is None
        assert pc.bump == BumpType.MINOR

    def test_major_marker_with_scope(self):
        """The ! marker sets is_major without a breaking note."""
        pc = parse("feat(scope)!: add X")

        assert pc.commit_type == "feat"
        assert pc.scope == "scope"
        assert pc.subject == "add X"
        assert pc.is_major
        assert pc.breaking is None
        assert pc.bump == BumpType.MAJOR

    def test_major_marker_for_unmapped_type(self):
        """! makes any allowed type a major bump, even without a bump mapping."""
        pc = parse("bump!: first official release")

        assert pc.commit_type == "bump"
        assert pc.is_major
        assert pc.subject == "first official release"
        assert pc.bump == BumpType.MAJOR

    def test_unmapped_type_has_no_bump(self):
        """Allowed types without a bump mapping do not bump."""
        assert parse("build: just build").bump == BumpType.NONE

    def test_breaking_uses_bump_map(self):
        """A breaking note maps through the 'breaking' key."""
        bump_map = {"breaking": BumpType.MINOR, "feat": BumpType.MINOR}
        pc = parse_conventional_commit("fix: x\n\nBREAKING CHANGE: y", ["fix"], bump_map)

        assert pc.bump == BumpType.MINOR

    def test_raw_message_and_sha_kept(self):
        """The original message and sha are carried along."""
        pc = parse("fix: a", sha="abc123")

        assert pc.raw_message == "fix: a"
        assert pc.sha == "abc123"

    def test_custom_allowed_types(self):
        """Only the given types are accepted."""
        pc = parse_conventional_commit("add: new thing", ["add", "remove"], {"add": BumpType.MINOR})

        assert pc.commit_type == "add"
        assert pc.bump == BumpType.MINOR
        assert parse_conventional_commit("feat: x", ["add"], {}) is None

    def test_unknown_major_rejected_by_default(self):
        """An unknown type with ! is dropped unless explicitly accepted."""
        assert parse("release!: go live") is None

    def test_unknown_major_accepted(self):
        """accept_unknown_major lets unknown types with ! through as major bumps."""
        pc = parse("release!: go live", accept_unknown_major=True)

        assert pc.commit_type == "release"
        assert pc.is_major
        assert pc.bump == BumpType.MAJOR

    def test_unknown_type_without_marker_still_rejected(self):
        """accept_unknown_major does not accept unknown types without !."""
        assert parse("release: go live", accept_unknown_major=True) is None


class TestCommitBumpType:
    """Tests for commit_bump_type()."""

    def test_major_marker_wins(self):
        """The ! marker always means major."""
        bump = commit_bump_type("docs", is_major=True, breaking=None, bump_map={})
        assert bump == BumpType.MAJOR

    def test_breaking_without_mapping(self):
        """A breaking note without a 'breaking' mapping does not bump."""
        bump = commit_bump_type("feat", is_major=False, breaking="x", bump_map={})
        assert bump == BumpType.NONE


class TestParseCommits:
    """Tests for parse_commits()."""

    def test_filters_non_conventional(self, sample_commits: list[Commit]):
        """Non-conventional commits are dropped, order is kept."""
        parsed = parse_commits(sample_commits, CommitsConfig())

        assert [pc.sha for pc in parsed] == ["s5", "s4", "s3", "s2", "s1"]
        assert all(isinstance(pc, ParsedCommit) for pc in parsed)

    def test_uses_config_types(self):
        """Allowed types come from the configuration."""
        commits = [
            Commit("a", "feat(api): feature 1", "T", "t@t.com", datetime.now()),
            Commit("b", "fix(core): fix 1", "T", "t@t.com", datetime.now()),
        ]
        config = CommitsConfig(allowed_types=["fix"])
        parsed = parse_commits(commits, config)

        assert [pc.sha for pc in parsed] == ["b"]


class TestCalculateBump:
    """Tests for calculate_bump()."""

    @staticmethod
    def commits(*bumps: BumpType | None) -> list[ParsedCommit]:
        return [
            ParsedCommit(commit_type="x", subject="s", bump=bump or BumpType.NONE)
            for bump in bumps
        ]

    def test_empty_commits_returns_none(self):
        """Empty commit list returns NONE bump."""
        assert calculate_bump([]) == BumpType.NONE

    def test_no_relevant_commits(self):
        """Commits without bump levels return NONE."""
        assert calculate_bump(self.commits(None, None, None)) == BumpType.NONE

    def test_major_wins(self):
        """A major commit anywhere yields MAJOR."""
        commits = self.commits(None, BumpType.PATCH, BumpType.PATCH, BumpType.MINOR, BumpType.MAJOR)
        assert calculate_bump(commits) == BumpType.MAJOR

    def test_major_any_permutation(self):
        """The result is MAJOR for every ordering."""
        bumps = [BumpType.PATCH, BumpType.MINOR, BumpType.MAJOR, BumpType.PATCH]
        for permutation in itertools.permutations(bumps):
            assert calculate_bump(self.commits(*permutation)) == BumpType.MAJOR

    def test_minor_over_patch(self):
        """Several minor and patch commits return MINOR."""
        commits = self.commits(None, BumpType.PATCH, BumpType.MINOR, BumpType.PATCH, None)
        assert calculate_bump(commits) == BumpType.MINOR

    def test_only_patches(self):
        """Only patch commits return PATCH."""
        assert calculate_bump(self.commits(None, BumpType.PATCH, BumpType.PATCH)) == BumpType.PATCH

    def test_is_major_flag(self):
        """A commit with the ! marker short-circuits to MAJOR."""
        commits = [ParsedCommit(commit_type="bump", subject="s", is_major=True)]
        assert calculate_bump(commits) == BumpType.MAJOR

    def test_force_major(self):
        """A forced major wins without looking at commits."""
        assert calculate_bump(self.commits(BumpType.PATCH), BumpType.MAJOR) == BumpType.MAJOR
        assert calculate_bump([], BumpType.MAJOR) == BumpType.MAJOR

    def test_force_none(self):
        """A NONE floor with no commits returns NONE."""
        assert calculate_bump([], BumpType.NONE) == BumpType.NONE

    def test_force_minor_not_lowered_by_patch(self):
        """Patch commits do not lower a forced minor."""
        assert calculate_bump(self.commits(BumpType.PATCH), BumpType.MINOR) == BumpType.MINOR

    def test_force_patch_raised_by_minor(self):
        """Minor commits raise a forced patch."""
        assert calculate_bump(self.commits(BumpType.MINOR), BumpType.PATCH) == BumpType.MINOR

    @pytest.mark.parametrize("force", [None, BumpType.PATCH])
    def test_force_patch_with_no_commits(self, force: BumpType | None):
        """The floor is returned when no commit bumps."""
        expected = force or BumpType.NONE
        assert calculate_bump(self.commits(None), force) == expected


class TestGroupCommits:
    """Tests for group_commits()."""

    def test_buckets_in_section_order(self):
        """Buckets follow the section order, with the overflow bucket last."""
        grouped = group_commits([], ["breaking", "feat", "fix"])

        assert list(grouped) == ["breaking", "feat", "fix", None]

    def test_breaking_in_two_buckets(self):
        """A commit with a breaking note is listed as breaking and by type."""
        pc = ParsedCommit(commit_type="feat", subject="cool feature", breaking="this breaks")
        grouped = group_commits([pc], ["breaking", "feat"])

        assert grouped["breaking"] == [pc]
        assert grouped["feat"] == [pc]

    def test_breaking_without_section(self):
        """Without a breaking section the note is not listed separately."""
        pc = ParsedCommit(commit_type="feat", subject="s", breaking="b")
        grouped = group_commits([pc], ["feat"])

        assert "breaking" not in grouped
        assert grouped["feat"] == [pc]

    def test_major_of_unlisted_type_overflows(self):
        """Major commits of a type without section go to the None bucket."""
        pc = ParsedCommit(commit_type="bump", subject="first release", is_major=True)
        grouped = group_commits([pc], ["feat"])

        assert grouped[None] == [pc]
        assert grouped["feat"] == []

    def test_unlisted_type_dropped(self):
        """Non-major commits of unlisted types are not grouped."""
        pc = ParsedCommit(commit_type="docs", subject="readme")
        grouped = group_commits([pc], ["feat"])

        assert grouped == {"feat": [], None: []}
