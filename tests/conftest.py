"""Shared fixtures for semver-py tests."""

from __future__ import annotations

import subprocess
from datetime import datetime
from pathlib import Path

import pytest

from semver_py.vcs.git import Commit


def _id(n: int) -> str:
    return f"AA{n:022d}"


def _build_configuration(object_id: str, name: str, settings: dict[str, str]) -> str:
    lines = [f"\t\t{object_id} /* {name} */ = {{", "\t\t\tisa = XCBuildConfiguration;"]
    lines.append("\t\t\tbuildSettings = {")
    lines.extend(f"\t\t\t\t{key} = {value};" for key, value in settings.items())
    lines.append("\t\t\t};")
    lines.append(f"\t\t\tname = {name};")
    lines.append("\t\t};")
    return "\n".join(lines)


def _configuration_list(object_id: str, owner: str, ids: list[str]) -> str:
    lines = [f"\t\t{object_id} /* Build configuration list for {owner} */ = {{"]
    lines.append("\t\t\tisa = XCConfigurationList;")
    lines.append("\t\t\tbuildConfigurations = (")
    lines.extend(f"\t\t\t\t{config_id} /* {name} */," for config_id, name in
                 zip(ids, ["Debug", "Release"], strict=True))
    lines.append("\t\t\t);")
    lines.append("\t\t\tdefaultConfigurationName = Release;")
    lines.append("\t\t};")
    return "\n".join(lines)


def make_pbxproj(app_version: str = "1.0", tests_version: str = "9.9.9") -> str:
    """Render a small project.pbxproj with an App and an AppTests target."""
    app_settings = {
        "GENERATE_INFOPLIST_FILE": "YES",
        "MARKETING_VERSION": app_version,
        "PRODUCT_NAME": '"$(TARGET_NAME)"',
    }
    tests_settings = {"MARKETING_VERSION": tests_version, "PRODUCT_NAME": '"$(TARGET_NAME)"'}
    project_settings = {"SDKROOT": "iphoneos"}

    return "\n".join(
        [
            "// !$*UTF8*$!",
            "{",
            "\tarchiveVersion = 1;",
            "\tobjectVersion = 56;",
            "\tobjects = {",
            "",
            "/* Begin PBXNativeTarget section */",
            f"\t\t{_id(1)} /* App */ = {{",
            "\t\t\tisa = PBXNativeTarget;",
            f'\t\t\tbuildConfigurationList = {_id(10)} /* Build configuration list for '
            'PBXNativeTarget "App" */;',
            "\t\t\tname = App;",
            "\t\t};",
            f"\t\t{_id(2)} /* AppTests */ = {{",
            "\t\t\tisa = PBXNativeTarget;",
            f'\t\t\tbuildConfigurationList = {_id(20)} /* Build configuration list for '
            'PBXNativeTarget "AppTests" */;',
            "\t\t\tname = AppTests;",
            "\t\t};",
            "/* End PBXNativeTarget section */",
            "",
            "/* Begin XCBuildConfiguration section */",
            _build_configuration(_id(11), "Debug", app_settings),
            _build_configuration(_id(12), "Release", app_settings),
            _build_configuration(_id(21), "Debug", tests_settings),
            _build_configuration(_id(22), "Release", tests_settings),
            _build_configuration(_id(31), "Debug", project_settings),
            _build_configuration(_id(32), "Release", project_settings),
            "/* End XCBuildConfiguration section */",
            "",
            "/* Begin XCConfigurationList section */",
            _configuration_list(_id(10), 'PBXNativeTarget "App"', [_id(11), _id(12)]),
            _configuration_list(_id(20), 'PBXNativeTarget "AppTests"', [_id(21), _id(22)]),
            _configuration_list(_id(30), 'PBXProject "App"', [_id(31), _id(32)]),
            "/* End XCConfigurationList section */",
            "\t};",
            f"\trootObject = {_id(0)} /* Project object */;",
            "}",
            "",
        ]
    )


@pytest.fixture
def xcode_project(tmp_path: Path) -> Path:
    """Directory containing App.xcodeproj with MARKETING_VERSION 1.0."""
    xcodeproj = tmp_path / "App.xcodeproj"
    xcodeproj.mkdir()
    (xcodeproj / "project.pbxproj").write_text(make_pbxproj(), encoding="utf-8")
    return tmp_path


def git(path: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=path, capture_output=True, text=True, check=True
    )
    return result.stdout.strip()


def add_commit(path: Path, message: str) -> None:
    git(path, "commit", "--allow-empty", "--quiet", "-m", message)


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Empty git repository with a committer identity configured."""
    git(tmp_path, "init", "--quiet")
    git(tmp_path, "config", "user.name", "Test")
    git(tmp_path, "config", "user.email", "test@test.com")
    git(tmp_path, "config", "commit.gpgsign", "false")
    git(tmp_path, "config", "tag.gpgsign", "false")
    return tmp_path


@pytest.fixture
def tagged_repo(git_repo: Path) -> Path:
    """Repository with one commit tagged v0.1.0 and a pyproject at version 0.1.0."""
    (git_repo / "pyproject.toml").write_text(
        """\
[project]
name = "test-project"
version = "0.1.0"

[tool.semver-py.version]
tag_format = "v$version"
versioning_system = "pyproject"
""",
        encoding="utf-8",
    )
    git(git_repo, "add", "pyproject.toml")
    add_commit(git_repo, "init: initial commit")
    git(git_repo, "tag", "v0.1.0")
    return git_repo


def _commit(sha: str, message: str) -> Commit:
    return Commit(sha, message, "Test", "test@test.com", datetime(2024, 1, 1, 12, 0))


@pytest.fixture
def feat_commit() -> Commit:
    return _commit("feat123", "feat: add user authentication")


@pytest.fixture
def fix_commit() -> Commit:
    return _commit("fix456", "fix(core): handle empty config")


@pytest.fixture
def breaking_commit() -> Commit:
    return _commit("break789", "feat(api)!: drop v1 endpoints")


@pytest.fixture
def sample_commits() -> list[Commit]:
    """Commits as git log reports them, newest first."""
    return [
        _commit("s6", "Merge branch 'main' into feature"),
        _commit("s5", "chore: bump dependencies"),
        _commit("s4", "docs: update readme"),
        _commit("s3", "feat: new feature\n\nBREAKING CHANGE: config format changed"),
        _commit("s2", "fix: correct typo"),
        _commit("s1", "feat(ui): add dark mode"),
    ]
