"""Command line interface for semver-py."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from semver_py import __version__
from semver_py.cli.commands.bump import run_bump
from semver_py.cli.commands.info import run_info
from semver_py.cli.commands.prepare import run_prepare
from semver_py.cli.options import build_overrides
from semver_py.core.version import BumpType

app = typer.Typer(
    name="semver-py",
    help="Semantic versioning and changelogs from conventional commits.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

ENV_PREFIX = "SEMVER_PY_"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"semver-py {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Semantic versioning and changelogs from conventional commits."""
    _configure_logging(verbose)


# Options shared by 'info' and 'bump'

PathOption = typer.Option(None, "--path", "-p", help="Project directory (defaults to cwd).")
AllowedTypesOption = typer.Option(
    None,
    "--allowed-types",
    envvar=f"{ENV_PREFIX}ALLOWED_TYPES",
    help="Comma separated list of allowed commit types.",
)
BumpMapOption = typer.Option(
    None,
    "--bump-map",
    help="Bump level per commit type, e.g. 'breaking=major,feat=minor,fix=patch'.",
)
ForceTypeOption = typer.Option(
    None,
    "--force-type",
    envvar=f"{ENV_PREFIX}FORCE_TYPE",
    help="Force a minimum bump type.",
)
AcceptUnknownMajorOption = typer.Option(
    None,
    "--accept-unknown-major/--reject-unknown-major",
    envvar=f"{ENV_PREFIX}ACCEPT_UNKNOWN_MAJOR",
    help="Count 'type!:' commits of types outside the allowed list as major bumps.",
)
TagFormatOption = typer.Option(
    None,
    "--tag-format",
    envvar=f"{ENV_PREFIX}TAG_FORMAT",
    help="Format of version tags; '$version' is replaced by the version.",
)
TargetOption = typer.Option(
    None,
    "--target",
    envvar=f"{ENV_PREFIX}TARGET",
    help="Xcode target holding the version (defaults to the first target).",
)
TypeMapOption = typer.Option(
    None,
    "--type-map",
    envvar=f"{ENV_PREFIX}TYPE_MAP",
    help="Changelog section titles per type, e.g. 'breaking=BREAKING CHANGES,feat=Features'. "
    "Only these types are listed in the changelog.",
)
UpdateOption = typer.Option(
    None,
    "--update/--no-update",
    envvar=f"{ENV_PREFIX}UPDATE",
    help="Determine the changelog from the previously tagged version rather than the "
    "current one. Useful on release branches.",
)
VersioningSystemOption = typer.Option(
    None,
    "--versioning-system",
    envvar=f"{ENV_PREFIX}VERSIONING_SYSTEM",
    help="Where the version is stored: 'manual', 'apple-generic' or 'pyproject'.",
)
ReleaseNameOption = typer.Option(
    None,
    "--release-name",
    envvar=f"{ENV_PREFIX}RELEASE_NAME",
    help="Release name shown in the changelog title.",
)


@app.command()
def info(
    path: Optional[str] = PathOption,
    allowed_types: Optional[str] = AllowedTypesOption,
    bump_map: Optional[str] = BumpMapOption,
    force_type: Optional[BumpType] = ForceTypeOption,
    accept_unknown_major: Optional[bool] = AcceptUnknownMajorOption,
    tag_format: Optional[str] = TagFormatOption,
    target: Optional[str] = TargetOption,
    type_map: Optional[str] = TypeMapOption,
    update: Optional[bool] = UpdateOption,
    versioning_system: Optional[str] = VersioningSystemOption,
    release_name: Optional[str] = ReleaseNameOption,
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
) -> None:
    """Show the current and next version and the upcoming changelog."""
    overrides = build_overrides(
        allowed_types=allowed_types,
        bump_map=bump_map,
        force_type=force_type,
        accept_unknown_major=accept_unknown_major,
        tag_format=tag_format,
        target=target,
        type_map=type_map,
        update=update,
        versioning_system=versioning_system,
        release_name=release_name,
    )
    run_info(path, overrides, as_json, console, err_console)


@app.command()
def bump(
    path: Optional[str] = PathOption,
    allowed_types: Optional[str] = AllowedTypesOption,
    bump_map: Optional[str] = BumpMapOption,
    force_type: Optional[BumpType] = ForceTypeOption,
    accept_unknown_major: Optional[bool] = AcceptUnknownMajorOption,
    tag_format: Optional[str] = TagFormatOption,
    target: Optional[str] = TargetOption,
    type_map: Optional[str] = TypeMapOption,
    update: Optional[bool] = UpdateOption,
    versioning_system: Optional[str] = VersioningSystemOption,
    release_name: Optional[str] = ReleaseNameOption,
    bump_message: Optional[str] = typer.Option(
        None,
        "--bump-message",
        envvar=f"{ENV_PREFIX}BUMP_MESSAGE",
        help="Commit message for the bump commit; supports $current_version and $new_version.",
    ),
    changelog_file: Optional[Path] = typer.Option(
        None,
        "--changelog-file",
        envvar=f"{ENV_PREFIX}CHANGELOG_FILE",
        help="Changelog file to prepend the new section to.",
    ),
    changelog: bool = typer.Option(
        True, "--changelog/--no-changelog", help="Write the changelog file."
    ),
    commit: bool = typer.Option(True, "--commit/--no-commit", help="Commit the bump."),
    allow_dirty: Optional[bool] = typer.Option(
        None,
        "--allow-dirty/--no-allow-dirty",
        envvar=f"{ENV_PREFIX}ALLOW_DIRTY",
        help="Bump even if the working tree has uncommitted changes.",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show what would change without changing anything."
    ),
) -> None:
    """Bump the version, write the changelog and commit."""
    overrides = build_overrides(
        allowed_types=allowed_types,
        bump_map=bump_map,
        force_type=force_type,
        accept_unknown_major=accept_unknown_major,
        tag_format=tag_format,
        target=target,
        type_map=type_map,
        update=update,
        versioning_system=versioning_system,
        release_name=release_name,
        changelog_file=changelog_file,
        bump_message=bump_message,
        allow_dirty=allow_dirty,
    )
    if not changelog:
        overrides["changelog"]["enabled"] = False
    run_bump(path, overrides, not dry_run, commit, console, err_console)


@app.command()
def prepare(
    xcodeproj: Optional[str] = typer.Option(
        None,
        "--xcodeproj",
        envvar=f"{ENV_PREFIX}PROJECT",
        help="Path to the .xcodeproj (not the workspace). Optional if there is only one.",
    ),
    target: Optional[str] = TargetOption,
    main_group: Optional[str] = typer.Option(
        None,
        "--main-group",
        envvar=f"{ENV_PREFIX}MAIN_GROUP",
        help="Folder of the target's sources, where Info.plist is placed.",
    ),
) -> None:
    """Prepare an Xcode project for the apple-generic versioning system."""
    run_prepare(xcodeproj, target, main_group, console, err_console)


if __name__ == "__main__":
    app()
