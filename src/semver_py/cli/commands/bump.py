"""Implementation of the 'bump' command.

The bump command determines the next version from commits, writes it
to the project, prepends the changelog and commits the result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.panel import Panel

from semver_py.cli.commands.info import render_info
from semver_py.cli.options import load_project
from semver_py.core.versioning import bump_message, get_versioning_info, semantic_bump
from semver_py.exceptions import SemverPyError

if TYPE_CHECKING:
    from rich.console import Console


def run_bump(
    path: str | None,
    overrides: dict[str, Any],
    execute: bool,
    commit: bool,
    console: Console,
    err_console: Console,
) -> bool:
    """Run the bump command.

    Args:
        path: Optional path to project directory
        overrides: Configuration overrides from command line options
        execute: Whether to actually apply changes
        commit: Whether to commit the changed files
        console: Console for standard output
        err_console: Console for error output

    Returns:
        True if the version was bumped
    """
    project_path, config, repo = load_project(path, overrides, err_console)

    # Check for dirty working directory
    if execute and not config.allow_dirty and repo.is_dirty():
        err_console.print(
            "[red]Error:[/] Repository has uncommitted changes.\n"
            "Commit or stash them, or use [cyan]allow_dirty = true[/] in config."
        )
        raise SystemExit(1)

    try:
        info = get_versioning_info(repo, config, path=project_path)
    except SemverPyError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    if not info.bumpable:
        console.print("[yellow]No version bump detected.[/]")
        return False

    mode_str = "[green]EXECUTING[/]" if execute else "[yellow]DRY-RUN[/]"
    console.print(
        f"\n{mode_str} - Bumping from [cyan]{info.current_version}[/] "
        f"to [green]{info.new_version}[/] ({info.bump_type})\n"
    )

    if not execute:
        render_info(info, console)
        changes = [f"  • Update version ({info.versioning_system})"]
        if config.changelog.enabled:
            changes.append(f"  • Prepend changelog to [cyan]{config.changelog.path}[/]")
        if commit:
            changes.append(f"  • Commit: [cyan]{bump_message(config.version.bump_message, info)}[/]")
        console.print(
            Panel(
                "[bold]Would make the following changes:[/]\n\n" + "\n".join(changes),
                title="[yellow]Dry Run Preview[/]",
                border_style="yellow",
            )
        )
        console.print("\n[dim]Run without [cyan]--dry-run[/] to apply these changes.[/]")
        return False

    try:
        semantic_bump(info, repo, config, path=project_path, commit=commit)
    except SemverPyError as e:
        err_console.print(f"[red]Error bumping version:[/] {e}")
        raise SystemExit(1) from e

    console.print(
        Panel(
            f"[green]Successfully bumped to version {info.new_version}![/]",
            title="[green]Bump Complete[/]",
            border_style="green",
        )
    )
    return True
