"""Implementation of the 'info' command.

The info command reports the current version, the next version and
the changelog section, without changing anything.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table

from semver_py.cli.options import load_project
from semver_py.core.versioning import VersioningInfo, get_versioning_info
from semver_py.exceptions import SemverPyError

if TYPE_CHECKING:
    from rich.console import Console


def render_info(info: VersioningInfo, console: Console) -> None:
    """Print versioning facts as a table followed by the changelog."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="dim")
    table.add_column()
    table.add_row("Versioning system", info.versioning_system)
    table.add_row("Current version", f"[cyan]{info.current_version}[/]")
    table.add_row("Current tag", info.current_tag)
    table.add_row("Bump type", str(info.bump_type))
    table.add_row("Next version", f"[green]{info.new_version}[/]")
    table.add_row("Bumpable", "[green]yes[/]" if info.bumpable else "[yellow]no[/]")
    console.print(table)

    if info.bumpable:
        console.print(
            Panel(
                info.changelog.rstrip(),
                title="[cyan]Changelog[/]",
                border_style="cyan",
            )
        )


def run_info(
    path: str | None,
    overrides: dict[str, Any],
    as_json: bool,
    console: Console,
    err_console: Console,
) -> VersioningInfo:
    """Run the info command.

    Args:
        path: Optional path to project directory
        overrides: Configuration overrides from command line options
        as_json: Print the facts as JSON instead of a table
        console: Console for standard output
        err_console: Console for error output
    """
    project_path, config, repo = load_project(path, overrides, err_console)

    try:
        info = get_versioning_info(repo, config, path=project_path)
    except SemverPyError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    if as_json:
        console.print_json(data=info.to_dict())
    else:
        render_info(info, console)

    return info
