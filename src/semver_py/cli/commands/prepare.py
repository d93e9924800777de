"""Implementation of the 'prepare' command."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from semver_py.exceptions import SemverPyError
from semver_py.project.prepare import prepare_versioning

if TYPE_CHECKING:
    from rich.console import Console


def run_prepare(
    xcodeproj: str | None,
    target: str | None,
    main_group: str | None,
    console: Console,
    err_console: Console,
) -> None:
    """Prepare an Xcode project for the apple-generic versioning system."""
    try:
        plist = prepare_versioning(
            Path(xcodeproj) if xcodeproj else None,
            target=target,
            main_group=main_group,
        )
    except SemverPyError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    console.print(f"  [green]✓[/] Version information moved to [cyan]{plist}[/]")
    console.print("  [green]✓[/] VERSIONING_SYSTEM set to [cyan]apple-generic[/]")
