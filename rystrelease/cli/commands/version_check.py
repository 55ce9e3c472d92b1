"""``rystrelease version-check`` — verify the release version is consistent.

Compares VERSION against the declared version of every workspace crate
and against the exact-version pins in cli/Cargo.toml.  Prints
``Version OK: <version>`` and exits 0 when everything agrees; otherwise
prints the first disagreement and exits 1.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from rystrelease.config import config
from rystrelease.core.metadata import create_metadata_source
from rystrelease.core.version_checker import VersionChecker

console = Console()


def build_checker(workspace: Path) -> VersionChecker:
    """Create a checker for ``workspace`` using the configured metadata source."""
    source = create_metadata_source(
        workspace, kind=config.metadata_source, cargo_bin=config.cargo_bin
    )
    return VersionChecker(workspace, source=source)


def version_check_cmd(
    workspace: Path = typer.Option(
        Path("."),
        "--workspace",
        "-w",
        help="Workspace root containing VERSION and the crate directories.",
    ),
) -> None:
    """Check that VERSION, every crate manifest and every dependency pin agree."""
    report = build_checker(workspace).check()
    console.print(report.message, soft_wrap=True, highlight=False, markup=False)
    if not report.ok:
        raise typer.Exit(code=1)
