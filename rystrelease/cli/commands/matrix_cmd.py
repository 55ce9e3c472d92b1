"""``rystrelease build|lint|test|clean`` — run the cargo matrix.

Each command walks every feature flag and crate of the workspace, echoing
and running the cargo invocations in order.  The first failing command
aborts the run and its exit code becomes the CLI's exit code.  ``lint``
runs the release version check before touching cargo.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from rystrelease.cli.commands.version_check import build_checker
from rystrelease.config import config
from rystrelease.core.errors import CommandFailedError, VersionCheckError
from rystrelease.core.matrix import MatrixRunner
from rystrelease.models.matrix import MatrixConfig, MatrixTask

console = Console()


def _run_matrix(task: MatrixTask, workspace: Path, dry_run: bool) -> None:
    matrix_config = MatrixConfig(cargo_bin=config.cargo_bin, build_mode=config.build_mode)
    runner = MatrixRunner(workspace, config=matrix_config, console=console)

    if dry_run:
        steps = runner.plan(task)
        if task == MatrixTask.LINT:
            console.print("rystrelease version-check", soft_wrap=True, highlight=False, markup=False)
        for step in steps:
            console.print(step.display, soft_wrap=True, highlight=False, markup=False)
        console.print(f"\n[dim]{len(steps)} steps planned for {task.value}.[/dim]")
        return

    try:
        runner.run(task, version_checker=build_checker(workspace))
    except VersionCheckError as exc:
        console.print(str(exc), soft_wrap=True, highlight=False, markup=False)
        raise typer.Exit(code=1)
    except CommandFailedError as exc:
        console.print(f"[bold red]{escape(str(exc))}[/bold red]", soft_wrap=True)
        raise typer.Exit(code=exc.returncode)


_WORKSPACE_OPTION = typer.Option(
    Path("."),
    "--workspace",
    "-w",
    help="Workspace root containing the crate directories.",
)
_DRY_RUN_OPTION = typer.Option(
    False,
    "--dry-run",
    help="Print the planned commands without running them.",
)


def build_cmd(workspace: Path = _WORKSPACE_OPTION, dry_run: bool = _DRY_RUN_OPTION) -> None:
    """Build every crate and its tests for every feature flag."""
    _run_matrix(MatrixTask.BUILD, workspace, dry_run)


def lint_cmd(workspace: Path = _WORKSPACE_OPTION, dry_run: bool = _DRY_RUN_OPTION) -> None:
    """Check versions, then run rustfmt and clippy for every feature flag."""
    _run_matrix(MatrixTask.LINT, workspace, dry_run)


def test_cmd(workspace: Path = _WORKSPACE_OPTION, dry_run: bool = _DRY_RUN_OPTION) -> None:
    """Build and run the tests of every crate for every feature flag."""
    _run_matrix(MatrixTask.TEST, workspace, dry_run)


def clean_cmd(workspace: Path = _WORKSPACE_OPTION, dry_run: bool = _DRY_RUN_OPTION) -> None:
    """Remove build output and lockfiles of every crate."""
    _run_matrix(MatrixTask.CLEAN, workspace, dry_run)
