"""Main Typer application — imports and registers all CLI commands.

Entry point: ``rystrelease`` (configured via pyproject.toml scripts).

Commands: version-check, build, lint, test, clean.
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from rystrelease.cli.commands.matrix_cmd import build_cmd, clean_cmd, lint_cmd, test_cmd
from rystrelease.cli.commands.version_check import version_check_cmd
from rystrelease.config import config

app = typer.Typer(
    name="rystrelease",
    help="Release tooling for the ryst workspace: version checks and the cargo matrix.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def _configure_logging() -> None:
    # Log records go to stderr; stdout carries the command's own output.
    logging.basicConfig(
        level=config.effective_log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


# Register subcommands
app.command(name="version-check", help="Check release version consistency.")(version_check_cmd)
app.command(name="build", help="Build all crates for every feature flag.")(build_cmd)
app.command(name="lint", help="Version check, then rustfmt and clippy.")(lint_cmd)
app.command(name="test", help="Build and test all crates for every feature flag.")(test_cmd)
app.command(name="clean", help="Clean build output and lockfiles.")(clean_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
