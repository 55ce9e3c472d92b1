"""rystrelease CLI — Typer-based command-line interface.

Provides the ``rystrelease`` command with subcommands for checking
release-version consistency and running the cargo build, lint, test and
clean matrices over the workspace crates.

All output uses Rich for formatted terminal display.
"""
