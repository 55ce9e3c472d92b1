"""Shared test fixtures for rystrelease."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

_CLI_MANIFEST = """\
[package]
name = "ryst"
version = "{cli}"
edition = "2021"

authors = ["Embyr"]

[dependencies]
clap = "4"
ryst-openai = {{ path = "../openai", version = "={openai_pin}" }} # ryst-openai Version
ryst-error = {{ path = "../error", version = "={error_pin}" }} # ryst-error Version

[features]
default = []
stable = ["default"]
experimental = ["stable"]
"""

_OPENAI_MANIFEST = """\
[package]
name = "ryst-openai"
version = "{openai}"
edition = "2021"

[dependencies]
ryst-error = {{ path = "../error", version = "={openai_error_pin}" }} # ryst-error Version
serde = {{ version = "1", features = ["derive"] }}
"""

_ERROR_MANIFEST = """\
[package]
name = "ryst-error"
version = "{error}"
edition = "2021"

[dependencies]
"""

WorkspaceFactory = Callable[..., Path]


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test workspaces."""
    return tmp_path


@pytest.fixture
def make_workspace(tmp_dir: Path) -> WorkspaceFactory:
    """Factory fixture: write a ryst workspace whose versions default to ``version``.

    Any of ``cli``, ``openai``, ``error``, ``openai_pin`` and ``error_pin``
    can be overridden to introduce a disagreement.
    """

    def _factory(
        version: str = "1.2.0",
        *,
        cli: str | None = None,
        openai: str | None = None,
        error: str | None = None,
        openai_pin: str | None = None,
        error_pin: str | None = None,
        root: Path | None = None,
    ) -> Path:
        root = root or tmp_dir / "ws"
        for crate in ("cli", "openai", "error"):
            (root / crate).mkdir(parents=True, exist_ok=True)

        (root / "VERSION").write_text(f"{version}\n", encoding="utf-8")
        (root / "cli" / "Cargo.toml").write_text(
            _CLI_MANIFEST.format(
                cli=cli or version,
                openai_pin=openai_pin or version,
                error_pin=error_pin or version,
            ),
            encoding="utf-8",
        )
        (root / "openai" / "Cargo.toml").write_text(
            _OPENAI_MANIFEST.format(openai=openai or version, openai_error_pin=version),
            encoding="utf-8",
        )
        (root / "error" / "Cargo.toml").write_text(
            _ERROR_MANIFEST.format(error=error or version),
            encoding="utf-8",
        )
        return root

    return _factory


@pytest.fixture
def workspace(make_workspace: WorkspaceFactory) -> Path:
    """Provide a consistent workspace at version 1.2.0."""
    return make_workspace("1.2.0")


def snapshot_files(root: Path) -> dict[str, bytes]:
    """Map every file under ``root`` to its bytes, for no-mutation checks."""
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture
def file_snapshot() -> Callable[[Path], dict[str, bytes]]:
    """Provide ``snapshot_files`` to tests."""
    return snapshot_files
