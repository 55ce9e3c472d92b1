"""Cargo matrix models — crates, feature flags and planned invocations."""

from __future__ import annotations

import shlex
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class MatrixTask(str, Enum):
    BUILD = "build"
    CLEAN = "clean"
    LINT = "lint"
    TEST = "test"


DEFAULT_CRATES: list[str] = ["openai", "error", "cli"]

DEFAULT_FEATURE_FLAGS: list[str] = [
    "--features=experimental",
    "--features=stable",
    "--features=default",
    "--no-default-features",
]

# The openai crate gets an extra build with integration tests enabled for
# every flag except this one.
NO_DEFAULT_FEATURES = "--no-default-features"
INTEGRATION_CRATE = "openai"

SUCCESS_BANNERS: dict[MatrixTask, str] = {
    MatrixTask.BUILD: "Build Success",
    MatrixTask.LINT: "Lint Success",
    MatrixTask.TEST: "Test Success",
}


class CargoInvocation(BaseModel):
    """A single planned command of a matrix task."""

    model_config = ConfigDict(frozen=True)

    argv: list[str]
    crate: str
    feature: str | None = None

    @property
    def display(self) -> str:
        return shlex.join(self.argv)


class LockfileRemoval(BaseModel):
    """Planned deletion of a crate's Cargo.lock (clean task)."""

    model_config = ConfigDict(frozen=True)

    path: Path
    crate: str

    @property
    def display(self) -> str:
        return f"rm -f {self.path.as_posix()}"


class MatrixConfig(BaseModel):
    """Crates and feature flags a matrix task iterates over."""

    model_config = ConfigDict(frozen=True)

    crates: list[str] = list(DEFAULT_CRATES)
    feature_flags: list[str] = list(DEFAULT_FEATURE_FLAGS)
    cargo_bin: str = "cargo"
    build_mode: str = ""
