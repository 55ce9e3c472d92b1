"""Tool configuration — env-driven, workspace-aware.

Centralized config using pydantic-settings for environment variable
support. Reads from a .env file and RYST_* environment variables.

The version check itself is not configurable: which packages and pins are
compared is fixed by ``rystrelease.models.workspace.WorkspaceLayout``.
Settings here only steer logging, where package versions are read from,
and the cargo toolchain used by the build matrix.
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReleaseConfig(BaseSettings):
    """Release tooling configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export RYST_LOG_LEVEL=DEBUG
        export RYST_METADATA_SOURCE=cargo
        export BUILD_MODE=--release

    Or via .env file::

        RYST_CARGO_BIN=/opt/rust/bin/cargo
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="RYST_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    debug: bool = False

    # Where package versions come from: parse Cargo.toml files directly,
    # or ask ``cargo metadata``.
    metadata_source: Literal["manifest", "cargo"] = "manifest"

    # Cargo toolchain
    cargo_bin: str = "cargo"
    # Extra cargo argument for the openai integration builds, e.g. --release.
    # The unprefixed BUILD_MODE is what the old justfile read.
    build_mode: str = Field(
        default="",
        validation_alias=AliasChoices("RYST_BUILD_MODE", "BUILD_MODE"),
    )

    @property
    def effective_log_level(self) -> int:
        """Numeric log level; ``debug`` forces DEBUG."""
        if self.debug:
            return logging.DEBUG
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO


# Module-level singleton — import as `from rystrelease.config import config`
config = ReleaseConfig()
