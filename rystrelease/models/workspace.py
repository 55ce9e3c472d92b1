"""Workspace layout models — which manifests and pins carry the release version."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class PackageSpec(BaseModel):
    """A workspace package whose declared version must match VERSION."""

    model_config = ConfigDict(frozen=True)

    name: str  # package name as declared in [package].name
    manifest: Path  # relative to the workspace root


class PinSpec(BaseModel):
    """An exact-version dependency pin embedded in a manifest.

    The pin is located by its marker comment, ``# <dependency> Version``,
    either trailing the dependency line or on the line just above it.
    """

    model_config = ConfigDict(frozen=True)

    manifest: Path
    dependency: str

    @property
    def marker(self) -> str:
        return f"# {self.dependency} Version"

    @property
    def detail(self) -> str:
        """Human-readable field description used in diagnostics."""
        return f"the {self.dependency} dependency"


DEFAULT_PACKAGES: list[PackageSpec] = [
    PackageSpec(name="ryst", manifest=Path("cli/Cargo.toml")),
    PackageSpec(name="ryst-openai", manifest=Path("openai/Cargo.toml")),
    PackageSpec(name="ryst-error", manifest=Path("error/Cargo.toml")),
]

DEFAULT_PINS: list[PinSpec] = [
    PinSpec(manifest=Path("cli/Cargo.toml"), dependency="ryst-openai"),
    PinSpec(manifest=Path("cli/Cargo.toml"), dependency="ryst-error"),
]


class WorkspaceLayout(BaseModel):
    """The fixed set of version declarations checked for a release.

    Order matters: packages are checked first, in list order, then pins.
    The first disagreement ends the check.
    """

    model_config = ConfigDict(frozen=True)

    version_file: Path = Path("VERSION")
    packages: list[PackageSpec] = Field(default_factory=lambda: list(DEFAULT_PACKAGES))
    pins: list[PinSpec] = Field(default_factory=lambda: list(DEFAULT_PINS))
