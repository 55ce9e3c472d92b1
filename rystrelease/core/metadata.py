"""Version metadata sources — the canonical version and declared package versions.

Two interchangeable sources answer "what version does package X declare":

- ``ManifestMetadataSource`` parses each Cargo.toml directly (default).
- ``CargoMetadataSource`` asks ``cargo metadata --no-deps`` once and indexes
  the result by package name.

Both raise ``MetadataUnavailableError`` rather than returning a partial
answer.
"""

from __future__ import annotations

import json
import logging
import subprocess
import tomllib
from pathlib import Path
from typing import Any, Protocol

from rystrelease.core.errors import MetadataUnavailableError
from rystrelease.models.workspace import PackageSpec

logger = logging.getLogger(__name__)


def relative_location(root: Path, path: Path) -> str:
    """Render ``path`` relative to ``root`` with forward slashes."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def read_canonical_version(root: Path, version_file: Path = Path("VERSION")) -> str:
    """Read the single source-of-truth release version.

    Surrounding whitespace (including the trailing newline) is stripped.
    """
    path = root / version_file
    location = relative_location(root, path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MetadataUnavailableError(location, f"cannot read file ({exc.strerror or exc})") from exc
    except UnicodeDecodeError as exc:
        raise MetadataUnavailableError(location, "not valid UTF-8") from exc

    version = text.strip()
    if not version:
        raise MetadataUnavailableError(location, "file is empty")
    return version


class MetadataSource(Protocol):
    """Anything that can report a workspace package's declared version."""

    def package_version(self, package: PackageSpec) -> str: ...


class ManifestMetadataSource:
    """Reads package versions straight from Cargo.toml files.

    ``version.workspace = true`` is resolved from the root Cargo.toml's
    ``[workspace.package].version``.
    """

    def __init__(self, root: Path) -> None:
        self._root = root
        self._workspace_version: str | None = None

    def _load(self, path: Path) -> dict[str, Any]:
        location = relative_location(self._root, path)
        try:
            with path.open("rb") as fh:
                return tomllib.load(fh)
        except OSError as exc:
            raise MetadataUnavailableError(
                location, f"cannot read manifest ({exc.strerror or exc})"
            ) from exc
        except UnicodeDecodeError as exc:
            raise MetadataUnavailableError(location, "not valid UTF-8") from exc
        except tomllib.TOMLDecodeError as exc:
            raise MetadataUnavailableError(location, f"invalid TOML ({exc})") from exc

    def _inherited_version(self) -> str:
        if self._workspace_version is None:
            root_manifest = self._root / "Cargo.toml"
            data = self._load(root_manifest)
            version = data.get("workspace", {}).get("package", {}).get("version")
            if not isinstance(version, str):
                raise MetadataUnavailableError(
                    relative_location(self._root, root_manifest),
                    "no [workspace.package].version to inherit",
                )
            self._workspace_version = version
        return self._workspace_version

    def package_version(self, package: PackageSpec) -> str:
        path = self._root / package.manifest
        location = relative_location(self._root, path)
        data = self._load(path)

        section = data.get("package")
        if not isinstance(section, dict):
            raise MetadataUnavailableError(location, "no [package] section")

        name = section.get("name")
        if name != package.name:
            raise MetadataUnavailableError(
                location, f"expected package {package.name!r} but found {name!r}"
            )

        version = section.get("version")
        if isinstance(version, dict) and version.get("workspace") is True:
            logger.debug("%s inherits its version from the workspace", package.name)
            return self._inherited_version()
        if not isinstance(version, str):
            raise MetadataUnavailableError(location, "no package version declared")
        return version


class CargoMetadataSource:
    """Reads package versions from ``cargo metadata --format-version 1 --no-deps``.

    The command runs at most once per source instance.
    """

    def __init__(self, root: Path, cargo_bin: str = "cargo") -> None:
        self._root = root
        self._cargo_bin = cargo_bin
        self._versions: dict[str, str] | None = None

    @property
    def command(self) -> list[str]:
        return [self._cargo_bin, "metadata", "--format-version", "1", "--no-deps"]

    def _index(self) -> dict[str, str]:
        if self._versions is not None:
            return self._versions

        location = "cargo metadata"
        logger.debug("Running %s in %s", " ".join(self.command), self._root)
        try:
            result = subprocess.run(
                self.command,
                cwd=self._root,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise MetadataUnavailableError(location, f"cannot run {self._cargo_bin} ({exc})") from exc

        if result.returncode != 0:
            stderr = result.stderr.strip().splitlines()
            reason = stderr[-1] if stderr else f"exit code {result.returncode}"
            raise MetadataUnavailableError(location, reason)

        try:
            payload = json.loads(result.stdout)
        except json.JSONDecodeError as exc:
            raise MetadataUnavailableError(location, f"invalid JSON ({exc})") from exc

        packages = payload.get("packages") if isinstance(payload, dict) else None
        if not isinstance(packages, list):
            raise MetadataUnavailableError(location, "unexpected cargo metadata output")

        self._versions = {
            pkg["name"]: pkg["version"]
            for pkg in packages
            if isinstance(pkg, dict) and "name" in pkg and "version" in pkg
        }
        return self._versions

    def package_version(self, package: PackageSpec) -> str:
        versions = self._index()
        if package.name not in versions:
            raise MetadataUnavailableError(
                package.manifest.as_posix(),
                f"package {package.name!r} not reported by cargo metadata",
            )
        return versions[package.name]


def create_metadata_source(
    root: Path, kind: str = "manifest", cargo_bin: str = "cargo"
) -> MetadataSource:
    """Build the metadata source named by the ``metadata_source`` setting."""
    if kind == "manifest":
        return ManifestMetadataSource(root)
    if kind == "cargo":
        return CargoMetadataSource(root, cargo_bin=cargo_bin)
    raise ValueError(f"Unknown metadata source: {kind!r}")
