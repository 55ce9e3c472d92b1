"""rystrelease: release tooling for the ryst Cargo workspace.

v0.1.0 replaces the workspace justfile:
  - Release-version consistency check across VERSION, the crate manifests
    and the exact-version dependency pins in cli/Cargo.toml
  - Manifest-parsing and ``cargo metadata`` sources for package versions
  - Cargo build / lint / test / clean matrix over feature flags and crates
  - Env-driven config, Rich terminal output
"""

__version__ = "0.1.0"
__author__ = "Embyr"
__description__ = "Release version consistency checks and cargo matrix runner for ryst"

from rystrelease.core.version_checker import VersionChecker, check_versions
from rystrelease.cli.app import app as cli

__all__ = ["VersionChecker", "check_versions", "cli", "__version__"]
