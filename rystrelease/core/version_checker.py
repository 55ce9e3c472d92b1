"""Release version consistency checker.

VERSION holds the single release version for the workspace.  Every crate
manifest must declare it, and every exact-version pin between workspace
crates must require it.  The check is linear::

    READ_CANONICAL -> CHECK_PACKAGE (ryst, ryst-openai, ryst-error)
                   -> CHECK_PIN (ryst-openai, ryst-error) -> SUCCESS

Any CHECK_* step that disagrees ends the run at FAIL; later steps are not
attempted and only that one disagreement is reported.  Nothing on disk is
modified.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rystrelease.core.errors import VersionCheckError, VersionMismatchError
from rystrelease.core.metadata import (
    MetadataSource,
    ManifestMetadataSource,
    read_canonical_version,
    relative_location,
)
from rystrelease.core.pin_parser import read_pin_version
from rystrelease.models.reports import (
    CheckFailure,
    CheckRecord,
    CheckStep,
    FailureKind,
    VersionReport,
)
from rystrelease.models.workspace import WorkspaceLayout

logger = logging.getLogger(__name__)


class VersionChecker:
    """Cross-checks VERSION against manifests and dependency pins.

    Parameters
    ----------
    root:
        Workspace root containing VERSION and the crate directories.
    layout:
        Which packages and pins to check, in order.  Defaults to the ryst
        workspace layout.
    source:
        Where declared package versions come from.  Defaults to parsing
        the manifests under ``root``.
    """

    def __init__(
        self,
        root: Path,
        layout: WorkspaceLayout | None = None,
        source: MetadataSource | None = None,
    ) -> None:
        self._root = Path(root)
        self._layout = layout or WorkspaceLayout()
        self._source = source or ManifestMetadataSource(self._root)

    @property
    def root(self) -> Path:
        return self._root

    @property
    def layout(self) -> WorkspaceLayout:
        return self._layout

    def check(self, *, strict: bool = False) -> VersionReport:
        """Run the check sequence and return its report.

        Raises the failing ``VersionCheckError`` instead if strict=True.
        """
        checks: list[CheckRecord] = []
        step = CheckStep.READ_CANONICAL
        version: str | None = None

        try:
            version = read_canonical_version(self._root, self._layout.version_file)
            logger.debug("Canonical version %s", version)

            step = CheckStep.CHECK_PACKAGE
            for package in self._layout.packages:
                found = self._source.package_version(package)
                record = CheckRecord(
                    step=step,
                    location=relative_location(self._root, self._root / package.manifest),
                    subject=package.name,
                    expected=version,
                    found=found,
                )
                checks.append(record)
                self._compare(record)

            step = CheckStep.CHECK_PIN
            for pin in self._layout.pins:
                found = read_pin_version(self._root, pin)
                record = CheckRecord(
                    step=step,
                    location=relative_location(self._root, self._root / pin.manifest),
                    subject=pin.dependency,
                    detail=pin.detail,
                    expected=version,
                    found=found,
                )
                checks.append(record)
                self._compare(record)
        except VersionCheckError as exc:
            if strict:
                raise
            return VersionReport(
                version=version,
                checks=checks,
                failure=_failure_from(exc, step),
            )

        logger.debug("All %d version declarations agree on %s", len(checks), version)
        return VersionReport(version=version, checks=checks)

    @staticmethod
    def _compare(record: CheckRecord) -> None:
        where = f"{record.location} ({record.detail})" if record.detail else record.location
        if record.matches:
            logger.debug("%s: %s OK", where, record.found)
            return
        logger.warning("%s: expected %s, found %s", where, record.expected, record.found)
        raise VersionMismatchError(
            record.location, record.expected, record.found, record.detail
        )


def _failure_from(exc: VersionCheckError, step: CheckStep) -> CheckFailure:
    if isinstance(exc, VersionMismatchError):
        return CheckFailure(
            kind=FailureKind.VERSION_MISMATCH,
            step=step,
            location=exc.location,
            detail=exc.detail,
            expected=exc.expected,
            found=exc.found,
            message=str(exc),
        )
    return CheckFailure(
        kind=FailureKind.METADATA_UNAVAILABLE,
        step=step,
        location=exc.location,
        detail=exc.detail,
        message=str(exc),
    )


def check_versions(
    root: Path | str = ".",
    *,
    layout: WorkspaceLayout | None = None,
    source: MetadataSource | None = None,
    strict: bool = False,
) -> VersionReport:
    """Convenience wrapper: check the workspace at ``root``."""
    return VersionChecker(Path(root), layout=layout, source=source).check(strict=strict)
