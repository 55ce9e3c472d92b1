"""rystrelease data models — all Pydantic v2, all frozen (immutable)."""

from rystrelease.models.matrix import (
    DEFAULT_CRATES,
    DEFAULT_FEATURE_FLAGS,
    CargoInvocation,
    LockfileRemoval,
    MatrixConfig,
    MatrixTask,
)
from rystrelease.models.reports import (
    CheckFailure,
    CheckRecord,
    CheckStep,
    FailureKind,
    VersionReport,
)
from rystrelease.models.workspace import (
    DEFAULT_PACKAGES,
    DEFAULT_PINS,
    PackageSpec,
    PinSpec,
    WorkspaceLayout,
)

__all__ = [
    # workspace
    "PackageSpec",
    "PinSpec",
    "WorkspaceLayout",
    "DEFAULT_PACKAGES",
    "DEFAULT_PINS",
    # reports
    "CheckStep",
    "FailureKind",
    "CheckRecord",
    "CheckFailure",
    "VersionReport",
    # matrix
    "MatrixTask",
    "MatrixConfig",
    "CargoInvocation",
    "LockfileRemoval",
    "DEFAULT_CRATES",
    "DEFAULT_FEATURE_FLAGS",
]
