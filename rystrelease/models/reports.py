"""Version check report models — the structured result of one check run."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class CheckStep(str, Enum):
    """States of the linear check sequence."""

    READ_CANONICAL = "read_canonical"
    CHECK_PACKAGE = "check_package"
    CHECK_PIN = "check_pin"
    SUCCESS = "success"
    FAIL = "fail"


class FailureKind(str, Enum):
    VERSION_MISMATCH = "version_mismatch"
    METADATA_UNAVAILABLE = "metadata_unavailable"


class CheckRecord(BaseModel):
    """One comparison against the canonical version."""

    model_config = ConfigDict(frozen=True)

    step: CheckStep
    location: str  # repository-relative file, e.g. "openai/Cargo.toml"
    subject: str  # package or dependency name
    detail: str | None = None  # e.g. "the ryst-openai dependency" for pins
    expected: str
    found: str

    @property
    def matches(self) -> bool:
        return self.expected == self.found


class CheckFailure(BaseModel):
    """The single failure that ended a check run."""

    model_config = ConfigDict(frozen=True)

    kind: FailureKind
    step: CheckStep
    location: str
    detail: str | None = None
    expected: str | None = None
    found: str | None = None
    message: str


class VersionReport(BaseModel):
    """Result of a version consistency check.

    ``checks`` holds every comparison performed, in order, including the
    failing one when it was a mismatch.  ``failure`` is None on success.
    """

    model_config = ConfigDict(frozen=True)

    version: str | None = None
    checks: list[CheckRecord] = []
    failure: CheckFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def final_step(self) -> CheckStep:
        return CheckStep.SUCCESS if self.ok else CheckStep.FAIL

    @property
    def message(self) -> str:
        """The single line a user sees for this run."""
        if self.failure is not None:
            return self.failure.message
        return f"Version OK: {self.version}"
