"""Error taxonomy for release checks and the cargo matrix runner."""

from __future__ import annotations


class ReleaseToolError(RuntimeError):
    """Base class for all rystrelease failures."""


class VersionCheckError(ReleaseToolError):
    """A version declaration could not be confirmed against VERSION.

    ``location`` is the repository-relative file; ``detail`` names the
    field within it when the file alone is ambiguous (dependency pins).
    """

    def __init__(self, message: str, location: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.location = location
        self.detail = detail

    @property
    def where(self) -> str:
        if self.detail:
            return f"{self.location} for {self.detail}"
        return self.location


class VersionMismatchError(VersionCheckError):
    """A declared version differs from the canonical version."""

    def __init__(
        self,
        location: str,
        expected: str,
        found: str,
        detail: str | None = None,
    ) -> None:
        self.expected = expected
        self.found = found
        where = f"{location} for {detail}" if detail else location
        super().__init__(
            f"expected {expected} but found {found} in {where}",
            location,
            detail,
        )


class MetadataUnavailableError(VersionCheckError):
    """A version file, manifest or pin could not be read or lacks the field."""

    def __init__(self, location: str, reason: str, detail: str | None = None) -> None:
        self.reason = reason
        where = f"{location} for {detail}" if detail else location
        super().__init__(
            f"unable to read version from {where}: {reason}",
            location,
            detail,
        )


class CommandFailedError(ReleaseToolError):
    """A cargo matrix command exited non-zero."""

    def __init__(self, command: str, returncode: int) -> None:
        super().__init__(f"command failed with exit code {returncode}: {command}")
        self.command = command
        self.returncode = returncode
