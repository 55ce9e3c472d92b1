"""Exact-version dependency pin parser.

Pins are dependency lines in a Cargo.toml tagged with a marker comment::

    ryst-openai = { path = "../openai", version = "=0.1.0" } # ryst-openai Version

or, with the marker on its own line::

    # ryst-error Version
    ryst-error = { path = "../error", version = "=0.1.0" }

The required version is the quoted string that starts with ``=``.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from rystrelease.core.errors import MetadataUnavailableError
from rystrelease.core.metadata import relative_location
from rystrelease.models.workspace import PinSpec

logger = logging.getLogger(__name__)

_EXACT_VERSION = re.compile(r'"=(?P<version>[^"\s]+)"')


def _marker_pattern(dependency: str) -> re.Pattern[str]:
    return re.compile(rf"#\s*{re.escape(dependency)} Version\b")


def find_pin_version(text: str, dependency: str, location: str) -> str:
    """Return the exact version pinned for ``dependency`` in manifest ``text``.

    Raises MetadataUnavailableError if the marker or the pinned version is
    missing.
    """
    detail = f"the {dependency} dependency"
    marker = _marker_pattern(dependency)
    lines = text.splitlines()

    hits = [i for i, line in enumerate(lines) if marker.search(line)]
    if not hits:
        raise MetadataUnavailableError(
            location, f"marker '# {dependency} Version' not found", detail
        )
    if len(hits) > 1:
        logger.warning(
            "%s has %d '# %s Version' markers; using line %d.",
            location, len(hits), dependency, hits[0] + 1,
        )

    index = hits[0]
    code = lines[index][: marker.search(lines[index]).start()]
    if not code.strip():
        # Marker stands alone: the pin is the next non-blank line.
        code = ""
        for following in lines[index + 1:]:
            if following.strip():
                code = following
                break

    match = _EXACT_VERSION.search(code)
    if match is None:
        raise MetadataUnavailableError(
            location, 'no exact version ("=X.Y.Z") next to marker', detail
        )
    return match.group("version")


def read_pin_version(root: Path, pin: PinSpec) -> str:
    """Read ``pin.manifest`` under ``root`` and return the pinned version."""
    path = root / pin.manifest
    location = relative_location(root, path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MetadataUnavailableError(
            location, f"cannot read manifest ({exc.strerror or exc})", pin.detail
        ) from exc
    except UnicodeDecodeError as exc:
        raise MetadataUnavailableError(location, "not valid UTF-8", pin.detail) from exc
    return find_pin_version(text, pin.dependency, location)
