"""Tests for the dependency pin parser — marker lookup and exact-version extraction."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from rystrelease.core.errors import MetadataUnavailableError
from rystrelease.core.pin_parser import find_pin_version, read_pin_version
from rystrelease.models.workspace import PinSpec


class TestFindPinVersion:
    def test_trailing_marker(self):
        text = 'ryst-openai = { path = "../openai", version = "=0.1.0" } # ryst-openai Version\n'
        assert find_pin_version(text, "ryst-openai", "cli/Cargo.toml") == "0.1.0"

    def test_marker_on_preceding_line(self):
        text = (
            "[dependencies]\n"
            "# ryst-error Version\n"
            "\n"
            'ryst-error = { path = "../error", version = "=3.4.5" }\n'
        )
        assert find_pin_version(text, "ryst-error", "cli/Cargo.toml") == "3.4.5"

    def test_selects_the_named_dependency(self):
        text = (
            'ryst-openai = { version = "=1.0.0" } # ryst-openai Version\n'
            'ryst-error = { version = "=2.0.0" } # ryst-error Version\n'
        )
        assert find_pin_version(text, "ryst-error", "cli/Cargo.toml") == "2.0.0"
        assert find_pin_version(text, "ryst-openai", "cli/Cargo.toml") == "1.0.0"

    def test_marker_missing(self):
        text = 'ryst-openai = { version = "=1.0.0" }\n'
        with pytest.raises(MetadataUnavailableError) as exc_info:
            find_pin_version(text, "ryst-openai", "cli/Cargo.toml")
        assert exc_info.value.location == "cli/Cargo.toml"
        assert exc_info.value.detail == "the ryst-openai dependency"

    def test_non_exact_requirement_rejected(self):
        text = 'ryst-openai = { version = "1.0.0" } # ryst-openai Version\n'
        with pytest.raises(MetadataUnavailableError, match="exact version"):
            find_pin_version(text, "ryst-openai", "cli/Cargo.toml")

    def test_marker_at_end_of_file(self):
        text = "[dependencies]\n# ryst-openai Version\n"
        with pytest.raises(MetadataUnavailableError):
            find_pin_version(text, "ryst-openai", "cli/Cargo.toml")

    def test_marker_name_is_exact(self):
        # "ryst-openai-extras" must not satisfy the "ryst-openai" marker.
        text = 'extras = { version = "=9.9.9" } # ryst-openai-extras Version\n'
        with pytest.raises(MetadataUnavailableError):
            find_pin_version(text, "ryst-openai", "cli/Cargo.toml")

    def test_first_marker_wins(self, caplog: pytest.LogCaptureFixture):
        text = (
            'a = { version = "=1.0.0" } # ryst-error Version\n'
            'b = { version = "=2.0.0" } # ryst-error Version\n'
        )
        with caplog.at_level(logging.WARNING, logger="rystrelease.core.pin_parser"):
            assert find_pin_version(text, "ryst-error", "cli/Cargo.toml") == "1.0.0"
        assert "2 '# ryst-error Version' markers" in caplog.text


class TestReadPinVersion:
    def test_reads_from_workspace(self, make_workspace):
        root = make_workspace("1.2.0", openai_pin="1.1.9")
        pin = PinSpec(manifest=Path("cli/Cargo.toml"), dependency="ryst-openai")
        assert read_pin_version(root, pin) == "1.1.9"

    def test_manifest_not_utf8(self, make_workspace):
        root = make_workspace("1.2.0")
        (root / "cli" / "Cargo.toml").write_bytes(b"# \xff\n")
        pin = PinSpec(manifest=Path("cli/Cargo.toml"), dependency="ryst-openai")
        with pytest.raises(MetadataUnavailableError, match="not valid UTF-8") as exc_info:
            read_pin_version(root, pin)
        assert exc_info.value.detail == "the ryst-openai dependency"

    def test_missing_manifest(self, tmp_dir: Path):
        pin = PinSpec(manifest=Path("cli/Cargo.toml"), dependency="ryst-error")
        with pytest.raises(MetadataUnavailableError) as exc_info:
            read_pin_version(tmp_dir, pin)
        assert "cli/Cargo.toml for the ryst-error dependency" in str(exc_info.value)
