"""
Tests for the environment probe.
"""

from pathlib import Path

import pytest

from devsetup.core.errors import UnsupportedSystemError
from devsetup.core.services import probe
from devsetup.core.services.probe import (
    detect_os,
    detect_package_manager,
    detect_ui_backend,
    font_dir,
    require_supported,
)


def _which_of(*available: str):
    return lambda name: f"/usr/bin/{name}" if name in available else None


class TestDetectOS:
    @pytest.mark.parametrize("system, expected", [
        ("Linux", "linux"),
        ("Darwin", "macos"),
        ("Windows", "windows"),
        ("MINGW64_NT-10.0", "windows"),
        ("SunOS", "unknown"),
    ])
    def test_mapping(self, system, expected):
        assert detect_os(system) == expected

    def test_unsupported_raises(self):
        with pytest.raises(UnsupportedSystemError, match="Unsupported operating system"):
            require_supported("unknown")

    def test_supported_passes(self):
        require_supported("linux")


class TestDetectDistro:
    def test_non_linux_reports_os(self):
        assert probe.detect_distro("macos") == "macos"

    def test_uses_distro_package(self, monkeypatch):
        monkeypatch.setattr(probe.distro, "id", lambda: "fedora")
        assert probe.detect_distro("linux") == "fedora"


class TestPackageManager:
    def test_first_found_wins(self):
        assert detect_package_manager(_which_of("dnf", "brew")) == "dnf"

    def test_apt_via_apt_get(self):
        assert detect_package_manager(_which_of("apt-get")) == "apt"

    def test_none(self):
        assert detect_package_manager(_which_of()) == "none"


class TestUIBackend:
    def test_zenity_needs_display(self):
        which = _which_of("zenity", "whiptail")
        assert detect_ui_backend("auto", which, environ={}) == "whiptail"
        assert detect_ui_backend("auto", which, environ={"DISPLAY": ":0"}) == "zenity"

    def test_auto_order(self):
        assert detect_ui_backend("auto", _which_of("fzf", "dialog"), environ={}) == "dialog"

    def test_nothing_found_is_plain(self):
        assert detect_ui_backend("auto", _which_of(), environ={}) == "plain"

    def test_explicit_preference_honoured(self):
        assert detect_ui_backend("fzf", _which_of("dialog", "fzf"), environ={}) == "fzf"

    def test_missing_preference_auto_detects(self):
        assert detect_ui_backend("whiptail", _which_of("dialog"), environ={}) == "dialog"

    def test_plain_and_basic(self):
        which = _which_of("dialog")
        assert detect_ui_backend("plain", which, environ={}) == "plain"
        assert detect_ui_backend("basic", which, environ={}) == "plain"


class TestFontDir:
    def test_linux(self, tmp_path: Path):
        assert font_dir("linux", tmp_path) == tmp_path / ".local" / "share" / "fonts"

    def test_macos(self, tmp_path: Path):
        assert font_dir("macos", tmp_path) == tmp_path / "Library" / "Fonts"

    def test_windows_has_none(self, tmp_path: Path):
        assert font_dir("windows", tmp_path) is None
