"""
Environment probe — read-only queries about the host.

Detects the operating system, Linux distribution, system package
manager and the best available UI toolkit. Nothing here mutates
state; every function can be called repeatedly.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import distro

from devsetup.core.errors import UnsupportedSystemError

logger = logging.getLogger(__name__)

Which = Callable[[str], "str | None"]

SUPPORTED_OS = ("linux", "macos", "windows")

# Checked in order; the first one found wins.
_PACKAGE_MANAGERS: tuple[tuple[str, str], ...] = (
    ("apt", "apt-get"),
    ("dnf", "dnf"),
    ("yum", "yum"),
    ("pacman", "pacman"),
    ("apk", "apk"),
    ("brew", "brew"),
    ("winget", "winget"),
)

# UI toolkits in preference order (graphical first, plain last).
UI_BACKENDS = ("zenity", "dialog", "whiptail", "fzf")


@dataclass(frozen=True)
class SystemProfile:
    """Snapshot of what the probe found."""

    os: str
    distro: str
    package_manager: str
    ui_backend: str
    wsl: bool = False
    arch: str = ""

    def to_dict(self) -> dict:
        return {
            "os": self.os,
            "distro": self.distro,
            "package_manager": self.package_manager,
            "ui_backend": self.ui_backend,
            "wsl": self.wsl,
            "arch": self.arch,
        }


def detect_os(system: str | None = None) -> str:
    """Map ``platform.system()`` to linux/macos/windows/unknown."""
    system = system if system is not None else platform.system()
    if system == "Darwin":
        return "macos"
    if system == "Linux":
        return "linux"
    if system == "Windows" or system.startswith(("CYGWIN", "MINGW", "MSYS")):
        return "windows"
    return "unknown"


def detect_distro(os_name: str | None = None) -> str:
    """Return the distribution id (``ubuntu``, ``fedora``, ...).

    Uses the ``distro`` package (os-release, lsb_release, legacy
    release files). Non-Linux hosts report their OS name.
    """
    os_name = os_name or detect_os()
    if os_name != "linux":
        return os_name
    distro_id = distro.id()
    if distro_id:
        return distro_id
    for marker, name in (
        ("/etc/debian_version", "debian"),
        ("/etc/redhat-release", "rhel"),
        ("/etc/arch-release", "arch"),
    ):
        if Path(marker).exists():
            return name
    return "unknown"


def is_wsl() -> bool:
    """Whether we run inside Windows Subsystem for Linux."""
    try:
        with open("/proc/version", encoding="utf-8") as f:
            version_str = f.read().lower()
    except OSError:
        return False
    return "microsoft" in version_str or "wsl" in version_str


def detect_package_manager(which: Which = shutil.which) -> str:
    """Return the first available package manager, or ``none``."""
    for name, binary in _PACKAGE_MANAGERS:
        if which(binary):
            return name
    return "none"


def detect_ui_backend(
    preferred: str = "auto",
    which: Which = shutil.which,
    environ: dict[str, str] | None = None,
) -> str:
    """Pick the UI backend for this run.

    An explicit preference is honoured when its binary exists;
    otherwise auto-detection runs: zenity (only with a display),
    dialog, whiptail, fzf, then plain text.
    """
    environ = environ if environ is not None else dict(os.environ)
    has_display = bool(environ.get("DISPLAY") or environ.get("WAYLAND_DISPLAY"))

    if preferred not in ("auto", "plain", "basic"):
        if which(preferred) and (preferred != "zenity" or has_display):
            logger.debug("Using configured UI framework: %s", preferred)
            return preferred
        logger.warning("Configured UI framework '%s' is not usable, auto-detecting", preferred)
    elif preferred in ("plain", "basic"):
        return "plain"

    logger.debug("Auto-detecting UI framework...")
    for backend in UI_BACKENDS:
        if backend == "zenity" and not has_display:
            continue
        if which(backend):
            logger.info("Using %s for selection dialogs", backend)
            return backend

    logger.warning("No UI frameworks found, falling back to basic terminal prompts")
    return "plain"


def probe_system(ui_preference: str = "auto", which: Which = shutil.which) -> SystemProfile:
    """Run every probe and return the combined profile."""
    os_name = detect_os()
    return SystemProfile(
        os=os_name,
        distro=detect_distro(os_name),
        package_manager=detect_package_manager(which),
        ui_backend=detect_ui_backend(ui_preference, which),
        wsl=os_name == "linux" and is_wsl(),
        arch=platform.machine(),
    )


def require_supported(os_name: str) -> None:
    """Raise if the installer cannot run on this OS.

    Raises:
        UnsupportedSystemError: For any OS outside ``SUPPORTED_OS``.
    """
    if os_name not in SUPPORTED_OS:
        raise UnsupportedSystemError(
            f"Unsupported operating system: {platform.system() or os_name}. "
            "Cannot proceed."
        )


def font_dir(os_name: str, home: Path | None = None) -> Path | None:
    """Per-user font directory, or None where we do not install fonts."""
    home = home or Path.home()
    if os_name == "macos":
        return home / "Library" / "Fonts"
    if os_name == "linux":
        return home / ".local" / "share" / "fonts"
    return None
