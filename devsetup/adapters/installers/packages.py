"""
System package-manager command builders.
"""

from __future__ import annotations

# (command prefix, needs sudo)
_INSTALL: dict[str, tuple[list[str], bool]] = {
    "apt": (["apt-get", "install", "-y"], True),
    "dnf": (["dnf", "install", "-y"], True),
    "yum": (["yum", "install", "-y"], True),
    "pacman": (["pacman", "-S", "--noconfirm", "--needed"], True),
    "apk": (["apk", "add"], True),
    "brew": (["brew", "install"], False),
    "winget": (["winget", "install", "-e", "--id"], False),
}

_REFRESH: dict[str, list[str]] = {
    "apt": ["apt-get", "update", "-y"],
    "dnf": ["dnf", "makecache"],
    "pacman": ["pacman", "-Sy", "--noconfirm"],
    "apk": ["apk", "update"],
    "brew": ["brew", "update"],
}

# Package names that differ from the binary/tool name per manager.
_RENAMES: dict[str, dict[str, str]] = {
    "apt": {"fd": "fd-find", "delta": "git-delta", "exa": "eza"},
    "dnf": {"fd": "fd-find", "delta": "git-delta"},
    "yum": {"fd": "fd-find", "delta": "git-delta"},
    "pacman": {"delta": "git-delta"},
    "brew": {"delta": "git-delta"},
}


def supports(package_manager: str) -> bool:
    return package_manager in _INSTALL


def install_command(package_manager: str, packages: list[str]) -> tuple[list[str], bool]:
    """Build ``(argv, needs_sudo)`` to install ``packages``.

    Raises:
        KeyError: For an unknown package manager.
    """
    prefix, needs_sudo = _INSTALL[package_manager]
    renames = _RENAMES.get(package_manager, {})
    return prefix + [renames.get(p, p) for p in packages], needs_sudo


def refresh_command(package_manager: str) -> tuple[list[str], bool] | None:
    """Index refresh command (``apt-get update``), if the manager has one."""
    cmd = _REFRESH.get(package_manager)
    if cmd is None:
        return None
    return list(cmd), _INSTALL[package_manager][1]
