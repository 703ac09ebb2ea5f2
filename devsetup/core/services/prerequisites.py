"""
System prerequisites — base packages every component relies on.

Runs before the sequencer. Each platform gets a list of install steps;
a failing step is a component-level error (logged, recorded), never a
process abort.
"""

from __future__ import annotations

import logging
import shutil

from devsetup.adapters.base import InstallContext, Installer, Step
from devsetup.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

HOMEBREW_INSTALL = (
    '/bin/bash -c "$(curl -fsSL '
    'https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh)"'
)

_DEBIAN_PACKAGES = [
    "curl", "git", "wget", "unzip", "build-essential",
    "dialog", "whiptail", "fzf", "software-properties-common",
    "apt-transport-https", "ca-certificates", "gnupg", "lsb-release",
    "jq", "hyperfine",
]
_RHEL_PACKAGES = ["curl", "git", "wget", "unzip", "dialog", "fzf", "jq", "hyperfine"]
_YUM_PACKAGES = ["curl", "git", "wget", "unzip", "dialog", "jq"]
_ARCH_PACKAGES = ["base-devel", "curl", "git", "wget", "unzip", "dialog", "fzf", "jq", "hyperfine"]
_BREW_PACKAGES = ["curl", "git", "wget", "unzip", "dialog", "fzf", "coreutils", "jq", "hyperfine"]
_GENERIC_PACKAGES = ["curl", "git", "wget", "unzip", "dialog"]

_DEBIAN_FAMILY = ("ubuntu", "debian", "linuxmint", "pop", "elementary", "raspbian")
_RHEL_FAMILY = ("fedora", "rhel", "centos", "rocky", "almalinux")
_ARCH_FAMILY = ("arch", "manjaro", "endeavouros")


def _debian_steps() -> list[Step]:
    return [
        Step("Updating apt repositories", ["apt", "update", "-y"], needs_sudo=True),
        Step("Installing Debian/Ubuntu prerequisites",
             ["apt", "install", "-y", *_DEBIAN_PACKAGES], needs_sudo=True),
    ]


def _rhel_steps(package_manager: str) -> list[Step]:
    if package_manager == "dnf":
        return [
            Step("Installing dnf Development Tools",
                 ["dnf", "groupinstall", "-y", "Development Tools"], needs_sudo=True),
            Step("Installing dnf prerequisites",
                 ["dnf", "install", "-y", *_RHEL_PACKAGES], needs_sudo=True),
        ]
    return [
        Step("Installing yum Development Tools",
             ["yum", "groupinstall", "-y", "Development Tools"], needs_sudo=True),
        Step("Installing yum prerequisites",
             ["yum", "install", "-y", *_YUM_PACKAGES], needs_sudo=True),
        # older repos lack fzf
        Step("Installing fzf from GitHub",
             "git clone --depth 1 https://github.com/junegunn/fzf.git ~/.fzf && ~/.fzf/install --all",
             required=False, shell=True),
    ]


def _arch_steps() -> list[Step]:
    return [
        Step("Installing Arch Linux prerequisites",
             ["pacman", "-Sy", "--noconfirm", *_ARCH_PACKAGES], needs_sudo=True),
    ]


def _macos_steps(which=shutil.which) -> list[Step]:
    steps: list[Step] = []
    if not which("xcode-select"):
        logger.debug("xcode-select not found, skipping Command Line Tools check")
    else:
        steps.append(Step(
            "Installing Xcode Command Line Tools",
            "xcode-select -p >/dev/null 2>&1 || xcode-select --install",
            required=False, shell=True,
        ))
    if not which("brew"):
        steps.append(Step("Installing Homebrew", HOMEBREW_INSTALL, shell=True))
    steps.append(Step("Installing essential Homebrew packages",
                      ["brew", "install", *_BREW_PACKAGES], required=False))
    return steps


def _windows_steps() -> list[Step]:
    return [
        Step("Installing Git via winget", ["winget", "install", "--id=Git.Git", "-e"], required=False),
        Step("Installing cURL via winget", ["winget", "install", "--id=cURL.cURL", "-e"], required=False),
    ]


def _generic_steps(package_manager: str) -> list[Step]:
    if package_manager in ("dnf", "yum"):
        return [Step("Installing generic prerequisites",
                     [package_manager, "install", "-y", *_GENERIC_PACKAGES], needs_sudo=True)]
    return [
        Step("Updating apt repositories", ["apt-get", "update", "-y"], needs_sudo=True, required=False),
        Step("Installing generic prerequisites",
             ["apt-get", "install", "-y", *_GENERIC_PACKAGES], needs_sudo=True),
    ]


def prerequisite_steps(context: InstallContext, which=shutil.which) -> list[Step]:
    """Install steps for the host described by ``context``.

    WSL hosts (Linux with ``wsl`` set) get the Debian set; unknown Linux
    distributions try the detected package manager with a minimal
    package list.
    """
    if context.os == "macos":
        return _macos_steps(which)
    if context.os == "windows":
        logger.warning("Automated Windows setup (outside WSL) is limited.")
        return _windows_steps()
    if context.wsl:
        logger.info("Running in WSL, performing Linux (Debian/Ubuntu) setup...")
        return _debian_steps()

    distro = context.distro
    if distro in _DEBIAN_FAMILY:
        return _debian_steps()
    if distro in _RHEL_FAMILY:
        return _rhel_steps(context.package_manager)
    if distro in _ARCH_FAMILY:
        return _arch_steps()
    logger.warning("Unsupported Linux distribution: %s. Attempting generic Linux setup.", distro)
    return _generic_steps(context.package_manager)


class PrerequisitesInstaller(Installer):
    component = "prerequisites"

    def __init__(self, which=shutil.which):
        self._which = which

    def install(self, context: InstallContext) -> Receipt:
        if context.os == "windows" and not self._which("winget"):
            return Receipt.failure(
                self.component,
                error="winget (Windows Package Manager) not found. "
                      "Please install 'App Installer' from Microsoft Store.",
                metadata={"fatal": True},
            )
        return self.run_steps(context, prerequisite_steps(context, self._which))


def install_prerequisites(context: InstallContext, which=shutil.which) -> Receipt:
    """Install base packages for the host. Never raises."""
    logger.info("Setting up prerequisites (OS: %s, distribution: %s)", context.os, context.distro)
    receipt = PrerequisitesInstaller(which).install(context)
    if receipt.ok:
        logger.info("Prerequisites setup completed.")
    else:
        logger.error("Prerequisites setup failed: %s", receipt.error)
    return receipt
