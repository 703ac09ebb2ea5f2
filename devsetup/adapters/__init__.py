"""Adapters — installers for individual components.

Public re-exports for convenient access.
"""

from devsetup.adapters.base import InstallContext, Installer, Step
from devsetup.adapters.mock import MockInstaller
from devsetup.adapters.registry import InstallerRegistry, default_registry

__all__ = [
    "InstallContext",
    "Installer",
    "InstallerRegistry",
    "MockInstaller",
    "Step",
    "default_registry",
]
