"""
Installer registry — dispatch from component id to install routine.

The sequencer never calls installers directly: it goes through
``InstallerRegistry.install`` which always returns a Receipt, even when
no installer is registered or the installer raises.
"""

from __future__ import annotations

import logging
import time

from devsetup.adapters.base import InstallContext, Installer
from devsetup.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


class InstallerRegistry:
    """Central registry and dispatcher for installers."""

    def __init__(self) -> None:
        self._installers: dict[str, Installer] = {}

    def register(self, installer: Installer) -> None:
        """Register an installer under its component id."""
        name = installer.component
        if name in self._installers:
            logger.warning("Overwriting existing installer: %s", name)
        self._installers[name] = installer
        logger.debug("Registered installer: %s", name)

    def unregister(self, component: str) -> None:
        self._installers.pop(component, None)

    def get(self, component: str) -> Installer | None:
        return self._installers.get(component)

    def __contains__(self, component: str) -> bool:
        return component in self._installers

    def list_components(self) -> list[str]:
        return list(self._installers.keys())

    def install(self, component: str, context: InstallContext) -> Receipt:
        """Run the installer for ``component``.

        Returns:
            Receipt with the outcome (never raises).
        """
        installer = self._installers.get(component)
        if installer is None:
            return Receipt.failure(
                component=component,
                error=f"No installer registered for '{component}'",
            )

        start = time.monotonic()
        try:
            receipt = installer.install(context)
        except Exception as e:
            # Installers should never raise; convert anyway.
            logger.error("Installer %s raised: %s", component, e)
            receipt = Receipt.failure(component=component, error=f"Unexpected error: {e}")

        if not receipt.duration_ms:
            receipt.duration_ms = int((time.monotonic() - start) * 1000)
        return receipt


def default_registry() -> InstallerRegistry:
    """Registry with every built-in installer."""
    from devsetup.adapters.installers import BUILTIN_INSTALLERS

    registry = InstallerRegistry()
    for installer_cls in BUILTIN_INSTALLERS:
        registry.register(installer_cls())
    return registry
