"""
mise — the universal tool version manager, installed first.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from devsetup.adapters.base import InstallContext, Installer, Step
from devsetup.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

MISE_INSTALL_SCRIPT = "curl -fsSL https://mise.run | sh"


def _local_bin(home: Path) -> Path:
    return home / ".local" / "bin"


def find_mise(context: InstallContext) -> str | None:
    """Locate the mise binary on PATH or in ``~/.local/bin``."""
    found = shutil.which("mise")
    if found:
        return found
    candidate = _local_bin(context.home) / "mise"
    if candidate.is_file():
        return str(candidate)
    return None


def activate_local_bin(context: InstallContext) -> None:
    """Put ``~/.local/bin`` on this process's PATH so later steps see mise."""
    local_bin = str(_local_bin(context.home))
    path = os.environ.get("PATH", "")
    if local_bin not in path.split(os.pathsep):
        os.environ["PATH"] = os.pathsep.join([local_bin, path]) if path else local_bin
        logger.debug("Added %s to PATH for this session", local_bin)


def mise_command(context: InstallContext) -> str | None:
    """The mise binary to drive language installs, or None if missing.

    In dry-run mode a missing mise is assumed to be installed by an
    earlier step, so the plain ``mise`` name is returned.
    """
    mise = find_mise(context)
    if mise is None and context.dry_run:
        return "mise"
    if mise is None:
        logger.error("mise is not installed or not in PATH. Cannot proceed with tool installation.")
    return mise


class MiseInstaller(Installer):
    component = "mise"

    def install(self, context: InstallContext) -> Receipt:
        existing = find_mise(context)
        if existing:
            version = context.runner.run([existing, "--version"])
            logger.info("mise is already installed: %s", version.stdout or existing)
            activate_local_bin(context)
            return Receipt.success(self.component, output=f"already installed: {existing}")

        receipt = self.run_steps(context, [
            Step("Installing mise", MISE_INSTALL_SCRIPT, shell=True),
        ])
        if not receipt.ok or context.dry_run:
            return receipt

        activate_local_bin(context)
        if find_mise(context) is None:
            return Receipt.failure(
                self.component,
                error="mise command not found after installation attempt.",
            )
        logger.info("mise installed and activated for this session")
        return receipt
