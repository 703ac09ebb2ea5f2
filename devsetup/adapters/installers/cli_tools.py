"""
Common CLI tools through the system package manager.
"""

from __future__ import annotations

import logging
import shutil

from devsetup.adapters.base import InstallContext, Installer, Step
from devsetup.adapters.installers import packages
from devsetup.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

CLI_TOOLS = (
    "jq", "ripgrep", "fd", "bat", "exa", "delta", "hyperfine",
    "htop", "tmux", "tree", "curl", "wget", "unzip",
)

# Tools the package name doesn't match the binary name for.
_BINARIES = {"ripgrep": "rg", "delta": "delta", "fd": "fd"}


class CliToolsInstaller(Installer):
    component = "cli_tools"

    def install(self, context: InstallContext) -> Receipt:
        pm = context.package_manager
        steps: list[Step] = []

        if packages.supports(pm):
            refresh = packages.refresh_command(pm)
            if refresh is not None:
                cmd, sudo = refresh
                steps.append(Step("Refreshing package index", cmd, required=False, needs_sudo=sudo))
            # One package per step: a missing package must not block the rest.
            for tool in CLI_TOOLS:
                cmd, sudo = packages.install_command(pm, [tool])
                steps.append(Step(f"Installing {tool}", cmd, required=False, needs_sudo=sudo))
        elif shutil.which("cargo"):
            logger.warning("Unsupported package manager '%s'. Installing Rust-based tools via cargo.", pm)
            steps.append(Step(
                "Installing Rust-based tools via cargo",
                ["cargo", "install", "ripgrep", "bat", "fd-find", "git-delta", "hyperfine"],
                required=False,
            ))
        else:
            logger.warning("Cannot install CLI tools automatically: no supported package manager.")
            return Receipt.skip(self.component, reason=f"no supported package manager ({pm})")

        receipt = self.run_steps(context, steps)
        if receipt.ok and not context.dry_run:
            missing = [t for t in CLI_TOOLS if not shutil.which(_BINARIES.get(t, t))]
            if missing:
                logger.warning("Some tools are not available in PATH: %s", " ".join(missing))
                receipt.metadata["missing"] = missing
        return receipt
