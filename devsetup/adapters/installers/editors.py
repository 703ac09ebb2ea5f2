"""
VS Code extensions, when the ``code`` command exists.
"""

from __future__ import annotations

import logging
import shutil

from devsetup.adapters.base import InstallContext, Installer, Step
from devsetup.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

VSCODE_EXTENSIONS = (
    "ms-python.python",
    "rust-lang.rust-analyzer",
    "golang.go",
    "esbenp.prettier-vscode",
    "dbaeumer.vscode-eslint",
    "ms-azuretools.vscode-docker",
    "ms-vscode-remote.remote-containers",
    "redhat.vscode-yaml",
    "ms-vsliveshare.vsliveshare",
    "github.copilot",
)


class VSCodeExtensionsInstaller(Installer):
    component = "vscode_extensions"

    def install(self, context: InstallContext) -> Receipt:
        code = shutil.which("code")
        if code is None:
            logger.warning("VS Code (code command) not found in PATH. Skipping extension installation.")
            return Receipt.skip(self.component, reason="code command not found")

        return self.run_steps(context, [
            Step(f"Installing extension {ext}", [code, "--install-extension", ext], required=False)
            for ext in VSCODE_EXTENSIONS
        ])
