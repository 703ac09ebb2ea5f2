"""
Language toolchains installed through mise.

Each installer pins its runtime globally with ``mise use -g`` and then
adds the usual development tools. Tool installs are optional steps: a
missing linter warns but does not fail the language.
"""

from __future__ import annotations

import logging
import shutil

from devsetup.adapters.base import InstallContext, Installer, Step
from devsetup.adapters.installers.mise import mise_command
from devsetup.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


class MiseLanguageInstaller(Installer):
    """Shared flow: resolve mise, install runtimes, then extra tools."""

    runtimes: tuple[str, ...] = ()

    def install(self, context: InstallContext) -> Receipt:
        mise = mise_command(context)
        if mise is None:
            return Receipt.failure(
                self.component,
                error="mise is not installed; select the mise component first.",
            )
        steps = [
            Step(
                f"Installing {', '.join(self.runtimes)} via mise",
                [mise, "use", "-g", *self.runtimes],
            ),
        ]
        steps.extend(self.tool_steps(context, mise))
        return self.run_steps(context, steps)

    def tool_steps(self, context: InstallContext, mise: str) -> list[Step]:
        return []


class PythonInstaller(MiseLanguageInstaller):
    component = "python"
    runtimes = ("python@3.12",)

    _UV_TOOLS = ("ruff", "black", "pipx", "pytest")

    def tool_steps(self, context: InstallContext, mise: str) -> list[Step]:
        steps: list[Step] = []
        uv = shutil.which("uv")
        if uv is None:
            steps.append(Step(
                "Installing uv",
                "curl -LsSf https://astral.sh/uv/install.sh | sh",
                shell=True,
            ))
            uv = str(context.home / ".local" / "bin" / "uv")
        else:
            logger.info("uv is already installed. Skipping uv installation.")
        for tool in self._UV_TOOLS:
            steps.append(Step(f"Installing {tool} via uv", [uv, "tool", "install", tool], required=False))
        return steps


class NodeInstaller(MiseLanguageInstaller):
    component = "nodejs"
    runtimes = ("node@lts", "bun@latest", "pnpm@latest")

    _NPM_GLOBALS = ("typescript", "eslint", "prettier", "nodemon", "pm2")

    def tool_steps(self, context: InstallContext, mise: str) -> list[Step]:
        return [
            Step(
                "Installing global npm packages",
                [mise, "exec", "node@lts", "--", "npm", "install", "-g", *self._NPM_GLOBALS],
            ),
        ]


class GoInstaller(MiseLanguageInstaller):
    component = "go"
    runtimes = ("go@latest",)

    _GO_TOOLS = (
        ("golangci-lint", "github.com/golangci/golangci-lint/cmd/golangci-lint@latest"),
        ("delve", "github.com/go-delve/delve/cmd/dlv@latest"),
        ("goimports", "golang.org/x/tools/cmd/goimports@latest"),
    )

    def tool_steps(self, context: InstallContext, mise: str) -> list[Step]:
        return [
            Step(f"Installing {name}", [mise, "exec", "go@latest", "--", "go", "install", module], required=False)
            for name, module in self._GO_TOOLS
        ]


class RustInstaller(MiseLanguageInstaller):
    component = "rust"
    runtimes = ("rust@latest",)

    _CARGO_TOOLS = (
        "cargo-edit", "cargo-watch", "cargo-expand", "sccache",
        "ripgrep", "fd-find", "bat",
    )

    def tool_steps(self, context: InstallContext, mise: str) -> list[Step]:
        return [
            Step(f"Installing {crate}", [mise, "exec", "rust@latest", "--", "cargo", "install", crate], required=False)
            for crate in self._CARGO_TOOLS
        ]
