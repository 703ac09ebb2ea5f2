"""
Installer base — the contract between the sequencer and install routines.

The sequencer only talks to installers through this protocol. What an
installer does internally (apt, brew, mise, curl | sh) is opaque.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from devsetup.adapters.shell.command import CommandResult, CommandRunner
from devsetup.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


class InstallContext(BaseModel):
    """Everything an installer needs to know about the host and the run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    os: str = "linux"
    distro: str = "unknown"
    package_manager: str = "none"
    wsl: bool = False
    home: Path = Field(default_factory=Path.home)
    tmp_dir: Path = Field(default_factory=lambda: Path("/tmp"))
    dry_run: bool = False
    runner: CommandRunner = Field(default_factory=CommandRunner)


@dataclass
class Step:
    """One command of an install routine.

    ``required`` steps fail the component; optional steps only warn.
    ``shell`` steps are run through ``sh -c`` (for ``curl ... | sh``).
    """

    description: str
    command: list[str] | str
    required: bool = True
    needs_sudo: bool = False
    shell: bool = False
    env: dict[str, str] = field(default_factory=dict)


class Installer(ABC):
    """Abstract base class for all component installers.

    Installers perform external side effects and return receipts.
    They NEVER raise; failures are captured in the Receipt.

    To add a component:
        1. Subclass Installer
        2. Set ``component`` and implement ``install``
        3. Register it in the InstallerRegistry
    """

    component: str = ""

    @abstractmethod
    def install(self, context: InstallContext) -> Receipt:
        """Install the component and return a receipt."""

    def run_steps(self, context: InstallContext, steps: list[Step]) -> Receipt:
        """Run steps in order; stop at the first required failure."""
        start = time.monotonic()
        warnings: list[str] = []
        outputs: list[str] = []

        for step in steps:
            logger.info("%s...", step.description)
            result = self._run_step(context, step)
            if result.ok:
                if result.stdout:
                    outputs.append(result.stdout)
                continue

            message = f"{step.description} failed: {result.error}"
            if step.required:
                logger.error(message)
                return Receipt.failure(
                    component=self.component,
                    error=message,
                    warnings=warnings,
                    duration_ms=int((time.monotonic() - start) * 1000),
                    metadata={"step": step.description, "stderr": result.stderr},
                )
            logger.warning(message)
            warnings.append(message)

        return Receipt.success(
            component=self.component,
            output="\n".join(outputs)[-2000:],
            warnings=warnings,
            duration_ms=int((time.monotonic() - start) * 1000),
            metadata={"dry_run": context.dry_run},
        )

    @staticmethod
    def _run_step(context: InstallContext, step: Step) -> CommandResult:
        command = ["sh", "-c", step.command] if step.shell else step.command
        assert isinstance(command, list)
        return context.runner.run(
            command,
            needs_sudo=step.needs_sudo,
            env_overrides=step.env or None,
            dry_run=context.dry_run,
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} component={self.component!r}>"
