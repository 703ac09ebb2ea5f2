"""
Command runner — the single place where install commands are executed.

Sudo prefixing, environment overrides, dry-run and error capture all
live here. Commands have no timeout by default: a hung external
installer blocks the run until it is interrupted.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_TAIL = 2000


@dataclass
class CommandResult:
    """Outcome of one command."""

    ok: bool
    command: list[str]
    returncode: int | None = None
    stdout: str = ""
    stderr: str = ""
    error: str = ""
    elapsed_ms: int = 0
    dry_run: bool = False


class CommandRunner:
    """Run external commands and capture their output.

    Args:
        run: ``subprocess.run`` compatible callable (injectable for tests).
        timeout: Optional per-command timeout in seconds (None = wait forever).
    """

    def __init__(
        self,
        run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        timeout: float | None = None,
    ):
        self._run = run
        self.timeout = timeout

    def run(
        self,
        cmd: list[str],
        *,
        needs_sudo: bool = False,
        env_overrides: dict[str, str] | None = None,
        dry_run: bool = False,
        cwd: str | None = None,
    ) -> CommandResult:
        """Execute ``cmd`` unless ``dry_run`` is set.

        Returns:
            CommandResult; never raises for command failures.
        """
        if needs_sudo and _needs_sudo_prefix():
            cmd = ["sudo"] + cmd

        printable = shlex.join(cmd)
        if dry_run:
            logger.info("[dry-run] Would run: %s", printable)
            return CommandResult(ok=True, command=cmd, dry_run=True)

        env = os.environ.copy()
        if env_overrides:
            for key, value in env_overrides.items():
                env[key] = os.path.expandvars(value)

        logger.debug("Executing: %s", printable)
        start = time.monotonic()
        try:
            result = self._run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=env,
                cwd=cwd,
            )
        except FileNotFoundError:
            return CommandResult(
                ok=False,
                command=cmd,
                error=f"Command not found: {cmd[0]}",
            )
        except subprocess.TimeoutExpired:
            return CommandResult(
                ok=False,
                command=cmd,
                error=f"Command timed out after {self.timeout}s",
            )
        except OSError as e:
            return CommandResult(ok=False, command=cmd, error=f"Command execution error: {e}")

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = (result.stdout or "")[-_TAIL:]
        stderr = (result.stderr or "")[-_TAIL:]

        if result.returncode == 0:
            return CommandResult(
                ok=True,
                command=cmd,
                returncode=0,
                stdout=stdout.strip(),
                stderr=stderr.strip(),
                elapsed_ms=elapsed_ms,
            )

        logger.debug("Command failed (exit %d): %s", result.returncode, stderr.strip())
        return CommandResult(
            ok=False,
            command=cmd,
            returncode=result.returncode,
            stdout=stdout.strip(),
            stderr=stderr.strip(),
            error=f"Command failed (exit {result.returncode})",
            elapsed_ms=elapsed_ms,
        )


def _needs_sudo_prefix() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() != 0
