"""
Maintenance tasks for an installed environment: tool updates, cache
cleanup and the global git identity.

Each task is a list of ``Step``s run through the same ``Installer``
step runner as the prerequisites, so dry-run, sudo and error capture
behave identically. Every step except the git identity is optional:
a failing update or cache clear is a warning, not a failed task.
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from devsetup.adapters.base import InstallContext, Installer, Step
from devsetup.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

Which = Callable[[str], str | None]

# choice -> core.editor value
EDITORS: dict[str, str] = {
    "vim": "vim",
    "nano": "nano",
    "code": "code --wait",
}

GIT_ALIASES: dict[str, str] = {
    "st": "status",
    "br": "branch",
    "co": "checkout",
    "cm": "commit",
    "lg": "log --oneline --graph --all",
}


class _StepTask(Installer):
    """An installer-shaped wrapper around a fixed step list."""

    def __init__(self, name: str, steps: list[Step]):
        self.component = name
        self._steps = steps

    def install(self, context: InstallContext) -> Receipt:
        return self.run_steps(context, self._steps)


# ── update ──────────────────────────────────────────────────────


def update_steps(which: Which = shutil.which) -> list[Step]:
    """Self-update mise, upgrade its tools, then npm and cargo globals."""
    steps = [
        Step("Updating mise itself", ["mise", "self-update", "--yes"], required=False),
        Step("Updating all mise-managed tools", ["mise", "upgrade"], required=False),
    ]
    if which("npm"):
        steps.append(Step("Updating global npm packages", ["npm", "update", "-g"], required=False))
    if which("cargo") and which("cargo-install-update"):
        steps.append(Step("Updating cargo packages", ["cargo", "install-update", "-a"], required=False))
    return steps


def update_tools(context: InstallContext, which: Which = shutil.which) -> Receipt:
    """Update mise and everything it manages. Fails only if mise is missing."""
    if not which("mise"):
        return Receipt.failure("update", error="mise not found. Please install it first.")
    receipt = _StepTask("update", update_steps(which)).install(context)
    logger.info("Tool updates completed!")
    return receipt


# ── cleanup ─────────────────────────────────────────────────────


def cleanup_steps(home: Path, which: Which = shutil.which) -> list[Step]:
    """Cache clears for the tools that are present, then temp files."""
    steps: list[Step] = []
    if which("mise"):
        steps.append(Step("Cleaning mise cache", ["mise", "cache", "clear"], required=False))
    if which("npm"):
        steps.append(Step("Cleaning npm cache", ["npm", "cache", "clean", "--force"], required=False))
    if which("cargo") and (home / ".cargo").is_dir():
        if which("cargo-cache"):
            steps.append(Step("Cleaning cargo cache", ["cargo", "cache", "--autoclean"], required=False))
        else:
            logger.info("cargo-cache not installed. Skipping automatic cleanup.")

    # first package manager found wins
    if which("apt-get"):
        steps += [
            Step("Cleaning apt cache", ["apt-get", "clean"], required=False, needs_sudo=True),
            Step("Removing unused apt packages", ["apt-get", "autoremove", "--purge", "-y"],
                 required=False, needs_sudo=True),
        ]
    elif which("dnf"):
        steps.append(Step("Cleaning dnf cache", ["dnf", "clean", "all"], required=False, needs_sudo=True))
    elif which("brew"):
        steps.append(Step("Cleaning Homebrew cache", ["brew", "cleanup"], required=False))

    mise_cache = shlex.quote(str(home / ".cache" / "mise"))
    steps.append(Step(
        "Cleaning temporary files",
        f"rm -rf /tmp/mise-* /tmp/install-* {mise_cache}/*",
        required=False, shell=True,
    ))
    return steps


def cleanup(context: InstallContext, which: Which = shutil.which) -> Receipt:
    """Clear tool and package-manager caches. Never fails the task."""
    receipt = _StepTask("cleanup", cleanup_steps(context.home, which)).install(context)
    logger.info("Cleanup completed!")
    return receipt


# ── git identity ────────────────────────────────────────────────


@dataclass
class GitSettings:
    """Answers for ``configure-git``. Empty/None fields are left unchanged."""

    name: str = ""
    email: str = ""
    editor: str | None = None
    default_branch_main: bool = True
    aliases: bool = True


def current_git_config(key: str, run: Callable[..., subprocess.CompletedProcess] = subprocess.run) -> str:
    """Global git setting ``key``, or an empty string when unset."""
    try:
        proc = run(["git", "config", "--global", key], capture_output=True, text=True)
    except OSError as e:
        logger.debug("git config %s failed: %s", key, e)
        return ""
    return proc.stdout.strip() if proc.returncode == 0 else ""


def git_config_steps(settings: GitSettings) -> list[Step]:
    def setting(description: str, key: str, value: str) -> Step:
        return Step(description, ["git", "config", "--global", key, value])

    steps: list[Step] = []
    if settings.name:
        steps.append(setting(f"Setting name to {settings.name}", "user.name", settings.name))
    if settings.email:
        steps.append(setting(f"Setting email to {settings.email}", "user.email", settings.email))
    if settings.editor:
        editor = EDITORS.get(settings.editor, settings.editor)
        steps.append(setting(f"Setting editor to {editor}", "core.editor", editor))
    if settings.default_branch_main:
        steps.append(setting("Setting default branch to 'main'", "init.defaultBranch", "main"))
    if settings.aliases:
        for alias, command in GIT_ALIASES.items():
            steps.append(setting(f"Adding alias {alias}", f"alias.{alias}", command))
    return steps


def configure_git(
    context: InstallContext,
    settings: GitSettings,
    which: Which = shutil.which,
) -> Receipt:
    """Write the chosen global git settings."""
    if not which("git"):
        return Receipt.failure("configure-git", error="Git not found. Please install Git first.")
    receipt = _StepTask("configure-git", git_config_steps(settings)).install(context)
    if receipt.ok:
        logger.info("Git configuration completed!")
    return receipt
