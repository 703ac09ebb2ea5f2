"""
Install use case — everything after the selection is known.

Flow:
    backup (if enabled) → prerequisites → sequencer → validation

The CLI owns the steps before this one (OS check, settings, logging,
selection) because those are the ones that may exit the process.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from devsetup.adapters.base import InstallContext
from devsetup.adapters.registry import InstallerRegistry, default_registry
from devsetup.adapters.shell.command import CommandRunner
from devsetup.core.data.catalog import COMPONENTS
from devsetup.core.engine.sequencer import FailurePolicy, ProgressSink
from devsetup.core.engine.sequencer import run as run_sequence
from devsetup.core.models.component import Component, SelectionSet
from devsetup.core.models.receipt import Receipt
from devsetup.core.models.run_state import RunState
from devsetup.core.models.settings import Settings
from devsetup.core.persistence.run_files import RunPaths
from devsetup.core.services.backup import BackupManager, BackupSnapshot
from devsetup.core.services.prerequisites import install_prerequisites
from devsetup.core.services.probe import SystemProfile, font_dir
from devsetup.core.services.validator import ValidationReport, validate

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Result of one installation run."""

    state: RunState
    snapshot: BackupSnapshot | None = None
    prerequisites: Receipt | None = None
    validation: ValidationReport | None = None
    log_file: Path | None = None
    error: str | None = None

    @property
    def exit_code(self) -> int:
        if self.error or self.state.aborted:
            return 1
        return 0

    def to_dict(self) -> dict:
        result: dict = {"state": self.state.to_dict()}
        if self.error:
            result["error"] = self.error
        if self.snapshot is not None:
            result["backup"] = self.snapshot.to_dict()
        if self.prerequisites is not None:
            result["prerequisites"] = self.prerequisites.status
        if self.validation is not None:
            result["validation"] = self.validation.to_dict()
        if self.log_file is not None:
            result["log_file"] = str(self.log_file)
        return result


def build_context(
    profile: SystemProfile,
    paths: RunPaths,
    dry_run: bool = False,
    home: Path | None = None,
    runner: CommandRunner | None = None,
) -> InstallContext:
    return InstallContext(
        os=profile.os,
        distro=profile.distro,
        package_manager=profile.package_manager,
        wsl=profile.wsl,
        home=home or Path.home(),
        tmp_dir=paths.tmp_dir,
        dry_run=dry_run,
        runner=runner or CommandRunner(),
    )


def run_install(
    selected: SelectionSet,
    settings: Settings,
    profile: SystemProfile,
    paths: RunPaths,
    *,
    catalog: tuple[Component, ...] = COMPONENTS,
    registry: InstallerRegistry | None = None,
    surface: ProgressSink | None = None,
    policy: FailurePolicy | None = None,
    dry_run: bool = False,
    skip_validation: bool = False,
    home: Path | None = None,
    runner: CommandRunner | None = None,
) -> InstallResult:
    """Back up, install prerequisites and components, then validate.

    Component and backup failures are recorded on the run state; only a
    prerequisite failure marked fatal (no usable package manager) stops
    the run early.

    Args:
        selected: Non-empty set of component ids.
        settings: Resolved settings (backup location and switch).
        profile: Host facts from the probe.
        paths: Run file locations (temp dir, log file).
        registry: Installer dispatch (default: built-in installers).
        surface: Progress display.
        policy: Failure policy for the sequencer.
        dry_run: Log commands instead of running them; no backup.
        skip_validation: Do not re-check the system afterwards.
    """
    home = home or Path.home()
    state = RunState(selected=frozenset(selected))
    result = InstallResult(state=state, log_file=paths.log_file)
    context = build_context(profile, paths, dry_run=dry_run, home=home, runner=runner)

    # ── Backup ──
    if dry_run:
        logger.info("[dry-run] Skipping dotfiles backup")
    elif not settings.auto_backup:
        logger.info("Automatic backup disabled, skipping")
    else:
        manager = BackupManager(settings.backup_root(home), home=home)
        try:
            result.snapshot = manager.backup()
        except OSError as e:
            state.record_error(f"Backup failed: {e}")
            logger.error("Backup failed: %s", e)
        else:
            for target in result.snapshot.failures:
                state.record_error(f"Failed to backup {target}")

    # ── Prerequisites ──
    result.prerequisites = install_prerequisites(context)
    if result.prerequisites.failed:
        state.record_error(f"Prerequisites: {result.prerequisites.error}")
        if result.prerequisites.metadata.get("fatal"):
            result.error = result.prerequisites.error
            state.finish()
            return result

    # ── Components ──
    run_sequence(
        selected,
        catalog,
        registry or default_registry(),
        surface=surface,
        context=context,
        policy=policy,
        state=state,
    )

    # ── Validation ──
    if skip_validation:
        logger.info("Skipping validation")
    elif not state.aborted:
        result.validation = validate(selected, home=home, font_dir=font_dir(profile.os, home))

    return result
