"""
Dotfile backup and restore.

Snapshots live side by side under the backup root as
``backup_YYYYmmdd_HHMMSS`` directories. A snapshot holds copies of the
targets that existed at capture time, laid out relative to the home
directory. Snapshots are never deleted or overwritten by this module.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from devsetup.core.errors import BackupError
from devsetup.core.persistence.run_files import run_timestamp

logger = logging.getLogger(__name__)

SNAPSHOT_PREFIX = "backup_"

DEFAULT_TARGETS: tuple[str, ...] = (
    ".zshrc",
    ".bashrc",
    ".bash_profile",
    ".profile",
    ".gitconfig",
    ".vimrc",
    ".tmux.conf",
    ".p10k.zsh",
    ".oh-my-zsh/custom",
    ".config/nvim",
    ".vim",
)

_SNAPSHOT_RE = re.compile(rf"^{SNAPSHOT_PREFIX}(\d{{8}}_\d{{6}})(?:_(\d+))?$")


@dataclass
class BackupSnapshot:
    """A timestamped directory of copied dotfiles."""

    name: str
    path: Path
    created_at: datetime | None = None
    entries: list[str] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "path": str(self.path),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "entries": list(self.entries),
            "failures": list(self.failures),
        }


@dataclass
class RestoreResult:
    """Outcome of restoring one snapshot into the home directory."""

    snapshot: BackupSnapshot
    restored: list[str] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class BackupManager:
    """Create, list and restore dotfile snapshots.

    Args:
        backup_root: Directory holding the snapshot directories.
        home: Directory the targets are relative to (default: ``~``).
    """

    def __init__(self, backup_root: Path, home: Path | None = None):
        self.backup_root = backup_root
        self.home = home or Path.home()

    # ── Backup ──────────────────────────────────────────────────

    def backup(self, targets: tuple[str, ...] | list[str] = DEFAULT_TARGETS) -> BackupSnapshot:
        """Copy every existing target into a fresh snapshot directory.

        Missing targets are skipped. A target that fails to copy is
        listed in ``snapshot.failures``; the rest are still captured.
        """
        stamp = run_timestamp()
        snapshot_dir = self._fresh_snapshot_dir(stamp)
        snapshot_dir.mkdir(parents=True)
        logger.info("Creating backup directory: %s", snapshot_dir)

        snapshot = BackupSnapshot(
            name=snapshot_dir.name,
            path=snapshot_dir,
            created_at=datetime.strptime(stamp, "%Y%m%d_%H%M%S"),
        )

        for target in targets:
            source = self.home / target
            if not source.exists() and not source.is_symlink():
                logger.debug("Skipping backup of %s (not found).", target)
                continue

            dest = snapshot_dir / target
            try:
                self._prepare_parents(target, snapshot_dir)
                _copy_entry(source, dest)
            except OSError as e:
                logger.warning("Failed to backup %s: %s", target, e)
                snapshot.failures.append(target)
                continue

            logger.info("Backed up %s", target)
            snapshot.entries.append(target)

        logger.info("Dotfiles backup completed. Backup location: %s", snapshot_dir)
        return snapshot

    def _fresh_snapshot_dir(self, stamp: str) -> Path:
        """Pick an unused snapshot directory name for ``stamp``.

        Two backups inside the same second get ``_1``, ``_2``, ...
        suffixes instead of sharing a directory.
        """
        candidate = self.backup_root / f"{SNAPSHOT_PREFIX}{stamp}"
        suffix = 0
        while candidate.exists():
            suffix += 1
            candidate = self.backup_root / f"{SNAPSHOT_PREFIX}{stamp}_{suffix}"
        if suffix:
            logger.info(
                "Backup %s%s already exists, using %s",
                SNAPSHOT_PREFIX, stamp, candidate.name,
            )
        return candidate

    def _prepare_parents(self, target: str, snapshot_dir: Path) -> None:
        """Create intermediate dirs for nested targets, copying their modes."""
        parts = Path(target).parts[:-1]
        source_parent = self.home
        dest_parent = snapshot_dir
        for part in parts:
            source_parent = source_parent / part
            dest_parent = dest_parent / part
            if not dest_parent.exists():
                dest_parent.mkdir()
                shutil.copystat(source_parent, dest_parent)

    # ── Listing ─────────────────────────────────────────────────

    def list_snapshots(self) -> list[BackupSnapshot]:
        """All snapshots under the backup root, oldest first."""
        if not self.backup_root.is_dir():
            return []

        snapshots: list[tuple[tuple[str, int], BackupSnapshot]] = []
        for child in self.backup_root.iterdir():
            match = _SNAPSHOT_RE.match(child.name)
            if not match or not child.is_dir():
                continue
            stamp, suffix = match.group(1), int(match.group(2) or 0)
            snapshot = BackupSnapshot(
                name=child.name,
                path=child,
                created_at=datetime.strptime(stamp, "%Y%m%d_%H%M%S"),
                entries=sorted(p.name for p in child.iterdir()),
            )
            snapshots.append(((stamp, suffix), snapshot))

        return [s for _, s in sorted(snapshots, key=lambda item: item[0])]

    def resolve(self, index: int | str) -> BackupSnapshot:
        """Look up a snapshot by its position in ``list_snapshots()``.

        Raises:
            BackupError: No snapshots exist, or the index is not a valid
                position.
        """
        snapshots = self.list_snapshots()
        if not snapshots:
            raise BackupError(f"No backups found in {self.backup_root}.")

        text = str(index).strip()
        if not text.isdigit() or int(text) >= len(snapshots):
            raise BackupError(f"Invalid backup index: {text or '<empty>'}")
        return snapshots[int(text)]

    # ── Restore ─────────────────────────────────────────────────

    def restore(self, snapshot: BackupSnapshot) -> RestoreResult:
        """Copy a snapshot's contents back over the home directory.

        Files are overwritten in place and directories merged. A symlink
        in the home directory is replaced by the restored content; nothing
        else in the home directory or the snapshot is deleted.

        Raises:
            BackupError: If the snapshot directory no longer exists.
        """
        if not snapshot.path.is_dir():
            raise BackupError(f"Backup not found: {snapshot.path}")

        logger.info("Restoring from backup: %s", snapshot.path)
        result = RestoreResult(snapshot=snapshot)

        for entry in sorted(snapshot.path.iterdir()):
            dest = self.home / entry.name
            try:
                _copy_entry(entry, dest)
            except OSError as e:
                logger.warning("Failed to restore %s: %s", entry.name, e)
                result.failures.append(entry.name)
                continue
            logger.info("Restored %s", entry.name)
            result.restored.append(entry.name)

        logger.info("Dotfiles restored from backup: %s", snapshot.path)
        return result


def _copy_entry(source: Path, dest: Path) -> None:
    """Copy a file or directory tree, preserving permission bits.

    A symlinked ``source`` is followed so the content behind it is
    captured; only a dangling link is copied as a link. Links inside a
    directory tree stay links. An existing symlink at ``dest`` is
    replaced, never written through.
    """
    if dest.is_symlink():
        dest.unlink()
    if source.is_dir():
        shutil.copytree(source.resolve(), dest, symlinks=True, dirs_exist_ok=True)
    elif source.exists():
        if dest.is_file() and not os.access(dest, os.W_OK):
            dest.unlink()
        shutil.copy2(source, dest)
    else:
        shutil.copy2(source, dest, follow_symlinks=False)
