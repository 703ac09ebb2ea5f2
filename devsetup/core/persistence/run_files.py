"""
Run files — the installer's working directory layout.

    ~/.dotfiles-install/
        logs/install_YYYYmmdd_HHMMSS.log    one per run, never truncated
        .cache/tmp/selected_components.txt  truncated at run start
        .cache/tmp/progress.txt             overwritten on every update
        .cache/tmp/errors.txt               appended to by the error log

Only one thread of control writes these files, so there is no locking.
"""

from __future__ import annotations

import getpass
import logging
import os
import platform
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from devsetup import __version__

logger = logging.getLogger(__name__)

DEFAULT_BASE_DIR = "~/.dotfiles-install"
BASE_DIR_ENV = "DEVSETUP_HOME"

_HEADER_RULE = "=" * 54


@dataclass(frozen=True)
class RunPaths:
    """Resolved paths for one installer run."""

    base_dir: Path
    run_id: str

    @property
    def cache_dir(self) -> Path:
        return self.base_dir / ".cache"

    @property
    def tmp_dir(self) -> Path:
        return self.cache_dir / "tmp"

    @property
    def log_dir(self) -> Path:
        return self.base_dir / "logs"

    @property
    def log_file(self) -> Path:
        return self.log_dir / f"install_{self.run_id}.log"

    @property
    def selected_file(self) -> Path:
        return self.tmp_dir / "selected_components.txt"

    @property
    def progress_file(self) -> Path:
        return self.tmp_dir / "progress.txt"

    @property
    def error_file(self) -> Path:
        return self.tmp_dir / "errors.txt"


def run_timestamp(now: datetime | None = None) -> str:
    """Timestamp used in log and snapshot names (second granularity)."""
    return (now or datetime.now()).strftime("%Y%m%d_%H%M%S")


def resolve_run_paths(base_dir: Path | None = None, run_id: str | None = None) -> RunPaths:
    """Build run paths from an explicit dir, ``$DEVSETUP_HOME`` or the default."""
    if base_dir is None:
        base_dir = Path(os.environ.get(BASE_DIR_ENV) or DEFAULT_BASE_DIR).expanduser()
    return RunPaths(base_dir=base_dir, run_id=run_id or run_timestamp())


def init_run_files(paths: RunPaths) -> None:
    """Create the directory layout, truncate temp files, write the log header."""
    for directory in (paths.base_dir, paths.cache_dir, paths.log_dir, paths.tmp_dir):
        directory.mkdir(parents=True, exist_ok=True)

    for temp_file in (paths.selected_file, paths.progress_file, paths.error_file):
        temp_file.write_text("", encoding="utf-8")

    header = "\n".join([
        _HEADER_RULE,
        f"Development Environment Installer v{__version__}",
        f"Started at: {datetime.now().isoformat(timespec='seconds')}",
        f"System: {' '.join(platform.uname())}",
        f"User: {_current_user()}",
        f"Working directory: {Path.cwd()}",
        _HEADER_RULE,
        "",
        "",
    ])
    paths.log_file.write_text(header, encoding="utf-8")
    logger.debug("Run files initialised under %s", paths.base_dir)


def write_selection(paths: RunPaths, selected: frozenset[str]) -> None:
    """Record the chosen component ids, space-separated, sorted."""
    paths.selected_file.write_text(" ".join(sorted(selected)) + "\n", encoding="utf-8")


def read_selection(paths: RunPaths) -> frozenset[str] | None:
    """Read back the selection file, or None if it is absent."""
    if not paths.selected_file.is_file():
        return None
    return frozenset(paths.selected_file.read_text(encoding="utf-8").split())


def write_progress(progress_file: Path, percent: int) -> None:
    """Overwrite the progress file with the current percentage."""
    progress_file.write_text(f"{percent}\n", encoding="utf-8")


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"
