"""
Logging configuration — set up once per installer run.

Every module does ``logger = logging.getLogger(__name__)`` and inherits
this config. Errors reach three places: the console, the per-run log
file, and the run's error list file.

Levels are resolved in precedence order:
    --debug  >  --verbose  >  log_level setting  >  INFO
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# ── Format strings ──────────────────────────────────────────────

# WARNING and above — minimal, no noise
_FMT_MINIMAL = "%(levelname)s: %(message)s"

# INFO level — timestamped
_FMT_VERBOSE = "%(asctime)s [%(levelname)s] %(message)s"
_DATEFMT_VERBOSE = "%H:%M:%S"

# DEBUG level — full diagnostic with file:line
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"

# File output — always full detail
_FMT_FILE = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Error list: one bare message per line
_FMT_ERRORS = "%(message)s"

# Setting names that differ from stdlib level names
_LEVEL_ALIASES = {"warn": "WARNING"}


def resolve_level(setting: str | None, verbose: bool = False, debug: bool = False) -> str:
    """Combine CLI flags with the ``log_level`` setting."""
    if debug or verbose:
        return "DEBUG"
    if not setting:
        return "INFO"
    return _LEVEL_ALIASES.get(setting.lower(), setting.upper())


def setup_logging(
    level: str = "INFO",
    log_file: Path | str | None = None,
    error_file: Path | str | None = None,
) -> None:
    """Configure Python logging for the entire process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Per-run log file. Always written at DEBUG so the
            file has the full story even when the console is quiet.
        error_file: Run-scoped error list; receives ERROR records only.
    """
    numeric_level = _parse_level(level)

    # ── Console handler (stderr) ────────────────────────────────
    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT_DEBUG
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT_VERBOSE
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    # ── Root logger ─────────────────────────────────────────────
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.addHandler(console)

    effective_level = numeric_level

    # ── Per-run log file ────────────────────────────────────────
    if log_file:
        effective_level = logging.DEBUG
        fh = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    # ── Error list file ─────────────────────────────────────────
    if error_file:
        eh = logging.FileHandler(error_file, mode="a", encoding="utf-8")
        eh.setLevel(logging.ERROR)
        eh.setFormatter(logging.Formatter(_FMT_ERRORS))
        root.addHandler(eh)

    root.setLevel(effective_level)

    # Don't propagate exceptions from logging itself
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.INFO
    name = _LEVEL_ALIASES.get(level.lower(), level.upper())
    numeric = getattr(logging, name, None)
    if not isinstance(numeric, int):
        return logging.INFO
    return numeric
