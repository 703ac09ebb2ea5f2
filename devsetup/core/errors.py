"""
Error taxonomy for the installer.

Fatal errors derive from ``DevSetupError`` and short-circuit the run.
Component-level failures are never raised; they travel as receipts.
"""

from __future__ import annotations


class DevSetupError(Exception):
    """Base class for errors that abort the whole run."""


class ConfigError(DevSetupError):
    """Raised when the settings document is missing or unreadable."""


class UnsupportedSystemError(DevSetupError):
    """Raised when the host operating system cannot be handled."""


class CatalogError(DevSetupError):
    """Raised when a component catalog violates its invariants."""


class BackupError(DevSetupError):
    """Raised for backup/restore problems (bad snapshot index, no backups)."""
