"""
Settings loader — reads the installer settings document.

YAML (``installer.yml``) is parsed with PyYAML, TOML
(``install_config.toml``) with ``tomllib``. When structured parsing
fails, recognised keys are pulled out line by line; anything still
unresolved keeps its built-in default.
"""

from __future__ import annotations

import logging
import os
import re
import tomllib
from pathlib import Path
from typing import Any, get_args

import yaml

from devsetup.core.errors import ConfigError
from devsetup.core.models.settings import LogLevel, Settings, ThemeName, UIFramework

logger = logging.getLogger(__name__)

CONFIG_ENV = "DEVSETUP_CONFIG"

# Searched in order in the working directory
SETTINGS_FILENAMES = ("installer.yml", "installer.yaml", "install_config.toml")

# Sections whose keys are merged into the flat settings view
_SECTIONS = ("installer", "dotfiles")

_CHOICES: dict[str, tuple[str, ...]] = {
    "ui_framework": get_args(UIFramework),
    "theme": get_args(ThemeName),
    "log_level": get_args(LogLevel),
}

_KEYS = ("ui_framework", "theme", "log_level", "backup_location", "auto_backup")

__all__ = ["ConfigError", "find_settings_file", "load_settings"]


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Locate the settings document.

    Order: ``$DEVSETUP_CONFIG``, then ``SETTINGS_FILENAMES`` in
    ``start_dir`` (default: cwd).

    Returns:
        Path to the settings file, or None if not found.
    """
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path).expanduser()

    directory = (start_dir or Path.cwd()).resolve()
    for name in SETTINGS_FILENAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate installer settings.

    Args:
        path: Explicit settings path. If None, searches the defaults.

    Returns:
        Settings with every unresolvable key at its default.

    Raises:
        ConfigError: If no settings file exists or it cannot be read.
    """
    if path is None:
        path = find_settings_file()

    if path is None:
        raise ConfigError(
            "No settings file found. Create installer.yml or "
            "install_config.toml, or pass --config."
        )

    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")

    logger.info("Reading configuration from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    parsed_with = "toml" if path.suffix == ".toml" else "yaml"
    try:
        data = _parse_structured(raw, parsed_with)
    except (yaml.YAMLError, tomllib.TOMLDecodeError, ValueError) as e:
        logger.warning("Could not parse %s (%s), using basic config parsing", path, e)
        data = _extract_keys(raw)
        parsed_with = "fallback"

    values = _validated_values(_flatten(data))
    settings = Settings.model_validate(
        {**values, "source": path, "parsed_with": parsed_with}
    )
    logger.info(
        "Configuration loaded: UI=%s, Theme=%s, LogLevel=%s",
        settings.ui_framework, settings.theme, settings.log_level,
    )
    return settings


def _parse_structured(raw: str, kind: str) -> dict[str, Any]:
    if kind == "toml":
        data = tomllib.loads(raw)
    else:
        data = yaml.safe_load(raw)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"expected a mapping, got {type(data).__name__}")
    return data


def _flatten(data: dict[str, Any]) -> dict[str, Any]:
    """Merge known sections over top-level keys (sections win)."""
    flat = {k: v for k, v in data.items() if not isinstance(v, dict)}
    for section in _SECTIONS:
        nested = data.get(section)
        if isinstance(nested, dict):
            flat.update(nested)
    return flat


_LINE_RE = re.compile(
    r"""^\s*(?P<key>[A-Za-z_]+)\s*[:=]\s*["']?(?P<value>[^"'#\r\n]*?)["']?\s*(?:\#.*)?$"""
)


def _extract_keys(raw: str) -> dict[str, Any]:
    """Best-effort ``key = "value"`` / ``key: value`` extraction.

    The first occurrence of each recognised key wins.
    """
    found: dict[str, Any] = {}
    for line in raw.splitlines():
        match = _LINE_RE.match(line)
        if not match:
            continue
        key = match.group("key")
        if key in _KEYS and key not in found:
            value = match.group("value").strip()
            if value:
                found[key] = value
    logger.info("Basic configuration loaded (%d keys)", len(found))
    return found


def _validated_values(flat: dict[str, Any]) -> dict[str, Any]:
    """Keep recognised keys with acceptable values; warn about the rest."""
    values: dict[str, Any] = {}
    for key in _KEYS:
        if key not in flat:
            continue
        value = flat[key]

        if key in _CHOICES:
            normalized = str(value).strip().lower()
            if normalized == "basic":
                normalized = "plain"
            if normalized not in _CHOICES[key]:
                logger.warning(
                    "Ignoring %s=%r (expected one of: %s)",
                    key, value, ", ".join(_CHOICES[key]),
                )
                continue
            values[key] = normalized
        elif key == "auto_backup":
            parsed = _parse_bool(value)
            if parsed is None:
                logger.warning("Ignoring auto_backup=%r (expected true/false)", value)
                continue
            values[key] = parsed
        else:
            values[key] = str(value)
    return values


def _parse_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "yes", "on", "1"):
        return True
    if text in ("false", "no", "off", "0"):
        return False
    return None
