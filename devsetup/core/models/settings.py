"""
Settings model — installer preferences read from the settings document.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

UIFramework = Literal["auto", "zenity", "dialog", "whiptail", "fzf", "plain"]
ThemeName = Literal["catppuccin", "nord", "dracula"]
LogLevel = Literal["debug", "info", "warn", "error"]


class Settings(BaseModel):
    """Resolved installer settings.

    Every field has a built-in default so that a partially readable
    settings document still yields a usable configuration.
    """

    ui_framework: UIFramework = "auto"
    theme: ThemeName = "catppuccin"
    log_level: LogLevel = "info"
    backup_location: str = "~/.dotfiles-backup"
    auto_backup: bool = True

    source: Path | None = Field(default=None, exclude=True)
    parsed_with: Literal["yaml", "toml", "fallback", "defaults"] = "defaults"

    def backup_root(self, home: Path | None = None) -> Path:
        """Expand ``backup_location``.

        A bare ``~`` or ``~/`` prefix is rebased onto ``home`` when given;
        ``~user`` forms always expand against that user's home.
        """
        location = self.backup_location
        if home is not None and (location == "~" or location.startswith("~/")):
            return home / location[2:]
        return Path(location).expanduser()
