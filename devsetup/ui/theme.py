"""
Terminal colour palettes for plain-text output.

Text-dialog and graphical backends draw their own widgets; the palette
only colours ``click.secho`` output (progress bar, summary, prompts).
"""

from __future__ import annotations

from dataclasses import dataclass

import click

RGB = tuple[int, int, int]


@dataclass(frozen=True)
class Palette:
    red: RGB
    green: RGB
    yellow: RGB
    blue: RGB
    purple: RGB
    cyan: RGB
    gray: RGB


PALETTES: dict[str, Palette] = {
    "catppuccin": Palette(
        red=(237, 135, 150), green=(166, 218, 149), yellow=(238, 212, 159),
        blue=(138, 173, 244), purple=(203, 166, 247), cyan=(116, 199, 236),
        gray=(110, 115, 141),
    ),
    "nord": Palette(
        red=(191, 97, 106), green=(163, 190, 140), yellow=(235, 203, 139),
        blue=(129, 161, 193), purple=(180, 142, 173), cyan=(136, 192, 208),
        gray=(76, 86, 106),
    ),
    "dracula": Palette(
        red=(255, 85, 85), green=(80, 250, 123), yellow=(241, 250, 140),
        blue=(98, 114, 164), purple=(189, 147, 249), cyan=(139, 233, 253),
        gray=(68, 71, 90),
    ),
}

DEFAULT_THEME = "catppuccin"

_active: Palette = PALETTES[DEFAULT_THEME]


def set_theme(name: str) -> Palette:
    """Activate a palette; unknown names fall back to the default."""
    global _active
    _active = PALETTES.get(name, PALETTES[DEFAULT_THEME])
    return _active


def palette() -> Palette:
    return _active


def style(text: str, role: str, bold: bool = False) -> str:
    """Colour ``text`` with the active palette's ``role`` colour."""
    return click.style(text, fg=getattr(_active, role), bold=bold)
