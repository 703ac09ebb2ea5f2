"""
Fuzzy-filter backend: ``fzf --multi``.

fzf has no pre-checked state; the ``[✓]`` marker only shows which
entries are on by default. Progress and messages use the terminal.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Iterable

from devsetup.core.models.component import Component, SelectionSet
from devsetup.ui.backends.base import DEFAULT_TEXT, DEFAULT_TITLE, UIBackend, known_ids

logger = logging.getLogger(__name__)


def menu_line(component: Component) -> str:
    marker = "[✓]" if component.default_selected else "[ ]"
    return f"{marker} {component.id} - {component.description}"


class FzfBackend(UIBackend):
    name = "fzf"
    binary = "fzf"

    def select(
        self,
        catalog: Iterable[Component],
        title: str = DEFAULT_TITLE,
        text: str = DEFAULT_TEXT,
    ) -> SelectionSet:
        catalog = list(catalog)
        proc = self._runner(
            [self.binary, "--multi", "--no-sort", f"--header={title}: {text} (TAB to mark)", "--pointer=➜"],
            input="\n".join(menu_line(c) for c in catalog),
            stdout=subprocess.PIPE,
            text=True,
        )
        # 1 = no match, 130 = ESC / Ctrl-C
        if proc.returncode != 0:
            logger.info("Selection cancelled")
            return frozenset()
        tokens = [line.split()[1] for line in proc.stdout.splitlines() if len(line.split()) > 1]
        return known_ids(tokens, catalog)
