"""
Graphical backend: ``zenity`` (needs a display).
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Iterable

from devsetup.core.models.component import Component, SelectionSet
from devsetup.ui.backends.base import (
    DEFAULT_TEXT,
    DEFAULT_TITLE,
    GaugeProcess,
    UIBackend,
    known_ids,
)

logger = logging.getLogger(__name__)


def _progress_update(percent: int, label: str) -> str:
    return f"# {label}\n{percent}\n"


class ZenityBackend(UIBackend):
    name = "zenity"
    binary = "zenity"

    def __init__(self, *args, popen=subprocess.Popen, **kwargs):
        super().__init__(*args, **kwargs)
        self._popen = popen
        self._progress: GaugeProcess | None = None

    def select(
        self,
        catalog: Iterable[Component],
        title: str = DEFAULT_TITLE,
        text: str = DEFAULT_TEXT,
    ) -> SelectionSet:
        catalog = list(catalog)
        rows: list[str] = []
        for component in catalog:
            rows += ["TRUE" if component.default_selected else "FALSE", component.id, component.description]
        proc = self._runner(
            [
                self.binary, "--list", "--title", title, "--text", text, "--checklist",
                "--column", "Select", "--column", "Component", "--column", "Description",
                "--separator= ", "--print-column=2", "--width=700", "--height=500",
                *rows,
            ],
            stdout=subprocess.PIPE,
            text=True,
        )
        if proc.returncode != 0:
            logger.info("Selection cancelled")
            return frozenset()
        return known_ids(proc.stdout.split(), catalog)

    def show_progress(self, percent: int, label: str) -> None:
        if self._progress is None:
            self._progress = GaugeProcess(
                [self.binary, "--progress", "--title=Installing", f"--text={label}",
                 "--auto-close", "--percentage=0"],
                _progress_update,
                self._popen,
            )
        self._progress.update(percent, label)
        if not self._progress.active:
            self._progress = None

    def show_message(self, title: str, text: str) -> None:
        self._runner([self.binary, "--info", f"--title={title}", f"--text={text}"])

    def close(self) -> None:
        if self._progress is not None:
            self._progress.close()
            self._progress = None
