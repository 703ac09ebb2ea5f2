"""
Text-dialog backends: ``dialog`` and ``whiptail``.

Both take the same checklist/gauge/msgbox arguments and print the
chosen tags on stderr, one per line with ``--separate-output``.
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

_CHECKLIST_SIZE = ["22", "76", "15"]


def _gauge_update(percent: int, label: str) -> str:
    return f"XXX\n{percent}\n{label}\nXXX\n"


class DialogBackend(UIBackend):
    name = "dialog"
    binary = "dialog"

    def __init__(self, *args, popen=subprocess.Popen, **kwargs):
        super().__init__(*args, **kwargs)
        self._popen = popen
        self._gauge: GaugeProcess | None = None

    def checklist_args(self, catalog: Iterable[Component], title: str, text: str) -> list[str]:
        items: list[str] = []
        for component in catalog:
            items += [component.id, component.description, "ON" if component.default_selected else "OFF"]
        return [self.binary, "--title", title, "--separate-output",
                "--checklist", text, *_CHECKLIST_SIZE, *items]

    def select(
        self,
        catalog: Iterable[Component],
        title: str = DEFAULT_TITLE,
        text: str = DEFAULT_TEXT,
    ) -> SelectionSet:
        catalog = list(catalog)
        # The widget draws on stdout, the answer comes back on stderr.
        proc = self._runner(
            self.checklist_args(catalog, title, text),
            stderr=subprocess.PIPE,
            text=True,
        )
        if proc.returncode != 0:
            logger.info("Selection cancelled")
            return frozenset()
        return known_ids(proc.stderr.split(), catalog)

    def show_progress(self, percent: int, label: str) -> None:
        if self._gauge is None:
            self._gauge = GaugeProcess(
                [self.binary, "--title", "Installing", "--gauge", label, "8", "70", "0"],
                _gauge_update,
                self._popen,
            )
        self._gauge.update(percent, label)
        if not self._gauge.active:
            self._gauge = None

    def show_message(self, title: str, text: str) -> None:
        self.close()
        self._runner([self.binary, "--title", title, "--msgbox", text, "15", "70"])

    def close(self) -> None:
        if self._gauge is not None:
            self._gauge.close()
            self._gauge = None


class WhiptailBackend(DialogBackend):
    name = "whiptail"
    binary = "whiptail"
