"""
UI backend base — the contract behind the interaction surface.

A backend is picked once per run. It knows how to show the component
checklist, a progress indicator and an informational message with one
particular toolkit. Cancel/ESC in any backend is an empty selection,
never an error.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import TextIO

import click

from devsetup.core.models.component import Component, SelectionSet
from devsetup.ui import theme

logger = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]
Popen = Callable[..., subprocess.Popen]

DEFAULT_TITLE = "Development Environment Setup"
DEFAULT_TEXT = "Select the components you want to install:"

_BAR_WIDTH = 40


class UIBackend(ABC):
    """Abstract base class for all UI backends.

    Args:
        runner: ``subprocess.run`` compatible callable (injectable for tests).
        which: ``shutil.which`` compatible lookup.
        stream: Where terminal output goes (defaults to stderr).
    """

    name: str = ""
    binary: str | None = None

    def __init__(
        self,
        runner: Runner = subprocess.run,
        which: Callable[[str], str | None] = shutil.which,
        stream: TextIO | None = None,
    ):
        self._runner = runner
        self._which = which
        self.stream = stream or sys.stderr

    def is_available(self) -> bool:
        """Whether the backend's binary can still be found."""
        return self.binary is None or bool(self._which(self.binary))

    @abstractmethod
    def select(
        self,
        catalog: Iterable[Component],
        title: str = DEFAULT_TITLE,
        text: str = DEFAULT_TEXT,
    ) -> SelectionSet:
        """Show the checklist and return the chosen ids."""

    def show_progress(self, percent: int, label: str) -> None:
        """Redraw the terminal progress bar."""
        done = _BAR_WIDTH * percent // 100
        bar = theme.style("█" * done, "green") + theme.style("░" * (_BAR_WIDTH - done), "gray")
        line = f"\r{theme.style('[', 'cyan')}{bar}{theme.style(']', 'cyan')} {percent:3d}% {label}"
        click.echo(line, file=self.stream, nl=percent >= 100)

    def show_message(self, title: str, text: str) -> None:
        click.echo(f"{theme.style(f'[{title}]', 'blue', bold=True)} {text}", file=self.stream)

    def close(self) -> None:
        """Release long-lived widgets (progress windows)."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


def known_ids(tokens: Iterable[str], catalog: Iterable[Component]) -> SelectionSet:
    """Keep tokens that name catalog entries."""
    ids = {c.id for c in catalog}
    chosen = set()
    for token in tokens:
        token = token.strip().strip('"')
        if not token:
            continue
        if token in ids:
            chosen.add(token)
        else:
            logger.warning("Ignoring unknown selection: %s", token)
    return frozenset(chosen)


class GaugeProcess:
    """A long-lived progress widget fed through its stdin.

    ``format_update`` turns ``(percent, label)`` into what the widget
    reads. The process is started on the first update and closed at
    100 % or on ``close()``.
    """

    def __init__(self, argv: list[str], format_update: Callable[[int, str], str], popen: Popen = subprocess.Popen):
        self.argv = argv
        self._format = format_update
        self._popen = popen
        self._proc: subprocess.Popen | None = None

    @property
    def active(self) -> bool:
        return self._proc is not None

    def update(self, percent: int, label: str) -> None:
        if self._proc is None:
            self._proc = self._popen(self.argv, stdin=subprocess.PIPE, text=True)
        try:
            self._proc.stdin.write(self._format(percent, label))
            self._proc.stdin.flush()
        except (BrokenPipeError, OSError) as e:
            logger.debug("Progress widget went away: %s", e)
            self.close()
            return
        if percent >= 100:
            self.close()

    def close(self) -> None:
        if self._proc is None:
            return
        proc, self._proc = self._proc, None
        try:
            proc.stdin.close()
        except OSError as e:
            logger.debug("Closing progress widget: %s", e)
        proc.wait()
