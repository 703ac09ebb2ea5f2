"""
Interaction surface — the one object the rest of the run talks to for
selection, progress and messages.

Wraps the backend chosen at start-up. If the backend's binary vanishes
mid-run, the surface warns once and stays on the plain-text fallback
for the rest of the run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from devsetup.core.models.component import Component, SelectionSet
from devsetup.core.persistence.run_files import write_progress
from devsetup.ui.backends.base import DEFAULT_TEXT, DEFAULT_TITLE, UIBackend
from devsetup.ui.backends.plain import PlainBackend

logger = logging.getLogger(__name__)


def percent_of(current: int, total: int) -> int:
    """Integer percentage, 100 when there is nothing to do."""
    if total <= 0:
        return 100
    return max(0, min(100, current * 100 // total))


class InteractionSurface:
    """Selection, progress and messages over one UI backend.

    Args:
        backend: The backend picked for this run.
        progress_file: Overwritten with the integer percentage on each update.
        fallback: Factory for the degraded backend.
        spinner: Allow the busy spinner (off while the console log is chatty).
    """

    def __init__(
        self,
        backend: UIBackend,
        progress_file: Path | None = None,
        fallback: Callable[[], UIBackend] = PlainBackend,
        spinner: bool = True,
    ):
        self.backend = backend
        self.progress_file = progress_file
        self._fallback = fallback
        self.spinner = spinner
        self.degraded = False

    def select_components(
        self,
        catalog: Iterable[Component],
        title: str = DEFAULT_TITLE,
        text: str = DEFAULT_TEXT,
    ) -> SelectionSet:
        """Ask which components to install. Empty means nothing chosen."""
        catalog = list(catalog)
        selected = self._call("select", catalog, title, text)
        logger.debug("Selected components: %s", " ".join(sorted(selected)) or "(none)")
        return selected

    def show_progress(self, current: int, total: int, label: str) -> int:
        percent = percent_of(current, total)
        if self.progress_file is not None:
            write_progress(self.progress_file, percent)
        self._call("show_progress", percent, label)
        return percent

    def show_message(self, title: str, text: str) -> None:
        self._call("show_message", title, text)

    @contextmanager
    def busy(self, label: str) -> Iterator[None]:
        """Spinner around a blocking step (plain backend on a TTY only)."""
        if not self.spinner or self.backend.name != "plain" or not _isatty(self.backend.stream):
            yield
            return
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=Console(file=self.backend.stream),
            transient=True,
        ) as progress:
            progress.add_task(label, total=None)
            yield

    def close(self) -> None:
        self.backend.close()

    def _call(self, method: str, *args):
        if not self.backend.is_available():
            self._degrade(f"{self.backend.binary} is no longer on PATH")
        try:
            return getattr(self.backend, method)(*args)
        except FileNotFoundError as e:
            self._degrade(str(e))
            return getattr(self.backend, method)(*args)

    def _degrade(self, reason: str) -> None:
        logger.warning(
            "UI backend '%s' unavailable (%s), falling back to plain text prompts",
            self.backend.name, reason,
        )
        self.backend.close()
        self.backend = self._fallback()
        self.degraded = True


def _isatty(stream) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())
