"""UI backends and the factory that picks one by name."""

from __future__ import annotations

import logging

from devsetup.ui.backends.base import UIBackend
from devsetup.ui.backends.dialog import DialogBackend, WhiptailBackend
from devsetup.ui.backends.fzf import FzfBackend
from devsetup.ui.backends.plain import PlainBackend
from devsetup.ui.backends.zenity import ZenityBackend

logger = logging.getLogger(__name__)

BACKENDS: dict[str, type[UIBackend]] = {
    "zenity": ZenityBackend,
    "dialog": DialogBackend,
    "whiptail": WhiptailBackend,
    "fzf": FzfBackend,
    "plain": PlainBackend,
}


def create_backend(name: str, **kwargs) -> UIBackend:
    """Instantiate the backend called ``name`` (unknown names get plain)."""
    backend_cls = BACKENDS.get(name)
    if backend_cls is None:
        logger.warning("Unknown UI backend '%s', using plain text prompts", name)
        backend_cls = PlainBackend
    return backend_cls(**kwargs)


__all__ = [
    "BACKENDS",
    "DialogBackend",
    "FzfBackend",
    "PlainBackend",
    "UIBackend",
    "WhiptailBackend",
    "ZenityBackend",
    "create_backend",
]
