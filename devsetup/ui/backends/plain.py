"""
Plain-text fallback backend: numbered list plus one prompt.

Always available. Answers:
    (blank)        accept the default-checked entries
    none           select nothing
    1 3 python     numbers and/or ids, separated by spaces or commas
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable

import click

from devsetup.core.models.component import Component, SelectionSet, default_selection
from devsetup.ui import theme
from devsetup.ui.backends.base import DEFAULT_TEXT, DEFAULT_TITLE, UIBackend, known_ids

logger = logging.getLogger(__name__)

NONE_ANSWERS = ("none", "-")

_SPLIT_RE = re.compile(r"[\s,]+")


def parse_answer(answer: str, catalog: list[Component]) -> SelectionSet:
    """Turn a typed answer into a selection."""
    answer = answer.strip()
    if not answer:
        return default_selection(catalog)
    if answer.lower() in NONE_ANSWERS:
        return frozenset()

    tokens = []
    for token in _SPLIT_RE.split(answer):
        if token.isdigit():
            index = int(token)
            if 1 <= index <= len(catalog):
                tokens.append(catalog[index - 1].id)
                continue
        tokens.append(token)
    return known_ids(tokens, catalog)


class PlainBackend(UIBackend):
    name = "plain"
    binary = None

    def __init__(self, *args, prompt: Callable[..., str] = click.prompt, **kwargs):
        super().__init__(*args, **kwargs)
        self._prompt = prompt

    def select(
        self,
        catalog: Iterable[Component],
        title: str = DEFAULT_TITLE,
        text: str = DEFAULT_TEXT,
    ) -> SelectionSet:
        catalog = list(catalog)
        click.echo(theme.style(title, "purple", bold=True))
        click.echo(text)
        for i, component in enumerate(catalog, 1):
            marker = "[x]" if component.default_selected else "[ ]"
            click.echo(f"  {i:2d}. {marker} {theme.style(component.id, 'cyan')} - {component.description}")
        click.echo()
        answer = self._prompt(
            "Components (numbers or names; blank = defaults, 'none' = nothing)",
            default="",
            show_default=False,
        )
        return parse_answer(answer, catalog)
