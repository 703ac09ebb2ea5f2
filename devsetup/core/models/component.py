"""
Component model — one independently selectable unit of setup work.

Components are static catalog entries. The sequencer orders the user's
selection by ``precedence_rank``; the interaction surface renders
``label``/``description``/``default_selected``.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from devsetup.core.errors import CatalogError


class Component(BaseModel):
    """An installable component (language toolchain, shell, fonts, ...)."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    description: str = ""
    default_selected: bool = True
    precedence_rank: int | None = None  # None = run last, in catalog order

    @property
    def is_ranked(self) -> bool:
        return self.precedence_rank is not None


SelectionSet = frozenset[str]


def validate_catalog(catalog: Iterable[Component]) -> tuple[Component, ...]:
    """Freeze a catalog and check that component ids are unique.

    Raises:
        CatalogError: If two entries share an id.
    """
    frozen = tuple(catalog)
    seen: set[str] = set()
    for component in frozen:
        if component.id in seen:
            raise CatalogError(f"Duplicate component id in catalog: {component.id}")
        seen.add(component.id)
    return frozen


def default_selection(catalog: Iterable[Component]) -> SelectionSet:
    """The selection used by ``--yes``: every default-checked component."""
    return frozenset(c.id for c in catalog if c.default_selected)
