"""
Domain models for the installer.

    from devsetup.core.models import Component, Receipt, RunState, Settings
"""

from devsetup.core.models.component import (
    Component,
    SelectionSet,
    default_selection,
    validate_catalog,
)
from devsetup.core.models.receipt import Receipt
from devsetup.core.models.run_state import ComponentResult, RunState
from devsetup.core.models.settings import Settings

__all__ = [
    # component.py
    "Component",
    "ComponentResult",
    "Receipt",
    # run_state.py
    "RunState",
    "SelectionSet",
    # settings.py
    "Settings",
    "default_selection",
    "validate_catalog",
]
