"""
Installation sequencer — orders the selection and drives installers.

Flow:
    selection → order by precedence → for each: advance, progress,
    install through the registry, record → final 100 % signal

Failures are fail-open: a failed component is logged and recorded,
then the failure policy decides whether the run continues. Nothing an
installer does can unwind past this loop.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from contextlib import nullcontext
from typing import Protocol

import click

from devsetup.adapters.base import InstallContext
from devsetup.adapters.registry import InstallerRegistry
from devsetup.core.models.component import Component, SelectionSet
from devsetup.core.models.receipt import Receipt
from devsetup.core.models.run_state import RunState

logger = logging.getLogger(__name__)


class ProgressSink(Protocol):
    def show_progress(self, current: int, total: int, label: str) -> object: ...


# ── Failure policies ────────────────────────────────────────────


class FailurePolicy:
    """Decides whether the run goes on after a component failed."""

    def should_continue(self, component: Component, receipt: Receipt) -> bool:
        raise NotImplementedError


class ContinuePolicy(FailurePolicy):
    """Non-interactive: record and carry on, never block on input."""

    def should_continue(self, component: Component, receipt: Receipt) -> bool:
        return True


class PromptPolicy(FailurePolicy):
    """Interactive: ask the user whether to continue."""

    def __init__(self, confirm=click.confirm):
        self._confirm = confirm

    def should_continue(self, component: Component, receipt: Receipt) -> bool:
        try:
            return bool(self._confirm(
                f"Installing {component.label} failed. Continue with the remaining components?",
                default=True,
            ))
        except click.Abort:
            return False


# ── Ordering ────────────────────────────────────────────────────


def order_components(
    selected: Iterable[str],
    catalog: Iterable[Component],
) -> tuple[list[Component], list[str]]:
    """Selected catalog entries in install order, plus unknown ids.

    Ranked entries come first by ascending rank; unranked entries run
    last. Ties keep catalog order.
    """
    catalog = list(catalog)
    selected = set(selected)
    known = {c.id for c in catalog}

    chosen = [c for c in catalog if c.id in selected]
    ordered = sorted(
        chosen,
        key=lambda c: (not c.is_ranked, c.precedence_rank if c.is_ranked else 0),
    )
    unhandled = sorted(selected - known)
    return ordered, unhandled


# ── Run ─────────────────────────────────────────────────────────


def run(
    selected: SelectionSet,
    catalog: Iterable[Component],
    registry: InstallerRegistry,
    surface: ProgressSink | None = None,
    context: InstallContext | None = None,
    policy: FailurePolicy | None = None,
    state: RunState | None = None,
) -> RunState:
    """Install every selected component, one at a time.

    Args:
        selected: Component ids to install.
        catalog: Known components.
        registry: Dispatch from id to installer.
        surface: Where progress goes (None = log only).
        context: Host/run facts handed to each installer.
        policy: Failure policy (default: always continue).
        state: Run state to continue (errors recorded before installing
            components are kept); a fresh one by default.

    Returns:
        The finished RunState.
    """
    context = context or InstallContext()
    policy = policy or ContinuePolicy()

    ordered, unhandled = order_components(selected, catalog)
    if state is None:
        state = RunState()
    state.selected = frozenset(selected)
    state.total_steps = len(ordered)
    for component_id in unhandled:
        logger.warning("Unhandled component: %s. Skipping.", component_id)
        state.unhandled.append(component_id)

    for component in ordered:
        step = state.advance()
        _progress(surface, step, state.total_steps, f"Installing {component.label}")
        logger.info("── %s (%d/%d) ──", component.label, step, state.total_steps)

        with _busy(surface, f"Installing {component.label}..."):
            receipt = registry.install(component.id, context)
        result = state.record_result(component.id, receipt.status)
        for warning in receipt.warnings:
            logger.debug("%s: %s", component.id, warning)

        if result == "succeeded":
            logger.info("%s installed", component.label)
        elif result == "skipped":
            logger.info("%s skipped: %s", component.label, receipt.output or "nothing to do")
        else:
            message = f"Failed to install {component.label}: {receipt.error}"
            logger.error(message)
            state.record_error(message)
            if not policy.should_continue(component, receipt):
                logger.error("Installation aborted by user after %s failed", component.id)
                state.aborted = True
                break

    _progress(surface, state.total_steps, state.total_steps, "Installation complete")
    state.finish()
    return state


def _busy(surface, label: str):
    busy = getattr(surface, "busy", None)
    return busy(label) if busy is not None else nullcontext()


def _progress(surface: ProgressSink | None, current: int, total: int, label: str) -> None:
    if surface is None:
        logger.debug("Progress %d/%d: %s", current, total, label)
        return
    surface.show_progress(current, total, label)
