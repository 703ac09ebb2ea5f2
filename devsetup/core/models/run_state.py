"""
RunState — the single mutable record of one installer invocation.

Created at start, mutated only by the sequencer and the error path,
read by the progress display and the final summary. Counters only
move forward and ``errors_occurred`` never goes back to False.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Literal

ComponentResult = Literal["succeeded", "failed", "skipped"]

_RECEIPT_TO_RESULT: dict[str, ComponentResult] = {
    "ok": "succeeded",
    "failed": "failed",
    "skipped": "skipped",
}


@dataclass
class RunState:
    """Progress, per-component results and the sticky error flag."""

    selected: frozenset[str] = field(default_factory=frozenset)
    total_steps: int = 0
    results: dict[str, ComponentResult] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    unhandled: list[str] = field(default_factory=list)
    aborted: bool = False
    started_at: float = field(default_factory=time.monotonic)
    finished_at: float | None = None

    _completed_steps: int = field(default=0, init=False, repr=False)
    _errors_occurred: bool = field(default=False, init=False, repr=False)

    @property
    def completed_steps(self) -> int:
        return self._completed_steps

    @property
    def errors_occurred(self) -> bool:
        return self._errors_occurred

    def advance(self) -> int:
        """Count one more step as started and return the new count."""
        self._completed_steps += 1
        return self._completed_steps

    def record_error(self, message: str) -> None:
        """Append to the error list and latch the error flag."""
        self.errors.append(message)
        self._errors_occurred = True

    def record_result(self, component_id: str, receipt_status: str) -> ComponentResult:
        result = _RECEIPT_TO_RESULT.get(receipt_status, "failed")
        self.results[component_id] = result
        return result

    def finish(self) -> None:
        self.finished_at = time.monotonic()

    @property
    def duration_s(self) -> float:
        end = self.finished_at if self.finished_at is not None else time.monotonic()
        return end - self.started_at

    def count(self, result: ComponentResult) -> int:
        return sum(1 for r in self.results.values() if r == result)

    @property
    def status(self) -> str:
        if self.aborted:
            return "aborted"
        if not self.errors_occurred:
            return "ok"
        if self.count("succeeded") > 0:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "selected": sorted(self.selected),
            "completed_steps": self.completed_steps,
            "total_steps": self.total_steps,
            "errors_occurred": self.errors_occurred,
            "errors": list(self.errors),
            "results": dict(self.results),
            "unhandled": list(self.unhandled),
            "aborted": self.aborted,
        }
