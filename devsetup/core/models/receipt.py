"""
Receipt model — the result of one install routine.

Installers report outcomes here and never raise. The sequencer turns
receipts into per-component results on the RunState.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Receipt(BaseModel):
    """Outcome of installing a single component."""

    component: str
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None
    warnings: list[str] = Field(default_factory=list)

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the install succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the install failed."""
        return self.status == "failed"

    @classmethod
    def success(cls, component: str, output: str = "", **kwargs: Any) -> Receipt:
        """Create a success receipt."""
        return cls(component=component, status="ok", output=output, **kwargs)

    @classmethod
    def failure(cls, component: str, error: str, **kwargs: Any) -> Receipt:
        """Create a failure receipt."""
        return cls(component=component, status="failed", error=error, **kwargs)

    @classmethod
    def skip(cls, component: str, reason: str = "", **kwargs: Any) -> Receipt:
        """Create a skip receipt."""
        return cls(component=component, status="skipped", output=reason, **kwargs)
