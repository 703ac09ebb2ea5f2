"""
Mock installer — test double for the installer contract.

Returns success by default; can be told to fail, skip or raise.
Records every context it receives.
"""

from __future__ import annotations

from devsetup.adapters.base import InstallContext, Installer
from devsetup.core.models.receipt import Receipt


class MockInstaller(Installer):
    """Configurable installer for tests."""

    def __init__(
        self,
        component: str,
        status: str = "ok",
        error: str = "Mock failure",
        raises: Exception | None = None,
        call_log: list[str] | None = None,
    ):
        self.component = component
        self._status = status
        self._error = error
        self._raises = raises
        self._contexts: list[InstallContext] = []
        # Shared across mocks to observe the global call order.
        self.call_log = call_log if call_log is not None else []

    @property
    def call_count(self) -> int:
        return len(self._contexts)

    @property
    def contexts(self) -> list[InstallContext]:
        return self._contexts

    def install(self, context: InstallContext) -> Receipt:
        self._contexts.append(context)
        self.call_log.append(self.component)

        if self._raises is not None:
            raise self._raises
        if self._status == "failed":
            return Receipt.failure(component=self.component, error=self._error)
        if self._status == "skipped":
            return Receipt.skip(component=self.component, reason="[mock] skipped")
        return Receipt.success(
            component=self.component,
            output="[mock] installed",
            metadata={"mock": True},
        )
