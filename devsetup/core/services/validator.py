"""
Post-install validation.

Re-checks the system from scratch for each selected component rather
than trusting the install receipts: an installer may report success
while leaving the tool off ``PATH`` for this process.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from devsetup.core.data.catalog import EXPECTED_ARTIFACTS, Artifact

logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    """One artifact check for one component."""

    component: str
    artifact: str
    passed: bool
    detail: str = ""


@dataclass
class ValidationReport:
    """Aggregate validation counts plus the individual checks."""

    checks: list[CheckResult] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return sum(1 for c in self.checks if c.passed)

    @property
    def failed(self) -> int:
        return sum(1 for c in self.checks if not c.passed)

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> dict:
        return {
            "passed": self.passed,
            "failed": self.failed,
            "checks": [
                {
                    "component": c.component,
                    "artifact": c.artifact,
                    "passed": c.passed,
                    "detail": c.detail,
                }
                for c in self.checks
            ],
        }


def validate(
    selected: Iterable[str],
    checks: dict[str, list[Artifact]] | None = None,
    which: Callable[[str], str | None] = shutil.which,
    home: Path | None = None,
    font_dir: Path | None = None,
) -> ValidationReport:
    """Check the expected artifacts of every selected component.

    Never raises: a check that errors is counted as failed.

    Args:
        selected: Component ids to validate. Unselected ones are ignored.
        checks: Artifact table (default: ``EXPECTED_ARTIFACTS``).
        which: Binary lookup, ``shutil.which`` by default.
        home: Home directory for ``{home}`` placeholders.
        font_dir: Value for ``{font_dir}``; None skips font checks.
    """
    checks = EXPECTED_ARTIFACTS if checks is None else checks
    report = ValidationReport()
    placeholders = _placeholders(home, font_dir)

    for component in sorted(selected):
        artifacts = checks.get(component)
        if artifacts is None:
            logger.debug("No validation checks defined for %s", component)
            continue
        if artifacts:
            logger.info("Verifying %s components:", component)
        for artifact in artifacts:
            result = _check(component, artifact, which, placeholders)
            if result is None:
                continue
            report.checks.append(result)
            if result.passed:
                logger.info("✓ %s is available (%s)", artifact.label, result.detail)
            else:
                logger.error("%s is NOT available.", artifact.label)

    logger.info("Validation completed with %d failures.", report.failed)
    return report


def _placeholders(home: Path | None, font_dir: Path | None) -> dict[str, str | None]:
    home = home or Path.home()
    zsh_custom = os.environ.get("ZSH_CUSTOM") or str(home / ".oh-my-zsh" / "custom")
    return {
        "home": str(home),
        "zsh_custom": zsh_custom,
        "font_dir": str(font_dir) if font_dir else None,
    }


def _check(
    component: str,
    artifact: Artifact,
    which: Callable[[str], str | None],
    placeholders: dict[str, str | None],
) -> CheckResult | None:
    try:
        if artifact.kind == "binary":
            for name in artifact.names:
                found = which(name)
                if found:
                    return CheckResult(component, artifact.label, True, found)
            return CheckResult(component, artifact.label, False, "not on PATH")

        for name in artifact.names:
            if "{font_dir}" in name and placeholders["font_dir"] is None:
                logger.debug("Skipping %s check: no font directory on this OS", component)
                return None
            path = Path(name.format(**placeholders)).expanduser()
            if path.is_dir():
                return CheckResult(component, artifact.label, True, str(path))
        return CheckResult(component, artifact.label, False, "directory not found")
    except Exception as e:
        logger.error("Check %s for %s errored: %s", artifact.label, component, e)
        return CheckResult(component, artifact.label, False, f"check error: {e}")
