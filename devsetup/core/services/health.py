"""
Health and tool checks — quick read-only diagnostics of the host.

Nothing here installs or changes anything. Both reports are plain
dataclasses the CLI renders; neither raises on a missing tool.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from devsetup.core.data.catalog import DEVELOPMENT_TOOLS

logger = logging.getLogger(__name__)

MIN_DISK_GB = 5
MIN_MEMORY_GB = 2
ESSENTIAL_TOOLS = ("git", "curl", "wget")

# binary -> version command
_VERSION_COMMANDS: dict[str, list[str]] = {
    "git": ["git", "--version"],
    "python": ["python", "--version"],
    "node": ["node", "--version"],
    "go": ["go", "version"],
    "rustc": ["rustc", "--version"],
    "mise": ["mise", "--version"],
}

_VERSION_RE = re.compile(r"v?(\d+(?:\.\d+)+)")

Which = Callable[[str], str | None]


# ── Tool check ──────────────────────────────────────────────────


@dataclass
class ToolStatus:
    name: str
    description: str
    installed: bool
    version: str = ""


@dataclass
class ToolsReport:
    tools: list[ToolStatus] = field(default_factory=list)

    @property
    def installed(self) -> int:
        return sum(1 for t in self.tools if t.installed)

    @property
    def missing(self) -> list[str]:
        return [t.name for t in self.tools if not t.installed]

    def to_dict(self) -> dict:
        return {
            "installed": self.installed,
            "total": len(self.tools),
            "missing": self.missing,
            "tools": [t.__dict__ for t in self.tools],
        }


def tool_version(name: str, run: Callable[..., subprocess.CompletedProcess] = subprocess.run) -> str:
    """Best-effort version string for ``name`` (``installed`` if unknown)."""
    cmd = _VERSION_COMMANDS.get(name)
    if cmd is None:
        return "installed"
    try:
        proc = run(cmd, capture_output=True, text=True, timeout=10)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("Version query for %s failed: %s", name, e)
        return "installed"
    match = _VERSION_RE.search(f"{proc.stdout} {proc.stderr}")
    return match.group(1) if match else "installed"


def check_tools(
    tools: tuple[tuple[str, str], ...] = DEVELOPMENT_TOOLS,
    which: Which = shutil.which,
    run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> ToolsReport:
    """Presence and version of the common development tools."""
    report = ToolsReport()
    for name, description in tools:
        if which(name):
            report.tools.append(ToolStatus(name, description, True, tool_version(name, run)))
        else:
            report.tools.append(ToolStatus(name, description, False))
    return report


# ── Health check ────────────────────────────────────────────────


@dataclass
class HealthCheck:
    name: str
    ok: bool
    message: str
    severity: str = "error"  # error | warning


@dataclass
class HealthReport:
    checks: list[HealthCheck] = field(default_factory=list)

    @property
    def issues(self) -> int:
        return sum(1 for c in self.checks if not c.ok)

    @property
    def healthy(self) -> bool:
        return self.issues == 0

    def add(self, name: str, ok: bool, message: str, severity: str = "error") -> None:
        self.checks.append(HealthCheck(name, ok, message, severity))

    def to_dict(self) -> dict:
        return {
            "healthy": self.healthy,
            "issues": self.issues,
            "checks": [c.__dict__ for c in self.checks],
        }


def available_memory_gb(meminfo: Path = Path("/proc/meminfo")) -> int | None:
    """MemAvailable in whole GiB, or None where /proc/meminfo is absent."""
    try:
        text = meminfo.read_text(encoding="utf-8")
    except OSError:
        return None
    match = re.search(r"^MemAvailable:\s+(\d+)\s*kB", text, re.MULTILINE)
    if not match:
        return None
    return int(match.group(1)) // 1024 // 1024


def health_check(
    home: Path | None = None,
    which: Which = shutil.which,
    run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    disk_path: str = "/",
    meminfo: Path = Path("/proc/meminfo"),
) -> HealthReport:
    """Disk, memory, essential tools, mise and shell configuration."""
    home = home or Path.home()
    report = HealthReport()

    try:
        free_gb = shutil.disk_usage(disk_path).free // 1024 // 1024 // 1024
    except OSError as e:
        report.add("disk", False, f"Cannot read disk usage: {e}")
    else:
        if free_gb < MIN_DISK_GB:
            report.add("disk", False, f"Low disk space: {free_gb}GB available")
        else:
            report.add("disk", True, f"Disk space: {free_gb}GB available")

    mem_gb = available_memory_gb(meminfo)
    if mem_gb is not None:
        if mem_gb < MIN_MEMORY_GB:
            report.add("memory", False, f"Low memory: {mem_gb}GB available", "warning")
        else:
            report.add("memory", True, f"Memory: {mem_gb}GB available")

    for tool in ESSENTIAL_TOOLS:
        if which(tool):
            report.add(tool, True, f"{tool} is installed")
        else:
            report.add(tool, False, f"{tool} is missing")

    if which("mise"):
        try:
            healthy = run(["mise", "doctor"], capture_output=True, text=True).returncode == 0
        except OSError:
            healthy = False
        if healthy:
            report.add("mise", True, "mise configuration is healthy")
        else:
            report.add("mise", False, "mise configuration has issues", "warning")

    if (home / ".zshrc").is_file():
        report.add("shell", True, "Zsh configuration found")
    elif (home / ".bashrc").is_file():
        report.add("shell", True, "Bash configuration found")
    else:
        report.add("shell", False, "No shell configuration found", "warning")

    return report
