"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from devsetup.core.models.component import Component


@pytest.fixture
def home(tmp_path: Path, monkeypatch) -> Path:
    """A throwaway home directory (``Path.home()`` points at it)."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.delenv("ZSH_CUSTOM", raising=False)
    return home_dir


@pytest.fixture
def isolated_env(tmp_path: Path, home: Path, monkeypatch) -> Path:
    """Run from an empty working directory with run files under tmp."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.delenv("DEVSETUP_CONFIG", raising=False)
    monkeypatch.setenv("DEVSETUP_HOME", str(tmp_path / "install-state"))
    return work


@pytest.fixture
def small_catalog() -> tuple[Component, ...]:
    return (
        Component(id="mise", label="mise", precedence_rank=1),
        Component(id="python", label="Python", precedence_rank=2),
        Component(id="rust", label="Rust", precedence_rank=2),
    )
