"""
Tests for the install use case (backup → prerequisites → components → validation).
"""

import subprocess
from pathlib import Path

import pytest

from devsetup.adapters.mock import MockInstaller
from devsetup.adapters.registry import InstallerRegistry
from devsetup.adapters.shell import command as command_mod
from devsetup.adapters.shell.command import CommandRunner
from devsetup.core.engine.sequencer import ContinuePolicy
from devsetup.core.models.settings import Settings
from devsetup.core.persistence.run_files import init_run_files, resolve_run_paths
from devsetup.core.services.probe import SystemProfile
from devsetup.core.use_cases.install import run_install


class FakeRun:
    def __init__(self, returncode: int = 0):
        self.returncode = returncode
        self.calls: list[list[str]] = []

    def __call__(self, cmd, **kwargs):
        self.calls.append(cmd)
        return subprocess.CompletedProcess(cmd, self.returncode, "", "")


@pytest.fixture(autouse=True)
def _as_root(monkeypatch):
    monkeypatch.setattr(command_mod, "_needs_sudo_prefix", lambda: False)


@pytest.fixture
def paths(tmp_path: Path):
    run_paths = resolve_run_paths(tmp_path / "install-state", run_id="20240101_120000")
    init_run_files(run_paths)
    return run_paths


@pytest.fixture
def ubuntu() -> SystemProfile:
    return SystemProfile(os="linux", distro="ubuntu", package_manager="apt", ui_backend="plain")


def _registry(*mocks: MockInstaller) -> InstallerRegistry:
    registry = InstallerRegistry()
    for mock in mocks:
        registry.register(mock)
    return registry


def _settings(home: Path, **overrides) -> Settings:
    return Settings(backup_location=str(home / "backups"), **overrides)


class TestRunInstall:
    def test_full_run(self, home, paths, ubuntu, small_catalog):
        (home / ".bashrc").write_text("export A=1\n")
        log: list[str] = []
        run = FakeRun()

        result = run_install(
            frozenset({"python", "mise"}),
            _settings(home),
            ubuntu,
            paths,
            catalog=small_catalog,
            registry=_registry(
                MockInstaller("mise", call_log=log),
                MockInstaller("python", call_log=log),
            ),
            policy=ContinuePolicy(),
            skip_validation=True,
            home=home,
            runner=CommandRunner(run=run),
        )

        assert result.exit_code == 0
        assert log == ["mise", "python"]
        assert result.state.results == {"mise": "succeeded", "python": "succeeded"}
        assert result.snapshot is not None
        assert (result.snapshot.path / ".bashrc").read_text() == "export A=1\n"
        assert result.prerequisites.ok
        assert run.calls[0] == ["apt", "update", "-y"]
        assert result.validation is None

    def test_component_failure_is_recorded(self, home, paths, ubuntu, small_catalog):
        result = run_install(
            frozenset({"mise", "rust"}),
            _settings(home, auto_backup=False),
            ubuntu,
            paths,
            catalog=small_catalog,
            registry=_registry(MockInstaller("mise", status="failed"), MockInstaller("rust")),
            policy=ContinuePolicy(),
            skip_validation=True,
            home=home,
            runner=CommandRunner(run=FakeRun()),
        )

        assert result.state.errors_occurred
        assert result.state.results == {"mise": "failed", "rust": "succeeded"}
        assert result.exit_code == 0
        assert result.to_dict()["state"]["status"] == "partial"

    def test_auto_backup_disabled(self, home, paths, ubuntu, small_catalog):
        (home / ".bashrc").write_text("")
        result = run_install(
            frozenset({"mise"}),
            _settings(home, auto_backup=False),
            ubuntu,
            paths,
            catalog=small_catalog,
            registry=_registry(MockInstaller("mise")),
            skip_validation=True,
            home=home,
            runner=CommandRunner(run=FakeRun()),
        )
        assert result.snapshot is None
        assert not (home / "backups").exists()

    def test_dry_run_runs_nothing_and_skips_backup(self, home, paths, ubuntu, small_catalog):
        (home / ".bashrc").write_text("")
        run = FakeRun()
        mise = MockInstaller("mise")

        result = run_install(
            frozenset({"mise"}),
            _settings(home),
            ubuntu,
            paths,
            catalog=small_catalog,
            registry=_registry(mise),
            dry_run=True,
            skip_validation=True,
            home=home,
            runner=CommandRunner(run=run),
        )

        assert result.exit_code == 0
        assert run.calls == []
        assert result.snapshot is None
        assert not (home / "backups").exists()
        assert mise.contexts[0].dry_run is True

    def test_prerequisite_failure_does_not_stop_components(self, home, paths, ubuntu, small_catalog):
        mise = MockInstaller("mise")
        result = run_install(
            frozenset({"mise"}),
            _settings(home, auto_backup=False),
            ubuntu,
            paths,
            catalog=small_catalog,
            registry=_registry(mise),
            skip_validation=True,
            home=home,
            runner=CommandRunner(run=FakeRun(returncode=1)),
        )

        assert result.prerequisites.failed
        assert result.state.errors[0].startswith("Prerequisites:")
        assert mise.call_count == 1
        assert result.exit_code == 0

    def test_fatal_prerequisite_stops_run(self, home, paths, small_catalog):
        # no winget on the test host
        windows = SystemProfile(os="windows", distro="windows", package_manager="winget", ui_backend="plain")
        mise = MockInstaller("mise")

        result = run_install(
            frozenset({"mise"}),
            _settings(home, auto_backup=False),
            windows,
            paths,
            catalog=small_catalog,
            registry=_registry(mise),
            home=home,
            runner=CommandRunner(run=FakeRun()),
        )

        assert mise.call_count == 0
        assert "winget" in result.error
        assert result.exit_code == 1
        assert result.to_dict()["prerequisites"] == "failed"

    def test_validation_runs_after_install(self, home, paths, ubuntu, small_catalog):
        result = run_install(
            frozenset({"mise"}),
            _settings(home, auto_backup=False),
            ubuntu,
            paths,
            catalog=small_catalog,
            registry=_registry(MockInstaller("mise")),
            home=home,
            runner=CommandRunner(run=FakeRun()),
        )
        assert result.validation is not None
        assert "validation" in result.to_dict()
