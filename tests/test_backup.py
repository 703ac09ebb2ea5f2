"""
Tests for the backup manager — snapshot, list, resolve, restore.
"""

import os
import stat
from pathlib import Path

import pytest

from devsetup.core.errors import BackupError
from devsetup.core.services import backup as backup_mod
from devsetup.core.services.backup import BackupManager


@pytest.fixture
def dotfiles(home: Path) -> Path:
    (home / ".zshrc").write_text("export ZSH=1\n")
    (home / ".gitconfig").write_text("[user]\n  name = dev\n")
    os.chmod(home / ".gitconfig", 0o600)
    nvim = home / ".config" / "nvim"
    nvim.mkdir(parents=True)
    (nvim / "init.lua").write_text("vim.o.number = true\n")
    return home


def _manager(home: Path) -> BackupManager:
    return BackupManager(home / ".dotfiles-backup", home=home)


class TestBackup:
    def test_copies_existing_targets_only(self, dotfiles: Path):
        snapshot = _manager(dotfiles).backup()
        assert sorted(snapshot.entries) == [".config/nvim", ".gitconfig", ".zshrc"]
        assert not (snapshot.path / ".bashrc").exists()
        assert snapshot.ok
        assert snapshot.name.startswith("backup_")

    def test_preserves_permissions(self, dotfiles: Path):
        snapshot = _manager(dotfiles).backup()
        mode = stat.S_IMODE((snapshot.path / ".gitconfig").stat().st_mode)
        assert mode == 0o600

    def test_nested_layout(self, dotfiles: Path):
        snapshot = _manager(dotfiles).backup()
        assert (snapshot.path / ".config" / "nvim" / "init.lua").read_text() == "vim.o.number = true\n"

    def test_empty_home(self, home: Path):
        snapshot = _manager(home).backup()
        assert snapshot.entries == []
        assert snapshot.path.is_dir()

    def test_same_second_does_not_overwrite(self, dotfiles: Path, monkeypatch):
        monkeypatch.setattr(backup_mod, "run_timestamp", lambda: "20240101_120000")
        manager = _manager(dotfiles)
        first = manager.backup()
        second = manager.backup()
        assert first.path != second.path
        assert second.name == "backup_20240101_120000_1"
        assert first.path.is_dir()

    def test_failed_copy_is_recorded(self, dotfiles: Path, monkeypatch):
        real_copy = backup_mod._copy_entry

        def flaky(source, dest):
            if source.name == ".zshrc":
                raise PermissionError("denied")
            real_copy(source, dest)

        monkeypatch.setattr(backup_mod, "_copy_entry", flaky)
        snapshot = _manager(dotfiles).backup()
        assert snapshot.failures == [".zshrc"]
        assert ".gitconfig" in snapshot.entries
        assert not snapshot.ok


class TestListAndResolve:
    def test_list_sorted_oldest_first(self, dotfiles: Path, monkeypatch):
        stamps = iter(["20240102_000000", "20240101_000000"])
        monkeypatch.setattr(backup_mod, "run_timestamp", lambda: next(stamps))
        manager = _manager(dotfiles)
        manager.backup()
        manager.backup()
        names = [s.name for s in manager.list_snapshots()]
        assert names == ["backup_20240101_000000", "backup_20240102_000000"]

    def test_list_ignores_other_dirs(self, home: Path):
        root = home / ".dotfiles-backup"
        (root / "notes").mkdir(parents=True)
        assert _manager(home).list_snapshots() == []

    def test_resolve_without_backups(self, home: Path):
        with pytest.raises(BackupError, match="No backups found"):
            _manager(home).resolve(0)

    @pytest.mark.parametrize("index", ["5", "-1", "abc", ""])
    def test_resolve_invalid_index(self, dotfiles: Path, index):
        manager = _manager(dotfiles)
        manager.backup()
        with pytest.raises(BackupError, match="Invalid backup index"):
            manager.resolve(index)

    def test_resolve_valid(self, dotfiles: Path):
        manager = _manager(dotfiles)
        snapshot = manager.backup()
        assert manager.resolve("0").path == snapshot.path


class TestRestore:
    def test_restores_content_and_mode(self, dotfiles: Path):
        manager = _manager(dotfiles)
        snapshot = manager.backup()

        (dotfiles / ".zshrc").write_text("clobbered\n")
        os.chmod(dotfiles / ".gitconfig", 0o644)
        (dotfiles / ".config" / "nvim" / "init.lua").unlink()

        result = manager.restore(manager.resolve(0))

        assert result.ok
        assert (dotfiles / ".zshrc").read_text() == "export ZSH=1\n"
        assert stat.S_IMODE((dotfiles / ".gitconfig").stat().st_mode) == 0o600
        assert (dotfiles / ".config" / "nvim" / "init.lua").exists()
        assert snapshot.path.is_dir()

    def test_symlinked_dotfile_round_trip(self, home: Path):
        managed = home / "dotfiles" / "zshrc"
        managed.parent.mkdir()
        managed.write_text("original\n")
        (home / ".zshrc").symlink_to(managed)
        manager = _manager(home)

        snapshot = manager.backup()
        captured = snapshot.path / ".zshrc"
        assert not captured.is_symlink()
        assert captured.read_text() == "original\n"

        # installers write through the link
        (home / ".zshrc").write_text("clobbered\n")
        result = manager.restore(manager.resolve(0))

        assert result.ok
        assert result.restored == [".zshrc"]
        assert (home / ".zshrc").read_text() == "original\n"

    def test_symlinked_directory_is_captured(self, home: Path):
        real = home / "dotfiles" / "nvim"
        real.mkdir(parents=True)
        (real / "init.lua").write_text("set number\n")
        (home / ".config").mkdir()
        (home / ".config" / "nvim").symlink_to(real)

        snapshot = _manager(home).backup()

        captured = snapshot.path / ".config" / "nvim"
        assert not captured.is_symlink()
        assert (captured / "init.lua").read_text() == "set number\n"

    def test_absent_targets_stay_absent(self, dotfiles: Path):
        manager = _manager(dotfiles)
        manager.backup()
        manager.restore(manager.resolve(0))
        assert not (dotfiles / ".bashrc").exists()

    def test_restore_missing_snapshot(self, dotfiles: Path):
        manager = _manager(dotfiles)
        snapshot = manager.backup()
        snapshot.path.rename(snapshot.path.with_name("gone"))
        with pytest.raises(BackupError, match="Backup not found"):
            manager.restore(snapshot)
