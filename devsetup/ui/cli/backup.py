"""
CLI commands for dotfile backups.

Thin wrappers over ``devsetup.core.services.backup``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from devsetup.core.errors import BackupError
from devsetup.core.models.settings import Settings


def _manager(ctx: click.Context):
    """BackupManager for the configured backup location (defaults without a settings file)."""
    from devsetup.core.config.loader import ConfigError, load_settings
    from devsetup.core.services.backup import BackupManager

    try:
        settings = load_settings(ctx.obj.get("config_path"))
    except ConfigError:
        settings = Settings()
    return BackupManager(settings.backup_root(), home=Path.home())


@click.command("backups")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def backups(ctx: click.Context, as_json: bool) -> None:
    """List dotfile backups, oldest first."""
    manager = _manager(ctx)
    snapshots = manager.list_snapshots()

    if as_json:
        click.echo(json.dumps([s.to_dict() for s in snapshots], indent=2))
        return

    if not snapshots:
        click.secho(f"No backups found in {manager.backup_root}.", fg="yellow")
        return

    click.secho(f"\n📦 Backups in {manager.backup_root}", fg="cyan", bold=True)
    for i, snapshot in enumerate(snapshots):
        click.echo(f"   {i}: {snapshot.name}  ({len(snapshot.entries)} entries)")
    click.echo()


@click.command("restore")
@click.option("--index", "-i", default=None, help="Backup number to restore (see `backups`).")
@click.pass_context
def restore(ctx: click.Context, index: str | None) -> None:
    """Restore dotfiles from a backup.

    Without --index, lists the backups and asks which one to restore
    (``c`` cancels).
    """
    manager = _manager(ctx)
    snapshots = manager.list_snapshots()
    if not snapshots:
        click.secho(f"❌ No backups found in {manager.backup_root}.", fg="red")
        sys.exit(1)

    if index is None:
        click.secho("Available backups:", bold=True)
        for i, snapshot in enumerate(snapshots):
            click.echo(f"   {i}: {snapshot.name}")
        index = click.prompt("Enter backup number to restore (or 'c' to cancel)", default="c")

    if index.strip().lower() == "c":
        click.echo("Restore cancelled.")
        return

    try:
        snapshot = manager.resolve(index)
        result = manager.restore(snapshot)
    except BackupError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    click.secho(f"✅ Restored {len(result.restored)} entries from {snapshot.name}", fg="green")
    for name in result.failures:
        click.secho(f"   ⚠️  Failed: {name}", fg="yellow")
