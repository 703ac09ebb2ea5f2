"""
CLI commands for maintaining an installed environment.

Thin wrappers over ``devsetup.core.services.maintenance``. The group's
``--dry-run`` applies: commands are logged instead of run.
"""

from __future__ import annotations

import shutil
import sys
from pathlib import Path

import click

from devsetup.adapters.base import InstallContext
from devsetup.adapters.shell.command import CommandRunner
from devsetup.core.models.receipt import Receipt

_EDITOR_CHOICES = {"1": "vim", "2": "nano", "3": "code", "4": None}


def _context(ctx: click.Context) -> InstallContext:
    from devsetup.core.services.probe import detect_os

    return InstallContext(
        os=detect_os(),
        home=Path.home(),
        dry_run=bool(ctx.obj.get("dry_run")),
        runner=CommandRunner(),
    )


def _report(receipt: Receipt, done: str) -> None:
    for warning in receipt.warnings:
        click.secho(f"   ⚠️  {warning}", fg="yellow")
    if receipt.failed:
        click.secho(f"❌ {receipt.error}", fg="red", err=True)
        sys.exit(1)
    click.secho(f"✅ {done}", fg="green")


@click.command("update")
@click.pass_context
def update(ctx: click.Context) -> None:
    """Update mise, mise-managed tools and global npm/cargo packages."""
    from devsetup.core.services.maintenance import update_tools

    click.secho("\n⬆️  Updating Tools", fg="cyan", bold=True)
    _report(update_tools(_context(ctx), which=shutil.which), "Tool updates completed!")


@click.command("cleanup")
@click.pass_context
def cleanup(ctx: click.Context) -> None:
    """Clear tool and package-manager caches and temporary files."""
    from devsetup.core.services.maintenance import cleanup as run_cleanup

    click.secho("\n🧹 Cleanup", fg="cyan", bold=True)
    _report(run_cleanup(_context(ctx), which=shutil.which), "Cleanup completed!")


@click.command("configure-git")
@click.pass_context
def configure_git(ctx: click.Context) -> None:
    """Interactively set the global git name, email, editor and aliases."""
    from devsetup.core.services.maintenance import (
        GitSettings,
        configure_git as run_configure_git,
        current_git_config,
    )

    if not shutil.which("git"):
        click.secho("❌ Git not found. Please install Git first.", fg="red", err=True)
        sys.exit(1)

    click.secho("\n🔧 Git Configuration", fg="cyan", bold=True)
    current_name = current_git_config("user.name")
    current_email = current_git_config("user.email")
    current_editor = current_git_config("core.editor")

    click.echo(f"Current name: {current_name or '(not set)'}")
    name = click.prompt("Enter your full name", default="", show_default=False)
    click.echo(f"Current email: {current_email or '(not set)'}")
    email = click.prompt("Enter your email address", default="", show_default=False)

    click.echo(f"Current editor: {current_editor or '(not set)'}")
    click.echo("Select preferred editor:\n  1) vim\n  2) nano\n  3) code (VS Code)\n  4) Keep current")
    choice = click.prompt("Choice", type=click.Choice(list(_EDITOR_CHOICES)), default="4")

    settings = GitSettings(
        name=name.strip(),
        email=email.strip(),
        editor=_EDITOR_CHOICES[choice],
        default_branch_main=click.confirm("Set default branch name to 'main'?", default=True),
        aliases=click.confirm("Install useful Git aliases?", default=True),
    )
    _report(run_configure_git(_context(ctx), settings, which=shutil.which), "Git configuration completed!")
