"""
devsetup — CLI entrypoint.

Usage:
    devsetup                    # interactive install
    devsetup --yes --dry-run    # defaults, commands logged not run
    devsetup info
    devsetup restore --index 0
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import ExitStack
from pathlib import Path

import click

from devsetup import __version__
from devsetup.core.observability.logging_config import setup_logging
from devsetup.ui import theme

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130


class InstallerGroup(click.Group):
    """Command group whose usage errors exit with status 1."""

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = 1
            raise

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = 1
            raise


_INSTALL_FLAGS = ("yes", "skip_validation", "verbose", "dry_run", "debug")


@click.group(
    cls=InstallerGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__, prog_name="devsetup")
@click.option("--yes", "--non-interactive", "yes", is_flag=True,
              help="Skip the menu and install the default components.")
@click.option("--skip-validation", is_flag=True, help="Do not validate after installing.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--dry-run", is_flag=True, help="Log what would run without changing the system.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Settings file (default: installer.yml / install_config.toml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    yes: bool,
    skip_validation: bool,
    verbose: bool,
    dry_run: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Development environment installer.

    Without a command, runs ``install``.
    """
    ctx.ensure_object(dict)
    ctx.obj.update(
        yes=yes,
        skip_validation=skip_validation,
        verbose=verbose,
        dry_run=dry_run,
        debug=debug,
        config_path=Path(config_path) if config_path else None,
    )

    # Console only; ``install`` adds the run log files once settings are known.
    setup_logging(level="DEBUG" if debug else "INFO" if verbose else "WARNING")

    if ctx.invoked_subcommand is None:
        ctx.invoke(install)


# ── install ─────────────────────────────────────────────────────


@cli.command()
@click.option("--yes", "--non-interactive", "yes", is_flag=True,
              help="Skip the menu and install the default components.")
@click.option("--skip-validation", is_flag=True, help="Do not validate after installing.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--dry-run", is_flag=True, help="Log what would run without changing the system.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def install(ctx: click.Context, **flags: bool) -> None:
    """Select and install development components."""
    opts = {name: bool(flags.get(name) or ctx.obj.get(name)) for name in _INSTALL_FLAGS}
    with ExitStack() as cleanup:
        try:
            _install(ctx, opts, cleanup)
        except KeyboardInterrupt:
            logger.error("Interrupted")
            click.secho("\nInterrupted.", fg="red", err=True)
            sys.exit(EXIT_INTERRUPTED)


def _install(ctx: click.Context, opts: dict[str, bool], cleanup: ExitStack) -> None:
    from devsetup.core.config.loader import ConfigError, load_settings
    from devsetup.core.data.catalog import COMPONENTS
    from devsetup.core.engine.sequencer import ContinuePolicy, PromptPolicy
    from devsetup.core.errors import UnsupportedSystemError
    from devsetup.core.models.component import default_selection
    from devsetup.core.observability.logging_config import resolve_level
    from devsetup.core.persistence.run_files import (
        init_run_files,
        resolve_run_paths,
        write_selection,
    )
    from devsetup.core.services.probe import detect_os, probe_system, require_supported
    from devsetup.core.use_cases.install import run_install
    from devsetup.ui.backends import create_backend
    from devsetup.ui.surface import InteractionSurface

    try:
        require_supported(detect_os())
        settings = load_settings(ctx.obj.get("config_path"))
    except (UnsupportedSystemError, ConfigError) as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    paths = resolve_run_paths()
    init_run_files(paths)
    level = resolve_level(settings.log_level, verbose=opts["verbose"], debug=opts["debug"])
    # Console only until the selection is known; an empty one logs a single line.
    setup_logging(level=level)
    theme.set_theme(settings.theme)
    profile = probe_system(settings.ui_framework)

    surface = InteractionSurface(
        create_backend("plain" if opts["yes"] else profile.ui_backend),
        progress_file=paths.progress_file,
        spinner=level not in ("DEBUG", "INFO"),
    )
    cleanup.callback(surface.close)

    if opts["yes"]:
        selected = default_selection(COMPONENTS)
    else:
        selected = surface.select_components(COMPONENTS)
    write_selection(paths, selected)
    setup_logging(level=level, log_file=paths.log_file, error_file=paths.error_file)

    if not selected:
        logger.info("No components selected. Nothing to install.")
        click.echo("No components selected. Exiting.")
        return

    logger.info("devsetup %s (log: %s)", __version__, paths.log_file)
    if opts["dry_run"]:
        logger.info("Dry run: no changes will be made to the system")
    logger.info(
        "Detected OS: %s, Distribution: %s, Package manager: %s",
        profile.os, profile.distro, profile.package_manager,
    )
    if opts["yes"]:
        logger.info("Non-interactive mode: installing default components")
    else:
        logger.info("Selected components: %s", " ".join(sorted(selected)))

    result = run_install(
        selected,
        settings,
        profile,
        paths,
        surface=surface,
        policy=ContinuePolicy() if opts["yes"] else PromptPolicy(),
        dry_run=opts["dry_run"],
        skip_validation=opts["skip_validation"],
    )
    surface.close()
    _print_summary(result)

    if not opts["yes"] and surface.backend.name != "plain":
        surface.show_message(
            "Installation Complete",
            "Installation finished with errors." if result.state.errors_occurred
            else "All selected components were installed.",
        )

    if result.exit_code:
        if result.error:
            click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(result.exit_code)


def _print_summary(result) -> None:
    state = result.state
    click.echo()
    click.echo(theme.style("Installation Summary", "purple", bold=True))
    click.echo(f"   Duration:   {state.duration_s:.0f}s")
    click.echo(
        f"   Components: {state.count('succeeded')} succeeded, "
        f"{state.count('failed')} failed, {state.count('skipped')} skipped"
    )
    for component_id, outcome in state.results.items():
        role = {"succeeded": "green", "failed": "red"}.get(outcome, "yellow")
        click.echo(f"     • {component_id}: {theme.style(outcome, role)}")
    if state.unhandled:
        click.echo(f"   Unhandled:  {', '.join(state.unhandled)}")
    if result.snapshot is not None:
        click.echo(f"   Backup:     {result.snapshot.path}")
    if result.validation is not None:
        click.echo(f"   Validation: {result.validation.passed} passed, {result.validation.failed} failed")
    click.echo()

    if state.aborted:
        click.echo(theme.style("⚠️  Installation aborted.", "red", bold=True))
    elif state.errors_occurred:
        click.echo(theme.style("⚠️  Installation completed with errors.", "yellow", bold=True))
    else:
        click.echo(theme.style("✅ Installation completed successfully!", "green", bold=True))
    click.echo(f"   Log file: {result.log_file}")
    click.echo()


# ── info / checks ───────────────────────────────────────────────


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def info(ctx: click.Context, as_json: bool) -> None:
    """Show what the probe detects on this machine."""
    from devsetup.core.config.loader import ConfigError, load_settings
    from devsetup.core.services.probe import probe_system

    try:
        preference = load_settings(ctx.obj.get("config_path")).ui_framework
    except ConfigError:
        preference = "auto"
    profile = probe_system(preference)

    if as_json:
        click.echo(json.dumps(profile.to_dict(), indent=2))
        return

    click.secho("\n🖥  System", fg="cyan", bold=True)
    click.echo(f"   OS:              {profile.os}{' (WSL)' if profile.wsl else ''}")
    click.echo(f"   Distribution:    {profile.distro}")
    click.echo(f"   Architecture:    {profile.arch}")
    click.echo(f"   Package manager: {profile.package_manager}")
    click.echo(f"   UI backend:      {profile.ui_backend}")
    click.echo()


@cli.command("check-tools")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def check_tools_cmd(as_json: bool) -> None:
    """Check which common development tools are installed."""
    from devsetup.core.services.health import check_tools

    report = check_tools()

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    click.secho("\n🔧 Development Tools Check", fg="cyan", bold=True)
    for tool in report.tools:
        if tool.installed:
            click.echo(f"   {click.style('✓', fg='green')} {tool.name} ({tool.description}) - {tool.version}")
        else:
            click.echo(f"   {click.style('✗', fg='red')} {tool.name} ({tool.description}) - Not found")
    click.echo(f"\n   {report.installed}/{len(report.tools)} tools installed")
    if report.missing:
        click.secho(f"   Missing: {' '.join(report.missing)}", fg="yellow")
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def health(as_json: bool) -> None:
    """Quick health check: disk, memory, tools, shell config."""
    from devsetup.core.services.health import health_check

    report = health_check()

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    click.secho("\n🩺 Health Check", fg="cyan", bold=True)
    for check in report.checks:
        if check.ok:
            click.echo(f"   {click.style('✓', fg='green')} {check.message}")
        else:
            color = "red" if check.severity == "error" else "yellow"
            click.echo(f"   {click.style('✗', fg=color)} {check.message}")
    click.echo()
    if report.healthy:
        click.secho("   Health check passed! No issues found.", fg="green")
    else:
        click.secho(f"   Health check completed with {report.issues} issue(s).", fg="yellow")
    click.echo()


@cli.command("validate")
@click.option("--component", "components", multiple=True,
              help="Component to validate (repeatable; default: last selection or all).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def validate_cmd(components: tuple[str, ...], as_json: bool) -> None:
    """Check that installed components are usable."""
    from devsetup.core.data.catalog import COMPONENTS
    from devsetup.core.persistence.run_files import read_selection, resolve_run_paths
    from devsetup.core.services.probe import detect_os, font_dir
    from devsetup.core.services.validator import validate

    selected = frozenset(components) or read_selection(resolve_run_paths()) or frozenset(
        c.id for c in COMPONENTS
    )
    report = validate(selected, font_dir=font_dir(detect_os()))

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    click.secho("\n🔍 Validation", fg="cyan", bold=True)
    for check in report.checks:
        mark = click.style("✓", fg="green") if check.passed else click.style("✗", fg="red")
        click.echo(f"   {mark} {check.component}: {check.artifact} {check.detail}".rstrip())
    color = "green" if report.all_ok else "yellow"
    click.secho(f"\n   {report.passed} passed, {report.failed} failed", fg=color)
    click.echo()


# ── Sub-command registration ────────────────────────────────────

from devsetup.ui.cli.backup import backups, restore  # noqa: E402
from devsetup.ui.cli.maintenance import cleanup, configure_git, update  # noqa: E402

cli.add_command(backups)
cli.add_command(restore)
cli.add_command(update)
cli.add_command(cleanup)
cli.add_command(configure_git)


if __name__ == "__main__":
    cli()
