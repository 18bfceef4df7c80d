"""
dotstrap — CLI entrypoint.

Usage:
    dotstrap                 # provision this machine
    dotstrap provision --dry-run
    dotstrap status
    dotstrap config show
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from dotstrap import __version__
from dotstrap.core.config.loader import ConfigError, dump_config, find_config_file, load_config
from dotstrap.core.host import Host
from dotstrap.core.models.config import ProvisionConfig
from dotstrap.core.models.report import StepResult
from dotstrap.core.observability.logging_config import (
    FILE_ENV_VAR,
    FILE_LEVEL_ENV_VAR,
    resolve_level,
    setup_logging,
)

_STATUS_STYLE = {
    "ok": ("✓", "green"),
    "skipped": ("•", "cyan"),
    "warned": ("⚠", "yellow"),
    "failed": ("✗", "red"),
}


def _host(ctx: click.Context) -> Host:
    host = ctx.obj.get("host")
    if host is None:
        host = Host.from_environment()
        ctx.obj["host"] = host
    return host


def _config_path(ctx: click.Context) -> Path | None:
    explicit: Path | None = ctx.obj.get("config_path")
    if explicit is not None:
        return explicit
    return find_config_file(_host(ctx).home)


def _load_config(ctx: click.Context) -> ProvisionConfig:
    try:
        return load_config(_config_path(ctx))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


def _echo_step(result: StepResult) -> None:
    symbol, color = _STATUS_STYLE.get(result.status, ("?", "white"))
    click.secho(f"  {symbol} ", fg=color, nl=False)
    click.secho(f"{result.step}", bold=True, nl=False)
    click.echo(f"  {result.message}")


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="dotstrap")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to config.yml (default: $DOTSTRAP_CONFIG or ~/.config/dotstrap/config.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """dotstrap — bootstrap zsh, Oh My Zsh and your dotfiles.

    Run without a command to provision this machine.
    """
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj.setdefault("host", None)

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(FILE_ENV_VAR),
        log_file_level=os.environ.get(FILE_LEVEL_ENV_VAR),
    )

    if ctx.invoked_subcommand is None:
        ctx.invoke(provision)


@cli.command()
@click.option("--dry-run", is_flag=True, help="Check everything, change nothing.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output the report as JSON.")
@click.pass_context
def provision(ctx: click.Context, dry_run: bool, as_json: bool) -> None:
    """Install zsh, Oh My Zsh and the dotfiles, then switch the default shell."""
    from dotstrap.core.engine.provisioner import Provisioner

    config = _load_config(ctx)
    host = _host(ctx)
    quiet = ctx.obj.get("quiet", False)

    kwargs = {}
    if ctx.obj.get("runner") is not None:
        kwargs["runner"] = ctx.obj["runner"]
    provisioner = Provisioner(config, host, dry_run=dry_run, **kwargs)

    if not as_json and not quiet:
        title = "🔧 dotstrap" + (" (dry run)" if dry_run else "")
        click.secho(f"\n{title}", fg="cyan", bold=True)

    try:
        report = provisioner.run(on_step=None if as_json else _echo_step)
    except KeyboardInterrupt:
        click.secho("\nInterrupted.", fg="red", err=True)
        sys.exit(130)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        sys.exit(report.exit_code)

    click.echo()
    failed = report.failed_step
    if failed is not None:
        click.secho(f"❌ Provisioning failed at step '{failed.step}': {failed.message}", fg="red", err=True)
        sys.exit(1)

    if dry_run:
        click.secho("✅ Dry run complete — nothing was changed.", fg="green", bold=True)
    elif report.changed == 0:
        click.secho("✅ Everything already in place.", fg="green", bold=True)
    else:
        click.secho("✅ Setup complete! Please restart your terminal.", fg="green", bold=True)

    if report.warnings and not quiet:
        click.secho(f"⚠️  {len(report.warnings)} warning(s) — see above.", fg="yellow")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, as_json: bool) -> None:
    """Show what is installed and what a provisioning run would still do."""
    from dotstrap.core.services.inspection import observe_state

    config = _load_config(ctx)
    state = observe_state(config, _host(ctx))

    if as_json:
        click.echo(json.dumps(state.to_dict(), indent=2))
        return

    click.secho("\n📋 dotstrap status", fg="cyan", bold=True)
    for label, passed, detail in state.checks():
        click.secho(f"  {'✓' if passed else '✗'} ", fg="green" if passed else "red", nl=False)
        click.echo(f"{label:<15} {detail}")
    click.echo()

    if not state.complete:
        click.secho("Run `dotstrap` to finish provisioning.", fg="yellow")
        sys.exit(1)
    click.secho("Everything is in place.", fg="green")


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Print the effective configuration as YAML."""
    path = _config_path(ctx)
    cfg = _load_config(ctx)
    click.secho(f"# source: {path if path else 'built-in defaults'}", fg="cyan")
    click.echo(dump_config(cfg), nl=False)


@config.command("check")
@click.pass_context
def config_check(ctx: click.Context) -> None:
    """Validate the configuration file."""
    path = _config_path(ctx)
    _load_config(ctx)
    if path is None:
        click.secho("✅ No config file — using built-in defaults", fg="green")
    else:
        click.secho(f"✅ {path} is valid", fg="green", bold=True)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
