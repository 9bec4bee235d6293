"""Sync settings commands."""

import click
from networth.cli.error_handling import handle_domain_error
from networth.domain.entities import UpdateKind, UpdateMode
from networth.domain.errors import DomainError
from networth.domain.settings import SettingsService


@click.group()
def settings_group():
    """Show or change sync settings."""
    pass


@settings_group.command("show")
@click.pass_context
def show_settings(ctx):
    """Show the current sync settings."""
    settings = SettingsService(ctx.obj["store"]).get_settings()
    click.echo(f"Snapshot retention:  {settings.snapshot_retention}")
    click.echo(f"Default mode:        {settings.default_mode}")
    click.echo(f"Default update kind: {settings.default_update_kind}")


@settings_group.command("set")
@click.option("--retention", "snapshot_retention", type=int, help="Maximum number of snapshots kept")
@click.option("--mode", "default_mode", type=click.Choice([m.value for m in UpdateMode]), help="Default reconcile mode")
@click.option("--kind", "default_update_kind", type=click.Choice([k.value for k in UpdateKind]), help="Default update kind")
@click.pass_context
def set_settings(ctx, snapshot_retention: int | None, default_mode: str | None, default_update_kind: str | None):
    """Change sync settings; options not given are kept."""
    try:
        SettingsService(ctx.obj["store"]).update_settings(
            snapshot_retention=snapshot_retention,
            default_mode=default_mode,
            default_update_kind=default_update_kind,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo("Settings updated.")


def register_commands(cli):
    """Register settings commands with main CLI."""
    cli.add_command(settings_group, name="settings")
