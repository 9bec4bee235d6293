"""Reset command."""

import click
from networth.cli.error_handling import handle_domain_error
from networth.domain.errors import DomainError
from networth.domain.reset import reset_all_data


@click.command("reset")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def reset_cmd(ctx, yes: bool):
    """Delete every account, group, snapshot and setting."""
    if not yes and not click.confirm("This deletes all stored data. Continue?"):
        click.echo("Reset cancelled.")
        return
    try:
        removed = reset_all_data(ctx.obj["store"], ctx.obj["channel"], ctx.obj["name_cache"])
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Removed {len(removed)} dataset(s).")


def register_commands(cli):
    """Register reset command with main CLI."""
    cli.add_command(reset_cmd)
