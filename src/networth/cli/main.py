"""Main CLI entry point."""

import logging

import click
from networth.database.factories import create_sqlite_store
from networth.domain.name_cache import AccountNameCache
from networth.domain.notifications import NotificationChannel

# Import and register all commands at module level
from networth.cli.commands import (
    account,
    target,
    group,
    reconcile,
    snapshot,
    settings,
    status,
    reset,
)

LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides NETWORTH_DB_PATH environment variable)",
    envvar="NETWORTH_DB_PATH",
)
@click.option("-v", "--verbose", count=True, help="Show more log output (-vv for debug)")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: int):
    """Networth - Personal net worth tracking.

    Record liquid asset balances and reconcile them into the accounts
    ledger, individually or through account groups.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=LOG_LEVELS.get(verbose, logging.DEBUG),
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Open the store only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        store = create_sqlite_store(database_path=db_path)
        store.connect()
        store.initialize_schema()
        ctx.obj["store"] = store
        ctx.obj["channel"] = NotificationChannel()
        ctx.obj["name_cache"] = AccountNameCache(store)
        ctx.call_on_close(store.disconnect)


# Register all commands
account.register_commands(cli)
target.register_commands(cli)
group.register_commands(cli)
reconcile.register_commands(cli)
snapshot.register_commands(cli)
settings.register_commands(cli)
status.register_commands(cli)
reset.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
