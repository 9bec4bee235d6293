"""Sync status command."""

import click
from networth.cli.options import resolve_year
from networth.domain.aggregates import AggregateLedger
from networth.domain.reconciliation import ReconciliationService
from networth.domain.snapshots import SnapshotService


@click.command("status")
@click.option("--year", "period", help="Year to report: this-year, last-year or YYYY (default: this year)")
@click.pass_context
def status_cmd(ctx, period: str | None):
    """Show how current the accounts ledger is."""
    year = resolve_year(ctx, period)
    store = ctx.obj["store"]
    engine = ReconciliationService(store, name_cache=ctx.obj["name_cache"])
    status = engine.sync_status(year)

    click.echo(f"\nStatus for {year}:")
    click.echo("-" * 60)
    click.echo(f"Accounts ledger entries: {status.target_account_count}")
    if status.latest_snapshot_date is None:
        click.echo("Last reconciled: never")
    else:
        click.echo(
            f"Last reconciled: {status.latest_snapshot_date}"
            f" ({status.latest_snapshot_count} account(s), at {status.last_sync_time:%Y-%m-%d %H:%M} UTC)"
        )

    info = SnapshotService(store).last_update_info()
    if info.last_detailed_update is not None:
        click.echo(f"Last detailed update: {info.last_detailed_update.update_date}")

    totals = AggregateLedger(store).get_totals(year)
    if not totals.is_zero():
        click.echo("\nRecorded totals by category:")
        for bucket, value in totals.as_dict().items():
            if value:
                click.echo(f"  {bucket:15s} {value:>15,.2f}")
        click.echo(f"  {'total':15s} {totals.total:>15,.2f}")


def register_commands(cli):
    """Register status command with main CLI."""
    cli.add_command(status_cmd)
