"""Snapshot record commands."""

import click
from networth.cli.error_handling import handle_domain_error
from networth.cli.options import resolve_retention, resolve_year
from networth.domain.errors import DomainError
from networth.domain.snapshots import SnapshotService


def _service(ctx) -> SnapshotService:
    store = ctx.obj["store"]
    return SnapshotService(store, retention=resolve_retention(store))


def _print_snapshot(snapshot, show_accounts: bool = False) -> None:
    click.echo(
        f"{snapshot.update_date} | ID: {snapshot.id} | {snapshot.update_kind}"
        f" | {len(snapshot.accounts)} account(s) | Total: {snapshot.total_amount:,.2f}"
    )
    if show_accounts:
        for account in snapshot.accounts:
            amount = "-" if account.amount is None else f"{account.amount:,.2f}"
            click.echo(f"    {account.account_name:40s} {amount:>15s}")


@click.group()
def snapshot_group():
    """Inspect reconciliation snapshots."""
    pass


@snapshot_group.command("list")
@click.option("--year", "period", help="Only snapshots of this year: this-year, last-year or YYYY")
@click.option("--limit", type=int, default=20, help="Maximum number of snapshots shown (default: 20)")
@click.pass_context
def list_snapshots(ctx, period: str | None, limit: int):
    """List snapshots, newest first."""
    year = resolve_year(ctx, period) if period is not None else None
    snapshots = _service(ctx).list_snapshots(year)
    if not snapshots:
        click.echo("No snapshots found.")
        return
    for snapshot in snapshots[:limit]:
        _print_snapshot(snapshot)


@snapshot_group.command("latest")
@click.option("--year", "period", help="Only consider this year: this-year, last-year or YYYY")
@click.pass_context
def latest_snapshot(ctx, period: str | None):
    """Show the most recent snapshot with its accounts."""
    year = resolve_year(ctx, period) if period is not None else None
    snapshot = _service(ctx).most_recent(year)
    if snapshot is None:
        click.echo("No snapshots found.")
        return
    _print_snapshot(snapshot, show_accounts=True)


@snapshot_group.command("delete")
@click.argument("snapshot_id")
@click.pass_context
def delete_snapshot(ctx, snapshot_id: str):
    """Delete a snapshot."""
    try:
        _service(ctx).delete_by_id(snapshot_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted snapshot {snapshot_id}")


def register_commands(cli):
    """Register snapshot commands with main CLI."""
    cli.add_command(snapshot_group, name="snapshot")
