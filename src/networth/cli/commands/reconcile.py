"""Reconcile command."""

import click
from networth.cli.error_handling import handle_domain_error
from networth.cli.options import resolve_retention
from networth.domain.entities import UpdateKind, UpdateMode
from networth.domain.errors import DomainError
from networth.domain.groups import GroupService
from networth.domain.reconciliation import ReconciliationService
from networth.domain.settings import SettingsService
from networth.domain.snapshots import SnapshotService
from networth.domain.source_accounts import SourceAccountService
from networth.utils.date_parser import parse_date


def _collect_values(ctx, options: dict[str, tuple[str, ...]]) -> dict[str, dict[str, str]]:
    """Turn repeated ID=VALUE options into values keyed by account ID."""
    values: dict[str, dict[str, str]] = {}
    for field, pairs in options.items():
        for pair in pairs:
            account_id, sep, value = pair.partition("=")
            if not sep or not account_id.strip():
                click.echo(f"Error: Expected ID=VALUE, got '{pair}'", err=True)
                ctx.exit(1)
            values.setdefault(account_id.strip(), {})[field] = value
    return values


@click.command("reconcile")
@click.option("--amount", multiple=True, metavar="ID=VALUE", help="Current balance of an account")
@click.option("--contributions", multiple=True, metavar="ID=VALUE", help="Contributions of an account")
@click.option("--employer-match", multiple=True, metavar="ID=VALUE", help="Employer match of an account")
@click.option("--gains", multiple=True, metavar="ID=VALUE", help="Gains of an account")
@click.option("--fees", multiple=True, metavar="ID=VALUE", help="Fees of an account")
@click.option("--withdrawals", multiple=True, metavar="ID=VALUE", help="Withdrawals of an account")
@click.option("--mode", type=click.Choice([m.value for m in UpdateMode]), help="Reconcile accounts individually or through their groups")
@click.option("--kind", "update_kind", type=click.Choice([k.value for k in UpdateKind]), help="Which fields to write")
@click.option("--date", "update_date", help="As-of date, e.g. 2026-06-30 or month-end (default: today)")
@click.pass_context
def reconcile_cmd(ctx, mode: str | None, update_kind: str | None, update_date: str | None, **options):
    """Reconcile entered values into the accounts ledger.

    Accounts without a value keep what is already recorded. Mode and kind
    default to the stored settings.

    Examples:
        networth reconcile --amount a1=1000 --amount b2=2500.50
        networth reconcile --mode group --kind detailed-preserve-balance --contributions a1=200
    """
    store = ctx.obj["store"]
    channel = ctx.obj["channel"]
    settings = SettingsService(store).get_settings()
    mode = mode or settings.default_mode
    update_kind = update_kind or settings.default_update_kind

    as_of = None
    if update_date is not None:
        try:
            as_of = parse_date(update_date)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    values = _collect_values(ctx, options)
    groups = GroupService(store, channel)
    engine = ReconciliationService(
        store,
        channel=channel,
        name_cache=ctx.obj["name_cache"],
        snapshots=SnapshotService(store, retention=resolve_retention(store)),
        groups=groups,
    )
    try:
        batch = SourceAccountService(store, channel, groups).with_values(values)
        result = engine.reconcile(batch, mode=mode, update_kind=update_kind, as_of=as_of)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not batch:
        click.echo("No accounts to reconcile.")
        return

    click.echo(f"Reconciled {result.processed_count} account(s) for {result.year} ({result.method}, {update_kind})")
    click.echo(f"Created: {result.created_count} | Updated: {result.updated_count}")
    if result.groups_processed:
        click.echo(f"Groups processed: {result.groups_processed}")
    for bucket, value in result.bucket_deltas.as_dict().items():
        if value:
            click.echo(f"  Changes {bucket}: {value:+,.2f}")
    if result.method == UpdateMode.GROUP.value:
        for bucket, value in result.group_totals.as_dict().items():
            if value:
                click.echo(f"  Group totals {bucket}: {value:,.2f}")
    if not result.changed:
        click.echo("Accounts ledger unchanged.")


def register_commands(cli):
    """Register reconcile command with main CLI."""
    cli.add_command(reconcile_cmd)
