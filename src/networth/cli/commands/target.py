"""Accounts ledger commands."""

import click
from networth.cli.error_handling import handle_domain_error
from networth.cli.options import resolve_year
from networth.domain.errors import DomainError
from networth.domain.groups import GroupService
from networth.domain.target_accounts import TargetAccountService
from networth.utils.amount_parser import parse_amount


def _service(ctx) -> TargetAccountService:
    store = ctx.obj["store"]
    channel = ctx.obj["channel"]
    return TargetAccountService(
        store, ctx.obj["name_cache"], channel, GroupService(store, channel)
    )


def _fmt(value) -> str:
    return "-" if value is None else f"{value:,.2f}"


@click.group()
def target_group():
    """Manage the accounts ledger."""
    pass


@target_group.command("list")
@click.option("--year", "period", help="Year to list: this-year, last-year or YYYY (default: this year)")
@click.option("--details", is_flag=True, help="Show contributions, gains and other detail fields")
@click.pass_context
def list_targets(ctx, period: str | None, details: bool):
    """List accounts ledger entries of a year."""
    year = resolve_year(ctx, period)
    entries = _service(ctx).list_accounts(year)
    if not entries:
        click.echo(f"No accounts found for {year}.")
        return

    click.echo(f"\nAccounts for {year}:")
    click.echo("-" * 80)
    for entry in entries:
        click.echo(f"ID: {entry.entry_id} | {entry.account_name} | {entry.owner} | Balance: {_fmt(entry.balance)}")
        if details:
            click.echo(
                f"    Contributions: {_fmt(entry.contributions)} | Match: {_fmt(entry.employer_match)}"
                f" | Gains: {_fmt(entry.gains)} | Fees: {_fmt(entry.fees)}"
                f" | Withdrawals: {_fmt(entry.withdrawals)}"
            )


@target_group.command("add")
@click.argument("account_name")
@click.option("--owner", required=True, help="Entry owner")
@click.option("--type", "account_type", default="", help="Account type")
@click.option("--institution", default="", help="Institution")
@click.option("--balance", help="Current balance")
@click.option("--year", "period", help="Year of the entry (default: this year)")
@click.pass_context
def add_target(ctx, account_name: str, owner: str, account_type: str, institution: str, balance: str | None, period: str | None):
    """Add an entry to the accounts ledger by hand."""
    year = resolve_year(ctx, period)
    try:
        amount = parse_amount(balance) if balance is not None else None
        entry = _service(ctx).add_account(
            year=year,
            owner=owner,
            account_name=account_name,
            account_type=account_type,
            institution=institution,
            balance=amount,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created entry '{entry.account_name}' (ID: {entry.entry_id})")


@target_group.command("rename")
@click.argument("entry_id")
@click.argument("new_name")
@click.pass_context
def rename_target(ctx, entry_id: str, new_name: str):
    """Rename an entry.

    Later reconciliations keep matching the renamed entry.
    """
    try:
        entry = _service(ctx).rename_account(entry_id, new_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Renamed entry to '{entry.account_name}'")


@target_group.command("delete")
@click.argument("entry_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_target(ctx, entry_id: str, yes: bool):
    """Delete an entry from the accounts ledger."""
    service = _service(ctx)
    entry = service.get_account(entry_id)
    if entry is None:
        click.echo(f"Error: Account entry {entry_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to delete '{entry.account_name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted entry '{entry.account_name}'")


def register_commands(cli):
    """Register accounts ledger commands with main CLI."""
    cli.add_command(target_group, name="target")
