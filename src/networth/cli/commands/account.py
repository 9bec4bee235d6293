"""Liquid asset account commands."""

import click
from networth.cli.error_handling import handle_domain_error
from networth.domain.entities import AccountType, TaxType
from networth.domain.errors import DomainError
from networth.domain.groups import GroupService
from networth.domain.naming import name_for
from networth.domain.source_accounts import SourceAccountService

TAX_TYPE_CHOICE = click.Choice([t.value for t in TaxType], case_sensitive=False)
ACCOUNT_TYPE_CHOICE = click.Choice([t.value for t in AccountType], case_sensitive=False)


def _service(ctx) -> SourceAccountService:
    store = ctx.obj["store"]
    channel = ctx.obj["channel"]
    return SourceAccountService(store, channel, GroupService(store, channel))


@click.group()
def account_group():
    """Manage liquid asset accounts."""
    pass


@account_group.command("add")
@click.option("--owner", required=True, help="Account owner, or 'Joint'")
@click.option("--tax-type", required=True, type=TAX_TYPE_CHOICE, help="Tax treatment")
@click.option("--type", "account_type", required=True, type=ACCOUNT_TYPE_CHOICE, help="Account type")
@click.option("--institution", default="", help="Institution holding the account")
@click.option("--description", default="", help="Disambiguator for otherwise identical accounts")
@click.pass_context
def add_account(ctx, owner: str, tax_type: str, account_type: str, institution: str, description: str):
    """Add a liquid asset account.

    Examples:
        networth account add --owner Alice --tax-type Tax-Free --type IRA --institution Vanguard
        networth account add --owner Joint --tax-type After-Tax --type Brokerage --description Kids
    """
    service = _service(ctx)
    try:
        created = service.create_account(
            owner=owner,
            tax_type=tax_type,
            account_type=account_type,
            institution=institution,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name_for(created)}' (ID: {created.id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all liquid asset accounts."""
    service = _service(ctx)
    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nLiquid asset accounts:")
    click.echo("-" * 80)
    for acc in accounts:
        group = service.groups.group_for_account(acc.id)
        group_str = f" | Group: {group.name}" if group else ""
        click.echo(f"ID: {acc.id} | {name_for(acc)} | {acc.tax_type}{group_str}")


@account_group.command("update")
@click.argument("account_id")
@click.option("--owner", help="New owner")
@click.option("--tax-type", type=TAX_TYPE_CHOICE, help="New tax type")
@click.option("--type", "account_type", type=ACCOUNT_TYPE_CHOICE, help="New account type")
@click.option("--institution", help="New institution")
@click.option("--description", help="New description")
@click.pass_context
def update_account(ctx, account_id: str, **changes):
    """Update the identity fields of an account.

    Options that are not given keep their current value.
    """
    service = _service(ctx)
    try:
        updated = service.update_account(account_id, **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated account '{name_for(updated)}'")


@account_group.command("remove")
@click.argument("account_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def remove_account(ctx, account_id: str, yes: bool):
    """Remove an account and drop it from its group."""
    service = _service(ctx)
    account = service.get_account(account_id)
    if account is None:
        click.echo(f"Error: Source account {account_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to remove '{name_for(account)}'?"):
        click.echo("Removal cancelled.")
        return

    try:
        service.delete_account(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Removed account '{name_for(account)}'")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
