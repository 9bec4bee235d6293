"""Account group commands."""

import click
from networth.cli.error_handling import handle_domain_error
from networth.cli.group_resolution import resolve_group_or_exit
from networth.cli.options import resolve_year
from networth.domain.errors import DomainError
from networth.domain.groups import GroupService
from networth.domain.naming import name_for
from networth.domain.source_accounts import SourceAccountService
from networth.domain.target_accounts import TargetAccountService


def _service(ctx) -> GroupService:
    return GroupService(ctx.obj["store"], ctx.obj["channel"])


@click.group()
def group_group():
    """Manage account groups."""
    pass


@group_group.command("create")
@click.argument("name", required=False)
@click.option("--target", "target_account_name", default="", help="Accounts ledger entry the group reconciles into")
@click.option("--owner", "owner_override", default="Joint", help="Owner of entries the group creates (default: Joint)")
@click.pass_context
def create_group(ctx, name: str | None, target_account_name: str, owner_override: str):
    """Create an account group.

    Examples:
        networth group create "Retirement" --target "Combined 401k"
        networth group create
    """
    group = _service(ctx).create_group(
        name=name,
        target_account_name=target_account_name,
        owner_override=owner_override,
    )
    click.echo(f"Created group '{group.name}' (ID: {group.id})")


@group_group.command("list")
@click.pass_context
def list_groups(ctx):
    """List account groups and their members."""
    service = _service(ctx)
    groups = service.list_groups()
    if not groups:
        click.echo("No groups found.")
        return

    names = {
        account.id: name_for(account)
        for account in SourceAccountService(ctx.obj["store"]).list_accounts()
    }
    for group in groups:
        target = group.target_account_name or "(no target)"
        click.echo(f"\n{group.name} (ID: {group.id}) -> {target} | Owner: {group.owner_override}")
        click.echo(f"  Last balance: {group.total_balance:,.2f}")
        if not group.member_ids:
            click.echo("  No members")
        for member_id in group.member_ids:
            click.echo(f"  - {names.get(member_id, f'(missing account {member_id})')}")


@group_group.command("add")
@click.argument("group")
@click.argument("account_id")
@click.pass_context
def add_member(ctx, group: str, account_id: str):
    """Add an account to a group, moving it out of any other group.

    GROUP can be a group name or ID.
    """
    service = _service(ctx)
    group_id = resolve_group_or_exit(ctx, service, group)
    account = SourceAccountService(ctx.obj["store"]).get_account(account_id)
    if account is None:
        click.echo(f"Error: Source account {account_id} not found", err=True)
        ctx.exit(1)
    try:
        updated = service.add_member(group_id, account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added '{name_for(account)}' to group '{updated.name}'")


@group_group.command("remove")
@click.argument("group")
@click.argument("account_id")
@click.pass_context
def remove_member(ctx, group: str, account_id: str):
    """Remove an account from a group.

    GROUP can be a group name or ID.
    """
    service = _service(ctx)
    group_id = resolve_group_or_exit(ctx, service, group)
    try:
        updated = service.remove_member(group_id, account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Group '{updated.name}' now has {len(updated.member_ids)} member(s)")


@group_group.command("update")
@click.argument("group")
@click.option("--name", help="New group name")
@click.option("--target", "target_account_name", help="New target account name")
@click.option("--owner", "owner_override", help="New owner override")
@click.pass_context
def update_group(ctx, group: str, name: str | None, target_account_name: str | None, owner_override: str | None):
    """Update a group's name, target account or owner.

    GROUP can be a group name or ID.
    """
    service = _service(ctx)
    group_id = resolve_group_or_exit(ctx, service, group)
    try:
        updated = service.update_metadata(
            group_id,
            name=name,
            target_account_name=target_account_name,
            owner_override=owner_override,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated group '{updated.name}'")


@group_group.command("delete")
@click.argument("group")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_group(ctx, group: str, yes: bool):
    """Delete a group. Its member accounts are kept.

    GROUP can be a group name or ID.
    """
    service = _service(ctx)
    group_id = resolve_group_or_exit(ctx, service, group)
    found = service.get_group(group_id)
    if not yes and not click.confirm(f"Are you sure you want to delete group '{found.name}'?"):
        click.echo("Deletion cancelled.")
        return
    try:
        service.delete_group(group_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted group '{found.name}'")


@group_group.command("ungrouped")
@click.pass_context
def list_ungrouped(ctx):
    """List accounts that are not in any group."""
    accounts = SourceAccountService(ctx.obj["store"]).list_accounts()
    ungrouped = _service(ctx).ungrouped_accounts(accounts)
    if not ungrouped:
        click.echo("Every account belongs to a group.")
        return
    for account in ungrouped:
        click.echo(f"ID: {account.id} | {name_for(account)}")


@group_group.command("unused-targets")
@click.option("--year", "period", help="Year to check: this-year, last-year or YYYY (default: this year)")
@click.pass_context
def list_unused_targets(ctx, period: str | None):
    """List accounts ledger entries no group reconciles into."""
    year = resolve_year(ctx, period)
    store = ctx.obj["store"]
    targets = TargetAccountService(store, ctx.obj["name_cache"], groups=_service(ctx))
    unused = targets.unused_accounts(year)
    if not unused:
        click.echo(f"No unused accounts for {year}.")
        return
    for entry in unused:
        click.echo(f"{entry.account_name} | {entry.owner}")


def register_commands(cli):
    """Register group commands with main CLI."""
    cli.add_command(group_group, name="group")
