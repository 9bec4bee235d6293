"""CLI helpers for group resolution."""

from __future__ import annotations

import click
from networth.domain.groups import GroupService
from networth.utils.group_resolver import resolve_group


def resolve_group_or_exit(ctx: click.Context, group_service: GroupService, group: str) -> str:
    """Resolve group name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_group(group_service, group)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
