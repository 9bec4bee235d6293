"""CLI helpers for period and configuration resolution."""

import logging
import os
from datetime import date

import click

from networth.domain.settings import SettingsService
from networth.utils.date_parser import get_year_range

logger = logging.getLogger(__name__)

RETENTION_ENV = "NETWORTH_SNAPSHOT_RETENTION"


def resolve_year(ctx: click.Context, period: str | None) -> int:
    """Resolve a --year option (this-year, last-year or YYYY) to a year."""
    if period is None:
        return date.today().year
    try:
        start, _ = get_year_range(period)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    return start.year


def resolve_retention(store) -> int:
    """Return the snapshot retention from the environment or stored settings."""
    configured = os.environ.get(RETENTION_ENV)
    if configured:
        try:
            return max(int(configured), 1)
        except ValueError:
            logger.warning(f"Ignoring {RETENTION_ENV}={configured!r}: not a number")
    return SettingsService(store).get_settings().snapshot_retention
