"""Utility functions for networth."""

from networth.utils.date_parser import parse_date
from networth.utils.amount_parser import parse_amount, coerce_amount
from networth.utils.group_resolver import resolve_group

__all__ = ["parse_date", "parse_amount", "coerce_amount", "resolve_group"]
