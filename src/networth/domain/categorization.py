"""Category bucket routing for liquid asset amounts.

Routing is a priority-ordered table: the first rule whose predicate accepts
the ``(account_type, tax_type)`` pair decides the bucket. Account type rules
come first so ESPP, HSA and Cash accounts are bucketed regardless of their
tax type.
"""

import logging
from collections.abc import Callable, Iterable
from decimal import Decimal
from typing import Optional

from networth.domain.entities import BucketTotals

logger = logging.getLogger(__name__)

UNCLASSIFIED = "unclassified"

CategoryRule = tuple[Callable[[str, str], bool], str]

CATEGORY_RULES: tuple[CategoryRule, ...] = (
    (lambda account_type, tax_type: account_type == "ESPP", "espp"),
    (lambda account_type, tax_type: account_type == "HSA", "hsa"),
    (lambda account_type, tax_type: account_type == "Cash", "cash"),
    (lambda account_type, tax_type: tax_type == "Tax-Free", "tax_free"),
    (lambda account_type, tax_type: tax_type == "Tax-Deferred", "tax_deferred"),
    (lambda account_type, tax_type: tax_type in ("After-Tax", "Roth"), "brokerage"),
    (lambda account_type, tax_type: tax_type == "Cash", "cash"),
)


def categorize(
    account_type: Optional[str],
    tax_type: Optional[str],
    rules: Iterable[CategoryRule] = CATEGORY_RULES,
) -> str:
    """Return the bucket an account's amounts are aggregated into.

    Combinations no rule accepts go to the ``unclassified`` bucket instead of
    being dropped.
    """
    account_type = (account_type or "").strip()
    tax_type = (tax_type or "").strip()
    for predicate, bucket in rules:
        if predicate(account_type, tax_type):
            return bucket
    logger.warning(
        f"No category for account_type={account_type!r} tax_type={tax_type!r}; "
        f"routing to {UNCLASSIFIED}"
    )
    return UNCLASSIFIED


def bucket_amounts(
    entries: Iterable[tuple[str, str, Decimal]],
) -> BucketTotals:
    """Sum ``(account_type, tax_type, amount)`` entries into bucket totals."""
    totals = BucketTotals()
    for account_type, tax_type, amount in entries:
        totals = totals.plus(categorize(account_type, tax_type), amount)
    return totals
