"""Amount parsing utilities."""

import logging
from decimal import Decimal, InvalidOperation
import re
from typing import Any, Optional

logger = logging.getLogger(__name__)

# Currency symbols, thousands separators and whitespace.
NOISE = re.compile(r"[$€£¥,\s]")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a balance as typed by a user or copied from a statement.

    Accepts "1234.56", "$1,234.56", "-$5" and accounting negatives
    such as "(10.00)".

    Raises:
        ValueError: If the text is empty or not a finite number
    """
    text = (amount_str or "").strip()
    if not text:
        raise ValueError("Empty amount string")

    negative = text.startswith("(") and text.endswith(")")
    if negative:
        text = text[1:-1]
    text = NOISE.sub("", text)

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number")
    return -amount if negative else amount


def coerce_amount(value: Any) -> Optional[Decimal]:
    """Best-effort conversion of a stored or entered value to an amount.

    ``None``, empty strings and whitespace mean "no value supplied" and map
    to None. Values that cannot be parsed also map to None after a warning;
    this layer favors availability over strict validation.

    Args:
        value: Raw value (Decimal, int, float, str or None)

    Returns:
        Decimal amount, or None when unset or unparseable
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float)):
        amount = Decimal(str(value))
        return amount if amount.is_finite() else None
    text = str(value)
    if not text.strip():
        return None
    try:
        return parse_amount(text)
    except ValueError:
        logger.warning(f"Ignoring unparseable amount {text!r}")
        return None


def amount_or_zero(value: Any) -> Decimal:
    """Coerce a value to an amount, treating unset values as zero."""
    amount = coerce_amount(value)
    return amount if amount is not None else Decimal("0")
