"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

ZERO = Decimal("0")


def parse_amount(amount_str: str | None) -> Decimal:
    """Parse a locale-ambiguous amount string into a Decimal.

    Handles both Brazilian and international formats:
    - "1.234,56" and "R$ 1.234,56"
    - "1,234.56" and "$1,234.56"
    - "-123,45" or "123,45-"
    - "(123.45)" (negative in parentheses)

    Whichever of the last comma and the last dot comes later is the decimal
    separator; the other one is a thousands separator and is dropped.

    Args:
        amount_str: Raw amount string

    Returns:
        Decimal amount, or ``Decimal("0")`` when nothing numeric is left.
        Callers must treat zero as invalid rather than as a free transaction.
    """
    if amount_str is None:
        return ZERO

    amount_str = str(amount_str).strip()
    if not amount_str:
        return ZERO

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Currency symbols, letters and whitespace
    amount_str = re.sub(r"[^\d,.\-]", "", amount_str)

    if amount_str.startswith("-") or amount_str.endswith("-"):
        is_negative = True
    amount_str = amount_str.replace("-", "")

    amount_str = _normalize_separators(amount_str)

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        return ZERO
    if not amount.is_finite():
        return ZERO
    return -amount if is_negative else amount


def _normalize_separators(amount_str: str) -> str:
    last_comma = amount_str.rfind(",")
    last_dot = amount_str.rfind(".")

    if last_comma == -1 and last_dot == -1:
        return amount_str

    # A single kind of separator repeated is digit grouping ("1.234.567")
    if last_comma == -1 and amount_str.count(".") > 1:
        return amount_str.replace(".", "")
    if last_dot == -1 and amount_str.count(",") > 1:
        return amount_str.replace(",", "")

    if last_comma > last_dot:
        return amount_str.replace(".", "").replace(",", ".")
    return amount_str.replace(",", "")
