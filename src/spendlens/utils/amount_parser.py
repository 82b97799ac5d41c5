"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

CENTS = Decimal("0.01")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal rounded to cents.

    Accepts "-12.50", "$1,234.56", "-$12.50" and accounting-style
    "(12.50)" for negatives.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount with two decimal places

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip()
    negative = text.startswith("(") and text.endswith(")")
    if negative:
        text = text[1:-1]

    text = re.sub(r"[$€£¥,\s]", "", text)

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Amount must be a finite number: '{amount_str}'")

    amount = amount.quantize(CENTS)
    return -amount if negative else amount
