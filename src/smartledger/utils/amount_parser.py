"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "500000"
    - "1,250.50"
    - "$120.00", "120 IQD"
    - "(75.00)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Currency symbols and codes
    amount_str = re.sub(r"[$€£¥]|\b(?:IQD|USD|EUR)\b", "", amount_str, flags=re.IGNORECASE)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def parse_entry_amount(amount_str: str) -> Decimal:
    """Parse a debit or credit amount, which must not be negative.

    Raises:
        ValueError: If the amount cannot be parsed or is negative
    """
    amount = parse_amount(amount_str)
    if amount < 0:
        raise ValueError(f"Debit and credit amounts cannot be negative: {amount_str}")
    return amount
