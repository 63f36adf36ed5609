"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

# Rupee sign, "Rs"/"Rs." and "INR" prefixes or suffixes
_CURRENCY = re.compile(r"(₹|\bRs\.?|\bINR\b)", re.IGNORECASE)


def parse_amount(amount_str: str) -> Decimal:
    """Parse a rupee amount string into a Decimal.

    Handles various formats:
    - "85000"
    - "85,000.50"
    - "1,23,456" (Indian digit grouping)
    - "₹2,50,000"
    - "Rs. 45000"
    - "INR 1200"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = _CURRENCY.sub("", amount_str)
    cleaned = cleaned.replace(",", "").replace(" ", "").strip()

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str.strip()}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str.strip()}'")
    return amount
