"""Rupee formatting."""

from decimal import ROUND_HALF_UP, Decimal


def group_indian(digits: str) -> str:
    """Group an integer digit string the Indian way: 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_inr(amount: Decimal | int | float, paise: bool = False) -> str:
    """Format an amount as rupees with Indian digit grouping.

    Whole rupees are shown by default, rounded half up; ``paise=True`` keeps
    two decimals.
    """
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    value = value.quantize(Decimal("0.01") if paise else Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, _, fraction = f"{abs(value):f}".partition(".")
    text = f"{sign}₹{group_indian(whole)}"
    if paise:
        text += f".{fraction or '00'}"
    return text


def format_percent(value: Decimal, places: int = 1) -> str:
    return f"{value:.{places}f}%"
