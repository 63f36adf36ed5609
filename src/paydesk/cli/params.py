"""Click callbacks that parse amounts, dates and allocations."""

from datetime import date
from decimal import Decimal
from typing import Optional

import click

from paydesk.utils.amount_parser import parse_amount
from paydesk.utils.date_parser import parse_date


def amount_option(ctx, param, value: Optional[str]) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def date_option(ctx, param, value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def _split_pair(value: str, what: str) -> tuple[str, Decimal]:
    key, sep, amount = value.rpartition("=")
    if not sep or not key.strip():
        raise click.BadParameter(f"Expected {what}=AMOUNT, got '{value}'")
    try:
        return key.strip(), parse_amount(amount)
    except ValueError as e:
        raise click.BadParameter(str(e))


def allocation_option(ctx, param, values: tuple[str, ...]) -> list[tuple[str, Decimal]]:
    """Parse repeated DEPARTMENT=MONTHLY_SALARY options, keeping their order."""
    return [_split_pair(value, "DEPARTMENT") for value in values]


def payment_option(ctx, param, values: tuple[str, ...]) -> list[tuple[str, Decimal]]:
    """Parse repeated EMPLOYEE_ID=AMOUNT options."""
    return [_split_pair(value, "EMPLOYEE_ID") for value in values]
