"""Utility functions for paydesk."""

from paydesk.utils.amount_parser import parse_amount
from paydesk.utils.date_parser import parse_date, parse_month
from paydesk.utils.money import format_inr

__all__ = ["parse_amount", "parse_date", "parse_month", "format_inr"]
