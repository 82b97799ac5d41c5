"""Utility functions for spendlens."""

from spendlens.utils.date_parser import parse_date, parse_month, get_date_range
from spendlens.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_month", "get_date_range", "parse_amount"]
