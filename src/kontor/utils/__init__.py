"""Utility functions for kontor."""

from kontor.utils.date_parser import parse_date, get_date_range
from kontor.utils.amounts import parse_amount, format_amount

__all__ = ["parse_date", "get_date_range", "parse_amount", "format_amount"]
