"""Utility functions for nexus."""

from nexus.utils.date_parser import parse_date, try_parse_date
from nexus.utils.amount_parser import parse_amount
from nexus.utils.text import normalize_header

__all__ = ["parse_date", "try_parse_date", "parse_amount", "normalize_header"]
