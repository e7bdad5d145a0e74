"""Utility functions for tally."""

from tally.utils.date_parser import parse_date, detect_date_format
from tally.utils.amount_parser import parse_amount
from tally.utils.csv_sniffer import detect_delimiter

__all__ = ["parse_date", "detect_date_format", "parse_amount", "detect_delimiter"]
