"""Delimiter detection for statement files."""

import csv

COMMON_DELIMITERS = ",;\t|"


def detect_delimiter(sample: str, default: str = ",") -> str:
    """Detect the field delimiter from the first lines of a CSV.

    Args:
        sample: Start of the CSV text
        default: Delimiter returned when detection fails

    Returns:
        One of ``, ; \\t |``
    """
    head = "\n".join(sample.splitlines()[:5])
    if not head.strip():
        return default
    try:
        return csv.Sniffer().sniff(head, delimiters=COMMON_DELIMITERS).delimiter
    except csv.Error:
        return default
