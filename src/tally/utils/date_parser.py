"""Date parsing utilities.

Statement date formats are written as patterns such as "yyyy-MM-dd" or
"MM/dd/yyyy" (the notation banks and spreadsheet tools use), and translated
to strptime directives here.
"""

import re
from datetime import date, datetime
from functools import lru_cache

from dateutil import parser as date_parser

DEFAULT_DATE_FORMAT = "yyyy-MM-dd"

COMMON_DATE_FORMATS = [
    "yyyy-MM-dd",
    "MM/dd/yyyy",
    "dd/MM/yyyy",
    "yyyy/MM/dd",
    "MM-dd-yyyy",
    "dd-MM-yyyy",
    "yyyyMMdd",
    "dd.MM.yyyy",
    "MM.dd.yyyy",
]

_TOKENS = {
    "yyyy": "%Y",
    "yy": "%y",
    "MMMM": "%B",
    "MMM": "%b",
    "MM": "%m",
    "M": "%m",
    "dd": "%d",
    "d": "%d",
}


@lru_cache(maxsize=64)
def to_strptime(pattern: str) -> str:
    """Translate a "yyyy-MM-dd" style pattern into a strptime format.

    Raises:
        ValueError: If the pattern uses an unsupported letter run
    """
    parts = []
    for match in re.finditer(r"([A-Za-z])\1*|[^A-Za-z]+", pattern):
        token = match.group(0)
        if token[0].isalpha():
            if token not in _TOKENS:
                raise ValueError(f"Unsupported date pattern token '{token}' in '{pattern}'")
            parts.append(_TOKENS[token])
        else:
            parts.append(token.replace("%", "%%"))
    return "".join(parts)


def parse_date(date_str: str, date_format: str = DEFAULT_DATE_FORMAT, iso_fallback: bool = True) -> date:
    """Parse a date string with a pattern such as "MM/dd/yyyy".

    Args:
        date_str: Date text from the CSV
        date_format: Pattern the text should follow
        iso_fallback: Also accept ISO 8601 dates when the pattern does not match

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip() if date_str else ""
    if not text:
        raise ValueError("Empty date string")

    try:
        return datetime.strptime(text, to_strptime(date_format)).date()
    except ValueError:
        if not iso_fallback:
            raise ValueError(f"Could not parse date '{text}' with format '{date_format}'")

    try:
        return date_parser.isoparse(text).date()
    except (ValueError, OverflowError):
        raise ValueError(f"Could not parse date '{text}' with format '{date_format}'")


def detect_date_format(
    date_strings: list[str], default: str = DEFAULT_DATE_FORMAT, threshold: float = 0.8
) -> str:
    """Pick the first common pattern that parses most of the sample dates.

    Args:
        date_strings: Sample date values from one column
        default: Pattern returned when no common pattern fits
        threshold: Share of samples that must parse

    Returns:
        Detected pattern, or default when nothing fits
    """
    samples = [s.strip() for s in date_strings if s and s.strip()]
    if not samples:
        return default

    for pattern in COMMON_DATE_FORMATS:
        parsed = 0
        for sample in samples:
            try:
                parse_date(sample, pattern, iso_fallback=False)
                parsed += 1
            except ValueError:
                continue
        if parsed >= len(samples) * threshold:
            return pattern
    return default
