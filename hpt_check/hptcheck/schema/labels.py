"""Column-label and cell-value helpers.

Labels use ``|`` as a hierarchical separator (``standard_charge | gross``).
Two labels are equal when they have the same number of segments and each
segment matches after trimming, ignoring case.
"""

from __future__ import annotations

import re
from datetime import date

SEPARATOR = "|"
CANONICAL_SEPARATOR = " | "

POSITIVE_NUMBER_RE = re.compile(r"^\d+(\.\d+)?$")
ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
US_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")


def split_label(label: str) -> list[str]:
    return [segment.strip() for segment in label.split(SEPARATOR)]


def normalize_label(label: str) -> str:
    """Trim every segment and rejoin with a single canonical separator."""
    return CANONICAL_SEPARATOR.join(split_label(label))


def labels_equal(a: str, b: str) -> bool:
    segments_a = [s.upper() for s in split_label(a)]
    segments_b = [s.upper() for s in split_label(b)]
    return segments_a == segments_b


def matches_string(value: str | None, target: str) -> bool:
    if value is None:
        return False
    return value.strip().upper() == target.strip().upper()


def is_positive_number(value: str) -> bool:
    """Unsigned integer or decimal, strictly greater than zero."""
    if not POSITIVE_NUMBER_RE.match(value):
        return False
    return float(value) > 0


def is_valid_date(value: str) -> bool:
    """Accept YYYY-MM-DD or M/D/YYYY (with optional zero padding)."""
    match = ISO_DATE_RE.match(value)
    if match is not None:
        year, month, day = (int(part) for part in match.groups())
    else:
        match = US_DATE_RE.match(value)
        if match is None:
            return False
        month, day, year = (int(part) for part in match.groups())
    # rejects e.g. February 31
    try:
        date(year, month, day)
    except ValueError:
        return False
    return True
