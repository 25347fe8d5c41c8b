"""Rules for the header-value row (row 1) of a CSV file."""

from __future__ import annotations

import re
from collections.abc import Sequence

from hptcheck.diagnostics import catalog
from hptcheck.diagnostics.catalog import HEADER_VALUES_ROW
from hptcheck.diagnostics.models import Diagnostic
from hptcheck.resolver.models import HeaderResolution
from hptcheck.schema.labels import is_valid_date, labels_equal, matches_string
from hptcheck.schema.tables import AFFIRMATION, AFFIRMATION_VALUES

LICENSE_COLUMN_RE = re.compile(r"^license_number\s*\|\s*.{2}$", re.IGNORECASE)


def _value_at(values: Sequence[str], index: int) -> str:
    return values[index] if index < len(values) else ""


def check_header_values(
    resolution: HeaderResolution, values: Sequence[str],
) -> list[Diagnostic]:
    """Every matched header except the license number needs a value."""
    errors: list[Diagnostic] = []
    row = HEADER_VALUES_ROW
    for index, header in resolution.matched():
        if LICENSE_COLUMN_RE.match(header):
            continue
        value = _value_at(values, index)
        if not value:
            errors.append(catalog.required_value(row, index, header))
        elif labels_equal(header, "last_updated_on") and not is_valid_date(value):
            errors.append(catalog.invalid_date(row, index, header, value))
        elif labels_equal(header, AFFIRMATION) and not any(
            matches_string(value, allowed) for allowed in AFFIRMATION_VALUES
        ):
            errors.append(catalog.allowed_values(row, index, header, value, AFFIRMATION_VALUES))
    return errors


def header_alerts(resolution: HeaderResolution, values: Sequence[str]) -> list[Diagnostic]:
    for index, header in resolution.matched():
        if labels_equal(header, AFFIRMATION) and matches_string(_value_at(values, index), "false"):
            return [catalog.false_affirmation(index)]
    return []
