"""Machine-readable file naming convention.

``<EIN>[-<NPI>]_<hospital-name>_standardcharges.<csv|json>``, for example
``12-3456789-1234567890_example-hospital_standardcharges.csv``.
"""

from __future__ import annotations

import re

FILENAME_RE = re.compile(
    r"^(\d{2}-?\d{7})(-\d{10})?(_.+_)(standardcharges)\.(csv|json)$",
    re.IGNORECASE,
)


def validate_filename(filename: str) -> bool:
    return FILENAME_RE.match(filename) is not None
