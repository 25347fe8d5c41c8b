"""Column resolution for the header-name row and the column-definition row.

Matching is order independent: each raw column consumes the first remaining
expected slot it equals (segment-wise, ignoring case). A column that matches
no remaining slot is a duplicate when an earlier column already matched the
same label, and otherwise an unknown column that rule evaluation ignores.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from hptcheck.diagnostics import catalog
from hptcheck.diagnostics.models import Diagnostic
from hptcheck.resolver.models import (
    ColumnDefinition,
    HeaderResolution,
    PayerPlanKey,
    ResolvedSchema,
    Shape,
)
from hptcheck.schema.columns import WIDE_CHARGE_ATTRIBUTES, expected_data_columns
from hptcheck.schema.labels import (
    labels_equal,
    matches_string,
    normalize_label,
    split_label,
)
from hptcheck.schema.tables import HEADER_COLUMNS, LICENSE_HEADER, LICENSE_PREFIX, STATE_CODES

logger = logging.getLogger(__name__)

TALL_SENTINELS = ("payer_name", "plan_name")
PAYER_PLAN_PREFIXES = ("estimated_amount", "additional_payer_notes")

_NON_DIGIT_RE = re.compile(r"\D")


# ---------------------------------------------------------------------------
# Row 0: header names
# ---------------------------------------------------------------------------

def _matches_license_slot(column: str, index: int, errors: list[Diagnostic]) -> bool:
    segments = split_label(column)
    if len(segments) != 2 or not labels_equal(segments[0], LICENSE_PREFIX):
        return False
    if segments[1].upper() in STATE_CODES:
        return True
    errors.append(catalog.invalid_state_code(index, segments[1]))
    return False


def resolve_header_columns(
    raw_columns: Sequence[str],
) -> tuple[HeaderResolution, list[Diagnostic]]:
    """Match row 0 against the required header columns."""
    remaining = list(HEADER_COLUMNS)
    column_map: list[str | None] = []
    errors: list[Diagnostic] = []

    for index, column in enumerate(raw_columns):
        match = None
        for slot in remaining:
            if slot == LICENSE_HEADER:
                if _matches_license_slot(column, index, errors):
                    match = slot
                    break
            elif labels_equal(column, slot):
                match = slot
                break

        if match is not None:
            remaining.remove(match)
            column_map.append(column)
            continue

        column_map.append(None)
        if any(found is not None and labels_equal(found, column) for found in column_map):
            errors.append(catalog.duplicate_header_column(index, column))

    errors.extend(catalog.header_column_missing(slot) for slot in remaining)
    return HeaderResolution(column_map=column_map), errors


# ---------------------------------------------------------------------------
# Row 2: column definitions
# ---------------------------------------------------------------------------

def is_tall(raw_columns: Sequence[str]) -> bool:
    """Both payer_name and plan_name appear as whole column names."""
    return all(
        any(matches_string(column, sentinel) for column in raw_columns)
        for sentinel in TALL_SENTINELS
    )


def discover_payer_plans(raw_columns: Sequence[str]) -> list[PayerPlanKey]:
    """Collect the distinct payer/plan pairs named in Wide column labels."""
    pairs: list[PayerPlanKey] = []
    for column in raw_columns:
        segments = split_label(column)
        key = None
        if len(segments) == 4:
            if matches_string(segments[0], "standard_charge") and any(
                matches_string(segments[3], attribute) for attribute in WIDE_CHARGE_ATTRIBUTES
            ):
                key = PayerPlanKey(segments[1], segments[2])
        elif len(segments) == 3:
            if any(matches_string(segments[0], prefix) for prefix in PAYER_PLAN_PREFIXES):
                key = PayerPlanKey(segments[1], segments[2])
        if key is not None and key not in pairs:
            pairs.append(key)
    return pairs


def detect_shape(raw_columns: Sequence[str]) -> Shape | None:
    """Classify the columns as Tall or Wide; None when the signals conflict."""
    tall = is_tall(raw_columns)
    wide = bool(discover_payer_plans(raw_columns))
    if tall == wide:
        return None
    return Shape.tall if tall else Shape.wide


def discover_code_count(raw_columns: Sequence[str]) -> int:
    """Highest numeric suffix among ``code | N`` and ``code | N | type`` labels."""
    count = 0
    for column in raw_columns:
        segments = [s for s in split_label(column) if s]
        if not segments or segments[0].lower() != "code":
            continue
        if len(segments) == 2 or (len(segments) == 3 and segments[2].lower() == "type"):
            digits = _NON_DIGIT_RE.sub("", segments[1])
            if digits:
                count = max(count, int(digits))
    return count


def _reconcile(
    raw_columns: Sequence[str], expected: list[ColumnDefinition],
) -> tuple[list[str | None], list[str | None], list[ColumnDefinition], list[Diagnostic]]:
    remaining = list(expected)
    column_map: list[str | None] = []
    normalized: list[str | None] = []
    matched: list[str] = []
    errors: list[Diagnostic] = []

    for index, column in enumerate(raw_columns):
        slot = next((s for s in remaining if labels_equal(column, s.label)), None)
        if slot is not None:
            remaining.remove(slot)
            matched.append(column)
            column_map.append(column)
            normalized.append(normalize_label(slot.label))
        elif any(labels_equal(found, column) for found in matched):
            errors.append(catalog.duplicate_column(index, column))
            column_map.append(None)
            normalized.append(None)
        else:
            column_map.append(column)
            normalized.append(None)

    return column_map, normalized, remaining, errors


def resolve_data_columns(
    raw_columns: Sequence[str], version: str,
) -> tuple[ResolvedSchema | None, list[Diagnostic]]:
    """Resolve row 2 into a schema for the record rules.

    Returns no schema when the shape is ambiguous; in that case the only
    diagnostic is the ambiguity itself.
    """
    shape = detect_shape(raw_columns)
    if shape is None:
        logger.debug("Ambiguous column layout: %s", list(raw_columns))
        return None, [catalog.ambiguous_format()]

    payer_plans = discover_payer_plans(raw_columns) if shape == Shape.wide else []
    code_count = discover_code_count(raw_columns)
    expected = expected_data_columns(shape, code_count, payer_plans)

    column_map, normalized, remaining, errors = _reconcile(raw_columns, expected)
    errors.extend(
        catalog.column_missing(slot.label)
        for slot in remaining
        if slot.required and slot.applies_to(version)
    )

    schema = ResolvedSchema(
        shape=shape,
        code_column_count=code_count,
        payer_plans=payer_plans,
        column_map=column_map,
        normalized_labels=normalized,
    )
    logger.debug(
        "Resolved %s layout: %d code column(s), %d payer/plan pair(s)",
        shape.value, code_count, len(payer_plans),
    )
    return schema, errors
