"""Diagnostic catalogue: one factory per kind of finding.

Row and column indexes are 0-based; the header-name row is 0, header values
row 1, column definitions row 2 and data starts at row 3.
"""

from __future__ import annotations

from collections.abc import Sequence

from hptcheck.diagnostics.models import Diagnostic, Severity

HEADER_NAMES_ROW = 0
HEADER_VALUES_ROW = 1
COLUMN_DEFINITIONS_ROW = 2

STATE_CODES_URL = (
    "https://github.com/CMSgov/hospital-price-transparency/blob/master/"
    "documentation/CSV/state_codes.md"
)


# ---------------------------------------------------------------------------
# Field-level findings
# ---------------------------------------------------------------------------

def required_value(
    row: int, column: int, column_name: str, suffix: str = "",
    severity: Severity = Severity.error,
) -> Diagnostic:
    return Diagnostic(
        severity=severity,
        check_name="required_value",
        row=row,
        column=column,
        field=column_name,
        message=(
            f'A value is required for "{column_name}"{suffix}. '
            "You must encode the missing information."
        ),
    )


def allowed_values(
    row: int, column: int, column_name: str, value: str, allowed: Sequence[str],
) -> Diagnostic:
    return Diagnostic(
        check_name="allowed_values",
        row=row,
        column=column,
        field=column_name,
        message=(
            f'"{column_name}" value "{value}" is not one of the allowed valid values. '
            f"You must encode one of these valid values: {', '.join(allowed)}"
        ),
    )


def invalid_number(row: int, column: int, column_name: str, value: str) -> Diagnostic:
    return Diagnostic(
        check_name="invalid_number",
        row=row,
        column=column,
        field=column_name,
        message=(
            f'"{column_name}" value "{value}" is not a positive number. '
            "You must encode a positive, non-zero, numeric value."
        ),
    )


def invalid_date(row: int, column: int, column_name: str, value: str) -> Diagnostic:
    return Diagnostic(
        check_name="invalid_date",
        row=row,
        column=column,
        field=column_name,
        message=(
            f'"{column_name}" value "{value}" is not in a valid format. '
            "You must encode the date using the ISO 8601 format: YYYY-MM-DD "
            "or the month/day/year format: MM/DD/YYYY, M/D/YYYY"
        ),
    )


# ---------------------------------------------------------------------------
# Header and column-definition findings
# ---------------------------------------------------------------------------

def invalid_state_code(column: int, state_code: str) -> Diagnostic:
    return Diagnostic(
        check_name="invalid_state_code",
        row=HEADER_NAMES_ROW,
        column=column,
        message=(
            f"{state_code} is not an allowed value for state abbreviation. "
            "You must fill in the state or territory abbreviation even if there is "
            "no license number to encode. See the table found here for the list of "
            f"valid values for state and territory abbreviations {STATE_CODES_URL}"
        ),
    )


def header_column_missing(column_name: str) -> Diagnostic:
    return Diagnostic(
        check_name="header_column_missing",
        row=HEADER_NAMES_ROW,
        field=column_name,
        message=(
            f'Header column "{column_name}" is miscoded or missing. You must include '
            "this header and confirm that it is encoded as specified in the data dictionary."
        ),
    )


def duplicate_header_column(column: int, column_name: str) -> Diagnostic:
    return Diagnostic(
        check_name="duplicate_header_column",
        row=HEADER_NAMES_ROW,
        column=column,
        field=column_name,
        message=(
            f"Column {column_name} duplicated in header. You must review and revise "
            "your column headers so that each header appears only once in the first row."
        ),
    )


def column_missing(column_name: str) -> Diagnostic:
    return Diagnostic(
        check_name="column_missing",
        row=COLUMN_DEFINITIONS_ROW,
        field=column_name,
        message=(
            f"Column {column_name} is miscoded or missing from row 3. You must include "
            "this column and confirm that it is encoded as specified in the data dictionary."
        ),
    )


def duplicate_column(column: int, column_name: str) -> Diagnostic:
    return Diagnostic(
        check_name="duplicate_column",
        row=COLUMN_DEFINITIONS_ROW,
        column=column,
        field=column_name,
        message=(
            f"Column {column_name} duplicated in header. You must review and revise "
            "your column headers so that each header appears only once in the third row."
        ),
    )


def ambiguous_format() -> Diagnostic:
    return Diagnostic(
        check_name="ambiguous_format",
        row=COLUMN_DEFINITIONS_ROW,
        message=(
            "Required payer-specific information data element headers are missing or "
            "miscoded from the MRF that does not follow the specifications for the "
            'CSV "Tall" or CSV "Wide" format.'
        ),
    )


# ---------------------------------------------------------------------------
# Session-level (terminal) findings
# ---------------------------------------------------------------------------

def header_blank(row: int) -> Diagnostic:
    return Diagnostic(
        check_name="header_blank",
        row=row,
        column=0,
        message=f"Required headers must be defined on rows 1 and 3. Row {row + 1} is blank",
    )


def problems_in_header() -> Diagnostic:
    return Diagnostic(
        check_name="problems_in_header",
        column=0,
        message=(
            "Errors were found in the headers or values in rows 1 through 3, "
            "so the remaining rows were not evaluated."
        ),
    )


def min_rows() -> Diagnostic:
    return Diagnostic(
        check_name="min_rows",
        column=0,
        message="At least one row must be present",
    )


def invalid_version(allowed: Sequence[str]) -> Diagnostic:
    return Diagnostic(
        check_name="invalid_version",
        column=0,
        message=f"Invalid version supplied. Allowed versions are: {', '.join(allowed)}",
    )


def malformed_input(row: int, detail: str) -> Diagnostic:
    return Diagnostic(
        check_name="malformed_input",
        row=row,
        message=(
            f"The file could not be read past row {row + 1}: {detail}. "
            "The validator is unable to review a file that is not well-formed CSV."
        ),
    )


# ---------------------------------------------------------------------------
# Record-level conditional findings
# ---------------------------------------------------------------------------

def code_pair_missing(row: int, column: int) -> Diagnostic:
    return Diagnostic(
        check_name="code_pair_missing",
        row=row,
        column=column,
        message=(
            "If a standard charge is encoded, there must be a corresponding code and "
            "code type pairing. The code and code type pairing do not need to be in the "
            "first code and code type columns (i.e., code|1 and code|1|type)."
        ),
    )


def item_requires_charge(row: int, column: int) -> Diagnostic:
    return Diagnostic(
        check_name="item_requires_charge",
        row=row,
        column=column,
        message=(
            "If an item or service is encoded, a corresponding valid value must be "
            'encoded for at least one of the following: "Gross Charge", "Discounted '
            'Cash Price", "Payer-Specific Negotiated Charge: Dollar Amount", '
            '"Payer-Specific Negotiated Charge: Percentage", "Payer-Specific '
            'Negotiated Charge: Algorithm".'
        ),
    )


def dollar_needs_min_max(row: int, column: int) -> Diagnostic:
    return Diagnostic(
        check_name="dollar_needs_min_max",
        row=row,
        column=column,
        message=(
            'If there is a "payer specific negotiated charge" encoded as a dollar amount, '
            "there must be a corresponding valid value encoded for the deidentified "
            "minimum and deidentified maximum negotiated charge data."
        ),
    )


def other_methodology_notes(row: int, column: int, field: str | None = None) -> Diagnostic:
    return Diagnostic(
        check_name="other_methodology_notes",
        row=row,
        column=column,
        field=field,
        message=(
            'If the "standard charge methodology" encoded value is "other", there must '
            'be a corresponding explanation found in the "additional notes" for the '
            "associated payer-specific negotiated charge."
        ),
    )


def percentage_algorithm_estimate(
    row: int, column: int, field: str | None = None,
    severity: Severity = Severity.error,
) -> Diagnostic:
    return Diagnostic(
        severity=severity,
        check_name="percentage_algorithm_estimate",
        row=row,
        column=column,
        field=field,
        message=(
            'If a "payer specific negotiated charge" can only be expressed as a '
            'percentage or algorithm, then a corresponding "Estimated Allowed Amount" '
            "must also be encoded."
        ),
    )


def drug_information_required(row: int, column: int) -> Diagnostic:
    return Diagnostic(
        check_name="drug_information_required",
        row=row,
        column=column,
        message=(
            "If code type is NDC, then the corresponding drug unit of measure and "
            "drug type of measure data element must be encoded."
        ),
    )


def modifier_missing_info(row: int, column: int) -> Diagnostic:
    return Diagnostic(
        check_name="modifier_missing_info",
        row=row,
        column=column,
        message=(
            "If a modifier is encoded without an item or service, then a description "
            "and one of the following is the minimum information required: "
            "additional_payer_notes, standard_charge | negotiated_dollar, "
            "standard_charge | negotiated_percentage, or standard_charge | negotiated_algorithm."
        ),
    )


# ---------------------------------------------------------------------------
# Informational warnings
# ---------------------------------------------------------------------------

def nine_nines(row: int, column: int, field: str | None = None) -> Diagnostic:
    return Diagnostic(
        severity=Severity.warning,
        check_name="nine_nines",
        row=row,
        column=column,
        field=field,
        message="Nine 9s used for estimated amount.",
    )


def false_affirmation(column: int, path: str | None = None) -> Diagnostic:
    return Diagnostic(
        severity=Severity.warning,
        check_name="false_affirmation",
        row=HEADER_VALUES_ROW,
        column=column,
        path=path,
        message="Affirmation value is false.",
    )


def no_payer_charges(path: str = "/standard_charge_information") -> Diagnostic:
    return Diagnostic(
        severity=Severity.warning,
        check_name="no_payer_charges",
        path=path,
        message="File does not have any payer-specific charges.",
    )


# ---------------------------------------------------------------------------
# JSON findings
# ---------------------------------------------------------------------------

def invalid_json(detail: str) -> Diagnostic:
    return Diagnostic(
        check_name="invalid_json",
        path="",
        message=(
            f"JSON parsing error: {detail}. The validator is unable to review a "
            "syntactically invalid JSON file. Please ensure that your file is "
            "well-formatted JSON."
        ),
    )


def json_schema(
    path: str, field: str | None, message: str, severity: Severity = Severity.error,
) -> Diagnostic:
    return Diagnostic(
        severity=severity,
        check_name="json_schema",
        path=path,
        field=field,
        message=message,
    )
