"""Shared test fixtures and configuration."""

import os
import sys
from datetime import date
from pathlib import Path

# Add hpt_check/ to Python path so `from hptcheck.xxx` imports work
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "hpt_check"))

import pytest

from hptcheck.config import ValidatorOptions

os.environ["HPTCHECK_DEV_MODE"] = "true"

AFFIRMATION = (
    "To the best of its knowledge and belief, the hospital has included all applicable "
    "standard charge information in accordance with the requirements of 45 CFR 180.50, "
    "and the information encoded is true, accurate, and complete as of the date indicated."
)

HEADER_NAMES = [
    "hospital_name",
    "last_updated_on",
    "version",
    "hospital_location",
    "hospital_address",
    "license_number | MD",
    AFFIRMATION,
]

HEADER_VALUES = [
    "West Mercy Hospital",
    "2024-07-01",
    "2.2.0",
    "Woodlawn",
    "12 Main St, Woodlawn, MD 21207",
    "500123",
    "true",
]

TALL_COLUMNS = [
    "description",
    "code | 1",
    "code | 1 | type",
    "code | 2",
    "code | 2 | type",
    "modifiers",
    "setting",
    "drug_unit_of_measurement",
    "drug_type_of_measurement",
    "standard_charge | gross",
    "standard_charge | discounted_cash",
    "payer_name",
    "plan_name",
    "standard_charge | negotiated_dollar",
    "standard_charge | negotiated_percentage",
    "standard_charge | negotiated_algorithm",
    "estimated_amount",
    "standard_charge | min",
    "standard_charge | max",
    "standard_charge | methodology",
    "additional_generic_notes",
]

WIDE_PAIRS = [("Acme Health", "Gold PPO"), ("Beta Care", "Silver HMO")]


def wide_columns(pairs: list[tuple[str, str]] = WIDE_PAIRS) -> list[str]:
    columns = [
        "description",
        "code | 1",
        "code | 1 | type",
        "modifiers",
        "setting",
        "drug_unit_of_measurement",
        "drug_type_of_measurement",
        "standard_charge | gross",
        "standard_charge | discounted_cash",
        "standard_charge | min",
        "standard_charge | max",
        "additional_generic_notes",
    ]
    for payer, plan in pairs:
        columns.extend([
            f"standard_charge | {payer} | {plan} | negotiated_dollar",
            f"standard_charge | {payer} | {plan} | negotiated_percentage",
            f"standard_charge | {payer} | {plan} | negotiated_algorithm",
            f"estimated_amount | {payer} | {plan}",
            f"standard_charge | {payer} | {plan} | methodology",
            f"additional_payer_notes | {payer} | {plan}",
        ])
    return columns


def row_from(columns: list[str], values: dict[str, str]) -> list[str]:
    """Build a data row in column order; unspecified cells are empty."""
    return [values.get(column, "") for column in columns]


@pytest.fixture
def options() -> ValidatorOptions:
    """Options with the estimated-amount rule already enforced."""
    return ValidatorOptions(as_of=date(2025, 6, 1))


@pytest.fixture
def early_options() -> ValidatorOptions:
    """Options dated before the estimated-amount enforcement date."""
    return ValidatorOptions(as_of=date(2024, 6, 1))
