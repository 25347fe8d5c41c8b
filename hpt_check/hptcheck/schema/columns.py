"""Expected data columns per shape, expanded with discovered parameters."""

from __future__ import annotations

from collections.abc import Sequence

from hptcheck.resolver.models import ColumnDefinition, PayerPlanKey, Shape

V2_2_0 = "2.2.0"

COMMON_COLUMNS = [
    "description",
    "setting",
    "standard_charge | gross",
    "standard_charge | discounted_cash",
    "standard_charge | min",
    "standard_charge | max",
    "additional_generic_notes",
]

TALL_COLUMNS = [
    "payer_name",
    "plan_name",
    "standard_charge | negotiated_dollar",
    "standard_charge | negotiated_percentage",
    "standard_charge | negotiated_algorithm",
    "standard_charge | methodology",
]

WIDE_CHARGE_ATTRIBUTES = [
    "negotiated_dollar",
    "negotiated_percentage",
    "negotiated_algorithm",
    "methodology",
]

V2_2_COLUMNS = [
    "drug_unit_of_measurement",
    "drug_type_of_measurement",
    "modifiers",
]


def code_label(index: int) -> str:
    return f"code | {index}"


def code_type_label(index: int) -> str:
    return f"code | {index} | type"


def payer_charge_label(pair: PayerPlanKey, attribute: str) -> str:
    return f"standard_charge | {pair.label} | {attribute}"


def payer_notes_label(pair: PayerPlanKey) -> str:
    return f"additional_payer_notes | {pair.label}"


def payer_estimate_label(pair: PayerPlanKey) -> str:
    return f"estimated_amount | {pair.label}"


def expected_data_columns(
    shape: Shape, code_column_count: int, payer_plans: Sequence[PayerPlanKey] = (),
) -> list[ColumnDefinition]:
    """Build the ordered list of column slots for one file.

    Columns introduced in a later schema version carry ``applies_from`` and
    are only reported missing when the file's version has them.
    """
    columns = [ColumnDefinition(label) for label in COMMON_COLUMNS]
    for i in range(1, max(1, code_column_count) + 1):
        columns.append(ColumnDefinition(code_label(i)))
        columns.append(ColumnDefinition(code_type_label(i)))

    if shape == Shape.wide:
        for pair in payer_plans:
            for attribute in WIDE_CHARGE_ATTRIBUTES:
                columns.append(ColumnDefinition(payer_charge_label(pair, attribute)))
            columns.append(ColumnDefinition(payer_notes_label(pair)))
    else:
        columns.extend(ColumnDefinition(label) for label in TALL_COLUMNS)

    columns.extend(
        ColumnDefinition(label, applies_from=V2_2_0) for label in V2_2_COLUMNS
    )
    if shape == Shape.wide:
        columns.extend(
            ColumnDefinition(payer_estimate_label(pair), applies_from=V2_2_0)
            for pair in payer_plans
        )
    else:
        columns.append(ColumnDefinition("estimated_amount", applies_from=V2_2_0))
    return columns
