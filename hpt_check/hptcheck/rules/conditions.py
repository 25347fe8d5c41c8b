"""Cross-field conditional rules for data records."""

from __future__ import annotations

from dataclasses import dataclass

from hptcheck.diagnostics import catalog
from hptcheck.diagnostics.models import Diagnostic, Severity
from hptcheck.rules.fields import ColumnIndex, PayerPlanColumns, has_value, value_of
from hptcheck.rules.tree import Record
from hptcheck.schema.columns import code_type_label
from hptcheck.schema.labels import POSITIVE_NUMBER_RE, matches_string
from hptcheck.schema.tables import DRUG_CODE_TYPE, NINE_NINES

BOUND_FIELDS = ("standard_charge | min", "standard_charge | max")
DRUG_FIELDS = ("drug_unit_of_measurement", "drug_type_of_measurement")


@dataclass(frozen=True)
class CodePairMissing:
    """Report a missing code pair just past the last column."""

    columns: ColumnIndex

    def __call__(self, record: Record, row: int) -> list[Diagnostic]:
        return [catalog.code_pair_missing(row, self.columns.width)]


@dataclass(frozen=True)
class OtherMethodologyNotes:
    columns: ColumnIndex
    group: PayerPlanColumns

    def __call__(self, record: Record, row: int) -> list[Diagnostic]:
        if not matches_string(value_of(record, self.group.methodology), "other"):
            return []
        if has_value(record, self.group.notes):
            return []
        return [
            catalog.other_methodology_notes(
                row, self.columns.position(self.group.notes), self.group.notes,
            )
        ]


@dataclass(frozen=True)
class ItemRequiresCharge:
    columns: ColumnIndex
    charge_fields: tuple[str, ...]

    def __call__(self, record: Record, row: int) -> list[Diagnostic]:
        if any(has_value(record, field) for field in self.charge_fields):
            return []
        return [
            catalog.item_requires_charge(row, self.columns.position("standard_charge | gross"))
        ]


@dataclass(frozen=True)
class DollarNeedsMinMax:
    columns: ColumnIndex
    dollar_fields: tuple[str, ...]

    def __call__(self, record: Record, row: int) -> list[Diagnostic]:
        if not any(has_value(record, field) for field in self.dollar_fields):
            return []
        missing = [bound for bound in BOUND_FIELDS if not has_value(record, bound)]
        if not missing:
            return []
        return [catalog.dollar_needs_min_max(row, self.columns.position(missing[0]))]


@dataclass(frozen=True)
class PercentageAlgorithmEstimate:
    """Percentage or algorithm charge without a dollar amount needs an estimate."""

    columns: ColumnIndex
    group: PayerPlanColumns
    severity: Severity = Severity.error

    def __call__(self, record: Record, row: int) -> list[Diagnostic]:
        if not self.group.percentage_or_algorithm_only(record):
            return []
        if has_value(record, self.group.estimate):
            return []
        return [
            catalog.percentage_algorithm_estimate(
                row,
                self.columns.position(self.group.estimate),
                self.group.estimate,
                self.severity,
            )
        ]


@dataclass(frozen=True)
class DrugInformationForNdc:
    columns: ColumnIndex
    code_column_count: int

    def __call__(self, record: Record, row: int) -> list[Diagnostic]:
        has_ndc = any(
            matches_string(record.get(code_type_label(i)), DRUG_CODE_TYPE)
            for i in range(1, self.code_column_count + 1)
        )
        if not has_ndc:
            return []
        missing = [field for field in DRUG_FIELDS if not has_value(record, field)]
        if not missing:
            return []
        return [catalog.drug_information_required(row, self.columns.position(missing[0]))]


@dataclass(frozen=True)
class ModifierMinimumInfo:
    columns: ColumnIndex
    info_fields: tuple[str, ...]

    def __call__(self, record: Record, row: int) -> list[Diagnostic]:
        if any(has_value(record, field) for field in self.info_fields):
            return []
        return [
            catalog.modifier_missing_info(row, self.columns.position("additional_generic_notes"))
        ]


@dataclass(frozen=True)
class NineNinesEstimate:
    columns: ColumnIndex
    field: str

    def __call__(self, record: Record, row: int) -> list[Diagnostic]:
        value = value_of(record, self.field)
        if not POSITIVE_NUMBER_RE.match(value) or float(value) != NINE_NINES:
            return []
        return [catalog.nine_nines(row, self.columns.position(self.field), self.field)]
