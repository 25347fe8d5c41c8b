"""Single-field rules and record predicates.

Every rule is a small frozen struct built once per session. Rules look values
up by normalized label and report the column position and raw column name
found in the :class:`ColumnIndex`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from hptcheck.diagnostics import catalog
from hptcheck.diagnostics.models import Diagnostic
from hptcheck.resolver.models import PayerPlanKey, ResolvedSchema
from hptcheck.rules.tree import Record
from hptcheck.schema.columns import (
    code_label,
    code_type_label,
    payer_charge_label,
    payer_estimate_label,
    payer_notes_label,
)
from hptcheck.schema.labels import is_positive_number, matches_string


def value_of(record: Record, field: str) -> str:
    return record.get(field) or ""


def has_value(record: Record, field: str) -> bool:
    return bool(value_of(record, field))


@dataclass(frozen=True)
class ColumnIndex:
    """Normalized and raw column names of the column-definition row."""

    normalized: tuple[str | None, ...]
    raw: tuple[str | None, ...]

    @classmethod
    def from_schema(cls, schema: ResolvedSchema) -> ColumnIndex:
        return cls(tuple(schema.normalized_labels), tuple(schema.column_map))

    @property
    def width(self) -> int:
        return len(self.raw)

    def position(self, field: str) -> int:
        try:
            return self.normalized.index(field)
        except ValueError:
            return -1

    def name(self, field: str) -> str:
        position = self.position(field)
        if position < 0:
            return ""
        return self.raw[position] or ""


@dataclass(frozen=True)
class PayerPlanColumns:
    """Concrete labels of one payer-specific charge group.

    Tall files have a single group using the plain labels; Wide files have one
    group per discovered payer/plan pair.
    """

    dollar: str
    percentage: str
    algorithm: str
    methodology: str
    notes: str
    estimate: str
    pair: PayerPlanKey | None = None

    @classmethod
    def tall(cls) -> PayerPlanColumns:
        return cls(
            dollar="standard_charge | negotiated_dollar",
            percentage="standard_charge | negotiated_percentage",
            algorithm="standard_charge | negotiated_algorithm",
            methodology="standard_charge | methodology",
            notes="additional_generic_notes",
            estimate="estimated_amount",
        )

    @classmethod
    def wide(cls, pair: PayerPlanKey) -> PayerPlanColumns:
        return cls(
            dollar=payer_charge_label(pair, "negotiated_dollar"),
            percentage=payer_charge_label(pair, "negotiated_percentage"),
            algorithm=payer_charge_label(pair, "negotiated_algorithm"),
            methodology=payer_charge_label(pair, "methodology"),
            notes=payer_notes_label(pair),
            estimate=payer_estimate_label(pair),
            pair=pair,
        )

    @property
    def charges(self) -> tuple[str, str, str]:
        return (self.dollar, self.percentage, self.algorithm)

    def has_charge(self, record: Record) -> bool:
        return any(has_value(record, field) for field in self.charges)

    def percentage_or_algorithm_only(self, record: Record) -> bool:
        return not has_value(record, self.dollar) and (
            has_value(record, self.percentage) or has_value(record, self.algorithm)
        )


# ---------------------------------------------------------------------------
# Field validators
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RequiredField:
    columns: ColumnIndex
    field: str
    suffix: str = ""

    def __call__(self, record: Record, row: int) -> list[Diagnostic]:
        if has_value(record, self.field):
            return []
        return [
            catalog.required_value(
                row, self.columns.position(self.field), self.columns.name(self.field), self.suffix,
            )
        ]


@dataclass(frozen=True)
class RequiredEnumField:
    columns: ColumnIndex
    field: str
    allowed: tuple[str, ...]
    suffix: str = ""

    def __call__(self, record: Record, row: int) -> list[Diagnostic]:
        value = value_of(record, self.field)
        position = self.columns.position(self.field)
        name = self.columns.name(self.field)
        if not value:
            return [catalog.required_value(row, position, name, self.suffix)]
        if not any(matches_string(value, allowed) for allowed in self.allowed):
            return [catalog.allowed_values(row, position, name, value, self.allowed)]
        return []


@dataclass(frozen=True)
class OptionalPositiveNumber:
    columns: ColumnIndex
    field: str

    def __call__(self, record: Record, row: int) -> list[Diagnostic]:
        value = value_of(record, self.field)
        if not value or is_positive_number(value):
            return []
        return [
            catalog.invalid_number(
                row, self.columns.position(self.field), self.columns.name(self.field), value,
            )
        ]


@dataclass(frozen=True)
class RequiredPositiveNumber:
    columns: ColumnIndex
    field: str
    suffix: str = ""

    def __call__(self, record: Record, row: int) -> list[Diagnostic]:
        if not has_value(record, self.field):
            return RequiredField(self.columns, self.field, self.suffix)(record, row)
        return OptionalPositiveNumber(self.columns, self.field)(record, row)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AnyPresent:
    fields: tuple[str, ...]

    def __call__(self, record: Record) -> bool:
        return any(has_value(record, field) for field in self.fields)


@dataclass(frozen=True)
class AnyCodePresent:
    """True when any ``code | i`` or ``code | i | type`` cell has a value."""

    code_column_count: int

    def __call__(self, record: Record) -> bool:
        return any(
            has_value(record, code_label(i)) or has_value(record, code_type_label(i))
            for i in range(1, self.code_column_count + 1)
        )


@dataclass(frozen=True)
class NoCodePresent:
    code_column_count: int

    def __call__(self, record: Record) -> bool:
        return not AnyCodePresent(self.code_column_count)(record)


@dataclass(frozen=True)
class ModifierPresent:
    def __call__(self, record: Record) -> bool:
        return has_value(record, "modifiers")


def present(*fields: str) -> AnyPresent:
    return AnyPresent(tuple(fields))


def code_fields(code_column_count: int) -> Sequence[tuple[str, str]]:
    return [(code_label(i), code_type_label(i)) for i in range(1, code_column_count + 1)]
