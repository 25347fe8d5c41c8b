"""Resolver data models: shapes, payer/plan keys and resolved schemas."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field

from hptcheck.schema.labels import CANONICAL_SEPARATOR
from hptcheck.schema.versions import version_at_least


class Shape(str, Enum):
    """Record shape of a CSV file."""

    tall = "tall"
    wide = "wide"


@dataclass(frozen=True, eq=False)
class PayerPlanKey:
    """A (payer, plan) pair discovered from Wide column names.

    Equality and hashing ignore case; the label keeps the casing seen first.
    """

    payer: str
    plan: str

    @property
    def label(self) -> str:
        return f"{self.payer}{CANONICAL_SEPARATOR}{self.plan}"

    def _key(self) -> tuple[str, str]:
        return (self.payer.upper(), self.plan.upper())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PayerPlanKey):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class ColumnDefinition:
    """One expected column slot."""

    label: str
    required: bool = True
    applies_from: str | None = None

    def applies_to(self, version: str) -> bool:
        if self.applies_from is None:
            return True
        return version_at_least(version, self.applies_from)


class HeaderResolution(BaseModel):
    """Outcome of matching row 0 against the header columns.

    ``column_map`` has one slot per raw column: the raw name when the column
    matched a header slot, else None.
    """

    column_map: list[str | None] = Field(default_factory=list)

    def matched(self) -> list[tuple[int, str]]:
        return [(i, name) for i, name in enumerate(self.column_map) if name is not None]


@dataclass
class ResolvedSchema:
    """Outcome of resolving row 2 (the column definitions) of a CSV file.

    ``column_map`` keeps the raw label for every matched or unknown column and
    None for duplicates; ``normalized_labels`` holds the canonical expected
    label for matched columns and None otherwise.
    """

    shape: Shape
    code_column_count: int
    payer_plans: list[PayerPlanKey] = field(default_factory=list)
    column_map: list[str | None] = field(default_factory=list)
    normalized_labels: list[str | None] = field(default_factory=list)

    @property
    def is_tall(self) -> bool:
        return self.shape == Shape.tall

    def record_from_row(self, row: list[str]) -> dict[str, str]:
        """Map one data row to its normalized labels; missing cells read as ''."""
        record: dict[str, str] = {}
        for index, label in enumerate(self.normalized_labels):
            if label is None:
                continue
            record[label] = row[index] if index < len(row) else ""
        return record
