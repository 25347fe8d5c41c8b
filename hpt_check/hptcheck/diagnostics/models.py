"""Diagnostic data models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

ASCII_UPPERCASE = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class Severity(str, Enum):
    """Severity level for a diagnostic."""

    error = "error"
    warning = "warning"


def column_letters(column: int) -> str:
    """Convert a 0-based column index to spreadsheet letters (0 → A, 26 → AA)."""
    name = ""
    while column >= 0:
        name = ASCII_UPPERCASE[column % 26] + name
        column = column // 26 - 1
    return name


def cell_address(row: int, column: int) -> str:
    """Render a 0-based row/column pair as a spreadsheet cell address.

    A column of -1 means the finding applies to the whole row, which renders
    as ``row N`` instead of a cell.
    """
    if column < 0:
        return f"row {row + 1}"
    return f"{column_letters(column)}{row + 1}"


class Diagnostic(BaseModel):
    """A single validation finding."""

    model_config = ConfigDict(frozen=True)

    severity: Severity = Severity.error
    check_name: str
    message: str
    row: int = Field(0, ge=0)
    column: int = Field(-1, ge=-1)
    field: str | None = None
    path: str | None = None

    @property
    def is_warning(self) -> bool:
        return self.severity == Severity.warning

    @property
    def address(self) -> str:
        # JSON findings are addressed by pointer, CSV findings by cell
        if self.path is not None:
            return self.path
        return cell_address(self.row, self.column)

    def render(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {
            "path": self.address,
            "field": self.field,
            "message": self.message,
        }
        if self.is_warning:
            rendered["warning"] = True
        return rendered


class ValidationResult(BaseModel):
    """Final outcome of a validation run."""

    valid: bool = True
    errors: list[Diagnostic] = Field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(1 for d in self.errors if not d.is_warning)

    @property
    def warning_count(self) -> int:
        return sum(1 for d in self.errors if d.is_warning)

    def rendered(self) -> list[dict[str, Any]]:
        return [d.render() for d in self.errors]
