"""Phased enforcement: which rules are still warnings on a given day."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from hptcheck.diagnostics.models import Severity
from hptcheck.schema.tables import PHASED_ENFORCEMENT


class EnforcementPolicy(BaseModel):
    """Severity of phased rules, evaluated against a fixed ``as_of`` date.

    The date is always given by the caller; ``ValidatorOptions`` supplies
    today's date when none is configured.
    """

    as_of: date
    enforcement_dates: dict[str, date] = Field(
        default_factory=lambda: dict(PHASED_ENFORCEMENT)
    )

    def severity_for(self, field: str) -> Severity:
        """Warning before the field's enforcement date, error on or after it."""
        enforced_on = self.enforcement_dates.get(field)
        if enforced_on is not None and self.as_of < enforced_on:
            return Severity.warning
        return Severity.error

    def is_phased(self, field: str) -> bool:
        return field in self.enforcement_dates
