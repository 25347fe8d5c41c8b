"""Tests for phased enforcement."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from hptcheck.diagnostics.models import Severity
from hptcheck.rules.policy import EnforcementPolicy


class TestEnforcementPolicy:
    def test_warning_before_enforcement(self) -> None:
        policy = EnforcementPolicy(as_of=date(2024, 12, 31))
        assert policy.severity_for("estimated_amount") == Severity.warning

    def test_error_on_enforcement_date(self) -> None:
        policy = EnforcementPolicy(as_of=date(2025, 1, 1))
        assert policy.severity_for("estimated_amount") == Severity.error

    def test_unphased_fields_are_errors(self) -> None:
        policy = EnforcementPolicy(as_of=date(2020, 1, 1))
        assert policy.severity_for("description") == Severity.error
        assert not policy.is_phased("description")
        assert policy.is_phased("estimated_amount")

    def test_custom_dates(self) -> None:
        policy = EnforcementPolicy(
            as_of=date(2025, 6, 1),
            enforcement_dates={"estimated_amount": date(2026, 1, 1)},
        )
        assert policy.severity_for("estimated_amount") == Severity.warning

    def test_as_of_is_required(self) -> None:
        with pytest.raises(ValidationError):
            EnforcementPolicy()
