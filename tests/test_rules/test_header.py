"""Tests for header-value rules (row 1)."""

from __future__ import annotations

from conftest import HEADER_NAMES, HEADER_VALUES

from hptcheck.resolver.columns import resolve_header_columns
from hptcheck.rules.header import check_header_values, header_alerts


def _values(**overrides: str) -> list[str]:
    values = dict(zip(HEADER_NAMES, HEADER_VALUES))
    values.update(overrides)
    return [values[name] for name in HEADER_NAMES]


def _check(values: list[str], names: list[str] = HEADER_NAMES):
    resolution, errors = resolve_header_columns(names)
    assert errors == []
    return check_header_values(resolution, values)


class TestHeaderValues:
    def test_valid_values(self) -> None:
        assert _check(HEADER_VALUES) == []

    def test_required_value(self) -> None:
        errors = _check(_values(hospital_name=""))
        assert [e.check_name for e in errors] == ["required_value"]
        assert errors[0].address == "A2"

    def test_short_row_reports_trailing_headers(self) -> None:
        errors = _check(HEADER_VALUES[:5])
        # license number may be empty; the affirmation may not
        assert [e.column for e in errors] == [6]

    def test_license_number_optional(self) -> None:
        values = list(HEADER_VALUES)
        values[5] = ""
        assert _check(values) == []

    def test_license_number_optional_any_case(self) -> None:
        names = [n if not n.startswith("license") else "LICENSE_NUMBER|md" for n in HEADER_NAMES]
        values = list(HEADER_VALUES)
        values[5] = ""
        assert _check(values, names) == []

    def test_us_date_accepted(self) -> None:
        assert _check(_values(last_updated_on="7/1/2024")) == []
        assert _check(_values(last_updated_on="07/01/2024")) == []

    def test_invalid_date(self) -> None:
        for value in ("2024-02-31", "July 1, 2024", "2024/07/01"):
            errors = _check(_values(last_updated_on=value))
            assert [e.check_name for e in errors] == ["invalid_date"]
            assert errors[0].column == 1

    def test_affirmation_values(self) -> None:
        values = list(HEADER_VALUES)
        values[6] = "TRUE"
        assert _check(values) == []
        values[6] = "yes"
        errors = _check(values)
        assert [e.check_name for e in errors] == ["allowed_values"]


class TestHeaderAlerts:
    def test_false_affirmation(self) -> None:
        resolution, _ = resolve_header_columns(HEADER_NAMES)
        values = list(HEADER_VALUES)
        values[6] = "False"
        alerts = header_alerts(resolution, values)
        assert [a.check_name for a in alerts] == ["false_affirmation"]
        assert alerts[0].is_warning
        assert alerts[0].address == "G2"

    def test_true_affirmation(self) -> None:
        resolution, _ = resolve_header_columns(HEADER_NAMES)
        assert header_alerts(resolution, HEADER_VALUES) == []
