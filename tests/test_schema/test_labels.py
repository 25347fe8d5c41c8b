"""Tests for label normalization and value checks."""

from __future__ import annotations

import pytest

from hptcheck.schema.labels import (
    is_positive_number,
    is_valid_date,
    labels_equal,
    matches_string,
    normalize_label,
)


class TestLabels:
    def test_normalize_trims_segments(self) -> None:
        assert normalize_label("standard_charge|gross") == "standard_charge | gross"
        assert normalize_label("  code |  1 |type ") == "code | 1 | type"

    def test_equal_ignores_case_and_spacing(self) -> None:
        assert labels_equal("Standard_Charge|GROSS", "standard_charge | gross")

    def test_equal_is_segment_count_sensitive(self) -> None:
        assert not labels_equal("code | 1", "code | 1 | type")

    def test_matches_string(self) -> None:
        assert matches_string(" Other ", "other")
        assert not matches_string(None, "other")


class TestPositiveNumber:
    @pytest.mark.parametrize("value", ["1", "0.5", "150", "1000000.25", "999999999"])
    def test_accepts(self, value: str) -> None:
        assert is_positive_number(value)

    @pytest.mark.parametrize(
        "value", ["0", "0.00", "-5", "1,000", "$100", "abc", "1.", ".5", "1e3", ""],
    )
    def test_rejects(self, value: str) -> None:
        assert not is_positive_number(value)


class TestDates:
    @pytest.mark.parametrize("value", ["2024-07-01", "7/1/2024", "07/01/2024", "2/29/2024"])
    def test_valid(self, value: str) -> None:
        assert is_valid_date(value)

    @pytest.mark.parametrize("value", ["2024-13-01", "2/30/2024", "July 1 2024", "2024/07/01", "2/29/2023"])
    def test_invalid(self, value: str) -> None:
        assert not is_valid_date(value)
