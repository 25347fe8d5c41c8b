"""Tests for expected-column expansion."""

from __future__ import annotations

from hptcheck.resolver.models import PayerPlanKey, Shape
from hptcheck.schema.columns import expected_data_columns


def _labels(columns) -> list[str]:
    return [c.label for c in columns]


class TestExpectedColumns:
    def test_tall_has_payer_columns(self) -> None:
        labels = _labels(expected_data_columns(Shape.tall, 1))
        assert "payer_name" in labels
        assert "standard_charge | methodology" in labels
        assert "estimated_amount" in labels
        assert not any(label.startswith("additional_payer_notes") for label in labels)

    def test_code_columns_expand_to_count(self) -> None:
        labels = _labels(expected_data_columns(Shape.tall, 3))
        for i in range(1, 4):
            assert f"code | {i}" in labels
            assert f"code | {i} | type" in labels
        assert "code | 4" not in labels

    def test_zero_code_count_expects_one_pair(self) -> None:
        labels = _labels(expected_data_columns(Shape.tall, 0))
        assert "code | 1" in labels
        assert "code | 1 | type" in labels

    def test_wide_repeats_per_pair(self) -> None:
        pairs = [PayerPlanKey("Acme", "Gold"), PayerPlanKey("Beta", "Silver")]
        labels = _labels(expected_data_columns(Shape.wide, 1, pairs))
        for pair in ("Acme | Gold", "Beta | Silver"):
            assert f"standard_charge | {pair} | negotiated_dollar" in labels
            assert f"standard_charge | {pair} | methodology" in labels
            assert f"additional_payer_notes | {pair}" in labels
            assert f"estimated_amount | {pair}" in labels
        assert "payer_name" not in labels

    def test_later_columns_are_version_gated(self) -> None:
        columns = {c.label: c for c in expected_data_columns(Shape.tall, 1)}
        assert columns["modifiers"].applies_to("2.2.0")
        assert not columns["modifiers"].applies_to("2.1.0")
        assert columns["drug_unit_of_measurement"].applies_from == "2.2.0"
        assert columns["description"].applies_to("2.0.0")
