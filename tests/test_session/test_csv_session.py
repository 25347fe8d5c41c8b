"""Tests for the streaming CSV validation session."""

from __future__ import annotations

import csv
import gc
import io
from pathlib import Path

import pytest
from conftest import HEADER_NAMES, HEADER_VALUES, TALL_COLUMNS, row_from, wide_columns

from hptcheck.config import ValidatorOptions
from hptcheck.session import csv_session
from hptcheck.session.csv_session import CsvValidationSession, validate_csv
from hptcheck.session.models import Phase
from hptcheck.session.tokenizer import BOM

VALID_RECORD = {
    "description": "Office visit",
    "code | 1": "99202",
    "code | 1 | type": "CPT",
    "setting": "outpatient",
    "standard_charge | gross": "150",
    "standard_charge | discounted_cash": "125",
    "payer_name": "Acme Health",
    "plan_name": "Gold PPO",
    "standard_charge | negotiated_dollar": "110",
    "standard_charge | min": "100",
    "standard_charge | max": "140",
    "standard_charge | methodology": "fee schedule",
}


def _record(**overrides: str) -> list[str]:
    return row_from(TALL_COLUMNS, {**VALID_RECORD, **overrides})


def _csv(rows: list[list[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    for row in rows:
        writer.writerow(row)
    return buffer.getvalue()


def _tall_file(*records: list[str], header_values: list[str] = HEADER_VALUES) -> str:
    return _csv([HEADER_NAMES, header_values, TALL_COLUMNS, *records])


def _checks(result) -> list[str]:
    return [d.check_name for d in result.errors]


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------

class TestValidFiles:
    def test_valid_tall(self) -> None:
        result = validate_csv(_tall_file(_record(), _record(description="Follow-up")), "2.2.0")
        assert result.valid
        assert result.errors == []

    def test_valid_wide(self) -> None:
        columns = wide_columns()
        record = row_from(columns, {
            "description": "Office visit",
            "code | 1": "99202",
            "code | 1 | type": "CPT",
            "setting": "both",
            "standard_charge | gross": "150",
        })
        result = validate_csv(_csv([HEADER_NAMES, HEADER_VALUES, columns, record]), "2.2.0")
        assert result.valid, result.rendered()

    def test_version_is_coerced(self) -> None:
        assert validate_csv(_tall_file(_record()), "v2.2").valid

    def test_bom_and_crlf(self) -> None:
        text = BOM + _tall_file(_record()).replace("\n", "\r\n")
        assert validate_csv(text, "2.2.0").valid

    def test_bytes_and_path_sources(self, tmp_path: Path) -> None:
        text = _tall_file(_record())
        assert validate_csv(text.encode("utf-8"), "2.2.0").valid
        path = tmp_path / "standardcharges.csv"
        path.write_text(text, encoding="utf-8")
        assert validate_csv(path, "2.2.0").valid

    def test_warnings_do_not_invalidate(self) -> None:
        values = list(HEADER_VALUES)
        values[6] = "false"
        result = validate_csv(_tall_file(_record(estimated_amount="999999999"), header_values=values), "2.2.0")
        assert result.valid
        assert _checks(result) == ["false_affirmation", "nine_nines"]
        assert result.warning_count == 2


# ---------------------------------------------------------------------------
# Record errors
# ---------------------------------------------------------------------------

class TestRecordErrors:
    def test_errors_carry_row_and_column(self) -> None:
        result = validate_csv(_tall_file(_record(), _record(setting="clinic")), "2.2.0")
        assert not result.valid
        assert _checks(result) == ["allowed_values"]
        assert result.errors[0].row == 4
        assert result.errors[0].address == "G5"

    def test_blank_data_rows_are_skipped_but_counted(self) -> None:
        result = validate_csv(_tall_file(_record(), [], _record(description="")), "2.2.0")
        assert _checks(result) == ["required_value"]
        assert result.errors[0].address == "A6"

    def test_on_record_callback(self) -> None:
        seen: list[tuple[dict, list, list]] = []
        validate_csv(
            _tall_file(_record(), _record(description="")),
            "2.2.0",
            on_record=lambda record, errors, warnings: seen.append((record, errors, warnings)),
        )
        assert len(seen) == 2
        assert seen[0][0]["description"] == "Office visit"
        assert seen[0][1] == []
        assert [e.check_name for e in seen[1][1]] == ["required_value"]

    def test_error_limit_stops_reading(self) -> None:
        seen: list[dict] = []
        bad = [_record(description="") for _ in range(5)]
        result = validate_csv(
            _tall_file(*bad),
            "2.2.0",
            options=ValidatorOptions(max_errors=2),
            on_record=lambda record, errors, warnings: seen.append(record),
        )
        assert not result.valid
        assert result.error_count == 2
        assert len(seen) == 2

    def test_unbounded_collects_everything(self) -> None:
        bad = [_record(description="") for _ in range(5)]
        result = validate_csv(_tall_file(*bad), "2.2.0", options=ValidatorOptions(max_errors=0))
        assert result.error_count == 5

    def test_phased_rule_follows_options(self, options, early_options) -> None:
        record = _record(**{
            "standard_charge | negotiated_dollar": "",
            "standard_charge | negotiated_percentage": "80",
        })
        enforced = validate_csv(_tall_file(record), "2.2.0", options=options)
        assert not enforced.valid
        early = validate_csv(_tall_file(record), "2.2.0", options=early_options)
        assert early.valid
        assert early.warning_count == 1


# ---------------------------------------------------------------------------
# Terminal conditions
# ---------------------------------------------------------------------------

class TestTerminal:
    def test_invalid_version_never_reads_input(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def explode(source):
            raise AssertionError("input should not be read")

        monkeypatch.setattr(csv_session, "iter_csv_rows", explode)
        result = validate_csv(_tall_file(_record()), "1.1.0")
        assert not result.valid
        assert _checks(result) == ["invalid_version"]
        assert "2.0.0, 2.1.0, 2.2.0" in result.errors[0].message

    def test_blank_header_names_row(self) -> None:
        text = _csv([[], HEADER_VALUES, ["not", "columns"], ["junk"]])
        result = validate_csv(text, "2.2.0")
        assert not result.valid
        assert _checks(result) == ["header_blank"]
        assert result.errors[0].row == 0

    def test_blank_column_definitions_row(self) -> None:
        values = list(HEADER_VALUES)
        values[0] = ""
        text = _csv([HEADER_NAMES, values, ["", "", ""], _record()])
        result = validate_csv(text, "2.2.0")
        assert _checks(result) == ["header_blank"]
        assert result.errors[0].row == 2
        assert "Row 3 is blank" in result.errors[0].message

    def test_blank_header_values_row_is_not_structural(self) -> None:
        text = _csv([HEADER_NAMES, [""] * len(HEADER_NAMES), TALL_COLUMNS, _record()])
        result = validate_csv(text, "2.2.0")
        checks = _checks(result)
        assert "header_blank" not in checks
        assert "required_value" in checks
        assert checks[-1] == "problems_in_header"

    def test_header_problems_stop_before_records(self) -> None:
        seen: list[dict] = []
        columns = [c for c in TALL_COLUMNS if c != "setting"]
        text = _csv([HEADER_NAMES, HEADER_VALUES, columns, row_from(columns, {})])
        result = validate_csv(text, "2.2.0", on_record=lambda *args: seen.append(args[0]))
        assert _checks(result) == ["column_missing", "problems_in_header"]
        assert seen == []

    def test_ambiguous_format(self) -> None:
        text = _csv([HEADER_NAMES, HEADER_VALUES, ["description", "setting"], ["x", "both"]])
        result = validate_csv(text, "2.2.0")
        assert _checks(result) == ["ambiguous_format", "problems_in_header"]

    def test_false_affirmation_alone_is_not_a_header_problem(self) -> None:
        values = list(HEADER_VALUES)
        values[6] = "false"
        result = validate_csv(_tall_file(_record(), header_values=values), "2.2.0")
        assert "problems_in_header" not in _checks(result)

    def test_min_rows(self) -> None:
        result = validate_csv(_tall_file(), "2.2.0")
        assert not result.valid
        assert _checks(result) == ["min_rows"]

    def test_only_blank_data_rows(self) -> None:
        result = validate_csv(_tall_file([], [""] * 3), "2.2.0")
        assert _checks(result) == ["min_rows"]

    def test_empty_input(self) -> None:
        assert _checks(validate_csv("", "2.2.0")) == ["min_rows"]

    def test_undecodable_bytes(self) -> None:
        result = validate_csv(b"hospital_name\n\xff\xfe\n", "2.2.0")
        assert not result.valid
        assert _checks(result) == ["malformed_input"]

    def test_oversized_field(self) -> None:
        text = _tall_file(_record(), _record(description="x" * (csv.field_size_limit() + 1)))
        result = validate_csv(text, "2.2.0")
        assert _checks(result) == ["malformed_input"]
        assert result.errors[0].row == 4


# ---------------------------------------------------------------------------
# Input streams
# ---------------------------------------------------------------------------

class TestInputStreams:
    def test_binary_stream_is_left_open(self) -> None:
        stream = io.BytesIO(_tall_file(_record()).encode("utf-8"))
        assert validate_csv(stream, "2.2.0").valid
        assert not stream.closed
        stream.seek(0)
        assert stream.read(13) == b"hospital_name"

    def test_binary_stream_survives_early_stop(self) -> None:
        bad = [_record(description="") for _ in range(5)]
        stream = io.BytesIO(_tall_file(*bad).encode("utf-8"))
        result = validate_csv(stream, "2.2.0", options=ValidatorOptions(max_errors=1))
        assert result.error_count == 1
        gc.collect()
        assert not stream.closed

    def test_early_stop_closes_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        columns = [c for c in TALL_COLUMNS if c != "setting"]
        path = tmp_path / "standardcharges.csv"
        path.write_text(_csv([HEADER_NAMES, HEADER_VALUES, columns, row_from(columns, {})]), encoding="utf-8")

        opened = []
        real_open = Path.open

        def tracking_open(self, *args, **kwargs):
            f = real_open(self, *args, **kwargs)
            opened.append(f)
            return f

        monkeypatch.setattr(Path, "open", tracking_open)
        result = validate_csv(path, "2.2.0")
        assert _checks(result) == ["column_missing", "problems_in_header"]
        assert len(opened) == 1
        assert opened[0].closed


# ---------------------------------------------------------------------------
# Driving a session by hand
# ---------------------------------------------------------------------------

class TestSession:
    def test_feed_after_abort(self) -> None:
        session = CsvValidationSession("2.2.0")
        assert not session.feed([])
        assert session.state.phase == Phase.aborted
        assert not session.feed(HEADER_NAMES)
        assert len(session.finish().errors) == 1

    def test_phases(self) -> None:
        session = CsvValidationSession("2.2.0")
        assert session.feed(HEADER_NAMES)
        assert session.state.phase == Phase.awaiting_header_values
        assert session.feed(HEADER_VALUES)
        assert session.state.phase == Phase.awaiting_column_definitions
        assert session.feed(TALL_COLUMNS)
        assert session.state.phase == Phase.streaming_records
        assert session.feed(_record())
        result = session.finish()
        assert result.valid
        assert session.state.phase == Phase.completed

    def test_cells_are_trimmed(self) -> None:
        session = CsvValidationSession("2.2.0")
        session.feed([f"  {name} " for name in HEADER_NAMES])
        session.feed(HEADER_VALUES)
        session.feed(TALL_COLUMNS)
        session.feed([f" {value} " for value in _record()])
        assert session.finish().valid
