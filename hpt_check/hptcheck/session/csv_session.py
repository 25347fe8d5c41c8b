"""Streaming CSV validation session.

Rows are pushed into :class:`CsvValidationSession` one at a time:

    row 0   header names
    row 1   header values
    row 2   column definitions
    row 3+  data records

``feed`` returns False once the session has stopped (a fatal header problem
or the error limit), after which the caller must stop reading input.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Callable, Sequence
from contextlib import closing

from hptcheck.config import ValidatorOptions
from hptcheck.diagnostics import catalog
from hptcheck.diagnostics.collector import DiagnosticCollector
from hptcheck.diagnostics.models import Diagnostic, Severity, ValidationResult
from hptcheck.resolver.columns import resolve_data_columns, resolve_header_columns
from hptcheck.rules.builder import build_alert_tree, build_tree
from hptcheck.rules.header import check_header_values, header_alerts
from hptcheck.rules.tree import evaluate
from hptcheck.schema.versions import ALLOWED_VERSIONS, coerce_version, is_allowed_version
from hptcheck.session.models import Phase, SessionState
from hptcheck.session.tokenizer import CsvSource, iter_csv_rows

logger = logging.getLogger(__name__)

RecordCallback = Callable[[dict[str, str], list[Diagnostic], list[Diagnostic]], None]


class CsvValidationSession:
    """State machine for one CSV file."""

    def __init__(
        self,
        version: str,
        options: ValidatorOptions | None = None,
        on_record: RecordCallback | None = None,
    ) -> None:
        self.version = coerce_version(version)
        self.options = options or ValidatorOptions()
        self.on_record = on_record
        self.state = SessionState(collector=DiagnosticCollector(self.options.max_errors))
        if not is_allowed_version(self.version):
            logger.warning("Unsupported schema version %r", version)
            self._abort([catalog.invalid_version(ALLOWED_VERSIONS)])

    @property
    def stopped(self) -> bool:
        return self.state.finished

    def _abort(self, diagnostics: list[Diagnostic]) -> None:
        self.state.terminal = diagnostics
        self.state.phase = Phase.aborted

    def fail(self, diagnostic: Diagnostic) -> None:
        """End the session with a single terminal diagnostic."""
        logger.warning("Validation aborted at row %d: %s", self.state.row_index + 1, diagnostic.message)
        self._abort([diagnostic])

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _header_values(self, values: list[str]) -> None:
        state = self.state
        header, errors = resolve_header_columns(state.header_names)
        errors.extend(check_header_values(header, values))
        state.header = header
        state.collector.add(errors)
        state.collector.add(header_alerts(header, values))
        state.phase = Phase.awaiting_column_definitions

    def _column_definitions(self, values: list[str]) -> None:
        state = self.state
        schema, errors = resolve_data_columns(values, self.version)
        state.collector.add(errors)
        if schema is None or state.collector.has_errors:
            logger.warning(
                "Header problems found (%d error(s)); remaining rows not evaluated",
                state.collector.error_count,
            )
            self._abort([*state.collector.diagnostics, catalog.problems_in_header()])
            return

        policy = self.options.policy()
        state.schema = schema
        state.rules = build_tree(schema, self.version, policy)
        state.alerts = build_alert_tree(schema, self.version)
        state.phase = Phase.streaming_records
        logger.debug("Streaming %s records for version %s", schema.shape.value, self.version)

    def _record(self, values: list[str]) -> None:
        state = self.state
        assert state.schema is not None, "record received before column definitions"
        record = state.schema.record_from_row(values)
        errors = evaluate(state.rules, record, state.row_index)
        warnings = evaluate(state.alerts, record, state.row_index)
        state.collector.add([*errors, *warnings])
        state.data_rows += 1
        if self.on_record is not None:
            self.on_record(record, errors, warnings)

    # ------------------------------------------------------------------
    # Driving
    # ------------------------------------------------------------------

    def feed(self, row: Sequence[str]) -> bool:
        """Process one row; return whether the session wants more input."""
        state = self.state
        if state.finished:
            return False

        values = [value.strip() for value in row]
        blank = all(value == "" for value in values)
        if blank:
            if state.phase in (Phase.awaiting_header_names, Phase.awaiting_column_definitions):
                self.fail(catalog.header_blank(state.row_index))
                return False
            if state.phase == Phase.streaming_records:
                state.row_index += 1
                return True

        if state.phase == Phase.awaiting_header_names:
            state.header_names = values
            state.phase = Phase.awaiting_header_values
        elif state.phase == Phase.awaiting_header_values:
            self._header_values(values)
        elif state.phase == Phase.awaiting_column_definitions:
            self._column_definitions(values)
        else:
            self._record(values)

        if state.phase == Phase.aborted:
            return False
        if state.collector.limit_reached:
            logger.info("Error limit of %d reached at row %d", self.options.max_errors, state.row_index + 1)
            state.phase = Phase.completed
            return False
        state.row_index += 1
        return True

    def finish(self) -> ValidationResult:
        """Close the session and build the result."""
        state = self.state
        if state.phase == Phase.aborted:
            diagnostics = state.terminal or []
        elif state.phase != Phase.completed and state.data_rows == 0:
            # ran out of input before a data row was evaluated
            diagnostics = [catalog.min_rows()]
        else:
            diagnostics = list(state.collector.diagnostics)

        if state.phase != Phase.aborted:
            state.phase = Phase.completed
        valid = not any(d.severity == Severity.error for d in diagnostics)
        logger.info(
            "CSV validation finished after %d row(s): valid=%s, %d diagnostic(s)",
            state.row_index, valid, len(diagnostics),
        )
        return ValidationResult(valid=valid, errors=diagnostics)


def validate_csv(
    source: CsvSource,
    version: str,
    options: ValidatorOptions | None = None,
    on_record: RecordCallback | None = None,
) -> ValidationResult:
    """Validate a CSV source against the given schema version."""
    session = CsvValidationSession(version, options, on_record)
    if session.stopped:
        return session.finish()

    logger.info("Validating CSV against schema version %s", session.version)
    try:
        with closing(iter_csv_rows(source)) as rows:
            for row in rows:
                if not session.feed(row):
                    break
    except (csv.Error, UnicodeDecodeError) as e:
        session.fail(catalog.malformed_input(session.state.row_index, str(e)))
    return session.finish()
