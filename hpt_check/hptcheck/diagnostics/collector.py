"""Bounded accumulator for diagnostics."""

from __future__ import annotations

from collections.abc import Iterable

from hptcheck.diagnostics.models import Diagnostic


class DiagnosticCollector:
    """Holds findings for one validation run and enforces the output limit.

    ``max_diagnostics`` caps errors and warnings separately; 0 means unbounded.
    Once the warning quota is full, new warnings are dropped so the remaining
    room goes to errors.
    """

    def __init__(self, max_diagnostics: int = 0) -> None:
        if max_diagnostics < 0:
            raise ValueError("max_diagnostics must be >= 0")
        self.max_diagnostics = max_diagnostics
        self.diagnostics: list[Diagnostic] = []
        self.error_count = 0
        self.warning_count = 0

    @property
    def bounded(self) -> bool:
        return self.max_diagnostics > 0

    @property
    def limit_reached(self) -> bool:
        return self.bounded and self.error_count >= self.max_diagnostics

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    def add(self, batch: Iterable[Diagnostic]) -> bool:
        """Append a batch of findings; return whether the error limit is reached."""
        batch = list(batch)
        if self.bounded and self.warning_count >= self.max_diagnostics:
            errors = [d for d in batch if not d.is_warning]
            room = max(0, self.max_diagnostics - self.error_count)
            errors = errors[:room]
            self.diagnostics.extend(errors)
            self.error_count += len(errors)
            return self.limit_reached

        for diagnostic in batch:
            if diagnostic.is_warning:
                if not self.bounded or self.warning_count < self.max_diagnostics:
                    self.diagnostics.append(diagnostic)
                    self.warning_count += 1
            elif not self.bounded or self.error_count < self.max_diagnostics:
                self.diagnostics.append(diagnostic)
                self.error_count += 1
        return self.limit_reached
