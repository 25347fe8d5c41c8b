"""Session state for one CSV validation run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from hptcheck.diagnostics.collector import DiagnosticCollector
from hptcheck.diagnostics.models import Diagnostic
from hptcheck.resolver.models import HeaderResolution, ResolvedSchema
from hptcheck.rules.tree import RuleNode


class Phase(str, Enum):
    awaiting_header_names = "awaiting_header_names"
    awaiting_header_values = "awaiting_header_values"
    awaiting_column_definitions = "awaiting_column_definitions"
    streaming_records = "streaming_records"
    completed = "completed"
    aborted = "aborted"


@dataclass
class SessionState:
    """Everything a session mutates while rows stream through it.

    ``terminal`` holds the complete diagnostic list of an aborted run, which
    replaces whatever the collector accumulated.
    """

    collector: DiagnosticCollector
    phase: Phase = Phase.awaiting_header_names
    row_index: int = 0
    data_rows: int = 0
    header_names: list[str] = field(default_factory=list)
    header: HeaderResolution | None = None
    schema: ResolvedSchema | None = None
    rules: list[RuleNode] = field(default_factory=list)
    alerts: list[RuleNode] = field(default_factory=list)
    terminal: list[Diagnostic] | None = None

    @property
    def finished(self) -> bool:
        return self.phase in (Phase.completed, Phase.aborted)
