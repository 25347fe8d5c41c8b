"""Diagnostics: findings, the bounded collector and the result model."""

from hptcheck.diagnostics.collector import DiagnosticCollector
from hptcheck.diagnostics.models import (
    Diagnostic,
    Severity,
    ValidationResult,
    cell_address,
    column_letters,
)

__all__ = [
    "Diagnostic",
    "DiagnosticCollector",
    "Severity",
    "ValidationResult",
    "cell_address",
    "column_letters",
]
