"""Shared FastAPI dependencies."""

from __future__ import annotations

from hptcheck.config import ValidatorOptions

_options: ValidatorOptions | None = None


def get_options() -> ValidatorOptions:
    """FastAPI dependency: return the options loaded at startup."""
    assert _options is not None, "ValidatorOptions not initialised"
    return _options
