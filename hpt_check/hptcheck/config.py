"""Validator options, read from an options file or the environment."""

from __future__ import annotations

import json
import logging
import os
from datetime import date
from pathlib import Path

from pydantic import BaseModel, Field

from hptcheck.rules.policy import EnforcementPolicy
from hptcheck.schema.tables import PHASED_ENFORCEMENT

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS_PATH = "/data/options.json"


class ValidatorOptions(BaseModel):
    """Options for one validation run.

    ``max_errors`` caps errors and warnings separately (0 = unbounded).
    ``as_of`` is the date phased rules are judged against.
    """

    max_errors: int = Field(0, ge=0)
    as_of: date = Field(default_factory=date.today)
    enforcement_dates: dict[str, date] = Field(
        default_factory=lambda: dict(PHASED_ENFORCEMENT)
    )

    def policy(self) -> EnforcementPolicy:
        return EnforcementPolicy(as_of=self.as_of, enforcement_dates=self.enforcement_dates)


def _options_from_env() -> dict:
    options: dict = {
        "max_errors": int(os.environ.get("HPTCHECK_MAX_ERRORS", "0")),
    }
    as_of = os.environ.get("HPTCHECK_AS_OF")
    if as_of:
        options["as_of"] = as_of
    estimated_on = os.environ.get("HPTCHECK_ESTIMATED_AMOUNT_ENFORCED_ON")
    if estimated_on:
        options["enforcement_dates"] = {
            **{k: v.isoformat() for k, v in PHASED_ENFORCEMENT.items()},
            "estimated_amount": estimated_on,
        }
    return options


def load_options() -> ValidatorOptions:
    """Load options from the JSON file at $HPTCHECK_OPTIONS_PATH or env fallback."""
    opts_path = Path(os.environ.get("HPTCHECK_OPTIONS_PATH", DEFAULT_OPTIONS_PATH))
    if opts_path.exists():
        logger.debug("Reading options from %s", opts_path)
        return ValidatorOptions.model_validate(json.loads(opts_path.read_text()))
    return ValidatorOptions.model_validate(_options_from_env())
