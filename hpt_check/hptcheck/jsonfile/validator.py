"""JSON file validation with ``jsonschema``.

Charge items are streamed from the input and each is validated on its own
against the item schema; the top-level fields are validated once at the end.
Violations of phased-enforcement rules are reported as warnings until their
enforcement date.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from typing import Any

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError as SchemaError

from hptcheck.config import ValidatorOptions
from hptcheck.diagnostics import catalog
from hptcheck.diagnostics.collector import DiagnosticCollector
from hptcheck.diagnostics.models import Diagnostic, Severity, ValidationResult
from hptcheck.jsonfile.reader import (
    CHARGES_KEY,
    JSON_ERRORS,
    JsonSource,
    JsonValue,
    iter_json_values,
    open_json,
)
from hptcheck.jsonfile.schemas import metadata_schema, standard_charge_schema
from hptcheck.rules.policy import EnforcementPolicy
from hptcheck.schema.versions import ALLOWED_VERSIONS, coerce_version, is_allowed_version

logger = logging.getLogger(__name__)

# jsonschema reports one "required" error per missing property
REQUIRED_MESSAGE_RE = re.compile(r"^(['\"])(?P<name>.*)\1 is a required property$")


def _pointer(parts: Any) -> str:
    return "".join(f"/{part}" for part in parts)


def _missing_property(error: SchemaError) -> str | None:
    if error.validator != "required":
        return None
    match = REQUIRED_MESSAGE_RE.match(error.message)
    return match.group("name") if match else None


def _field_name(error: SchemaError) -> str | None:
    missing = _missing_property(error)
    if missing is not None:
        return missing
    return str(error.absolute_path[-1]) if error.absolute_path else None


def schema_errors_to_diagnostics(
    errors: Iterable[SchemaError], prefix: str, policy: EnforcementPolicy,
) -> list[Diagnostic]:
    """Map jsonschema errors to diagnostics addressed by JSON pointer."""
    diagnostics: list[Diagnostic] = []
    for error in errors:
        path = prefix + _pointer(error.absolute_path)
        missing = _missing_property(error)
        if missing is not None and policy.is_phased(missing):
            severity = policy.severity_for(missing)
        else:
            severity = Severity.error
        diagnostics.append(catalog.json_schema(path, _field_name(error), error.message, severity))
    return diagnostics


def _payer_charges_present(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    return any(
        isinstance(charge, dict) and charge.get("payers_information")
        for charge in item.get("standard_charges") or []
    )


def _metadata_alerts(metadata: dict[str, Any]) -> list[Diagnostic]:
    affirmation = metadata.get("affirmation")
    if isinstance(affirmation, dict) and affirmation.get("confirm_affirmation") is False:
        return [catalog.false_affirmation(-1, path="/affirmation/confirm_affirmation")]
    return []


def _result(collector: DiagnosticCollector) -> ValidationResult:
    return ValidationResult(valid=not collector.has_errors, errors=collector.diagnostics)


def _validate_entries(
    entries: Iterator[JsonValue],
    version: str,
    policy: EnforcementPolicy,
    collector: DiagnosticCollector,
) -> ValidationResult:
    item_validator = Draft7Validator(
        standard_charge_schema(version), format_checker=Draft7Validator.FORMAT_CHECKER,
    )
    metadata: dict[str, Any] = {}
    root: list[Any] = []
    has_charges = False
    has_payer_charges = False

    for entry in entries:
        if entry.is_root:
            root.append(entry.value)
            continue
        if not entry.is_charge:
            metadata[str(entry.key)] = entry.value
            continue

        has_charges = True
        has_payer_charges = has_payer_charges or _payer_charges_present(entry.value)
        prefix = f"/{CHARGES_KEY}/{entry.key}"
        diagnostics = schema_errors_to_diagnostics(
            item_validator.iter_errors(entry.value), prefix, policy,
        )
        if collector.add(diagnostics):
            logger.info("Error limit of %d reached at %s", collector.max_diagnostics, prefix)
            return ValidationResult(valid=False, errors=collector.diagnostics)

    if root:
        validator = Draft7Validator(metadata_schema(version, has_charges=False))
        collector.add(schema_errors_to_diagnostics(validator.iter_errors(root[0]), "", policy))
        return _result(collector)

    metadata_validator = Draft7Validator(
        metadata_schema(version, has_charges), format_checker=Draft7Validator.FORMAT_CHECKER,
    )
    collector.add(schema_errors_to_diagnostics(metadata_validator.iter_errors(metadata), "", policy))
    collector.add(_metadata_alerts(metadata))
    if has_charges and not has_payer_charges:
        collector.add([catalog.no_payer_charges()])
    return _result(collector)


def validate_json(
    source: JsonSource, version: str, options: ValidatorOptions | None = None,
) -> ValidationResult:
    """Validate a JSON machine-readable file against the given schema version.

    Input is parsed incrementally; reaching the error limit stops reading.
    A syntax error ends the run with the findings collected so far plus an
    ``invalid_json`` error.
    """
    version = coerce_version(version)
    options = options or ValidatorOptions()
    if not is_allowed_version(version):
        logger.warning("Unsupported schema version %r", version)
        return ValidationResult(valid=False, errors=[catalog.invalid_version(ALLOWED_VERSIONS)])

    collector = DiagnosticCollector(options.max_errors)
    logger.info("Validating JSON against schema version %s", version)
    try:
        with open_json(source) as stream:
            result = _validate_entries(
                iter_json_values(stream), version, options.policy(), collector,
            )
    except JSON_ERRORS as e:
        logger.warning("Invalid JSON input: %s", e)
        return ValidationResult(
            valid=False, errors=[*collector.diagnostics, catalog.invalid_json(str(e))],
        )

    logger.info(
        "JSON validation finished: valid=%s, %d error(s), %d warning(s)",
        result.valid, result.error_count, result.warning_count,
    )
    return result
