"""Draft-07 schema documents for JSON machine-readable files.

``standard_charge_schema`` validates one ``standard_charge_information`` item;
``metadata_schema`` validates the top-level fields. When a file has no charge
items the full document schema is used instead, so the missing array is
reported.
"""

from __future__ import annotations

import copy
from functools import lru_cache
from typing import Any

from hptcheck.schema.tables import (
    AFFIRMATION,
    BILLING_CLASSES,
    BILLING_CODE_TYPES,
    DRUG_CODE_TYPE,
    DRUG_UNITS,
    SETTINGS,
    STANDARD_CHARGE_METHODOLOGY,
    STATE_CODES,
)
from hptcheck.schema.versions import ALLOWED_VERSIONS, version_at_least

DRAFT_07 = "http://json-schema.org/draft-07/schema#"

POSITIVE_NUMBER = {"type": "number", "exclusiveMinimum": 0}
NON_EMPTY_STRING = {"type": "string", "minLength": 1}

_STANDARD_CHARGE_DEFINITIONS: dict[str, Any] = {
    "code_information": {
        "type": "object",
        "properties": {
            "code": NON_EMPTY_STRING,
            "type": {"enum": BILLING_CODE_TYPES, "type": "string"},
        },
        "required": ["code", "type"],
    },
    "drug_information": {
        "type": "object",
        "properties": {
            "unit": NON_EMPTY_STRING,
            "type": {"enum": DRUG_UNITS, "type": "string"},
        },
        "required": ["unit", "type"],
    },
    "standard_charges": {
        "type": "object",
        "properties": {
            "minimum": POSITIVE_NUMBER,
            "maximum": POSITIVE_NUMBER,
            "gross_charge": POSITIVE_NUMBER,
            "discounted_cash": POSITIVE_NUMBER,
            "setting": {"enum": SETTINGS, "type": "string"},
            "payers_information": {
                "type": "array",
                "items": {"$ref": "#/definitions/payers_information"},
                "minItems": 1,
            },
            "billing_class": {"enum": BILLING_CLASSES, "type": "string"},
            "additional_generic_notes": {"type": "string"},
        },
        "required": ["setting"],
        "anyOf": [
            {"type": "object", "required": ["gross_charge"]},
            {"type": "object", "required": ["discounted_cash"]},
            {
                "type": "object",
                "required": ["payers_information"],
                "properties": {
                    "payers_information": {
                        "type": "array",
                        "items": {
                            "anyOf": [
                                {"type": "object", "required": ["standard_charge_dollar"]},
                                {"type": "object", "required": ["standard_charge_algorithm"]},
                                {"type": "object", "required": ["standard_charge_percentage"]},
                            ],
                        },
                    },
                },
            },
        ],
        # a dollar amount anywhere in payers_information requires min and max
        "if": {
            "type": "object",
            "properties": {
                "payers_information": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "not": {"required": ["standard_charge_dollar"]},
                    },
                },
            },
        },
        "else": {"required": ["minimum", "maximum"]},
    },
    "payers_information": {
        "type": "object",
        "properties": {
            "payer_name": NON_EMPTY_STRING,
            "plan_name": NON_EMPTY_STRING,
            "additional_payer_notes": {"type": "string"},
            "standard_charge_dollar": POSITIVE_NUMBER,
            "standard_charge_algorithm": {"type": "string"},
            "standard_charge_percentage": POSITIVE_NUMBER,
            "estimated_amount": POSITIVE_NUMBER,
            "methodology": {"enum": STANDARD_CHARGE_METHODOLOGY, "type": "string"},
        },
        "required": ["payer_name", "plan_name", "methodology"],
        "if": {
            "properties": {"methodology": {"const": "other"}},
            "required": ["methodology"],
        },
        "then": {"required": ["additional_payer_notes"]},
    },
}

_STANDARD_CHARGE_PROPERTIES: dict[str, Any] = {
    "type": "object",
    "properties": {
        "description": NON_EMPTY_STRING,
        "drug_information": {"$ref": "#/definitions/drug_information"},
        "code_information": {
            "type": "array",
            "items": {"$ref": "#/definitions/code_information"},
            "minItems": 1,
        },
        "standard_charges": {
            "type": "array",
            "items": {"$ref": "#/definitions/standard_charges"},
            "minItems": 1,
        },
    },
    "required": ["description", "code_information", "standard_charges"],
}

_METADATA_DEFINITIONS: dict[str, Any] = {
    "license_information": {
        "type": "object",
        "properties": {
            "license_number": {"type": "string"},
            "state": {"enum": STATE_CODES, "type": "string"},
        },
        "required": ["state"],
    },
    "affirmation": {
        "type": "object",
        "properties": {
            "affirmation": {"const": AFFIRMATION},
            "confirm_affirmation": {"type": "boolean"},
        },
        "required": ["affirmation", "confirm_affirmation"],
    },
    "modifier_information": {
        "type": "object",
        "properties": {
            "description": NON_EMPTY_STRING,
            "code": NON_EMPTY_STRING,
            "modifier_payer_information": {
                "type": "array",
                "items": {"$ref": "#/definitions/modifier_payer_information"},
                "minItems": 1,
            },
        },
        "required": ["description", "modifier_payer_information", "code"],
    },
    "modifier_payer_information": {
        "type": "object",
        "properties": {
            "payer_name": NON_EMPTY_STRING,
            "plan_name": NON_EMPTY_STRING,
            "description": NON_EMPTY_STRING,
        },
        "required": ["payer_name", "plan_name", "description"],
    },
}

_METADATA_PROPERTIES: dict[str, Any] = {
    "hospital_name": NON_EMPTY_STRING,
    "last_updated_on": {"type": "string", "format": "date"},
    "license_information": {"$ref": "#/definitions/license_information"},
    "version": NON_EMPTY_STRING,
    "hospital_address": {"type": "array", "items": {"type": "string"}, "minItems": 1},
    "hospital_location": {"type": "array", "items": {"type": "string"}, "minItems": 1},
    "affirmation": {"$ref": "#/definitions/affirmation"},
    "modifier_information": {
        "type": "array",
        "items": {"$ref": "#/definitions/modifier_information"},
    },
}

METADATA_REQUIRED = [
    "hospital_name",
    "last_updated_on",
    "hospital_location",
    "hospital_address",
    "license_information",
    "version",
    "affirmation",
]

# 2.2.0: NDC codes need drug information
_NDC_REQUIRES_DRUG_INFORMATION = {
    "if": {
        "properties": {
            "code_information": {
                "contains": {
                    "properties": {"type": {"const": DRUG_CODE_TYPE}},
                    "required": ["type"],
                },
            },
        },
        "required": ["code_information"],
    },
    "then": {"required": ["drug_information"]},
}

# 2.2.0: percentage or algorithm without a dollar amount needs an estimate
_ESTIMATE_FOR_PERCENTAGE_OR_ALGORITHM = {
    "if": {
        "not": {"required": ["standard_charge_dollar"]},
        "anyOf": [
            {"required": ["standard_charge_percentage"]},
            {"required": ["standard_charge_algorithm"]},
        ],
    },
    "then": {"required": ["estimated_amount"]},
}


def _check_version(version: str) -> None:
    if version not in ALLOWED_VERSIONS:
        raise ValueError(f"No JSON schema for version {version!r}")


def _definitions(version: str) -> tuple[dict[str, Any], dict[str, Any]]:
    definitions = copy.deepcopy(_STANDARD_CHARGE_DEFINITIONS)
    item = copy.deepcopy(_STANDARD_CHARGE_PROPERTIES)
    if version_at_least(version, "2.2.0"):
        payer = definitions["payers_information"]
        methodology_rule = {key: payer.pop(key) for key in ("if", "then")}
        payer["allOf"] = [methodology_rule, _ESTIMATE_FOR_PERCENTAGE_OR_ALGORITHM]
        item["allOf"] = [_NDC_REQUIRES_DRUG_INFORMATION]
    return definitions, item


@lru_cache(maxsize=8)
def full_schema(version: str) -> dict[str, Any]:
    _check_version(version)
    definitions, item = _definitions(version)
    return {
        "$schema": DRAFT_07,
        "definitions": {
            **copy.deepcopy(_METADATA_DEFINITIONS),
            **definitions,
            "standard_charge_information": item,
        },
        "type": "object",
        "properties": {
            **copy.deepcopy(_METADATA_PROPERTIES),
            "standard_charge_information": {
                "type": "array",
                "items": {"$ref": "#/definitions/standard_charge_information"},
                "minItems": 1,
            },
        },
        "required": [*METADATA_REQUIRED, "standard_charge_information"],
    }


@lru_cache(maxsize=8)
def standard_charge_schema(version: str) -> dict[str, Any]:
    """Schema for a single ``standard_charge_information`` item."""
    full = full_schema(version)
    return {
        "$schema": DRAFT_07,
        "definitions": full["definitions"],
        **full["definitions"]["standard_charge_information"],
    }


@lru_cache(maxsize=16)
def metadata_schema(version: str, has_charges: bool = True) -> dict[str, Any]:
    """Schema for the top-level fields, or the full schema when there are no charges."""
    full = full_schema(version)
    if not has_charges:
        return full
    schema = copy.deepcopy(full)
    del schema["properties"]["standard_charge_information"]
    schema["required"] = [r for r in schema["required"] if r != "standard_charge_information"]
    return schema
