"""Regulatory value tables shared by the CSV and JSON validators."""

from __future__ import annotations

from datetime import date

AFFIRMATION = (
    "To the best of its knowledge and belief, the hospital has included all applicable "
    "standard charge information in accordance with the requirements of 45 CFR 180.50, "
    "and the information encoded is true, accurate, and complete as of the date indicated."
)

LICENSE_PREFIX = "license_number"
LICENSE_HEADER = "license_number | [state]"

# Row 0 of a CSV file
HEADER_COLUMNS: list[str] = [
    "hospital_name",
    "last_updated_on",
    "version",
    "hospital_location",
    "hospital_address",
    LICENSE_HEADER,
    AFFIRMATION,
]

AFFIRMATION_VALUES = ["true", "false"]

SETTINGS = ["inpatient", "outpatient", "both"]

DRUG_UNITS = ["GR", "ME", "ML", "UN", "F2", "EA", "GM"]

DRUG_CODE_TYPE = "NDC"

BILLING_CODE_TYPES = [
    "CPT",
    "HCPCS",
    "ICD",
    "DRG",
    "MS-DRG",
    "R-DRG",
    "S-DRG",
    "APS-DRG",
    "AP-DRG",
    "APR-DRG",
    "APC",
    "NDC",
    "HIPPS",
    "LOCAL",
    "EAPG",
    "CDT",
    "RC",
    "CDM",
    "TRIS-DRG",
]

STANDARD_CHARGE_METHODOLOGY = [
    "case rate",
    "fee schedule",
    "percent of total billed charges",
    "per diem",
    "other",
]

BILLING_CLASSES = ["professional", "facility", "both"]

STATE_CODES = [
    "AL", "AK", "AS", "AZ", "AR", "CA", "CO", "CT", "DE", "DC", "FL", "GA", "GU",
    "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD", "MA", "MI", "MN",
    "MS", "MO", "MT", "NE", "NV", "NH", "NJ", "NM", "NY", "NC", "ND", "MP", "OH",
    "OK", "OR", "PA", "PR", "RI", "SC", "SD", "TN", "TX", "UT", "VT", "VI", "VA",
    "WA", "WV", "WI", "WY",
]

# Hospitals were asked to stop using this placeholder for estimated amounts
NINE_NINES = 999999999

# Fields that are a warning before the given date and an error from it on
PHASED_ENFORCEMENT: dict[str, date] = {
    "estimated_amount": date(2025, 1, 1),
}
