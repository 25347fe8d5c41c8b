"""Validation API endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field

from hptcheck.config import ValidatorOptions
from hptcheck.deps import get_options
from hptcheck.diagnostics.models import ValidationResult
from hptcheck.filename import validate_filename
from hptcheck.jsonfile.validator import validate_json
from hptcheck.schema.versions import ALLOWED_VERSIONS, coerce_version, is_allowed_version
from hptcheck.session.csv_session import validate_csv

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["validate"])


class VersionsResponse(BaseModel):
    versions: list[str] = Field(default_factory=list)


class DiagnosticResponse(BaseModel):
    """One finding, located by cell address (CSV) or JSON pointer."""

    path: str
    field: str | None = None
    message: str
    check_name: str
    warning: bool = False


class ValidateResponse(BaseModel):
    valid: bool
    errors: list[DiagnosticResponse] = Field(default_factory=list)
    error_count: int = 0
    warning_count: int = 0


class FilenameResponse(BaseModel):
    filename: str
    valid: bool


def _to_response(result: ValidationResult) -> ValidateResponse:
    return ValidateResponse(
        valid=result.valid,
        errors=[
            DiagnosticResponse(
                path=d.address,
                field=d.field,
                message=d.message,
                check_name=d.check_name,
                warning=d.is_warning,
            )
            for d in result.errors
        ],
        error_count=result.error_count,
        warning_count=result.warning_count,
    )


def _run_options(options: ValidatorOptions, max_errors: int | None) -> ValidatorOptions:
    if max_errors is None:
        return options
    return options.model_copy(update={"max_errors": max_errors})


def _check_version(version: str) -> None:
    if not is_allowed_version(coerce_version(version)):
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported version '{version}'. Allowed versions: {', '.join(ALLOWED_VERSIONS)}",
        )


@router.get("/versions", response_model=VersionsResponse)
async def list_versions() -> VersionsResponse:
    """Return the schema versions files can be validated against."""
    return VersionsResponse(versions=list(ALLOWED_VERSIONS))


@router.post("/validate/csv", response_model=ValidateResponse)
async def validate_csv_file(
    request: Request,
    version: str = Query(..., description="Schema version, e.g. 2.2.0"),
    max_errors: int | None = Query(default=None, ge=0),
    options: ValidatorOptions = Depends(get_options),
) -> ValidateResponse:
    """Validate a CSV file sent as the raw request body."""
    _check_version(version)
    body = await request.body()
    if not body:
        raise HTTPException(status_code=400, detail="Request body is empty")
    result = validate_csv(body, version, _run_options(options, max_errors))
    logger.info("CSV validated: valid=%s, %d finding(s)", result.valid, len(result.errors))
    return _to_response(result)


@router.post("/validate/json", response_model=ValidateResponse)
async def validate_json_file(
    request: Request,
    version: str = Query(..., description="Schema version, e.g. 2.2.0"),
    max_errors: int | None = Query(default=None, ge=0),
    options: ValidatorOptions = Depends(get_options),
) -> ValidateResponse:
    """Validate a JSON file sent as the raw request body."""
    _check_version(version)
    body = await request.body()
    if not body:
        raise HTTPException(status_code=400, detail="Request body is empty")
    result = validate_json(body, version, _run_options(options, max_errors))
    logger.info("JSON validated: valid=%s, %d finding(s)", result.valid, len(result.errors))
    return _to_response(result)


@router.get("/filename/{filename}", response_model=FilenameResponse)
async def check_filename(filename: str) -> FilenameResponse:
    """Check a file name against the machine-readable naming convention."""
    return FilenameResponse(filename=filename, valid=validate_filename(filename))
