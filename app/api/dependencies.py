"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from fastapi import File, Form, HTTPException, UploadFile, status
from pydantic import TypeAdapter, ValidationError

from app.domain.crm_import import LeadSource, ServiceType
from app.schemas.crm_import import CatalogEntityPayload

CSV_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
}

_CATALOG_ADAPTER = TypeAdapter(list[CatalogEntityPayload])


class CSVUploadDecodeError(ValueError):
    """
    Raised when an uploaded CSV is not valid UTF-8.
    """


class CatalogPayloadError(ValueError):
    """
    Raised when a catalog form field is not a JSON array of entities.
    """


def get_csv_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the uploaded file is a CSV by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()

    is_csv_filename = filename.endswith(".csv")
    is_csv_content_type = content_type in CSV_CONTENT_TYPES

    if not is_csv_filename and not is_csv_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are allowed.",
        )

    return file


def read_csv_text(upload_file: UploadFile) -> str:
    """
    Read the whole upload as text, dropping a UTF-8 byte-order mark.
    """

    raw_file = upload_file.file
    raw_file.seek(0)
    payload = raw_file.read()
    try:
        return payload.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise CSVUploadDecodeError("CSV must be UTF-8 encoded.") from exc


def parse_catalog_payload(raw_value: str | None, *, field_name: str) -> list[CatalogEntityPayload]:
    if raw_value is None or not raw_value.strip():
        return []
    try:
        return _CATALOG_ADAPTER.validate_json(raw_value)
    except ValidationError as exc:
        raise CatalogPayloadError(
            f"'{field_name}' must be a JSON array of objects with 'id' and 'name': {exc.error_count()} error(s)."
        ) from exc


def get_service_types_form(
    service_types: str | None = Form(default=None, description="JSON array of existing service types"),
) -> tuple[ServiceType, ...]:
    try:
        payload = parse_catalog_payload(service_types, field_name="service_types")
    except CatalogPayloadError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    return tuple(item.to_service_type() for item in payload)


def get_lead_sources_form(
    lead_sources: str | None = Form(default=None, description="JSON array of existing lead sources"),
) -> tuple[LeadSource, ...]:
    try:
        payload = parse_catalog_payload(lead_sources, field_name="lead_sources")
    except CatalogPayloadError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    return tuple(item.to_lead_source() for item in payload)
