"""
app/api/routers/crm_import.py

CRM report import preview and funnel merge endpoints.

Nothing is persisted here; clients review the returned result and save it
through their own storage layer.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status

from app.api.dependencies import (
    CSVUploadDecodeError,
    get_csv_upload,
    get_lead_sources_form,
    get_service_types_form,
    read_csv_text,
)
from app.domain.crm_import import LeadSource, ServiceType
from app.schemas.crm_import import (
    FunnelBucketPayload,
    FunnelMergeRequest,
    FunnelMergeResponse,
    ImportResultResponse,
)
from app.services.crm_import_service import (
    CRMImportOutcome,
    CRMImportService,
    ReportType,
    UnknownReportTypeError,
    get_crm_import_service,
)

router = APIRouter(tags=["crm-import"])


@router.post("/imports/leads", response_model=ImportResultResponse)
def import_leads(
    file: UploadFile = Depends(get_csv_upload),
    service_types: tuple[ServiceType, ...] = Depends(get_service_types_form),
    lead_sources: tuple[LeadSource, ...] = Depends(get_lead_sources_form),
    import_service: CRMImportService = Depends(get_crm_import_service),
) -> ImportResultResponse:
    """
    Preview a Leads report import.
    """

    return _run_import(
        file=file,
        report_type=ReportType.LEADS,
        service_types=service_types,
        lead_sources=lead_sources,
        import_service=import_service,
    )


@router.post("/imports/booked-clients", response_model=ImportResultResponse)
def import_booked_clients(
    file: UploadFile = Depends(get_csv_upload),
    service_types: tuple[ServiceType, ...] = Depends(get_service_types_form),
    lead_sources: tuple[LeadSource, ...] = Depends(get_lead_sources_form),
    import_service: CRMImportService = Depends(get_crm_import_service),
) -> ImportResultResponse:
    """
    Preview a Booked Client report import.
    """

    return _run_import(
        file=file,
        report_type=ReportType.BOOKED_CLIENT,
        service_types=service_types,
        lead_sources=lead_sources,
        import_service=import_service,
    )


@router.post("/imports/auto", response_model=ImportResultResponse)
def import_detected_report(
    file: UploadFile = Depends(get_csv_upload),
    report_type: str | None = None,
    service_types: tuple[ServiceType, ...] = Depends(get_service_types_form),
    lead_sources: tuple[LeadSource, ...] = Depends(get_lead_sources_form),
    import_service: CRMImportService = Depends(get_crm_import_service),
) -> ImportResultResponse:
    """
    Preview an import, detecting the report type from the header row unless
    ``report_type`` is given.
    """

    return _run_import(
        file=file,
        report_type=report_type,
        service_types=service_types,
        lead_sources=lead_sources,
        import_service=import_service,
    )


@router.post("/funnel/merge", response_model=FunnelMergeResponse)
def merge_funnel(
    payload: FunnelMergeRequest,
    import_service: CRMImportService = Depends(get_crm_import_service),
) -> FunnelMergeResponse:
    """
    Merge Leads and Booked Client bucket sets and recompute YTD totals.
    """

    merged = import_service.merge_funnel(
        [bucket.to_domain() for bucket in payload.leads] if payload.leads is not None else None,
        [bucket.to_domain() for bucket in payload.booked] if payload.booked is not None else None,
    )
    return FunnelMergeResponse(
        funnel_data=[FunnelBucketPayload.model_validate(bucket) for bucket in merged],
    )


def _run_import(
    *,
    file: UploadFile,
    report_type: ReportType | str | None,
    service_types: tuple[ServiceType, ...],
    lead_sources: tuple[LeadSource, ...],
    import_service: CRMImportService,
) -> ImportResultResponse:
    try:
        csv_text = read_csv_text(file)
        outcome = import_service.import_report(
            csv_text,
            report_type=report_type,
            service_types=service_types,
            lead_sources=lead_sources,
        )
    except (CSVUploadDecodeError, UnknownReportTypeError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    finally:
        file.file.close()

    return _to_response(outcome)


def _to_response(outcome: CRMImportOutcome) -> ImportResultResponse:
    result = outcome.result
    return ImportResultResponse.model_validate(
        {
            "report_type": outcome.report_type.value,
            "detected": outcome.detected,
            "bookings": result.bookings,
            "funnel_data": result.funnel_data,
            "service_types": result.service_types,
            "lead_sources": result.lead_sources,
            "errors": result.errors,
            "warnings": result.warnings,
        },
        from_attributes=True,
    )
