"""
app/services/crm_import_service.py

Service layer for CRM report imports.

Dispatches an uploaded export to the matching importer (auto-detecting the
report type from its headers when the caller does not name one), merges the
Leads and Booked Client funnel series, and hands finished results to the
caller's storage collaborators.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Callable, Iterable, Sequence

from app.config import CRMImportSettings, get_crm_import_settings
from app.domain.crm_import import FunnelBucket, ImportResult, LeadSource, ServiceType
from app.mappers.column_resolver import normalize_header
from app.parsers.csv_tokenizer import read_header_row
from app.repositories.crm_store import BookingStore, CatalogProvider, CatalogStore, FunnelBucketStore
from app.services.booked_client_importer import import_booked_clients_csv
from app.services.funnel_aggregator import merge_funnel_buckets
from app.services.leads_importer import import_leads_csv

logger = logging.getLogger(__name__)

_BOOKED_CLIENT_MARKERS = frozenset({"project creation date", "total booked value"})
_LEADS_MARKERS = frozenset({"lead created date", "lead source open text"})


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class UnknownReportTypeError(ValueError):
    """
    Raised when a caller names a report type the service does not handle.
    """


class CRMPersistenceError(RuntimeError):
    """
    Raised when a storage collaborator fails while saving an import.
    """


# ---------------------------------------------------------------------------
# Report types
# ---------------------------------------------------------------------------


class ReportType(str, Enum):
    LEADS = "leads"
    BOOKED_CLIENT = "booked_client"


def coerce_report_type(value: ReportType | str | None) -> ReportType | None:
    """
    Normalize a caller-supplied report type; None means auto-detect.
    """

    if value is None or isinstance(value, ReportType):
        return value
    cleaned = value.strip().lower().replace("-", "_").replace(" ", "_")
    if not cleaned or cleaned == "auto":
        return None
    try:
        return ReportType(cleaned)
    except ValueError as exc:
        allowed = ", ".join(item.value for item in ReportType)
        raise UnknownReportTypeError(
            f"Unknown report type {value!r}. Allowed values: {allowed}."
        ) from exc


def detect_report_type(headers: Iterable[str]) -> ReportType:
    """
    Guess the export type from its header row.

    Booked Client markers win over Leads markers. Exports matching neither
    are treated as Leads, the more permissive format.
    """

    normalized = {normalize_header(header) for header in headers}
    if normalized & _BOOKED_CLIENT_MARKERS:
        return ReportType.BOOKED_CLIENT
    if {"first name", "project type"} <= normalized:
        return ReportType.BOOKED_CLIENT
    if normalized & _LEADS_MARKERS:
        return ReportType.LEADS
    return ReportType.LEADS


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CRMImportOutcome:
    report_type: ReportType
    result: ImportResult
    detected: bool = False


@dataclass(frozen=True)
class CRMPersistSummary:
    buckets_written: int = 0
    bookings_written: int = 0
    service_types_written: int = 0
    lead_sources_written: int = 0


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class CRMImportService:
    """
    Coordinates report detection, importing, funnel merging and persistence.
    """

    def __init__(self, *, settings: CRMImportSettings | None = None) -> None:
        self._settings = settings or get_crm_import_settings()

    @property
    def settings(self) -> CRMImportSettings:
        return self._settings

    def import_report(
        self,
        csv_text: str | None,
        *,
        report_type: ReportType | str | None = None,
        service_types: Iterable[ServiceType] = (),
        lead_sources: Iterable[LeadSource] = (),
    ) -> CRMImportOutcome:
        """
        Run the importer for ``report_type``, detecting it when omitted.

        Raises UnknownReportTypeError for an unrecognized type name; every
        other problem is reported inside the returned ImportResult.
        """

        resolved = coerce_report_type(report_type)
        detected = resolved is None
        if resolved is None:
            resolved = detect_report_type(read_header_row(csv_text))
            logger.info("Detected CRM report type=%s", resolved.value)

        if resolved is ReportType.BOOKED_CLIENT:
            result = import_booked_clients_csv(
                csv_text,
                service_types,
                lead_sources,
                settings=self._settings,
            )
        else:
            result = import_leads_csv(
                csv_text,
                service_types,
                lead_sources,
                settings=self._settings,
            )
        return CRMImportOutcome(report_type=resolved, result=result, detected=detected)

    def merge_funnel(
        self,
        leads: Iterable[FunnelBucket] | None,
        booked: Iterable[FunnelBucket] | None,
    ) -> list[FunnelBucket]:
        return merge_funnel_buckets(leads, booked)

    def load_catalogs(
        self,
        *,
        provider: CatalogProvider,
        tenant_id: str,
    ) -> tuple[tuple[ServiceType, ...], tuple[LeadSource, ...]]:
        """
        Fetch a tenant's existing service types and lead sources.
        """

        return (
            tuple(provider.list_service_types(tenant_id)),
            tuple(provider.list_lead_sources(tenant_id)),
        )

    def persist_import(
        self,
        *,
        tenant_id: str,
        leads_result: ImportResult | None,
        booked_result: ImportResult | None,
        bucket_store: FunnelBucketStore,
        booking_store: BookingStore,
        catalog_store: CatalogStore,
    ) -> CRMPersistSummary:
        """
        Save one import session for ``tenant_id``.

        Funnel buckets are the merge of both results. Bookings and catalog
        entries come from the Booked Client result only. Store failures are
        raised as CRMPersistenceError.
        """

        merged = self.merge_funnel(
            leads_result.funnel_data if leads_result is not None else None,
            booked_result.funnel_data if booked_result is not None else None,
        )
        bookings = booked_result.bookings if booked_result is not None else ()
        service_types = _custom_entities(booked_result.service_types if booked_result else ())
        lead_sources = _custom_entities(booked_result.lead_sources if booked_result else ())

        try:
            summary = CRMPersistSummary(
                service_types_written=_write(catalog_store.upsert_service_types, tenant_id, service_types),
                lead_sources_written=_write(catalog_store.upsert_lead_sources, tenant_id, lead_sources),
                bookings_written=_write(booking_store.upsert_bookings, tenant_id, bookings),
                buckets_written=_write(bucket_store.upsert_buckets, tenant_id, merged),
            )
        except Exception as exc:
            logger.warning("CRM import persistence failed tenant=%r: %s", tenant_id, exc)
            raise CRMPersistenceError("Failed to persist CRM import.") from exc

        logger.info(
            "CRM import persisted tenant=%r buckets=%d bookings=%d service_types=%d lead_sources=%d",
            tenant_id,
            summary.buckets_written,
            summary.bookings_written,
            summary.service_types_written,
            summary.lead_sources_written,
        )
        return summary


def _custom_entities(entities: Sequence[ServiceType | LeadSource]) -> list:
    return [entity for entity in entities if entity.is_custom]


def _write(method: Callable[[str, list], int], tenant_id: str, items: Sequence) -> int:
    if not items:
        return 0
    return method(tenant_id, list(items))


@lru_cache(maxsize=1)
def get_crm_import_service() -> CRMImportService:
    """
    Build a cached CRM import service instance from settings.
    """

    return CRMImportService(settings=get_crm_import_settings())
