"""
app/services/booked_client_importer.py

Importer for the CRM "Booked Client" report.

The export writes one row per contact on a project, so a project with two
clients appears twice. Rows are collapsed on a dedup key of project name
plus booked date; the first row wins and later ones are dropped without a
warning. Each surviving row yields one Booking and one close in its booked
month. This report never contributes inquiries.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Iterable

from app.config import CRMImportSettings, get_crm_import_settings
from app.domain.crm_import import Booking, FunnelFact, ImportResult, LeadSource, ServiceType
from app.mappers.column_resolver import BOOKED_CLIENT_COLUMN_ALIASES, ColumnMap, ColumnResolver
from app.mappers.report_rows import BookedClientRow
from app.parsers.csv_tokenizer import NO_HEADERS_ERROR, tokenize_csv
from app.services.entity_catalog import EntityCatalog, lead_source_catalog, service_type_catalog
from app.services.funnel_aggregator import aggregate_monthly
from app.services.result_assembler import ImportResultAssembler
from app.validators.field_normalizers import inspect_cents, inspect_date, is_blank

logger = logging.getLogger(__name__)

_RESOLVER = ColumnResolver(BOOKED_CLIENT_COLUMN_ALIASES)

_BOOKING_NAMESPACE = uuid.UUID("0d7f2c8e-5b1a-4f63-8e2d-9c4a1b6e3f70")


def dedup_key(project_name: str, booked_date: date | None, creation_date: date | None = None) -> str | None:
    """
    Key identifying one project across its per-contact rows.

    Uses the booked date, falling back to the creation date. Returns None
    when neither is known; such rows are never collapsed into one another.
    """

    anchor = booked_date or creation_date
    if anchor is None:
        return None
    return _project_key(project_name, anchor)


def _project_key(project_name: str, anchor: date) -> str:
    return f"{project_name.strip().lower()}-{anchor.isoformat()}"


@dataclass(frozen=True)
class _RowIdentity:
    key: str
    project_name: str
    booked: date


@dataclass(frozen=True)
class _RowOutcome:
    booking: Booking
    fact: FunnelFact
    service_types: EntityCatalog
    lead_sources: EntityCatalog


def import_booked_clients_csv(
    csv_text: str | None,
    existing_service_types: Iterable[ServiceType] = (),
    existing_lead_sources: Iterable[LeadSource] = (),
    *,
    settings: CRMImportSettings | None = None,
) -> ImportResult:
    """
    Convert a Booked Client report into bookings and monthly close buckets.

    Service types and lead sources named in the file but absent from the
    supplied catalogs are proposed as new entities in the result. Never
    raises: structural problems, skipped rows and per-row failures are
    reported in the result.
    """

    settings = settings or get_crm_import_settings()
    assembler = ImportResultAssembler(report="booked_client", settings=settings)
    tokenized = tokenize_csv(csv_text)
    if not tokenized.has_headers:
        return assembler.structural_failure(NO_HEADERS_ERROR)
    assembler.add_parse_errors(tokenized.errors)
    assembler.add_parse_warnings(tokenized.warnings)

    columns = _RESOLVER.resolve(tokenized.headers)
    logger.debug("Booked Client column mapping: %s", columns.as_dict())

    service_types = service_type_catalog(existing_service_types)
    lead_sources = lead_source_catalog(existing_lead_sources)
    seen_keys: set[str] = set()
    bookings: list[Booking] = []
    facts: list[FunnelFact] = []
    duplicates = 0

    for raw_row in tokenized.rows:
        row = BookedClientRow(raw=raw_row, columns=columns)
        try:
            identity = _identify_row(row, columns, assembler)
            if identity is None:
                continue
            if identity.key in seen_keys:
                duplicates += 1
                continue
            outcome = _build_booking(
                row,
                identity,
                columns=columns,
                service_types=service_types,
                lead_sources=lead_sources,
                assembler=assembler,
                settings=settings,
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning("Booked Client row %s failed: %s", row.row_number, exc, exc_info=True)
            assembler.row_failure(row.row_number, exc)
            continue

        seen_keys.add(identity.key)
        bookings.append(outcome.booking)
        facts.append(outcome.fact)
        service_types = outcome.service_types
        lead_sources = outcome.lead_sources

    funnel_data = aggregate_monthly(facts)
    logger.info(
        "Booked Client import finished rows=%d bookings=%d duplicates=%d "
        "new_service_types=%d new_lead_sources=%d warnings=%d errors=%d",
        len(tokenized.rows),
        len(bookings),
        duplicates,
        len(service_types.proposed),
        len(lead_sources.proposed),
        assembler.warning_count,
        assembler.error_count,
    )
    return assembler.build(
        bookings=bookings,
        funnel_data=funnel_data,
        service_types=service_types.entities,
        lead_sources=lead_sources.entities,
    )


def _identify_row(
    row: BookedClientRow,
    columns: ColumnMap,
    assembler: ImportResultAssembler,
) -> _RowIdentity | None:
    project_name = row.project_name
    if not project_name:
        assembler.warn(row.row_number, "Skipping row with no project name")
        return None

    booked_label = columns.get("booked_date") or "Booked Date"
    booked, malformed = inspect_date(row.booked_date)
    if booked is None:
        if malformed:
            assembler.warn(
                row.row_number,
                f'Unrecognized {booked_label} {row.booked_date!r} for "{project_name}", skipping',
            )
        else:
            assembler.warn(row.row_number, f'Missing {booked_label} for "{project_name}", skipping')
        return None

    return _RowIdentity(
        key=_project_key(project_name, booked),
        project_name=project_name,
        booked=booked,
    )


def _build_booking(
    row: BookedClientRow,
    identity: _RowIdentity,
    *,
    columns: ColumnMap,
    service_types: EntityCatalog,
    lead_sources: EntityCatalog,
    assembler: ImportResultAssembler,
    settings: CRMImportSettings,
) -> _RowOutcome:
    created = _optional_date(row, columns, "creation_date", row.creation_date, assembler)
    project_date = _optional_date(row, columns, "project_date", row.project_date, assembler)

    revenue, bad_amount = inspect_cents(row.total_booked_value)
    if bad_amount:
        amount_label = columns.get("total_booked_value") or "Total Booked Value"
        assembler.warn(row.row_number, f"Unrecognized {amount_label} {row.total_booked_value!r}; using 0")

    service_types, service_type_id = service_types.resolve(
        row.project_type,
        default_name=settings.default_service_type_name,
    )
    lead_sources, lead_source_id = lead_sources.resolve(
        row.project_source,
        default_name=settings.default_lead_source_name,
    )

    booking = Booking(
        id=str(uuid.uuid5(_BOOKING_NAMESPACE, identity.key)),
        project_name=identity.project_name,
        service_type_id=service_type_id,
        lead_source_id=lead_source_id,
        date_booked=identity.booked,
        booked_revenue_cents=revenue,
        status="booked",
        date_inquired=created,
        project_date=project_date,
    )
    fact = FunnelFact(
        year=identity.booked.year,
        month=identity.booked.month,
        closes=1,
        bookings_revenue_cents=revenue,
    )
    return _RowOutcome(
        booking=booking,
        fact=fact,
        service_types=service_types,
        lead_sources=lead_sources,
    )


def _optional_date(
    row: BookedClientRow,
    columns: ColumnMap,
    field_name: str,
    value: str,
    assembler: ImportResultAssembler,
) -> date | None:
    if is_blank(value):
        return None
    parsed, malformed = inspect_date(value)
    if malformed:
        label = columns.get(field_name) or field_name.replace("_", " ")
        assembler.warn(row.row_number, f"Unrecognized {label} {value!r}; left empty")
    return parsed
