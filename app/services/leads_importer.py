"""
app/services/leads_importer.py

Importer for the CRM "Leads" report.

Every row with a project name and a Lead Created Date counts as one inquiry
in that date's month. A row that also carries a Booked Date counts as a
close, with its project value, in the booked month. This report never
produces Booking records; those come from the Booked Client report.
"""

from __future__ import annotations

import logging
from typing import Iterable

from app.config import CRMImportSettings
from app.domain.crm_import import FunnelFact, ImportResult, LeadSource, ServiceType
from app.mappers.column_resolver import LEADS_COLUMN_ALIASES, ColumnMap, ColumnResolver
from app.mappers.report_rows import LeadsRow
from app.parsers.csv_tokenizer import NO_HEADERS_ERROR, tokenize_csv
from app.services.funnel_aggregator import aggregate_monthly
from app.services.result_assembler import ImportResultAssembler
from app.validators.field_normalizers import inspect_cents, inspect_date

logger = logging.getLogger(__name__)

_RESOLVER = ColumnResolver(LEADS_COLUMN_ALIASES)


def import_leads_csv(
    csv_text: str | None,
    existing_service_types: Iterable[ServiceType] = (),
    existing_lead_sources: Iterable[LeadSource] = (),
    *,
    settings: CRMImportSettings | None = None,
) -> ImportResult:
    """
    Convert a Leads report into monthly inquiry/close funnel buckets.

    The supplied catalogs are echoed back unchanged. Never raises: structural
    problems, skipped rows and per-row failures are reported in the result.
    """

    assembler = ImportResultAssembler(report="leads", settings=settings)
    tokenized = tokenize_csv(csv_text)
    if not tokenized.has_headers:
        return assembler.structural_failure(NO_HEADERS_ERROR)
    assembler.add_parse_errors(tokenized.errors)
    assembler.add_parse_warnings(tokenized.warnings)

    columns = _RESOLVER.resolve(tokenized.headers)
    logger.debug("Leads column mapping: %s", columns.as_dict())

    facts: list[FunnelFact] = []
    for raw_row in tokenized.rows:
        row = LeadsRow(raw=raw_row, columns=columns)
        try:
            facts.extend(_row_facts(row, columns, assembler))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Leads row %s failed: %s", row.row_number, exc, exc_info=True)
            assembler.row_failure(row.row_number, exc)

    funnel_data = aggregate_monthly(facts)
    logger.info(
        "Leads import finished rows=%d months=%d warnings=%d errors=%d",
        len(tokenized.rows),
        len(funnel_data),
        assembler.warning_count,
        assembler.error_count,
    )
    return assembler.build(
        funnel_data=funnel_data,
        service_types=existing_service_types,
        lead_sources=existing_lead_sources,
    )


def _row_facts(row: LeadsRow, columns: ColumnMap, assembler: ImportResultAssembler) -> list[FunnelFact]:
    if not row.project_name:
        assembler.warn(row.row_number, "Skipping row with no project name")
        return []

    inquiry_label = columns.get("inquiry_date") or "Lead Created Date"
    inquired, malformed = inspect_date(row.inquiry_date)
    if inquired is None:
        if malformed:
            assembler.warn(row.row_number, f"Unrecognized {inquiry_label} {row.inquiry_date!r}, skipping")
        else:
            assembler.warn(row.row_number, f"Missing {inquiry_label}, skipping")
        return []

    facts = [FunnelFact(year=inquired.year, month=inquired.month, inquiries=1)]

    if row.booked_date:
        booked_label = columns.get("booked_date") or "Booked Date"
        booked, malformed = inspect_date(row.booked_date)
        if malformed:
            assembler.warn(
                row.row_number,
                f"Unrecognized {booked_label} {row.booked_date!r}; not counted as a close",
            )
        if booked is not None:
            revenue, bad_amount = inspect_cents(row.total_amount)
            if bad_amount:
                amount_label = columns.get("total_amount") or "Total Project Value"
                assembler.warn(row.row_number, f"Unrecognized {amount_label} {row.total_amount!r}; using 0")
            facts.append(
                FunnelFact(
                    year=booked.year,
                    month=booked.month,
                    closes=1,
                    bookings_revenue_cents=revenue,
                )
            )
    return facts
