"""
app/domain/crm_import.py

Domain models produced by CRM report imports.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Mapping


@dataclass(frozen=True)
class RawRow:
    """
    One tokenized data record keyed by header text.

    ``row_number`` is the 1-based record position in the source file,
    counting the header record as row 1.
    """

    row_number: int
    cells: Mapping[str, str]

    def get(self, header: str | None) -> str:
        if header is None:
            return ""
        return self.cells.get(header, "")


@dataclass(frozen=True)
class ServiceType:
    """
    Named service offering a booking is filed under.
    """

    id: str
    name: str
    is_custom: bool = False
    description: str | None = None


@dataclass(frozen=True)
class LeadSource:
    """
    Named channel a lead or booking came from.
    """

    id: str
    name: str
    is_custom: bool = False
    description: str | None = None


@dataclass(frozen=True)
class Booking:
    """
    One booked project; exactly one per distinct project in a Booked Client import.
    """

    id: str
    project_name: str
    service_type_id: str
    lead_source_id: str
    date_booked: date
    booked_revenue_cents: int
    status: str = "booked"
    date_inquired: date | None = None
    project_date: date | None = None
    notes: str | None = None


@dataclass(frozen=True)
class FunnelFact:
    """
    Partial monthly metrics contributed by a single row.
    """

    year: int
    month: int
    inquiries: int = 0
    closes: int = 0
    bookings_revenue_cents: int = 0


@dataclass(frozen=True)
class FunnelBucket:
    """
    One calendar month of funnel metrics with within-year running totals.
    """

    year: int
    month: int
    inquiries: int = 0
    closes: int = 0
    bookings_revenue_cents: int = 0
    inquiries_ytd: int = 0
    bookings_ytd: int = 0

    @property
    def key(self) -> tuple[int, int]:
        return (self.year, self.month)


@dataclass(frozen=True)
class ImportResult:
    """
    Sole output of one import call.
    """

    bookings: tuple[Booking, ...] = ()
    funnel_data: tuple[FunnelBucket, ...] = ()
    service_types: tuple[ServiceType, ...] = ()
    lead_sources: tuple[LeadSource, ...] = ()
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
