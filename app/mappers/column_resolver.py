"""
app/mappers/column_resolver.py

Alias-driven column resolution for CRM report exports.

Exports from the same CRM drift in header naming ("Booked Date" vs
"Date Booked", "Total Project Value" vs "Total"), so every semantic field is
resolved against a priority-ordered alias list instead of a fixed header.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

LEADS_COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "project_name": ("project name", "project", "event name", "event", "job name", "job"),
    "client_name": ("full name", "client name", "client", "customer name", "customer", "contact name"),
    "client_email": ("email address", "client email", "email", "contact email", "customer email"),
    "client_phone": ("phone number", "client phone", "phone", "contact phone"),
    "service_type": ("service type", "service", "package", "product"),
    "lead_source": ("lead source", "source", "referral source", "how did you hear"),
    "lead_source_open_text": ("lead source open text", "lead source detail", "source detail"),
    "booked_date": ("booked date", "booking date", "signed date", "contract date", "date booked", "booked on"),
    "project_date": ("project date", "event date", "shoot date", "session date", "service date"),
    "inquiry_date": (
        "lead created date",
        "date inquired",
        "inquiry date",
        "contacted date",
        "first contact",
        "created date",
    ),
    "total_amount": (
        "total project value",
        "total amount",
        "total",
        "amount",
        "price",
        "revenue",
        "contract value",
        "project value",
    ),
    "status": ("status", "project status", "booking status"),
    "notes": ("notes", "description", "comments", "internal notes"),
}

BOOKED_CLIENT_COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "first_name": ("first name", "firstname"),
    "last_name": ("last name", "lastname"),
    "email": ("email",),
    "project_name": ("project name", "project"),
    "project_type": ("project type", "service type", "type"),
    "project_source": ("project source", "lead source", "source"),
    "creation_date": ("project creation date", "creation date", "created date", "date created"),
    "project_date": ("project date", "event date", "service date"),
    "booked_date": ("booked date", "date booked", "signed date"),
    "total_booked_value": ("total booked value", "booked value", "total", "amount", "revenue"),
}


def normalize_header(header: str) -> str:
    """
    Case-fold and trim a header or alias for comparison.
    """

    return " ".join(header.strip().casefold().split())


def resolve_column(headers: Sequence[str], aliases: Sequence[str]) -> str | None:
    """
    Return the header matching the highest-priority alias, or None.

    A header matches an alias when the two are equal or one contains the
    other. For a given alias an exact match beats a containment match, and
    among equally good matches the leftmost header wins.
    """

    normalized_headers = [(normalize_header(header), header) for header in headers]
    for alias in aliases:
        candidate = normalize_header(alias)
        if not candidate:
            continue

        partial: str | None = None
        for normalized, original in normalized_headers:
            if not normalized:
                continue
            if normalized == candidate:
                return original
            if partial is None and (candidate in normalized or normalized in candidate):
                partial = original
        if partial is not None:
            return partial
    return None


@dataclass(frozen=True)
class ColumnMap:
    """
    Semantic field -> resolved header for one file. Read-only after resolution.
    """

    field_to_header: Mapping[str, str | None]

    def get(self, field_name: str) -> str | None:
        return self.field_to_header.get(field_name)

    def has(self, field_name: str) -> bool:
        return self.get(field_name) is not None

    def missing(self) -> tuple[str, ...]:
        return tuple(name for name, header in self.field_to_header.items() if header is None)

    def as_dict(self) -> dict[str, str | None]:
        return dict(self.field_to_header)


class ColumnResolver:
    """
    Resolves a whole alias table against one file's headers.
    """

    def __init__(self, aliases: Mapping[str, Sequence[str]]) -> None:
        self._aliases: dict[str, tuple[str, ...]] = {
            field_name: tuple(values) for field_name, values in aliases.items()
        }

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(self._aliases)

    def resolve(self, headers: Sequence[str]) -> ColumnMap:
        return ColumnMap(
            field_to_header={
                field_name: resolve_column(headers, aliases)
                for field_name, aliases in self._aliases.items()
            }
        )
