"""
app/repositories/crm_store.py

Persistence contracts for imported CRM data.

The import engine never talks to a database directly. Callers hand it
objects satisfying these protocols; the concrete tenant-scoped storage lives
outside this package.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from app.domain.crm_import import Booking, FunnelBucket, LeadSource, ServiceType


@runtime_checkable
class FunnelBucketStore(Protocol):
    def upsert_buckets(self, tenant_id: str, buckets: Sequence[FunnelBucket]) -> int:
        """
        Insert or replace buckets keyed by (tenant_id, year, month).
        Returns the number of buckets written.
        """
        ...


@runtime_checkable
class BookingStore(Protocol):
    def upsert_bookings(self, tenant_id: str, bookings: Sequence[Booking]) -> int:
        """
        Insert or replace bookings keyed by (tenant_id, booking.id).
        """
        ...


@runtime_checkable
class CatalogStore(Protocol):
    def upsert_service_types(self, tenant_id: str, service_types: Sequence[ServiceType]) -> int:
        ...

    def upsert_lead_sources(self, tenant_id: str, lead_sources: Sequence[LeadSource]) -> int:
        ...


@runtime_checkable
class CatalogProvider(Protocol):
    def list_service_types(self, tenant_id: str) -> Sequence[ServiceType]:
        ...

    def list_lead_sources(self, tenant_id: str) -> Sequence[LeadSource]:
        ...
