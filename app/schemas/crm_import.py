"""
app/schemas/crm_import.py

Request and response schemas for CRM import endpoints.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from app.domain.crm_import import FunnelBucket, LeadSource, ServiceType


class CatalogEntityPayload(BaseModel):
    """
    Service type or lead source as supplied by, or returned to, API clients.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    is_custom: bool = False
    description: str | None = None

    def to_service_type(self) -> ServiceType:
        return ServiceType(id=self.id, name=self.name, is_custom=self.is_custom, description=self.description)

    def to_lead_source(self) -> LeadSource:
        return LeadSource(id=self.id, name=self.name, is_custom=self.is_custom, description=self.description)


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_name: str
    service_type_id: str
    lead_source_id: str
    date_booked: date
    booked_revenue_cents: int
    status: str
    date_inquired: date | None = None
    project_date: date | None = None
    notes: str | None = None


class FunnelBucketPayload(BaseModel):
    """
    One month of funnel metrics. YTD columns are ignored on input.
    """

    model_config = ConfigDict(from_attributes=True)

    year: int = Field(..., ge=1900, le=9999)
    month: int = Field(..., ge=1, le=12)
    inquiries: int = Field(default=0, ge=0)
    closes: int = Field(default=0, ge=0)
    bookings_revenue_cents: int = 0
    inquiries_ytd: int = 0
    bookings_ytd: int = 0

    def to_domain(self) -> FunnelBucket:
        return FunnelBucket(
            year=self.year,
            month=self.month,
            inquiries=self.inquiries,
            closes=self.closes,
            bookings_revenue_cents=self.bookings_revenue_cents,
        )


class ImportResultResponse(BaseModel):
    """
    API response model for one import preview.
    """

    model_config = ConfigDict(from_attributes=True)

    report_type: str
    detected: bool = False
    bookings: list[BookingResponse] = Field(default_factory=list)
    funnel_data: list[FunnelBucketPayload] = Field(default_factory=list)
    service_types: list[CatalogEntityPayload] = Field(default_factory=list)
    lead_sources: list[CatalogEntityPayload] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class FunnelMergeRequest(BaseModel):
    leads: list[FunnelBucketPayload] | None = None
    booked: list[FunnelBucketPayload] | None = None


class FunnelMergeResponse(BaseModel):
    funnel_data: list[FunnelBucketPayload] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    service: str
