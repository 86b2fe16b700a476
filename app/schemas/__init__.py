"""
app/schemas package marker.
"""

from app.schemas.crm_import import (
    BookingResponse,
    CatalogEntityPayload,
    FunnelBucketPayload,
    FunnelMergeRequest,
    FunnelMergeResponse,
    HealthResponse,
    ImportResultResponse,
)

__all__ = [
    "BookingResponse",
    "CatalogEntityPayload",
    "FunnelBucketPayload",
    "FunnelMergeRequest",
    "FunnelMergeResponse",
    "HealthResponse",
    "ImportResultResponse",
]
