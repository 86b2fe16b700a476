"""
app/domain package marker.
"""

from app.domain.crm_import import (
    Booking,
    FunnelBucket,
    FunnelFact,
    ImportResult,
    LeadSource,
    RawRow,
    ServiceType,
)

__all__ = [
    "Booking",
    "FunnelBucket",
    "FunnelFact",
    "ImportResult",
    "LeadSource",
    "RawRow",
    "ServiceType",
]
