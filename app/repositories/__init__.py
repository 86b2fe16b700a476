"""
app/repositories package marker.
"""

from app.repositories.crm_store import BookingStore, CatalogProvider, CatalogStore, FunnelBucketStore

__all__ = [
    "BookingStore",
    "CatalogProvider",
    "CatalogStore",
    "FunnelBucketStore",
]
