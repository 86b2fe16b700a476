"""
app/api/routers package marker.
"""

from app.api.routers.crm_import import router as crm_import_router

__all__ = [
    "crm_import_router",
]
