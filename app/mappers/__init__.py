"""
app/mappers package marker.
"""

from app.mappers.column_resolver import (
    BOOKED_CLIENT_COLUMN_ALIASES,
    LEADS_COLUMN_ALIASES,
    ColumnMap,
    ColumnResolver,
    normalize_header,
    resolve_column,
)
from app.mappers.report_rows import BookedClientRow, LeadsRow

__all__ = [
    "BOOKED_CLIENT_COLUMN_ALIASES",
    "LEADS_COLUMN_ALIASES",
    "BookedClientRow",
    "ColumnMap",
    "ColumnResolver",
    "LeadsRow",
    "normalize_header",
    "resolve_column",
]
