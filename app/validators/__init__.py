"""
app/validators package marker.
"""

from app.validators.field_normalizers import (
    format_cents,
    inspect_cents,
    inspect_date,
    is_blank,
    is_tbd,
    parse_cents,
    parse_date,
)

__all__ = [
    "format_cents",
    "inspect_cents",
    "inspect_date",
    "is_blank",
    "is_tbd",
    "parse_cents",
    "parse_date",
]
