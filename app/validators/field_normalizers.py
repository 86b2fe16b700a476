"""
app/validators/field_normalizers.py

Cell-level normalizers for CRM export values: dates and currency.

The ``inspect_*`` functions are the silent core used by the importers; they
report whether a non-blank value was malformed so the caller can turn it
into a row warning. ``parse_date`` and ``parse_cents`` are the standalone
forms, which log malformed input instead.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

logger = logging.getLogger(__name__)

DATE_SENTINEL_TBD = "TBD"

DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%m/%d/%y",
    "%m-%d-%Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
)

_UTC_SUFFIX = re.compile(r"\s+UTC$", re.IGNORECASE)
_CURRENCY_NOISE = re.compile(r"[\s$€£¥,%]|USD", re.IGNORECASE)
_PARENTHESIZED = re.compile(r"^\((.*)\)$")
_PLAIN_AMOUNT = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")
_CENT = Decimal("1")


def is_blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def is_tbd(value: Any) -> bool:
    """
    True for the "not yet known" date sentinel, in any case.
    """

    return value is not None and str(value).strip().upper() == DATE_SENTINEL_TBD


def inspect_date(value: Any) -> tuple[date | None, bool]:
    """
    Parse a date cell without logging.

    Returns ``(parsed, malformed)``. Blank cells and the TBD sentinel give
    ``(None, False)``; unrecognized non-blank text gives ``(None, True)``.
    """

    if isinstance(value, datetime):
        return _to_date(value), False
    if isinstance(value, date):
        return value, False
    if is_blank(value) or is_tbd(value):
        return None, False

    raw = _UTC_SUFFIX.sub("", str(value).strip())

    normalized = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        return _to_date(datetime.fromisoformat(normalized)), False
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date(), False
        except ValueError:
            continue

    return None, True


def parse_date(value: Any) -> date | None:
    """
    Parse a date cell into a ``date``.

    Blank cells and "TBD" resolve to None silently; any other unrecognized
    text resolves to None and logs a warning.
    """

    parsed, malformed = inspect_date(value)
    if malformed:
        logger.warning("Unrecognized date value %r; treating as empty", value)
    return parsed


def inspect_cents(value: Any) -> tuple[int, bool]:
    """
    Parse a currency cell into integer cents without logging.

    Returns ``(cents, malformed)``. Blank input gives ``(0, False)``;
    unparseable input, exponent notation, and amounts too large to round to
    whole cents give ``(0, True)``.
    """

    if is_blank(value) or isinstance(value, bool):
        return 0, False
    if isinstance(value, int):
        return value * 100, False

    raw = str(value).strip()
    negative = False
    match = _PARENTHESIZED.match(raw)
    if match:
        raw = match.group(1)
        negative = True

    cleaned = _CURRENCY_NOISE.sub("", raw)
    # Exponents, NaN and Infinity are not currency.
    if not _PLAIN_AMOUNT.match(cleaned):
        return 0, True
    try:
        cents = int((Decimal(cleaned) * 100).quantize(_CENT, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return 0, True
    return (-cents if negative else cents), False


def parse_cents(value: Any) -> int:
    """
    Parse a currency cell such as "$1,234.56" into integer cents (123456).

    Blank or unparseable input returns 0.
    """

    cents, malformed = inspect_cents(value)
    if malformed:
        logger.warning("Unrecognized currency value %r; treating as 0", value)
    return cents


def format_cents(cents: int) -> str:
    """
    Render integer cents as a dollar string, e.g. 123456 -> "$1,234.56".
    """

    sign = "-" if cents < 0 else ""
    dollars, remainder = divmod(abs(int(cents)), 100)
    return f"{sign}${dollars:,}.{remainder:02d}"


def _to_date(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()
