"""
app/services/result_assembler.py

Collects row-level warnings and errors for one import call and bundles the
final ImportResult.
"""

from __future__ import annotations

import logging
from typing import Iterable

from app.config import CRMImportSettings, get_crm_import_settings
from app.domain.crm_import import Booking, FunnelBucket, ImportResult, LeadSource, ServiceType

logger = logging.getLogger(__name__)


class ImportResultAssembler:
    """
    Accumulates messages for one import and builds the immutable result.

    Messages beyond ``settings.max_row_messages`` per list are counted but not
    stored; ``build`` appends one summary line for them.
    """

    def __init__(self, *, report: str, settings: CRMImportSettings | None = None) -> None:
        self._report = report
        self._settings = settings or get_crm_import_settings()
        self._errors: list[str] = []
        self._warnings: list[str] = []
        self._suppressed_errors = 0
        self._suppressed_warnings = 0

    @property
    def warning_count(self) -> int:
        return len(self._warnings) + self._suppressed_warnings

    @property
    def error_count(self) -> int:
        return len(self._errors) + self._suppressed_errors

    def warn(self, row_number: int | None, message: str) -> None:
        text = _with_row(row_number, message)
        if self._settings.log_row_messages:
            logger.warning("%s import warning: %s", self._report, text)
        if len(self._warnings) < self._settings.max_row_messages:
            self._warnings.append(text)
        else:
            self._suppressed_warnings += 1

    def error(self, row_number: int | None, message: str) -> None:
        text = _with_row(row_number, message)
        if self._settings.log_row_messages:
            logger.warning("%s import error: %s", self._report, text)
        if len(self._errors) < self._settings.max_row_messages:
            self._errors.append(text)
        else:
            self._suppressed_errors += 1

    def add_parse_errors(self, messages: Iterable[str]) -> None:
        """
        Record tokenizer messages, which already carry their row prefix.
        """

        for message in messages:
            self.error(None, message)

    def add_parse_warnings(self, messages: Iterable[str]) -> None:
        for message in messages:
            self.warn(None, message)

    def row_failure(self, row_number: int, exc: Exception) -> None:
        """
        Record an unexpected exception that aborted one row, naming its type.
        """

        detail = str(exc)
        name = type(exc).__name__
        self.error(row_number, f"{name}: {detail}" if detail else name)

    def structural_failure(self, message: str) -> ImportResult:
        logger.warning("%s import aborted: %s", self._report, message)
        return ImportResult(errors=(message,))

    def build(
        self,
        *,
        bookings: Iterable[Booking] = (),
        funnel_data: Iterable[FunnelBucket] = (),
        service_types: Iterable[ServiceType] = (),
        lead_sources: Iterable[LeadSource] = (),
    ) -> ImportResult:
        errors = list(self._errors)
        warnings = list(self._warnings)
        if self._suppressed_errors:
            errors.append(f"... and {self._suppressed_errors} more errors suppressed")
        if self._suppressed_warnings:
            warnings.append(f"... and {self._suppressed_warnings} more warnings suppressed")

        return ImportResult(
            bookings=tuple(bookings),
            funnel_data=tuple(funnel_data),
            service_types=tuple(service_types),
            lead_sources=tuple(lead_sources),
            errors=tuple(errors),
            warnings=tuple(warnings),
        )


def _with_row(row_number: int | None, message: str) -> str:
    if row_number is None:
        return message
    return f"Row {row_number}: {message}"
