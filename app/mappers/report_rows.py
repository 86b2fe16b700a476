"""
app/mappers/report_rows.py

Typed row views over tokenized CRM report rows.

Each view binds one RawRow to the file's ColumnMap and exposes one accessor
per semantic field, so importer logic never indexes rows by header text.
Unresolved columns read as empty strings.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.domain.crm_import import RawRow
from app.mappers.column_resolver import ColumnMap


@dataclass(frozen=True)
class _ReportRow:
    raw: RawRow
    columns: ColumnMap

    @property
    def row_number(self) -> int:
        return self.raw.row_number

    def _cell(self, field_name: str) -> str:
        return self.raw.get(self.columns.get(field_name)).strip()


class LeadsRow(_ReportRow):
    """
    Accessors for a Leads report row.
    """

    @property
    def project_name(self) -> str:
        return self._cell("project_name")

    @property
    def inquiry_date(self) -> str:
        return self._cell("inquiry_date")

    @property
    def booked_date(self) -> str:
        return self._cell("booked_date")

    @property
    def total_amount(self) -> str:
        return self._cell("total_amount")


class BookedClientRow(_ReportRow):
    """
    Accessors for a Booked Client report row.
    """

    @property
    def project_name(self) -> str:
        return self._cell("project_name")

    @property
    def project_type(self) -> str:
        return self._cell("project_type")

    @property
    def project_source(self) -> str:
        return self._cell("project_source")

    @property
    def creation_date(self) -> str:
        return self._cell("creation_date")

    @property
    def project_date(self) -> str:
        return self._cell("project_date")

    @property
    def booked_date(self) -> str:
        return self._cell("booked_date")

    @property
    def total_booked_value(self) -> str:
        return self._cell("total_booked_value")
