"""
app/parsers/csv_tokenizer.py

Splits raw CSV text into a header row and field-keyed row records.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Sequence

from app.domain.crm_import import RawRow

logger = logging.getLogger(__name__)

NO_HEADERS_ERROR = "No headers found in CSV file"


@dataclass(frozen=True)
class TokenizedCSV:
    """
    Tokenizer output: headers, rows, and row-level parse issues.

    ``errors`` name records that were dropped; ``warnings`` name records that
    were kept after their cells were padded or truncated to the header width.
    """

    headers: tuple[str, ...] = ()
    rows: tuple[RawRow, ...] = ()
    errors: tuple[str, ...] = field(default_factory=tuple)
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_headers(self) -> bool:
        return bool(self.headers)


def tokenize_csv(text: str | None) -> TokenizedCSV:
    """
    Tokenize comma-separated text whose first non-blank record is the header.

    Records whose cells are all blank are skipped and not numbered. Records
    shorter than the header read their missing cells as empty; longer ones
    drop the extra cells. Either mismatch is reported as a warning unless the
    extra cells are blank. A record the csv module cannot parse is reported
    and skipped; later records are still read.
    """

    if text and text.startswith("\ufeff"):
        text = text[1:]
    if text is None or not text.strip():
        return _no_headers()

    records = iter(csv.reader(io.StringIO(text, newline="")))
    headers: tuple[str, ...] = ()
    rows: list[RawRow] = []
    errors: list[str] = []
    warnings: list[str] = []
    record_number = 0

    while True:
        try:
            record = next(records)
        except StopIteration:
            break
        except csv.Error as exc:
            if not headers:
                logger.warning("CSV header record could not be parsed: %s", exc)
                return _no_headers()
            record_number += 1
            errors.append(f"Row {record_number}: {exc}; row skipped")
            continue

        if _is_blank_record(record):
            continue
        record_number += 1

        if not headers:
            headers = tuple(cell.strip() for cell in record)
            continue

        cells, mismatch = _align_to_headers(record, len(headers))
        if mismatch is not None:
            warnings.append(
                f"Row {record_number}: expected {len(headers)} fields "
                f"but found {len(record)}; {mismatch}"
            )

        rows.append(
            RawRow(
                row_number=record_number,
                cells=_cells_by_header(headers, cells),
            )
        )

    logger.debug(
        "Tokenized CSV headers=%d rows=%d parse_errors=%d parse_warnings=%d",
        len(headers),
        len(rows),
        len(errors),
        len(warnings),
    )
    return TokenizedCSV(
        headers=headers,
        rows=tuple(rows),
        errors=tuple(errors),
        warnings=tuple(warnings),
    )


def _no_headers() -> TokenizedCSV:
    return TokenizedCSV(errors=(NO_HEADERS_ERROR,))


def _is_blank_record(record: Sequence[str]) -> bool:
    return all(cell.strip() == "" for cell in record)


def _align_to_headers(record: Sequence[str], width: int) -> tuple[list[str], str | None]:
    cells = [cell.strip() for cell in record]
    if len(cells) < width:
        return cells + [""] * (width - len(cells)), "missing cells read as empty"
    if len(cells) > width:
        extra = cells[width:]
        return cells[:width], None if all(cell == "" for cell in extra) else "extra cells ignored"
    return cells, None


def _cells_by_header(headers: Sequence[str], cells: Sequence[str]) -> dict[str, str]:
    # Duplicate header names keep the leftmost column's value.
    mapped: dict[str, str] = {}
    for header, cell in zip(headers, cells):
        if header not in mapped:
            mapped[header] = cell
    return mapped


def read_header_row(text: str | None) -> tuple[str, ...]:
    """
    Return the stripped header cells of ``text`` without reading its body.
    """

    if text and text.startswith("\ufeff"):
        text = text[1:]
    if text is None or not text.strip():
        return ()
    try:
        for record in csv.reader(io.StringIO(text, newline="")):
            if not _is_blank_record(record):
                return tuple(cell.strip() for cell in record)
    except csv.Error as exc:
        logger.warning("CSV header record could not be parsed: %s", exc)
    return ()
