"""
tests/test_field_normalizers.py

Pytest unit tests for the date and currency cell normalizers.
"""

from __future__ import annotations

import logging
from datetime import date, datetime

import pytest

from app.validators.field_normalizers import (
    format_cents,
    inspect_cents,
    inspect_date,
    is_tbd,
    parse_cents,
    parse_date,
)

_LOGGER = "app.validators.field_normalizers"


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


class TestParseDate:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("2024-03-15", date(2024, 3, 15)),
            ("2024-03-15 10:30:00", date(2024, 3, 15)),
            ("2024-01-15 10:30:00 UTC", date(2024, 1, 15)),
            ("2024-01-15T10:00:00Z", date(2024, 1, 15)),
            ("2024-01-15T23:30:00-05:00", date(2024, 1, 16)),
            ("03/15/2024", date(2024, 3, 15)),
            ("3/5/2024", date(2024, 3, 5)),
            ("03/15/24", date(2024, 3, 15)),
            ("2024/03/15", date(2024, 3, 15)),
            ("Jan 15, 2024", date(2024, 1, 15)),
            ("January 15, 2024", date(2024, 1, 15)),
            ("  2024-03-15  ", date(2024, 3, 15)),
        ],
    )
    def test_recognized_formats(self, raw: str, expected: date) -> None:
        assert parse_date(raw) == expected

    def test_date_and_datetime_values_pass_through(self) -> None:
        assert parse_date(date(2024, 2, 29)) == date(2024, 2, 29)
        assert parse_date(datetime(2024, 2, 29, 18, 0)) == date(2024, 2, 29)

    @pytest.mark.parametrize("raw", ["TBD", "tbd", " Tbd "])
    def test_tbd_is_none_and_silent(self, raw: str, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger=_LOGGER):
            assert parse_date(raw) is None
        assert caplog.records == []
        assert is_tbd(raw)

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_blank_is_none_and_silent(self, raw: str | None, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger=_LOGGER):
            assert parse_date(raw) is None
        assert caplog.records == []

    def test_malformed_is_none_and_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger=_LOGGER):
            assert parse_date("not a date") is None
        assert len(caplog.records) == 1
        assert caplog.records[0].levelno == logging.WARNING
        assert "not a date" in caplog.records[0].getMessage()

    def test_impossible_calendar_date_is_malformed(self) -> None:
        assert inspect_date("2023-02-30") == (None, True)

    def test_inspect_reports_malformed_without_logging(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger=_LOGGER):
            assert inspect_date("someday") == (None, True)
            assert inspect_date("TBD") == (None, False)
        assert caplog.records == []


# ---------------------------------------------------------------------------
# Currency
# ---------------------------------------------------------------------------


class TestParseCents:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("$1,234.56", 123456),
            ("1234", 123400),
            ("1234.5", 123450),
            ("  $ 75 ", 7500),
            ("USD 20.00", 2000),
            ("(50.00)", -5000),
            ("-12.34", -1234),
            ("0.005", 1),
            ("19.994", 1999),
            (12, 1200),
            (19.99, 1999),
        ],
    )
    def test_recognized_amounts(self, raw: object, expected: int) -> None:
        assert parse_cents(raw) == expected

    @pytest.mark.parametrize("raw", ["", None, "   "])
    def test_blank_is_zero(self, raw: object) -> None:
        assert parse_cents(raw) == 0

    def test_malformed_is_zero_and_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger=_LOGGER):
            assert parse_cents("lots") == 0
        assert len(caplog.records) == 1

    def test_inspect_flags_malformed(self) -> None:
        assert inspect_cents("abc") == (0, True)
        assert inspect_cents("$") == (0, True)
        assert inspect_cents("") == (0, False)
        assert inspect_cents("$10") == (1000, False)

    @pytest.mark.parametrize("raw", ["1e50", "2E3", "NaN", "-Infinity", "1.2.3"])
    def test_non_plain_numbers_are_malformed(self, raw: str) -> None:
        assert inspect_cents(raw) == (0, True)

    def test_amount_too_large_for_cents_is_malformed(self) -> None:
        assert inspect_cents("$123456789012345678901234567890") == (0, True)
        assert inspect_cents("12345678901234567890.99") == (1234567890123456789099, False)

    def test_exponent_amount_logs_warning_instead_of_raising(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger=_LOGGER):
            assert parse_cents("1e50") == 0
        assert len(caplog.records) == 1


class TestFormatCents:
    @pytest.mark.parametrize(
        "cents, expected",
        [
            (123456, "$1,234.56"),
            (0, "$0.00"),
            (5, "$0.05"),
            (-5000, "-$50.00"),
        ],
    )
    def test_formats_dollars(self, cents: int, expected: str) -> None:
        assert format_cents(cents) == expected

    def test_formatted_value_parses_back(self) -> None:
        assert parse_cents(format_cents(9876543)) == 9876543
