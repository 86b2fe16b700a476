"""
app/services/funnel_aggregator.py

Monthly funnel aggregation, year-to-date rolling, and the merge of the Leads
and Booked Client bucket sets.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from app.domain.crm_import import FunnelBucket, FunnelFact


def aggregate_monthly(facts: Iterable[FunnelFact]) -> list[FunnelBucket]:
    """
    Sum per-row facts into (year, month) buckets and roll YTD totals.
    """

    return roll_ytd(
        FunnelBucket(
            year=fact.year,
            month=fact.month,
            inquiries=fact.inquiries,
            closes=fact.closes,
            bookings_revenue_cents=fact.bookings_revenue_cents,
        )
        for fact in facts
    )


def roll_ytd(buckets: Iterable[FunnelBucket]) -> list[FunnelBucket]:
    """
    Return buckets sorted by (year, month) with within-year running totals.

    Buckets sharing a key are summed first. ``inquiries_ytd`` and
    ``bookings_ytd`` include the current month and reset whenever the year
    changes. Input buckets are not modified.
    """

    ordered = sorted(_sum_by_key(buckets).values(), key=lambda bucket: bucket.key)

    rolled: list[FunnelBucket] = []
    current_year: int | None = None
    inquiries_running = 0
    bookings_running = 0
    for bucket in ordered:
        if bucket.year != current_year:
            current_year = bucket.year
            inquiries_running = 0
            bookings_running = 0
        inquiries_running += bucket.inquiries
        bookings_running += bucket.bookings_revenue_cents
        rolled.append(
            replace(
                bucket,
                inquiries_ytd=inquiries_running,
                bookings_ytd=bookings_running,
            )
        )
    return rolled


def merge_funnel_buckets(
    leads_buckets: Iterable[FunnelBucket] | None,
    booked_buckets: Iterable[FunnelBucket] | None,
) -> list[FunnelBucket]:
    """
    Combine the two importers' bucket sets into one persisted series.

    ``inquiries`` always comes from the Leads set. ``closes`` and
    ``bookings_revenue_cents`` come from the Booked Client set; only when no
    Booked Client set is supplied (None) are the Leads set's incidental
    closes kept. YTD totals are recomputed over the merged series.
    """

    leads = _sum_by_key(leads_buckets or ())
    booked = _sum_by_key(booked_buckets) if booked_buckets is not None else None
    closes_source = leads if booked is None else booked

    merged: list[FunnelBucket] = []
    for key in set(leads) | set(closes_source):
        year, month = key
        lead_bucket = leads.get(key)
        close_bucket = closes_source.get(key)
        merged.append(
            FunnelBucket(
                year=year,
                month=month,
                inquiries=lead_bucket.inquiries if lead_bucket else 0,
                closes=close_bucket.closes if close_bucket else 0,
                bookings_revenue_cents=close_bucket.bookings_revenue_cents if close_bucket else 0,
            )
        )
    return roll_ytd(merged)


def _sum_by_key(buckets: Iterable[FunnelBucket]) -> dict[tuple[int, int], FunnelBucket]:
    totals: dict[tuple[int, int], FunnelBucket] = {}
    for bucket in buckets:
        existing = totals.get(bucket.key)
        if existing is None:
            totals[bucket.key] = FunnelBucket(
                year=bucket.year,
                month=bucket.month,
                inquiries=bucket.inquiries,
                closes=bucket.closes,
                bookings_revenue_cents=bucket.bookings_revenue_cents,
            )
            continue
        totals[bucket.key] = replace(
            existing,
            inquiries=existing.inquiries + bucket.inquiries,
            closes=existing.closes + bucket.closes,
            bookings_revenue_cents=existing.bookings_revenue_cents + bucket.bookings_revenue_cents,
        )
    return totals
