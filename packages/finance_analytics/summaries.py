"""Flat summaries for the dashboard and analytics views.

These are the simpler siblings of :mod:`finance_analytics.bucketing`: the
same grouping by key, but keyed by category (or not at all) over a date
range. Nothing here reads the system clock; default ranges are computed from
an injected ``now``.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, datetime, tzinfo
from decimal import Decimal

from .config import resolve_timezone
from .errors import ConfigurationError, RecordError
from .logging_setup import get_logger
from .models import (
    ZERO,
    CategoryBreakdown,
    DateRange,
    MovementKind,
    MovementRecord,
    Movements,
    PeriodTotals,
)
from .normalizers import calendar_date, normalize_movement

logger = get_logger("finance_analytics.summaries")

UNCATEGORIZED = "Uncategorized"


def _zone(tz: tzinfo | str | None) -> tzinfo:
    return tz if isinstance(tz, tzinfo) else resolve_timezone(tz)


def _today(now: datetime | date, tz: tzinfo) -> date:
    return calendar_date(now, tz)


# ---------------------------------------------------------------------------
# Default ranges
# ---------------------------------------------------------------------------


def default_report_range(now: datetime | date, *, tz: tzinfo | str | None = None) -> DateRange:
    """Month-to-date: the first of ``now``'s month through ``now``'s day."""

    today = _today(now, _zone(tz))
    return DateRange(start=today.replace(day=1), end=today)


def history_start(
    now: datetime | date, months_back: int = 5, *, tz: tzinfo | str | None = None
) -> date:
    """First day of the month ``months_back`` months before ``now``'s month.

    With the default of 5 the historical series spans six calendar months
    including the current one.
    """

    if months_back < 0:
        raise ConfigurationError(f"months_back must be >= 0, got {months_back}")
    today = _today(now, _zone(tz))
    index = today.year * 12 + (today.month - 1) - months_back
    return date(index // 12, index % 12 + 1, 1)


# ---------------------------------------------------------------------------
# Filtering and sums
# ---------------------------------------------------------------------------


def iter_dated(records: Movements, tz: tzinfo) -> Iterator[tuple[MovementRecord, date]]:
    """Yield ``(record, calendar_day)`` for every well-formed movement.

    Malformed rows are logged at WARNING and dropped.
    """

    for idx, raw in enumerate(records):
        try:
            record = normalize_movement(raw)
            day = calendar_date(record.timestamp, tz)
        except (RecordError, OverflowError) as exc:
            logger.warning("Skipping movement #%d: %s", idx, exc)
            continue
        yield record, day


def filter_by_range(
    records: Movements,
    date_range: DateRange,
    *,
    kind: MovementKind | None = None,
    tz: tzinfo | str | None = None,
) -> list[MovementRecord]:
    """Return the normalized movements dated within ``date_range`` (inclusive)."""

    zone = _zone(tz)
    return [
        record
        for record, day in iter_dated(records, zone)
        if day in date_range and (kind is None or record.kind is kind)
    ]


def sum_by_category(
    records: Movements,
    *,
    kind: MovementKind,
    date_range: DateRange | None = None,
    tz: tzinfo | str | None = None,
) -> CategoryBreakdown:
    """Total ``kind`` movements per category.

    Categories appear in first-seen order. Movements without a category are
    grouped under ``"Uncategorized"``.
    """

    zone = _zone(tz)
    totals: dict[str, Decimal] = {}
    grand = ZERO
    for record, day in iter_dated(records, zone):
        if record.kind is not kind:
            continue
        if date_range is not None and day not in date_range:
            continue
        name = record.category or UNCATEGORIZED
        totals[name] = totals.get(name, ZERO) + record.amount
        grand += record.amount
    return CategoryBreakdown(kind=kind, items=tuple(totals.items()), total=grand)


def period_totals(
    records: Movements, date_range: DateRange, *, tz: tzinfo | str | None = None
) -> PeriodTotals:
    zone = _zone(tz)
    inflow = outflow = ZERO
    for record, day in iter_dated(records, zone):
        if day not in date_range:
            continue
        if record.kind is MovementKind.INFLOW:
            inflow += record.amount
        else:
            outflow += record.amount
    return PeriodTotals(date_range=date_range, inflow_total=inflow, outflow_total=outflow)


__all__ = [
    "default_report_range",
    "filter_by_range",
    "history_start",
    "iter_dated",
    "period_totals",
    "sum_by_category",
    "UNCATEGORIZED",
]
