"""Historical income/expense series bucketed by day, week, or month.

The analytics view charts the most recent activity as a bar series. This
module builds that series from a flat list of movements:

1. derive a sortable key from each movement's calendar day;
2. sum inflow and outflow amounts per key;
3. sort the keys (zero-padded ISO forms sort chronologically);
4. keep only the trailing window for the granularity (30 days, 12 weeks,
   12 months);
5. attach a short display label to each kept key.

Weeks are fixed 7-day spans counted from January 1 of each year (days 1-7 are
week one, days 8-14 week two, and so on), not ISO weeks. The last span of a
year is therefore short (1 or 2 days), and numbering restarts every
January 1.

Malformed movements are logged and excluded; they never abort the series.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from datetime import date, timedelta, tzinfo
from decimal import Decimal

from .config import resolve_timezone
from .errors import RecordError
from .logging_setup import get_logger
from .models import (
    ZERO,
    Aggregation,
    Bucket,
    BucketPayload,
    DateRange,
    Granularity,
    MovementKind,
    Movements,
)
from .normalizers import calendar_date, normalize_movement, salvage_kind_amount

logger = get_logger("finance_analytics.bucketing")

# ---------------------------------------------------------------------------
# Keys and labels
# ---------------------------------------------------------------------------


def week_start(day: date) -> date:
    """First day of the January-1-anchored 7-day span containing ``day``."""

    offset = (day.timetuple().tm_yday - 1) // 7 * 7
    return date(day.year, 1, 1) + timedelta(days=offset)


def daily_key(day: date) -> str:
    return day.isoformat()


def weekly_key(day: date) -> str:
    return week_start(day).isoformat()


def monthly_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def _day_month_label(key: str) -> str:
    _year, month, day = key.split("-")
    return f"{day}/{month}"


def _month_year_label(key: str) -> str:
    year, month = key.split("-")
    return f"{month}/{year}"


KEY_FUNCS: Mapping[Granularity, Callable[[date], str]] = {
    Granularity.DAILY: daily_key,
    Granularity.WEEKLY: weekly_key,
    Granularity.MONTHLY: monthly_key,
}

LABEL_FUNCS: Mapping[Granularity, Callable[[str], str]] = {
    Granularity.DAILY: _day_month_label,
    Granularity.WEEKLY: _day_month_label,
    Granularity.MONTHLY: _month_year_label,
}


def bucket_key(day: date, granularity: Granularity | str) -> str:
    return KEY_FUNCS[Granularity.parse(granularity)](day)


def bucket_label(key: str, granularity: Granularity | str) -> str:
    return LABEL_FUNCS[Granularity.parse(granularity)](key)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def aggregate_detailed(
    records: Movements,
    granularity: Granularity | str,
    *,
    tz: tzinfo | str | None = None,
    date_range: DateRange | None = None,
) -> Aggregation:
    """Bucket ``records`` and report what was excluded.

    Parameters
    ----------
    records:
        Movements in any order, as :class:`~finance_analytics.models.MovementRecord`
        or raw mapping rows.
    granularity:
        A :class:`~finance_analytics.models.Granularity` or its name. Anything
        else raises :class:`~finance_analytics.errors.ConfigurationError`
        before any record is read.
    tz:
        Reference zone for calendar days (``tzinfo`` or IANA name). Defaults
        to UTC.
    date_range:
        When given, well-formed movements dated outside it are ignored. They
        are not counted as skipped.

    Returns
    -------
    Aggregation
        Buckets in ascending key order, at most ``granularity.window`` of
        them, plus the count and salvageable amounts of skipped records.
    """

    gran = Granularity.parse(granularity)
    zone = tz if isinstance(tz, tzinfo) else resolve_timezone(tz)
    key_of = KEY_FUNCS[gran]

    totals: dict[str, dict[MovementKind, Decimal]] = {}
    skipped = 0
    skipped_amounts = {MovementKind.INFLOW: ZERO, MovementKind.OUTFLOW: ZERO}

    for idx, raw in enumerate(records):
        try:
            record = normalize_movement(raw)
            day = calendar_date(record.timestamp, zone)
        except (RecordError, OverflowError) as exc:
            skipped += 1
            salvaged = salvage_kind_amount(raw)
            if salvaged is not None:
                skipped_amounts[salvaged[0]] += salvaged[1]
            logger.warning("Skipping movement #%d: %s", idx, exc)
            continue
        if date_range is not None and day not in date_range:
            continue
        key = key_of(day)
        per_kind = totals.setdefault(key, {MovementKind.INFLOW: ZERO, MovementKind.OUTFLOW: ZERO})
        per_kind[record.kind] += record.amount

    kept = sorted(totals)[-gran.window :]
    label_of = LABEL_FUNCS[gran]
    buckets = tuple(
        Bucket(
            key=key,
            label=label_of(key),
            inflow_total=totals[key][MovementKind.INFLOW],
            outflow_total=totals[key][MovementKind.OUTFLOW],
        )
        for key in kept
    )

    logger.debug(
        "Aggregated %d %s buckets (%d distinct keys, %d skipped records)",
        len(buckets),
        gran.value,
        len(totals),
        skipped,
    )
    return Aggregation(
        granularity=gran,
        buckets=buckets,
        skipped=skipped,
        skipped_inflow=skipped_amounts[MovementKind.INFLOW],
        skipped_outflow=skipped_amounts[MovementKind.OUTFLOW],
    )


def aggregate(
    records: Movements,
    granularity: Granularity | str,
    *,
    tz: tzinfo | str | None = None,
    date_range: DateRange | None = None,
) -> list[Bucket]:
    """Return the trailing, chronologically ordered buckets for ``records``.

    Thin wrapper over :func:`aggregate_detailed` for callers that only need
    the series.
    """

    return list(aggregate_detailed(records, granularity, tz=tz, date_range=date_range).buckets)


def to_payload(buckets: Iterable[Bucket]) -> list[BucketPayload]:
    return [BucketPayload.from_bucket(b) for b in buckets]


__all__ = [
    "aggregate",
    "aggregate_detailed",
    "bucket_key",
    "bucket_label",
    "to_payload",
    "week_start",
]
