"""Raw movement rows -> :class:`~finance_analytics.models.MovementRecord`.

Rows come from the backend (or a CSV/JSON export of it) with loosely typed
values: ISO timestamps as strings, amounts as strings or floats, kinds in
either English or the backend's Spanish vocabulary. Everything here raises
:class:`~finance_analytics.errors.RecordError` on bad input; deciding whether
to skip or abort is left to the caller.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, datetime, tzinfo
from decimal import Decimal, InvalidOperation
from typing import Any

from .errors import RecordError
from .models import MovementInput, MovementKind, MovementRecord

# Accepted column names, in lookup order.
TIMESTAMP_FIELDS: tuple[str, ...] = ("timestamp", "fecha", "date")
KIND_FIELDS: tuple[str, ...] = ("kind", "tipo", "type")
AMOUNT_FIELDS: tuple[str, ...] = ("amount", "monto")
CATEGORY_FIELDS: tuple[str, ...] = ("category", "categoria")

# ---------------------------------------------------------------------------
# Scalar parsers
# ---------------------------------------------------------------------------


def to_decimal(raw: Any) -> Decimal:
    """Parse a non-negative amount.

    Strings may carry a leading currency symbol and thousands separators
    (``"S/ 1,234.50"``, ``"$12"``). Booleans are rejected even though they are
    ints.
    """

    if raw is None or isinstance(raw, bool):
        raise RecordError(f"invalid amount: {raw!r}")
    if isinstance(raw, Decimal):
        d = raw
    elif isinstance(raw, int | float):
        # Go through str() so 0.1 becomes Decimal("0.1"), not its binary expansion.
        try:
            d = Decimal(str(raw))
        except ValueError as exc:
            # int too long for str() under the interpreter's digit limit
            raise RecordError(f"invalid amount: {type(raw).__name__} too large") from exc
    elif isinstance(raw, str):
        s = raw.strip()
        for symbol in ("S/", "$", "€"):
            if s.startswith(symbol):
                s = s[len(symbol) :].lstrip()
        s = s.replace(",", "")
        if not s:
            raise RecordError("amount is empty")
        try:
            d = Decimal(s)
        except InvalidOperation as exc:
            raise RecordError(f"invalid amount: {raw!r}") from exc
    else:
        raise RecordError(f"invalid amount type: {type(raw).__name__}")

    if not d.is_finite():
        raise RecordError(f"amount is not finite: {raw!r}")
    if d < 0:
        raise RecordError(f"amount must be non-negative: {raw!r}")
    return d


def parse_timestamp(raw: Any) -> datetime | date:
    """Parse an ISO 8601 date or date-time.

    ``datetime``/``date`` objects pass through. Strings may be a bare
    ``YYYY-MM-DD`` (returned as a ``date``) or a full timestamp with optional
    fractional seconds and ``Z``/``±HH:MM`` offset.
    """

    if isinstance(raw, datetime | date):
        return raw
    if not isinstance(raw, str):
        raise RecordError(f"invalid timestamp: {raw!r}")
    s = raw.strip()
    if not s:
        raise RecordError("timestamp is empty")
    if len(s) == 10:
        try:
            return date.fromisoformat(s)
        except ValueError as exc:
            raise RecordError(f"invalid date: {raw!r}") from exc
    try:
        return datetime.fromisoformat(s)
    except ValueError as exc:
        raise RecordError(f"invalid timestamp: {raw!r}") from exc


def parse_kind(raw: Any) -> MovementKind:
    return MovementKind.parse(raw)


def calendar_date(timestamp: datetime | date, tz: tzinfo) -> date:
    """Return the calendar day of ``timestamp`` in the reference zone ``tz``.

    Aware datetimes are converted; naive datetimes and plain dates are taken
    to be expressed in ``tz`` already.
    """

    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is not None and timestamp.utcoffset() is not None:
            return timestamp.astimezone(tz).date()
        return timestamp.date()
    return timestamp


# ---------------------------------------------------------------------------
# Row normalization
# ---------------------------------------------------------------------------


def _lookup(row: Mapping[str, Any], names: Sequence[str]) -> Any:
    for name in names:
        if name in row:
            return row[name]
    return None


def normalize_movement(raw: MovementInput) -> MovementRecord:
    """Convert a raw row (or pass through a record) into a :class:`MovementRecord`."""

    if isinstance(raw, MovementRecord):
        return raw
    if not isinstance(raw, Mapping):
        raise RecordError(f"unsupported movement type: {type(raw).__name__}")

    timestamp = parse_timestamp(_lookup(raw, TIMESTAMP_FIELDS))
    kind = parse_kind(_lookup(raw, KIND_FIELDS))
    amount = to_decimal(_lookup(raw, AMOUNT_FIELDS))
    raw_category = _lookup(raw, CATEGORY_FIELDS)
    category = str(raw_category).strip() if raw_category is not None else ""
    return MovementRecord(timestamp=timestamp, kind=kind, amount=amount, category=category or None)


def salvage_kind_amount(raw: MovementInput) -> tuple[MovementKind, Decimal] | None:
    """Best-effort ``(kind, amount)`` of a row that failed normalization.

    Used to report how much money was excluded with a rejected record.
    Returns ``None`` when either field is unreadable too.
    """

    if isinstance(raw, MovementRecord):
        return raw.kind, raw.amount
    if not isinstance(raw, Mapping):
        return None
    try:
        return parse_kind(_lookup(raw, KIND_FIELDS)), to_decimal(_lookup(raw, AMOUNT_FIELDS))
    except RecordError:
        return None


__all__ = [
    "calendar_date",
    "normalize_movement",
    "parse_kind",
    "parse_timestamp",
    "salvage_kind_amount",
    "to_decimal",
]
