from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from finance_analytics import MovementKind, MovementRecord, RecordError
from finance_analytics.normalizers import (
    calendar_date,
    normalize_movement,
    parse_kind,
    parse_timestamp,
    salvage_kind_amount,
    to_decimal,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("12.50", Decimal("12.50")),
        ("1,234.56", Decimal("1234.56")),
        ("$ 12", Decimal("12")),
        ("S/ 3,000", Decimal("3000")),
        (0.1, Decimal("0.1")),
        (7, Decimal("7")),
        (Decimal("0"), Decimal("0")),
    ],
)
def test_to_decimal_accepts_common_amount_shapes(raw, expected):
    assert to_decimal(raw) == expected


@pytest.mark.parametrize("raw", [None, True, "", "  ", "abc", "-5", -1, float("nan"), "inf", [1]])
def test_to_decimal_rejects_invalid_amounts(raw):
    with pytest.raises(RecordError):
        to_decimal(raw)


def test_parse_timestamp_variants():
    assert parse_timestamp("2024-02-29") == date(2024, 2, 29)
    assert parse_timestamp("2024-02-29T10:15:00Z") == datetime(2024, 2, 29, 10, 15, tzinfo=UTC)
    assert parse_timestamp("2024-02-29T10:15:00.123456+00:00").microsecond == 123456
    d = date(2024, 5, 1)
    assert parse_timestamp(d) is d


@pytest.mark.parametrize("raw", ["", "2023-02-29", "31/01/2024", "yesterday", 1706659200, None])
def test_parse_timestamp_rejects_garbage(raw):
    with pytest.raises(RecordError):
        parse_timestamp(raw)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("ingreso", MovementKind.INFLOW),
        ("Income", MovementKind.INFLOW),
        ("inflow", MovementKind.INFLOW),
        (" GASTO ", MovementKind.OUTFLOW),
        ("expense", MovementKind.OUTFLOW),
        (MovementKind.OUTFLOW, MovementKind.OUTFLOW),
    ],
)
def test_parse_kind_aliases(raw, expected):
    assert parse_kind(raw) is expected


def test_parse_kind_rejects_unknown():
    with pytest.raises(RecordError):
        parse_kind("transferencia")


def test_calendar_date_converts_only_aware_datetimes():
    lima = timezone(timedelta(hours=-5))
    aware = datetime(2024, 1, 1, 2, 0, tzinfo=UTC)
    naive = datetime(2024, 1, 1, 2, 0)
    assert calendar_date(aware, lima) == date(2023, 12, 31)
    assert calendar_date(naive, lima) == date(2024, 1, 1)
    assert calendar_date(date(2024, 1, 1), lima) == date(2024, 1, 1)


def test_normalize_movement_from_backend_row():
    rec = normalize_movement(
        {
            "fecha": "2024-03-05T10:00:00+00:00",
            "tipo": "gasto",
            "monto": "42",
            "categoria": " Food ",
        }
    )
    assert rec == MovementRecord(
        timestamp=datetime(2024, 3, 5, 10, tzinfo=UTC),
        kind=MovementKind.OUTFLOW,
        amount=Decimal("42"),
        category="Food",
    )


def test_normalize_movement_blank_category_is_none():
    rec = normalize_movement(
        {"timestamp": "2024-03-05", "kind": "inflow", "amount": 1, "category": ""}
    )
    assert rec.category is None


def test_normalize_movement_rejects_non_mappings():
    with pytest.raises(RecordError):
        normalize_movement(["2024-03-05", "inflow", 1])  # type: ignore[arg-type]


def test_movement_record_validates_amount():
    with pytest.raises(RecordError):
        MovementRecord(timestamp=date(2024, 1, 1), kind=MovementKind.INFLOW, amount=Decimal("-1"))
    with pytest.raises(RecordError):
        MovementRecord(
            timestamp=date(2024, 1, 1), kind=MovementKind.INFLOW, amount=5  # type: ignore[arg-type]
        )


def test_salvage_kind_amount():
    assert salvage_kind_amount({"timestamp": "bad", "kind": "gasto", "amount": "3"}) == (
        MovementKind.OUTFLOW,
        Decimal("3"),
    )
    assert salvage_kind_amount({"timestamp": "bad", "kind": "?", "amount": "3"}) is None
    assert salvage_kind_amount("nope") is None  # type: ignore[arg-type]


def test_to_decimal_rejects_ints_too_long_to_format():
    with pytest.raises(RecordError):
        to_decimal(10**5000)


def test_movement_record_coerces_kind_aliases():
    rec = MovementRecord(
        timestamp=date(2024, 1, 2), kind="gasto", amount=Decimal("5")  # type: ignore[arg-type]
    )
    assert rec.kind is MovementKind.OUTFLOW
    assert normalize_movement(rec) is rec


@pytest.mark.parametrize(
    ("timestamp", "kind"),
    [
        ("not-a-date", MovementKind.INFLOW),
        (None, MovementKind.INFLOW),
        (date(2024, 1, 2), "transferencia"),
        (date(2024, 1, 2), None),
    ],
)
def test_movement_record_rejects_bad_timestamp_or_kind(timestamp, kind):
    with pytest.raises(RecordError):
        MovementRecord(timestamp=timestamp, kind=kind, amount=Decimal("5"))
