from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from finance_analytics import (
    ConfigurationError,
    DateRange,
    MovementKind,
    MovementRecord,
    default_report_range,
    filter_by_range,
    history_start,
    period_totals,
    sum_by_category,
)

ROWS = [
    {"fecha": "2024-05-01T09:00:00Z", "tipo": "gasto", "monto": 30, "categoria": "Food"},
    {"fecha": "2024-05-02T09:00:00Z", "tipo": "gasto", "monto": 12.5, "categoria": "Transport"},
    {"fecha": "2024-05-03T09:00:00Z", "tipo": "gasto", "monto": 20, "categoria": "Food"},
    {"fecha": "2024-05-04T09:00:00Z", "tipo": "gasto", "monto": 5, "categoria": None},
    {"fecha": "2024-05-04T12:00:00Z", "tipo": "ingreso", "monto": 1000, "categoria": "Salary"},
    {"fecha": "2024-04-30T09:00:00Z", "tipo": "gasto", "monto": 999, "categoria": "Food"},
    {"fecha": "bad", "tipo": "gasto", "monto": 1, "categoria": "Food"},
]

MAY = DateRange(start=date(2024, 5, 1), end=date(2024, 5, 31))


def test_default_report_range_is_month_to_date():
    rng = default_report_range(datetime(2024, 5, 17, 15, 0))
    assert rng == DateRange(start=date(2024, 5, 1), end=date(2024, 5, 17))


def test_default_report_range_respects_reference_zone():
    now = datetime(2024, 6, 1, 3, 0, tzinfo=UTC)
    assert default_report_range(now, tz="America/Lima") == DateRange(
        start=date(2024, 5, 1), end=date(2024, 5, 31)
    )


@pytest.mark.parametrize(
    ("now", "months_back", "expected"),
    [
        (date(2024, 8, 20), 5, date(2024, 3, 1)),
        (date(2024, 3, 2), 5, date(2023, 10, 1)),
        (date(2024, 1, 31), 0, date(2024, 1, 1)),
        (date(2024, 1, 31), 13, date(2022, 12, 1)),
    ],
)
def test_history_start(now, months_back, expected):
    assert history_start(now, months_back) == expected


def test_history_start_rejects_negative_offset():
    with pytest.raises(ConfigurationError):
        history_start(date(2024, 1, 1), -1)


def test_date_range_validates_order():
    with pytest.raises(ConfigurationError):
        DateRange(start=date(2024, 2, 1), end=date(2024, 1, 1))
    assert date(2024, 5, 31) in MAY
    assert date(2024, 6, 1) not in MAY


def test_sum_by_category_first_seen_order_and_total():
    breakdown = sum_by_category(ROWS, kind=MovementKind.OUTFLOW, date_range=MAY)

    assert breakdown.labels == ["Food", "Transport", "Uncategorized"]
    assert breakdown.values == [Decimal("50"), Decimal("12.5"), Decimal("5")]
    assert breakdown.total == Decimal("67.5")


def test_sum_by_category_without_range_includes_everything_valid():
    breakdown = sum_by_category(ROWS, kind=MovementKind.OUTFLOW)
    assert breakdown.items[0] == ("Food", Decimal("1049"))


def test_sum_by_category_income():
    breakdown = sum_by_category(ROWS, kind=MovementKind.INFLOW, date_range=MAY)
    assert breakdown.items == (("Salary", Decimal("1000")),)


def test_period_totals():
    totals = period_totals(ROWS, MAY)
    assert totals.inflow_total == Decimal("1000")
    assert totals.outflow_total == Decimal("67.5")
    assert totals.net == Decimal("932.5")


def test_filter_by_range_and_kind():
    records = filter_by_range(ROWS, DateRange(date(2024, 5, 4), date(2024, 5, 4)))
    assert [r.kind for r in records] == [MovementKind.OUTFLOW, MovementKind.INFLOW]

    only_income = filter_by_range(ROWS, MAY, kind=MovementKind.INFLOW)
    assert [r.amount for r in only_income] == [Decimal("1000")]


def test_period_totals_reads_kind_aliases_on_records():
    records = [
        MovementRecord(date(2024, 5, 2), "ingreso", Decimal("40")),  # type: ignore[arg-type]
        MovementRecord(date(2024, 5, 3), "gasto", Decimal("15")),  # type: ignore[arg-type]
    ]

    totals = period_totals(records, MAY)

    assert (totals.inflow_total, totals.outflow_total) == (Decimal("40"), Decimal("15"))
