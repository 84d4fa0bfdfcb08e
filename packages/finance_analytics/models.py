"""Data models and type aliases for ``finance_analytics``.

Movements arrive either as :class:`MovementRecord` instances or as raw
mapping rows straight from the backend (``{"fecha", "tipo", "monto"}`` or
``{"timestamp", "kind", "amount"}``). Raw rows are normalized lazily by
:mod:`finance_analytics.normalizers` so that one malformed row never aborts a
whole aggregation.

Amounts are :class:`~decimal.Decimal` throughout; conversion to floats
happens only at the output boundary (:class:`BucketPayload`).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationError, RecordError

ZERO = Decimal("0")

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class MovementKind(StrEnum):
    """Direction of a movement: money coming in or going out."""

    INFLOW = "inflow"
    OUTFLOW = "outflow"

    @classmethod
    def parse(cls, value: Any) -> MovementKind:
        """Return the member named by ``value`` (English or Spanish alias).

        Raises ``RecordError`` for anything else.
        """

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            kind = KIND_ALIASES.get(value.strip().lower())
            if kind is not None:
                return kind
        raise RecordError(f"unknown movement kind: {value!r}")


KIND_ALIASES: Mapping[str, MovementKind] = {
    "inflow": MovementKind.INFLOW,
    "income": MovementKind.INFLOW,
    "ingreso": MovementKind.INFLOW,
    "outflow": MovementKind.OUTFLOW,
    "expense": MovementKind.OUTFLOW,
    "gasto": MovementKind.OUTFLOW,
}


class Granularity(StrEnum):
    """Bucket size for historical series.

    Each granularity also fixes how many trailing buckets a series keeps
    (see :attr:`window`).
    """

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def window(self) -> int:
        return WINDOW_CAPS[self]

    @classmethod
    def parse(cls, value: Granularity | str | None) -> Granularity:
        """Return the member named by ``value`` or raise ``ConfigurationError``."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        allowed = ", ".join(m.value for m in cls)
        raise ConfigurationError(f"unknown granularity: {value!r} (expected one of: {allowed})")


WINDOW_CAPS: Mapping[Granularity, int] = {
    Granularity.DAILY: 30,
    Granularity.WEEKLY: 12,
    Granularity.MONTHLY: 12,
}

# ---------------------------------------------------------------------------
# Input records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MovementRecord:
    """A single normalized income or expense movement.

    ``timestamp`` may be a ``date`` (already a calendar day) or a
    ``datetime``; aware datetimes are converted to the reference time zone
    before a calendar date is taken.
    """

    timestamp: datetime | date
    kind: MovementKind
    amount: Decimal
    category: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.timestamp, datetime | date):
            raise RecordError(
                f"timestamp must be a date or datetime, got {type(self.timestamp).__name__}"
            )
        # frozen: coerce aliases such as "gasto" in place
        object.__setattr__(self, "kind", MovementKind.parse(self.kind))
        if not isinstance(self.amount, Decimal):
            raise RecordError(f"amount must be a Decimal, got {type(self.amount).__name__}")
        if not self.amount.is_finite() or self.amount < 0:
            raise RecordError(f"amount must be a finite non-negative number: {self.amount}")


MovementInput: TypeAlias = MovementRecord | Mapping[str, Any]
"""A movement as accepted by the aggregators: normalized or a raw row."""

Movements: TypeAlias = Iterable[MovementInput]


# ---------------------------------------------------------------------------
# Historical buckets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Bucket:
    """Income and expense totals for one time window.

    ``key`` sorts chronologically (``YYYY-MM-DD`` or ``YYYY-MM``); ``label`` is
    the short display form derived from it.
    """

    key: str
    label: str
    inflow_total: Decimal
    outflow_total: Decimal

    @property
    def net(self) -> Decimal:
        return self.inflow_total - self.outflow_total


@dataclass(frozen=True, slots=True)
class Aggregation:
    """Bucketed series plus bookkeeping about excluded records.

    ``skipped`` counts records dropped as malformed. ``skipped_inflow`` and
    ``skipped_outflow`` hold the amounts of those dropped records whose kind
    and amount could still be read (e.g. only the timestamp was bad).
    """

    granularity: Granularity
    buckets: tuple[Bucket, ...]
    skipped: int = 0
    skipped_inflow: Decimal = ZERO
    skipped_outflow: Decimal = ZERO

    @property
    def labels(self) -> list[str]:
        return [b.label for b in self.buckets]


class BucketPayload(BaseModel):
    """Chart-facing form of a :class:`Bucket`.

    Serializes as ``{"label", "inflowTotal", "outflowTotal"}`` when dumped with
    ``by_alias=True``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    label: str
    inflow_total: float = Field(alias="inflowTotal")
    outflow_total: float = Field(alias="outflowTotal")

    @classmethod
    def from_bucket(cls, bucket: Bucket) -> BucketPayload:
        return cls(
            label=bucket.label,
            inflow_total=float(bucket.inflow_total),
            outflow_total=float(bucket.outflow_total),
        )


# ---------------------------------------------------------------------------
# Flat summaries
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive calendar-date range."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ConfigurationError(f"date range start {self.start} is after end {self.end}")

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and self.start <= day <= self.end


@dataclass(frozen=True, slots=True)
class CategoryBreakdown:
    """Per-category totals in first-seen order, plus the grand total."""

    kind: MovementKind
    items: tuple[tuple[str, Decimal], ...]
    total: Decimal

    @property
    def labels(self) -> list[str]:
        return [name for name, _ in self.items]

    @property
    def values(self) -> list[Decimal]:
        return [value for _, value in self.items]


@dataclass(frozen=True, slots=True)
class PeriodTotals:
    date_range: DateRange
    inflow_total: Decimal
    outflow_total: Decimal

    @property
    def net(self) -> Decimal:
        return self.inflow_total - self.outflow_total


# ---------------------------------------------------------------------------
# Planning (budgets, savings goals, loans)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Budget:
    category: str
    amount: Decimal


@dataclass(frozen=True, slots=True)
class BudgetAllocation:
    """How the combined account balance is split across budgets.

    ``labels``/``values`` form a chart series: one slice per budget followed
    by the unbudgeted remainder.
    """

    total_balance: Decimal
    total_budgeted: Decimal
    unbudgeted: Decimal
    labels: tuple[str, ...]
    values: tuple[Decimal, ...]


@dataclass(frozen=True, slots=True)
class SavingsGoal:
    name: str
    target: Decimal
    current: Decimal = ZERO

    @property
    def completed(self) -> bool:
        return self.current >= self.target


@dataclass(frozen=True, slots=True)
class Loan:
    name: str
    amount: Decimal
    paid: Decimal = ZERO

    @property
    def remaining(self) -> Decimal:
        return self.amount - self.paid

    @property
    def paid_off(self) -> bool:
        return self.paid >= self.amount


@dataclass(frozen=True, slots=True)
class LoanSummary:
    outstanding: Decimal
    repaid: Decimal
    active: tuple[Loan, ...]
    paid_off: tuple[Loan, ...]
