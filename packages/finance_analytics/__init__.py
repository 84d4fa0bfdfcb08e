"""Public interface for the ``finance_analytics`` package.

This module exposes the package's aggregation functions and public
models/types as the stable import surface. There is no runtime logic here,
only symbol re-exports.
"""

from .bucketing import aggregate, aggregate_detailed, bucket_key, bucket_label, to_payload
from .config import AnalyticsSettings, load_settings
from .errors import AnalyticsError, ConfigurationError, RecordError
from .models import (
    Aggregation,
    Bucket,
    BucketPayload,
    Budget,
    BudgetAllocation,
    CategoryBreakdown,
    DateRange,
    Granularity,
    Loan,
    LoanSummary,
    MovementKind,
    MovementRecord,
    Movements,
    PeriodTotals,
    SavingsGoal,
)
from .planning import (
    apply_loan_payment,
    budget_allocation,
    goal_progress,
    loan_summary,
    split_goals,
)
from .summaries import (
    default_report_range,
    filter_by_range,
    history_start,
    period_totals,
    sum_by_category,
)

__all__ = [
    # Historical series
    "aggregate",
    "aggregate_detailed",
    "bucket_key",
    "bucket_label",
    "to_payload",
    # Summaries
    "default_report_range",
    "filter_by_range",
    "history_start",
    "period_totals",
    "sum_by_category",
    # Planning
    "apply_loan_payment",
    "budget_allocation",
    "goal_progress",
    "loan_summary",
    "split_goals",
    # Configuration / errors
    "AnalyticsSettings",
    "load_settings",
    "AnalyticsError",
    "ConfigurationError",
    "RecordError",
    # Models / types
    "Aggregation",
    "Bucket",
    "BucketPayload",
    "Budget",
    "BudgetAllocation",
    "CategoryBreakdown",
    "DateRange",
    "Granularity",
    "Loan",
    "LoanSummary",
    "MovementKind",
    "MovementRecord",
    "Movements",
    "PeriodTotals",
    "SavingsGoal",
]
