"""Budget, savings-goal and loan roll-ups.

Small pure helpers behind the budget, savings and loans views. Inputs are
the model dataclasses from :mod:`finance_analytics.models`; amounts are
``Decimal`` and are not rounded here.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from .errors import ConfigurationError
from .models import ZERO, Budget, BudgetAllocation, Loan, LoanSummary, SavingsGoal

UNBUDGETED_LABEL = "Unbudgeted"
_HUNDRED = Decimal("100")


def budget_allocation(
    account_balances: Iterable[Decimal], budgets: Iterable[Budget]
) -> BudgetAllocation:
    """Split the combined account balance across ``budgets``.

    The unbudgeted remainder never goes negative: when budgets exceed the
    balance it is reported as zero.
    """

    budget_list = list(budgets)
    total_balance = sum(account_balances, ZERO)
    total_budgeted = sum((b.amount for b in budget_list), ZERO)
    unbudgeted = max(ZERO, total_balance - total_budgeted)
    return BudgetAllocation(
        total_balance=total_balance,
        total_budgeted=total_budgeted,
        unbudgeted=unbudgeted,
        labels=(*(b.category for b in budget_list), UNBUDGETED_LABEL),
        values=(*(b.amount for b in budget_list), unbudgeted),
    )


def goal_progress(current: Decimal, target: Decimal) -> Decimal:
    """Percentage of ``target`` reached, clamped to ``[0, 100]``."""

    if target <= 0:
        return ZERO
    return min(max(current / target * _HUNDRED, ZERO), _HUNDRED)


def split_goals(goals: Iterable[SavingsGoal]) -> tuple[list[SavingsGoal], list[SavingsGoal]]:
    """Return ``(active, completed)`` preserving input order."""

    active: list[SavingsGoal] = []
    completed: list[SavingsGoal] = []
    for goal in goals:
        (completed if goal.completed else active).append(goal)
    return active, completed


def apply_loan_payment(loan: Loan, payment: Decimal) -> Loan:
    """Return ``loan`` with ``payment`` added to the paid amount.

    Payments must be positive. Overpayment is recorded as is; callers decide
    whether to cap it.
    """

    if payment <= 0:
        raise ConfigurationError(f"loan payment must be positive, got {payment}")
    return Loan(name=loan.name, amount=loan.amount, paid=loan.paid + payment)


def loan_summary(loans: Iterable[Loan]) -> LoanSummary:
    """Outstanding balance of active loans and total repaid on settled ones."""

    active: list[Loan] = []
    paid_off: list[Loan] = []
    for loan in loans:
        (paid_off if loan.paid_off else active).append(loan)
    return LoanSummary(
        outstanding=sum((loan.remaining for loan in active), ZERO),
        repaid=sum((loan.paid for loan in paid_off), ZERO),
        active=tuple(active),
        paid_off=tuple(paid_off),
    )


__all__ = [
    "apply_loan_payment",
    "budget_allocation",
    "goal_progress",
    "loan_summary",
    "split_goals",
    "UNBUDGETED_LABEL",
]
