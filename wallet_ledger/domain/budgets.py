"""Budget comparison - category allocations against actual spend"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Sequence

from wallet_ledger.domain.aggregation import (
    category_spent,
    filter_window,
    percentage,
    progress,
    sum_by_type,
    window_bounds,
)
from wallet_ledger.domain.models import (
    ZERO,
    Budget,
    BudgetLine,
    BudgetReport,
    BudgetStatus,
    SavingGoalProgress,
    TimeWindow,
    Transaction,
)

WARNING_THRESHOLD = Decimal("80")
OVER_BUDGET_THRESHOLD = Decimal("100")


def adjusted_allocation(budget: Budget, window: TimeWindow) -> Decimal:
    """
    Scale the monthly allocation to the selected window.

    Week divides by 4 (an approximation, not calendar-accurate),
    year multiplies by 12, month passes through.
    """
    if window == TimeWindow.WEEK:
        return budget.allocated / Decimal(4)
    if window == TimeWindow.YEAR:
        return budget.allocated * Decimal(12)
    return budget.allocated


def remaining(budget: Budget, spent: Decimal, window: TimeWindow) -> Decimal:
    """Allocation left to spend; overspend shows as zero, never negative"""
    return max(adjusted_allocation(budget, window) - spent, ZERO)


def classify(spent_percentage: Decimal) -> BudgetStatus:
    if spent_percentage >= OVER_BUDGET_THRESHOLD:
        return BudgetStatus.OVER_BUDGET
    if spent_percentage >= WARNING_THRESHOLD:
        return BudgetStatus.WARNING
    return BudgetStatus.NORMAL


def budget_report(
    budgets: Sequence[Budget],
    transactions: Iterable[Transaction],
    window: TimeWindow,
    now: datetime,
    first_weekday: int = 0,
) -> BudgetReport:
    """
    Compare every budget against spend inside the current window.

    Totals only count spend in budgeted categories; income, expenses and
    savings cover every transaction in the window.
    """
    start, end = window_bounds(window, now, first_weekday)
    in_range = filter_window(transactions, start, end)
    spent_by_category = category_spent(in_range)

    lines: List[BudgetLine] = []
    for budget in budgets:
        allocated = adjusted_allocation(budget, window)
        spent = spent_by_category.get(budget.category, ZERO)
        spent_pct = percentage(spent, allocated)
        lines.append(
            BudgetLine(
                category=budget.category,
                allocated=allocated,
                spent=spent,
                remaining=remaining(budget, spent, window),
                percentage=spent_pct,
                progress=progress(spent, allocated),
                status=classify(spent_pct),
            )
        )

    total_budget = sum((line.allocated for line in lines), ZERO)
    total_spent = sum((line.spent for line in lines), ZERO)
    income, expenses = sum_by_type(in_range)

    return BudgetReport(
        window=window,
        lines=lines,
        total_budget=total_budget,
        total_spent=total_spent,
        total_remaining=max(total_budget - total_spent, ZERO),
        income=income,
        expenses=expenses,
    )


def saving_goal_progress(goal: Decimal, savings: Decimal) -> SavingGoalProgress:
    """Net savings for the month measured against the user's monthly goal"""
    return SavingGoalProgress(
        goal=goal,
        savings=savings,
        percentage=percentage(savings, goal),
        progress=progress(savings, goal),
        remaining=max(goal - savings, ZERO),
        achieved=goal > 0 and savings >= goal,
    )
