"""Time-windowed aggregation - read-only reporting over ledger transactions"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence, Tuple, TypeVar

from wallet_ledger.domain.models import (
    ZERO,
    MonthTotals,
    TimeWindow,
    Transaction,
    TransactionType,
    Wallet,
    WindowTotals,
)
from wallet_ledger.utils.date_utils import (
    days_between,
    month_bounds,
    start_of_week,
    trailing_months,
)

HUNDRED = Decimal("100")
ONE = Decimal("1")

T = TypeVar("T")


def window_bounds(
    window: TimeWindow, now: datetime, first_weekday: int = 0
) -> Tuple[datetime, datetime]:
    """
    Calendar-aligned half-open range [start, end) containing `now`.

    - week:  start of the current week (first_weekday) through 7 days later
    - month: first of the month through first of next month
    - year:  January 1st through January 1st of next year
    """
    if window == TimeWindow.WEEK:
        start = start_of_week(now, first_weekday)
        return start, start + timedelta(days=7)
    if window == TimeWindow.MONTH:
        return month_bounds(now.year, now.month)
    return datetime(now.year, 1, 1), datetime(now.year + 1, 1, 1)


def in_window(transaction: Transaction, start: datetime, end: datetime) -> bool:
    return start <= transaction.date < end


def filter_window(
    transactions: Iterable[Transaction], start: datetime, end: datetime
) -> List[Transaction]:
    return [t for t in transactions if in_window(t, start, end)]


def sum_by_type(transactions: Iterable[Transaction]) -> Tuple[Decimal, Decimal]:
    """Return (income, expense) sums"""
    income = ZERO
    expense = ZERO
    for t in transactions:
        if t.type == TransactionType.INCOME:
            income += t.amount
        else:
            expense += t.amount
    return income, expense


def window_totals(
    transactions: Iterable[Transaction],
    window: TimeWindow,
    now: datetime,
    first_weekday: int = 0,
) -> WindowTotals:
    start, end = window_bounds(window, now, first_weekday)
    income, expense = sum_by_type(filter_window(transactions, start, end))
    return WindowTotals(start=start, end=end, income=income, expense=expense)


def category_breakdown(transactions: Iterable[Transaction]) -> List[Tuple[str, Decimal]]:
    """Expense totals per category, largest first (ties by category name)"""
    totals = category_spent(transactions)
    return sorted(totals.items(), key=lambda item: (-item[1], item[0]))


def category_spent(transactions: Iterable[Transaction]) -> Dict[str, Decimal]:
    """Expense totals keyed by category; income is ignored"""
    totals: Dict[str, Decimal] = {}
    for t in transactions:
        if t.type == TransactionType.EXPENSE:
            totals[t.category] = totals.get(t.category, ZERO) + t.amount
    return totals


def monthly_data(transactions: Iterable[Transaction], month: int, year: int) -> MonthTotals:
    """Income and expense for one calendar month"""
    start, end = month_bounds(year, month)
    income, expense = sum_by_type(filter_window(transactions, start, end))
    return MonthTotals(year=year, month=month, income=income, expense=expense)


def month_transactions(
    transactions: Iterable[Transaction], month: int, year: int
) -> List[Transaction]:
    """Transactions dated inside one calendar month, most recent first"""
    start, end = month_bounds(year, month)
    return sorted(filter_window(transactions, start, end), key=lambda t: t.date, reverse=True)


def monthly_trend(
    transactions: Sequence[Transaction], now: datetime, months: int = 7
) -> List[MonthTotals]:
    """
    Per-month totals for the current month and the trailing months before it.

    The most recent month comes first.
    """
    return [
        monthly_data(transactions, month, year)
        for year, month in trailing_months(now.year, now.month, months)
    ]


def paginate(items: Sequence[T], page: int, per_page: int = 4) -> List[T]:
    """Fixed-size page of `items`; out-of-range pages are empty"""
    if page < 0 or per_page <= 0:
        return []
    start = page * per_page
    return list(items[start:start + per_page])


def total_pages(count: int, per_page: int = 4) -> int:
    if per_page <= 0:
        return 0
    return (count + per_page - 1) // per_page


def chart_scale(months: Iterable[MonthTotals]) -> Decimal:
    """Largest income or expense among the months, never below 1"""
    peak = ONE
    for m in months:
        peak = max(peak, m.income, m.expense)
    return peak


def spending_ratio(total_income: Decimal, total_expenses: Decimal) -> Decimal:
    """Expenses over income, with the denominator floored at 1"""
    return total_expenses / max(total_income, ONE)


def percentage(value: Decimal, total: Decimal) -> Decimal:
    """Raw percentage of `total`; may exceed 100. Zero when total is not positive."""
    if total <= 0:
        return ZERO
    return value / total * HUNDRED


def progress(value: Decimal, total: Decimal) -> Decimal:
    """Percentage clamped to [0, 100] for progress-bar rendering"""
    return min(max(percentage(value, total), ZERO), HUNDRED)


def transaction_counts(transactions: Iterable[Transaction]) -> Tuple[int, int]:
    """Return (incoming, outgoing) counts"""
    incoming = 0
    outgoing = 0
    for t in transactions:
        if t.type == TransactionType.INCOME:
            incoming += 1
        else:
            outgoing += 1
    return incoming, outgoing


def average_daily_spending(total_expenses: Decimal, since: datetime, now: datetime) -> Decimal:
    """Expenses spread over the days elapsed since `since`, at least one day"""
    days = max(days_between(since, now), 1)
    return total_expenses / Decimal(days)


def spending_by_month(transactions: Iterable[Transaction]) -> List[Tuple[Tuple[int, int], Decimal]]:
    """Expense totals keyed by (year, month), oldest first"""
    totals: Dict[Tuple[int, int], Decimal] = {}
    for t in transactions:
        if t.type == TransactionType.EXPENSE:
            key = (t.date.year, t.date.month)
            totals[key] = totals.get(key, ZERO) + t.amount
    return sorted(totals.items())


def merge_transactions(wallets: Iterable[Wallet]) -> List[Transaction]:
    """All transactions across wallets, most recent first"""
    merged = [t for w in wallets for t in w.transactions]
    return sorted(merged, key=lambda t: t.date, reverse=True)
