"""Reporting endpoints under /v1/reports"""

import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from wallet_ledger.api.dependencies import get_ledger_service
from wallet_ledger.api.v1.schemas import (
    CategoryAmount,
    MonthDetailResponse,
    MonthSchema,
    MonthSpending,
    OverviewResponse,
    SummaryResponse,
    TransactionSchema,
    TrendResponse,
)
from wallet_ledger.config import settings
from wallet_ledger.domain.aggregation import (
    average_daily_spending,
    category_breakdown,
    chart_scale,
    filter_window,
    merge_transactions,
    month_transactions,
    monthly_data,
    monthly_trend,
    paginate,
    spending_by_month,
    spending_ratio,
    sum_by_type,
    total_pages,
    transaction_counts,
    window_bounds,
)
from wallet_ledger.domain.exceptions import WalletNotFoundError
from wallet_ledger.domain.models import ZERO, TimeWindow, Transaction, TransactionType
from wallet_ledger.services.ledger import LedgerService

router = APIRouter()


def scoped_transactions(ledger: LedgerService, wallet_id: Optional[uuid.UUID]) -> List[Transaction]:
    """One wallet's transactions, or every wallet's when no wallet is selected"""
    try:
        return ledger.transactions_for(wallet_id)
    except WalletNotFoundError:
        raise HTTPException(status_code=404, detail="Wallet not found")


@router.get("/reports/summary", response_model=SummaryResponse)
def get_summary(
    window: TimeWindow = Query(TimeWindow.MONTH),
    wallet_id: Optional[uuid.UUID] = Query(None, description="Omit for all wallets"),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """
    Income, expense, and category breakdown for the current week, month, or year.

    Average daily spending spreads the window's expenses over the days since
    the window started.
    """
    now = datetime.now()
    start, end = window_bounds(window, now, settings.first_weekday)
    in_range = filter_window(scoped_transactions(ledger, wallet_id), start, end)

    income, expense = sum_by_type(in_range)
    incoming, outgoing = transaction_counts(in_range)

    return SummaryResponse(
        window=window.value,
        start=start,
        end=end,
        income=float(income),
        expense=float(expense),
        net=float(income - expense),
        spending_ratio=float(spending_ratio(income, expense)),
        incoming_count=incoming,
        outgoing_count=outgoing,
        average_daily_spending=float(average_daily_spending(expense, start, now)),
        categories=[
            CategoryAmount(category=category, amount=float(amount))
            for category, amount in category_breakdown(in_range)
        ],
    )


@router.get("/reports/monthly", response_model=TrendResponse)
def get_monthly_trend(
    page: int = Query(0, ge=0),
    wallet_id: Optional[uuid.UUID] = Query(None, description="Omit for all wallets"),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """Trailing months, current month first, served in fixed-size pages"""
    months = monthly_trend(
        scoped_transactions(ledger, wallet_id), datetime.now(), settings.trend_months
    )
    visible = paginate(months, page, settings.months_per_page)

    return TrendResponse(
        page=page,
        total_pages=total_pages(len(months), settings.months_per_page),
        scale_max=float(chart_scale(visible)),
        months=[MonthSchema.from_domain(m) for m in visible],
    )


@router.get("/reports/monthly/{year}/{month}", response_model=MonthDetailResponse)
def get_month_detail(
    year: int = Path(..., ge=1, le=9998),
    month: int = Path(..., ge=1, le=12),
    wallet_id: Optional[uuid.UUID] = Query(None, description="Omit for all wallets"),
    ledger: LedgerService = Depends(get_ledger_service),
):
    transactions = scoped_transactions(ledger, wallet_id)
    totals = monthly_data(transactions, month, year)
    in_month = month_transactions(transactions, month, year)

    return MonthDetailResponse(
        **MonthSchema.from_domain(totals).model_dump(),
        income_transactions=[
            TransactionSchema.from_domain(t) for t in in_month if t.type == TransactionType.INCOME
        ],
        expense_transactions=[
            TransactionSchema.from_domain(t) for t in in_month if t.type == TransactionType.EXPENSE
        ],
    )


@router.get("/reports/overview", response_model=OverviewResponse)
def get_overview(
    limit: int = Query(settings.recent_transactions_limit, ge=0, description="Most recent N across wallets"),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """
    Home screen figures across every wallet.

    Recent transactions merge all wallets, most recent first. Spending by
    month covers every month with expenses, oldest first.
    """
    wallets = ledger.list_wallets()
    transactions = ledger.transactions_for()

    return OverviewResponse(
        wallet_count=len(wallets),
        total_balance=float(sum((w.balance for w in wallets), ZERO)),
        total_income=float(sum((w.total_income for w in wallets), ZERO)),
        total_expenses=float(sum((w.total_expenses for w in wallets), ZERO)),
        recent_transactions=[
            TransactionSchema.from_domain(t) for t in merge_transactions(wallets)[:limit]
        ],
        spending_by_month=[
            MonthSpending(year=year, month=month, amount=float(amount))
            for (year, month), amount in spending_by_month(transactions)
        ],
    )
