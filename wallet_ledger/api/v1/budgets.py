"""Budget and saving goal endpoints"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wallet_ledger.api.dependencies import get_ledger_service, get_request_id
from wallet_ledger.api.v1.schemas import (
    BudgetCreate,
    BudgetLineSchema,
    BudgetReportResponse,
    SavingGoalSchema,
    SavingGoalUpdate,
)
from wallet_ledger.config import settings
from wallet_ledger.domain.aggregation import window_totals
from wallet_ledger.domain.budgets import budget_report, saving_goal_progress
from wallet_ledger.domain.models import Budget, SavingGoalProgress, TimeWindow
from wallet_ledger.infrastructure.database.repositories import BudgetRepository
from wallet_ledger.infrastructure.database.session import get_db
from wallet_ledger.services.ledger import LedgerService

router = APIRouter()


def to_goal_schema(goal: SavingGoalProgress) -> SavingGoalSchema:
    return SavingGoalSchema(
        goal=float(goal.goal),
        savings=float(goal.savings),
        percentage=float(goal.percentage),
        progress=float(goal.progress),
        remaining=float(goal.remaining),
        achieved=goal.achieved,
    )


@router.get("/budgets", response_model=BudgetReportResponse)
def get_budgets(
    window: TimeWindow = Query(TimeWindow.MONTH),
    db: Session = Depends(get_db),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """
    Compare every category budget against spend in the current window.

    Allocations are monthly; the week view divides by 4 and the year view
    multiplies by 12. The saving goal is only reported for the month view.
    """
    repo = BudgetRepository(db)
    report = budget_report(
        repo.list_budgets(),
        ledger.transactions_for(),
        window,
        datetime.now(),
        settings.first_weekday,
    )

    saving_goal = None
    if window == TimeWindow.MONTH:
        saving_goal = to_goal_schema(saving_goal_progress(repo.get_saving_goal(), report.savings))

    return BudgetReportResponse(
        window=window.value,
        budgets=[BudgetLineSchema.from_domain(line) for line in report.lines],
        total_budget=float(report.total_budget),
        total_spent=float(report.total_spent),
        total_remaining=float(report.total_remaining),
        income=float(report.income),
        expenses=float(report.expenses),
        savings=float(report.savings),
        saving_goal=saving_goal,
    )


@router.post("/budgets", response_model=BudgetLineSchema, status_code=201)
def add_budget(
    body: BudgetCreate,
    request: Request,
    db: Session = Depends(get_db),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """Add a monthly category budget and return its standing for the current month"""
    budget = Budget(category=body.category.strip(), allocated=body.amount)
    try:
        BudgetRepository(db).add_budget(budget)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Failed to save budget: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Store unavailable")

    report = budget_report(
        [budget],
        ledger.transactions_for(),
        TimeWindow.MONTH,
        datetime.now(),
        settings.first_weekday,
    )
    return BudgetLineSchema.from_domain(report.lines[0])


@router.get("/saving-goal", response_model=SavingGoalSchema)
def get_saving_goal(
    db: Session = Depends(get_db),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """Monthly goal against this month's net savings across all wallets"""
    totals = window_totals(ledger.transactions_for(), TimeWindow.MONTH, datetime.now())
    goal = BudgetRepository(db).get_saving_goal()
    return to_goal_schema(saving_goal_progress(goal, totals.net))


@router.put("/saving-goal", response_model=SavingGoalSchema)
def set_saving_goal(
    body: SavingGoalUpdate,
    request: Request,
    db: Session = Depends(get_db),
    ledger: LedgerService = Depends(get_ledger_service),
):
    try:
        BudgetRepository(db).set_saving_goal(body.amount)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Failed to save saving goal: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Store unavailable")

    totals = window_totals(ledger.transactions_for(), TimeWindow.MONTH, datetime.now())
    return to_goal_schema(saving_goal_progress(body.amount, totals.net))
