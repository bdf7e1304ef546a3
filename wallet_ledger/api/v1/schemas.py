"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from wallet_ledger.domain.models import (
    BudgetLine,
    BudgetStatus,
    CardType,
    MonthTotals,
    Transaction,
    TransactionType,
    Wallet,
)


def parse_amount(value):
    """Accept numbers or numeric strings, with ',' allowed as the decimal separator"""
    if isinstance(value, str):
        text = value.strip().replace(",", ".")
        if not text:
            raise ValueError("amount is required")
        try:
            return Decimal(text)
        except InvalidOperation:
            raise ValueError(f"amount {value!r} is not a number")
    return value


class AmountModel(BaseModel):
    """Base for request bodies carrying a positive money amount"""

    amount: Decimal = Field(
        ..., gt=0, max_digits=14, decimal_places=2, description="Positive amount; the sign comes from type"
    )

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, value):
        return parse_amount(value)


class TransactionFields(AmountModel):
    """Fields shared by the add and edit forms"""

    category: str = Field(..., min_length=1)
    note: str = ""

    @field_validator("category")
    @classmethod
    def _category_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("category is required")
        return value

    @field_validator("date", check_fields=False)
    @classmethod
    def _naive_local_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Ledger dates are naive local time; convert aware inputs
        if value is not None and value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value


class TransactionCreate(TransactionFields):
    """Request body for POST /v1/wallets/{wallet_id}/transactions"""

    type: TransactionType
    date: Optional[datetime] = None


class TransactionUpdate(TransactionFields):
    """Request body for PUT /v1/wallets/{wallet_id}/transactions/{transaction_id}"""

    date: datetime


class TransactionSchema(BaseModel):
    id: str
    amount: float
    date: datetime
    category: str
    type: TransactionType
    note: str

    @classmethod
    def from_domain(cls, tx: Transaction) -> "TransactionSchema":
        return cls(
            id=str(tx.id),
            amount=float(tx.amount),
            date=tx.date,
            category=tx.category,
            type=tx.type,
            note=tx.note,
        )


class WalletCreate(BaseModel):
    """Request body for POST /v1/wallets"""

    name: str = Field(..., min_length=1)
    currency: Optional[str] = Field(None, min_length=1, max_length=8)
    card_type: CardType = CardType.DEBIT


class WalletSchema(BaseModel):
    id: str
    name: str
    currency: str
    card_type: CardType
    balance: float
    total_income: float
    total_expenses: float
    spending_ratio: float
    is_high_spending: bool
    transaction_count: int

    @classmethod
    def from_domain(cls, wallet: Wallet, spending_ratio) -> "WalletSchema":
        return cls(
            id=str(wallet.id),
            name=wallet.name,
            currency=wallet.currency,
            card_type=wallet.card_type,
            balance=float(wallet.balance),
            total_income=float(wallet.total_income),
            total_expenses=float(wallet.total_expenses),
            spending_ratio=float(spending_ratio),
            is_high_spending=wallet.is_high_spending,
            transaction_count=len(wallet.transactions),
        )


class CategoryAmount(BaseModel):
    category: str
    amount: float


class SummaryResponse(BaseModel):
    """Response for GET /v1/reports/summary"""

    window: str
    start: datetime
    end: datetime
    income: float
    expense: float
    net: float
    spending_ratio: float
    incoming_count: int
    outgoing_count: int
    average_daily_spending: float
    categories: List[CategoryAmount]


class MonthSchema(BaseModel):
    year: int
    month: int
    income: float
    expense: float
    balance: float

    @classmethod
    def from_domain(cls, month: MonthTotals) -> "MonthSchema":
        return cls(
            year=month.year,
            month=month.month,
            income=float(month.income),
            expense=float(month.expense),
            balance=float(month.balance),
        )


class TrendResponse(BaseModel):
    """Response for GET /v1/reports/monthly"""

    page: int
    total_pages: int
    scale_max: float
    months: List[MonthSchema]


class MonthDetailResponse(MonthSchema):
    """Response for GET /v1/reports/monthly/{year}/{month}"""

    income_transactions: List[TransactionSchema]
    expense_transactions: List[TransactionSchema]


class BudgetCreate(BaseModel):
    """Request body for POST /v1/budgets"""

    category: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2, description="Monthly allocation")

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, value):
        return parse_amount(value)


class BudgetLineSchema(BaseModel):
    category: str
    allocated: float
    spent: float
    remaining: float
    percentage: float
    progress: float
    status: BudgetStatus

    @classmethod
    def from_domain(cls, line: BudgetLine) -> "BudgetLineSchema":
        return cls(
            category=line.category,
            allocated=float(line.allocated),
            spent=float(line.spent),
            remaining=float(line.remaining),
            percentage=float(line.percentage),
            progress=float(line.progress),
            status=line.status,
        )


class SavingGoalSchema(BaseModel):
    goal: float
    savings: float
    percentage: float
    progress: float
    remaining: float
    achieved: bool


class BudgetReportResponse(BaseModel):
    """Response for GET /v1/budgets"""

    window: str
    budgets: List[BudgetLineSchema]
    total_budget: float
    total_spent: float
    total_remaining: float
    income: float
    expenses: float
    savings: float
    saving_goal: Optional[SavingGoalSchema] = None


class SavingGoalUpdate(BaseModel):
    """Request body for PUT /v1/saving-goal"""

    amount: Decimal = Field(..., ge=0, max_digits=14, decimal_places=2)

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, value):
        return parse_amount(value)


class HoldingCreate(BaseModel):
    """Request body for POST /v1/portfolio/crypto and /v1/portfolio/stocks"""

    symbol: str = Field(..., min_length=1, max_length=16)
    name: str = Field(..., min_length=1)
    quantity: Decimal = Field(..., ge=0, max_digits=20, decimal_places=8)
    price: Decimal = Field(..., ge=0, max_digits=20, decimal_places=8)

    @field_validator("quantity", "price", mode="before")
    @classmethod
    def _parse_decimal(cls, value):
        return parse_amount(value)


class HoldingSchema(BaseModel):
    id: str
    symbol: str
    name: str
    quantity: float
    price: float
    value: float
    icon_name: str


class PortfolioResponse(BaseModel):
    """Response for GET /v1/portfolio"""

    crypto_value: float
    stock_value: float
    total_value: float
    crypto: List[HoldingSchema]
    stocks: List[HoldingSchema]


class NoticeResponse(BaseModel):
    """Response for GET /v1/notices"""

    notices: List[str]


class CategoriesResponse(BaseModel):
    """Response for GET /v1/categories"""

    type: Optional[TransactionType] = None
    categories: List[str]


class MonthSpending(BaseModel):
    year: int
    month: int
    amount: float


class OverviewResponse(BaseModel):
    """Response for GET /v1/reports/overview"""

    wallet_count: int
    total_balance: float
    total_income: float
    total_expenses: float
    recent_transactions: List[TransactionSchema]
    spending_by_month: List[MonthSpending]
