"""Domain models - pure Python dataclasses representing ledger entities"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Union

ZERO = Decimal("0")


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class CardType(str, Enum):
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class TransactionCategory(str, Enum):
    """Predefined categories offered by the add/edit forms.

    Free-form categories outside this set are still accepted.
    """

    SALARY = "Salary"
    INVESTMENT = "Investment"
    GIFT = "Gift"
    FOOD = "Food"
    TRANSPORTATION = "Transportation"
    ENTERTAINMENT = "Entertainment"
    UTILITIES = "Utilities"
    RENT = "Rent"
    SHOPPING = "Shopping"
    HEALTH = "Health"
    EDUCATION = "Education"
    OTHER = "Other"

    @classmethod
    def for_type(cls, tx_type: TransactionType) -> List["TransactionCategory"]:
        if tx_type == TransactionType.INCOME:
            return [cls.SALARY, cls.INVESTMENT, cls.GIFT, cls.OTHER]
        return [
            cls.FOOD,
            cls.TRANSPORTATION,
            cls.ENTERTAINMENT,
            cls.UTILITIES,
            cls.RENT,
            cls.SHOPPING,
            cls.HEALTH,
            cls.EDUCATION,
            cls.OTHER,
        ]


@dataclass
class Transaction:
    """One income or expense event; amount is always a magnitude"""

    amount: Decimal
    category: str
    type: TransactionType
    date: datetime = field(default_factory=datetime.now)
    note: str = ""
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass
class Wallet:
    """
    An account owning a set of transactions plus running totals.

    Invariant after every mutation:
        balance == total_income - total_expenses
    and both totals equal the sums over the owned transactions by type.
    """

    name: str
    currency: str = "$"
    card_type: CardType = CardType.DEBIT
    balance: Decimal = ZERO
    total_income: Decimal = ZERO
    total_expenses: Decimal = ZERO
    transactions: List[Transaction] = field(default_factory=list)
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def find_transaction(self, transaction_id: uuid.UUID) -> Optional[Transaction]:
        for tx in self.transactions:
            if tx.id == transaction_id:
                return tx
        return None

    def add_transaction(self, transaction: Transaction) -> None:
        """Append a transaction and fold its amount into the running totals"""
        self.transactions.append(transaction)
        self._apply(transaction.type, transaction.amount)

    def remove_transaction(
        self, transaction: Union[Transaction, uuid.UUID]
    ) -> Optional[Transaction]:
        """
        Remove a transaction and reverse its effect on the totals.

        Unknown transactions are ignored and None is returned.
        """
        tx_id = transaction.id if isinstance(transaction, Transaction) else transaction
        existing = self.find_transaction(tx_id)
        if existing is None:
            return None

        self.transactions.remove(existing)
        self._apply(existing.type, -existing.amount)
        return existing

    def edit_transaction(
        self,
        transaction_id: uuid.UUID,
        amount: Decimal,
        category: str,
        note: str,
        date: datetime,
    ) -> Optional[Transaction]:
        """Replace the mutable fields in place, applying only the amount delta to the totals"""
        existing = self.find_transaction(transaction_id)
        if existing is None:
            return None

        delta = amount - existing.amount
        existing.amount = amount
        existing.category = category
        existing.note = note
        existing.date = date
        self._apply(existing.type, delta)
        return existing

    def recalculate_totals(self) -> None:
        """Re-derive every total from a full scan, discarding stored values"""
        total_income = sum(
            (t.amount for t in self.transactions if t.type == TransactionType.INCOME), ZERO
        )
        total_expenses = sum(
            (t.amount for t in self.transactions if t.type == TransactionType.EXPENSE), ZERO
        )
        self.total_income = total_income
        self.total_expenses = total_expenses
        self.balance = total_income - total_expenses

    def recent_transactions(self, limit: int = 10) -> List[Transaction]:
        """Most recent first; sorted() is stable so equal dates keep insertion order"""
        if limit <= 0:
            return []
        return sorted(self.transactions, key=lambda t: t.date, reverse=True)[:limit]

    def income_transactions(self) -> List[Transaction]:
        return [t for t in self.transactions if t.type == TransactionType.INCOME]

    def expense_transactions(self) -> List[Transaction]:
        return [t for t in self.transactions if t.type == TransactionType.EXPENSE]

    def toggle_card_type(self) -> CardType:
        self.card_type = CardType.CREDIT if self.card_type == CardType.DEBIT else CardType.DEBIT
        return self.card_type

    @property
    def is_high_spending(self) -> bool:
        return self.total_expenses > self.total_income * Decimal("0.5")

    def _apply(self, tx_type: TransactionType, amount: Decimal) -> None:
        if tx_type == TransactionType.INCOME:
            self.total_income += amount
            self.balance += amount
        else:
            self.total_expenses += amount
            self.balance -= amount


@dataclass
class Budget:
    """Monthly spending allocation for one category"""

    category: str
    allocated: Decimal
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass
class CryptoAsset:
    symbol: str
    name: str
    amount: Decimal
    price: Decimal
    icon_name: str = "bitcoinsign.circle.fill"
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def value(self) -> Decimal:
        return self.amount * self.price


@dataclass
class Stock:
    symbol: str
    name: str
    shares: Decimal
    price: Decimal
    icon_name: str = "chart.line.uptrend.xyaxis"
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def value(self) -> Decimal:
        return self.shares * self.price


class TimeWindow(str, Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class BudgetStatus(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    OVER_BUDGET = "over_budget"


@dataclass
class WindowTotals:
    """Income/expense sums over one calendar-aligned window"""

    start: datetime
    end: datetime
    income: Decimal
    expense: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass
class MonthTotals:
    year: int
    month: int
    income: Decimal
    expense: Decimal

    @property
    def balance(self) -> Decimal:
        return self.income - self.expense


@dataclass
class BudgetLine:
    """Outcome of comparing one budget against actual spend"""

    category: str
    allocated: Decimal
    spent: Decimal
    remaining: Decimal
    percentage: Decimal
    progress: Decimal
    status: BudgetStatus


@dataclass
class BudgetReport:
    window: TimeWindow
    lines: List[BudgetLine]
    total_budget: Decimal
    total_spent: Decimal
    total_remaining: Decimal
    income: Decimal
    expenses: Decimal

    @property
    def savings(self) -> Decimal:
        return self.income - self.expenses


@dataclass
class SavingGoalProgress:
    goal: Decimal
    savings: Decimal
    percentage: Decimal
    progress: Decimal
    remaining: Decimal
    achieved: bool


@dataclass
class PortfolioSummary:
    crypto_value: Decimal
    stock_value: Decimal

    @property
    def total_value(self) -> Decimal:
        return self.crypto_value + self.stock_value
