"""Unit tests for wallet ledger mutations and derived views"""

import random
import uuid
from datetime import datetime, timedelta
from decimal import Decimal

from wallet_ledger.domain.models import CardType, Transaction, TransactionCategory, TransactionType, Wallet


def income(amount: str, category: str = "Salary", **kwargs) -> Transaction:
    return Transaction(amount=Decimal(amount), category=category, type=TransactionType.INCOME, **kwargs)


def expense(amount: str, category: str = "Food", **kwargs) -> Transaction:
    return Transaction(amount=Decimal(amount), category=category, type=TransactionType.EXPENSE, **kwargs)


def assert_consistent(wallet: Wallet) -> None:
    expected_income = sum((t.amount for t in wallet.income_transactions()), Decimal("0"))
    expected_expenses = sum((t.amount for t in wallet.expense_transactions()), Decimal("0"))
    assert wallet.total_income == expected_income
    assert wallet.total_expenses == expected_expenses
    assert wallet.balance == wallet.total_income - wallet.total_expenses


def test_add_income_scenario(empty_wallet: Wallet):
    """Empty wallet plus a 5000.00 salary"""
    empty_wallet.add_transaction(income("5000.00"))

    assert empty_wallet.balance == Decimal("5000.00")
    assert empty_wallet.total_income == Decimal("5000.00")
    assert empty_wallet.total_expenses == Decimal("0")


def test_add_expense_then_edit_then_delete_scenario(empty_wallet: Wallet):
    """Expense of 120.50, edited to 200.00, then deleted"""
    empty_wallet.add_transaction(income("5000.00"))
    food = expense("120.50")
    empty_wallet.add_transaction(food)
    assert empty_wallet.balance == Decimal("4879.50")

    empty_wallet.edit_transaction(food.id, Decimal("200.00"), "Food", "", food.date)
    assert empty_wallet.total_expenses == Decimal("200.00")
    assert empty_wallet.balance == Decimal("4800.00")

    empty_wallet.remove_transaction(food)
    assert empty_wallet.total_expenses == Decimal("0")
    assert empty_wallet.balance == Decimal("5000.00")
    assert empty_wallet.total_income == Decimal("5000.00")


def test_add_then_remove_restores_totals(empty_wallet: Wallet):
    empty_wallet.add_transaction(income("812.33"))
    empty_wallet.add_transaction(expense("19.99"))
    before = (empty_wallet.balance, empty_wallet.total_income, empty_wallet.total_expenses)

    tx = expense("0.01")
    empty_wallet.add_transaction(tx)
    empty_wallet.remove_transaction(tx)

    assert (empty_wallet.balance, empty_wallet.total_income, empty_wallet.total_expenses) == before


def test_remove_unknown_transaction_is_noop(empty_wallet: Wallet):
    empty_wallet.add_transaction(income("100.00"))

    assert empty_wallet.remove_transaction(uuid.uuid4()) is None
    assert empty_wallet.remove_transaction(expense("5.00")) is None
    assert empty_wallet.balance == Decimal("100.00")
    assert len(empty_wallet.transactions) == 1


def test_edit_unknown_transaction_is_noop(empty_wallet: Wallet):
    empty_wallet.add_transaction(income("100.00"))

    result = empty_wallet.edit_transaction(uuid.uuid4(), Decimal("1.00"), "X", "", datetime.now())

    assert result is None
    assert empty_wallet.total_income == Decimal("100.00")


def test_edit_replaces_mutable_fields(empty_wallet: Wallet):
    tx = expense("10.00", note="lunch")
    empty_wallet.add_transaction(tx)
    new_date = datetime(2025, 1, 2, 8, 30)

    empty_wallet.edit_transaction(tx.id, Decimal("12.00"), "Dining", "dinner", new_date)

    assert tx.amount == Decimal("12.00")
    assert tx.category == "Dining"
    assert tx.note == "dinner"
    assert tx.date == new_date
    assert tx.type == TransactionType.EXPENSE


def test_random_mutation_sequence_keeps_invariant(empty_wallet: Wallet):
    """balance == income - expenses after every add/edit/remove"""
    rng = random.Random(1234)

    for _ in range(300):
        op = rng.choice(["add", "add", "edit", "remove"])
        amount = Decimal(rng.randint(1, 100_000)) / 100

        if op == "add" or not empty_wallet.transactions:
            tx_type = rng.choice([TransactionType.INCOME, TransactionType.EXPENSE])
            empty_wallet.add_transaction(Transaction(amount=amount, category="Other", type=tx_type))
        elif op == "edit":
            tx = rng.choice(empty_wallet.transactions)
            empty_wallet.edit_transaction(tx.id, amount, tx.category, tx.note, tx.date)
        else:
            empty_wallet.remove_transaction(rng.choice(empty_wallet.transactions))

        assert empty_wallet.balance == empty_wallet.total_income - empty_wallet.total_expenses

    assert_consistent(empty_wallet)


def test_recalculate_totals_is_idempotent_and_corrects_drift(empty_wallet: Wallet):
    empty_wallet.add_transaction(income("300.00"))
    empty_wallet.add_transaction(expense("75.10"))

    # Simulate stored totals that drifted from the transactions
    empty_wallet.total_income = Decimal("1.00")
    empty_wallet.balance = Decimal("-42.00")

    empty_wallet.recalculate_totals()
    first = (empty_wallet.balance, empty_wallet.total_income, empty_wallet.total_expenses)
    empty_wallet.recalculate_totals()

    assert first == (Decimal("224.90"), Decimal("300.00"), Decimal("75.10"))
    assert (empty_wallet.balance, empty_wallet.total_income, empty_wallet.total_expenses) == first


def test_recent_transactions_returns_fewer_when_fewer_exist(empty_wallet: Wallet):
    base = datetime(2025, 5, 1)
    oldest = income("1.00", date=base)
    newest = expense("2.00", date=base + timedelta(days=2))
    middle = expense("3.00", date=base + timedelta(days=1))
    for tx in (oldest, newest, middle):
        empty_wallet.add_transaction(tx)

    recent = empty_wallet.recent_transactions(limit=5)

    assert [t.id for t in recent] == [newest.id, middle.id, oldest.id]


def test_recent_transactions_default_limit(empty_wallet: Wallet):
    base = datetime(2025, 5, 1)
    for i in range(15):
        empty_wallet.add_transaction(expense("1.00", date=base + timedelta(hours=i)))

    recent = empty_wallet.recent_transactions()

    assert len(recent) == 10
    assert recent[0].date == base + timedelta(hours=14)


def test_type_filters_keep_insertion_order(empty_wallet: Wallet):
    a = income("1.00")
    b = expense("2.00")
    c = income("3.00")
    for tx in (a, b, c):
        empty_wallet.add_transaction(tx)

    assert [t.id for t in empty_wallet.income_transactions()] == [a.id, c.id]
    assert [t.id for t in empty_wallet.expense_transactions()] == [b.id]


def test_toggle_card_type(empty_wallet: Wallet):
    assert empty_wallet.card_type == CardType.DEBIT
    assert empty_wallet.toggle_card_type() == CardType.CREDIT
    assert empty_wallet.toggle_card_type() == CardType.DEBIT


def test_high_spending_threshold(empty_wallet: Wallet):
    empty_wallet.add_transaction(income("100.00"))
    empty_wallet.add_transaction(expense("50.00"))
    assert empty_wallet.is_high_spending is False

    empty_wallet.add_transaction(expense("0.01"))
    assert empty_wallet.is_high_spending is True


def test_categories_offered_per_type():
    income_categories = TransactionCategory.for_type(TransactionType.INCOME)
    expense_categories = TransactionCategory.for_type(TransactionType.EXPENSE)

    assert TransactionCategory.SALARY in income_categories
    assert TransactionCategory.SALARY not in expense_categories
    assert TransactionCategory.RENT in expense_categories
    assert TransactionCategory.OTHER in income_categories and TransactionCategory.OTHER in expense_categories
