"""Unit tests for LedgerService"""

import threading
import uuid
from datetime import datetime
from decimal import Decimal

import pytest

from wallet_ledger.domain.exceptions import WalletNotFoundError
from wallet_ledger.domain.models import CardType, Transaction, TransactionType, Wallet
from wallet_ledger.services.ledger import LedgerService


def test_default_wallet_created_when_store_is_empty(memory_store):
    service = LedgerService(memory_store)

    wallets = service.ensure_default_wallet()

    assert len(wallets) == 1
    assert wallets[0].name == "My Wallet"
    assert wallets[0].currency == "$"
    assert wallets[0].card_type == CardType.DEBIT
    assert wallets[0].balance == Decimal("0")
    assert wallets[0].id in memory_store.saved


def test_loaded_wallets_are_reconciled(memory_store):
    stored = Wallet(name="Stored", balance=Decimal("999"), total_income=Decimal("1"))
    stored.transactions.append(
        Transaction(amount=Decimal("40.00"), category="Salary", type=TransactionType.INCOME)
    )
    memory_store.initial = [stored]
    service = LedgerService(memory_store)

    wallets = service.ensure_default_wallet()

    assert [w.name for w in wallets] == ["Stored"]
    assert wallets[0].balance == Decimal("40.00")
    assert wallets[0].total_income == Decimal("40.00")


def test_record_edit_delete_persist_each_step(memory_store):
    service = LedgerService(memory_store)
    wallet = service.ensure_default_wallet()[0]

    service.record_transaction(wallet.id, Decimal("5000.00"), "Salary", TransactionType.INCOME)
    food = service.record_transaction(wallet.id, Decimal("120.50"), "Food", TransactionType.EXPENSE)
    assert memory_store.saved[wallet.id].balance == Decimal("4879.50")

    service.edit_transaction(wallet.id, food.id, Decimal("200.00"), "Food", "", food.date)
    assert memory_store.saved[wallet.id].total_expenses == Decimal("200.00")

    service.delete_transaction(wallet.id, food.id)
    saved = memory_store.saved[wallet.id]
    assert saved.balance == Decimal("5000.00")
    assert len(saved.transactions) == 1


def test_unknown_transaction_is_noop(memory_store):
    service = LedgerService(memory_store)
    wallet = service.ensure_default_wallet()[0]
    memory_store.saved.clear()

    assert service.delete_transaction(wallet.id, uuid.uuid4()) is None
    assert service.edit_transaction(
        wallet.id, uuid.uuid4(), Decimal("1"), "Food", "", datetime.now()
    ) is None
    assert memory_store.saved == {}


def test_unknown_wallet_raises(memory_store):
    service = LedgerService(memory_store)
    service.ensure_default_wallet()

    with pytest.raises(WalletNotFoundError):
        service.get_wallet(uuid.uuid4())
    with pytest.raises(WalletNotFoundError):
        service.record_transaction(uuid.uuid4(), Decimal("1"), "Food", TransactionType.EXPENSE)
    with pytest.raises(WalletNotFoundError):
        service.delete_wallet(uuid.uuid4())


def test_add_and_delete_wallet(memory_store):
    service = LedgerService(memory_store)
    service.ensure_default_wallet()

    travel = service.add_wallet("Travel", currency="€", card_type=CardType.CREDIT)
    service.record_transaction(travel.id, Decimal("80"), "Transportation", TransactionType.EXPENSE)
    assert len(service.list_wallets()) == 2

    service.delete_wallet(travel.id)

    assert len(service.list_wallets()) == 1
    assert memory_store.deleted == [travel.id]
    assert all(t.category != "Transportation" for t in service.transactions_for())


def test_toggle_card_type_persists(memory_store):
    service = LedgerService(memory_store)
    wallet = service.ensure_default_wallet()[0]

    service.toggle_card_type(wallet.id)

    assert memory_store.saved[wallet.id].card_type == CardType.CREDIT


def test_failed_save_keeps_in_memory_state(failing_store):
    service = LedgerService(failing_store)
    wallet = service.ensure_default_wallet()[0]

    service.record_transaction(wallet.id, Decimal("75.00"), "Gift", TransactionType.INCOME)

    assert service.get_wallet(wallet.id).balance == Decimal("75.00")
    assert len(service.transactions_for(wallet.id)) == 1


def test_failed_delete_still_removes_wallet(failing_store):
    service = LedgerService(failing_store)
    service.ensure_default_wallet()
    extra = service.add_wallet("Extra")

    service.delete_wallet(extra.id)

    with pytest.raises(WalletNotFoundError):
        service.get_wallet(extra.id)


def test_transactions_for_spans_every_wallet(memory_store):
    service = LedgerService(memory_store)
    first = service.ensure_default_wallet()[0]
    second = service.add_wallet("Second")
    service.record_transaction(first.id, Decimal("1"), "Food", TransactionType.EXPENSE)
    service.record_transaction(second.id, Decimal("2"), "Food", TransactionType.EXPENSE)

    assert len(service.transactions_for()) == 2
    assert len(service.transactions_for(second.id)) == 1


def test_unreadable_store_starts_from_default_wallet(failing_store):
    failing_store.initial = [Wallet(name="Unreachable")]
    service = LedgerService(failing_store)

    wallets = service.ensure_default_wallet()

    assert [w.name for w in wallets] == ["My Wallet"]
    assert wallets[0].balance == Decimal("0")


def test_lookup_waits_for_in_flight_mutation(memory_store):
    service = LedgerService(memory_store)
    wallet = service.ensure_default_wallet()[0]
    holding = threading.Event()
    release = threading.Event()
    found = []

    def mutate():
        with service._lock:
            holding.set()
            release.wait(5)

    writer = threading.Thread(target=mutate)
    writer.start()
    holding.wait(5)

    reader = threading.Thread(target=lambda: found.append(service.get_wallet(wallet.id)))
    reader.start()
    reader.join(0.2)
    assert found == []

    release.set()
    reader.join(5)
    writer.join(5)
    assert found == [wallet]
