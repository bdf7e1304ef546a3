"""Pytest fixtures for testing"""

import copy
import uuid
import pytest
from datetime import datetime
from decimal import Decimal
from typing import Dict, Generator, List
from fastapi.testclient import TestClient
from wallet_ledger.api.main import create_app
from wallet_ledger.domain.exceptions import PersistenceError
from wallet_ledger.domain.models import Transaction, TransactionType, Wallet
from wallet_ledger.utils.date_utils import add_months


class MemoryStore:
    """WalletStore that keeps deep copies of whatever it is asked to save"""

    def __init__(self, wallets: List[Wallet] | None = None):
        self.initial = wallets or []
        self.saved: Dict[uuid.UUID, Wallet] = {}
        self.deleted: List[uuid.UUID] = []

    def load_all(self) -> List[Wallet]:
        return list(self.initial)

    def save(self, wallet: Wallet) -> None:
        self.saved[wallet.id] = copy.deepcopy(wallet)

    def delete(self, wallet_id: uuid.UUID) -> None:
        self.deleted.append(wallet_id)


class FailingStore(MemoryStore):
    """WalletStore whose reads and writes always fail"""

    def load_all(self) -> List[Wallet]:
        raise PersistenceError("store is temporarily unavailable")

    def save(self, wallet: Wallet) -> None:
        raise PersistenceError("store is temporarily unavailable")

    def delete(self, wallet_id: uuid.UUID) -> None:
        raise PersistenceError("store is temporarily unavailable")


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()


@pytest.fixture
def db_url(tmp_path) -> str:
    """File-backed SQLite URL unique to the test"""
    return f"sqlite:///{tmp_path / 'ledger.db'}"


@pytest.fixture
def client(db_url: str) -> Generator[TestClient, None, None]:
    """FastAPI test client; entering the context runs startup against the test database"""
    app = create_app(db_url)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def default_wallet_id(client: TestClient) -> str:
    wallets = client.get("/v1/wallets").json()
    return wallets[0]["id"]


@pytest.fixture
def empty_wallet() -> Wallet:
    return Wallet(name="Test Wallet")


@pytest.fixture
def two_month_transactions() -> List[Transaction]:
    """Income and expenses in the current month plus the month before it"""
    now = datetime.now()
    prev_year, prev_month = add_months(now.year, now.month, -1)
    this_month = datetime(now.year, now.month, 1, 9, 0)
    last_month = datetime(prev_year, prev_month, 15, 12, 0)

    return [
        Transaction(amount=Decimal("3000.00"), category="Salary", type=TransactionType.INCOME, date=this_month),
        Transaction(amount=Decimal("45.25"), category="Food", type=TransactionType.EXPENSE, date=this_month),
        Transaction(amount=Decimal("2500.00"), category="Salary", type=TransactionType.INCOME, date=last_month),
        Transaction(amount=Decimal("900.00"), category="Rent", type=TransactionType.EXPENSE, date=last_month),
    ]
