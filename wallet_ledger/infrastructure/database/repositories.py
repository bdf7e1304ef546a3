"""Data access layer for ledger entities"""

import uuid
from decimal import Decimal
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from wallet_ledger.domain.exceptions import PersistenceError
from wallet_ledger.domain.models import (
    ZERO,
    Budget,
    CardType,
    CryptoAsset,
    Stock,
    Transaction,
    TransactionType,
    Wallet,
)
from wallet_ledger.infrastructure.database.models import (
    BudgetRecord,
    CryptoAssetRecord,
    SavingGoalRecord,
    StockRecord,
    TransactionRecord,
    WalletRecord,
)


def _to_transaction(row: TransactionRecord) -> Transaction:
    return Transaction(
        id=row.id,
        amount=Decimal(row.amount),
        date=row.date,
        category=row.category,
        type=TransactionType(row.type),
        note=row.note or "",
    )


def _to_wallet(record: WalletRecord) -> Wallet:
    return Wallet(
        id=record.id,
        name=record.name,
        currency=record.currency,
        card_type=CardType(record.card_type),
        balance=Decimal(record.balance),
        total_income=Decimal(record.total_income),
        total_expenses=Decimal(record.total_expenses),
        transactions=[
            _to_transaction(row) for row in sorted(record.transactions, key=lambda r: r.date)
        ],
    )


class WalletRepository:
    """Repository for wallets and the transactions they own"""

    def __init__(self, db: Session):
        self.db = db

    def load_all(self) -> List[Wallet]:
        """Fetch every wallet with its transactions, oldest wallet first"""
        records = (
            self.db.query(WalletRecord)
            .order_by(WalletRecord.created_at, WalletRecord.name)
            .all()
        )
        return [_to_wallet(r) for r in records]

    def save(self, wallet: Wallet) -> WalletRecord:
        """Upsert the wallet and make its stored transactions match the in-memory set"""
        record = self.db.get(WalletRecord, wallet.id)
        if record is None:
            record = WalletRecord(id=wallet.id)
            self.db.add(record)

        record.name = wallet.name
        record.currency = wallet.currency
        record.card_type = wallet.card_type.value
        record.balance = wallet.balance
        record.total_income = wallet.total_income
        record.total_expenses = wallet.total_expenses

        stored = {row.id: row for row in record.transactions}
        for tx in wallet.transactions:
            row = stored.pop(tx.id, None)
            if row is None:
                row = TransactionRecord(id=tx.id)
                record.transactions.append(row)
            row.amount = tx.amount
            row.date = tx.date
            row.category = tx.category
            row.type = tx.type.value
            row.note = tx.note

        # Whatever is left was removed in memory; delete-orphan drops the rows
        for row in stored.values():
            record.transactions.remove(row)

        self.db.flush()
        return record

    def delete(self, wallet_id: uuid.UUID) -> bool:
        """Delete a wallet; its transactions cascade"""
        record = self.db.get(WalletRecord, wallet_id)
        if record is None:
            return False
        self.db.delete(record)
        self.db.flush()
        return True


class SqlWalletStore:
    """
    Persistence port backed by SQLAlchemy.

    Each call runs in its own session and commits. Database errors are
    rolled back and re-raised as PersistenceError.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def load_all(self) -> List[Wallet]:
        with self.session_factory() as db:
            try:
                return WalletRepository(db).load_all()
            except SQLAlchemyError as e:
                db.rollback()
                raise PersistenceError(f"Could not load wallets: {e}") from e

    def save(self, wallet: Wallet) -> None:
        with self.session_factory() as db:
            try:
                WalletRepository(db).save(wallet)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise PersistenceError(f"Could not save wallet {wallet.id}: {e}") from e

    def delete(self, wallet_id: uuid.UUID) -> None:
        with self.session_factory() as db:
            try:
                WalletRepository(db).delete(wallet_id)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise PersistenceError(f"Could not delete wallet {wallet_id}: {e}") from e


class BudgetRepository:
    """Repository for category budgets and the monthly saving goal"""

    def __init__(self, db: Session):
        self.db = db

    def list_budgets(self) -> List[Budget]:
        rows = self.db.query(BudgetRecord).order_by(BudgetRecord.category).all()
        return [Budget(id=r.id, category=r.category, allocated=Decimal(r.allocated)) for r in rows]

    def add_budget(self, budget: Budget) -> BudgetRecord:
        row = BudgetRecord(id=budget.id, category=budget.category, allocated=budget.allocated)
        self.db.add(row)
        self.db.flush()
        return row

    def get_saving_goal(self) -> Decimal:
        row = self.db.get(SavingGoalRecord, 1)
        return Decimal(row.amount) if row is not None else ZERO

    def set_saving_goal(self, amount: Decimal) -> None:
        row = self.db.get(SavingGoalRecord, 1)
        if row is None:
            row = SavingGoalRecord(id=1)
            self.db.add(row)
        row.amount = amount
        self.db.flush()


class HoldingRepository:
    """Repository for crypto and stock holdings"""

    def __init__(self, db: Session):
        self.db = db

    def list_crypto(self) -> List[CryptoAsset]:
        rows = self.db.query(CryptoAssetRecord).order_by(CryptoAssetRecord.symbol).all()
        return [
            CryptoAsset(
                id=r.id,
                symbol=r.symbol,
                name=r.name,
                amount=Decimal(r.amount),
                price=Decimal(r.price),
                icon_name=r.icon_name,
            )
            for r in rows
        ]

    def add_crypto(self, asset: CryptoAsset) -> CryptoAssetRecord:
        row = CryptoAssetRecord(
            id=asset.id,
            symbol=asset.symbol,
            name=asset.name,
            amount=asset.amount,
            price=asset.price,
            icon_name=asset.icon_name,
        )
        self.db.add(row)
        self.db.flush()
        return row

    def list_stocks(self) -> List[Stock]:
        rows = self.db.query(StockRecord).order_by(StockRecord.symbol).all()
        return [
            Stock(
                id=r.id,
                symbol=r.symbol,
                name=r.name,
                shares=Decimal(r.shares),
                price=Decimal(r.price),
                icon_name=r.icon_name,
            )
            for r in rows
        ]

    def add_stock(self, stock: Stock) -> StockRecord:
        row = StockRecord(
            id=stock.id,
            symbol=stock.symbol,
            name=stock.name,
            shares=stock.shares,
            price=stock.price,
            icon_name=stock.icon_name,
        )
        self.db.add(row)
        self.db.flush()
        return row
