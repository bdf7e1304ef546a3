"""SQLAlchemy ORM models for the ledger store"""

import uuid
from sqlalchemy import Column, String, Numeric, DateTime, Integer, ForeignKey, Text, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

# Bump whenever a table changes shape; a mismatch resets the store on startup
SCHEMA_VERSION = 1

MONEY = Numeric(14, 2, asdecimal=True)
QUANTITY = Numeric(20, 8, asdecimal=True)


class SchemaMeta(Base):
    """Single-row table recording which schema version created the store"""

    __tablename__ = "schema_meta"

    id = Column(Integer, primary_key=True, default=1)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class WalletRecord(Base):
    """Account with its stored running totals"""

    __tablename__ = "wallet"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    currency = Column(String(8), nullable=False, default="$")
    card_type = Column(String(16), nullable=False, default="DEBIT")
    balance = Column(MONEY, nullable=False, default=0)
    total_income = Column(MONEY, nullable=False, default=0)
    total_expenses = Column(MONEY, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    transactions = relationship(
        "TransactionRecord", back_populates="wallet", cascade="all, delete-orphan"
    )


class TransactionRecord(Base):
    """Single income or expense owned by a wallet"""

    __tablename__ = "ledger_transaction"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    wallet_id = Column(Uuid, ForeignKey("wallet.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(MONEY, nullable=False)
    date = Column(DateTime, nullable=False, index=True)
    category = Column(Text, nullable=False)
    type = Column(String(16), nullable=False)
    note = Column(Text, nullable=False, default="")

    wallet = relationship("WalletRecord", back_populates="transactions")


class BudgetRecord(Base):
    """Monthly allocation for one category"""

    __tablename__ = "budget"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    category = Column(Text, nullable=False)
    allocated = Column(MONEY, nullable=False)


class SavingGoalRecord(Base):
    """Single-row monthly saving goal"""

    __tablename__ = "saving_goal"

    id = Column(Integer, primary_key=True, default=1)
    amount = Column(MONEY, nullable=False, default=0)


class CryptoAssetRecord(Base):
    __tablename__ = "crypto_asset"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    symbol = Column(String(16), nullable=False)
    name = Column(Text, nullable=False)
    amount = Column(QUANTITY, nullable=False)
    price = Column(QUANTITY, nullable=False)
    icon_name = Column(Text, nullable=False)


class StockRecord(Base):
    __tablename__ = "stock"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    symbol = Column(String(16), nullable=False)
    name = Column(Text, nullable=False)
    shares = Column(QUANTITY, nullable=False)
    price = Column(QUANTITY, nullable=False)
    icon_name = Column(Text, nullable=False)
