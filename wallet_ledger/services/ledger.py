"""Ledger service - owns the loaded wallets and persists every mutation"""

import logging
import threading
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Protocol

from wallet_ledger.config import settings
from wallet_ledger.domain.exceptions import PersistenceError, WalletNotFoundError
from wallet_ledger.domain.models import CardType, Transaction, TransactionType, Wallet
from wallet_ledger.infrastructure.observability.logging import log_mutation
from wallet_ledger.infrastructure.observability.metrics import (
    persistence_failures_counter,
    record_transaction,
    transactions_deleted_counter,
    wallets_created_counter,
)

logger = logging.getLogger(__name__)


class WalletStore(Protocol):
    """Persistence port the service is constructed with"""

    def load_all(self) -> List[Wallet]: ...

    def save(self, wallet: Wallet) -> None: ...

    def delete(self, wallet_id: uuid.UUID) -> None: ...


class LedgerService:
    """
    In-memory wallet set backed by a WalletStore.

    Flow for every mutation:
    1. Apply the change to the in-memory wallet
    2. Reconcile totals from the transaction set
    3. Save through the store; a failed save is logged and counted but the
       in-memory change is kept, so memory may run ahead of the store until
       the next successful save
    """

    def __init__(self, store: WalletStore):
        self.store = store
        self._wallets: Dict[uuid.UUID, Wallet] = {}
        self._lock = threading.RLock()

    def ensure_default_wallet(self) -> List[Wallet]:
        """
        Load every stored wallet, or synthesize the default wallet when none exist.

        Run once at startup. Loaded totals are re-derived from their
        transactions to correct any drift in the stored values. A store that
        cannot be read is logged and counted, and the service starts from the
        default wallet.
        """
        with self._lock:
            self._wallets = {}
            try:
                loaded = self.store.load_all()
            except PersistenceError as e:
                persistence_failures_counter.labels(operation="load").inc()
                logger.error(f"Failed to load wallets, starting empty: {e}")
                loaded = []

            for wallet in loaded:
                wallet.recalculate_totals()
                self._wallets[wallet.id] = wallet

            if not self._wallets:
                wallet = Wallet(
                    name=settings.default_wallet_name,
                    currency=settings.default_currency,
                )
                self._wallets[wallet.id] = wallet
                wallets_created_counter.labels(origin="default").inc()
                logger.info("Created default wallet", extra={"wallet_id": str(wallet.id)})
                self._save(wallet)

            return self.list_wallets()

    def list_wallets(self) -> List[Wallet]:
        with self._lock:
            return list(self._wallets.values())

    def get_wallet(self, wallet_id: uuid.UUID) -> Wallet:
        with self._lock:
            wallet = self._wallets.get(wallet_id)
            if wallet is None:
                raise WalletNotFoundError(f"Wallet {wallet_id} not found")
            return wallet

    def add_wallet(
        self,
        name: str,
        currency: Optional[str] = None,
        card_type: CardType = CardType.DEBIT,
    ) -> Wallet:
        with self._lock:
            wallet = Wallet(
                name=name,
                currency=currency or settings.default_currency,
                card_type=card_type,
            )
            self._wallets[wallet.id] = wallet
            wallets_created_counter.labels(origin="user").inc()
            log_mutation("wallet_added", wallet)
            self._save(wallet)
            return wallet

    def delete_wallet(self, wallet_id: uuid.UUID) -> None:
        """Remove a wallet and, by cascade, every transaction it owns"""
        with self._lock:
            wallet = self._wallets.pop(wallet_id, None)
            if wallet is None:
                raise WalletNotFoundError(f"Wallet {wallet_id} not found")
            log_mutation("wallet_deleted", wallet, transaction_count=len(wallet.transactions))
            try:
                self.store.delete(wallet_id)
            except PersistenceError as e:
                persistence_failures_counter.labels(operation="delete").inc()
                logger.error(f"Failed to delete wallet: {e}", extra={"wallet_id": str(wallet_id)})

    def toggle_card_type(self, wallet_id: uuid.UUID) -> Wallet:
        with self._lock:
            wallet = self.get_wallet(wallet_id)
            wallet.toggle_card_type()
            log_mutation("card_type_toggled", wallet, card_type=wallet.card_type.value)
            self._save(wallet)
            return wallet

    def record_transaction(
        self,
        wallet_id: uuid.UUID,
        amount: Decimal,
        category: str,
        tx_type: TransactionType,
        note: str = "",
        date: Optional[datetime] = None,
    ) -> Transaction:
        """Record a pre-validated transaction against a wallet"""
        with self._lock:
            wallet = self.get_wallet(wallet_id)
            transaction = Transaction(
                amount=amount,
                category=category,
                type=tx_type,
                note=note,
                date=date or datetime.now(),
            )
            wallet.add_transaction(transaction)
            wallet.recalculate_totals()
            record_transaction(tx_type.value)
            log_mutation(
                "transaction_added",
                wallet,
                transaction_id=str(transaction.id),
                transaction_type=tx_type.value,
            )
            self._save(wallet)
            return transaction

    def edit_transaction(
        self,
        wallet_id: uuid.UUID,
        transaction_id: uuid.UUID,
        amount: Decimal,
        category: str,
        note: str,
        date: datetime,
    ) -> Optional[Transaction]:
        """Edit in place; an unknown transaction id is a silent no-op returning None"""
        with self._lock:
            wallet = self.get_wallet(wallet_id)
            edited = wallet.edit_transaction(transaction_id, amount, category, note, date)
            if edited is None:
                return None
            wallet.recalculate_totals()
            log_mutation("transaction_edited", wallet, transaction_id=str(transaction_id))
            self._save(wallet)
            return edited

    def delete_transaction(self, wallet_id: uuid.UUID, transaction_id: uuid.UUID) -> Optional[Transaction]:
        """Delete and reverse totals; an unknown transaction id is a silent no-op"""
        with self._lock:
            wallet = self.get_wallet(wallet_id)
            removed = wallet.remove_transaction(transaction_id)
            if removed is None:
                return None
            wallet.recalculate_totals()
            transactions_deleted_counter.inc()
            log_mutation("transaction_deleted", wallet, transaction_id=str(transaction_id))
            self._save(wallet)
            return removed

    def recalculate(self, wallet_id: uuid.UUID) -> Wallet:
        with self._lock:
            wallet = self.get_wallet(wallet_id)
            wallet.recalculate_totals()
            log_mutation("totals_recalculated", wallet)
            self._save(wallet)
            return wallet

    def transactions_for(self, wallet_id: Optional[uuid.UUID] = None) -> List[Transaction]:
        """Snapshot of one wallet's transactions, or of every wallet's when no id is given"""
        with self._lock:
            if wallet_id is not None:
                return list(self.get_wallet(wallet_id).transactions)
            return [t for w in self._wallets.values() for t in w.transactions]

    def _save(self, wallet: Wallet) -> None:
        try:
            self.store.save(wallet)
        except PersistenceError as e:
            persistence_failures_counter.labels(operation="save").inc()
            logger.error(f"Failed to save wallet: {e}", extra={"wallet_id": str(wallet.id)})
