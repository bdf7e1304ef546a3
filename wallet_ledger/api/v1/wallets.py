"""Wallet, transaction, and category endpoints"""

import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from wallet_ledger.api.dependencies import get_ledger_service, get_request_id
from wallet_ledger.api.v1.schemas import (
    CategoriesResponse,
    TransactionCreate,
    TransactionSchema,
    TransactionUpdate,
    WalletCreate,
    WalletSchema,
)
from wallet_ledger.config import settings
from wallet_ledger.domain.aggregation import spending_ratio
from wallet_ledger.domain.exceptions import WalletNotFoundError
from wallet_ledger.domain.models import TransactionCategory, TransactionType, Wallet
from wallet_ledger.services.ledger import LedgerService

router = APIRouter()


def to_wallet_schema(wallet: Wallet) -> WalletSchema:
    return WalletSchema.from_domain(
        wallet, spending_ratio(wallet.total_income, wallet.total_expenses)
    )


def wallet_or_404(ledger: LedgerService, wallet_id: uuid.UUID, request: Request) -> Wallet:
    try:
        return ledger.get_wallet(wallet_id)
    except WalletNotFoundError as e:
        logging.warning(f"Wallet lookup failed: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=404, detail="Wallet not found")


@router.get("/wallets", response_model=List[WalletSchema])
def list_wallets(ledger: LedgerService = Depends(get_ledger_service)):
    return [to_wallet_schema(w) for w in ledger.list_wallets()]


@router.post("/wallets", response_model=WalletSchema, status_code=201)
def create_wallet(body: WalletCreate, ledger: LedgerService = Depends(get_ledger_service)):
    wallet = ledger.add_wallet(body.name, currency=body.currency, card_type=body.card_type)
    return to_wallet_schema(wallet)


@router.get("/wallets/{wallet_id}", response_model=WalletSchema)
def get_wallet(
    wallet_id: uuid.UUID,
    request: Request,
    ledger: LedgerService = Depends(get_ledger_service),
):
    return to_wallet_schema(wallet_or_404(ledger, wallet_id, request))


@router.delete("/wallets/{wallet_id}", status_code=204)
def delete_wallet(
    wallet_id: uuid.UUID,
    request: Request,
    ledger: LedgerService = Depends(get_ledger_service),
):
    wallet_or_404(ledger, wallet_id, request)
    ledger.delete_wallet(wallet_id)
    return Response(status_code=204)


@router.post("/wallets/{wallet_id}/card-type", response_model=WalletSchema)
def toggle_card_type(
    wallet_id: uuid.UUID,
    request: Request,
    ledger: LedgerService = Depends(get_ledger_service),
):
    wallet_or_404(ledger, wallet_id, request)
    return to_wallet_schema(ledger.toggle_card_type(wallet_id))


@router.post("/wallets/{wallet_id}/recalculate", response_model=WalletSchema)
def recalculate_totals(
    wallet_id: uuid.UUID,
    request: Request,
    ledger: LedgerService = Depends(get_ledger_service),
):
    wallet_or_404(ledger, wallet_id, request)
    return to_wallet_schema(ledger.recalculate(wallet_id))


@router.get("/wallets/{wallet_id}/transactions", response_model=List[TransactionSchema])
def list_transactions(
    wallet_id: uuid.UUID,
    request: Request,
    limit: int = Query(settings.recent_transactions_limit, ge=0, description="Most recent N"),
    type: Optional[TransactionType] = Query(None, description="Only income or only expense"),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """
    Recent transactions, most recent first.

    With `type` set, returns that type's transactions in insertion order
    instead, still capped at `limit`.
    """
    wallet = wallet_or_404(ledger, wallet_id, request)
    if type == TransactionType.INCOME:
        transactions = wallet.income_transactions()[:limit]
    elif type == TransactionType.EXPENSE:
        transactions = wallet.expense_transactions()[:limit]
    else:
        transactions = wallet.recent_transactions(limit)
    return [TransactionSchema.from_domain(t) for t in transactions]


@router.post("/wallets/{wallet_id}/transactions", response_model=TransactionSchema, status_code=201)
def add_transaction(
    wallet_id: uuid.UUID,
    body: TransactionCreate,
    request: Request,
    ledger: LedgerService = Depends(get_ledger_service),
):
    wallet_or_404(ledger, wallet_id, request)
    transaction = ledger.record_transaction(
        wallet_id,
        amount=body.amount,
        category=body.category,
        tx_type=body.type,
        note=body.note,
        date=body.date,
    )
    return TransactionSchema.from_domain(transaction)


@router.put("/wallets/{wallet_id}/transactions/{transaction_id}", response_model=WalletSchema)
def edit_transaction(
    wallet_id: uuid.UUID,
    transaction_id: uuid.UUID,
    body: TransactionUpdate,
    request: Request,
    ledger: LedgerService = Depends(get_ledger_service),
):
    """Edit a transaction; an unknown transaction leaves the wallet unchanged"""
    wallet = wallet_or_404(ledger, wallet_id, request)
    ledger.edit_transaction(
        wallet_id,
        transaction_id,
        amount=body.amount,
        category=body.category,
        note=body.note,
        date=body.date,
    )
    return to_wallet_schema(wallet)


@router.delete("/wallets/{wallet_id}/transactions/{transaction_id}", response_model=WalletSchema)
def delete_transaction(
    wallet_id: uuid.UUID,
    transaction_id: uuid.UUID,
    request: Request,
    ledger: LedgerService = Depends(get_ledger_service),
):
    """Delete a transaction; an unknown transaction leaves the wallet unchanged"""
    wallet = wallet_or_404(ledger, wallet_id, request)
    ledger.delete_transaction(wallet_id, transaction_id)
    return to_wallet_schema(wallet)


@router.get("/categories", response_model=CategoriesResponse)
def list_categories(
    type: Optional[TransactionType] = Query(None, description="Categories offered for this type"),
):
    """Predefined categories for the transaction forms; free-form categories are still accepted"""
    if type is None:
        categories = list(TransactionCategory)
    else:
        categories = TransactionCategory.for_type(type)
    return CategoriesResponse(type=type, categories=[c.value for c in categories])
