"""Crypto and stock holdings endpoints under /v1/portfolio"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wallet_ledger.api.dependencies import get_request_id
from wallet_ledger.api.v1.schemas import HoldingCreate, HoldingSchema, PortfolioResponse
from wallet_ledger.domain.models import CryptoAsset, Stock
from wallet_ledger.domain.portfolio import portfolio_summary
from wallet_ledger.infrastructure.database.repositories import HoldingRepository
from wallet_ledger.infrastructure.database.session import get_db

router = APIRouter()


def crypto_schema(asset: CryptoAsset) -> HoldingSchema:
    return HoldingSchema(
        id=str(asset.id),
        symbol=asset.symbol,
        name=asset.name,
        quantity=float(asset.amount),
        price=float(asset.price),
        value=float(asset.value),
        icon_name=asset.icon_name,
    )


def stock_schema(stock: Stock) -> HoldingSchema:
    return HoldingSchema(
        id=str(stock.id),
        symbol=stock.symbol,
        name=stock.name,
        quantity=float(stock.shares),
        price=float(stock.price),
        value=float(stock.value),
        icon_name=stock.icon_name,
    )


@router.get("/portfolio", response_model=PortfolioResponse)
def get_portfolio(db: Session = Depends(get_db)):
    repo = HoldingRepository(db)
    crypto = repo.list_crypto()
    stocks = repo.list_stocks()
    summary = portfolio_summary(crypto, stocks)

    return PortfolioResponse(
        crypto_value=float(summary.crypto_value),
        stock_value=float(summary.stock_value),
        total_value=float(summary.total_value),
        crypto=[crypto_schema(a) for a in crypto],
        stocks=[stock_schema(s) for s in stocks],
    )


@router.post("/portfolio/crypto", response_model=HoldingSchema, status_code=201)
def add_crypto(body: HoldingCreate, request: Request, db: Session = Depends(get_db)):
    asset = CryptoAsset(
        symbol=body.symbol.upper(),
        name=body.name,
        amount=body.quantity,
        price=body.price,
    )
    try:
        HoldingRepository(db).add_crypto(asset)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Failed to save crypto asset: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Store unavailable")
    return crypto_schema(asset)


@router.post("/portfolio/stocks", response_model=HoldingSchema, status_code=201)
def add_stock(body: HoldingCreate, request: Request, db: Session = Depends(get_db)):
    stock = Stock(
        symbol=body.symbol.upper(),
        name=body.name,
        shares=body.quantity,
        price=body.price,
    )
    try:
        HoldingRepository(db).add_stock(stock)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Failed to save stock: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Store unavailable")
    return stock_schema(stock)
