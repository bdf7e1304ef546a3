"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from wallet_ledger.services.ledger import LedgerService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_ledger_service(request: Request) -> LedgerService:
    """Provide the ledger service built at startup"""
    return request.app.state.ledger
