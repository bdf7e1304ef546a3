"""FastAPI application factory"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.requests import Request
from starlette.responses import Response

from wallet_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from wallet_ledger.api.v1 import budgets, portfolio, reports, wallets
from wallet_ledger.api.v1.schemas import NoticeResponse
from wallet_ledger.infrastructure.database.repositories import SqlWalletStore
from wallet_ledger.infrastructure.database.session import STORAGE_RESET_NOTICE, init_store
from wallet_ledger.infrastructure.observability.logging import setup_logging
from wallet_ledger.services.ledger import LedgerService
from wallet_ledger.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """Create and configure FastAPI application"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Open the store, then load wallets (or synthesize the default one)
        store = init_store(database_url or settings.database_url)
        ledger = LedgerService(SqlWalletStore(store.session_factory))
        ledger.ensure_default_wallet()

        app.state.store = store
        app.state.ledger = ledger
        app.state.notices = [STORAGE_RESET_NOTICE] if store.was_reset else []
        try:
            yield
        finally:
            store.engine.dispose()

    app = FastAPI(
        title="Wallet Ledger",
        description="Wallets, transactions, budgets, and reporting",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check(request: Request):
        return {
            "status": "ok",
            "service": settings.service_name,
            "in_memory_store": request.app.state.store.in_memory,
        }

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # One-time informational notices, cleared once read
    @app.get("/v1/notices", response_model=NoticeResponse, tags=["notices"])
    def read_notices(request: Request):
        notices = list(request.app.state.notices)
        request.app.state.notices = []
        return NoticeResponse(notices=notices)

    # Register API routers
    app.include_router(wallets.router, prefix="/v1", tags=["wallets"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])
    app.include_router(budgets.router, prefix="/v1", tags=["budgets"])
    app.include_router(portfolio.router, prefix="/v1", tags=["portfolio"])

    return app


app = create_app()
