"""Database engine bootstrap with schema check, reset, and in-memory fallback"""

import logging
from dataclasses import dataclass
from typing import Generator

from fastapi import Request
from sqlalchemy import MetaData, create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from wallet_ledger.domain.exceptions import StorageIncompatibleError
from wallet_ledger.infrastructure.database.models import Base, SchemaMeta, SCHEMA_VERSION
from wallet_ledger.infrastructure.observability.metrics import storage_resets_counter

logger = logging.getLogger(__name__)

IN_MEMORY_URL = "sqlite://"

STORAGE_RESET_NOTICE = (
    "The database has been reset due to schema changes. "
    "Your data has been initialized with default values."
)


@dataclass
class StoreHandle:
    """Engine plus what happened while opening it"""

    engine: Engine
    session_factory: sessionmaker
    was_reset: bool = False
    in_memory: bool = False


def build_engine(database_url: str) -> Engine:
    """Create an engine; SQLite connections are shared across the server's worker threads"""
    if database_url.startswith("sqlite"):
        if database_url in (IN_MEMORY_URL, "sqlite:///:memory:"):
            return create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(database_url, connect_args={"check_same_thread": False}, pool_pre_ping=True)

    # Connection pool: max 20 connections, recycle after 1 hour to avoid stale connections
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=10,
        pool_recycle=3600,
    )


def ensure_schema(engine: Engine) -> None:
    """
    Create missing tables and verify the stored schema version.

    Raises:
        StorageIncompatibleError: ledger tables exist without version
            metadata, or were written by a different schema version
    """
    existing = set(inspect(engine).get_table_names())
    ledger_tables = set(Base.metadata.tables) - {SchemaMeta.__tablename__}
    if existing & ledger_tables and SchemaMeta.__tablename__ not in existing:
        raise StorageIncompatibleError("Store has ledger tables but no schema version")

    Base.metadata.create_all(bind=engine)

    with Session(engine) as db:
        meta = db.get(SchemaMeta, 1)
        if meta is None:
            db.add(SchemaMeta(id=1, version=SCHEMA_VERSION))
            db.commit()
            return
        if meta.version != SCHEMA_VERSION:
            raise StorageIncompatibleError(
                f"Store schema v{meta.version} does not match v{SCHEMA_VERSION}"
            )


def reset_store(engine: Engine) -> None:
    """Drop every table in the store, whatever its shape, and recreate an empty one"""
    stale = MetaData()
    stale.reflect(bind=engine)
    stale.drop_all(bind=engine)
    ensure_schema(engine)


def init_store(database_url: str) -> StoreHandle:
    """
    Open the configured store, falling back in two steps.

    1. Open and verify the configured store.
    2. On an unreadable or incompatible schema, reset it to empty.
    3. If the reset fails too, use an in-memory SQLite store.

    Failure to build the in-memory store propagates; it is the only fatal path.
    """
    engine = build_engine(database_url)
    try:
        ensure_schema(engine)
        logger.info("Store opened", extra={"database_url": database_url})
        return StoreHandle(engine=engine, session_factory=_session_factory(engine))
    except (SQLAlchemyError, StorageIncompatibleError) as e:
        logger.warning(f"Store unreadable, resetting: {e}", extra={"database_url": database_url})
        storage_resets_counter.inc()

    try:
        reset_store(engine)
        return StoreHandle(engine=engine, session_factory=_session_factory(engine), was_reset=True)
    except (SQLAlchemyError, StorageIncompatibleError) as e:
        logger.error(f"Store reset failed, using in-memory store: {e}")
        engine.dispose()

    fallback = build_engine(IN_MEMORY_URL)
    ensure_schema(fallback)
    return StoreHandle(
        engine=fallback,
        session_factory=_session_factory(fallback),
        was_reset=True,
        in_memory=True,
    )


def _session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autoflush=False, bind=engine, expire_on_commit=False)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency injection for database sessions"""
    db = request.app.state.store.session_factory()
    try:
        yield db
    finally:
        db.close()
