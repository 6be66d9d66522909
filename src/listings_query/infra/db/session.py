from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from listings_query.infra.db.config import PoolSettings, database_url

# Lazy initialization - only create engine/session when needed
_engine: Engine | None = None
_session_local: sessionmaker[Session] | None = None


def get_engine() -> Engine:
    """
    Get or create the database engine (lazy initialization).

    Pool sizing comes from PoolSettings.from_env(); total max connections is
    pool_size + max_overflow. Connections are health-checked before checkout.
    """
    global _engine
    if _engine is None:
        pool = PoolSettings.from_env()
        _engine = create_engine(
            database_url(),
            pool_size=pool.pool_size,
            max_overflow=pool.max_overflow,
            pool_pre_ping=True,
            pool_recycle=pool.pool_recycle,
        )
    return _engine


def get_session_local() -> sessionmaker[Session]:
    """Get or create the session factory (lazy initialization)."""
    global _session_local
    if _session_local is None:
        _session_local = sessionmaker(
            bind=get_engine(),
            class_=Session,
            expire_on_commit=False,
        )
    return _session_local


@contextmanager
def get_session() -> Iterator[Session]:
    """
    Read-only request session.

    Rolled back, never committed, when the request ends.
    """
    session = get_session_local()()

    try:
        yield session
    finally:
        session.rollback()
        session.close()
