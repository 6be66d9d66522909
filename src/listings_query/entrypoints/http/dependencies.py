"""
Dependency injection for FastAPI routes.

Key principle: Database sessions should be per-request, not cached.
Only stateless singletons should use lru_cache.
"""

from __future__ import annotations

from typing import Generator

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from listings_query.adapters.postgres_listing_repository import PostgresListingRepository
from listings_query.adapters.sqlalchemy_listings_query import SqlAlchemyListingsQueryFactory
from listings_query.domain.listing import ActingUser
from listings_query.infra.db.session import get_session
from listings_query.use_cases.find_listings import FindListings
from listings_query.use_cases.listings_search import ListingsSearch


def get_db() -> Generator[Session, None, None]:
    """
    Provides a database session for a single request.

    The session is closed when the request ends, success or failure.

    Yields:
        Session: SQLAlchemy database session (per-request)
    """
    with get_session() as session:
        yield session


def get_acting_user(x_user_id: int | None = Header(default=None)) -> ActingUser | None:
    """
    The caller, as identified by the upstream gateway.

    Authentication happens before requests reach this service; the gateway
    forwards the authenticated user id in ``X-User-Id``. No header means an
    anonymous caller.
    """
    if x_user_id is None:
        return None
    return ActingUser(id=x_user_id)


def get_listings_search() -> ListingsSearch:
    """Stateless; query objects are still built fresh on every search."""
    return ListingsSearch(query_factory=SqlAlchemyListingsQueryFactory())


def get_find_listings_use_case(
    db: Session = Depends(get_db),
    listings_search: ListingsSearch = Depends(get_listings_search),
) -> FindListings:
    """
    Factory function that returns a configured FindListings use case.

    Called per-request: each request gets a fresh repository bound to its own
    session.

    Args:
        db: Database session (injected by FastAPI via Depends(get_db))
        listings_search: Query composer

    Returns:
        FindListings: Configured use case instance
    """
    repository = PostgresListingRepository(session=db)
    return FindListings(listings_search=listings_search, listing_repository=repository)
