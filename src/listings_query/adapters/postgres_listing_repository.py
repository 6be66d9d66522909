"""PostgreSQL implementation of ListingRepository."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from listings_query.domain.listing import Listing
from listings_query.infra.db.models.listing import ListingRow
from listings_query.ports.listing_repository import ListingRepository, SearchResult

if TYPE_CHECKING:
    from sqlalchemy.sql import Select


class PostgresListingRepository(ListingRepository):
    """
    PostgreSQL implementation of ListingRepository.

    - Executes the Select composed by SqlAlchemyListingsQuery
    - Returns total_count via COUNT(*) over the query without LIMIT
    - Converts ListingRow (infrastructure) to Listing (domain)
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def fetch(self, query: Select[tuple[ListingRow]]) -> SearchResult:
        """
        Execute a composed listings query.

        Executes two queries:
        1. COUNT(*) over the unlimited, unordered query
        2. The query itself

        Args:
            query: Select produced by a SqlAlchemyListingsQuery

        Returns:
            SearchResult with listings and total_count
        """
        unbounded = query.limit(None).offset(None).order_by(None)
        count_query = select(func.count()).select_from(unbounded.subquery())
        total_count = self._session.execute(count_query).scalar() or 0

        rows = self._session.execute(query).scalars().all()
        listings = [self._to_domain(row) for row in rows]

        return SearchResult(listings=listings, total_count=total_count)

    def _to_domain(self, row: ListingRow) -> Listing:
        """Convert database model (ListingRow) to domain entity (Listing)."""
        return Listing(
            id=row.id,
            market=row.market,
            title=row.title,
            user_id=row.user_id,
            location=row.location,
            latitude=row.latitude,
            longitude=row.longitude,
            published=row.published,
            published_at=row.published_at,
            wizard_status=row.wizard_status,
            membership=row.membership,
            interest_options=tuple(row.interest_options or ()),
            percent_fee=row.percent_fee,
            aum=row.aum,
            gdc=row.gdc,
            clearing_firm=row.clearing_firm,
            broker_dealer=row.broker_dealer,
            advisor_id=row.advisor_id,
            revenue=row.revenue,
            services=tuple(row.services or ()),
            credentials=tuple(row.credentials or ()),
            cpa_id=row.cpa_id,
        )
