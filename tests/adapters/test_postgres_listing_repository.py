"""
Unit test suite for PostgresListingRepository.

Uses a mocked SQLAlchemy session. Verifies:
- COUNT(*) and SELECT are both executed
- The count ignores LIMIT
- Rows are converted to domain listings
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import Mock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import Session

from listings_query.adapters.postgres_listing_repository import PostgresListingRepository
from listings_query.adapters.sqlalchemy_listings_query import SqlAlchemyCpaListingsQuery
from listings_query.domain.listing import Listing
from listings_query.infra.db.models.listing import ListingRow


@pytest.fixture()
def mock_session() -> Mock:
    return Mock(spec=Session)


@pytest.fixture()
def sample_rows() -> list[ListingRow]:
    rows = [
        ListingRow(
            id=4,
            market="cpa",
            title="Tax and audit firm",
            user_id=12,
            location="Boston, MA",
            published=True,
            published_at=datetime(2026, 2, 1, tzinfo=timezone.utc),
            interest_options=["succession"],
            percent_fee=Decimal("2.00"),
            revenue=Decimal("750000.00"),
            services=["tax", "audit"],
            credentials=["CPA"],
            cpa_id=77,
        ),
    ]
    return rows


def _results(mock_session: Mock, count: int, rows: list[ListingRow]) -> None:
    count_result = Mock()
    count_result.scalar.return_value = count

    select_result = Mock()
    select_result.scalars.return_value.all.return_value = rows

    mock_session.execute.side_effect = [count_result, select_result]


def test_fetch_executes_count_and_select(mock_session: Mock, sample_rows: list[ListingRow]) -> None:
    _results(mock_session, 12, sample_rows)
    query = SqlAlchemyCpaListingsQuery(None).with_limit("1").relation

    result = PostgresListingRepository(mock_session).fetch(query)

    assert mock_session.execute.call_count == 2
    assert result.total_count == 12
    assert len(result.listings) == 1


def test_count_query_ignores_limit_and_order(mock_session: Mock) -> None:
    _results(mock_session, 0, [])
    query = SqlAlchemyCpaListingsQuery(None).with_limit("1").relation

    PostgresListingRepository(mock_session).fetch(query)

    count_statement = mock_session.execute.call_args_list[0].args[0]
    select_statement = mock_session.execute.call_args_list[1].args[0]
    count_sql = str(count_statement.compile(dialect=postgresql.dialect()))

    assert "count(*)" in count_sql
    assert "LIMIT" not in count_sql
    assert "ORDER BY" not in count_sql
    assert select_statement is query


def test_count_defaults_to_zero(mock_session: Mock) -> None:
    _results(mock_session, None, [])  # type: ignore[arg-type]

    result = PostgresListingRepository(mock_session).fetch(SqlAlchemyCpaListingsQuery(None).relation)

    assert result.total_count == 0
    assert result.listings == []


def test_rows_become_domain_listings(mock_session: Mock, sample_rows: list[ListingRow]) -> None:
    _results(mock_session, 1, sample_rows)

    result = PostgresListingRepository(mock_session).fetch(SqlAlchemyCpaListingsQuery(None).relation)

    listing = result.listings[0]
    assert isinstance(listing, Listing)
    assert listing.id == 4
    assert listing.market == "cpa"
    assert listing.revenue == Decimal("750000.00")
    assert listing.services == ("tax", "audit")
    assert listing.credentials == ("CPA",)
    assert listing.interest_options == ("succession",)
    assert listing.aum is None
