"""Test suite for the FindListings use case (compose, then execute)."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from listings_query.domain.errors import UnrecognizedKindError
from listings_query.domain.listing import ActingUser, Listing
from listings_query.ports.listing_repository import ListingRepository, SearchResult
from listings_query.use_cases.find_listings import (
    FindListings,
    FindListingsRequest,
    FindListingsResponse,
)
from listings_query.use_cases.listings_search import ListingsSearch


@pytest.fixture()
def mock_search() -> Mock:
    return Mock(spec=ListingsSearch)


@pytest.fixture()
def mock_repository() -> Mock:
    return Mock(spec=ListingRepository)


@pytest.fixture()
def sample_listings() -> list[Listing]:
    return [
        Listing(id=1, market="advisor", title="Denver practice", published=True),
        Listing(id=2, market="advisor", title="Austin practice", published=True),
    ]


def test_execute_composes_then_fetches(
    mock_search: Mock, mock_repository: Mock, sample_listings: list[Listing]
) -> None:
    mock_repository.fetch.return_value = SearchResult(listings=sample_listings, total_count=7)
    user = ActingUser(id=3)
    request = FindListingsRequest(acting_user=user, params={"market": "advisors", "limit": "2"})

    response = FindListings(mock_search, mock_repository).execute(request)

    mock_search.search.assert_called_once_with(user, request.params)
    mock_repository.fetch.assert_called_once_with(mock_search.search.return_value)
    assert isinstance(response, FindListingsResponse)
    assert response.listings == sample_listings
    assert response.total_count == 7


def test_execute_does_not_fetch_when_composition_fails(
    mock_search: Mock, mock_repository: Mock
) -> None:
    mock_search.search.side_effect = UnrecognizedKindError("spaceship")

    with pytest.raises(UnrecognizedKindError):
        FindListings(mock_search, mock_repository).execute(
            FindListingsRequest(acting_user=None, params={"market": "spaceship"})
        )

    mock_repository.fetch.assert_not_called()


def test_total_count_can_be_none(mock_search: Mock, mock_repository: Mock) -> None:
    mock_repository.fetch.return_value = SearchResult(listings=[], total_count=None)

    response = FindListings(mock_search, mock_repository).execute(FindListingsRequest(acting_user=None))

    assert response.listings == []
    assert response.total_count is None


def test_response_is_immutable(mock_search: Mock, mock_repository: Mock) -> None:
    mock_repository.fetch.return_value = SearchResult(listings=[], total_count=0)

    response = FindListings(mock_search, mock_repository).execute(FindListingsRequest(acting_user=None))

    with pytest.raises(Exception):  # FrozenInstanceError or AttributeError
        response.listings = []  # type: ignore
