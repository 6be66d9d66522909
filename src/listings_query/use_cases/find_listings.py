"""Find listings use case: compose a search and execute it."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from listings_query.domain.listing import ActingUser, Listing
from listings_query.ports.listing_repository import ListingRepository
from listings_query.use_cases.listings_search import ListingsSearch


@dataclass(frozen=True, slots=True)
class FindListingsRequest:
    acting_user: ActingUser | None
    params: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class FindListingsResponse:
    listings: list[Listing]
    total_count: int | None = None  # Matches ignoring the limit (None if not calculated)


class FindListings:
    """
    Compose a listings query from request params and execute it.

    Composition (kind resolution, filter selection) belongs to ListingsSearch;
    execution belongs to the repository. No filtering logic lives here.
    """

    def __init__(self, listings_search: ListingsSearch, listing_repository: ListingRepository) -> None:
        self._listings_search = listings_search
        self._repository = listing_repository

    def execute(self, request: FindListingsRequest) -> FindListingsResponse:
        """
        Raises:
            UnrecognizedKindError: If market/type names no known kind
        """
        query = self._listings_search.search(request.acting_user, request.params)
        result = self._repository.fetch(query)

        return FindListingsResponse(
            listings=result.listings,
            total_count=result.total_count,
        )
