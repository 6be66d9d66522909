from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from listings_query.domain.listing import Listing


@dataclass(frozen=True)
class SearchResult:
    """Result of executing a composed listings query."""

    listings: list[Listing]
    total_count: int | None = None  # Matches ignoring the limit (None if not calculated)


class ListingRepository(ABC):
    """
    Port for executing composed listings queries against storage.

    The query is whatever relation the matching ListingsQuery adapter produced.
    """

    @abstractmethod
    def fetch(self, query: Any) -> SearchResult:
        """
        Execute a composed query.

        Args:
            query: Composed relation produced by a ListingsQuery adapter

        Returns:
            SearchResult containing matching listings and optional total count
        """
        ...
