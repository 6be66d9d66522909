from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from starlette.datastructures import QueryParams

from listings_query.domain.listing import Listing, resolve_kind
from listings_query.entrypoints.http.dtos.listing_search import (
    ListingResponseDTO,
    ListingSearchResponseDTO,
)
from listings_query.use_cases.find_listings import FindListingsResponse

# Parameters that may be repeated in the query string (?service_options=a&service_options=b)
LIST_PARAMS = frozenset(
    {
        "favorited_ids",
        "interest_options",
        "wizard_status",
        "clearing_firm_options",
        "service_options",
        "credential_options",
    }
)


def _decimal_str(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None


class ListingSearchMapper:
    """Maps between the HTTP query string, domain params and REST DTOs."""

    @staticmethod
    def to_params(query_params: QueryParams) -> dict[str, Any]:
        """
        Convert the raw query string to search params.

        Repeated keys become lists; ``key[]`` is accepted as an alias of
        ``key``. A key sent once keeps its raw string, even when empty, so
        nil-sensitive filters still see it.
        """
        params: dict[str, Any] = {}
        for key in query_params.keys():
            name = key[:-2] if key.endswith("[]") else key
            if name in params:
                continue

            values = query_params.getlist(name) + query_params.getlist(f"{name}[]")
            if name in LIST_PARAMS and (len(values) > 1 or key.endswith("[]")):
                params[name] = values
            else:
                params[name] = values[0]
        return params

    @staticmethod
    def to_listing_response(listing: Listing) -> ListingResponseDTO:
        return ListingResponseDTO(
            id=listing.id,
            market=listing.market,
            title=listing.title,
            user_id=listing.user_id,
            location=listing.location,
            latitude=_decimal_str(listing.latitude),
            longitude=_decimal_str(listing.longitude),
            published=listing.published,
            published_at=listing.published_at,
            wizard_status=listing.wizard_status,
            membership=listing.membership,
            interest_options=list(listing.interest_options),
            percent_fee=_decimal_str(listing.percent_fee),
            aum=_decimal_str(listing.aum),
            gdc=_decimal_str(listing.gdc),
            clearing_firm=listing.clearing_firm,
            broker_dealer=listing.broker_dealer,
            advisor_id=listing.advisor_id,
            revenue=_decimal_str(listing.revenue),
            services=list(listing.services),
            credentials=list(listing.credentials),
            cpa_id=listing.cpa_id,
        )

    @staticmethod
    def to_response(result: FindListingsResponse, params: Mapping[str, Any]) -> ListingSearchResponseDTO:
        """
        Converts the domain result to the REST response.

        ``market`` echoes the resolved kind. The use case has already
        validated the selector, so resolution cannot fail here.
        """
        return ListingSearchResponseDTO(
            listings=[ListingSearchMapper.to_listing_response(listing) for listing in result.listings],
            total=result.total_count or 0,
            market=resolve_kind(params).value,
        )
