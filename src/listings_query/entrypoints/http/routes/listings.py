from fastapi import APIRouter, Depends, Request

from listings_query.domain.listing import ActingUser
from listings_query.entrypoints.http.dependencies import (
    get_acting_user,
    get_find_listings_use_case,
)
from listings_query.entrypoints.http.dtos.listing_search import ListingSearchResponseDTO
from listings_query.entrypoints.http.error_responses import ErrorResponse
from listings_query.entrypoints.http.mappers.listing_search_mapper import ListingSearchMapper
from listings_query.use_cases.find_listings import FindListings, FindListingsRequest


router = APIRouter(tags=["Listings"])


@router.get(
    "/listings",
    response_model=ListingSearchResponseDTO,
    summary="Search listings",
    description="""
    Search practice listings. All filters are optional and use AND semantics.

    ## Market
    `market` (or `type`) selects the listing kind: `listings`/`all` (default),
    `advisors`, `cpas`. Case-insensitive, singular or plural.

    ## Filters (all markets)
    `location`, `distance`, `latitude`+`longitude`+`distance`, `favorited_ids`,
    `interest_options`, `published_date`, `listing_id`,
    `days_listing_access_delayed`, `wizard_status`, `published`, `membership`,
    `user_id`, `exclude_user_id`, `limit`.

    ## Advisor filters
    `percent_fee` (`5` or `5-10`), `max_aum`, `min_aum`, `max_gdc`, `min_gdc`,
    `clearing_firm_options`, `broker_dealer`, `advisor_id`.

    ## CPA filters
    `percent_fee`, `max_revenue`, `min_revenue`, `service_options`,
    `credential_options`, `cpa_id`.

    ## Example
    ```
    GET /v1/listings?market=advisors&percent_fee=1-2&min_aum=50000000
    ```
    """,
    responses={
        422: {"model": ErrorResponse, "description": "Unknown market or malformed filter value"},
    },
)
def get_listings(
    request: Request,
    acting_user: ActingUser | None = Depends(get_acting_user),
    use_case: FindListings = Depends(get_find_listings_use_case),
) -> ListingSearchResponseDTO:
    """Search listings endpoint following parse → execute → map → return pattern."""
    # 1. Map to domain params
    params = ListingSearchMapper.to_params(request.query_params)

    # 2. Execute use case
    result = use_case.execute(FindListingsRequest(acting_user=acting_user, params=params))

    # 3. Map to response
    return ListingSearchMapper.to_response(result=result, params=params)
