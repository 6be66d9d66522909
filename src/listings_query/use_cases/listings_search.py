from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from listings_query.domain.errors import UnrecognizedVariantError
from listings_query.domain.filters import ListingFilter, filters_for
from listings_query.domain.listing import (
    ActingUser,
    ListingKind,
    QueryContext,
    resolve_kind,
)
from listings_query.ports.listings_query import ListingsQuery, ListingsQueryFactory

logger = logging.getLogger(__name__)


def create_variant(
    kind: ListingKind,
    acting_user: ActingUser | None,
    factory: ListingsQueryFactory,
) -> ListingsQuery:
    """Build a fresh query object for ``kind`` bound to the acting user."""
    match kind:
        case ListingKind.GENERIC:
            return factory.generic(acting_user)
        case ListingKind.ADVISOR:
            return factory.advisor(acting_user)
        case ListingKind.CPA:
            return factory.cpa(acting_user)
    raise UnrecognizedVariantError(variant=repr(kind))


def filter_table_for(query: ListingsQuery) -> tuple[ListingFilter, ...]:
    """
    Pick the filter table from the query object's discriminant.

    Raises:
        UnrecognizedVariantError: If the query object has no known ``kind``
    """
    match getattr(query, "kind", None):
        case ListingKind.GENERIC:
            return filters_for(ListingKind.GENERIC)
        case ListingKind.ADVISOR:
            return filters_for(ListingKind.ADVISOR)
        case ListingKind.CPA:
            return filters_for(ListingKind.CPA)
        case _:
            raise UnrecognizedVariantError(variant=query.__class__.__name__)


def apply_filters(query: ListingsQuery, context: QueryContext) -> Any:
    """
    Apply the query object's filter table in order and return the relation.

    A filter runs only when its applicability rule holds for the context.
    """
    for listing_filter in filter_table_for(query):
        if listing_filter.apply(query, context):
            logger.debug(
                "Listing filter applied",
                extra={
                    "filter_method": listing_filter.filter_method,
                    "param": listing_filter.param_key,
                    "kind": query.kind.value,
                },
            )
    return query.relation


class ListingsSearch:
    """
    Entry point that turns untyped search params into a composed query.

    The returned relation is not executed; hand it to a ListingRepository.
    Nothing is cached between calls: every search builds its own query object.
    """

    def __init__(self, query_factory: ListingsQueryFactory) -> None:
        self._query_factory = query_factory

    def search(
        self,
        acting_user: ActingUser | None,
        params: Mapping[str, Any],
        query_override: ListingsQuery | None = None,
    ) -> Any:
        """
        Compose a listings query.

        Args:
            acting_user: Caller the query object is scoped to
            params: Raw search parameters
            query_override: Pre-built query object; skips market/type resolution

        Returns:
            The composed relation

        Raises:
            UnrecognizedKindError: If market/type names no known kind
            UnrecognizedVariantError: If the override's kind is unknown
        """
        context = QueryContext(acting_user=acting_user, params=params)

        if query_override is None:
            # Resolve before building anything so a bad selector leaks no query
            kind = resolve_kind(context.params)
            query = create_variant(kind, acting_user, self._query_factory)
        else:
            query = query_override

        return apply_filters(query, context)
