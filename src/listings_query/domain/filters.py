"""
Filter registry for listings search.

Each entry binds a query-object method to the request parameter(s) that feed
it and the rule deciding whether it fires. The tables are built once at import
time and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Union

from listings_query.domain.listing import (
    ListingKind,
    QueryContext,
    is_not_absent,
    is_present,
)

if TYPE_CHECKING:
    from listings_query.ports.listings_query import ListingsQuery


AppliesIf = Callable[[QueryContext], bool]


def applies_if_present(*keys: str) -> AppliesIf:
    """Fires only when every key holds a present (non-blank) value."""

    def rule(context: QueryContext) -> bool:
        return all(is_present(context.get(key)) for key in keys)

    return rule


def applies_if_not_absent(key: str) -> AppliesIf:
    """Fires whenever the key is not None, even for "" or []."""

    def rule(context: QueryContext) -> bool:
        return is_not_absent(context.get(key))

    return rule


@dataclass(frozen=True, slots=True)
class FilterSpec:
    filter_method: str
    param_key: str
    applies_if: AppliesIf
    arg_keys: tuple[str, ...] = ()

    def arguments(self, context: QueryContext) -> tuple[Any, ...]:
        return tuple(context.get(key) for key in (self.arg_keys or (self.param_key,)))

    def apply(self, query: ListingsQuery, context: QueryContext) -> bool:
        if not self.applies_if(context):
            return False
        getattr(query, self.filter_method)(*self.arguments(context))
        return True


def simple(filter_method: str, param_key: str) -> FilterSpec:
    return FilterSpec(filter_method, param_key, applies_if_present(param_key))


# ==============================================================================
# Percent fee range
# ==============================================================================


def parse_percent_fee(raw: Any) -> tuple[str, str | None] | None:
    """
    Split a "min-max" fee parameter.

    "5" -> ("5", None), "5-10" -> ("5", "10"), "5-" -> ("5", None).
    Parts beyond the second are ignored and nothing is coerced to a number;
    the query object decides what the values mean.
    """
    if not is_present(raw):
        return None

    parts = str(raw).split("-")
    while parts and parts[-1] == "":
        parts.pop()
    if not parts:
        return None

    minimum = parts[0]
    maximum = parts[1] if len(parts) > 1 else None
    return minimum, maximum


@dataclass(frozen=True, slots=True)
class PercentFeeFilter:
    param_key: str = "percent_fee"

    @property
    def filter_method(self) -> str:
        return "with_percent_fee"

    def apply(self, query: ListingsQuery, context: QueryContext) -> bool:
        bounds = parse_percent_fee(context.get(self.param_key))
        if bounds is None:
            return False

        minimum, maximum = bounds
        if maximum is None:
            query.with_percent_fee_equal_to(minimum)  # type: ignore[attr-defined]
        else:
            query.with_percent_fee_between(minimum, maximum)  # type: ignore[attr-defined]
        return True


ListingFilter = Union[FilterSpec, PercentFeeFilter]


# ==============================================================================
# Ordered filter tables
# ==============================================================================

GENERIC_FILTERS: tuple[ListingFilter, ...] = (
    FilterSpec("near", "location", applies_if_present("location"), ("location", "distance")),
    FilterSpec(
        "with_lat_lon",
        "latitude",
        applies_if_present("latitude", "longitude", "distance"),
        ("latitude", "longitude", "distance"),
    ),
    # Nil-sensitive: an empty favorites list still filters, to nothing
    FilterSpec("with_favorited", "favorited_ids", applies_if_not_absent("favorited_ids")),
    simple("interested_in", "interest_options"),
    simple("with_published_date_after", "published_date"),
    simple("with_listing_id", "listing_id"),
    simple("with_delay", "days_listing_access_delayed"),
    simple("with_wizard_status", "wizard_status"),
    simple("with_published", "published"),
    simple("with_membership", "membership"),
    simple("with_user_id", "user_id"),
    simple("without_user_id", "exclude_user_id"),
    simple("with_limit", "limit"),
)

ADVISOR_FILTERS: tuple[ListingFilter, ...] = (
    *GENERIC_FILTERS,
    PercentFeeFilter(),
    simple("with_max_aum", "max_aum"),
    simple("with_min_aum", "min_aum"),
    simple("with_max_gdc", "max_gdc"),
    simple("with_min_gdc", "min_gdc"),
    simple("with_clearing_firm_options", "clearing_firm_options"),
    simple("with_broker_dealer", "broker_dealer"),
    simple("with_advisor_id", "advisor_id"),
)

CPA_FILTERS: tuple[ListingFilter, ...] = (
    *GENERIC_FILTERS,
    PercentFeeFilter(),
    simple("with_max_revenue", "max_revenue"),
    simple("with_min_revenue", "min_revenue"),
    simple("with_services_options", "service_options"),
    simple("with_credential_options", "credential_options"),
    simple("with_cpa_id", "cpa_id"),
)


def filters_for(kind: ListingKind) -> tuple[ListingFilter, ...]:
    match kind:
        case ListingKind.GENERIC:
            return GENERIC_FILTERS
        case ListingKind.ADVISOR:
            return ADVISOR_FILTERS
        case ListingKind.CPA:
            return CPA_FILTERS
    raise ValueError(f"No filter table for {kind!r}")
