from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Callable, ClassVar

from listings_query.adapters.param_coercion import (
    as_bool,
    as_datetime,
    as_decimal,
    as_int,
    as_list,
    as_non_negative_int,
    bounding_box,
)
from listings_query.domain.listing import ActingUser, Listing, ListingKind
from listings_query.ports.listing_repository import ListingRepository, SearchResult
from listings_query.ports.listings_query import (
    AdvisorListingsQuery,
    CpaListingsQuery,
    ListingsQuery,
    ListingsQueryFactory,
)

Predicate = Callable[[Listing], bool]


class InMemoryRelation:
    """Composed query over a list of listings: predicates plus an optional limit."""

    def __init__(self, listings: list[Listing], predicates: tuple[Predicate, ...] = (), limit: int | None = None) -> None:
        self._listings = listings
        self.predicates = predicates
        self.limit = limit

    def where(self, predicate: Predicate) -> InMemoryRelation:
        return InMemoryRelation(self._listings, (*self.predicates, predicate), self.limit)

    def with_limit(self, limit: int) -> InMemoryRelation:
        return InMemoryRelation(self._listings, self.predicates, limit)

    def matches(self) -> list[Listing]:
        return [
            listing
            for listing in self._listings
            if all(predicate(listing) for predicate in self.predicates)
        ]

    def all(self) -> list[Listing]:
        matches = self.matches()
        return matches if self.limit is None else matches[: self.limit]


def _in_box(listing: Listing, latitude: float, longitude: float, miles: float) -> bool:
    if listing.latitude is None or listing.longitude is None:
        return False
    min_lat, max_lat, min_lon, max_lon = bounding_box(latitude, longitude, miles)
    return min_lat <= float(listing.latitude) <= max_lat and min_lon <= float(listing.longitude) <= max_lon


def _between(value: Decimal | None, low: Decimal | None = None, high: Decimal | None = None) -> bool:
    if value is None:
        return False
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


class InMemoryListingsQuery(ListingsQuery):
    """
    Canonical contract implementation for tests.

    - Stores listings in insertion order
    - Applies AND-semantics filtering
    - Mirrors the SQLAlchemy adapter's visibility and coercion rules
    """

    kind: ClassVar[ListingKind] = ListingKind.GENERIC
    market: ClassVar[str | None] = None

    def __init__(
        self,
        acting_user: ActingUser | None,
        listings: list[Listing],
        now: datetime | None = None,
    ) -> None:
        super().__init__(acting_user)
        self._now = now or datetime.now(timezone.utc)
        self._relation = InMemoryRelation(listings).where(self._visible)
        if self.market is not None:
            self._relation = self._relation.where(lambda listing: listing.market == self.market)

    @property
    def relation(self) -> InMemoryRelation:
        return self._relation

    def _visible(self, listing: Listing) -> bool:
        if listing.published:
            return True
        return self.acting_user is not None and listing.user_id == self.acting_user.id

    def _where(self, predicate: Predicate) -> InMemoryListingsQuery:
        self._relation = self._relation.where(predicate)
        return self

    def near(self, location: Any, distance: Any) -> InMemoryListingsQuery:
        place = str(location).strip().lower()
        return self._where(lambda listing: listing.location is not None and place in listing.location.lower())

    def with_lat_lon(self, latitude: Any, longitude: Any, distance: Any) -> InMemoryListingsQuery:
        lat = float(as_decimal(latitude, "latitude"))
        lon = float(as_decimal(longitude, "longitude"))
        miles = float(as_decimal(distance, "distance"))
        return self._where(lambda listing: _in_box(listing, lat, lon, miles))

    def with_favorited(self, favorited_ids: Any) -> InMemoryListingsQuery:
        ids = {as_int(value, "favorited_ids") for value in as_list(favorited_ids)}
        return self._where(lambda listing: listing.id in ids)

    def interested_in(self, interest_options: Any) -> InMemoryListingsQuery:
        options = set(as_list(interest_options))
        return self._where(lambda listing: bool(options.intersection(listing.interest_options)))

    def with_published_date_after(self, published_date: Any) -> InMemoryListingsQuery:
        after = as_datetime(published_date, "published_date")
        return self._where(lambda listing: listing.published_at is not None and listing.published_at > after)

    def with_listing_id(self, listing_id: Any) -> InMemoryListingsQuery:
        wanted = as_int(listing_id, "listing_id")
        return self._where(lambda listing: listing.id == wanted)

    def with_delay(self, days: Any) -> InMemoryListingsQuery:
        cutoff = self._now - timedelta(days=as_int(days, "days_listing_access_delayed"))
        return self._where(lambda listing: listing.published_at is not None and listing.published_at <= cutoff)

    def with_wizard_status(self, wizard_status: Any) -> InMemoryListingsQuery:
        statuses = set(as_list(wizard_status))
        return self._where(lambda listing: listing.wizard_status in statuses)

    def with_published(self, published: Any) -> InMemoryListingsQuery:
        flag = as_bool(published, "published")
        return self._where(lambda listing: listing.published is flag)

    def with_membership(self, membership: Any) -> InMemoryListingsQuery:
        wanted = str(membership).strip()
        return self._where(lambda listing: listing.membership == wanted)

    def with_user_id(self, user_id: Any) -> InMemoryListingsQuery:
        wanted = as_int(user_id, "user_id")
        return self._where(lambda listing: listing.user_id == wanted)

    def without_user_id(self, user_id: Any) -> InMemoryListingsQuery:
        excluded = as_int(user_id, "exclude_user_id")
        return self._where(lambda listing: listing.user_id != excluded)

    def with_limit(self, limit: Any) -> InMemoryListingsQuery:
        self._relation = self._relation.with_limit(as_non_negative_int(limit, "limit"))
        return self

    def with_percent_fee_equal_to(self, fee: Any) -> InMemoryListingsQuery:
        wanted = as_decimal(fee, "percent_fee")
        return self._where(lambda listing: listing.percent_fee == wanted)

    def with_percent_fee_between(self, minimum: Any, maximum: Any) -> InMemoryListingsQuery:
        low = as_decimal(minimum, "percent_fee")
        high = as_decimal(maximum, "percent_fee")
        return self._where(lambda listing: _between(listing.percent_fee, low, high))


class InMemoryAdvisorListingsQuery(InMemoryListingsQuery, AdvisorListingsQuery):
    kind: ClassVar[ListingKind] = ListingKind.ADVISOR
    market: ClassVar[str | None] = "advisor"

    def with_max_aum(self, value: Any) -> InMemoryListingsQuery:
        high = as_decimal(value, "max_aum")
        return self._where(lambda listing: _between(listing.aum, high=high))

    def with_min_aum(self, value: Any) -> InMemoryListingsQuery:
        low = as_decimal(value, "min_aum")
        return self._where(lambda listing: _between(listing.aum, low=low))

    def with_max_gdc(self, value: Any) -> InMemoryListingsQuery:
        high = as_decimal(value, "max_gdc")
        return self._where(lambda listing: _between(listing.gdc, high=high))

    def with_min_gdc(self, value: Any) -> InMemoryListingsQuery:
        low = as_decimal(value, "min_gdc")
        return self._where(lambda listing: _between(listing.gdc, low=low))

    def with_clearing_firm_options(self, options: Any) -> InMemoryListingsQuery:
        firms = set(as_list(options))
        return self._where(lambda listing: listing.clearing_firm in firms)

    def with_broker_dealer(self, broker_dealer: Any) -> InMemoryListingsQuery:
        wanted = str(broker_dealer).strip().lower()
        return self._where(
            lambda listing: listing.broker_dealer is not None and wanted in listing.broker_dealer.lower()
        )

    def with_advisor_id(self, advisor_id: Any) -> InMemoryListingsQuery:
        wanted = as_int(advisor_id, "advisor_id")
        return self._where(lambda listing: listing.advisor_id == wanted)


class InMemoryCpaListingsQuery(InMemoryListingsQuery, CpaListingsQuery):
    kind: ClassVar[ListingKind] = ListingKind.CPA
    market: ClassVar[str | None] = "cpa"

    def with_max_revenue(self, value: Any) -> InMemoryListingsQuery:
        high = as_decimal(value, "max_revenue")
        return self._where(lambda listing: _between(listing.revenue, high=high))

    def with_min_revenue(self, value: Any) -> InMemoryListingsQuery:
        low = as_decimal(value, "min_revenue")
        return self._where(lambda listing: _between(listing.revenue, low=low))

    def with_services_options(self, options: Any) -> InMemoryListingsQuery:
        services = set(as_list(options))
        return self._where(lambda listing: bool(services.intersection(listing.services)))

    def with_credential_options(self, options: Any) -> InMemoryListingsQuery:
        credentials = set(as_list(options))
        return self._where(lambda listing: bool(credentials.intersection(listing.credentials)))

    def with_cpa_id(self, cpa_id: Any) -> InMemoryListingsQuery:
        wanted = as_int(cpa_id, "cpa_id")
        return self._where(lambda listing: listing.cpa_id == wanted)


class InMemoryListingsQueryFactory(ListingsQueryFactory):
    def __init__(self, listings: list[Listing], now: datetime | None = None) -> None:
        self._listings = listings
        self._now = now

    def generic(self, acting_user: ActingUser | None) -> InMemoryListingsQuery:
        return InMemoryListingsQuery(acting_user, self._listings, now=self._now)

    def advisor(self, acting_user: ActingUser | None) -> InMemoryAdvisorListingsQuery:
        return InMemoryAdvisorListingsQuery(acting_user, self._listings, now=self._now)

    def cpa(self, acting_user: ActingUser | None) -> InMemoryCpaListingsQuery:
        return InMemoryCpaListingsQuery(acting_user, self._listings, now=self._now)


class InMemoryListingRepository(ListingRepository):
    """Executes an InMemoryRelation; total_count ignores the limit."""

    def fetch(self, query: InMemoryRelation) -> SearchResult:
        return SearchResult(listings=query.all(), total_count=len(query.matches()))
