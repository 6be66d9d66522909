"""SQLAlchemy implementation of the listings query objects."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, ClassVar

from sqlalchemy import or_, select

from listings_query.adapters.param_coercion import (
    as_bool,
    as_datetime,
    as_decimal,
    as_int,
    as_list,
    as_non_negative_int,
    bounding_box,
)
from listings_query.domain.listing import ActingUser, ListingKind, is_present
from listings_query.infra.db.models.listing import ListingRow
from listings_query.ports.listings_query import (
    AdvisorListingsQuery,
    CpaListingsQuery,
    ListingsQuery,
    ListingsQueryFactory,
)

if TYPE_CHECKING:
    from sqlalchemy.sql import Select


Geocoder = Callable[[str], "tuple[float, float] | None"]
Clock = Callable[[], datetime]

DEFAULT_DISTANCE_MILES = Decimal("25")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ==============================================================================
# Query objects
# ==============================================================================


class SqlAlchemyListingsQuery(ListingsQuery):
    """
    Listings query object that composes a SQLAlchemy ``Select``.

    - Base relation: listings visible to the acting user (published, or owned)
    - Every filter adds a WHERE clause (AND semantics)
    - Nothing is executed here; see PostgresListingRepository
    """

    kind: ClassVar[ListingKind] = ListingKind.GENERIC
    market: ClassVar[str | None] = None

    def __init__(
        self,
        acting_user: ActingUser | None,
        geocoder: Geocoder | None = None,
        clock: Clock = _utcnow,
    ) -> None:
        super().__init__(acting_user)
        self._geocoder = geocoder
        self._clock = clock
        self._relation = self._base_relation()

    @property
    def relation(self) -> Select[tuple[ListingRow]]:
        return self._relation

    def _base_relation(self) -> Select[tuple[ListingRow]]:
        query = select(ListingRow)

        if self.market is not None:
            query = query.where(ListingRow.market == self.market)

        if self.acting_user is None:
            query = query.where(ListingRow.published.is_(True))
        else:
            query = query.where(
                or_(ListingRow.published.is_(True), ListingRow.user_id == self.acting_user.id)
            )

        return query.order_by(ListingRow.published_at.desc().nulls_last(), ListingRow.id.desc())

    def _where(self, *criteria: Any) -> SqlAlchemyListingsQuery:
        self._relation = self._relation.where(*criteria)
        return self

    def _within(self, latitude: float, longitude: float, distance: Decimal) -> SqlAlchemyListingsQuery:
        # Bounding box, not great-circle distance
        min_lat, max_lat, min_lon, max_lon = bounding_box(latitude, longitude, float(distance))

        return self._where(
            ListingRow.latitude.between(min_lat, max_lat),
            ListingRow.longitude.between(min_lon, max_lon),
        )

    # --- generic filters ------------------------------------------------------

    def near(self, location: Any, distance: Any) -> SqlAlchemyListingsQuery:
        place = str(location).strip()
        radius = as_decimal(distance, "distance") if is_present(distance) else DEFAULT_DISTANCE_MILES

        coordinates = self._geocoder(place) if self._geocoder is not None else None
        if coordinates is None:
            return self._where(ListingRow.location.icontains(place, autoescape=True))

        latitude, longitude = coordinates
        return self._within(latitude, longitude, radius)

    def with_lat_lon(self, latitude: Any, longitude: Any, distance: Any) -> SqlAlchemyListingsQuery:
        return self._within(
            float(as_decimal(latitude, "latitude")),
            float(as_decimal(longitude, "longitude")),
            as_decimal(distance, "distance"),
        )

    def with_favorited(self, favorited_ids: Any) -> SqlAlchemyListingsQuery:
        ids = [as_int(value, "favorited_ids") for value in as_list(favorited_ids)]
        # An empty list renders as an always-false IN, i.e. no favorites, no results
        return self._where(ListingRow.id.in_(ids))

    def interested_in(self, interest_options: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.interest_options.overlap(as_list(interest_options)))

    def with_published_date_after(self, published_date: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.published_at > as_datetime(published_date, "published_date"))

    def with_listing_id(self, listing_id: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.id == as_int(listing_id, "listing_id"))

    def with_delay(self, days: Any) -> SqlAlchemyListingsQuery:
        cutoff = self._clock() - timedelta(days=as_int(days, "days_listing_access_delayed"))
        return self._where(ListingRow.published_at <= cutoff)

    def with_wizard_status(self, wizard_status: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.wizard_status.in_(as_list(wizard_status)))

    def with_published(self, published: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.published.is_(as_bool(published, "published")))

    def with_membership(self, membership: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.membership == str(membership).strip())

    def with_user_id(self, user_id: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.user_id == as_int(user_id, "user_id"))

    def without_user_id(self, user_id: Any) -> SqlAlchemyListingsQuery:
        excluded = as_int(user_id, "exclude_user_id")
        return self._where(or_(ListingRow.user_id.is_(None), ListingRow.user_id != excluded))

    def with_limit(self, limit: Any) -> SqlAlchemyListingsQuery:
        self._relation = self._relation.limit(as_non_negative_int(limit, "limit"))
        return self

    # --- percent fee (advisor and cpa) ----------------------------------------

    def with_percent_fee_equal_to(self, fee: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.percent_fee == as_decimal(fee, "percent_fee"))

    def with_percent_fee_between(self, minimum: Any, maximum: Any) -> SqlAlchemyListingsQuery:
        return self._where(
            ListingRow.percent_fee.between(
                as_decimal(minimum, "percent_fee"), as_decimal(maximum, "percent_fee")
            )
        )


class SqlAlchemyAdvisorListingsQuery(SqlAlchemyListingsQuery, AdvisorListingsQuery):
    kind: ClassVar[ListingKind] = ListingKind.ADVISOR
    market: ClassVar[str | None] = "advisor"

    def with_max_aum(self, value: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.aum <= as_decimal(value, "max_aum"))

    def with_min_aum(self, value: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.aum >= as_decimal(value, "min_aum"))

    def with_max_gdc(self, value: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.gdc <= as_decimal(value, "max_gdc"))

    def with_min_gdc(self, value: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.gdc >= as_decimal(value, "min_gdc"))

    def with_clearing_firm_options(self, options: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.clearing_firm.in_(as_list(options)))

    def with_broker_dealer(self, broker_dealer: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.broker_dealer.icontains(str(broker_dealer).strip(), autoescape=True))

    def with_advisor_id(self, advisor_id: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.advisor_id == as_int(advisor_id, "advisor_id"))


class SqlAlchemyCpaListingsQuery(SqlAlchemyListingsQuery, CpaListingsQuery):
    kind: ClassVar[ListingKind] = ListingKind.CPA
    market: ClassVar[str | None] = "cpa"

    def with_max_revenue(self, value: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.revenue <= as_decimal(value, "max_revenue"))

    def with_min_revenue(self, value: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.revenue >= as_decimal(value, "min_revenue"))

    def with_services_options(self, options: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.services.overlap(as_list(options)))

    def with_credential_options(self, options: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.credentials.overlap(as_list(options)))

    def with_cpa_id(self, cpa_id: Any) -> SqlAlchemyListingsQuery:
        return self._where(ListingRow.cpa_id == as_int(cpa_id, "cpa_id"))


class SqlAlchemyListingsQueryFactory(ListingsQueryFactory):
    """Builds a fresh SQLAlchemy query object per search."""

    def __init__(self, geocoder: Geocoder | None = None, clock: Clock = _utcnow) -> None:
        self._geocoder = geocoder
        self._clock = clock

    def generic(self, acting_user: ActingUser | None) -> SqlAlchemyListingsQuery:
        return SqlAlchemyListingsQuery(acting_user, geocoder=self._geocoder, clock=self._clock)

    def advisor(self, acting_user: ActingUser | None) -> SqlAlchemyAdvisorListingsQuery:
        return SqlAlchemyAdvisorListingsQuery(acting_user, geocoder=self._geocoder, clock=self._clock)

    def cpa(self, acting_user: ActingUser | None) -> SqlAlchemyCpaListingsQuery:
        return SqlAlchemyCpaListingsQuery(acting_user, geocoder=self._geocoder, clock=self._clock)
