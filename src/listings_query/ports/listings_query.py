from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from listings_query.domain.listing import ActingUser, ListingKind


class ListingsQuery(ABC):
    """
    Port for a composable listings query (query object).

    Every filter method narrows the relation (AND semantics) and returns
    ``self`` so calls can be chained. Values arrive exactly as the caller sent
    them; implementations interpret (and coerce) them.

    ``kind`` is the discriminant the filter pipeline dispatches on.
    """

    kind: ClassVar[ListingKind] = ListingKind.GENERIC

    def __init__(self, acting_user: ActingUser | None) -> None:
        self.acting_user = acting_user

    @property
    @abstractmethod
    def relation(self) -> Any:
        """The composed (not yet executed) query."""
        ...

    @abstractmethod
    def near(self, location: Any, distance: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_lat_lon(self, latitude: Any, longitude: Any, distance: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_favorited(self, favorited_ids: Any) -> ListingsQuery: ...

    @abstractmethod
    def interested_in(self, interest_options: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_published_date_after(self, published_date: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_listing_id(self, listing_id: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_delay(self, days: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_wizard_status(self, wizard_status: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_published(self, published: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_membership(self, membership: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_user_id(self, user_id: Any) -> ListingsQuery: ...

    @abstractmethod
    def without_user_id(self, user_id: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_limit(self, limit: Any) -> ListingsQuery: ...


class PercentFeeQuery(ABC):
    @abstractmethod
    def with_percent_fee_equal_to(self, fee: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_percent_fee_between(self, minimum: Any, maximum: Any) -> ListingsQuery: ...


class AdvisorListingsQuery(PercentFeeQuery, ListingsQuery):
    kind: ClassVar[ListingKind] = ListingKind.ADVISOR

    @abstractmethod
    def with_max_aum(self, value: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_min_aum(self, value: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_max_gdc(self, value: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_min_gdc(self, value: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_clearing_firm_options(self, options: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_broker_dealer(self, broker_dealer: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_advisor_id(self, advisor_id: Any) -> ListingsQuery: ...


class CpaListingsQuery(PercentFeeQuery, ListingsQuery):
    kind: ClassVar[ListingKind] = ListingKind.CPA

    @abstractmethod
    def with_max_revenue(self, value: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_min_revenue(self, value: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_services_options(self, options: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_credential_options(self, options: Any) -> ListingsQuery: ...

    @abstractmethod
    def with_cpa_id(self, cpa_id: Any) -> ListingsQuery: ...


class ListingsQueryFactory(ABC):
    """
    Port that builds fresh query objects bound to the acting user.

    Implementations must return a new instance on every call.
    """

    @abstractmethod
    def generic(self, acting_user: ActingUser | None) -> ListingsQuery: ...

    @abstractmethod
    def advisor(self, acting_user: ActingUser | None) -> AdvisorListingsQuery: ...

    @abstractmethod
    def cpa(self, acting_user: ActingUser | None) -> CpaListingsQuery: ...
