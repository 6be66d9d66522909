from __future__ import annotations

from collections.abc import Mapping, Sized
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any

from listings_query.domain.errors import UnrecognizedKindError


class ListingKind(str, Enum):
    GENERIC = "listing"
    ADVISOR = "advisor"
    CPA = "cpa"


# Normalized selector -> kind
KIND_ALIASES: Mapping[str, ListingKind] = MappingProxyType(
    {
        "listing": ListingKind.GENERIC,
        "all": ListingKind.GENERIC,
        "advisor": ListingKind.ADVISOR,
        "cpa": ListingKind.CPA,
    }
)

DEFAULT_KIND_SELECTOR = "all"
BLANK_KIND_SELECTOR = "listing"


@dataclass(frozen=True, slots=True)
class ActingUser:
    """Opaque reference to the authenticated caller."""

    id: Any


@dataclass(frozen=True, slots=True)
class QueryContext:
    acting_user: ActingUser | None
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Snapshot the caller's mapping so later mutation cannot leak into a search
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def get(self, key: str) -> Any:
        return self.params.get(key)


@dataclass(frozen=True)
class Listing:
    id: int
    market: str
    title: str
    user_id: int | None = None
    location: str | None = None
    latitude: Decimal | None = None
    longitude: Decimal | None = None
    published: bool = False
    published_at: datetime | None = None
    wizard_status: str | None = None
    membership: str | None = None
    interest_options: tuple[str, ...] = ()
    percent_fee: Decimal | None = None
    aum: Decimal | None = None
    gdc: Decimal | None = None
    clearing_firm: str | None = None
    broker_dealer: str | None = None
    advisor_id: int | None = None
    revenue: Decimal | None = None
    services: tuple[str, ...] = ()
    credentials: tuple[str, ...] = ()
    cpa_id: int | None = None


# ==============================================================================
# Presence rules
# ==============================================================================


def is_present(value: Any) -> bool:
    """
    True when a parameter carries a usable value.

    None, False, whitespace-only strings and empty collections are blank.
    Numbers (including 0) are present.
    """
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, Sized):
        return len(value) > 0
    return True


def is_not_absent(value: Any) -> bool:
    """
    True for anything but None.

    Broader than is_present: empty strings and empty collections pass.
    """
    return value is not None


# ==============================================================================
# Kind resolution
# ==============================================================================

_ES_PLURAL_ENDINGS = ("sses", "xes", "ches", "shes")


def singularize(word: str) -> str:
    if word.endswith("ies") and len(word) > 3:
        return word[:-3] + "y"
    if word.endswith(_ES_PLURAL_ENDINGS):
        return word[:-2]
    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


def resolve_kind(params: Mapping[str, Any]) -> ListingKind:
    """
    Derive the listing kind from the ``market``/``type`` selector.

    Only a missing (None) ``market`` falls through to ``type``; a blank
    selector resolves to the generic kind.

    Raises:
        UnrecognizedKindError: If the normalized selector is not a known kind
    """
    source = "market"
    raw = params.get("market")
    if raw is None and params.get("type") is not None:
        source = "type"
        raw = params.get("type")
    if raw is None:
        raw = DEFAULT_KIND_SELECTOR

    if is_present(raw):
        normalized = singularize(str(raw).strip().lower())
    else:
        normalized = BLANK_KIND_SELECTOR

    try:
        return KIND_ALIASES[normalized]
    except KeyError:
        raise UnrecognizedKindError(kind=raw, normalized=normalized, field=source) from None
