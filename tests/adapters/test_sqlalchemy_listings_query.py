"""
Unit tests for the SQLAlchemy listings query objects.

Statements are compiled with the PostgreSQL dialect (no database needed) and
the SQL text and bound parameters are inspected.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

import pytest
from sqlalchemy.dialects import postgresql

from listings_query.adapters.param_coercion import InvalidFilterValue
from listings_query.adapters.sqlalchemy_listings_query import (
    SqlAlchemyAdvisorListingsQuery,
    SqlAlchemyCpaListingsQuery,
    SqlAlchemyListingsQuery,
    SqlAlchemyListingsQueryFactory,
)
from listings_query.domain.listing import ActingUser, ListingKind
from listings_query.use_cases.listings_search import ListingsSearch

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _compile(query: Any) -> tuple[str, list[Any]]:
    compiled = query.compile(dialect=postgresql.dialect())
    return str(compiled), list(compiled.params.values())


def _where(sql: str) -> str:
    return sql.split("WHERE", 1)[1]


@pytest.fixture()
def query() -> SqlAlchemyListingsQuery:
    return SqlAlchemyListingsQuery(ActingUser(id=5), clock=lambda: NOW)


# ==============================================================================
# Base relation
# ==============================================================================


def test_anonymous_sees_published_listings_only() -> None:
    sql, _ = _compile(SqlAlchemyListingsQuery(None).relation)

    assert "listings.published IS true" in sql
    assert "listings.user_id" not in _where(sql)


def test_acting_user_also_sees_own_listings(query: SqlAlchemyListingsQuery) -> None:
    sql, params = _compile(query.relation)

    assert "listings.published IS true OR listings.user_id = " in sql
    assert 5 in params


def test_generic_query_spans_all_markets(query: SqlAlchemyListingsQuery) -> None:
    sql, _ = _compile(query.relation)

    assert "listings.market" not in _where(sql)


@pytest.mark.parametrize(
    ("query_class", "market"),
    [(SqlAlchemyAdvisorListingsQuery, "advisor"), (SqlAlchemyCpaListingsQuery, "cpa")],
)
def test_domain_queries_are_restricted_to_their_market(query_class: type, market: str) -> None:
    sql, params = _compile(query_class(None).relation)

    assert "listings.market = " in sql
    assert market in params


def test_newest_listings_first(query: SqlAlchemyListingsQuery) -> None:
    sql, _ = _compile(query.relation)

    assert "ORDER BY listings.published_at DESC NULLS LAST, listings.id DESC" in sql


def test_discriminants() -> None:
    assert SqlAlchemyListingsQuery.kind is ListingKind.GENERIC
    assert SqlAlchemyAdvisorListingsQuery.kind is ListingKind.ADVISOR
    assert SqlAlchemyCpaListingsQuery.kind is ListingKind.CPA


# ==============================================================================
# Generic filters
# ==============================================================================


def test_filters_chain(query: SqlAlchemyListingsQuery) -> None:
    assert query.with_membership("premium").with_user_id("3") is query


def test_near_without_geocoder_matches_location_text(query: SqlAlchemyListingsQuery) -> None:
    sql, params = _compile(query.near("Denver", None).relation)

    assert "listings.location" in _where(sql)
    assert "listings.latitude" not in sql.split("FROM", 1)[1]
    assert "Denver" in params


def test_near_with_geocoder_uses_bounding_box() -> None:
    query = SqlAlchemyListingsQuery(None, geocoder=lambda place: (39.7, -104.9))

    sql, params = _compile(query.near("Denver", "69").relation)

    assert "listings.latitude BETWEEN" in sql
    assert "listings.longitude BETWEEN" in sql
    assert pytest.approx(38.7) in params
    assert pytest.approx(40.7) in params


def test_near_falls_back_when_geocoder_misses() -> None:
    query = SqlAlchemyListingsQuery(None, geocoder=lambda place: None)

    sql, _ = _compile(query.near("Nowhere", "10").relation)

    assert "BETWEEN" not in sql


def test_with_lat_lon(query: SqlAlchemyListingsQuery) -> None:
    sql, params = _compile(query.with_lat_lon("10", "20", "69").relation)

    assert "listings.latitude BETWEEN" in sql
    assert pytest.approx(9.0) in params
    assert pytest.approx(11.0) in params


def test_with_favorited_ids(query: SqlAlchemyListingsQuery) -> None:
    sql, params = _compile(query.with_favorited(["1", "2"]).relation)

    assert "listings.id IN" in sql
    assert [1, 2] in params


def test_with_favorited_empty_matches_nothing(query: SqlAlchemyListingsQuery) -> None:
    sql, params = _compile(query.with_favorited([]).relation)

    assert "listings.id IN" in sql
    assert [] in params


def test_with_favorited_accepts_comma_separated(query: SqlAlchemyListingsQuery) -> None:
    _, params = _compile(query.with_favorited("4, 5").relation)

    assert [4, 5] in params


def test_interested_in_uses_array_overlap(query: SqlAlchemyListingsQuery) -> None:
    sql, params = _compile(query.interested_in("acquisition,merger").relation)

    assert "listings.interest_options &&" in sql
    assert ["acquisition", "merger"] in params


def test_with_published_date_after(query: SqlAlchemyListingsQuery) -> None:
    sql, params = _compile(query.with_published_date_after("2025-06-01").relation)

    assert "listings.published_at >" in sql
    assert datetime(2025, 6, 1, tzinfo=timezone.utc) in params


def test_with_delay_uses_clock(query: SqlAlchemyListingsQuery) -> None:
    sql, params = _compile(query.with_delay("3").relation)

    assert "listings.published_at <=" in sql
    assert NOW - timedelta(days=3) in params


def test_with_published_parses_flag(query: SqlAlchemyListingsQuery) -> None:
    sql, _ = _compile(query.with_published("false").relation)

    assert "listings.published IS false" in sql


def test_without_user_id_keeps_unowned_listings(query: SqlAlchemyListingsQuery) -> None:
    sql, params = _compile(query.without_user_id("9").relation)

    assert "listings.user_id IS NULL OR listings.user_id != " in sql
    assert 9 in params


def test_with_limit(query: SqlAlchemyListingsQuery) -> None:
    sql, params = _compile(query.with_limit("10").relation)

    assert "LIMIT" in sql
    assert 10 in params


def test_with_limit_zero_is_allowed(query: SqlAlchemyListingsQuery) -> None:
    _, params = _compile(query.with_limit("0").relation)

    assert 0 in params


def test_with_limit_rejects_negative(query: SqlAlchemyListingsQuery) -> None:
    with pytest.raises(InvalidFilterValue, match="limit must be a non-negative integer"):
        query.with_limit("-1")


@pytest.mark.parametrize(
    ("method", "value"),
    [
        ("with_listing_id", "abc"),
        ("with_limit", "ten"),
        ("with_limit", "-1"),
        ("with_published", "maybe"),
        ("with_published_date_after", "yesterday"),
        ("with_favorited", ["1", "x"]),
    ],
)
def test_malformed_values_raise_invalid_filter_value(
    query: SqlAlchemyListingsQuery, method: str, value: Any
) -> None:
    with pytest.raises(InvalidFilterValue):
        getattr(query, method)(value)


# ==============================================================================
# Advisor and CPA filters
# ==============================================================================


def test_advisor_bounds() -> None:
    query = SqlAlchemyAdvisorListingsQuery(None)

    sql, params = _compile(
        query.with_max_aum("500000000").with_min_aum("1000000").with_min_gdc("250000").relation
    )

    assert "listings.aum <=" in sql
    assert "listings.aum >=" in sql
    assert "listings.gdc >=" in sql
    assert Decimal("500000000") in params
    assert Decimal("1000000") in params
    assert Decimal("250000") in params


def test_advisor_firm_filters() -> None:
    query = SqlAlchemyAdvisorListingsQuery(None)

    sql, params = _compile(
        query.with_clearing_firm_options(["Pershing", "LPL"]).with_advisor_id("12").relation
    )

    assert "listings.clearing_firm IN" in sql
    assert ["Pershing", "LPL"] in params
    assert 12 in params


def test_percent_fee_equal_to() -> None:
    sql, params = _compile(SqlAlchemyAdvisorListingsQuery(None).with_percent_fee_equal_to("1.5").relation)

    assert "listings.percent_fee = " in sql
    assert Decimal("1.5") in params


def test_percent_fee_between() -> None:
    sql, params = _compile(SqlAlchemyCpaListingsQuery(None).with_percent_fee_between("1", "2").relation)

    assert "listings.percent_fee BETWEEN" in sql
    assert Decimal("1") in params
    assert Decimal("2") in params


def test_percent_fee_malformed_bound_raises() -> None:
    with pytest.raises(ValueError):
        SqlAlchemyCpaListingsQuery(None).with_percent_fee_between("", "10")


def test_cpa_filters() -> None:
    query = SqlAlchemyCpaListingsQuery(None)

    sql, params = _compile(
        query.with_max_revenue("900000")
        .with_services_options(["tax"])
        .with_credential_options("CPA,EA")
        .with_cpa_id("3")
        .relation
    )

    assert "listings.revenue <=" in sql
    assert "listings.services &&" in sql
    assert "listings.credentials &&" in sql
    assert ["CPA", "EA"] in params
    assert 3 in params


def test_max_revenue_rejects_text() -> None:
    with pytest.raises(ValueError, match="max_revenue"):
        SqlAlchemyCpaListingsQuery(None).with_max_revenue("lots")


# ==============================================================================
# Factory and end-to-end composition
# ==============================================================================


def test_factory_builds_fresh_bound_instances() -> None:
    factory = SqlAlchemyListingsQueryFactory()
    user = ActingUser(id=1)

    first = factory.advisor(user)
    second = factory.advisor(user)

    assert isinstance(first, SqlAlchemyAdvisorListingsQuery)
    assert first is not second
    assert first.acting_user is user
    assert isinstance(factory.generic(user), SqlAlchemyListingsQuery)
    assert isinstance(factory.cpa(user), SqlAlchemyCpaListingsQuery)


def test_search_composes_advisor_select() -> None:
    search = ListingsSearch(SqlAlchemyListingsQueryFactory(clock=lambda: NOW))

    relation = search.search(
        None,
        {"market": "Advisors", "percent_fee": "1-2", "min_aum": "1000000", "limit": "5"},
    )

    sql, params = _compile(relation)
    assert "listings.market = " in sql
    assert "listings.percent_fee BETWEEN" in sql
    assert "listings.aum >=" in sql
    assert "LIMIT" in sql
    assert "advisor" in params
    assert 5 in params


def test_identical_searches_compile_identically() -> None:
    search = ListingsSearch(SqlAlchemyListingsQueryFactory(clock=lambda: NOW))
    params = {"market": "cpas", "service_options": ["tax"], "days_listing_access_delayed": "2"}

    first = _compile(search.search(ActingUser(id=1), params))
    second = _compile(search.search(ActingUser(id=1), params))

    assert first == second
