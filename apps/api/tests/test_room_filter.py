"""Tests for the browse filter, including property-based checks."""
from __future__ import annotations

from dataclasses import dataclass

import pytest
from hypothesis import given, settings, strategies as st

from roomfinder.models.room import Room
from roomfinder.schemas.rooms import RoomFilters
from roomfinder.services.room_filter import filter_rooms, matches, parse_price_bound


@dataclass(frozen=True)
class Listing:
    id: int
    title: str
    description: str
    location: str
    city: str
    rent_price: int
    property_type: str
    tenant_preference: str


PROPERTY_TYPES = ["1 BHK", "2 BHK", "3 BHK", "1 Bed", "2 Bed", "3 Bed"]
TENANT_PREFERENCES = ["Bachelor", "Family", "Girls", "Working"]

# A narrow alphabet so generated search terms actually hit listing text.
words = st.text(alphabet="abpPuUne ", max_size=8)

listings = st.builds(
    Listing,
    id=st.integers(min_value=0, max_value=10_000),
    title=words,
    description=words,
    location=words,
    city=words,
    rent_price=st.integers(min_value=0, max_value=100_000),
    property_type=st.sampled_from(PROPERTY_TYPES),
    tenant_preference=st.sampled_from(TENANT_PREFERENCES),
)

price_text = st.one_of(
    st.just(""),
    st.integers(min_value=0, max_value=100_000).map(str),
    st.sampled_from(["abc", "12.5", " 900", "15000abc", "-"]),
)

criteria = st.builds(
    RoomFilters,
    search=words,
    city=words,
    min_price=price_text,
    max_price=price_text,
    property_type=st.sampled_from(["All", "", *PROPERTY_TYPES]),
    tenant_preference=st.sampled_from(["All", "", *TENANT_PREFERENCES]),
)


def make_listing(**overrides) -> Listing:
    values = dict(
        id=1,
        title="Cozy room",
        description="Near the station",
        location="Kothrud",
        city="Pune",
        rent_price=15000,
        property_type="2 BHK",
        tenant_preference="Family",
    )
    values.update(overrides)
    return Listing(**values)


def test_price_range_and_city_scenario_included() -> None:
    listing = make_listing()
    result = filter_rooms(
        [listing], RoomFilters(min_price="10000", max_price="20000", city="pune")
    )

    assert result == [listing]


def test_property_type_mismatch_excluded() -> None:
    listing = make_listing()

    assert filter_rooms([listing], RoomFilters(property_type="1 BHK")) == []


@pytest.mark.parametrize("field", ["title", "location", "city", "description"])
def test_search_matches_any_text_field_case_insensitively(field: str) -> None:
    blank = dict(title="Room", location="Area", city="Nagpur", description="Quiet")
    blank[field] = "Near PUNE station"
    listing = make_listing(**blank)
    other = make_listing(id=2, title="Room", location="Area", city="Nagpur", description="Quiet")

    assert filter_rooms([listing, other], RoomFilters(search="pune")) == [listing]


def test_city_only_checks_city_field() -> None:
    in_title = make_listing(title="Pune view", city="Mumbai")

    assert filter_rooms([in_title], RoomFilters(city="pune")) == []


def test_tenant_preference_exact_match() -> None:
    family = make_listing(id=1, tenant_preference="Family")
    girls = make_listing(id=2, tenant_preference="Girls")

    assert filter_rooms([family, girls], RoomFilters(tenant_preference="Girls")) == [girls]
    assert filter_rooms([family, girls], RoomFilters(tenant_preference="All")) == [family, girls]


def test_price_bounds_are_inclusive() -> None:
    listing = make_listing(rent_price=15000)

    assert matches(listing, RoomFilters(min_price="15000", max_price="15000"))
    assert not matches(listing, RoomFilters(min_price="15001"))
    assert not matches(listing, RoomFilters(max_price="14999"))


def test_unparseable_bounds_are_ignored() -> None:
    listing = make_listing(rent_price=15000)

    assert matches(listing, RoomFilters(min_price="abc", max_price="not a number"))


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("", None),
        (None, None),
        ("abc", None),
        ("-", None),
        ("15000", 15000),
        ("  900", 900),
        ("12.5", 12),
        ("15000abc", 15000),
        ("-5", -5),
        ("+7", 7),
        ("0", 0),
        ("\u0661\u0662", None),
        ("12\u0663", 12),
        ("0x1A", 26),
        ("-0XfF", -255),
        ("0x", None),
        ("0xZ", None),
    ],
)
def test_parse_price_bound(raw, expected) -> None:
    assert parse_price_bound(raw) == expected


def test_works_on_orm_rows() -> None:
    room = Room(
        id="room-1",
        title="2 BHK in Baner",
        description="Balcony",
        location="Baner Road",
        city="Pune",
        rent_price=18000,
        property_type="2 BHK",
        tenant_preference="Working",
    )

    assert filter_rooms([room], RoomFilters(search="baner", max_price="20000")) == [room]


@settings(max_examples=200)
@given(rooms=st.lists(listings, max_size=15), criteria=criteria)
def test_filter_returns_subset(rooms, criteria) -> None:
    result = filter_rooms(rooms, criteria)

    assert all(room in rooms for room in result)
    assert len(result) <= len(rooms)


@given(rooms=st.lists(listings, max_size=15))
def test_empty_criteria_is_identity(rooms) -> None:
    assert filter_rooms(rooms, RoomFilters()) == rooms


@settings(max_examples=200)
@given(rooms=st.lists(listings, max_size=15), criteria=criteria)
def test_filter_is_idempotent(rooms, criteria) -> None:
    once = filter_rooms(rooms, criteria)

    assert filter_rooms(once, criteria) == once


@settings(max_examples=200)
@given(rooms=st.lists(listings, max_size=15, unique_by=lambda item: item.id), criteria=criteria)
def test_filter_preserves_input_order(rooms, criteria) -> None:
    result = filter_rooms(rooms, criteria)
    positions = [rooms.index(room) for room in result]

    assert positions == sorted(positions)
