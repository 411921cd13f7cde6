"""Pure filtering of room listings against browse criteria.

Every predicate is independent and skipped when its criterion is blank or set
to the ``All`` wildcard. Active predicates are ANDed together and the input
order (newest first, as loaded) is preserved.
"""
from __future__ import annotations

import re
from typing import Iterable, Protocol, TypeVar

from ..schemas.rooms import ALL_OPTION, RoomFilters

_LEADING_SIGN = re.compile(r"\s*([+-]?)")
_DECIMAL_DIGITS = re.compile(r"[0-9]+")
_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")


class RoomLike(Protocol):
    """Attributes the filter reads from a listing."""

    title: str
    description: str
    location: str
    city: str
    rent_price: int
    property_type: str
    tenant_preference: str


RoomT = TypeVar("RoomT", bound=RoomLike)


def parse_price_bound(raw: str | None) -> int | None:
    """Parse a typed price the way a browser ``parseInt`` would.

    Leading whitespace and a sign are accepted, then as many ASCII digits as
    are present: ``"12.5"`` gives 12 and ``"15000abc"`` gives 15000. A ``0x``
    prefix switches to hexadecimal, so ``"0x1A"`` gives 26. Returns None when
    no digits lead the string, meaning the bound is not applied.
    """

    if not raw:
        return None
    sign = _LEADING_SIGN.match(raw)
    position = sign.end()
    pattern, base = _DECIMAL_DIGITS, 10
    if raw[position:position + 2] in ("0x", "0X"):
        pattern, base = _HEX_DIGITS, 16
        position += 2
    digits = pattern.match(raw, position)
    if digits is None:
        return None
    value = int(digits.group(0), base)
    return -value if sign.group(1) == "-" else value


def _is_wildcard(selector: str | None) -> bool:
    return not selector or selector == ALL_OPTION


def matches(room: RoomLike, criteria: RoomFilters) -> bool:
    """Return True if a single room satisfies every active predicate."""

    if criteria.search:
        needle = criteria.search.lower()
        haystacks = (room.title, room.location, room.city, room.description)
        if not any(needle in (field or "").lower() for field in haystacks):
            return False

    if criteria.city and criteria.city.lower() not in (room.city or "").lower():
        return False

    min_price = parse_price_bound(criteria.min_price)
    if min_price is not None and room.rent_price < min_price:
        return False

    max_price = parse_price_bound(criteria.max_price)
    if max_price is not None and room.rent_price > max_price:
        return False

    if not _is_wildcard(criteria.property_type) and room.property_type != criteria.property_type:
        return False

    if not _is_wildcard(criteria.tenant_preference) and room.tenant_preference != criteria.tenant_preference:
        return False

    return True


def filter_rooms(rooms: Iterable[RoomT], criteria: RoomFilters) -> list[RoomT]:
    """Return the rooms matching ``criteria`` in their input order."""

    return [room for room in rooms if matches(room, criteria)]
