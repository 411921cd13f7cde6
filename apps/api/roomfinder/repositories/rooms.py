"""Persistence helpers for room listings."""
from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.room import Room


async def list_available(session: AsyncSession) -> list[Room]:
    """Return every available room, newest first."""

    stmt: Select[tuple[Room]] = (
        select(Room)
        .where(Room.is_available.is_(True))
        .order_by(Room.created_at.desc(), Room.id.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_by_owner(session: AsyncSession, *, owner_id: str) -> list[Room]:
    """Return all rooms owned by the account, newest first, available or not."""

    stmt: Select[tuple[Room]] = (
        select(Room)
        .where(Room.owner_id == owner_id)
        .order_by(Room.created_at.desc(), Room.id.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_by_id(session: AsyncSession, room_id: str) -> Room | None:
    """Return a room by identifier."""

    stmt: Select[tuple[Room]] = select(Room).where(Room.id == room_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def insert_room(
    session: AsyncSession,
    *,
    owner_id: str,
    title: str,
    description: str,
    location: str,
    city: str,
    rent_price: int,
    property_type: str,
    tenant_preference: str,
    owner_name: str,
    owner_contact: str,
    owner_email: str,
    image_url: str | None = None,
) -> Room:
    """Add a new available room and flush so defaults are populated."""

    now = datetime.now(timezone.utc)
    room = Room(
        id=str(uuid4()),
        owner_id=owner_id,
        title=title,
        description=description,
        location=location,
        city=city,
        rent_price=rent_price,
        property_type=property_type,
        tenant_preference=tenant_preference,
        image_url=image_url,
        owner_name=owner_name,
        owner_contact=owner_contact,
        owner_email=owner_email,
        created_at=now,
        updated_at=now,
        is_available=True,
    )
    session.add(room)
    await session.flush()
    return room


async def update_availability(session: AsyncSession, room: Room, *, is_available: bool) -> Room:
    """Set the availability flag on an already loaded room."""

    room.is_available = is_available
    room.updated_at = datetime.now(timezone.utc)
    session.add(room)
    await session.flush()
    return room


async def delete_room(session: AsyncSession, room_id: str) -> bool:
    """Permanently remove a room. Returns True when a row was deleted."""

    result = await session.execute(delete(Room).where(Room.id == room_id))
    return (result.rowcount or 0) > 0
