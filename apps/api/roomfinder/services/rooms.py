"""Business logic for browsing, publishing and managing room listings."""
from __future__ import annotations

import logging
import time

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from ..models.account import Account
from ..models.room import PropertyType, Room, TenantPreference
from ..repositories import rooms as rooms_repo
from ..schemas import rooms as schemas
from . import room_filter
from .storage import StorageClient, StorageError, image_key

logger = logging.getLogger(__name__)

LOAD_FAILED = "Failed to load rooms. Please try again."
ADD_FAILED = "Failed to add room. Please try again."
UPDATE_FAILED = "Failed to update room"
DELETE_FAILED = "Failed to delete room"
CONFIRM_DELETE = "Are you sure you want to delete this listing?"


async def browse_rooms(
    criteria: schemas.RoomFilters,
    session: AsyncSession,
) -> schemas.RoomListResponse:
    """Load available rooms newest-first and narrow them to the criteria."""

    try:
        rooms = await rooms_repo.list_available(session)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching rooms")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=LOAD_FAILED) from exc

    visible = room_filter.filter_rooms(rooms, criteria)
    return schemas.RoomListResponse(
        results=[schemas.RoomRead.model_validate(room) for room in visible],
        total=len(visible),
    )


async def list_my_rooms(account: Account, session: AsyncSession) -> schemas.RoomListResponse:
    """Return every listing owned by the account, including unavailable ones."""

    try:
        rooms = await rooms_repo.list_by_owner(session, owner_id=account.id)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching rooms for owner %s", account.id)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=LOAD_FAILED) from exc

    return schemas.RoomListResponse(
        results=[schemas.RoomRead.model_validate(room) for room in rooms],
        total=len(rooms),
    )


async def get_room(room_id: str, session: AsyncSession) -> schemas.RoomRead:
    try:
        room = await rooms_repo.get_by_id(session, room_id)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching room %s", room_id)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=LOAD_FAILED) from exc

    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    return schemas.RoomRead.model_validate(room)


def room_options() -> schemas.RoomOptions:
    return schemas.RoomOptions(
        property_types=[item.value for item in PropertyType],
        tenant_preferences=[item.value for item in TenantPreference],
    )


async def create_room(
    payload: schemas.RoomCreate,
    account: Account,
    session: AsyncSession,
    storage: StorageClient,
    *,
    image: bytes | None = None,
    image_filename: str | None = None,
    image_content_type: str | None = None,
) -> schemas.RoomRead:
    """Upload the optional image, then insert the listing.

    A failed upload aborts the whole creation; the listing is never stored
    without the image the owner attached.
    """

    owner_id = account.id
    owner_name = payload.owner_name or account.name
    owner_email = payload.owner_email or account.email
    image_url: str | None = None
    try:
        if image:
            key = image_key(owner_id, image_filename, _now_ms())
            await run_in_threadpool(storage.upload, key, image, image_content_type)
            image_url = storage.public_url(key)

        room = await rooms_repo.insert_room(
            session,
            owner_id=owner_id,
            title=payload.title,
            description=payload.description,
            location=payload.location,
            city=payload.city,
            rent_price=payload.rent_price,
            property_type=payload.property_type.value,
            tenant_preference=payload.tenant_preference.value,
            owner_name=owner_name,
            owner_contact=payload.owner_contact,
            owner_email=owner_email,
            image_url=image_url,
        )
        await session.commit()
    except (StorageError, SQLAlchemyError) as exc:
        await session.rollback()
        logger.exception("Failed to add room for owner %s", owner_id)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=ADD_FAILED) from exc

    logger.info("Room %s created by %s", room.id, owner_id)
    return schemas.RoomRead.model_validate(room)


async def toggle_availability(room_id: str, account: Account, session: AsyncSession) -> schemas.RoomRead:
    """Flip the availability flag of a room the account owns."""

    room = await _load_owned_room(room_id, account, session, failure_detail=UPDATE_FAILED)
    return await _write_availability(room, not room.is_available, session)


async def set_availability(
    room_id: str,
    payload: schemas.AvailabilityUpdate,
    account: Account,
    session: AsyncSession,
) -> schemas.RoomRead:
    room = await _load_owned_room(room_id, account, session, failure_detail=UPDATE_FAILED)
    return await _write_availability(room, payload.is_available, session)


async def delete_room(
    room_id: str,
    account: Account,
    session: AsyncSession,
    *,
    confirm: bool,
) -> schemas.DeleteRoomResponse:
    """Permanently delete a room once the owner has confirmed."""

    account_id = account.id
    if not confirm:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=CONFIRM_DELETE)

    await _load_owned_room(room_id, account, session, failure_detail=DELETE_FAILED)
    try:
        deleted = await rooms_repo.delete_room(session, room_id)
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Error deleting room %s", room_id)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=DELETE_FAILED) from exc

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")

    logger.info("Room %s deleted by %s", room_id, account_id)
    return schemas.DeleteRoomResponse(id=room_id)


def _now_ms() -> int:
    return int(time.time() * 1000)


async def _load_owned_room(
    room_id: str,
    account: Account,
    session: AsyncSession,
    *,
    failure_detail: str,
) -> Room:
    try:
        room = await rooms_repo.get_by_id(session, room_id)
    except SQLAlchemyError as exc:
        logger.exception("Error loading room %s", room_id)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=failure_detail) from exc

    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    if room.owner_id != account.id:
        logger.warning("Account %s attempted to modify room %s owned by %s", account.id, room.id, room.owner_id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only manage your own listings")
    return room


async def _write_availability(room: Room, is_available: bool, session: AsyncSession) -> schemas.RoomRead:
    room_id = room.id
    try:
        room = await rooms_repo.update_availability(session, room, is_available=is_available)
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Error updating room %s", room_id)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=UPDATE_FAILED) from exc

    return schemas.RoomRead.model_validate(room)
