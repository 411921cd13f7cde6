"""Room listing endpoints: public browsing and owner management."""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..db.session import get_session
from ..dependencies import get_current_account, get_storage_client
from ..models.account import Account
from ..models.room import PropertyType, TenantPreference
from ..schemas import rooms as schemas
from ..services import rooms as rooms_service
from ..services.storage import StorageClient

router = APIRouter()


@router.get("", response_model=schemas.RoomListResponse)
async def browse_rooms(
    search: str = "",
    city: str = "",
    min_price: str = "",
    max_price: str = "",
    property_type: str = Query(default=schemas.ALL_OPTION),
    tenant_preference: str = Query(default=schemas.ALL_OPTION),
    session: AsyncSession = Depends(get_session),
) -> schemas.RoomListResponse:
    """Return available rooms matching the browse criteria, newest first."""

    criteria = schemas.RoomFilters(
        search=search,
        city=city,
        min_price=min_price,
        max_price=max_price,
        property_type=property_type,
        tenant_preference=tenant_preference,
    )
    return await rooms_service.browse_rooms(criteria, session)


@router.get("/options", response_model=schemas.RoomOptions)
async def room_options() -> schemas.RoomOptions:
    """Return the selectable property types and tenant preferences."""

    return rooms_service.room_options()


@router.get("/mine", response_model=schemas.RoomListResponse)
async def my_rooms(
    account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_session),
) -> schemas.RoomListResponse:
    """Return the signed-in owner's listings."""

    return await rooms_service.list_my_rooms(account, session)


@router.get("/{room_id}", response_model=schemas.RoomRead)
async def get_room(room_id: str, session: AsyncSession = Depends(get_session)) -> schemas.RoomRead:
    return await rooms_service.get_room(room_id, session)


@router.post("", response_model=schemas.RoomRead, status_code=status.HTTP_201_CREATED)
async def create_room(
    title: str = Form(...),
    description: str = Form(...),
    location: str = Form(...),
    city: str = Form(...),
    rent_price: int = Form(..., ge=0),
    property_type: PropertyType = Form(default=PropertyType.ONE_BHK),
    tenant_preference: TenantPreference = Form(default=TenantPreference.BACHELOR),
    owner_name: str = Form(default=""),
    owner_contact: str = Form(...),
    owner_email: str = Form(default=""),
    image: UploadFile | None = File(default=None),
    account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_session),
    storage: StorageClient = Depends(get_storage_client),
) -> schemas.RoomRead:
    """Publish a new listing, optionally with an image."""

    try:
        payload = schemas.RoomCreate(
            title=title,
            description=description,
            location=location,
            city=city,
            rent_price=rent_price,
            property_type=property_type,
            tenant_preference=tenant_preference,
            owner_name=owner_name,
            owner_contact=owner_contact,
            owner_email=owner_email,
        )
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc

    image_bytes: bytes | None = None
    if image is not None and image.filename:
        if image.content_type and not image.content_type.startswith("image/"):
            raise HTTPException(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail="Only image uploads are accepted")
        image_bytes = await image.read()
        if len(image_bytes) > settings.max_image_bytes:
            raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="Image is too large")

    return await rooms_service.create_room(
        payload,
        account,
        session,
        storage,
        image=image_bytes,
        image_filename=image.filename if image is not None else None,
        image_content_type=image.content_type if image is not None else None,
    )


@router.post("/{room_id}/toggle-availability", response_model=schemas.RoomRead)
async def toggle_availability(
    room_id: str,
    account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_session),
) -> schemas.RoomRead:
    """Mark an owned room available or unavailable, whichever it is not."""

    return await rooms_service.toggle_availability(room_id, account, session)


@router.patch("/{room_id}", response_model=schemas.RoomRead)
async def update_room(
    room_id: str,
    payload: schemas.AvailabilityUpdate,
    account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_session),
) -> schemas.RoomRead:
    return await rooms_service.set_availability(room_id, payload, account, session)


@router.delete("/{room_id}", response_model=schemas.DeleteRoomResponse)
async def delete_room(
    room_id: str,
    confirm: bool = False,
    account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_session),
) -> schemas.DeleteRoomResponse:
    """Permanently delete an owned room; requires ``confirm=true``."""

    return await rooms_service.delete_room(room_id, account, session, confirm=confirm)
