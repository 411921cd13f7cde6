"""Repository and service tests against a real async SQLite session."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from roomfinder.models import Room
from roomfinder.models.base import Base
from roomfinder.repositories import accounts as accounts_repo
from roomfinder.repositories import rooms as rooms_repo
from roomfinder.schemas import rooms as schemas
from roomfinder.services import rooms as rooms_service
from roomfinder.services.storage import InMemoryStorageClient, image_key

BASE_TIME = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def session():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    async with factory() as db_session:
        yield db_session

    await engine.dispose()


@pytest_asyncio.fixture
async def account(session):
    created = await accounts_repo.create_account(
        session, email=" Asha@Example.com ", name="Asha", password_hash="hashed"
    )
    await session.commit()
    return created


async def add_room(session: AsyncSession, room_id: str, owner_id: str, *, minutes: int, **overrides) -> Room:
    stamp = BASE_TIME + timedelta(minutes=minutes)
    values = dict(
        id=room_id,
        title=f"Room {room_id}",
        description="Balcony and parking",
        location="Kothrud",
        city="Pune",
        rent_price=15000,
        property_type="2 BHK",
        tenant_preference="Family",
        owner_id=owner_id,
        owner_name="Asha",
        owner_contact="+91 98220 11111",
        owner_email="asha@example.com",
        created_at=stamp,
        updated_at=stamp,
        is_available=True,
    )
    values.update(overrides)
    room = Room(**values)
    session.add(room)
    await session.commit()
    return room


def make_payload(**overrides) -> schemas.RoomCreate:
    values = dict(
        title="Sunny room",
        description="Close to the metro",
        location="Baner Road",
        city="Pune",
        rent_price=12000,
        owner_contact="+91 90000 00000",
    )
    values.update(overrides)
    return schemas.RoomCreate(**values)


@pytest.mark.asyncio
async def test_list_available_skips_unavailable_rooms_newest_first(session, account):
    await add_room(session, "room-a", account.id, minutes=0)
    await add_room(session, "room-b", account.id, minutes=10, is_available=False)
    await add_room(session, "room-c", account.id, minutes=20)

    rooms = await rooms_repo.list_available(session)

    assert [room.id for room in rooms] == ["room-c", "room-a"]


@pytest.mark.asyncio
async def test_list_by_owner_includes_unavailable_rooms(session, account):
    await add_room(session, "room-a", account.id, minutes=0, is_available=False)
    await add_room(session, "room-b", account.id, minutes=5)
    await add_room(session, "room-x", "someone-else", minutes=30)

    rooms = await rooms_repo.list_by_owner(session, owner_id=account.id)

    assert [room.id for room in rooms] == ["room-b", "room-a"]


@pytest.mark.asyncio
async def test_delete_room_reports_whether_a_row_existed(session, account):
    await add_room(session, "room-a", account.id, minutes=0)

    assert await rooms_repo.delete_room(session, "room-a") is True
    await session.commit()
    assert await rooms_repo.delete_room(session, "room-a") is False
    assert await rooms_repo.get_by_id(session, "room-a") is None


@pytest.mark.asyncio
async def test_accounts_normalise_email_and_manage_tokens(session, account):
    assert account.email == "asha@example.com"
    assert (await accounts_repo.get_by_email(session, "ASHA@example.com ")).id == account.id

    expires = BASE_TIME + timedelta(days=7)
    await accounts_repo.store_token(session, token="tok-1", account_id=account.id, expires_at=expires)
    await session.commit()

    stored = await accounts_repo.get_token(session, "tok-1")
    assert stored is not None
    assert stored.account_id == account.id
    assert await accounts_repo.revoke_token(session, "tok-1") is True
    assert await accounts_repo.revoke_token(session, "tok-1") is False
    assert await accounts_repo.get_token(session, "tok-1") is None


@pytest.mark.asyncio
async def test_create_toggle_and_delete_through_services(session, account):
    storage = InMemoryStorageClient(base_url="https://cdn.test/room-images")

    created = await rooms_service.create_room(
        make_payload(), account, session, storage, image=b"jpeg", image_filename="room.jpg"
    )
    toggled = await rooms_service.toggle_availability(created.id, account, session)
    browse = await rooms_service.browse_rooms(schemas.RoomFilters(), session)
    mine = await rooms_service.list_my_rooms(account, session)

    assert created.owner_name == "Asha"
    assert created.owner_email == "asha@example.com"
    assert created.image_url.startswith(f"https://cdn.test/room-images/{account.id}/")
    assert toggled.is_available is False
    assert browse.total == 0
    assert [room.id for room in mine.results] == [created.id]

    deleted = await rooms_service.delete_room(created.id, account, session, confirm=True)

    assert deleted.status == "deleted"
    assert await rooms_repo.get_by_id(session, created.id) is None


@pytest.mark.asyncio
async def test_create_room_upload_failure_rolls_back(monkeypatch, session, account):
    owner_id = account.id
    storage = InMemoryStorageClient()
    storage.upload(image_key(owner_id, "a.jpg", 1000), b"taken")
    monkeypatch.setattr(rooms_service, "_now_ms", lambda: 1000)

    with pytest.raises(HTTPException) as exc:
        await rooms_service.create_room(
            make_payload(), account, session, storage, image=b"img", image_filename="a.jpg"
        )

    assert exc.value.status_code == 502
    assert exc.value.detail == rooms_service.ADD_FAILED
    assert await rooms_repo.list_by_owner(session, owner_id=owner_id) == []


@pytest.mark.asyncio
async def test_create_room_constraint_violation_rolls_back(session, account):
    owner_id = account.id
    payload = make_payload().model_copy(update={"rent_price": -1})

    with pytest.raises(HTTPException) as exc:
        await rooms_service.create_room(payload, account, session, InMemoryStorageClient())

    assert exc.value.status_code == 502
    assert exc.value.detail == rooms_service.ADD_FAILED
    assert await rooms_repo.list_by_owner(session, owner_id=owner_id) == []


@pytest.mark.asyncio
async def test_availability_write_failure_rolls_back(monkeypatch, session, account):
    await add_room(session, "room-a", account.id, minutes=0)
    real_update = rooms_repo.update_availability

    async def _update_then_fail(db_session, room, *, is_available):
        await real_update(db_session, room, is_available=is_available)
        raise OperationalError("UPDATE rooms", {}, Exception("database is locked"))

    monkeypatch.setattr(rooms_repo, "update_availability", _update_then_fail)

    with pytest.raises(HTTPException) as exc:
        await rooms_service.toggle_availability("room-a", account, session)

    assert exc.value.status_code == 502
    assert exc.value.detail == rooms_service.UPDATE_FAILED
    reloaded = await rooms_repo.get_by_id(session, "room-a")
    assert reloaded.is_available is True
