"""Create database schema and seed sample room listings for development."""
from __future__ import annotations

import argparse
import asyncio
from datetime import datetime, timedelta, timezone

from werkzeug.security import generate_password_hash

from roomfinder.db.session import SessionLocal, create_schema
from roomfinder.models.account import Account
from roomfinder.models.room import Room

DEMO_PASSWORD = "roomfinder-demo"

OWNERS = [
    {
        "id": "owner-asha",
        "email": "asha@example.com",
        "name": "Asha Kulkarni",
        "rooms": [
            {
                "id": "room-pune-kothrud",
                "title": "Spacious 2 BHK near Kothrud Depot",
                "description": "Bright flat with balcony, covered parking and 24/7 water supply.",
                "location": "Paud Road, Kothrud",
                "city": "Pune",
                "rent_price": 18_000,
                "property_type": "2 BHK",
                "tenant_preference": "Family",
                "owner_contact": "+91 98220 11111",
                "image_url": "https://picsum.photos/seed/kothrud/800/600",
                "is_available": True,
            },
            {
                "id": "room-pune-baner",
                "title": "Furnished 1 Bed for working professionals",
                "description": "Walking distance to Baner IT parks. Wi-Fi and housekeeping included.",
                "location": "Baner Road, Baner",
                "city": "Pune",
                "rent_price": 12_500,
                "property_type": "1 Bed",
                "tenant_preference": "Working",
                "owner_contact": "+91 98220 11111",
                "image_url": None,
                "is_available": True,
            },
        ],
    },
    {
        "id": "owner-rahul",
        "email": "rahul@example.com",
        "name": "Rahul Mehta",
        "rooms": [
            {
                "id": "room-mumbai-andheri",
                "title": "3 BHK sea-facing in Andheri West",
                "description": "Large flat on a high floor close to the metro. Society gym and pool.",
                "location": "Lokhandwala, Andheri West",
                "city": "Mumbai",
                "rent_price": 65_000,
                "property_type": "3 BHK",
                "tenant_preference": "Family",
                "owner_contact": "+91 99200 22222",
                "image_url": "https://picsum.photos/seed/andheri/800/600",
                "is_available": True,
            },
            {
                "id": "room-bangalore-hsr",
                "title": "Girls-only 1 BHK in HSR Layout",
                "description": "Gated society with security, close to cafes and bus stops.",
                "location": "Sector 2, HSR Layout",
                "city": "Bangalore",
                "rent_price": 15_000,
                "property_type": "1 BHK",
                "tenant_preference": "Girls",
                "owner_contact": "+91 99200 22222",
                "image_url": None,
                "is_available": False,
            },
        ],
    },
]


async def seed_rooms() -> None:
    """Insert or refresh the demo owners and their listings."""

    base_time = datetime.now(timezone.utc)
    async with SessionLocal() as session:
        async with session.begin():
            offset = 0
            for owner in OWNERS:
                account = await session.get(Account, owner["id"])
                if account is None:
                    account = Account(
                        id=owner["id"],
                        email=owner["email"],
                        name=owner["name"],
                        password_hash=generate_password_hash(DEMO_PASSWORD),
                        created_at=base_time,
                    )
                    session.add(account)
                else:
                    account.email = owner["email"]
                    account.name = owner["name"]

                for room_data in owner["rooms"]:
                    offset += 1
                    created_at = base_time - timedelta(hours=offset)
                    room = await session.get(Room, room_data["id"])
                    if room is None:
                        room = Room(id=room_data["id"], owner_id=owner["id"], created_at=created_at)
                        session.add(room)
                    room.title = room_data["title"]
                    room.description = room_data["description"]
                    room.location = room_data["location"]
                    room.city = room_data["city"]
                    room.rent_price = room_data["rent_price"]
                    room.property_type = room_data["property_type"]
                    room.tenant_preference = room_data["tenant_preference"]
                    room.image_url = room_data["image_url"]
                    room.owner_name = owner["name"]
                    room.owner_contact = room_data["owner_contact"]
                    room.owner_email = owner["email"]
                    room.is_available = room_data["is_available"]
                    room.updated_at = base_time


async def main(drop_existing: bool = False) -> None:
    await create_schema(drop_existing=drop_existing)
    await seed_rooms()
    print(f"Database schema ensured and demo rooms seeded (password: {DEMO_PASSWORD}).")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--drop", action="store_true", help="Drop existing tables before creating them")
    args = parser.parse_args()
    asyncio.run(main(drop_existing=args.drop))
