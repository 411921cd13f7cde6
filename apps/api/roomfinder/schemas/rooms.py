"""Schemas for room listings and browse criteria."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.room import PropertyType, TenantPreference

ALL_OPTION = "All"


class RoomFilters(BaseModel):
    """Client-side browse criteria.

    Prices stay as the raw text a user typed; the filter decides whether a
    value is usable as a bound.
    """

    search: str = ""
    city: str = ""
    min_price: str = ""
    max_price: str = ""
    property_type: str = ALL_OPTION
    tenant_preference: str = ALL_OPTION


class RoomRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    location: str
    city: str
    rent_price: int
    property_type: str
    tenant_preference: str
    image_url: str | None = None
    owner_id: str
    owner_name: str
    owner_contact: str
    owner_email: str
    created_at: datetime
    updated_at: datetime
    is_available: bool


class RoomListResponse(BaseModel):
    results: list[RoomRead]
    total: int


class RoomCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    location: str = Field(min_length=1)
    city: str = Field(min_length=1)
    rent_price: int = Field(ge=0)
    property_type: PropertyType = PropertyType.ONE_BHK
    tenant_preference: TenantPreference = TenantPreference.BACHELOR
    owner_name: str = ""
    owner_contact: str = Field(min_length=1)
    owner_email: str = ""

    @field_validator(
        "title", "description", "location", "city", "owner_name", "owner_contact", "owner_email", mode="before"
    )
    @classmethod
    def _strip(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value


class AvailabilityUpdate(BaseModel):
    is_available: bool


class RoomOptions(BaseModel):
    property_types: list[str]
    tenant_preferences: list[str]
    wildcard: str = ALL_OPTION


class DeleteRoomResponse(BaseModel):
    id: str
    status: str = "deleted"
