"""Room listing model."""
from __future__ import annotations

from datetime import datetime
import enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utcnow

if TYPE_CHECKING:
    from .account import Account


class PropertyType(str, enum.Enum):
    ONE_BHK = "1 BHK"
    TWO_BHK = "2 BHK"
    THREE_BHK = "3 BHK"
    ONE_BED = "1 Bed"
    TWO_BED = "2 Bed"
    THREE_BED = "3 Bed"


class TenantPreference(str, enum.Enum):
    BACHELOR = "Bachelor"
    FAMILY = "Family"
    GIRLS = "Girls"
    WORKING = "Working"


class Room(Base):
    """A single room-rental listing owned by an account."""

    __tablename__ = "rooms"
    __table_args__ = (CheckConstraint("rent_price >= 0", name="rent_price_non_negative"),)

    id: Mapped[str] = mapped_column(String, primary_key=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    location: Mapped[str] = mapped_column(String, nullable=False)
    city: Mapped[str] = mapped_column(String, nullable=False)
    rent_price: Mapped[int] = mapped_column(Integer, nullable=False)
    # Stored as plain strings so the filter compares exactly what clients send.
    property_type: Mapped[str] = mapped_column(String, nullable=False)
    tenant_preference: Mapped[str] = mapped_column(String, nullable=False)
    image_url: Mapped[str | None] = mapped_column(String)
    owner_id: Mapped[str] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    owner_name: Mapped[str] = mapped_column(String, nullable=False)
    owner_contact: Mapped[str] = mapped_column(String, nullable=False)
    owner_email: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    owner: Mapped["Account"] = relationship("Account", back_populates="rooms")
