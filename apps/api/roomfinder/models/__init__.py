"""Expose ORM models."""
from .account import AccessToken, Account
from .room import PropertyType, Room, TenantPreference

__all__ = [
    "AccessToken",
    "Account",
    "PropertyType",
    "Room",
    "TenantPreference",
]
