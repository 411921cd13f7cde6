"""Schemas for sign-up, sign-in and account lookups."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = ""


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


class AccountRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    created_at: datetime


class SessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    account: AccountRead


class SignOutResponse(BaseModel):
    status: str = "signed_out"
