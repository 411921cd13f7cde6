"""Account and access token repository helpers."""
from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.account import AccessToken, Account


async def get_by_id(session: AsyncSession, account_id: str) -> Account | None:
    """Return an account by identifier."""

    stmt: Select[tuple[Account]] = select(Account).where(Account.id == account_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_by_email(session: AsyncSession, email: str) -> Account | None:
    """Return an account by its (lower-cased) email."""

    stmt: Select[tuple[Account]] = select(Account).where(Account.email == email.strip().lower())
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def create_account(
    session: AsyncSession,
    *,
    email: str,
    name: str,
    password_hash: str,
) -> Account:
    account = Account(
        id=str(uuid4()),
        email=email.strip().lower(),
        name=name,
        password_hash=password_hash,
        created_at=datetime.now(timezone.utc),
    )
    session.add(account)
    await session.flush()
    return account


async def store_token(
    session: AsyncSession,
    *,
    token: str,
    account_id: str,
    expires_at: datetime,
) -> AccessToken:
    access_token = AccessToken(
        token=token,
        account_id=account_id,
        created_at=datetime.now(timezone.utc),
        expires_at=expires_at,
    )
    session.add(access_token)
    await session.flush()
    return access_token


async def get_token(session: AsyncSession, token: str) -> AccessToken | None:
    """Return the stored token row, expired or not."""

    stmt: Select[tuple[AccessToken]] = select(AccessToken).where(AccessToken.token == token)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def revoke_token(session: AsyncSession, token: str) -> bool:
    """Delete a token. Returns True if it existed."""

    result = await session.execute(delete(AccessToken).where(AccessToken.token == token))
    return (result.rowcount or 0) > 0
