"""Account sign-up, sign-in and bearer token resolution."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging
import secrets

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import check_password_hash, generate_password_hash

from ..core.config import settings
from ..models.account import Account
from ..repositories import accounts as accounts_repo
from ..schemas import auth as schemas

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


async def sign_up(payload: schemas.SignUpRequest, session: AsyncSession) -> schemas.SessionResponse:
    """Register a new account and return a fresh access token."""

    try:
        async with session.begin():
            existing = await accounts_repo.get_by_email(session, payload.email)
            if existing is not None:
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

            account = await accounts_repo.create_account(
                session,
                email=payload.email,
                name=payload.name.strip(),
                password_hash=generate_password_hash(payload.password),
            )
            token, expires_at = await _issue_token(session, account)
    except IntegrityError as exc:
        logger.warning("Sign-up raced on existing email %s", payload.email)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered") from exc
    except SQLAlchemyError as exc:
        logger.exception("Sign-up failed for %s", payload.email)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to sign up. Please try again."
        ) from exc

    logger.info("Account %s registered", account.id)
    return _session_response(account, token, expires_at)


async def sign_in(payload: schemas.SignInRequest, session: AsyncSession) -> schemas.SessionResponse:
    """Verify credentials and return a fresh access token."""

    try:
        async with session.begin():
            account = await accounts_repo.get_by_email(session, payload.email)
            if account is None or not check_password_hash(account.password_hash, payload.password):
                raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
            token, expires_at = await _issue_token(session, account)
    except SQLAlchemyError as exc:
        logger.exception("Sign-in failed for %s", payload.email)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to sign in. Please try again."
        ) from exc

    return _session_response(account, token, expires_at)


async def sign_out(token: str, session: AsyncSession) -> schemas.SignOutResponse:
    """Revoke the presented token. Unknown tokens are treated as already signed out."""

    try:
        async with session.begin():
            await accounts_repo.revoke_token(session, token)
    except SQLAlchemyError as exc:
        logger.exception("Sign-out failed")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to sign out. Please try again."
        ) from exc
    return schemas.SignOutResponse()


async def resolve_account(token: str | None, session: AsyncSession) -> Account:
    """Return the account owning ``token`` or raise 401."""

    if not token:
        raise _unauthorized("Not authenticated")

    access_token = await accounts_repo.get_token(session, token)
    if access_token is None:
        raise _unauthorized("Invalid access token")
    if _ensure_tz(access_token.expires_at) <= datetime.now(timezone.utc):
        raise _unauthorized("Access token expired")

    account = await accounts_repo.get_by_id(session, access_token.account_id)
    if account is None:
        raise _unauthorized("Invalid access token")
    return account


async def _issue_token(session: AsyncSession, account: Account) -> tuple[str, datetime]:
    token = secrets.token_urlsafe(TOKEN_BYTES)
    expires_at = datetime.now(timezone.utc) + timedelta(hours=settings.access_token_ttl_hours)
    await accounts_repo.store_token(session, token=token, account_id=account.id, expires_at=expires_at)
    return token, expires_at


def _session_response(account: Account, token: str, expires_at: datetime) -> schemas.SessionResponse:
    return schemas.SessionResponse(
        access_token=token,
        expires_at=expires_at,
        account=schemas.AccountRead.model_validate(account),
    )


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _ensure_tz(value: datetime) -> datetime:
    """Ensure the datetime is timezone-aware in UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
