"""Account endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..dependencies import get_bearer_token, get_current_account
from ..models.account import Account
from ..schemas import auth as schemas
from ..services import auth as auth_service

router = APIRouter()


@router.post("/signup", response_model=schemas.SessionResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    payload: schemas.SignUpRequest,
    session: AsyncSession = Depends(get_session),
) -> schemas.SessionResponse:
    return await auth_service.sign_up(payload, session)


@router.post("/signin", response_model=schemas.SessionResponse)
async def sign_in(
    payload: schemas.SignInRequest,
    session: AsyncSession = Depends(get_session),
) -> schemas.SessionResponse:
    return await auth_service.sign_in(payload, session)


@router.post("/signout", response_model=schemas.SignOutResponse)
async def sign_out(
    token: str | None = Depends(get_bearer_token),
    session: AsyncSession = Depends(get_session),
) -> schemas.SignOutResponse:
    """Revoke the bearer token used for this request."""

    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return await auth_service.sign_out(token, session)


@router.get("/me", response_model=schemas.AccountRead)
async def me(account: Account = Depends(get_current_account)) -> schemas.AccountRead:
    return schemas.AccountRead.model_validate(account)
