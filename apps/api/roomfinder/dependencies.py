"""Dependency wiring for the FastAPI app."""
from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from .core.config import settings
from .db.session import get_session
from .models.account import Account
from .services import auth as auth_service
from .services.storage import InMemoryStorageClient, S3StorageClient, StorageClient

_storage_client: StorageClient | None = None

bearer_scheme = HTTPBearer(auto_error=False)


def get_storage_client() -> StorageClient:
    """Return a singleton storage client so in-memory uploads survive across requests."""

    global _storage_client
    if _storage_client is not None:
        return _storage_client

    if settings.storage_backend == "s3" and settings.storage_bucket:
        _storage_client = S3StorageClient(
            bucket=settings.storage_bucket,
            region=settings.storage_region,
            endpoint=settings.storage_endpoint,
            access_key_id=settings.storage_access_key_id,
            secret_access_key=settings.storage_secret_access_key,
            public_base_url=settings.storage_public_base_url,
        )
    else:
        _storage_client = InMemoryStorageClient()
    return _storage_client


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    if credentials is None:
        return None
    return credentials.credentials


async def get_current_account(
    token: str | None = Depends(get_bearer_token),
    session: AsyncSession = Depends(get_session),
) -> Account:
    """Resolve the signed-in account or fail with 401."""

    return await auth_service.resolve_account(token, session)
