"""Object storage for room images (S3-compatible, plus an in-memory double)."""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when an object could not be written to storage."""


class StorageClient(Protocol):
    """Operations the API needs from object storage."""

    def upload(self, path: str, data: bytes, content_type: str | None = None) -> None:
        ...

    def public_url(self, path: str) -> str:
        ...


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    base_url: str = "https://storage.example.test/room-images"
    stored_objects: dict[str, tuple[bytes, str | None]] = field(default_factory=dict)

    def upload(self, path: str, data: bytes, content_type: str | None = None) -> None:
        if path in self.stored_objects:
            raise StorageError(f"Object already exists: {path}")
        self.stored_objects[path] = (bytes(data), content_type)

    def public_url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path}"

    def get_bytes(self, path: str) -> bytes:
        stored = self.stored_objects.get(path)
        if stored is None:
            raise FileNotFoundError(path)
        return stored[0]


@dataclass
class S3StorageClient:
    """Bucket-backed storage using any S3-compatible endpoint."""

    bucket: str
    region: str = ""
    endpoint: str = ""
    access_key_id: str = ""
    secret_access_key: str = ""
    public_base_url: str = ""

    def __post_init__(self) -> None:
        config = Config(signature_version="s3v4", s3={"addressing_style": "path"})
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
            config=config,
        )

    def upload(self, path: str, data: bytes, content_type: str | None = None) -> None:
        extra: dict[str, str] = {}
        if content_type:
            extra["ContentType"] = content_type
        try:
            self._client.put_object(Bucket=self.bucket, Key=path, Body=data, **extra)
        except (BotoCoreError, ClientError) as exc:
            logger.exception("Upload of %s to bucket %s failed", path, self.bucket)
            raise StorageError(f"Upload failed for {path}") from exc

    def public_url(self, path: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{path}"
        if self.endpoint:
            return f"{self.endpoint.rstrip('/')}/{self.bucket}/{path}"
        region = self.region or "us-east-1"
        return f"https://{self.bucket}.s3.{region}.amazonaws.com/{path}"


def image_key(owner_id: str, filename: str | None, timestamp_ms: int) -> str:
    """Build the ``{owner}/{millis}.{ext}`` key new room images are stored under."""

    ext = ""
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[-1].lower()
    suffix = f".{ext}" if ext else ""
    return f"{owner_id}/{timestamp_ms}{suffix}"
