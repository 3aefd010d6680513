"""Attachment storage on the local filesystem."""

import asyncio
import time
from pathlib import Path, PurePath
from uuid import uuid4

import logfire

from discuss.adapter.error import StorageError
from discuss.domain.service.gateway import AttachmentStorage
from discuss.domain.value import Attachment, AttachmentType


def _stored_name(filename: str) -> str:
    """Unique on-disk name that keeps the client's extension."""
    suffix = PurePath(filename).suffix.lower()
    return f"{uuid4()}-{int(time.time() * 1000)}{suffix}"


class LocalAttachmentStorage(AttachmentStorage):
    """Writes uploads into a directory served under a public path."""

    def __init__(self, upload_dir: Path, public_path: str) -> None:
        """Initialize local storage.

        Args:
            upload_dir: Directory files are written to (created on demand)
            public_path: URL prefix the directory is served under
        """
        self.upload_dir = upload_dir
        self.public_path = public_path.rstrip("/")

    def _write(self, name: str, data: bytes) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        (self.upload_dir / name).write_bytes(data)

    async def store(
        self, filename: str, content_type: str | None, data: bytes
    ) -> Attachment:
        name = _stored_name(filename)
        try:
            await asyncio.to_thread(self._write, name, data)
        except OSError as e:
            logfire.error("Attachment write failed", filename=filename, error=str(e))
            raise StorageError(f"Could not store {filename}: {e}") from e

        logfire.info("Attachment stored", stored_as=name, size=len(data))
        return Attachment(
            type=AttachmentType.from_content_type(content_type),
            url=f"{self.public_path}/{name}",
            filename=filename,
            size=len(data),
        )


class InMemoryAttachmentStorage(AttachmentStorage):
    """Keeps uploads in a dict for testing."""

    def __init__(self, public_path: str = "/uploads/comments") -> None:
        self.public_path = public_path
        self.files: dict[str, bytes] = {}

    async def store(
        self, filename: str, content_type: str | None, data: bytes
    ) -> Attachment:
        name = _stored_name(filename)
        self.files[name] = data
        return Attachment(
            type=AttachmentType.from_content_type(content_type),
            url=f"{self.public_path}/{name}",
            filename=filename,
            size=len(data),
        )
