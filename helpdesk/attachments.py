from __future__ import annotations

import logging
import uuid
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from helpdesk.errors import PersistenceError
from helpdesk.tickets.models import Attachment, Comment

logger = logging.getLogger(__name__)


class AttachmentInput(BaseModel):
    """Shape every attachment handed to a command must satisfy."""

    model_config = ConfigDict(frozen=True, strict=True)

    filename: str = Field(..., min_length=1, max_length=255)
    content: bytes


class FileStorage(Protocol):
    def upload(self, filename: str, content: bytes) -> str:
        ...

    def download(self, storage_key: str) -> bytes:
        ...

    def remove(self, storage_key: str) -> None:
        ...


class InMemoryFileStorage:
    """File storage keeping uploaded content in a dictionary."""

    def __init__(self) -> None:
        self._files: dict[str, bytes] = {}

    def upload(self, filename: str, content: bytes) -> str:
        storage_key = f"{uuid.uuid4().hex}/{filename}"
        self._files[storage_key] = bytes(content)
        return storage_key

    def download(self, storage_key: str) -> bytes:
        try:
            return self._files[storage_key]
        except KeyError as exc:
            raise PersistenceError(f"No stored file for key {storage_key}") from exc

    def remove(self, storage_key: str) -> None:
        if self._files.pop(storage_key, None) is None:
            raise PersistenceError(f"No stored file for key {storage_key}")

    def __contains__(self, storage_key: object) -> bool:
        return storage_key in self._files


class AttachmentManager:
    """Create and delete comment attachments backed by a file storage."""

    def __init__(self, storage: FileStorage) -> None:
        self._storage = storage

    def create_new_attachment(self, filename: str, content: bytes, comment: Comment) -> Attachment:
        storage_key = self._storage.upload(filename, content)
        attachment = Attachment(
            id=uuid.uuid4().hex,
            filename=filename,
            storage_key=storage_key,
            size=len(content),
            comment=comment,
        )
        comment.add_attachment(attachment)
        logger.debug("Attached %s (%d bytes) to comment %s", filename, attachment.size, comment.id)
        return attachment

    def delete_attachment(self, attachment: Attachment) -> None:
        self._storage.remove(attachment.storage_key)
        logger.debug("Deleted attachment %s (%s)", attachment.id, attachment.filename)

    def get_content(self, attachment: Attachment) -> bytes:
        return self._storage.download(attachment.storage_key)
