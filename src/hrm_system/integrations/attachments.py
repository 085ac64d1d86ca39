from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from werkzeug.utils import secure_filename

from ..core.exceptions import ExternalServiceError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredAttachment:
    url: str
    name: str
    size: int
    content_type: str


class AttachmentStorage(Protocol):
    def save(self, data: bytes, filename: str, content_type: str) -> StoredAttachment:
        raise NotImplementedError

    def open_path(self, stored_name: str) -> Path:
        raise NotImplementedError


class LocalAttachmentStorage(AttachmentStorage):
    """Stores uploads under a directory and serves them from `base_url`.

    Stored names are prefixed with a random hex token so two uploads with the
    same original filename never overwrite each other.
    """

    def __init__(self, root: Path | str, *, base_url: str = "/attachments"):
        self._root = Path(root)
        self._base_url = base_url.rstrip("/")

    @property
    def root(self) -> Path:
        return self._root

    def save(self, data: bytes, filename: str, content_type: str) -> StoredAttachment:
        safe = secure_filename(filename or "")
        if not safe:
            raise ValidationError("Attachment file name is invalid")
        if not data:
            raise ValidationError("Attachment is empty")

        stored_name = f"{uuid.uuid4().hex}_{safe}"
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            (self._root / stored_name).write_bytes(data)
        except OSError as e:
            logger.error("saving attachment %s failed: %s", safe, e)
            raise ExternalServiceError("store attachment", e) from e

        logger.info("stored attachment %s (%s bytes)", stored_name, len(data))
        return StoredAttachment(
            url=f"{self._base_url}/{stored_name}",
            name=safe,
            size=len(data),
            content_type=content_type or "application/octet-stream",
        )

    def open_path(self, stored_name: str) -> Path:
        safe = secure_filename(stored_name or "")
        path = self._root / safe
        if not safe or not path.is_file():
            raise FileNotFoundError(stored_name)
        return path
