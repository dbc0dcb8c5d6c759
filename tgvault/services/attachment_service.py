"""Service for note attachments stored inline in the database."""

import logging
import mimetypes
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..models.attachment import Attachment
from ..repositories.attachment_repository import AttachmentRepository
from ..repositories.note_repository import NoteRepository
from ..exceptions import PartialInputError

logger = logging.getLogger(__name__)

DEFAULT_MIME = "application/octet-stream"


class AttachmentService:
    """Put / get / delete / list attachments, always checked against note ownership.

    Upload shape problems (no file, no filename, empty or oversized payload)
    raise PartialInputError before any storage access.
    """

    def __init__(self, db: Session, max_bytes: Optional[int] = None):
        self.db = db
        self.repo = AttachmentRepository(db)
        self.note_repo = NoteRepository(db)
        self.max_bytes = max_bytes or settings.max_attachment_bytes

    def put(
        self,
        owner: str,
        note_id: str,
        filename: Optional[str],
        data: Optional[bytes],
        mime: Optional[str] = None,
    ) -> Attachment:
        filename = self.validate_upload(filename, data)
        note = self.note_repo.get_by_id(owner, note_id)

        mime = mime or mimetypes.guess_type(filename)[0] or DEFAULT_MIME
        attachment = self.repo.create(note.note_id, data, mime, filename)
        self.db.commit()
        logger.info(
            "Attachment stored",
            extra={"owner": owner, "note_id": note_id, "blob_id": attachment.id, "size": attachment.size},
        )
        return attachment

    def get(self, owner: str, blob_id: str) -> Attachment:
        """Attachment with its payload loaded."""
        return self.repo.get_with_data(owner, blob_id)

    def delete(self, owner: str, blob_id: str) -> None:
        attachment = self.repo.get_by_id(owner, blob_id)
        self.repo.delete(attachment)
        self.db.commit()
        logger.info("Attachment deleted", extra={"owner": owner, "blob_id": blob_id})

    def list_by_note(self, owner: str, note_id: str) -> List[Attachment]:
        """Attachments of a visible note, oldest first."""
        note = self.note_repo.get_by_id(owner, note_id)
        return self.repo.get_by_note(owner, note.note_id)

    def validate_upload(self, filename: Optional[str], data: Optional[bytes]) -> str:
        """Return the cleaned filename or raise PartialInputError."""
        if data is None:
            raise PartialInputError("No file uploaded")
        # Browsers may send a full client path; keep the last segment only.
        filename = (filename or "").replace("\\", "/").rsplit("/", 1)[-1].strip()
        if not filename:
            raise PartialInputError("Uploaded file has no filename")
        if not data:
            raise PartialInputError("Uploaded file is empty")
        if len(data) > self.max_bytes:
            raise PartialInputError(
                f"Uploaded file exceeds the {self.max_bytes} byte limit"
            )
        return filename
