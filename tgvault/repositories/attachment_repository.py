"""Repository for note attachments (inline binary blobs)."""

import uuid
from typing import Iterable, List

from sqlalchemy.orm import Query, undefer

from ..models.attachment import Attachment
from ..models.note import Note
from ..exceptions import AttachmentNotFoundError
from .base import BaseRepository


class AttachmentRepository(BaseRepository[Attachment]):
    """Data access for attachments. Ownership is resolved through the note."""

    model_class = Attachment
    not_found_error = AttachmentNotFoundError

    def _base_query(self, owner: str) -> Query:
        """Attachments whose note belongs to *owner* (blob -> note join)."""
        return (
            self.db.query(Attachment)
            .join(Note, Note.note_id == Attachment.note_id)
            .filter(Note.owner == owner)
        )

    def get_with_data(self, owner: str, blob_id: str) -> Attachment:
        """Like get_by_id, but loads the payload in the same query."""
        attachment = (
            self._base_query(owner)
            .options(undefer(Attachment.data))
            .filter(Attachment.id == blob_id)
            .first()
        )
        if attachment is None:
            raise AttachmentNotFoundError(blob_id)
        return attachment

    def get_by_note(self, owner: str, note_id: str) -> List[Attachment]:
        return (
            self._base_query(owner)
            .filter(Attachment.note_id == note_id)
            .order_by(Attachment.created_at, Attachment.id)
            .all()
        )

    def get_filenames_by_notes(self, note_ids: Iterable[str]) -> List[tuple]:
        """``(note_id, filename)`` pairs for search; never loads payloads."""
        note_ids = list(note_ids)
        if not note_ids:
            return []
        return (
            self.db.query(Attachment.note_id, Attachment.filename)
            .filter(Attachment.note_id.in_(note_ids))
            .all()
        )

    def create(self, note_id: str, data: bytes, mime: str, filename: str) -> Attachment:
        attachment = Attachment(
            id=str(uuid.uuid4()),
            note_id=note_id,
            data=data,
            mime=mime,
            size=len(data),
            filename=filename,
        )
        self.db.add(attachment)
        self.db.flush()
        self.db.refresh(attachment)
        return attachment

    def delete(self, attachment: Attachment) -> None:
        self.db.delete(attachment)
        self.db.flush()
