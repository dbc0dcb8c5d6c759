"""Attachment model: binary blobs stored inline, owned by one note."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, LargeBinary, String
from sqlalchemy.orm import deferred
from ..database import Base, utcnow


class Attachment(Base):
    """A file attached to a note."""

    __tablename__ = "attachments"
    __table_args__ = (
        Index("ix_attachments_note_id", "note_id"),
    )

    id = Column(String(36), primary_key=True)
    note_id = Column(String(36), ForeignKey("notes.note_id"), nullable=False)
    # Deferred so listings never pull the payload.
    data = deferred(Column(LargeBinary, nullable=False))
    mime = Column(String(255), nullable=False, default="application/octet-stream")
    size = Column(Integer, nullable=False)
    filename = Column(String(500), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
