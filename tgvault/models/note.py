"""Note and attribute models for the wiki."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text
from ..database import Base, utcnow


class Note(Base):
    """A wiki note. Soft delete via ``is_deleted``; rows are never purged."""

    __tablename__ = "notes"
    __table_args__ = (
        Index("ix_notes_owner", "owner"),
        Index("ix_notes_parent_note_id", "parent_note_id"),
    )

    note_id = Column(String(36), primary_key=True)
    owner = Column(String(64), nullable=False)
    parent_note_id = Column(String(36), ForeignKey("notes.note_id"), nullable=True)
    title = Column(String(500), nullable=False, default="")
    content = Column(Text, nullable=False, default="")  # HTML from the rich-text editor
    type = Column(String(50), nullable=False, default="note")
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    is_deleted = Column(Boolean, nullable=False, default=False)


class NoteAttribute(Base):
    """Free-form key/value tag on a note. Outlives soft-deleted notes."""

    __tablename__ = "note_attributes"
    __table_args__ = (
        Index("ix_note_attributes_note_id", "note_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    note_id = Column(String(36), ForeignKey("notes.note_id"), nullable=False)
    type = Column(String(50), nullable=False, default="label")
    name = Column(String(255), nullable=False)
    value = Column(Text, nullable=False, default="")
    position = Column(Integer, nullable=False, default=0)
    is_inheritable = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
