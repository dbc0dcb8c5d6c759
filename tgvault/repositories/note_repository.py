"""Repository for notes and note attributes.

Soft-delete aware: all standard queries exclude notes with ``is_deleted``
set, so callers never need to think about the flag.
"""

import uuid
from typing import Iterable, List, Optional

from sqlalchemy.orm import Query

from ..models.note import Note, NoteAttribute
from ..exceptions import NoteNotFoundError
from .base import BaseRepository


class NoteRepository(BaseRepository[Note]):
    """Data access layer for owner-scoped notes."""

    model_class = Note
    id_column = "note_id"
    not_found_error = NoteNotFoundError

    def _base_query(self, owner: str) -> Query:
        """Visible notes only: owned by *owner* and not soft-deleted."""
        return self.db.query(Note).filter(Note.owner == owner, Note.is_deleted.is_(False))

    def get_by_id_including_deleted(self, owner: str, note_id: str) -> Optional[Note]:
        return (
            self.db.query(Note)
            .filter(Note.owner == owner, Note.note_id == note_id)
            .first()
        )

    def get_all(self, owner: str) -> List[Note]:
        """Visible notes in creation order."""
        return self._base_query(owner).order_by(Note.created_at, Note.note_id).all()

    def get_child_ids(
        self, owner: str, parent_ids: Iterable[str], include_deleted: bool = False
    ) -> List[str]:
        """Ids of direct children of any of *parent_ids*.

        Soft-deleted children are skipped unless *include_deleted* is set.
        """
        parent_ids = list(parent_ids)
        if not parent_ids:
            return []
        if include_deleted:
            query = self.db.query(Note).filter(Note.owner == owner)
        else:
            query = self._base_query(owner)
        rows = (
            query
            .with_entities(Note.note_id)
            .filter(Note.parent_note_id.in_(parent_ids))
            .all()
        )
        return [row.note_id for row in rows]

    def create(
        self,
        owner: str,
        title: str,
        content: str,
        parent_note_id: Optional[str] = None,
        note_type: str = "note",
    ) -> Note:
        note = Note(
            note_id=str(uuid.uuid4()),
            owner=owner,
            parent_note_id=parent_note_id,
            title=title,
            content=content,
            type=note_type,
            is_deleted=False,
        )
        self.db.add(note)
        self.db.flush()
        self.db.refresh(note)
        return note

    def update(self, note: Note, **fields) -> Note:
        for key, value in fields.items():
            setattr(note, key, value)
        self.db.flush()
        self.db.refresh(note)
        return note

    def soft_delete(self, note: Note) -> None:
        """Mark *note* deleted. Children are left pointing at it."""
        note.is_deleted = True
        self.db.flush()


class AttributeRepository:
    """CRUD for note_attributes."""

    def __init__(self, db):
        self.db = db

    def get(self, attribute_id: int) -> Optional[NoteAttribute]:
        return self.db.query(NoteAttribute).filter(NoteAttribute.id == attribute_id).first()

    def get_by_note(self, note_id: str) -> List[NoteAttribute]:
        return (
            self.db.query(NoteAttribute)
            .filter(NoteAttribute.note_id == note_id)
            .order_by(NoteAttribute.position, NoteAttribute.id)
            .all()
        )

    def get_by_notes(self, note_ids: Iterable[str]) -> List[NoteAttribute]:
        note_ids = list(note_ids)
        if not note_ids:
            return []
        return (
            self.db.query(NoteAttribute)
            .filter(NoteAttribute.note_id.in_(note_ids))
            .order_by(NoteAttribute.position, NoteAttribute.id)
            .all()
        )

    def create(self, note_id: str, **fields) -> NoteAttribute:
        attribute = NoteAttribute(note_id=note_id, **fields)
        self.db.add(attribute)
        self.db.flush()
        self.db.refresh(attribute)
        return attribute

    def update(self, attribute: NoteAttribute, **fields) -> NoteAttribute:
        for key, value in fields.items():
            setattr(attribute, key, value)
        self.db.flush()
        self.db.refresh(attribute)
        return attribute

    def delete(self, attribute: NoteAttribute) -> None:
        self.db.delete(attribute)
        self.db.flush()
