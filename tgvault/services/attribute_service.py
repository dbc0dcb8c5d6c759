"""Service for free-form note attributes (labels and relations)."""

import logging

from sqlalchemy.orm import Session

from ..models.note import NoteAttribute
from ..repositories.note_repository import AttributeRepository, NoteRepository
from ..exceptions import AttributeNotFoundError, NoFieldsSuppliedError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("type", "name", "value", "position", "is_inheritable")


class AttributeService:
    """Attribute CRUD, scoped through the owning note.

    An attribute whose note is owned by someone else is reported as not
    found, the same way a missing one is.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = AttributeRepository(db)
        self.note_repo = NoteRepository(db)

    def create_attribute(self, owner: str, note_id: str, fields: dict) -> NoteAttribute:
        note = self.note_repo.get_by_id(owner, note_id)
        attribute = self.repo.create(note.note_id, **fields)
        self.db.commit()
        return attribute

    def update_attribute(self, owner: str, attribute_id: int, changes: dict) -> NoteAttribute:
        changes = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS and v is not None}
        if not changes:
            raise NoFieldsSuppliedError(UPDATABLE_FIELDS)
        attribute = self._require_owned(owner, attribute_id)
        updated = self.repo.update(attribute, **changes)
        self.db.commit()
        return updated

    def delete_attribute(self, owner: str, attribute_id: int) -> None:
        attribute = self._require_owned(owner, attribute_id)
        self.repo.delete(attribute)
        self.db.commit()

    def _require_owned(self, owner: str, attribute_id: int) -> NoteAttribute:
        attribute = self.repo.get(attribute_id)
        # Attributes of soft-deleted notes stay reachable for cleanup.
        if attribute is None or self.note_repo.get_by_id_including_deleted(owner, attribute.note_id) is None:
            raise AttributeNotFoundError(attribute_id)
        return attribute
