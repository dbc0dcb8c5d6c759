"""Base repository with shared owner-scoped get-by-ID patterns.

Every entity belongs to exactly one owner, so lookups always take the
owner alongside the id; a row owned by someone else is indistinguishable
from a missing one. Subclasses specify model_class, id_column and
not_found_error; the base provides the common implementations.

Override _base_query() to apply default filters (e.g., soft-delete
exclusion in NoteRepository, the blob-to-note join in AttachmentRepository).
"""

from typing import TypeVar, Generic, Optional, Type
from sqlalchemy.orm import Session, Query

from ..database import Base
from ..exceptions import TgVaultException

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Shared repository logic for SQLAlchemy models.

    Class variables to set in subclasses:
        model_class:     The SQLAlchemy model (e.g., Folder)
        id_column:       Name of the primary-key column (default "id")
        not_found_error: Exception class to raise from get_by_id
    """

    model_class: Type[ModelT]
    id_column: str = "id"
    not_found_error: Type[TgVaultException]

    def __init__(self, db: Session):
        self.db = db

    def _base_query(self, owner: str) -> Query:
        """Rows visible to *owner*.

        Override in subclasses to apply default filters.
        """
        return self.db.query(self.model_class).filter(self.model_class.owner == owner)

    def get_by_id(self, owner: str, entity_id) -> ModelT:
        """Get an owned entity by primary key. Raises not_found_error if missing."""
        entity = self.get_by_id_optional(owner, entity_id)
        if entity is None:
            raise self.not_found_error(entity_id)
        return entity

    def get_by_id_optional(self, owner: str, entity_id) -> Optional[ModelT]:
        """Get an owned entity by primary key, or None if not found."""
        col = getattr(self.model_class, self.id_column)
        return self._base_query(owner).filter(col == entity_id).first()
