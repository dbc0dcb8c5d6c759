"""Service for an owner's collection items: listing, toggling, moving, deleting."""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models.collection import CollectionItem
from ..repositories.collection_repository import CollectionRepository
from ..repositories.folder_repository import FolderRepository
from ..exceptions import CollectionItemNotFoundError, ValidationError

logger = logging.getLogger(__name__)


class CollectionService:
    """Business logic for the collection registry.

    Public methods:
        list_items     -- all items of an owner, by name
        register_item  -- add an item (ingestion pipeline entry point)
        append_vectors -- add vector rows to an item
        toggle_active  -- set ``active``; unknown names are a silent no-op
        move_item      -- place an item in a folder, or in none
        delete_item    -- remove an item and its vector rows atomically
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CollectionRepository(db)
        self.folder_repo = FolderRepository(db)

    def list_items(self, owner: str) -> List[CollectionItem]:
        """Items ordered by name. An owner with no items gets an empty list."""
        return self.repo.get_all(owner)

    def register_item(
        self,
        owner: str,
        name: str,
        folder_id: Optional[int] = None,
        active: bool = True,
    ) -> CollectionItem:
        if self.repo.get_by_name(owner, name) is not None:
            raise ValidationError(f"Collection item already exists: {name}", field="name")
        if folder_id is not None:
            self.folder_repo.get_by_id(owner, folder_id)

        try:
            item = self.repo.create(owner, name, folder_id=folder_id, active=active)
            self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent insert of the same name.
            self.db.rollback()
            raise ValidationError(f"Collection item already exists: {name}", field="name")
        logger.info("Collection item registered", extra={"owner": owner, "item": name})
        return item

    def append_vectors(self, owner: str, name: str, chunks: List[dict]) -> tuple[int, int]:
        """Append vector rows. Returns ``(appended, total_for_item)``."""
        item = self._require_item(owner, name)
        appended = self.repo.add_vectors(item.uuid, chunks)
        self.db.commit()
        return appended, self.repo.count_vectors(item.uuid)

    def toggle_active(self, owner: str, name: str, active: bool) -> int:
        """Set ``active`` for *name*. Returns rows affected (0 for unknown names)."""
        updated = self.repo.set_active(owner, name, active)
        self.db.commit()
        if not updated:
            logger.info("Toggle matched no item", extra={"owner": owner, "item": name})
        return updated

    def move_item(self, owner: str, name: str, folder_id: Optional[int]) -> CollectionItem:
        """Place *name* in *folder_id*; None means "no folder".

        The target folder must belong to the same owner.
        """
        item = self._require_item(owner, name)
        if folder_id is not None:
            self.folder_repo.get_by_id(owner, folder_id)
        moved = self.repo.set_folder(item, folder_id)
        self.db.commit()
        return moved

    def delete_item(self, owner: str, name: str) -> int:
        """Delete *name* and every vector row keyed by its uuid, atomically.

        Returns the number of vector rows removed.
        """
        item = self._require_item(owner, name)
        try:
            deleted_vectors = self.repo.delete_vectors(item.uuid)
            self.repo.delete(item)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.warning(
                "Collection item delete rolled back",
                extra={"owner": owner, "item": name},
                exc_info=True,
            )
            raise

        logger.info(
            "Collection item deleted",
            extra={"owner": owner, "item": name, "deleted_vectors": deleted_vectors},
        )
        return deleted_vectors

    def _require_item(self, owner: str, name: str) -> CollectionItem:
        item = self.repo.get_by_name(owner, name)
        if item is None:
            raise CollectionItemNotFoundError(name)
        return item
