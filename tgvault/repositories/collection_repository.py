"""Repository for collection items and their dependent vector rows."""

import uuid
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.collection import CollectionItem, CollectionVector


class CollectionRepository:
    """CRUD for collection_items and collection_vectors."""

    def __init__(self, db: Session):
        self.db = db

    # --- Items ---

    def get_all(self, owner: str) -> List[CollectionItem]:
        return (
            self.db.query(CollectionItem)
            .filter(CollectionItem.owner == owner)
            .order_by(CollectionItem.name.asc())
            .all()
        )

    def get_by_name(self, owner: str, name: str) -> Optional[CollectionItem]:
        return (
            self.db.query(CollectionItem)
            .filter(CollectionItem.owner == owner, CollectionItem.name == name)
            .first()
        )

    def create(self, owner: str, name: str, folder_id: Optional[int] = None, active: bool = True) -> CollectionItem:
        item = CollectionItem(
            owner=owner,
            name=name,
            active=active,
            folder_id=folder_id,
            uuid=str(uuid.uuid4()),
        )
        self.db.add(item)
        self.db.flush()
        self.db.refresh(item)
        return item

    def set_active(self, owner: str, name: str, active: bool) -> int:
        """Set ``active`` by name. Returns the number of rows touched (0 or 1)."""
        return (
            self.db.query(CollectionItem)
            .filter(CollectionItem.owner == owner, CollectionItem.name == name)
            .update({CollectionItem.active: active}, synchronize_session=False)
        )

    def set_folder(self, item: CollectionItem, folder_id: Optional[int]) -> CollectionItem:
        item.folder_id = folder_id
        self.db.flush()
        self.db.refresh(item)
        return item

    def detach_from_folders(self, owner: str, folder_ids: Iterable[int]) -> int:
        """Reset ``folder_id`` to NULL for items in any of *folder_ids*."""
        folder_ids = list(folder_ids)
        if not folder_ids:
            return 0
        return (
            self.db.query(CollectionItem)
            .filter(CollectionItem.owner == owner, CollectionItem.folder_id.in_(folder_ids))
            .update({CollectionItem.folder_id: None}, synchronize_session=False)
        )

    def delete(self, item: CollectionItem) -> None:
        self.db.delete(item)
        self.db.flush()

    # --- Vectors ---

    def add_vectors(self, collection_uuid: str, chunks: List[dict]) -> int:
        """Append chunks after the current last ``chunk_index``."""
        last = (
            self.db.query(func.max(CollectionVector.chunk_index))
            .filter(CollectionVector.collection_uuid == collection_uuid)
            .scalar()
        )
        start = 0 if last is None else last + 1
        for offset, chunk in enumerate(chunks):
            self.db.add(CollectionVector(
                collection_uuid=collection_uuid,
                chunk_index=start + offset,
                content=chunk["content"],
                embedding=chunk.get("embedding"),
            ))
        self.db.flush()
        return len(chunks)

    def count_vectors(self, collection_uuid: str) -> int:
        return (
            self.db.query(func.count(CollectionVector.id))
            .filter(CollectionVector.collection_uuid == collection_uuid)
            .scalar()
        ) or 0

    def delete_vectors(self, collection_uuid: str) -> int:
        return (
            self.db.query(CollectionVector)
            .filter(CollectionVector.collection_uuid == collection_uuid)
            .delete(synchronize_session=False)
        )
