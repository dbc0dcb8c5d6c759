"""Repository for folder tree database operations."""

from typing import Iterable, List, Optional

from ..models.folder import Folder
from ..exceptions import FolderNotFoundError
from .base import BaseRepository


class FolderRepository(BaseRepository[Folder]):
    """Data access layer for owner-scoped folders."""

    model_class = Folder
    not_found_error = FolderNotFoundError

    def create(self, owner: str, name: str, parent_id: Optional[int] = None) -> Folder:
        folder = Folder(owner=owner, name=name, parent_id=parent_id)
        self.db.add(folder)
        self.db.flush()
        self.db.refresh(folder)
        return folder

    def get_all(self, owner: str) -> List[Folder]:
        """All folders of *owner*, in id order. Presentation sorts later."""
        return self._base_query(owner).order_by(Folder.id).all()

    def get_siblings(self, owner: str, parent_id: Optional[int]) -> List[Folder]:
        """Folders sharing *parent_id* (root level when None)."""
        query = self._base_query(owner)
        if parent_id is None:
            query = query.filter(Folder.parent_id.is_(None))
        else:
            query = query.filter(Folder.parent_id == parent_id)
        return query.all()

    def get_child_ids(self, owner: str, parent_ids: Iterable[int]) -> List[int]:
        """Ids of the direct children of any of *parent_ids*. One query per call."""
        parent_ids = list(parent_ids)
        if not parent_ids:
            return []
        rows = (
            self.db.query(Folder.id)
            .filter(Folder.owner == owner, Folder.parent_id.in_(parent_ids))
            .order_by(Folder.id)
            .all()
        )
        return [row.id for row in rows]

    def update(self, folder: Folder, **fields) -> Folder:
        for key, value in fields.items():
            setattr(folder, key, value)
        self.db.flush()
        self.db.refresh(folder)
        return folder

    def count_existing(self, owner: str, folder_ids: Iterable[int]) -> int:
        folder_ids = list(folder_ids)
        if not folder_ids:
            return 0
        return (
            self._base_query(owner)
            .filter(Folder.id.in_(folder_ids))
            .count()
        )

    def delete_many(self, owner: str, folder_ids: Iterable[int]) -> int:
        """Delete the given folders of *owner* in one statement.

        Returns the driver row count, which may leave out children removed
        by the ON DELETE CASCADE of a parent in the same statement.
        """
        folder_ids = list(folder_ids)
        if not folder_ids:
            return 0
        return (
            self.db.query(Folder)
            .filter(Folder.owner == owner, Folder.id.in_(folder_ids))
            .delete(synchronize_session=False)
        )
