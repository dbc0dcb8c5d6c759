"""Deep module for folder tree operations: create, rename/move, cascade delete, tree.

Callers hand in the owner and plain values; sibling-name checks, parent
ownership checks, descendant discovery and transaction handling all stay
behind this interface.
"""

import logging
from typing import List, Optional, Set

from sqlalchemy.orm import Session

from ..models.folder import Folder
from ..repositories.collection_repository import CollectionRepository
from ..repositories.folder_repository import FolderRepository
from ..schemas.collection import CollectionTreeNode
from ..exceptions import (
    ConsistencyError,
    DuplicateNameError,
    NoFieldsSuppliedError,
    ValidationError,
)
from . import tree_presenter
from .tree_presenter import name_key

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "parent_id")


class FolderService:
    """All folder operations for one owner at a time.

    Public methods:
        list_folders     -- every folder of the owner
        create_folder    -- insert under a parent; sibling names must differ
        update_folder    -- partial rename and/or reparent
        delete_folder    -- remove a subtree, detaching collection items
        collect_subtree  -- ids of a folder and all of its descendants
        get_tree         -- nested folders with collection items as leaves
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = FolderRepository(db)
        self.item_repo = CollectionRepository(db)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def list_folders(self, owner: str) -> List[Folder]:
        return self.repo.get_all(owner)

    def create_folder(self, owner: str, name: str, parent_id: Optional[int] = None) -> Folder:
        """Create a folder. Raises DuplicateNameError if a sibling has the same name."""
        if parent_id is not None:
            self._require_parent(owner, parent_id)
        self._ensure_unique_name(owner, name, parent_id)

        folder = self.repo.create(owner, name, parent_id)
        self.db.commit()
        logger.info(
            "Folder created",
            extra={"owner": owner, "folder_id": folder.id, "parent_id": parent_id},
        )
        return folder

    def update_folder(self, owner: str, folder_id: int, changes: dict) -> Folder:
        """Apply the supplied subset of ``name`` / ``parent_id``.

        *changes* holds only the fields the caller actually sent, so
        ``{"parent_id": None}`` moves the folder to the root while ``{}``
        is rejected with NoFieldsSuppliedError.
        """
        # A null name is "no rename"; a null parent_id is "move to root".
        changes = {
            k: v for k, v in changes.items()
            if k in UPDATABLE_FIELDS and not (k == "name" and v is None)
        }
        if not changes:
            raise NoFieldsSuppliedError(UPDATABLE_FIELDS)

        folder = self.repo.get_by_id(owner, folder_id)

        new_parent_id = changes.get("parent_id", folder.parent_id)
        if "parent_id" in changes and new_parent_id is not None:
            if new_parent_id == folder.id:
                raise ValidationError("A folder cannot be its own parent", field="parent_id")
            self._require_parent(owner, new_parent_id)
            if new_parent_id in self.collect_subtree(owner, folder.id):
                raise ValidationError("Cannot move folder into its own descendant", field="parent_id")

        new_name = changes.get("name", folder.name)
        if new_name != folder.name or new_parent_id != folder.parent_id:
            self._ensure_unique_name(owner, new_name, new_parent_id, exclude_id=folder.id)

        updated = self.repo.update(folder, **changes)
        self.db.commit()
        logger.info(
            "Folder updated",
            extra={"owner": owner, "folder_id": folder_id, "fields": sorted(changes)},
        )
        return updated

    def delete_folder(self, owner: str, folder_id: int) -> tuple[List[int], int]:
        """Delete a folder and its whole subtree in one transaction.

        Collection items placed anywhere in the subtree are kept and moved
        to "no folder". Returns ``(deleted_folder_ids, detached_item_count)``.
        Any failure rolls back every step.
        """
        self.repo.get_by_id(owner, folder_id)
        try:
            subtree = self.collect_subtree(owner, folder_id)
            detached = self.item_repo.detach_from_folders(owner, subtree)
            self.repo.delete_many(owner, subtree)
            remaining = self.repo.count_existing(owner, subtree)
            if remaining:
                raise ConsistencyError(
                    "Folder subtree changed during delete",
                    details={"expected": len(subtree), "remaining": remaining},
                )
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.warning(
                "Folder delete rolled back",
                extra={"owner": owner, "folder_id": folder_id},
                exc_info=True,
            )
            raise

        logger.info(
            "Folder subtree deleted",
            extra={
                "owner": owner,
                "folder_id": folder_id,
                "deleted_folders": len(subtree),
                "detached_items": detached,
            },
        )
        return subtree, detached

    def collect_subtree(self, owner: str, folder_id: int) -> List[int]:
        """Ids of *folder_id* and every descendant, breadth-first.

        One query per tree level. Reaching an already-visited folder means
        the stored ``parent_id`` graph has a cycle; that is reported as
        ConsistencyError rather than looping forever.
        """
        collected: List[int] = [folder_id]
        visited: Set[int] = {folder_id}
        level = [folder_id]
        while level:
            next_level: List[int] = []
            for child_id in self.repo.get_child_ids(owner, level):
                if child_id in visited:
                    raise ConsistencyError(
                        "Folder hierarchy contains a cycle",
                        details={"folder_id": folder_id, "revisited": child_id},
                    )
                visited.add(child_id)
                next_level.append(child_id)
            collected.extend(next_level)
            level = next_level
        return collected

    def get_tree(self, owner: str) -> List[CollectionTreeNode]:
        """Folders nested by parent, each listing its collection items.

        Folders sort by name; items sort active-first, then by name. Items
        without a folder, or pointing at a folder that no longer exists,
        appear at the root level after the root folders.
        """
        folders = self.repo.get_all(owner)
        items = self.item_repo.get_all(owner)

        forest = tree_presenter.sort_siblings(
            tree_presenter.build_tree(folders),
            lambda f: (name_key(f.name), f.id),
        )

        items_by_folder: dict = {}
        for item in sorted(items, key=lambda i: (not i.active, name_key(i.name))):
            folder_key = item.folder_id if item.folder_id in forest.nodes else None
            items_by_folder.setdefault(folder_key, []).append(item)

        def to_file_node(item) -> CollectionTreeNode:
            return CollectionTreeNode(
                id=f"file-{item.uuid}",
                name=item.name,
                type="file",
                folder_id=item.folder_id,
                active=item.active,
            )

        def to_folder_node(folder: Folder, children: List[CollectionTreeNode]) -> CollectionTreeNode:
            files = [to_file_node(i) for i in items_by_folder.get(folder.id, [])]
            return CollectionTreeNode(
                id=f"folder-{folder.id}",
                name=folder.name,
                type="folder",
                folder_id=folder.id,
                children=children + files,
            )

        roots = tree_presenter.render(forest, to_folder_node)
        return roots + [to_file_node(i) for i in items_by_folder.get(None, [])]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_parent(self, owner: str, parent_id: int) -> Folder:
        parent = self.repo.get_by_id_optional(owner, parent_id)
        if parent is None:
            raise ValidationError(f"Parent folder not found: {parent_id}", field="parent_id")
        return parent

    def _ensure_unique_name(
        self,
        owner: str,
        name: str,
        parent_id: Optional[int],
        exclude_id: Optional[int] = None,
    ) -> None:
        wanted = name_key(name)
        for sibling in self.repo.get_siblings(owner, parent_id):
            if sibling.id != exclude_id and name_key(sibling.name) == wanted:
                raise DuplicateNameError(name, parent_id)
