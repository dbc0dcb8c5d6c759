"""Folder API: list, tree, create, rename/move, cascade delete.

Every endpoint is scoped to the owner named in the path; the owner is
passed explicitly into FolderService.
"""

from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.auth import OwnerContext, path_owner
from ..database import get_db
from ..services.folder_service import FolderService
from ..schemas.collection import CollectionTreeNode
from ..schemas.folder import (
    FolderCreate,
    FolderUpdate,
    FolderResponse,
    FolderListResponse,
    FolderDeleteResponse,
)

router = APIRouter(prefix="/api/folders/{username}", tags=["folders"])


@router.get("", response_model=FolderListResponse)
def list_folders(
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(path_owner),
):
    """All folders of the owner as flat rows."""
    service = FolderService(db)
    return {"rows": service.list_folders(ctx.owner)}


@router.get("/tree", response_model=List[CollectionTreeNode])
def get_folder_tree(
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(path_owner),
):
    """Folders nested by parent, with collection items as leaves."""
    service = FolderService(db)
    return service.get_tree(ctx.owner)


@router.post("", response_model=FolderResponse, status_code=201)
def create_folder(
    data: FolderCreate,
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(path_owner),
):
    """Create a folder. 400 if a sibling already has this name."""
    service = FolderService(db)
    return service.create_folder(ctx.owner, data.name, data.parent_id)


@router.patch("/{folder_id}", response_model=FolderResponse)
def update_folder(
    folder_id: int,
    data: FolderUpdate,
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(path_owner),
):
    """Rename and/or move a folder. Only fields present in the body are applied."""
    service = FolderService(db)
    changes = data.model_dump(include=data.model_fields_set)
    return service.update_folder(ctx.owner, folder_id, changes)


@router.delete("/{folder_id}", response_model=FolderDeleteResponse)
def delete_folder(
    folder_id: int,
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(path_owner),
):
    """Delete a folder with its subtree; contained items move to "no folder"."""
    service = FolderService(db)
    deleted_ids, detached = service.delete_folder(ctx.owner, folder_id)
    return FolderDeleteResponse(deleted_folder_ids=deleted_ids, detached_items=detached)
