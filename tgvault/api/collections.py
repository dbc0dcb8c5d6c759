"""Collection registry API (the "vector collections" table of each owner).

Routes keep the URL shape the Mini App frontend calls:
``/api/vector-collections/{username}...``.
"""

from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.auth import OwnerContext, path_owner
from ..database import get_db
from ..services.collection_service import CollectionService
from ..services.folder_service import FolderService
from ..schemas.collection import (
    CollectionDeleteResponse,
    CollectionItemCreate,
    CollectionItemResponse,
    CollectionListResponse,
    CollectionTreeNode,
    MoveRequest,
    ToggleRequest,
    ToggleResponse,
    VectorAppendRequest,
    VectorAppendResponse,
)

router = APIRouter(prefix="/api/vector-collections/{username}", tags=["collections"])


@router.get("", response_model=CollectionListResponse)
def list_items(
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(path_owner),
):
    """All items ordered by name. Unknown owners get an empty list."""
    service = CollectionService(db)
    return {"rows": service.list_items(ctx.owner)}


@router.post("", response_model=CollectionItemResponse, status_code=201)
def register_item(
    data: CollectionItemCreate,
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(path_owner),
):
    service = CollectionService(db)
    return service.register_item(ctx.owner, data.name, data.folder_id, data.active)


@router.get("/tree", response_model=List[CollectionTreeNode])
def get_collection_tree(
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(path_owner),
):
    """Same tree as ``/api/folders/{username}/tree``."""
    return FolderService(db).get_tree(ctx.owner)


@router.post("/toggle", response_model=ToggleResponse)
def toggle_item(
    data: ToggleRequest,
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(path_owner),
):
    """Set ``active``. An unknown name succeeds with ``updated: 0``."""
    service = CollectionService(db)
    updated = service.toggle_active(ctx.owner, data.name, data.active)
    return ToggleResponse(updated=updated)


@router.post("/move", response_model=CollectionItemResponse)
def move_item(
    data: MoveRequest,
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(path_owner),
):
    service = CollectionService(db)
    return service.move_item(ctx.owner, data.name, data.folder_id)


@router.post("/{name}/vectors", response_model=VectorAppendResponse, status_code=201)
def append_vectors(
    name: str,
    data: VectorAppendRequest,
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(path_owner),
):
    service = CollectionService(db)
    chunks = [chunk.model_dump() for chunk in data.chunks]
    appended, total = service.append_vectors(ctx.owner, name, chunks)
    return VectorAppendResponse(appended=appended, total=total)


@router.delete("/{name}", response_model=CollectionDeleteResponse)
def delete_item(
    name: str,
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(path_owner),
):
    """Delete an item together with all of its vector rows."""
    service = CollectionService(db)
    deleted_vectors = service.delete_item(ctx.owner, name)
    return CollectionDeleteResponse(deleted_vectors=deleted_vectors)
