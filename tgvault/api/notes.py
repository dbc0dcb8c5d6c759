"""Notes wiki API: list, tree, search, CRUD, attributes.

The owner comes from the bearer owner token, never from the request body.
"""

from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.auth import OwnerContext, require_owner
from ..database import get_db
from ..services.attribute_service import AttributeService
from ..services.note_service import NoteService
from ..schemas.note import (
    AttributeCreate,
    AttributeResponse,
    AttributeUpdate,
    NoteCreate,
    NoteCreateResponse,
    NoteDetailResponse,
    NoteListResponse,
    NoteResponse,
    NoteSearchResult,
    NoteTreeNode,
    NoteUpdate,
)

router = APIRouter(prefix="/api/notes", tags=["notes"])
attributes_router = APIRouter(prefix="/api/attributes", tags=["notes"])


@router.get("", response_model=NoteListResponse)
def list_notes(
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(require_owner),
):
    """Visible notes as flat rows, oldest first."""
    return {"rows": NoteService(db).list_notes(ctx.owner)}


@router.get("/tree", response_model=List[NoteTreeNode])
def get_note_tree(
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(require_owner),
):
    return NoteService(db).get_tree(ctx.owner)


@router.get("/search", response_model=List[NoteSearchResult])
def search_notes(
    q: str = Query(..., min_length=1, max_length=200),
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(require_owner),
):
    """Substring search across the whole tree, regardless of depth."""
    return NoteService(db).search(ctx.owner, q)


@router.post("", response_model=NoteCreateResponse, status_code=201)
def create_note(
    data: NoteCreate,
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(require_owner),
):
    service = NoteService(db)
    note = service.create_note(ctx.owner, data.title, data.content, data.parent_id, data.type)
    return {"note": note}


@router.get("/{note_id}", response_model=NoteDetailResponse)
def get_note(
    note_id: str,
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(require_owner),
):
    note, attributes = NoteService(db).get_note(ctx.owner, note_id)
    response = NoteDetailResponse.model_validate(note)
    response.attributes = [AttributeResponse.model_validate(a) for a in attributes]
    return response


@router.put("/{note_id}", response_model=NoteResponse)
def update_note(
    note_id: str,
    data: NoteUpdate,
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(require_owner),
):
    """Update a note. Only fields present in the body are applied."""
    changes = data.model_dump(include=data.model_fields_set)
    return NoteService(db).update_note(ctx.owner, note_id, changes)


@router.delete("/{note_id}")
def delete_note(
    note_id: str,
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(require_owner),
):
    """Soft delete. Child notes are left in place."""
    NoteService(db).delete_note(ctx.owner, note_id)
    return {"success": True}


# -- Attributes -----------------------------------------------------------

@router.post("/{note_id}/attributes", response_model=AttributeResponse, status_code=201)
def create_attribute(
    note_id: str,
    data: AttributeCreate,
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(require_owner),
):
    return AttributeService(db).create_attribute(ctx.owner, note_id, data.model_dump())


@attributes_router.put("/{attribute_id}", response_model=AttributeResponse)
def update_attribute(
    attribute_id: int,
    data: AttributeUpdate,
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(require_owner),
):
    changes = data.model_dump(include=data.model_fields_set)
    return AttributeService(db).update_attribute(ctx.owner, attribute_id, changes)


@attributes_router.delete("/{attribute_id}", status_code=204)
def delete_attribute(
    attribute_id: int,
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(require_owner),
):
    AttributeService(db).delete_attribute(ctx.owner, attribute_id)
