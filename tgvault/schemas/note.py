"""Schemas for notes, attributes and the note tree."""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional, List

DEFAULT_NOTE_TITLE = "Новая заметка"


class AttributeCreate(BaseModel):
    type: str = "label"
    name: str = Field(..., min_length=1, max_length=255)
    value: str = ""
    position: int = 0
    is_inheritable: bool = False


class AttributeUpdate(BaseModel):
    """Partial update; only fields present in the body are applied."""
    type: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    value: Optional[str] = None
    position: Optional[int] = None
    is_inheritable: Optional[bool] = None


class AttributeResponse(BaseModel):
    id: int
    note_id: str
    type: str
    name: str
    value: str
    position: int
    is_inheritable: bool

    class Config:
        from_attributes = True


class NoteCreate(BaseModel):
    title: str = DEFAULT_NOTE_TITLE
    content: str = ""
    parent_id: Optional[str] = None
    type: str = "note"

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: str) -> str:
        return v.strip() or DEFAULT_NOTE_TITLE


class NoteUpdate(BaseModel):
    """Partial update. An explicit ``"parent_id": null`` moves the note to the root."""
    title: Optional[str] = None
    content: Optional[str] = None
    parent_id: Optional[str] = None
    type: Optional[str] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or DEFAULT_NOTE_TITLE


class NoteResponse(BaseModel):
    note_id: str
    owner: str
    parent_note_id: Optional[str] = None
    title: str
    content: str
    type: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NoteDetailResponse(NoteResponse):
    attributes: List[AttributeResponse] = []


class NoteListResponse(BaseModel):
    rows: List[NoteResponse]


class NoteCreateResponse(BaseModel):
    note: NoteResponse


class NoteTreeNode(BaseModel):
    note_id: str
    title: str
    type: str
    parent_note_id: Optional[str] = None
    children: List['NoteTreeNode'] = []


class NoteSearchResult(BaseModel):
    """A note matched by search, with the fields the term was found in."""
    note_id: str
    title: str
    parent_note_id: Optional[str] = None
    matched_in: List[str]
