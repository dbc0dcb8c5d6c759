"""Schemas for the collection registry API."""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional, List


class CollectionItemCreate(BaseModel):
    """Register a collection item (normally done by the ingestion pipeline)."""
    name: str
    folder_id: Optional[int] = None
    active: bool = True

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        if '/' in v:
            raise ValueError("Name cannot contain '/'")
        return v


class CollectionItemResponse(BaseModel):
    name: str
    active: bool
    folder_id: Optional[int] = None
    uuid: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CollectionListResponse(BaseModel):
    rows: List[CollectionItemResponse]


class ToggleRequest(BaseModel):
    name: str
    active: bool


class ToggleResponse(BaseModel):
    success: bool = True
    updated: int


class MoveRequest(BaseModel):
    """Place an item into a folder; ``folder_id`` None = no folder."""
    name: str
    folder_id: Optional[int] = None


class VectorChunk(BaseModel):
    content: str
    embedding: Optional[List[float]] = None


class VectorAppendRequest(BaseModel):
    chunks: List[VectorChunk] = Field(..., min_length=1)


class VectorAppendResponse(BaseModel):
    success: bool = True
    appended: int
    total: int


class CollectionDeleteResponse(BaseModel):
    success: bool = True
    deleted_vectors: int


class CollectionTreeNode(BaseModel):
    """A folder or a file in the collection tree."""
    id: str
    name: str
    type: str  # 'folder' or 'file'
    folder_id: Optional[int] = None
    active: Optional[bool] = None  # files only
    children: List['CollectionTreeNode'] = []
