"""Folder schemas."""

from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import Optional, List


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Folder name cannot be empty")
    if len(v) > 255:
        raise ValueError("Folder name is too long")
    return v


class FolderCreate(BaseModel):
    """Create a folder. ``parent_id`` None = root level."""
    name: str
    parent_id: Optional[int] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)


class FolderUpdate(BaseModel):
    """Rename and/or reparent a folder.

    Only the fields present in the request body are applied; an explicit
    ``"parent_id": null`` moves the folder to the root level.
    """
    name: Optional[str] = None
    parent_id: Optional[int] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _clean_name(v)


class FolderResponse(BaseModel):
    """Folder in API responses."""
    id: int
    owner: str
    name: str
    parent_id: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FolderListResponse(BaseModel):
    rows: List[FolderResponse]


class FolderDeleteResponse(BaseModel):
    """Result of a cascade delete."""
    success: bool = True
    deleted_folder_ids: List[int]
    detached_items: int
