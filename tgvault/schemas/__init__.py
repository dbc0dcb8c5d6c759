"""Pydantic schemas for API validation."""

from .folder import (
    FolderCreate,
    FolderUpdate,
    FolderResponse,
    FolderListResponse,
    FolderDeleteResponse,
)
from .collection import (
    CollectionItemCreate,
    CollectionItemResponse,
    CollectionListResponse,
    CollectionTreeNode,
)
from .note import (
    NoteCreate,
    NoteUpdate,
    NoteResponse,
    NoteDetailResponse,
    NoteTreeNode,
)
from .attachment import AttachmentResponse

__all__ = [
    "FolderCreate",
    "FolderUpdate",
    "FolderResponse",
    "FolderListResponse",
    "FolderDeleteResponse",
    "CollectionItemCreate",
    "CollectionItemResponse",
    "CollectionListResponse",
    "CollectionTreeNode",
    "NoteCreate",
    "NoteUpdate",
    "NoteResponse",
    "NoteDetailResponse",
    "NoteTreeNode",
    "AttachmentResponse",
]
