"""Data access repositories."""

from .base import BaseRepository
from .folder_repository import FolderRepository
from .collection_repository import CollectionRepository
from .note_repository import NoteRepository, AttributeRepository
from .attachment_repository import AttachmentRepository

__all__ = [
    "BaseRepository",
    "FolderRepository",
    "CollectionRepository",
    "NoteRepository",
    "AttributeRepository",
    "AttachmentRepository",
]
