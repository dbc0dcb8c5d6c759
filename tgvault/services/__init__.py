"""Business logic services."""

from .folder_service import FolderService
from .collection_service import CollectionService
from .note_service import NoteService
from .attribute_service import AttributeService
from .attachment_service import AttachmentService

__all__ = [
    "FolderService",
    "CollectionService",
    "NoteService",
    "AttributeService",
    "AttachmentService",
]
