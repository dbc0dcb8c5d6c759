"""Database models."""

from .folder import Folder
from .collection import CollectionItem, CollectionVector
from .note import Note, NoteAttribute
from .attachment import Attachment

__all__ = [
    "Folder",
    "CollectionItem", "CollectionVector",
    "Note", "NoteAttribute",
    "Attachment",
]
