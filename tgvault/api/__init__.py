"""API routes."""

from .collections import router as collections_router
from .folders import router as folders_router
from .notes import router as notes_router, attributes_router
from .attachments import router as attachments_router

__all__ = [
    "collections_router",
    "folders_router",
    "notes_router",
    "attributes_router",
    "attachments_router",
]
