"""Schemas for note attachments."""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class AttachmentResponse(BaseModel):
    """Attachment metadata. The payload is served by ``GET /api/blobs/{id}``."""
    id: str
    note_id: str
    filename: str
    mime: str
    size: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
