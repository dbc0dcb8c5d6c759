"""Folder model: per-owner folder tree for collection items."""

from sqlalchemy import Column, Index, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from ..database import Base


class Folder(Base):
    """A folder in an owner's tree. ``parent_id`` NULL means root level."""

    __tablename__ = "folders"
    __table_args__ = (
        Index("ix_folders_owner", "owner"),
        Index("ix_folders_owner_parent", "owner", "parent_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner = Column(String(64), nullable=False)
    name = Column(String(255), nullable=False)
    parent_id = Column(Integer, ForeignKey("folders.id", ondelete="CASCADE"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
