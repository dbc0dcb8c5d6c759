"""Collection models: an owner's files and their vector rows.

One table with an ``owner`` column replaces the per-user
``<username>_vector_collections`` tables.
"""

from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Index, Integer, JSON, String, Text,
    UniqueConstraint,
)
from sqlalchemy.sql import func
from ..database import Base


class CollectionItem(Base):
    """A named, toggleable file in an owner's collection."""

    __tablename__ = "collection_items"
    __table_args__ = (
        UniqueConstraint("owner", "name", name="uq_collection_items_owner_name"),
        Index("ix_collection_items_owner", "owner"),
        Index("ix_collection_items_folder_id", "folder_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner = Column(String(64), nullable=False)
    name = Column(String(500), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    folder_id = Column(Integer, ForeignKey("folders.id", ondelete="SET NULL"), nullable=True)
    uuid = Column(String(36), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class CollectionVector(Base):
    """One embedded chunk of a collection item. Keyed by the item's uuid."""

    __tablename__ = "collection_vectors"
    __table_args__ = (
        Index("ix_collection_vectors_uuid", "collection_uuid"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    collection_uuid = Column(String(36), nullable=False)
    chunk_index = Column(Integer, nullable=False, default=0)
    content = Column(Text, nullable=False)
    embedding = Column(JSON, nullable=True)  # list[float]
    created_at = Column(DateTime(timezone=True), server_default=func.now())
