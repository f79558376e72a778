"""
Folder model for organizing notes.

Folders form a shallow per-owner hierarchy stored as parent pointers.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import String, ForeignKey, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base


def generate_id() -> str:
    return uuid.uuid4().hex


class Folder(Base):
    """
    SQLAlchemy model for folders.

    Deleting a folder does not cascade at the database level: the service
    layer promotes its children and detaches its notes in the same
    transaction. The parent reference is checked at commit time so the
    record can be removed before its children are re-pointed.

    Attributes:
        id: Unique identifier for the folder
        owner_id: Identifier of the owning user; every query is scoped by it
        parent_id: Optional reference to the parent folder (same owner)
        name: Trimmed folder name, unique among siblings ignoring case
        order: Position among siblings in the persisted list order
        created_at: Timestamp when the folder was created
        updated_at: Timestamp when the folder was last updated
    """
    __tablename__ = "folders"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    owner_id: Mapped[str] = mapped_column(String(64), index=True)
    parent_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("folders.id", deferrable=True, initially="DEFERRED"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255))
    order: Mapped[int] = mapped_column(default=0)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)


SIBLING_NAME_INDEX = "uq_folders_owner_parent_name"

# Authoritative guard for sibling name uniqueness; NULL parents are coalesced
# so that root-level folders collide too.
Index(
    SIBLING_NAME_INDEX,
    Folder.owner_id,
    func.coalesce(Folder.parent_id, ""),
    func.lower(Folder.name),
    unique=True,
)
