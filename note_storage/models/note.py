"""
Note model.

Notes are owned by the notes feature; the folder subsystem only reads and
clears ``folder_id``.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base
from .folder import generate_id


class Note(Base):
    """
    SQLAlchemy model for uploaded notes.

    Attributes:
        id: Unique identifier for the note
        owner_id: Identifier of the owning user
        title: Display title
        description: Optional free text
        file_name: Storage key of the uploaded file
        file_url: Retrieval URL returned by the blob store
        mime_type: Content type of the uploaded file
        size: File size in bytes, when known
        folder_id: Containing folder, or None for "Uncategorized"
        is_public: Whether the note is visible on the owner's public profile
        listed_on_explore: Whether the note is listed on the explore page
    """
    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    owner_id: Mapped[str] = mapped_column(String(64), index=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text, default="")
    file_name: Mapped[str] = mapped_column(String(255))
    file_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    mime_type: Mapped[str] = mapped_column(String(100), default="application/pdf")
    size: Mapped[Optional[int]] = mapped_column(nullable=True)
    folder_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("folders.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    is_public: Mapped[bool] = mapped_column(default=False)
    listed_on_explore: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)
