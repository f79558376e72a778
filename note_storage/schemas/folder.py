"""
Pydantic schemas for folders.

Defines schemas for creating, updating, and returning folder data,
including the nested tree and parent picker responses.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class FolderBase(BaseModel):
    """Base schema with common folder fields."""
    name: str


class FolderCreate(FolderBase):
    """Schema for creating a new folder."""
    parent_id: str | None = None


class FolderUpdate(BaseModel):
    """
    Schema for renaming and/or moving a folder.

    Omitted fields are left untouched; an explicit ``parent_id`` of null or
    an empty string moves the folder to the root.
    """
    name: str | None = None
    parent_id: str | None = None


class FolderResponse(FolderBase):
    """Schema for folder response with all fields."""
    id: str
    owner_id: str
    parent_id: str | None
    order: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FolderTreeNode(BaseModel):
    """Recursive folder tree node."""
    folder: FolderResponse
    children: list["FolderTreeNode"] = []

    model_config = ConfigDict(from_attributes=True)


FolderTreeNode.model_rebuild()


class ParentOption(BaseModel):
    """Entry of the "choose a parent folder" picker."""
    id: str
    name: str
    depth: int

    model_config = ConfigDict(from_attributes=True)


class FolderDeleted(BaseModel):
    message: str = "Folder deleted"
