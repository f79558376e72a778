"""
Pydantic schemas package.

Exports all schemas for API request/response validation.
"""

from .folder import (
    FolderBase,
    FolderCreate,
    FolderUpdate,
    FolderResponse,
    FolderTreeNode,
    ParentOption,
    FolderDeleted,
)

from .note import NoteResponse

from .selection import (
    SelectionToggleRequest,
    SelectionResponse,
)

__all__ = [
    # Folder schemas
    "FolderBase",
    "FolderCreate",
    "FolderUpdate",
    "FolderResponse",
    "FolderTreeNode",
    "ParentOption",
    "FolderDeleted",
    # Note schemas
    "NoteResponse",
    # Selection schemas
    "SelectionToggleRequest",
    "SelectionResponse",
]
