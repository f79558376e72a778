"""
Models package for the note storage service.

Exports all SQLAlchemy models for database operations.
"""

from .folder import Folder
from .note import Note

__all__ = [
    "Folder",
    "Note",
]
