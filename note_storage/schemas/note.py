"""
Pydantic schemas for notes as listed by the folder filter.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class NoteResponse(BaseModel):
    id: str
    owner_id: str
    title: str
    description: str = ""
    file_name: str
    file_url: str | None = None
    mime_type: str
    size: int | None = None
    folder_id: str | None = None
    is_public: bool = False
    listed_on_explore: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
