"""
Pydantic schemas for the stateless folder selection toggle.
"""

from pydantic import BaseModel


class SelectionToggleRequest(BaseModel):
    """
    Toggle request.

    ``selected`` holds folder ids and/or the literal ``"uncategorized"``.
    A null ``target`` clears the selection.
    """
    selected: list[str] = []
    target: str | None = None


class SelectionResponse(BaseModel):
    selected: list[str]
    # None entries stand for notes without a folder; null means "no filter"
    query_folder_ids: list[str | None] | None
