"""
Note listing filtered by folder selection.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import Identity, get_current_identity
from ..schemas.note import NoteResponse
from ..services import note_service
from ..services.selection import parse_folder_ids_param, resolve_query_ids


router = APIRouter(prefix="/api/notes", tags=["notes"])


@router.get("", response_model=list[NoteResponse])
def list_notes(
    folder_ids: str | None = Query(
        default=None,
        description='Comma separated folder ids; "uncategorized" (or "null") selects notes without a folder',
    ),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """List the user's notes, restricted to the given folders when any are selected."""
    constraint = resolve_query_ids(parse_folder_ids_param(folder_ids))
    return note_service.list_notes(db, identity.user_id, constraint)
