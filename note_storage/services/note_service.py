"""
Note collection operations used by the folder subsystem.
"""

from typing import Optional

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from ..models.note import Note


def clear_folder_references(db: Session, owner_id: str, folder_id: str) -> int:
    """Move every note of ``owner_id`` in ``folder_id`` to "Uncategorized"."""
    result = db.execute(
        update(Note)
        .where(Note.owner_id == owner_id, Note.folder_id == folder_id)
        .values(folder_id=None)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount


def list_notes(
    db: Session,
    owner_id: str,
    folder_ids: Optional[set[Optional[str]]] = None,
) -> list[Note]:
    """
    List an owner's notes, newest first.

    Args:
        folder_ids: Folder constraint; ``None`` inside the set matches notes
            without a folder. Passing ``None`` (not an empty set) disables
            the constraint.
    """
    query = db.query(Note).filter(Note.owner_id == owner_id)
    if folder_ids is not None:
        real_ids = [folder_id for folder_id in folder_ids if folder_id is not None]
        conditions = []
        if real_ids:
            conditions.append(Note.folder_id.in_(real_ids))
        if None in folder_ids:
            conditions.append(Note.folder_id.is_(None))
        if not conditions:
            return []
        query = query.filter(or_(*conditions))
    return query.order_by(Note.created_at.desc(), Note.id).all()
