"""
Owner-scoped folder store.

A ``FolderRepository`` is bound to a single owner at construction time, so
every query it issues is filtered by ``owner_id``; there is no unscoped
lookup.
"""

from typing import Optional

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from ..models.folder import Folder


def normalize_parent_id(parent_id: Optional[str]) -> Optional[str]:
    """Treat empty and missing parent ids as the root (None)."""
    if parent_id is None:
        return None
    parent_id = str(parent_id).strip()
    return parent_id or None


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class FolderRepository:
    """Folder persistence for one owner."""

    def __init__(self, db: Session, owner_id: str):
        self.db = db
        self.owner_id = owner_id

    def _query(self):
        return self.db.query(Folder).filter(Folder.owner_id == self.owner_id)

    def get(self, folder_id: Optional[str]) -> Optional[Folder]:
        folder_id = normalize_parent_id(folder_id)
        if folder_id is None:
            return None
        return self._query().filter(Folder.id == folder_id).first()

    def list_all(self, search: Optional[str] = None) -> list[Folder]:
        """All folders of the owner in persisted order, optionally filtered by name."""
        query = self._query()
        search = (search or "").strip()
        if search:
            pattern = f"%{_escape_like(search.lower())}%"
            query = query.filter(func.lower(Folder.name).like(pattern, escape="\\"))
        return query.order_by(Folder.order, Folder.created_at).all()

    def count(self) -> int:
        return self._query().count()

    def children(self, parent_id: Optional[str]) -> list[Folder]:
        parent_id = normalize_parent_id(parent_id)
        if parent_id is None:
            return self._query().filter(Folder.parent_id.is_(None)).all()
        return self._query().filter(Folder.parent_id == parent_id).all()

    def find_sibling_by_name(
        self,
        parent_id: Optional[str],
        name: str,
        exclude_id: Optional[str] = None,
    ) -> Optional[Folder]:
        """Case-insensitive exact name match among the children of ``parent_id``."""
        wanted = name.strip().lower()
        for sibling in self.children(parent_id):
            if exclude_id is not None and sibling.id == exclude_id:
                continue
            if sibling.name.strip().lower() == wanted:
                return sibling
        return None

    def next_order(self, parent_id: Optional[str]) -> int:
        parent_id = normalize_parent_id(parent_id)
        query = self.db.query(func.max(Folder.order)).filter(Folder.owner_id == self.owner_id)
        if parent_id is None:
            query = query.filter(Folder.parent_id.is_(None))
        else:
            query = query.filter(Folder.parent_id == parent_id)
        max_order = query.scalar()
        return (max_order + 1) if max_order is not None else 0

    def add(self, name: str, parent_id: Optional[str]) -> Folder:
        folder = Folder(
            owner_id=self.owner_id,
            name=name,
            parent_id=normalize_parent_id(parent_id),
            order=self.next_order(parent_id),
        )
        self.db.add(folder)
        self.db.flush()
        return folder

    def reparent_children(self, folder_id: str, new_parent_id: Optional[str]) -> int:
        """Bulk-move every direct child of ``folder_id`` under ``new_parent_id``."""
        result = self.db.execute(
            update(Folder)
            .where(Folder.owner_id == self.owner_id, Folder.parent_id == folder_id)
            .values(parent_id=normalize_parent_id(new_parent_id))
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def delete(self, folder: Folder) -> None:
        self.db.delete(folder)
        self.db.flush()
