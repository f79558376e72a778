"""
Folder mutations: create, rename, move and delete.

Every operation validates the hierarchy invariants before writing and
commits once; a rejected mutation leaves the store unchanged.
"""

import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy.exc import IntegrityError

from ..config import settings
from ..exceptions import (
    CycleDetectedError,
    DepthExceededError,
    DuplicateNameError,
    FolderError,
    FolderNotFoundError,
    InvalidNameError,
    ParentNotFoundError,
    SelfParentError,
)
from ..models.folder import Folder, SIBLING_NAME_INDEX
from . import note_service
from .folder_repository import FolderRepository, normalize_parent_id
from .folder_validation import (
    get_subtree_height,
    validate_depth_bound,
    validate_no_cycle,
    validate_sibling_name_unique,
)

logger = logging.getLogger(__name__)

# Marks an update field that was not supplied
UNSET = object()


def _max_depth(max_depth: Optional[int]) -> int:
    return settings.max_folder_depth if max_depth is None else max_depth


def _folder_error_for(exc: IntegrityError) -> Optional[FolderError]:
    """Folder error kind for a constraint violation raised at commit, if any."""
    message = str(exc.orig)
    if SIBLING_NAME_INDEX in message:
        return DuplicateNameError()
    if "foreign key" in message.lower():
        # The parent was removed by a concurrent writer
        return ParentNotFoundError()
    return None


@contextmanager
def _writing(repo: FolderRepository):
    """Commit the writes made inside the block, translating constraint violations."""
    try:
        yield
        repo.db.commit()
    except IntegrityError as exc:
        repo.db.rollback()
        error = _folder_error_for(exc)
        if error is None:
            raise
        raise error from exc
    except Exception:
        repo.db.rollback()
        raise


def _commit(repo: FolderRepository) -> None:
    with _writing(repo):
        pass


def get_folder(repo: FolderRepository, folder_id: str) -> Folder:
    folder = repo.get(folder_id)
    if folder is None:
        raise FolderNotFoundError(folder_id)
    return folder


def create_folder(
    repo: FolderRepository,
    name: Optional[str],
    parent_id: Optional[str] = None,
    max_depth: Optional[int] = None,
) -> Folder:
    """Create a folder at the root or under ``parent_id``."""
    name = (name or "").strip()
    if not name:
        raise InvalidNameError()

    parent_id = normalize_parent_id(parent_id)
    if parent_id is not None:
        parent = repo.get(parent_id)
        if parent is None:
            raise ParentNotFoundError()
        parent_id = parent.id
        limit = _max_depth(max_depth)
        if not validate_depth_bound(repo, parent_id, limit):
            raise DepthExceededError(limit)

    if not validate_sibling_name_unique(repo, parent_id, name):
        raise DuplicateNameError()

    with _writing(repo):
        folder = repo.add(name, parent_id)
    repo.db.refresh(folder)
    logger.info("Created folder %s (%r) for owner %s", folder.id, folder.name, repo.owner_id)
    return folder


def update_folder(
    repo: FolderRepository,
    folder_id: str,
    name: Optional[str] = None,
    parent_id=UNSET,
    max_depth: Optional[int] = None,
) -> Folder:
    """
    Rename and/or move a folder in one validated step.

    A ``name`` that is empty after trimming keeps the current name. A
    ``parent_id`` of None or "" moves the folder to the root; leaving it
    UNSET keeps the current parent.
    """
    folder = get_folder(repo, folder_id)

    new_name = folder.name
    if name is not None:
        new_name = name.strip() or folder.name

    new_parent_id = folder.parent_id
    if parent_id is not UNSET:
        new_parent_id = normalize_parent_id(parent_id)
        if new_parent_id is not None:
            parent = repo.get(new_parent_id)
            if parent is None:
                raise ParentNotFoundError()
            if parent.id == folder.id:
                raise SelfParentError()
            if not validate_no_cycle(repo, parent.id, folder.id):
                raise CycleDetectedError()
            limit = _max_depth(max_depth)
            if new_parent_id != folder.parent_id and not validate_depth_bound(
                repo, parent.id, limit, get_subtree_height(repo, folder.id)
            ):
                raise DepthExceededError(limit)

    if not validate_sibling_name_unique(repo, new_parent_id, new_name, exclude_id=folder.id):
        raise DuplicateNameError()

    if new_name == folder.name and new_parent_id == folder.parent_id:
        return folder

    if new_parent_id != folder.parent_id:
        folder.order = repo.next_order(new_parent_id)
    folder.name = new_name
    folder.parent_id = new_parent_id
    _commit(repo)
    repo.db.refresh(folder)
    logger.info(
        "Updated folder %s for owner %s: name=%r parent=%s",
        folder.id,
        repo.owner_id,
        folder.name,
        folder.parent_id,
    )
    return folder


def rename_folder(repo: FolderRepository, folder_id: str, new_name: Optional[str]) -> Folder:
    """Rename a folder; an empty name is a no-op."""
    return update_folder(repo, folder_id, name=new_name if new_name is not None else "")


def move_folder(
    repo: FolderRepository,
    folder_id: str,
    new_parent_id: Optional[str],
    max_depth: Optional[int] = None,
) -> Folder:
    """Re-parent a folder; None moves it to the root."""
    return update_folder(repo, folder_id, parent_id=new_parent_id, max_depth=max_depth)


def delete_folder(repo: FolderRepository, folder_id: str) -> None:
    """
    Delete a folder.

    Its children move up to the deleted folder's parent and its notes
    become uncategorized. All three steps share one transaction; the record
    goes first so that a child may take over its name at the new level.
    """
    folder = get_folder(repo, folder_id)
    deleted_id = folder.id
    target_parent_id = folder.parent_id

    for child in repo.children(deleted_id):
        clash = repo.find_sibling_by_name(target_parent_id, child.name, exclude_id=deleted_id)
        if clash is not None:
            raise DuplicateNameError(
                f"Cannot delete folder: subfolder {child.name!r} would clash with "
                f"an existing folder of the same name"
            )

    with _writing(repo):
        cleared = note_service.clear_folder_references(repo.db, repo.owner_id, deleted_id)
        repo.delete(folder)
        moved = repo.reparent_children(deleted_id, target_parent_id)
    logger.info(
        "Deleted folder %s for owner %s (%d subfolders promoted, %d notes uncategorized)",
        deleted_id,
        repo.owner_id,
        moved,
        cleared,
    )
