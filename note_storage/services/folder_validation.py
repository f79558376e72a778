"""
Hierarchy invariant checks for folder mutations.

Each check is independently callable and answers with a boolean; the
mutation operations turn a failed check into the matching folder error.
All lookups go through an owner-scoped ``FolderRepository``.
"""

import logging
from typing import Optional

from .folder_repository import FolderRepository, normalize_parent_id

logger = logging.getLogger(__name__)


def validate_sibling_name_unique(
    repo: FolderRepository,
    parent_id: Optional[str],
    name: str,
    exclude_id: Optional[str] = None,
) -> bool:
    """
    True if no sibling under ``parent_id`` already uses ``name`` (ignoring case).

    ``exclude_id`` lets a rename ignore the folder being renamed.
    """
    return repo.find_sibling_by_name(normalize_parent_id(parent_id), name, exclude_id) is None


def validate_no_cycle(
    repo: FolderRepository,
    candidate_parent_id: Optional[str],
    folder_id: str,
) -> bool:
    """
    True if placing ``folder_id`` under ``candidate_parent_id`` keeps the graph acyclic.

    Walks up from the candidate parent; the walk is bounded by the owner's
    folder count so that corrupt data cannot loop forever. A walk that hits
    the bound without reaching a root is reported as unsafe.
    """
    current_id = normalize_parent_id(candidate_parent_id)
    remaining = repo.count() + 1
    while current_id is not None:
        if current_id == folder_id:
            return False
        if remaining <= 0:
            logger.warning(
                "Parent chain of folder %s for owner %s does not terminate",
                candidate_parent_id,
                repo.owner_id,
            )
            return False
        remaining -= 1
        folder = repo.get(current_id)
        if folder is None:
            return True
        current_id = folder.parent_id
    return True


def get_folder_depth(repo: FolderRepository, folder_id: str) -> int:
    """
    Depth of a folder (root = 0).

    A dangling parent reference ends the walk, matching how the tree
    builder shows such folders at the root.
    """
    depth = 0
    seen = {folder_id}
    folder = repo.get(folder_id)
    while folder is not None and folder.parent_id is not None:
        if folder.parent_id in seen:
            logger.warning("Folder %s sits in a parent cycle", folder_id)
            break
        parent = repo.get(folder.parent_id)
        if parent is None:
            break
        seen.add(parent.id)
        depth += 1
        folder = parent
    return depth


def get_subtree_height(repo: FolderRepository, folder_id: str) -> int:
    """Number of levels in the subtree rooted at ``folder_id`` (1 for a leaf)."""
    height = 1
    level = [folder_id]
    seen = {folder_id}
    while True:
        next_level = []
        for parent_id in level:
            for child in repo.children(parent_id):
                if child.id not in seen:
                    seen.add(child.id)
                    next_level.append(child.id)
        if not next_level:
            return height
        height += 1
        level = next_level


def validate_depth_bound(
    repo: FolderRepository,
    candidate_parent_id: Optional[str],
    max_depth: int,
    subtree_height: int = 1,
) -> bool:
    """
    True if a subtree of ``subtree_height`` levels fits under the candidate parent.

    A new folder is a subtree of height 1. Moving to the root is always safe.
    """
    candidate_parent_id = normalize_parent_id(candidate_parent_id)
    if candidate_parent_id is None:
        return True
    new_depth = get_folder_depth(repo, candidate_parent_id) + 1
    return new_depth + subtree_height - 1 < max_depth
