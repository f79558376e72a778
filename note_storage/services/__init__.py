# Services package

from .folder_repository import FolderRepository, normalize_parent_id
from .folder_tree import (
    MAX_FOLDER_DEPTH,
    FolderTreeNode,
    build_folder_tree,
    flatten_folder_tree_for_select,
    folder_and_descendant_ids,
    folders_in_tree_order,
)
from .folder_operations import (
    create_folder,
    delete_folder,
    move_folder,
    rename_folder,
    update_folder,
)
from .selection import resolve_query_ids, toggle

__all__ = [
    "FolderRepository",
    "normalize_parent_id",
    "MAX_FOLDER_DEPTH",
    "FolderTreeNode",
    "build_folder_tree",
    "flatten_folder_tree_for_select",
    "folder_and_descendant_ids",
    "folders_in_tree_order",
    "create_folder",
    "delete_folder",
    "move_folder",
    "rename_folder",
    "update_folder",
    "resolve_query_ids",
    "toggle",
]
