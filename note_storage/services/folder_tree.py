"""
Folder tree service.

Pure helpers over a flat list of one owner's folders:
- Building a nested tree sorted by name at every level
- Flattening the tree for the "choose a parent folder" picker
- Listing folders in tree order
- Finding a node and collecting its descendant ids
"""

import logging
import unicodedata
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

logger = logging.getLogger(__name__)

# Maximum folder depth (root level = depth 0, so 2 means root + one subfolder level)
MAX_FOLDER_DEPTH = 2


@dataclass
class FolderTreeNode:
    """A folder together with its child nodes. Rebuilt on every read."""
    folder: Any
    children: list["FolderTreeNode"] = field(default_factory=list)


def _collation_key(name: str) -> str:
    """Accent- and case-insensitive form of a name, so "Émile" sorts with "e"."""
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def _name_key(node: FolderTreeNode) -> tuple[str, str, str, str]:
    name = node.folder.name or ""
    return (_collation_key(name), name.casefold(), name, str(node.folder.id))


def _sort_by_name(nodes: list[FolderTreeNode]) -> None:
    nodes.sort(key=_name_key)
    for node in nodes:
        if node.children:
            _sort_by_name(node.children)


def _reachable_ids(roots: list[FolderTreeNode]) -> set:
    seen = set()
    stack = list(roots)
    while stack:
        node = stack.pop()
        if node.folder.id in seen:
            continue
        seen.add(node.folder.id)
        stack.extend(node.children)
    return seen


def build_folder_tree(folders: Iterable[Any]) -> list[FolderTreeNode]:
    """
    Build a nested tree from a flat list of folders of a single owner.

    Any object exposing ``id``, ``name`` and ``parent_id`` works. A folder
    whose parent is not in the input is kept as a root node, and so is one
    member of any parent cycle in corrupt data, so no folder is ever dropped.

    Args:
        folders: Flat list of folders, in any order.

    Returns:
        Root nodes, with siblings sorted by name (case-insensitive) at every level.
    """
    folders = list(folders)
    nodes: dict = {}
    for folder in folders:
        nodes.setdefault(folder.id, FolderTreeNode(folder=folder))

    roots: list[FolderTreeNode] = []
    parent_of: dict = {}
    for folder in folders:
        node = nodes[folder.id]
        if node.folder is not folder:
            continue
        parent_id = folder.parent_id or None
        parent = nodes.get(parent_id) if parent_id is not None else None
        if parent_id is not None and (parent is None or parent is node):
            logger.warning(
                "Folder %s references missing parent %s; showing it at root",
                folder.id,
                parent_id,
            )
            parent = None
        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)
            parent_of[folder.id] = parent

    reachable = _reachable_ids(roots)
    for folder in folders:
        if folder.id in reachable:
            continue
        logger.warning("Folder %s is part of a parent cycle; showing it at root", folder.id)
        node = nodes[folder.id]
        parent_of[folder.id].children.remove(node)
        roots.append(node)
        reachable |= _reachable_ids([node])

    _sort_by_name(roots)
    return roots


def flatten_folder_tree_for_select(
    tree: list[FolderTreeNode],
    depth: int = 0,
    max_depth: int = MAX_FOLDER_DEPTH,
) -> list[dict]:
    """
    Flatten a tree into ``{id, name, depth}`` entries usable as parents.

    Only folders at depth <= max_depth - 2 are listed, so that a new child
    placed under any of them stays within ``max_depth``. With the default
    of 2 that means root folders only.
    """
    result = []
    max_parent_depth = max_depth - 2
    for node in tree:
        if depth <= max_parent_depth:
            result.append({"id": node.folder.id, "name": node.folder.name, "depth": depth})
        if node.children and depth + 1 < max_depth:
            result.extend(flatten_folder_tree_for_select(node.children, depth + 1, max_depth))
    return result


def folders_in_tree_order(folders: Iterable[Any]) -> list[Any]:
    """Return the folders depth-first in the order the tree displays them."""
    result = []

    def _walk(nodes: list[FolderTreeNode]) -> None:
        for node in nodes:
            result.append(node.folder)
            _walk(node.children)

    _walk(build_folder_tree(folders))
    return result


def find_node(tree: list[FolderTreeNode], folder_id: str) -> Optional[FolderTreeNode]:
    """Find the node of ``folder_id`` at any level of the tree."""
    for node in tree:
        if node.folder.id == folder_id:
            return node
        found = find_node(node.children, folder_id)
        if found is not None:
            return found
    return None


def folder_and_descendant_ids(tree: list[FolderTreeNode], folder_id: str) -> list[str]:
    """
    Collect ``folder_id`` followed by all of its descendant ids.

    An id that is not in the tree yields just ``[folder_id]``.
    """
    node = find_node(tree, folder_id)
    ids = [folder_id]
    if node is None:
        return ids

    def _collect(nodes: list[FolderTreeNode]) -> None:
        for child in nodes:
            ids.append(child.folder.id)
            _collect(child.children)

    _collect(node.children)
    return ids


def tree_height(tree: list[FolderTreeNode]) -> int:
    """Number of levels in the tree (0 for an empty tree)."""
    if not tree:
        return 0
    return 1 + max(tree_height(node.children) for node in tree)
