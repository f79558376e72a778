"""
Folder selection for filtering notes.

A selection is an immutable set of items: either a folder or the
"Uncategorized" bucket of notes without a folder. An empty selection means
no folder filter at all. Selecting a folder implicitly selects all of its
descendants.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from .folder_tree import FolderTreeNode, folder_and_descendant_ids

UNCATEGORIZED_KEY = "uncategorized"
# Accepted on the wire as an alias of "uncategorized"
NULL_KEY = "null"


@dataclass(frozen=True)
class FolderItem:
    folder_id: str


@dataclass(frozen=True)
class UncategorizedItem:
    pass


UNCATEGORIZED = UncategorizedItem()

SelectionItem = Union[FolderItem, UncategorizedItem]
Selection = frozenset


def toggle(
    tree: list[FolderTreeNode],
    selection: Selection,
    target: Optional[SelectionItem],
) -> Selection:
    """
    Return a new selection with ``target`` toggled.

    - ``None`` clears the selection ("show all").
    - ``UNCATEGORIZED`` toggles its own membership.
    - A folder toggles itself together with its descendants: if any of them
      is selected they are all removed, otherwise they are all added.
    """
    if target is None:
        return frozenset()
    if isinstance(target, UncategorizedItem):
        return selection ^ {UNCATEGORIZED}

    subtree = {FolderItem(folder_id) for folder_id in folder_and_descendant_ids(tree, target.folder_id)}
    if selection & subtree:
        return frozenset(selection - subtree)
    return frozenset(selection | subtree)


def resolve_query_ids(selection: Selection) -> Optional[set[Optional[str]]]:
    """
    Turn a selection into the folder constraint of a notes query.

    ``None`` in the result stands for notes without a folder. An empty
    selection resolves to ``None``, meaning no constraint.
    """
    if not selection:
        return None
    return {
        None if isinstance(item, UncategorizedItem) else item.folder_id
        for item in selection
    }


def parse_item(raw: Optional[str]) -> Optional[SelectionItem]:
    """Parse a wire value; empty means "show all" and yields None."""
    value = (raw or "").strip()
    if not value:
        return None
    if value.lower() in (UNCATEGORIZED_KEY, NULL_KEY):
        return UNCATEGORIZED
    return FolderItem(value)


def parse_selection(values: Iterable[str]) -> Selection:
    items = (parse_item(value) for value in values)
    return frozenset(item for item in items if item is not None)


def parse_folder_ids_param(raw: Optional[str]) -> Selection:
    """Parse a comma separated ``folder_ids`` query parameter."""
    if not raw:
        return frozenset()
    return parse_selection(raw.split(","))


def selection_to_keys(selection: Selection) -> list[str]:
    """Serialize a selection; "uncategorized" first, then folder ids sorted."""
    keys = sorted(item.folder_id for item in selection if isinstance(item, FolderItem))
    if UNCATEGORIZED in selection:
        keys.insert(0, UNCATEGORIZED_KEY)
    return keys
