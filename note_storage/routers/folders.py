"""
Folder management API routes.

Provides listing, tree, create, rename/move and delete operations for the
requesting user's folders, plus the stateless selection toggle used by the
notes filter.
"""

from fastapi import APIRouter, Depends, Query, status

from ..config import settings
from ..dependencies import get_folder_repository
from ..schemas.folder import (
    FolderCreate,
    FolderUpdate,
    FolderResponse,
    FolderTreeNode,
    ParentOption,
    FolderDeleted,
)
from ..schemas.selection import SelectionToggleRequest, SelectionResponse
from ..services import folder_operations, selection
from ..services.folder_repository import FolderRepository
from ..services.folder_tree import build_folder_tree, flatten_folder_tree_for_select


router = APIRouter(prefix="/api/folders", tags=["folders"])


@router.get("", response_model=list[FolderResponse])
def list_folders(
    search: str | None = Query(default=None),
    repo: FolderRepository = Depends(get_folder_repository),
):
    """List folders in persisted order, optionally filtered by a name substring."""
    return repo.list_all(search)


@router.get("/tree", response_model=list[FolderTreeNode])
def get_folder_tree(repo: FolderRepository = Depends(get_folder_repository)):
    """Get the folder tree with siblings sorted by name at every level."""
    tree = build_folder_tree(repo.list_all())
    return [FolderTreeNode.model_validate(node) for node in tree]


@router.get("/parent-options", response_model=list[ParentOption])
def get_parent_options(repo: FolderRepository = Depends(get_folder_repository)):
    """Folders that may receive a new subfolder without exceeding the depth limit."""
    tree = build_folder_tree(repo.list_all())
    return flatten_folder_tree_for_select(tree, max_depth=settings.max_folder_depth)


@router.post("/selection/toggle", response_model=SelectionResponse)
def toggle_selection(
    toggle_data: SelectionToggleRequest,
    repo: FolderRepository = Depends(get_folder_repository),
):
    """Toggle a folder (with its descendants) or "uncategorized" in a selection."""
    tree = build_folder_tree(repo.list_all())
    current = selection.parse_selection(toggle_data.selected)
    updated = selection.toggle(tree, current, selection.parse_item(toggle_data.target))
    query_ids = selection.resolve_query_ids(updated)
    return SelectionResponse(
        selected=selection.selection_to_keys(updated),
        query_folder_ids=None if query_ids is None else sorted(
            query_ids, key=lambda folder_id: (folder_id is not None, folder_id or "")
        ),
    )


@router.get("/{folder_id}", response_model=FolderResponse)
def get_folder(folder_id: str, repo: FolderRepository = Depends(get_folder_repository)):
    """Get a single folder."""
    return folder_operations.get_folder(repo, folder_id)


@router.post("", response_model=FolderResponse, status_code=status.HTTP_201_CREATED)
def create_folder(
    folder_data: FolderCreate,
    repo: FolderRepository = Depends(get_folder_repository),
):
    """Create a new folder at the root or under an existing root folder."""
    return folder_operations.create_folder(repo, folder_data.name, folder_data.parent_id)


@router.put("/{folder_id}", response_model=FolderResponse)
def update_folder(
    folder_id: str,
    folder_data: FolderUpdate,
    repo: FolderRepository = Depends(get_folder_repository),
):
    """Rename and/or move a folder."""
    update_data = folder_data.model_dump(exclude_unset=True)
    return folder_operations.update_folder(
        repo,
        folder_id,
        name=update_data.get("name"),
        parent_id=update_data.get("parent_id", folder_operations.UNSET),
    )


@router.delete("/{folder_id}", response_model=FolderDeleted)
def delete_folder(folder_id: str, repo: FolderRepository = Depends(get_folder_repository)):
    """Delete a folder; subfolders move up one level and notes become uncategorized."""
    folder_operations.delete_folder(repo, folder_id)
    return FolderDeleted()
