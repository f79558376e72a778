"""
Request identity.

Authentication lives in an upstream identity provider which forwards the
authenticated user as request headers. Everything here trusts those headers.
"""

import logging
from dataclasses import dataclass

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from .database import get_db
from .exceptions import AuthenticationError
from .services.folder_repository import FolderRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    user_id: str
    role: str = "user"


def get_current_identity(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Identity:
    user_id = (x_user_id or "").strip()
    if not user_id:
        logger.info("Rejected request without user identity")
        raise AuthenticationError()
    return Identity(user_id=user_id, role=(x_user_role or "user").strip() or "user")


def get_folder_repository(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> FolderRepository:
    """Folder store bound to the requesting user."""
    return FolderRepository(db, identity.user_id)
