"""
Migration: Add the sibling name unique index to the folders table.

Databases created before the index existed get it added at startup. If the
existing data already holds duplicate sibling names the index cannot be
built; the service-level check still rejects new duplicates in that case.
"""

import logging

from sqlalchemy import inspect, text
from sqlalchemy.exc import IntegrityError, OperationalError

from note_storage.database import engine
from note_storage.models.folder import Folder, SIBLING_NAME_INDEX

logger = logging.getLogger(__name__)


def index_exists(bind, name: str = SIBLING_NAME_INDEX) -> bool:
    """Whether the named index exists on the folders table."""
    if bind.dialect.name == "sqlite":
        # SQLite reflection skips expression-based indexes
        with bind.connect() as conn:
            row = conn.execute(
                text("SELECT 1 FROM sqlite_master WHERE type = 'index' AND name = :name"),
                {"name": name},
            ).first()
        return row is not None
    return name in {index["name"] for index in inspect(bind).get_indexes("folders")}


def migrate(bind=None):
    """Create the sibling name index on the folders table if it doesn't exist."""
    bind = bind if bind is not None else engine
    if "folders" not in inspect(bind).get_table_names():
        logger.info("Migration skipped: folders table does not exist yet.")
        return

    if index_exists(bind):
        logger.info("Migration skipped: %s already exists on folders table.", SIBLING_NAME_INDEX)
        return

    index = next(ix for ix in Folder.__table__.indexes if ix.name == SIBLING_NAME_INDEX)
    try:
        index.create(bind=bind)
    except (IntegrityError, OperationalError) as exc:
        logger.error("Migration failed: could not create %s: %s", SIBLING_NAME_INDEX, exc.orig)
        return
    logger.info("Migration complete: Added %s to folders table.", SIBLING_NAME_INDEX)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    migrate()
