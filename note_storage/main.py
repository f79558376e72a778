"""
Note Storage - FastAPI Application Entry Point

Per-user note storage with a two-level folder hierarchy used to organize
and filter uploaded notes.
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .database import init_db
from .exceptions import register_exception_handlers
from .migrations.add_folder_name_index import migrate as migrate_folder_name_index
from .routers import folders, notes

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    init_db()
    migrate_folder_name_index()
    logger.info("Database ready (max folder depth %d)", settings.max_folder_depth)
    yield


app = FastAPI(
    title="Note Storage",
    description="Per-user note storage organized in a two-level folder hierarchy",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/")
async def root():
    """Root endpoint returning API information."""
    return {
        "name": "Note Storage",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


app.include_router(folders.router)
app.include_router(notes.router)
