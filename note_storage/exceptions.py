"""
Exception classes and error handling for the note storage service.

Folder errors are raised by the service layer without any knowledge of HTTP;
the handlers registered here translate them into consistent JSON responses.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class APIException(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str | None = None
    ):
        self.detail = detail
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(detail)


class AuthenticationError(APIException):
    """Raised when a request carries no usable identity."""

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            detail=detail,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="UNAUTHENTICATED"
        )


# Folder hierarchy errors

class FolderError(Exception):
    """Base class for rejected folder mutations."""

    error_code = "FOLDER_ERROR"
    default_detail = "Folder operation rejected"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class InvalidNameError(FolderError):
    error_code = "INVALID_NAME"
    default_detail = "Folder name is required"


class ParentNotFoundError(FolderError):
    error_code = "PARENT_NOT_FOUND"
    default_detail = "Parent folder not found"


class DuplicateNameError(FolderError):
    error_code = "DUPLICATE_NAME"
    default_detail = (
        "A folder with this name already exists in this location. "
        "Please choose a different name."
    )


class CycleDetectedError(FolderError):
    error_code = "CYCLE_DETECTED"
    default_detail = "Cannot move folder inside its own descendant"


class SelfParentError(FolderError):
    error_code = "SELF_PARENT"
    default_detail = "Folder cannot be its own parent"


class DepthExceededError(FolderError):
    error_code = "DEPTH_EXCEEDED"

    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        super().__init__(f"Maximum folder depth of {max_depth} exceeded")


class FolderNotFoundError(FolderError):
    error_code = "FOLDER_NOT_FOUND"

    def __init__(self, folder_id: Any):
        self.folder_id = folder_id
        super().__init__(f"Folder with id {folder_id} not found")


FOLDER_ERROR_STATUS: dict[type[FolderError], int] = {
    FolderNotFoundError: status.HTTP_404_NOT_FOUND,
}


async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Handler for custom API exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code}
    )


async def folder_exception_handler(request: Request, exc: FolderError) -> JSONResponse:
    """Map folder error kinds to HTTP status codes."""
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.error_code)
    status_code = FOLDER_ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.detail, "error_code": exc.error_code}
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    errors = exc.errors()
    error_messages = []
    for error in errors:
        loc = " -> ".join(str(l) for l in error["loc"])
        msg = error["msg"]
        error_messages.append(f"{loc}: {msg}")

    detail = "; ".join(error_messages) if error_messages else "Validation error"

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": detail, "error_code": "VALIDATION_ERROR"}
    )


async def sqlalchemy_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Handler for SQLAlchemy database errors."""
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error occurred", "error_code": "DATABASE_ERROR"}
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(FolderError, folder_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
