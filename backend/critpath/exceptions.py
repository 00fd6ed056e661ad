"""
Structured exceptions and error responses for Critpath.

Provides consistent error handling across the API with:
- Custom exception classes
- Structured error response format
- FastAPI exception handlers
"""

from typing import Any, Dict, Optional, List
from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from critpath.logging_config import get_logger

logger = get_logger("critpath.error")


# =============================================================================
# Error Response Schema
# =============================================================================

class ErrorDetail(BaseModel):
    """Detail of a single error."""
    loc: Optional[List[str]] = None  # Location of error (e.g., ["body", "dependency_ids"])
    msg: str
    type: str


class ErrorResponse(BaseModel):
    """Structured error response format."""
    error: str  # Error code (e.g., "not_found", "cycle_detected")
    message: str
    details: Optional[List[ErrorDetail]] = None


# =============================================================================
# Custom Exceptions
# =============================================================================

class CritpathException(Exception):
    """Base exception for all Critpath errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "internal_error",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class NotFoundError(CritpathException):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(
            message=f"{resource} with ID {resource_id} not found",
            error_code="not_found",
            status_code=status.HTTP_404_NOT_FOUND,
        )
        self.resource = resource
        self.resource_id = resource_id


class CycleDetectedError(CritpathException):
    """Adding a dependency would create a cycle."""

    def __init__(self, task_id: int, dependency_id: int):
        super().__init__(
            message="Adding this dependency would create a cycle in the task graph",
            error_code="cycle_detected",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=[{
                "loc": ["body", "dependency_ids"],
                "msg": f"Task {task_id} depending on task {dependency_id} would create a cycle",
                "type": "cycle_error",
            }],
        )
        self.task_id = task_id
        self.dependency_id = dependency_id


class DuplicateDependencyError(CritpathException):
    """Dependency already exists."""

    def __init__(self, predecessor_id: int, successor_id: int):
        super().__init__(
            message="This dependency already exists",
            error_code="duplicate_dependency",
            status_code=status.HTTP_409_CONFLICT,
        )
        self.predecessor_id = predecessor_id
        self.successor_id = successor_id


class SelfDependencyError(CritpathException):
    """Task cannot depend on itself."""

    def __init__(self, task_id: int):
        super().__init__(
            message="A task cannot depend on itself",
            error_code="self_dependency",
            status_code=status.HTTP_400_BAD_REQUEST,
        )
        self.task_id = task_id


class ValidationError(CritpathException):
    """Request validation error."""

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(
            message=message,
            error_code="validation_error",
            # Literal: the Starlette constant's name changed between releases
            status_code=422,
            details=details,
        )


class ImageLookupError(CritpathException):
    """The external image search failed or is not configured."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="image_lookup_failed",
            status_code=status.HTTP_502_BAD_GATEWAY,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def critpath_exception_handler(request: Request, exc: CritpathException) -> JSONResponse:
    """Handle CritpathException and return structured response."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.error_code,
            "message": exc.message,
            "details": exc.details,
        },
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
            "details": None,
        },
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(CritpathException, critpath_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
