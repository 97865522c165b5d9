"""
Blog API Response Utilities
Standardized response envelope and error mapping
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .logging_config import api_logger
from .storage.errors import (
    BlogStoreError,
    PostNotFoundError,
    PostValidationError,
    SlugConflictError,
    StorageIOError,
)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


# ============================================================
# SUCCESS RESPONSES
# ============================================================

def success(message: str, data: Any = None) -> Dict:
    """Create success envelope"""
    response = {
        "message": message,
        "timestamp": _timestamp(),
    }
    if data is not None:
        response["data"] = data
    return response


def error_body(message: str, error: str) -> Dict:
    """Create error envelope"""
    return {
        "message": message,
        "timestamp": _timestamp(),
        "error": error,
    }


# ============================================================
# ERROR RESPONSES
# ============================================================

class ApiException(HTTPException):
    """HTTP error carrying a short summary plus the underlying error text"""

    def __init__(self, status_code: int, message: str, error: Optional[str] = None):
        self.message = message
        self.error = error or message
        super().__init__(status_code=status_code, detail=message)


def bad_request(message: str, error: str = None):
    raise ApiException(400, message, error)


def not_found(message: str = "Blog not found", error: str = None):
    raise ApiException(404, message, error)


# Store error -> (status, summary)
STORE_ERROR_STATUS = {
    PostValidationError: (400, "Validation failed"),
    PostNotFoundError: (404, "Blog not found"),
    SlugConflictError: (409, "Slug already exists"),
    StorageIOError: (500, "Storage failure"),
}


def status_for(exc: BlogStoreError):
    for error_type, mapping in STORE_ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return mapping
    return 500, "Storage failure"


# ============================================================
# EXCEPTION HANDLERS
# ============================================================

async def store_exception_handler(request: Request, exc: BlogStoreError) -> JSONResponse:
    """Map store errors onto HTTP status codes"""
    status_code, message = status_for(exc)
    if status_code >= 500:
        api_logger.error(
            f"Store error: {exc}",
            error=exc,
            path=request.url.path,
        )
    else:
        api_logger.warning(
            f"Store rejected request: {exc}",
            status_code=status_code,
            path=request.url.path,
        )
    return JSONResponse(status_code=status_code, content=error_body(message, str(exc)))


async def api_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render HTTPExceptions in the standard envelope"""
    if isinstance(exc, ApiException):
        message, error = exc.message, exc.error
    else:
        message, error = str(exc.detail), str(exc.detail)

    api_logger.warning(
        f"HTTP Error: {message}",
        status_code=exc.status_code,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message, error),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are reported as 400 like other validation failures"""
    errors = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body')}: {err.get('msg')}"
        for err in exc.errors()
    )
    api_logger.warning("Invalid request body", path=request.url.path, errors=errors)
    return JSONResponse(status_code=400, content=error_body("Invalid request body", errors))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler for unexpected errors"""
    api_logger.error(
        f"Unexpected error: {exc}",
        error=exc,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=500,
        content=error_body("An unexpected error occurred", "internal error"),
    )


# ============================================================
# VALIDATION HELPERS
# ============================================================

def require(value: Any, field_name: str):
    """Require a non-blank field"""
    if value is None or (isinstance(value, str) and not value.strip()):
        bad_request("Validation failed", f"{field_name.capitalize()} is required")
    return value
