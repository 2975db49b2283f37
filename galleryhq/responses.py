"""
GalleryHQ API Response Utilities
Standardized pagination envelope and error handling
"""
from fastapi import Request
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from typing import Any, Dict, List
from datetime import datetime, timezone

from .logging_config import api_logger
from .messaging.errors import MessagingError


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


# ============================================================
# SUCCESS RESPONSES
# ============================================================

def paginated(items: List, total: int, page: int = 1, page_size: int = 20) -> Dict:
    """Paginated list response"""
    return {
        "data": items,
        "pagination": {
            "page": page,
            "page_size": page_size,
            "total": total,
            "total_pages": (total + page_size - 1) // page_size,
        },
    }


# ============================================================
# ERROR RESPONSES
# ============================================================

def error_body(error: str, error_code: str, details: Any = None) -> Dict:
    return {
        "ok": False,
        "error": error,
        "error_code": error_code,
        "details": details,
        "timestamp": _timestamp(),
    }


# ============================================================
# EXCEPTION HANDLER
# ============================================================

async def api_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for API errors"""

    if isinstance(exc, MessagingError):
        api_logger.warning(
            f"API Error: {exc.message}",
            status_code=exc.status_code,
            error_code=exc.error_code,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.message, exc.error_code, exc.details),
        )

    # Malformed payloads are client errors, reported as 400
    if isinstance(exc, RequestValidationError):
        api_logger.warning(
            "Validation Error",
            status_code=400,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=400,
            content=error_body(
                "Request validation failed",
                "VALIDATION_ERROR",
                jsonable_encoder(exc.errors()),
            ),
        )

    if isinstance(exc, HTTPException):
        api_logger.warning(
            f"HTTP Error: {exc.detail}",
            status_code=exc.status_code,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.detail, f"HTTP_{exc.status_code}"),
            headers=getattr(exc, "headers", None),
        )

    api_logger.error(
        f"Unexpected error: {exc}",
        error=exc,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=500,
        content=error_body("An unexpected error occurred", "INTERNAL_ERROR"),
    )
