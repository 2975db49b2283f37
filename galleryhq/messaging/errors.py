"""
Error taxonomy for the messaging core.

All four kinds are terminal: they are surfaced to the HTTP layer as-is and
never retried internally.
"""
from typing import Any, Dict, Optional


class MessagingError(Exception):
    """Base class for messaging failures rendered as API errors."""

    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidArgument(MessagingError):
    status_code = 400
    error_code = "BAD_REQUEST"


class Forbidden(MessagingError):
    status_code = 403
    error_code = "FORBIDDEN"


class NotFound(MessagingError):
    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource: str = "Message", id: Optional[str] = None):
        message = f"{resource} not found" if not id else f"{resource} '{id}' not found"
        super().__init__(message, {"id": id} if id else None)


class Conflict(MessagingError):
    status_code = 409
    error_code = "CONFLICT"
