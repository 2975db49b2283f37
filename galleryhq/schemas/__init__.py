from .auth import UserCreate, UserLogin, UserResponse, TokenResponse, RefreshRequest
from .message import (
    MessageCreate,
    MessageResponse,
    UserSummary,
    MessageListResponse,
    RejectRequest,
    BulkIdsRequest,
    DeleteRequest,
    BulkDeleteRequest,
    BulkReadResponse,
    BulkDeleteResponse,
    UnreadCountResponse,
)

__all__ = [
    "UserCreate", "UserLogin", "UserResponse", "TokenResponse", "RefreshRequest",
    "MessageCreate", "MessageResponse", "UserSummary", "MessageListResponse", "RejectRequest",
    "BulkIdsRequest", "DeleteRequest", "BulkDeleteRequest",
    "BulkReadResponse", "BulkDeleteResponse", "UnreadCountResponse",
]
