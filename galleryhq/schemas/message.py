from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import List, Literal, Optional


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageCreate(CamelModel):
    recipient_id: str
    body: str
    subject: Optional[str] = None
    context_type: Optional[str] = None
    context_id: Optional[str] = None


class UserSummary(CamelModel):
    id: str
    username: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None


class MessageResponse(CamelModel):
    # Hide flags are per-viewer state and are never exposed
    id: str
    sender_id: str
    recipient_id: str
    context_type: Optional[str] = None
    context_id: Optional[str] = None
    subject: Optional[str] = None
    body: str
    moderation_status: str
    tone_score: Optional[float] = None
    flagged_reason: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    read_at: Optional[datetime] = None
    created_at: datetime
    sender: Optional[UserSummary] = None
    recipient: Optional[UserSummary] = None


class Pagination(CamelModel):
    page: int
    page_size: int
    total: int
    total_pages: int


class MessageListResponse(CamelModel):
    data: List[MessageResponse]
    pagination: Pagination


class RejectRequest(CamelModel):
    reason: Optional[str] = None


class BulkIdsRequest(CamelModel):
    message_ids: List[str]


class DeleteRequest(CamelModel):
    strategy: Literal["soft"] = "soft"


class BulkDeleteRequest(BulkIdsRequest):
    strategy: Literal["soft"] = "soft"


class BulkReadResponse(CamelModel):
    updated: int


class BulkDeleteResponse(CamelModel):
    deleted: int


class UnreadCountResponse(CamelModel):
    unread_count: int
