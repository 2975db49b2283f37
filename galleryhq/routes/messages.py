"""
Direct message routes: send, list, read tracking, moderation and deletion.
"""
from fastapi import APIRouter, Body, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session
from typing import Optional

from ..auth import get_admin_user, get_required_user
from ..config import get_settings
from ..database import get_db
from ..limiter import limiter
from ..messaging import (
    BulkOperationGuard,
    FOLDER_INBOX,
    InvalidArgument,
    MessageStore,
    ModerationGate,
    NotFound,
    ReadTracker,
    VisibilityManager,
    send_message,
)
from ..models.user import User
from ..responses import paginated
from ..schemas.message import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    BulkIdsRequest,
    BulkReadResponse,
    DeleteRequest,
    MessageCreate,
    MessageListResponse,
    MessageResponse,
    RejectRequest,
    UnreadCountResponse,
)

settings = get_settings()

router = APIRouter(prefix="/api/messages", tags=["messages"])


def get_store(db: Session = Depends(get_db)) -> MessageStore:
    return MessageStore(db)


def get_bulk_guard(store: MessageStore = Depends(get_store)) -> BulkOperationGuard:
    return BulkOperationGuard(ReadTracker(store), VisibilityManager(store))


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.send_rate_limit)
def create_message(
    request: Request,
    message: MessageCreate,
    store: MessageStore = Depends(get_store),
    current_user: User = Depends(get_required_user),
):
    """Send a message. It stays out of the recipient's inbox until an admin approves it."""
    return send_message(
        store,
        sender_id=current_user.id,
        recipient_id=message.recipient_id,
        body=message.body,
        subject=message.subject,
        context_type=message.context_type,
        context_id=message.context_id,
    )


@router.get("", response_model=MessageListResponse)
def list_messages(
    folder: str = FOLDER_INBOX,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=settings.max_page_size, alias="pageSize"),
    store: MessageStore = Depends(get_store),
    current_user: User = Depends(get_required_user),
):
    """List the current user's inbox or sent folder, newest first."""
    items, total = VisibilityManager(store).list_visible(current_user.id, folder, page, page_size)
    return paginated(items, total, page, page_size)


@router.get("/unread-count", response_model=UnreadCountResponse)
def get_unread_count(
    store: MessageStore = Depends(get_store),
    current_user: User = Depends(get_required_user),
):
    """Count approved, unread messages in the current user's inbox."""
    return {"unread_count": ReadTracker(store).unread_count(current_user.id)}


@router.patch("/read-bulk", response_model=BulkReadResponse)
def mark_read_bulk(
    payload: BulkIdsRequest,
    guard: BulkOperationGuard = Depends(get_bulk_guard),
    current_user: User = Depends(get_required_user),
):
    """Mark several messages read. Ids the caller cannot read are skipped."""
    return {"updated": guard.mark_read_many(payload.message_ids, current_user.id)}


@router.post("/delete-bulk", response_model=BulkDeleteResponse)
def delete_bulk(
    payload: BulkDeleteRequest,
    guard: BulkOperationGuard = Depends(get_bulk_guard),
    current_user: User = Depends(get_required_user),
):
    """Remove several messages from the caller's own view."""
    return {"deleted": guard.hide_many(payload.message_ids, current_user.id)}


@router.get("/{message_id}", response_model=MessageResponse)
def get_message(
    message_id: str,
    store: MessageStore = Depends(get_store),
    current_user: User = Depends(get_required_user),
):
    """Get a single message visible to the current user."""
    message = store.get(message_id, with_participants=True)
    if not VisibilityManager(store).can_view(message, current_user.id):
        raise NotFound("Message", message_id)
    return message


@router.patch("/{message_id}/read", response_model=MessageResponse)
def mark_as_read(
    message_id: str,
    store: MessageStore = Depends(get_store),
    current_user: User = Depends(get_required_user),
):
    """Mark a message as read (recipient only). Repeating the call is a no-op."""
    return ReadTracker(store).mark_read(message_id, current_user.id)


@router.post("/{message_id}/approve", response_model=MessageResponse)
def approve(
    message_id: str,
    store: MessageStore = Depends(get_store),
    admin: User = Depends(get_admin_user),
):
    """Approve a pending message (admin only)."""
    return ModerationGate(store).approve(message_id, admin.id)


@router.post("/{message_id}/reject", response_model=MessageResponse)
def reject(
    message_id: str,
    payload: Optional[RejectRequest] = Body(default=None),
    store: MessageStore = Depends(get_store),
    admin: User = Depends(get_admin_user),
):
    """Reject a pending message (admin only) with an optional reason."""
    reason = payload.reason if payload else None
    if reason is not None and len(reason) > settings.reason_max_length:
        raise InvalidArgument(
            f"Rejection reason must be {settings.reason_max_length} characters or less"
        )
    return ModerationGate(store).reject(message_id, admin.id, reason)


@router.delete("/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_message(
    message_id: str,
    payload: Optional[DeleteRequest] = Body(default=None),
    store: MessageStore = Depends(get_store),
    current_user: User = Depends(get_required_user),
):
    """Remove a message from the caller's own view. The other participant still sees it."""
    # payload only validates the strategy; "soft" is the sole supported value
    VisibilityManager(store).hide(message_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
