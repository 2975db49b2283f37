"""
Admin routes for the message moderation queue and audit trail.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Literal, Optional

from ..auth import get_admin_user
from ..config import get_settings
from ..database import get_db
from ..messaging import MessageStore
from ..models.activity import Activity
from ..models.user import User
from ..responses import paginated
from ..schemas.message import MessageListResponse

settings = get_settings()

router = APIRouter(prefix="/api/admin", tags=["admin"])


def activity_to_dict(activity: Activity) -> dict:
    """Convert an Activity model to a dictionary response."""
    return {
        "id": activity.id,
        "adminId": activity.user_id,
        "action": activity.action,
        "entityType": activity.entity_type,
        "entityId": activity.entity_id,
        "metadata": activity.extra_data,
        "timestamp": activity.created_at.isoformat(),
    }


@router.get("/messages/pending", response_model=MessageListResponse)
def get_pending_messages(
    flagged_only: bool = False,
    sort_by: Literal["created_at", "tone_score"] = "created_at",
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=settings.max_page_size),
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    """Messages awaiting review, optionally only flagged ones, newest or highest tone score first."""
    items, total = MessageStore(db).find_pending(flagged_only, sort_by, page, limit)
    return paginated(items, total, page, limit)


@router.get("/messages/{message_id}/activity", response_model=List[dict])
def get_message_activity(
    message_id: str,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    """Moderation decisions recorded for a message."""
    activities = db.query(Activity).filter(
        Activity.entity_type == "message",
        Activity.entity_id == message_id,
    ).order_by(Activity.created_at.desc()).all()
    return [activity_to_dict(a) for a in activities]


@router.get("/activity", response_model=List[dict])
def get_activity(
    action: Optional[str] = None,
    limit: int = Query(default=20, le=100),
    offset: int = 0,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    """Moderation audit log with optional action filter and pagination."""
    query = db.query(Activity)
    if action:
        query = query.filter(Activity.action == action)
    activities = query.order_by(Activity.created_at.desc()).offset(offset).limit(limit).all()
    return [activity_to_dict(a) for a in activities]
