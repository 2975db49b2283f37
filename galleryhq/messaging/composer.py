"""
Message creation. New messages always start at ``pending_review``.
"""
from typing import Optional

from ..config import get_settings
from ..logging_config import messaging_logger
from ..models.message import CONTEXT_TYPES, Message, STATUS_PENDING_REVIEW
from ..models.user import User
from .errors import InvalidArgument
from .store import MessageStore


def send_message(
    store: MessageStore,
    sender_id: str,
    recipient_id: str,
    body: str,
    subject: Optional[str] = None,
    context_type: Optional[str] = None,
    context_id: Optional[str] = None,
) -> Message:
    """Validate and store a new direct message."""
    settings = get_settings()

    body_text = (body or "").strip()
    if not body_text:
        raise InvalidArgument("Message body cannot be empty")
    if len(body_text) > settings.message_body_max_length:
        raise InvalidArgument(
            f"Message body exceeds maximum length of {settings.message_body_max_length} characters"
        )

    if subject and len(subject) > settings.subject_max_length:
        raise InvalidArgument(
            f"Subject exceeds maximum length of {settings.subject_max_length} characters"
        )

    if recipient_id == sender_id:
        raise InvalidArgument("Cannot send message to yourself")

    recipient = store.db.query(User).filter(
        User.id == recipient_id,
        User.is_active == True,
    ).first()
    if not recipient:
        raise InvalidArgument("Recipient not found or is inactive")

    if context_type and context_type not in CONTEXT_TYPES:
        raise InvalidArgument("Invalid context type", {"allowed": list(CONTEXT_TYPES)})

    message = store.create(
        sender_id=sender_id,
        recipient_id=recipient_id,
        context_type=context_type or None,
        context_id=context_id or None,
        subject=subject or None,
        body=body_text,
        moderation_status=STATUS_PENDING_REVIEW,
    )
    messaging_logger.info(
        "Message queued for review",
        message_id=message.id,
        sender_id=sender_id,
        recipient_id=recipient_id,
    )
    return message
