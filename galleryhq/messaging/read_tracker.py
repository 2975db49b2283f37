"""
Read tracking for message recipients.
"""
from datetime import datetime, timezone

from ..logging_config import messaging_logger
from ..models.message import Message, STATUS_APPROVED
from .errors import Forbidden, NotFound
from .store import MessageStore


class ReadTracker:
    """Marks approved messages read for their recipient. Idempotent."""

    def __init__(self, store: MessageStore):
        self.store = store

    def mark_read(self, message_id: str, caller_id: str) -> Message:
        message = self._check(message_id, caller_id)
        if message.read_at is None:
            self._set_read(message_id)
            return self.store.get(message_id)
        return message

    def try_mark_read(self, message_id: str, caller_id: str) -> bool:
        """Same checks as ``mark_read``; returns True only when ``read_at`` was set by this call."""
        message = self._check(message_id, caller_id)
        if message.read_at is not None:
            return False
        return self._set_read(message_id)

    def unread_count(self, user_id: str) -> int:
        return self.store.count(
            Message.recipient_id == user_id,
            Message.read_at.is_(None),
            Message.moderation_status == STATUS_APPROVED,
            Message.hidden_by_recipient.is_(False),
        )

    def _check(self, message_id: str, caller_id: str) -> Message:
        message = self.store.get(message_id)
        if message.recipient_id != caller_id:
            raise Forbidden("Only the recipient can mark a message as read")
        # Not yet delivered to the recipient's inbox
        if message.moderation_status != STATUS_APPROVED:
            raise NotFound("Message", message_id)
        return message

    def _set_read(self, message_id: str) -> bool:
        # Guarded on read_at IS NULL so a concurrent reader cannot move the timestamp
        changed = self.store.conditional_update(
            message_id,
            {Message.read_at: datetime.now(timezone.utc)},
            Message.read_at.is_(None),
            Message.moderation_status == STATUS_APPROVED,
        )
        if changed:
            messaging_logger.debug("Message read", message_id=message_id)
        return bool(changed)
