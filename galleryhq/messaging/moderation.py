"""
Admin moderation of messages.

A message leaves ``pending_review`` exactly once. The transition is a single
conditional UPDATE keyed on the current status, so when two admins decide the
same message concurrently only one statement matches and the other caller
gets a Conflict. The winning UPDATE and its Activity row commit as one
transaction.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from ..logging_config import messaging_logger
from ..models.activity import Activity
from ..models.message import Message, STATUS_APPROVED, STATUS_PENDING_REVIEW, STATUS_REJECTED
from .errors import Conflict
from .store import MessageStore


class ModerationGate:
    """Approve or reject pending messages. Callers must already be verified admins."""

    def __init__(self, store: MessageStore):
        self.store = store

    def approve(self, message_id: str, admin_id: str) -> Message:
        return self._decide(message_id, admin_id, STATUS_APPROVED)

    def reject(self, message_id: str, admin_id: str, reason: Optional[str] = None) -> Message:
        return self._decide(message_id, admin_id, STATUS_REJECTED, reason)

    def _decide(self, message_id: str, admin_id: str, status: str, reason: Optional[str] = None) -> Message:
        now = datetime.now(timezone.utc)
        changed = self.store.conditional_update(
            message_id,
            {
                Message.moderation_status: status,
                Message.reviewed_by: admin_id,
                Message.reviewed_at: now,
            },
            Message.moderation_status == STATUS_PENDING_REVIEW,
            commit=False,
        )

        if not changed:
            self.store.db.rollback()
            # Raises NotFound when the row does not exist
            current = self.store.get(message_id)
            messaging_logger.warning(
                "Moderation conflict",
                message_id=message_id,
                admin_id=admin_id,
                attempted=status,
                current=current.moderation_status,
            )
            raise Conflict(
                f"Message already {current.moderation_status}",
                {"id": message_id, "moderation_status": current.moderation_status},
            )

        try:
            self._record(message_id, admin_id, status, reason, now)
            self.store.db.commit()
        except SQLAlchemyError:
            self.store.db.rollback()
            raise

        messaging_logger.info(
            f"Message {status}",
            message_id=message_id,
            admin_id=admin_id,
            reason=reason,
        )
        return self.store.get(message_id)

    def _record(self, message_id: str, admin_id: str, status: str, reason: Optional[str], at: datetime):
        extra = {"previous_status": STATUS_PENDING_REVIEW}
        if reason:
            extra["reason"] = reason

        db = self.store.db
        db.add(Activity(
            user_id=admin_id,
            action=f"message_{status}",
            entity_type="message",
            entity_id=message_id,
            extra_data=extra,
            created_at=at,
        ))
        db.flush()
