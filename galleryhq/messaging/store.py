"""
Message persistence.

MessageStore is the single source of truth for a message's state. Every write
is one SQL statement keyed on the message id, so concurrent writers to the
same row are serialized by the database instead of interleaving field writes.
"""
from typing import Any, Dict, List, Tuple

from sqlalchemy import case
from sqlalchemy.orm import Session, joinedload

from ..models.message import Message, STATUS_PENDING_REVIEW
from .errors import NotFound


def _with_participants(query):
    """Eager-load the sender and recipient rows embedded in message responses."""
    return query.options(joinedload(Message.sender), joinedload(Message.recipient))


class MessageStore:
    """Row-level access to the messages table."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, message_id: str, with_participants: bool = False) -> Message:
        query = self.db.query(Message)
        if with_participants:
            query = _with_participants(query)
        message = query.filter(Message.id == message_id).first()
        if not message:
            raise NotFound("Message", message_id)
        return message

    def create(self, **fields) -> Message:
        message = Message(**fields)
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)
        return message

    def conditional_update(self, message_id: str, fields: Dict[str, Any], *guards, commit: bool = True) -> int:
        """
        Apply ``fields`` to one row in a single UPDATE.

        The statement matches ``id = message_id`` plus every guard clause, so a
        check-then-set is atomic. Returns the number of rows changed (0 or 1).
        With ``commit=False`` the caller owns the transaction and must commit
        or roll back.
        """
        rows = (
            self.db.query(Message)
            .filter(Message.id == message_id, *guards)
            .update(fields, synchronize_session=False)
        )
        if commit:
            self.db.commit()
        return rows

    def update_fields(self, message_id: str, fields: Dict[str, Any]) -> Message:
        """Unconditional single-row update; all fields or none."""
        if not self.conditional_update(message_id, fields):
            raise NotFound("Message", message_id)
        return self.get(message_id)

    def count(self, *criteria) -> int:
        return self.db.query(Message).filter(*criteria).count()

    def find_visible(self, visible_filter, page: int = 1, page_size: int = 20) -> Tuple[List[Message], int]:
        """Page through the rows matching a viewer's visibility predicate, newest first."""
        query = self.db.query(Message).filter(visible_filter)
        total = query.count()
        items = (
            _with_participants(query)
            .order_by(Message.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return items, total

    def find_pending(
        self,
        flagged_only: bool = False,
        sort_by: str = "created_at",
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Message], int]:
        """Moderation queue: messages still awaiting an admin decision."""
        query = self.db.query(Message).filter(Message.moderation_status == STATUS_PENDING_REVIEW)
        if flagged_only:
            query = query.filter(Message.flagged_reason.isnot(None))

        total = query.count()

        if sort_by == "tone_score":
            # Unscored messages go last
            order = (
                case((Message.tone_score.is_(None), 1), else_=0),
                Message.tone_score.desc(),
                Message.created_at.desc(),
            )
        else:
            order = (Message.created_at.desc(),)

        items = _with_participants(query).order_by(*order).offset((page - 1) * limit).limit(limit).all()
        return items, total

    def find_erasable(self, limit: int = 500) -> List[str]:
        """Ids of messages both participants have hidden."""
        rows = (
            self.db.query(Message.id)
            .filter(Message.hidden_by_sender.is_(True), Message.hidden_by_recipient.is_(True))
            .order_by(Message.created_at)
            .limit(limit)
            .all()
        )
        return [row[0] for row in rows]

    def erase(self, message_id: str) -> int:
        """Delete one row. Deleting a missing id affects 0 rows and is not an error."""
        rows = (
            self.db.query(Message)
            .filter(Message.id == message_id)
            .delete(synchronize_session="fetch")
        )
        self.db.commit()
        return rows
