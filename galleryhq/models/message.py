"""
Message model for user-to-user direct messages.

Moderation status, read timestamp and the two per-participant hide flags are
independent columns. Every field except those four groups is immutable after
creation.
"""
import uuid
from sqlalchemy import Column, String, DateTime, Text, Boolean, Float, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from ..database import Base

STATUS_PENDING_REVIEW = "pending_review"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"

MODERATION_STATUSES = (STATUS_PENDING_REVIEW, STATUS_APPROVED, STATUS_REJECTED)

CONTEXT_TYPES = ("artist", "gallery", "collection", "artwork", "general")


class Message(Base):
    __tablename__ = "messages"
    __table_args__ = (
        CheckConstraint(
            "moderation_status IN (" + ", ".join(f"'{s}'" for s in MODERATION_STATUSES) + ")",
            name="ck_messages_moderation_status",
        ),
        Index("idx_messages_recipient", "recipient_id", "created_at"),
        Index("idx_messages_sender", "sender_id", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    sender_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    recipient_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    context_type = Column(String(20), nullable=True)
    context_id = Column(String(36), nullable=True)
    subject = Column(String(200), nullable=True)
    body = Column(Text, nullable=False)
    moderation_status = Column(String(20), default=STATUS_PENDING_REVIEW, nullable=False, index=True)
    tone_score = Column(Float, nullable=True)
    flagged_reason = Column(Text, nullable=True)
    reviewed_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    read_at = Column(DateTime, nullable=True)
    hidden_by_sender = Column(Boolean, default=False, nullable=False)
    hidden_by_recipient = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)

    # Relationships
    sender = relationship("User", foreign_keys=[sender_id])
    recipient = relationship("User", foreign_keys=[recipient_id])

    @property
    def is_approved(self) -> bool:
        return self.moderation_status == STATUS_APPROVED
