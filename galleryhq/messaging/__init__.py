"""
Message lifecycle and visibility engine.
"""
from .bulk import BulkOperationGuard
from .composer import send_message
from .errors import Conflict, Forbidden, InvalidArgument, MessagingError, NotFound
from .moderation import ModerationGate
from .read_tracker import ReadTracker
from .store import MessageStore
from .sweeper import RetentionSweeper
from .visibility import FOLDER_INBOX, FOLDER_SENT, VisibilityManager

__all__ = [
    "BulkOperationGuard",
    "Conflict",
    "Forbidden",
    "InvalidArgument",
    "MessagingError",
    "NotFound",
    "ModerationGate",
    "ReadTracker",
    "MessageStore",
    "RetentionSweeper",
    "VisibilityManager",
    "send_message",
    "FOLDER_INBOX",
    "FOLDER_SENT",
]
