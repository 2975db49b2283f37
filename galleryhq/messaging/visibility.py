"""
Per-participant visibility of messages.

Sender and recipient each own one hide flag. A participant's lists are
filtered only on their own flag, so hiding a message never changes what the
other participant sees. Rows are erased only once both flags are set, and
only through ``force_erase`` (see RetentionSweeper).
"""
from typing import List, Tuple

from sqlalchemy import and_

from ..logging_config import messaging_logger
from ..models.message import Message, STATUS_APPROVED
from .errors import Forbidden, InvalidArgument
from .store import MessageStore

FOLDER_INBOX = "inbox"
FOLDER_SENT = "sent"


class VisibilityManager:

    def __init__(self, store: MessageStore):
        self.store = store

    def hide(self, message_id: str, caller_id: str) -> bool:
        """
        Hide a message from the caller's own view.

        Returns True when the caller's flag changed, False when it was already
        set. Raises NotFound for unknown ids and Forbidden for non-participants.
        """
        message = self.store.get(message_id)

        if caller_id == message.sender_id:
            flag = Message.hidden_by_sender
        elif caller_id == message.recipient_id:
            flag = Message.hidden_by_recipient
        else:
            raise Forbidden("Only the sender or recipient can delete a message")

        changed = self.store.conditional_update(message_id, {flag: True}, flag.is_(False))
        if changed:
            messaging_logger.info(
                "Message hidden",
                message_id=message_id,
                by=flag.key,
            )
        return bool(changed)

    def visible_filter(self, viewer_id: str, folder: str = FOLDER_INBOX):
        """Predicate a listing query must apply for ``viewer_id`` looking at ``folder``."""
        if folder == FOLDER_INBOX:
            return and_(
                Message.recipient_id == viewer_id,
                Message.moderation_status == STATUS_APPROVED,
                Message.hidden_by_recipient.is_(False),
            )
        if folder == FOLDER_SENT:
            return and_(
                Message.sender_id == viewer_id,
                Message.hidden_by_sender.is_(False),
            )
        raise InvalidArgument("Folder must be inbox or sent", {"folder": folder})

    def can_view(self, message: Message, viewer_id: str) -> bool:
        """Single-row form of ``visible_filter`` over both folders."""
        if viewer_id == message.sender_id and not message.hidden_by_sender:
            return True
        if viewer_id == message.recipient_id:
            return message.is_approved and not message.hidden_by_recipient
        return False

    def list_visible(
        self,
        viewer_id: str,
        folder: str = FOLDER_INBOX,
        page: int = 1,
        page_size: int = 20,
    ) -> Tuple[List[Message], int]:
        return self.store.find_visible(self.visible_filter(viewer_id, folder), page, page_size)

    def force_erase(self, message_id: str) -> int:
        """
        Permanently delete a message regardless of its flags.

        Only the retention sweeper calls this, after it has observed both hide
        flags set. Erasing an id that is already gone returns 0.
        """
        return self.store.erase(message_id)
