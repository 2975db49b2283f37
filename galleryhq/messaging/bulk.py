"""
Batch variants of read and hide.

A batch is N independent single-item calls, not one transaction: ids the
caller may not act on are skipped, and the result counts only rows that
actually changed.
"""
from typing import Callable, List

from ..config import get_settings
from ..logging_config import messaging_logger
from .errors import Forbidden, InvalidArgument, NotFound
from .read_tracker import ReadTracker
from .visibility import VisibilityManager


class BulkOperationGuard:

    def __init__(self, reads: ReadTracker, visibility: VisibilityManager, max_ids: int = None):
        self.reads = reads
        self.visibility = visibility
        self.max_ids = max_ids or get_settings().bulk_max_ids

    def mark_read_many(self, message_ids: List[str], caller_id: str) -> int:
        return self._apply("read", self.reads.try_mark_read, message_ids, caller_id)

    def hide_many(self, message_ids: List[str], caller_id: str) -> int:
        return self._apply("hide", self.visibility.hide, message_ids, caller_id)

    def validate(self, message_ids: List[str]):
        """Reject the whole batch before any row is touched."""
        if not message_ids:
            raise InvalidArgument("messageIds must contain at least one id")
        if len(message_ids) > self.max_ids:
            raise InvalidArgument(
                f"messageIds cannot contain more than {self.max_ids} ids",
                {"count": len(message_ids), "max": self.max_ids},
            )

    def _apply(self, operation: str, func: Callable[[str, str], bool], message_ids: List[str], caller_id: str) -> int:
        self.validate(message_ids)

        affected = 0
        skipped = 0
        for message_id in message_ids:
            try:
                if func(message_id, caller_id):
                    affected += 1
            except (NotFound, Forbidden):
                skipped += 1

        messaging_logger.info(
            f"Bulk {operation} applied",
            caller_id=caller_id,
            requested=len(message_ids),
            affected=affected,
            skipped=skipped,
        )
        return affected
