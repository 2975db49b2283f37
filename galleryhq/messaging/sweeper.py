"""
Retention sweep: reclaim messages that both participants have hidden.
"""
from ..logging_config import timed, worker_logger
from .store import MessageStore
from .visibility import VisibilityManager


class RetentionSweeper:
    """
    Erase every message with both hide flags set.

    Hide flags never go back to false, so a row observed as doubly hidden
    stays eligible until it is erased. Another sweeper erasing the same row
    first is harmless: ``force_erase`` on a missing id returns 0.
    """

    def __init__(self, store: MessageStore, batch_size: int = 500):
        self.store = store
        self.visibility = VisibilityManager(store)
        self.batch_size = batch_size

    @timed(worker_logger)
    def sweep(self) -> int:
        erased = 0
        while True:
            batch = self.store.find_erasable(self.batch_size)
            if not batch:
                break

            batch_erased = 0
            for message_id in batch:
                batch_erased += self.visibility.force_erase(message_id)
            erased += batch_erased

            # Everything in this batch was already gone; a concurrent sweeper owns the rest
            if batch_erased == 0 or len(batch) < self.batch_size:
                break

        if erased:
            worker_logger.info("Retention sweep erased messages", erased=erased)
        else:
            worker_logger.debug("Retention sweep found nothing to erase")
        return erased
