"""
Background retention worker.

Runs RetentionSweeper.sweep() on a fixed interval in a daemon thread, with a
fresh database session per pass. Stopping only stops scheduling; a pass in
progress finishes on its own.
"""
import threading
from typing import Optional

from ..config import get_settings
from ..database import SessionLocal
from ..logging_config import worker_logger
from ..messaging.store import MessageStore
from ..messaging.sweeper import RetentionSweeper


def run_sweep(session_factory=SessionLocal, batch_size: Optional[int] = None) -> int:
    """One sweep pass in its own session."""
    settings = get_settings()
    db = session_factory()
    try:
        sweeper = RetentionSweeper(MessageStore(db), batch_size or settings.sweep_batch_size)
        return sweeper.sweep()
    finally:
        db.close()


class RetentionWorker:
    """Periodic sweeper for the API process."""

    def __init__(self, interval_seconds: int, session_factory=SessionLocal):
        self.interval_seconds = interval_seconds
        self.session_factory = session_factory
        self.running = False
        self.passes = 0
        self.last_erased = 0
        self._wakeup = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start_background(self) -> bool:
        """Start sweeping in a background thread (non-blocking for FastAPI)"""
        if self.running:
            return False  # Already running

        self.running = True
        self._wakeup.clear()
        self._thread = threading.Thread(target=self._loop, daemon=True, name="retention-sweeper")
        self._thread.start()

        worker_logger.info("Retention sweeper started", interval_seconds=self.interval_seconds)
        return True

    def stop(self) -> bool:
        if not self.running:
            return False

        self.running = False
        self._wakeup.set()
        worker_logger.info("Retention sweeper stopped", passes=self.passes)
        return True

    def _loop(self):
        while self.running:
            try:
                self.last_erased = run_sweep(self.session_factory)
                self.passes += 1
            except Exception as e:
                # Storage errors are transient here; the next pass retries
                worker_logger.error("Retention sweep failed", error=e)

            self._wakeup.wait(self.interval_seconds)

    def get_status(self) -> dict:
        return {
            "running": self.running,
            "interval_seconds": self.interval_seconds,
            "passes": self.passes,
            "last_erased": self.last_erased,
        }


_retention_worker: Optional[RetentionWorker] = None


def get_retention_worker() -> RetentionWorker:
    """Get or create the global retention worker instance"""
    global _retention_worker
    if _retention_worker is None:
        _retention_worker = RetentionWorker(get_settings().sweep_interval_seconds)
    return _retention_worker
