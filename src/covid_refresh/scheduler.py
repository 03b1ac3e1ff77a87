"""
Periodic refresh of every country the store has seen.
"""

import threading
from typing import List, Optional

from .config.constants import SCHEDULER_INITIAL_DELAY_SECONDS, SCHEDULER_INTERVAL_SECONDS
from .config.logging_config import get_logger

logger = get_logger(__name__)


class RefreshScheduler:
    """Enqueues all known countries shortly after start and then on a fixed interval."""

    def __init__(self, store, queue, initial_delay: float = SCHEDULER_INITIAL_DELAY_SECONDS):
        self.store = store
        self.queue = queue
        self.initial_delay = initial_delay
        self.interval_seconds: Optional[float] = None

        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, interval_seconds: float = SCHEDULER_INTERVAL_SECONDS) -> bool:
        """
        Start the scheduler thread. A second call while started is a no-op.

        Returns:
            True if this call started the scheduler
        """
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")

        with self._lock:
            if self._thread is not None:
                return False
            self.interval_seconds = interval_seconds
            self._stop.clear()
            self._thread = threading.Thread(
                target=self._run, name="covid-refresh-scheduler", daemon=True
            )
            self._thread.start()

        logger.info(f"Scheduler started. Interval: {interval_seconds}s")
        return True

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the scheduler thread; a later ``start`` begins a new schedule."""
        with self._lock:
            thread, self._thread = self._thread, None
            self._stop.set()
        if thread is not None:
            thread.join(timeout)
            logger.info("Scheduler stopped")

    def refresh_all_known(self) -> List[str]:
        """
        Enqueue every country ever persisted.

        Returns:
            The names handed to the queue (empty when nothing is stored yet)
        """
        names = self.store.distinct_keys()
        if not names:
            logger.debug("No known countries to refresh")
            return []
        logger.info(f"Enqueuing {len(names)} known countries for refresh")
        self.queue.enqueue(names)
        return names

    def _tick(self) -> None:
        try:
            self.refresh_all_known()
        except Exception:
            logger.exception("Scheduled refresh of known countries failed")

    def _run(self) -> None:
        if self._stop.wait(self.initial_delay):
            return
        self._tick()
        while not self._stop.wait(self.interval_seconds):
            self._tick()
