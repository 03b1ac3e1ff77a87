"""
Refresh Queue and Worker

A de-duplicating pending set drained by a single background worker thread.
The worker fetches one country at a time and waits a fixed gap between
requests to respect the provider's rate limit.
"""

import threading
import time
from typing import Any, Callable, Dict, Iterable, Optional, Set

from .config.constants import REFRESH_GAP_SECONDS
from .config.logging_config import get_logger
from .data_shaper import shape_country_data
from .store import utc_now

logger = get_logger(__name__)


class RefreshQueue:
    """
    Pending set plus an idle/draining flag, shared by everything that
    schedules refreshes. At most one worker thread drains it at a time.

    Args:
        store: Country store receiving the upserts
        fetch: Callable returning the raw payload for a canonical name
        shape: Callable turning (name, payload) into a shaped record
        gap_seconds: Pause after every fetch attempt
        sleep: Sleep function used for the gap
    """

    def __init__(
        self,
        store,
        fetch: Callable[[str], Any],
        shape: Callable[[str, Any], Dict] = shape_country_data,
        gap_seconds: float = REFRESH_GAP_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.store = store
        self.fetch = fetch
        self.shape = shape
        self.gap_seconds = gap_seconds
        self.sleep = sleep

        self._pending: Set[str] = set()
        self._draining = False
        self._worker: Optional[threading.Thread] = None
        self._condition = threading.Condition()

    @property
    def is_draining(self) -> bool:
        with self._condition:
            return self._draining

    def pending(self) -> Set[str]:
        """Snapshot of the names waiting to be fetched."""
        with self._condition:
            return set(self._pending)

    def enqueue(self, names: Iterable[str]) -> None:
        """
        Add names to the pending set and make sure a worker is draining it.

        Returns immediately; fetching happens on the worker thread.
        """
        added = {name for name in names or [] if name}
        with self._condition:
            self._pending.update(added)
            pending_size = len(self._pending)
            if not self._draining and self._pending:
                self._draining = True
                self._worker = threading.Thread(
                    target=self._drain, name="covid-refresh-worker", daemon=True
                )
                self._worker.start()
        logger.info(f"Enqueued {len(added)} countries. Pending size: {pending_size}")

    def wait_until_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until the worker has emptied the pending set. False on timeout."""
        with self._condition:
            return self._condition.wait_for(lambda: not self._draining, timeout=timeout)

    def _next_name(self) -> Optional[str]:
        with self._condition:
            if not self._pending:
                self._draining = False
                self._condition.notify_all()
                return None
            return self._pending.pop()

    def _drain(self) -> None:
        logger.info("Refresh worker started")
        try:
            while True:
                name = self._next_name()
                if name is None:
                    break
                logger.info(f"Fetching {name}. Remaining after dequeue: {len(self.pending())}")
                self.refresh_one(name)
                logger.debug(f"Sleeping {self.gap_seconds}s before next fetch...")
                self.sleep(self.gap_seconds)
        except Exception:
            logger.exception("Refresh worker stopped unexpectedly")
            with self._condition:
                self._draining = False
                self._condition.notify_all()
            raise
        logger.info("Refresh worker idle")

    def refresh_one(self, name: str) -> bool:
        """
        Fetch, shape and persist one country.

        Failures are recorded on the country's record instead of raised.

        Returns:
            True if the refresh succeeded
        """
        started_at = time.monotonic()
        try:
            payload = self.fetch(name)
            shaped = self.shape(name, payload)
            self.store.upsert(
                name,
                {
                    "casesTotal": shaped.get("casesTotal"),
                    "deathsTotal": shaped.get("deathsTotal"),
                    "hasData": bool(shaped.get("hasData")),
                    "lastError": None,
                    "raw": payload,
                    "updatedAt": utc_now(),
                },
            )
        except Exception as e:
            elapsed_ms = (time.monotonic() - started_at) * 1000
            message = str(e) or type(e).__name__
            logger.warning(f"Failed {name} in {elapsed_ms:.0f}ms: {message}")
            self._record_failure(name, message)
            return False

        elapsed_ms = (time.monotonic() - started_at) * 1000
        logger.info(
            f"Updated {name} in {elapsed_ms:.0f}ms: "
            f"cases={shaped.get('casesTotal')} deaths={shaped.get('deathsTotal')}"
        )
        return True

    def _record_failure(self, name: str, message: str) -> None:
        # Last known totals and raw payload stay in place; only the error is recorded
        try:
            self.store.upsert(name, {"lastError": message, "updatedAt": utc_now()})
        except Exception:
            logger.exception(f"Could not record failure for {name}")
