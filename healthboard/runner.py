from __future__ import annotations

import logging
import threading
import time
from typing import Sequence

from healthboard.checks.batch import check_all
from healthboard.checks.results import HealthRecord
from healthboard.config import CHECK_INTERVAL_S
from healthboard.models import Endpoint
from healthboard.state import ResultCache

logger = logging.getLogger(__name__)


def run_once(
    cache: ResultCache,
    endpoints: Sequence[Endpoint],
    timeout_s: float | None = None,
) -> list[HealthRecord]:
    records = check_all(endpoints, timeout_s=timeout_s)
    cache.set(records)
    logger.info("Health check finished: %s", [r.healthy for r in records])
    return records


class BackgroundScheduler:
    """Runs a batch check now and then every ``interval_s`` seconds on one daemon thread."""

    def __init__(
        self,
        cache: ResultCache,
        endpoints: Sequence[Endpoint],
        interval_s: float = CHECK_INTERVAL_S,
        timeout_s: float | None = None,
    ) -> None:
        self.cache = cache
        self.endpoints = list(endpoints)
        self.interval_s = interval_s
        self.timeout_s = timeout_s
        self._stop = threading.Event()
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        """Start the timer thread. Returns False if it is already running."""
        with self._lock:
            if self.running:
                return False
            self._stop.clear()
            self._thread = threading.Thread(
                target=self._loop, name="healthboard-scheduler", daemon=True
            )
            self._thread.start()
        logger.info("Background health check scheduled every %ss", self.interval_s)
        return True

    def stop(self, timeout: float | None = None) -> None:
        with self._lock:
            thread = self._thread
            self._stop.set()
        if thread is not None:
            thread.join(timeout)
        with self._lock:
            if self._thread is thread:
                self._thread = None

    def tick(self) -> None:
        logger.info("Running background health check...")
        try:
            run_once(self.cache, self.endpoints, timeout_s=self.timeout_s)
        except Exception:
            # A broken tick must not end the schedule.
            logger.exception("Background health check failed")

    def _loop(self) -> None:
        while not self._stop.is_set():
            start = time.perf_counter()
            self.tick()
            elapsed = time.perf_counter() - start
            self._stop.wait(max(0.0, self.interval_s - elapsed))
