from __future__ import annotations

import threading
from typing import Iterable

from healthboard.checks.results import HealthRecord


class ResultCache:
    """
    Holds the most recent complete batch of health records.

    Starts empty and is only ever replaced wholesale, never merged, so a
    reader sees either the previous batch or the new one in full. Nothing is
    persisted; the contents die with the process.
    """

    def __init__(self) -> None:
        self._records: tuple[HealthRecord, ...] = ()
        self._lock = threading.Lock()

    def get(self) -> list[HealthRecord]:
        with self._lock:
            return list(self._records)

    def set(self, records: Iterable[HealthRecord]) -> None:
        snapshot = tuple(records)
        with self._lock:
            self._records = snapshot

    def snapshot(self) -> list[dict]:
        return [r.to_dict() for r in self.get()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
