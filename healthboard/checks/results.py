from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


def utcnow_iso() -> str:
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def is_healthy_status(status: int) -> bool:
    return 200 <= status < 300


@dataclass(frozen=True)
class HealthRecord:
    """
    Outcome of probing one endpoint once.

    A record is either a success (``latency_ms`` and ``response`` set,
    ``error`` is None) or a failure (``status`` is 0 and ``error`` holds the
    message). ``healthy`` always follows from ``status``.
    """

    name: str
    url: str
    status: int
    healthy: bool
    timestamp: str
    latency_ms: int | None = None
    response: Any = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @classmethod
    def success(
        cls, name: str, url: str, status: int, latency_ms: int, response: Any
    ) -> "HealthRecord":
        return cls(
            name=name,
            url=url,
            status=status,
            healthy=is_healthy_status(status),
            timestamp=utcnow_iso(),
            latency_ms=latency_ms,
            response=response,
        )

    @classmethod
    def failure(cls, name: str, url: str, error: str) -> "HealthRecord":
        return cls(
            name=name,
            url=url,
            status=0,
            healthy=False,
            timestamp=utcnow_iso(),
            error=error,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "url": self.url,
            "status": self.status,
            "healthy": self.healthy,
        }
        if self.failed:
            out["error"] = self.error
        else:
            out["latency"] = f"{self.latency_ms}ms"
            out["response"] = self.response
        out["timestamp"] = self.timestamp
        return out
