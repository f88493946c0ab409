from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class HealthRecordResponse(BaseModel):
    name: str = Field(description="Display label of the endpoint")
    url: str = Field(description="Probed URL")
    status: int = Field(description="HTTP status code, 0 when no response was received")
    healthy: bool = Field(description="True when 200 <= status < 300")
    latency: str | None = Field(
        default=None,
        description="Time to response headers, e.g. '128ms'. Absent on failure.",
    )
    response: Any = Field(
        default=None,
        description="Parsed JSON body or raw text body. Absent on failure.",
    )
    error: str | None = Field(
        default=None, description="Failure message. Present only on failure."
    )
    timestamp: str = Field(description="ISO-8601 UTC time the record was produced")
