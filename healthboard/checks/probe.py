from __future__ import annotations

import json
import logging
from typing import Any

from healthboard.checks.fetch import FetchedResponse, FetchError, fetch_with_timeout
from healthboard.checks.results import HealthRecord
from healthboard.models import Endpoint

logger = logging.getLogger(__name__)


def _decode_body(fetched: FetchedResponse) -> Any:
    if "application/json" in fetched.content_type.lower():
        # JSON autodetects UTF-8/16/32 from raw bytes
        return json.loads(fetched.body)

    encoding = fetched.encoding
    if not encoding or encoding.upper() == "ISO-8859-1":
        encoding = "utf-8"
    try:
        return fetched.body.decode(encoding, errors="replace")
    except LookupError:
        return fetched.body.decode("utf-8", errors="replace")


def probe(endpoint: Endpoint, timeout_s: float | None = None) -> HealthRecord:
    logger.info("Checking %s health...", endpoint.name)
    try:
        fetched = fetch_with_timeout(endpoint.url, timeout_s=timeout_s)
        body = _decode_body(fetched)
    except (FetchError, ValueError) as exc:
        logger.warning("Check of %s failed: %s", endpoint.name, exc)
        return HealthRecord.failure(endpoint.name, endpoint.url, error=str(exc))

    return HealthRecord.success(
        endpoint.name,
        endpoint.url,
        status=fetched.status_code,
        latency_ms=fetched.latency_ms,
        response=body,
    )
