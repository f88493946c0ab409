from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from healthboard.checks.probe import probe
from healthboard.checks.results import HealthRecord
from healthboard.models import Endpoint


def check_all(
    endpoints: Sequence[Endpoint], timeout_s: float | None = None
) -> list[HealthRecord]:
    """
    Probe every endpoint concurrently, one worker per endpoint.

    Results come back in the order of ``endpoints`` whatever order the
    probes finish in. Each probe is bounded by its own timeout, so the
    batch takes about as long as the slowest probe.
    """
    if not endpoints:
        return []

    with ThreadPoolExecutor(
        max_workers=len(endpoints), thread_name_prefix="healthboard-probe"
    ) as pool:
        return list(pool.map(lambda ep: probe(ep, timeout_s=timeout_s), endpoints))
