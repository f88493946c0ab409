from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass, field
from typing import Mapping

import requests
from urllib3.exceptions import ReadTimeoutError

from healthboard.config import settings

CHUNK_SIZE = 8192


class FetchError(Exception):
    """Transport-level failure: DNS, refused connection, TLS, broken stream."""


class FetchTimeout(FetchError):
    """The request did not complete before its deadline."""


@dataclass
class FetchedResponse:
    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    encoding: str | None = None
    latency_ms: int = 0

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "") or ""


def _timeout_message(url: str, timeout_s: float) -> str:
    return f"request to {url} timed out after {int(timeout_s * 1000)}ms"


def _is_timeout(exc: requests.RequestException) -> bool:
    # A read timeout while streaming the body surfaces as ConnectionError.
    if isinstance(exc, requests.Timeout):
        return True
    return any(isinstance(arg, ReadTimeoutError) for arg in exc.args)


def _download(
    url: str, timeout_s: float, deadline: float, cancelled: threading.Event
) -> FetchedResponse:
    start = time.perf_counter()
    resp = requests.get(url, timeout=(timeout_s, timeout_s), stream=True)
    latency_ms = int((time.perf_counter() - start) * 1000)
    try:
        chunks: list[bytes] = []
        for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
            if cancelled.is_set() or time.monotonic() >= deadline:
                raise FetchTimeout(_timeout_message(url, timeout_s))
            chunks.append(chunk)

        return FetchedResponse(
            status_code=resp.status_code,
            headers=resp.headers,
            body=b"".join(chunks),
            encoding=resp.encoding,
            latency_ms=latency_ms,
        )
    finally:
        resp.close()


def fetch_with_timeout(url: str, timeout_s: float | None = None) -> FetchedResponse:
    """
    GET ``url`` under a hard deadline of ``timeout_s`` seconds.

    The request and the body read run on a worker thread; the caller waits
    for at most ``timeout_s`` and then raises FetchTimeout whatever stage the
    exchange is in. An abandoned worker stops at its next chunk or socket
    timeout, and closes its connection on the way out.
    """
    if timeout_s is None:
        timeout_s = settings.PROBE_TIMEOUT_S

    deadline = time.monotonic() + timeout_s
    cancelled = threading.Event()
    pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="healthboard-fetch")
    try:
        future = pool.submit(_download, url, timeout_s, deadline, cancelled)
    finally:
        pool.shutdown(wait=False)

    try:
        return future.result(timeout=max(0.0, deadline - time.monotonic()))
    except FutureTimeout as exc:
        cancelled.set()
        raise FetchTimeout(_timeout_message(url, timeout_s)) from exc
    except requests.RequestException as exc:
        if _is_timeout(exc):
            raise FetchTimeout(_timeout_message(url, timeout_s)) from exc
        raise FetchError(f"request to {url} failed: {exc}") from exc
