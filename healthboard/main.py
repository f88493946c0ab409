import json
import logging
import re
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from healthboard.api_schemas import HealthRecordResponse
from healthboard.checks.probe import probe
from healthboard.config import CHECK_INTERVAL_S, DASHBOARD_REFRESH_MINUTES, settings
from healthboard.registry import load_endpoints
from healthboard.runner import BackgroundScheduler, run_once
from healthboard.state import ResultCache
from healthboard.ui import render_dashboard

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}
INDEX_RE = re.compile(r"[0-9]+")

endpoints = load_endpoints(settings.ENDPOINTS_PATH)
cache = ResultCache()
scheduler = BackgroundScheduler(
    cache,
    endpoints,
    interval_s=CHECK_INTERVAL_S,
    timeout_s=settings.PROBE_TIMEOUT_S,
)


def _endpoint_position(raw: str) -> int | None:
    if not INDEX_RE.fullmatch(raw):
        return None
    digits = raw.lstrip("0") or "0"
    # Longer than any valid position; also keeps int() clear of its digit limit.
    if len(digits) > len(str(len(endpoints))):
        return None
    position = int(digits)
    return position if position < len(endpoints) else None


class PrettyJSONResponse(JSONResponse):
    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=False, indent=2).encode("utf-8")


@asynccontextmanager
async def lifespan(_: FastAPI):
    scheduler.start()
    yield
    scheduler.stop(timeout=1.0)


app = FastAPI(
    title="Healthboard",
    version="1.0.0",
    description=(
        "Probes a fixed list of HTTP endpoints, caches the latest results, "
        "and serves them as JSON and as a browser dashboard."
    ),
    lifespan=lifespan,
    redirect_slashes=False,
)


@app.middleware("http")
async def cors_headers(request: Request, call_next):
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    # Unknown paths and unsupported methods both read as "Not Found".
    if exc.status_code in (404, 405):
        return PlainTextResponse("Not Found", status_code=404)
    return await http_exception_handler(request, exc)


@app.get(
    "/",
    response_class=HTMLResponse,
    tags=["dashboard"],
    summary="Dashboard",
    description="Browser dashboard that polls /check and refreshes itself.",
)
def index():
    return HTMLResponse(render_dashboard(endpoints, DASHBOARD_REFRESH_MINUTES))


@app.get(
    "/check",
    response_model=list[HealthRecordResponse],
    tags=["checks"],
    summary="Check All Endpoints",
    description="Probes every configured endpoint now and replaces the cached results.",
)
def check():
    records = run_once(cache, endpoints, timeout_s=settings.PROBE_TIMEOUT_S)
    return PrettyJSONResponse([r.to_dict() for r in records])


@app.get(
    "/last-check",
    response_model=list[HealthRecordResponse],
    tags=["checks"],
    summary="Last Check Results",
    description="Cached results of the most recent batch; empty until one completes.",
)
def last_check():
    return PrettyJSONResponse(cache.snapshot())


@app.get(
    "/check/{index}",
    response_model=HealthRecordResponse,
    tags=["checks"],
    summary="Check One Endpoint",
    description="Probes the endpoint at the given 0-based position. The cache is not touched.",
)
def check_one(index: str):
    position = _endpoint_position(index)
    if position is None:
        return PlainTextResponse("Not Found", status_code=404)
    record = probe(endpoints[position], timeout_s=settings.PROBE_TIMEOUT_S)
    return PrettyJSONResponse(record.to_dict())
