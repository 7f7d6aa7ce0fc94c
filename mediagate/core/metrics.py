"""Prometheus metrics for the gateway."""

import time

from prometheus_client import Counter, Gauge, Histogram, Info, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from mediagate.gateway.media_store import MEDIA_ROUTE_PREFIX
from mediagate.gateway.types import ENDPOINT_KINDS

APP_INFO = Info("mediagate", "Media generation gateway info")
APP_INFO.info({"version": "1.0.0", "name": "mediagate"})

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

# Video requests poll their vendor for minutes, so the upper buckets matter
REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
    buckets=[0.05, 0.25, 1, 2.5, 5, 10, 30, 60, 120, 300, 600],
)

REQUESTS_IN_PROGRESS = Gauge(
    "http_requests_in_progress",
    "HTTP requests currently being handled",
    ["path"],
)

# "adapter" is the adapter name, not the raw provider id, so fallback traffic
# for arbitrary vendors collapses into a single label value.
GENERATION_OUTCOMES = Counter(
    "generation_requests_total",
    "Generation requests by media kind, adapter and outcome",
    ["kind", "adapter", "outcome"],
)

VENDOR_LATENCY = Histogram(
    "vendor_call_duration_seconds",
    "Duration of adapter invocations (including polling) in seconds",
    ["kind", "adapter"],
    buckets=[0.25, 0.5, 1, 2.5, 5, 10, 30, 60, 120, 300, 600],
)

_KNOWN_PATHS = frozenset(
    [f"/api/v1/{endpoint}" for endpoint in ENDPOINT_KINDS] + ["/api/v1/providers", "/api/v1/health"]
)


def _normalize_path(path: str) -> str:
    """Map a request path onto a bounded label set.

    Media blob ids collapse to ``{id}``; anything that is not a known route
    (typos, unknown kinds, scanners) is reported as ``other``.
    """
    if path in _KNOWN_PATHS:
        return path
    if path.startswith(f"{MEDIA_ROUTE_PREFIX}/") and len(path) > len(MEDIA_ROUTE_PREFIX) + 1:
        return f"{MEDIA_ROUTE_PREFIX}/{{id}}"
    return "other"


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Collect HTTP request metrics for Prometheus."""

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        path = _normalize_path(request.url.path)

        in_progress = REQUESTS_IN_PROGRESS.labels(path=path)
        in_progress.inc()
        start = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            in_progress.dec()
            REQUEST_DURATION.labels(method=method, path=path).observe(time.perf_counter() - start)

        REQUEST_COUNT.labels(method=method, path=path, status=response.status_code).inc()
        return response


def metrics_response() -> Response:
    """Generate Prometheus /metrics response."""
    return Response(
        content=generate_latest(),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )
