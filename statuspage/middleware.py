"""Per-request Prometheus instrumentation."""

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from statuspage.telemetry.metrics import http_request_duration, http_requests_total

_UNINSTRUMENTED = frozenset({"/metrics", "/openapi.json", "/docs", "/redoc"})


def _endpoint_label(request: Request) -> str:
    # Route templates keep label cardinality bounded; unmatched paths share one label.
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in _UNINSTRUMENTED:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        labels = {
            "method": request.method,
            "endpoint": _endpoint_label(request),
            "status_code": str(response.status_code),
        }
        http_request_duration.labels(**labels).observe(time.perf_counter() - started)
        http_requests_total.labels(**labels).inc()
        return response
