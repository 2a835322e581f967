"""Operational endpoints: liveness and Prometheus scrape."""

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from starlette.responses import Response

from statuspage.telemetry.metrics import get_metrics
from statuspage.telemetry.tracing import SERVICE_VERSION

router = APIRouter(tags=["ops"])

_started_at = datetime.now(timezone.utc)


@router.get("/health")
async def health(request: Request):
    now = datetime.now(timezone.utc)
    error_tracking = request.app.state.settings.error_tracking()
    return {
        "status": "healthy",
        "uptime_seconds": round((now - _started_at).total_seconds(), 2),
        "timestamp": now.isoformat(),
        "version": SERVICE_VERSION,
        "error_tracking_configured": error_tracking.configured,
    }


@router.get("/metrics", include_in_schema=False)
async def metrics():
    body, content_type = get_metrics()
    return Response(content=body, media_type=content_type)
