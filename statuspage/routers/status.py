"""Public status endpoint."""

import logging

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse, Response

from statuspage.snapshot.builder import SnapshotBuilder, fallback_snapshot
from statuspage.telemetry.metrics import snapshot_failures_total

router = APIRouter(prefix="/api", tags=["status"])
logger = logging.getLogger("statuspage.routers.status")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def cache_control(max_age: int, stale_while_revalidate: int) -> str:
    return f"public, max-age={max_age}, stale-while-revalidate={stale_while_revalidate}"


@router.get("/status")
async def get_status(request: Request) -> JSONResponse:
    """Current snapshot. Always 200; assembly failures serve an all-operational payload."""
    builder: SnapshotBuilder = request.app.state.snapshot_builder
    settings = request.app.state.settings

    try:
        snapshot = await builder.build()
        payload = snapshot.to_payload()
        cache = cache_control(settings.cache_max_age, settings.cache_stale_while_revalidate)
    except Exception:
        logger.exception("Snapshot assembly failed, serving fallback payload")
        snapshot_failures_total.inc()
        payload = fallback_snapshot().to_payload()
        cache = cache_control(
            settings.fallback_cache_max_age, settings.fallback_cache_stale_while_revalidate,
        )

    return JSONResponse(payload, status_code=200, headers={"Cache-Control": cache, **CORS_HEADERS})


@router.options("/status", include_in_schema=False)
async def status_options() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)
