"""Status page service — FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from statuspage.config import Settings, get_settings
from statuspage.gateways.error_tracking import ErrorTrackingGateway
from statuspage.gateways.mobile_health import MobileHealthGateway
from statuspage.middleware import MetricsMiddleware
from statuspage.routers import ops, status, subscribe
from statuspage.snapshot.builder import SnapshotBuilder
from statuspage.subscriptions.store import SubscriptionStore
from statuspage.telemetry.logging import LOGGER_NAME, setup_logging
from statuspage.telemetry.tracing import SERVICE_VERSION, setup_tracing

logger = logging.getLogger(LOGGER_NAME)


def create_app(
    settings: Settings | None = None,
    error_tracking: ErrorTrackingGateway | None = None,
    mobile_health: MobileHealthGateway | None = None,
    subscriptions: SubscriptionStore | None = None,
) -> FastAPI:
    """Wire the application. Gateways may be passed in to replace the real upstreams."""
    settings = settings or get_settings()

    setup_logging(otlp_endpoint=settings.otlp_endpoint, level=settings.log_level.upper())

    error_tracking = error_tracking or ErrorTrackingGateway(settings.error_tracking())
    mobile_health = mobile_health or MobileHealthGateway(settings.mobile_health())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        tracking = settings.error_tracking()
        logger.info(
            "Status page ready: error_tracking=%s org=%s project=%s mobile_status=%s",
            "configured" if tracking.configured else "mock",
            tracking.org,
            tracking.project,
            settings.mobile_status_url,
        )
        yield
        await error_tracking.close()
        await mobile_health.close()
        logger.info("Status page shut down")

    app = FastAPI(
        title="Status Page",
        description="Public status page for the mobile backend",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.snapshot_builder = SnapshotBuilder(error_tracking, mobile_health, settings)
    app.state.subscriptions = subscriptions or SubscriptionStore(settings.subscriptions_file)

    app.add_middleware(MetricsMiddleware)

    app.include_router(ops.router)
    app.include_router(status.router)
    app.include_router(subscribe.router)

    setup_tracing(app, settings.otlp_endpoint)
    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
