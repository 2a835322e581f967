"""Status snapshot builder — one request cycle from upstream calls to response payload."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any, TypeVar

from opentelemetry import trace

from statuspage.aggregation.aggregator import aggregate_status, operational_system_status
from statuspage.aggregation.models import SEVERITY_RANK, SystemStatus
from statuspage.classification.classifier import build_detailed_error, classify_issues
from statuspage.config import Settings
from statuspage.gateways.error_tracking import ErrorTrackingGateway
from statuspage.gateways.mobile_health import MobileHealthGateway
from statuspage.gateways.mock_data import (
    default_health_report,
    mock_events,
    mock_issues,
    synthetic_response_time_history,
    synthetic_uptime_history,
)
from statuspage.gateways.result import DataSource, GatewayResult
from statuspage.snapshot.models import History, SnapshotSources, StatusSnapshot
from statuspage.telemetry.metrics import (
    active_incidents_gauge,
    service_state_gauge,
    snapshot_fallbacks_total,
)

logger = logging.getLogger("statuspage.snapshot")
tracer = trace.get_tracer(__name__)

T = TypeVar("T")


def _settle(
    section: str,
    outcome: GatewayResult[T] | BaseException,
    fallback: Callable[[], T],
    fallback_source: DataSource,
    default: Callable[[], T],
) -> GatewayResult[T]:
    """Resolve one gateway call to a usable value.

    A failed result gets the section's stand-in data; a call that raised
    instead of returning gets the hardcoded operational default.
    """
    if isinstance(outcome, BaseException):
        logger.error("Snapshot section '%s' raised %r, using default", section, outcome)
        snapshot_fallbacks_total.labels(section=section, source=DataSource.DEFAULT.value).inc()
        return GatewayResult(value=default(), error=repr(outcome), source=DataSource.DEFAULT)

    if outcome.ok:
        return outcome

    logger.warning(
        "Snapshot section '%s' unavailable (%s), using %s data",
        section, outcome.error, fallback_source.value,
    )
    snapshot_fallbacks_total.labels(section=section, source=fallback_source.value).inc()
    return outcome.or_else(fallback, fallback_source)


def fallback_snapshot(now: datetime | None = None) -> StatusSnapshot:
    """All services operational, zero incidents. Served when assembly itself fails."""
    now = now or datetime.now(timezone.utc)
    return StatusSnapshot(
        status=operational_system_status(now),
        incidents=[],
        detailed_errors=[],
        last_updated=now,
    )


def _record_gauges(status: SystemStatus) -> None:
    active_incidents_gauge.set(status.total_active_issues)
    for name, service in status.services.items():
        service_state_gauge.labels(service=name).set(SEVERITY_RANK[service.status])


class SnapshotBuilder:
    """Builds a fresh StatusSnapshot per request from both upstream gateways."""

    def __init__(
        self,
        error_tracking: ErrorTrackingGateway,
        mobile_health: MobileHealthGateway,
        settings: Settings,
    ) -> None:
        self._error_tracking = error_tracking
        self._mobile_health = mobile_health
        self._settings = settings

    async def build(self, now: datetime | None = None) -> StatusSnapshot:
        now = now or datetime.now(timezone.utc)
        s = self._settings
        rng = random.Random(s.synthetic_seed)

        with tracer.start_as_current_span("build-snapshot") as span:
            outcomes: list[Any] = await asyncio.gather(
                self._error_tracking.fetch_recent_issues(s.issue_window),
                self._error_tracking.fetch_recent_events(s.event_window, s.event_limit),
                self._mobile_health.fetch_system_status(),
                self._mobile_health.fetch_uptime_history(s.uptime_days),
                self._mobile_health.fetch_response_time_history(s.response_time_hours),
                return_exceptions=True,
            )

            issues = _settle("issues", outcomes[0], lambda: mock_issues(now), DataSource.MOCK, list)
            events = _settle("events", outcomes[1], lambda: mock_events(now), DataSource.MOCK, list)
            health = _settle(
                "health", outcomes[2],
                lambda: default_health_report(now), DataSource.DEFAULT,
                lambda: default_health_report(now),
            )
            uptime = _settle(
                "uptime", outcomes[3],
                lambda: synthetic_uptime_history(s.uptime_days, now, rng), DataSource.SYNTHETIC,
                list,
            )
            response_time = _settle(
                "response_time", outcomes[4],
                lambda: synthetic_response_time_history(s.response_time_hours, now, rng), DataSource.SYNTHETIC,
                list,
            )

            incidents = classify_issues(issues.value, now)
            status = aggregate_status(incidents, now)
            detailed_errors = [build_detailed_error(e, s.breadcrumb_limit) for e in events.value]

            span.set_attribute("snapshot.overall_status", status.overall.status.value)
            span.set_attribute("snapshot.active_issues", status.total_active_issues)
            span.set_attribute("snapshot.issues_source", issues.source.value)
            _record_gauges(status)

            logger.info(
                "Snapshot built: overall=%s active=%d incidents=%d sources=%s/%s/%s",
                status.overall.status.value,
                status.total_active_issues,
                len(incidents),
                issues.source.value,
                health.source.value,
                uptime.source.value,
            )

            return StatusSnapshot(
                status=status,
                incidents=incidents[: s.incident_limit],
                detailed_errors=detailed_errors,
                health=health.value,
                history=History(uptime=uptime.value, response_time=response_time.value),
                sources=SnapshotSources(
                    issues=issues.source,
                    events=events.source,
                    health=health.source,
                    uptime=uptime.source,
                    response_time=response_time.source,
                ),
                last_updated=now,
            )
