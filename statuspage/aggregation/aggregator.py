"""Service status aggregator — folds classified incidents into live service status."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone

from statuspage.aggregation.models import (
    SEVERITY_RANK,
    OverallStatus,
    ServiceState,
    ServiceStatus,
    SystemStatus,
)
from statuspage.classification.models import Incident, Severity

logger = logging.getLogger("statuspage.aggregation")

KNOWN_SERVICES = ("mobile", "api", "auth", "storage")


def worst_of(states: Iterable[ServiceState]) -> ServiceState:
    """Most severe state, ordering down > degraded > operational. Empty → operational."""
    return max(states, key=SEVERITY_RANK.__getitem__, default=ServiceState.OPERATIONAL)


def _escalate(current: ServiceState, severity: Severity) -> ServiceState:
    if severity == Severity.CRITICAL:
        return ServiceState.DOWN
    if current == ServiceState.OPERATIONAL:
        return ServiceState.DEGRADED
    return current


def aggregate_status(
    incidents: list[Incident],
    now: datetime | None = None,
    services: Iterable[str] = KNOWN_SERVICES,
) -> SystemStatus:
    """Compute per-service status and the overall rollup from open incidents.

    Affected-service names outside the known set are ignored for per-service
    counts; their incidents still count towards ``total_active_issues``.
    """
    now = now or datetime.now(timezone.utc)
    open_incidents = [i for i in incidents if i.is_open]

    statuses = {name: ServiceStatus(last_checked=now) for name in services}

    for incident in open_incidents:
        for name in incident.affected_services:
            service = statuses.get(name)
            if service is None:
                continue
            service.issue_count += 1
            service.last_issue = incident.created_at
            service.status = _escalate(service.status, incident.severity)

    overall = worst_of(s.status for s in statuses.values())

    affected = [name for name, s in statuses.items() if s.status != ServiceState.OPERATIONAL]
    logger.debug(
        "Aggregated status: overall=%s affected=%s open=%d",
        overall.value, ",".join(affected) or "-", len(open_incidents),
    )

    return SystemStatus(
        overall=OverallStatus(status=overall, last_checked=now),
        services=statuses,
        last_updated=now,
        total_active_issues=len(open_incidents),
    )


def operational_system_status(now: datetime | None = None) -> SystemStatus:
    """All known services operational with no open issues."""
    return aggregate_status([], now)
