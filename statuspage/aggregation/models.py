"""Data models for per-service and overall system status."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from statuspage.base import CamelModel


class ServiceState(str, Enum):
    OPERATIONAL = "operational"
    DEGRADED = "degraded"
    DOWN = "down"


SEVERITY_RANK = {
    ServiceState.OPERATIONAL: 0,
    ServiceState.DEGRADED: 1,
    ServiceState.DOWN: 2,
}


class OverallStatus(CamelModel):
    status: ServiceState
    last_checked: datetime


class ServiceStatus(CamelModel):
    """Incident-derived state of one known service."""

    status: ServiceState = ServiceState.OPERATIONAL
    last_checked: datetime
    issue_count: int = Field(default=0, ge=0)
    last_issue: datetime | None = None


class SystemStatus(CamelModel):
    overall: OverallStatus
    services: dict[str, ServiceStatus]
    last_updated: datetime
    total_active_issues: int = Field(default=0, ge=0)
