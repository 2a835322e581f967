"""Data models for classified incidents and debugging error details."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import model_validator

from statuspage.base import CamelModel
from statuspage.ingestion.models import IssueTag


class IncidentStatus(str, Enum):
    INVESTIGATING = "investigating"
    IDENTIFIED = "identified"
    MONITORING = "monitoring"
    RESOLVED = "resolved"


class Severity(str, Enum):
    MINOR = "minor"
    MAJOR = "major"
    CRITICAL = "critical"


class IncidentUpdate(CamelModel):
    id: str
    timestamp: datetime
    status: IncidentStatus
    message: str


class Incident(CamelModel):
    """Status-page view of one upstream issue."""

    id: str
    title: str
    status: IncidentStatus
    severity: Severity
    affected_services: list[str]
    created_at: datetime
    resolved_at: datetime | None = None
    updates: list[IncidentUpdate] = []

    # Debugging extras carried through from the issue
    count: int = 0
    user_count: int = 0
    permalink: str | None = None
    short_id: str | None = None
    platform: str | None = None

    @model_validator(mode="after")
    def _check_invariants(self) -> Incident:
        if not self.affected_services:
            raise ValueError("an incident must affect at least one service")
        if (self.resolved_at is not None) != (self.status == IncidentStatus.RESOLVED):
            raise ValueError("resolved_at must be set exactly when status is resolved")
        return self

    @property
    def is_open(self) -> bool:
        return self.status != IncidentStatus.RESOLVED


class DetailedError(CamelModel):
    """A single event enriched with device context for debugging display."""

    id: str
    title: str
    level: str
    timestamp: datetime | None = None
    user: dict | None = None
    device: dict | None = None
    os: dict | None = None
    app: dict | None = None
    stack_trace: dict | None = None
    breadcrumbs: list[dict] = []
    tags: list[IssueTag] = []
