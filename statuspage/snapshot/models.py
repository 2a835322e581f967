"""Data models for the status snapshot served to status-page clients."""

from __future__ import annotations

from datetime import datetime

from statuspage.aggregation.models import SystemStatus
from statuspage.base import CamelModel
from statuspage.classification.models import DetailedError, Incident
from statuspage.gateways.models import HealthReport, ResponseTimeEntry, UptimeEntry
from statuspage.gateways.result import DataSource


class History(CamelModel):
    uptime: list[UptimeEntry] = []
    response_time: list[ResponseTimeEntry] = []


class SnapshotSources(CamelModel):
    """Where each section's data came from: live upstream, probes, or a stand-in."""

    issues: DataSource = DataSource.DEFAULT
    events: DataSource = DataSource.DEFAULT
    health: DataSource = DataSource.DEFAULT
    uptime: DataSource = DataSource.DEFAULT
    response_time: DataSource = DataSource.DEFAULT


class StatusSnapshot(CamelModel):
    status: SystemStatus
    incidents: list[Incident] = []
    detailed_errors: list[DetailedError] = []
    health: HealthReport | None = None
    history: History | None = None
    sources: SnapshotSources = SnapshotSources()
    last_updated: datetime
