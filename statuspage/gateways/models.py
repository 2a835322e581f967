"""Data models for the mobile backend's health and history feeds."""

from __future__ import annotations

import datetime as dt

from statuspage.aggregation.models import OverallStatus, ServiceState
from statuspage.base import CamelModel


class ServiceHealth(CamelModel):
    status: ServiceState
    last_checked: dt.datetime
    response_time: float | None = None  # milliseconds


class HealthReport(CamelModel):
    """Backend health as reported by the mobile status endpoint or by direct probes."""

    overall: OverallStatus
    services: dict[str, ServiceHealth]
    last_updated: dt.datetime


class UptimeEntry(CamelModel):
    date: dt.date
    uptime: float  # percent


class ResponseTimeEntry(CamelModel):
    timestamp: dt.datetime
    response_time: float  # milliseconds
