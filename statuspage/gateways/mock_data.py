"""Stand-in data used when an upstream cannot supply real records.

Mock issues/events are a small fixed set of representative records so the
pipeline always has something to classify. History series are generated and
always served with ``DataSource.SYNTHETIC`` provenance.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

from statuspage.aggregation.models import OverallStatus, ServiceState
from statuspage.gateways.models import HealthReport, ResponseTimeEntry, ServiceHealth, UptimeEntry
from statuspage.ingestion.models import RawEvent, RawIssue


def mock_issues(now: datetime | None = None) -> list[RawIssue]:
    now = now or datetime.now(timezone.utc)
    return [
        RawIssue.model_validate({
            "id": "mock-issue-1",
            "title": "Network timeout in user authentication",
            "culprit": "services/auth.login",
            "status": "unresolved",
            "level": "error",
            "firstSeen": now - timedelta(hours=3),
            "lastSeen": now - timedelta(hours=1),
            "count": 15,
            "userCount": 5,
            "platform": "react-native",
            "permalink": "https://sentry.io/mock-issue-1",
            "shortId": "MOBILE-1",
            "tags": [
                {"key": "service", "value": "auth"},
                {"key": "component", "value": "login"},
            ],
        }),
    ]


def mock_events(now: datetime | None = None) -> list[RawEvent]:
    now = now or datetime.now(timezone.utc)
    return [
        RawEvent.model_validate({
            "id": "mock-event-1",
            "title": "Network Error: timeout",
            "level": "error",
            "dateCreated": now - timedelta(minutes=30),
            "user": {"email": "user@example.com"},
            "contexts": {
                "device": {"model": "iPhone 12"},
                "os": {"name": "iOS", "version": "15.0"},
                "app": {"version": "1.2.0"},
            },
            "tags": [{"key": "environment", "value": "production"}],
        }),
    ]


def default_health_report(now: datetime | None = None) -> HealthReport:
    """Every backend service operational."""
    now = now or datetime.now(timezone.utc)
    response_times = {"api": 200, "database": 150, "storage": 100}
    return HealthReport(
        overall=OverallStatus(status=ServiceState.OPERATIONAL, last_checked=now),
        services={
            name: ServiceHealth(status=ServiceState.OPERATIONAL, last_checked=now, response_time=ms)
            for name, ms in response_times.items()
        },
        last_updated=now,
    )


def synthetic_uptime_history(
    days: int,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> list[UptimeEntry]:
    """One entry per day, oldest first; mostly 99.5%+, occasionally a bad day."""
    now = now or datetime.now(timezone.utc)
    rng = rng or random.Random()
    history = []
    for i in range(days - 1, -1, -1):
        day = (now - timedelta(days=i)).date()
        if rng.random() > 0.05:
            uptime = 99.5 + rng.random() * 0.5
        else:
            uptime = 95.0 + rng.random() * 4
        history.append(UptimeEntry(date=day, uptime=round(uptime, 2)))
    return history


def synthetic_response_time_history(
    hours: int,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> list[ResponseTimeEntry]:
    """One entry per hour, oldest first, jittering around 200ms with a 50ms floor."""
    now = now or datetime.now(timezone.utc)
    rng = rng or random.Random()
    history = []
    for i in range(hours - 1, -1, -1):
        variation = (rng.random() - 0.5) * 100
        history.append(ResponseTimeEntry(
            timestamp=now - timedelta(hours=i),
            response_time=round(max(50.0, 200 + variation)),
        ))
    return history
