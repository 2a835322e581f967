"""Issue classifier — maps raw error-tracking issues onto status-page incidents.

The classifier is a pure transform: one RawIssue in, one Incident out. It
never raises for missing optional fields; placeholders and defaults stand in
for whatever upstream left out.
"""

from __future__ import annotations

from datetime import datetime, timezone

from statuspage.classification.models import (
    DetailedError,
    Incident,
    IncidentStatus,
    IncidentUpdate,
    Severity,
)
from statuspage.ingestion.models import (
    ComponentTag,
    IncidentSeverityTag,
    IncidentTypeTag,
    RawEvent,
    RawIssue,
    ServiceTag,
)

DEFAULT_SERVICE = "mobile"
UNKNOWN_INCIDENT_TITLE = "Unknown incident"
UNKNOWN_ERROR_TITLE = "Unknown error"

_STATUS_MAP = {
    "unresolved": IncidentStatus.INVESTIGATING,
    "ignored": IncidentStatus.IDENTIFIED,
    "resolved": IncidentStatus.RESOLVED,
    "resolving": IncidentStatus.MONITORING,
}

_LEVEL_SEVERITY = {
    "fatal": Severity.CRITICAL,
    "error": Severity.MAJOR,
}

_INCIDENT_TYPE_SEVERITY = {
    "outage": Severity.CRITICAL,
    "major_outage": Severity.CRITICAL,
    "degradation": Severity.MAJOR,
    "degraded": Severity.MAJOR,
    "partial_outage": Severity.MAJOR,
    "performance": Severity.MINOR,
    "maintenance": Severity.MINOR,
}

# Order matters: services are reported in this order when several match.
_SERVICE_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("auth", ("auth", "login")),
    ("api", ("api", "network", "fetch")),
    ("storage", ("storage", "upload", "file")),
    ("mobile", ("mobile", "app", "navigation")),
]


def map_status(upstream_status: str | None) -> IncidentStatus:
    """Map an upstream lifecycle state. Unknown states read as investigating."""
    return _STATUS_MAP.get((upstream_status or "").lower(), IncidentStatus.INVESTIGATING)


def map_severity(issue: RawIssue) -> Severity:
    """Explicit severity tags win over the level-derived mapping."""
    for value in issue.tag_values(IncidentSeverityTag):
        try:
            return Severity(value.strip().lower())
        except ValueError:
            continue

    for value in issue.tag_values(IncidentTypeTag):
        severity = _INCIDENT_TYPE_SEVERITY.get(value.strip().lower())
        if severity is not None:
            return severity

    return _LEVEL_SEVERITY.get(issue.level, Severity.MINOR)


def infer_affected_services(issue: RawIssue) -> list[str]:
    """Keyword scan of title and culprit plus service/component tags.

    Returns an ordered, de-duplicated list; never empty.
    """
    text = f"{issue.title} {issue.culprit}".lower()
    services: dict[str, None] = {}

    for service, keywords in _SERVICE_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            services[service] = None

    for tag in issue.tags:
        if isinstance(tag, (ServiceTag, ComponentTag)) and tag.value:
            services[tag.value] = None

    return list(services) or [DEFAULT_SERVICE]


def synthesize_updates(issue: RawIssue, status: IncidentStatus) -> list[IncidentUpdate]:
    updates = []

    if issue.first_seen:
        message = "First occurrence detected"
        if issue.count > 1:
            message += f" ({issue.count} times total)"
        updates.append(IncidentUpdate(
            id=f"{issue.id}-first",
            timestamp=issue.first_seen,
            status=IncidentStatus.INVESTIGATING,
            message=message,
        ))

    if issue.last_seen and issue.last_seen != issue.first_seen:
        message = "Last occurrence"
        if issue.user_count > 1:
            message += f" affecting {issue.user_count} users"
        updates.append(IncidentUpdate(
            id=f"{issue.id}-last",
            timestamp=issue.last_seen,
            status=status,
            message=message,
        ))

    updates.sort(key=lambda u: u.timestamp)
    return updates


def classify_issue(issue: RawIssue, now: datetime | None = None) -> Incident:
    """Classify one issue into exactly one incident."""
    now = now or datetime.now(timezone.utc)
    status = map_status(issue.status)
    created_at = issue.first_seen or issue.last_seen or now

    resolved_at = None
    if status == IncidentStatus.RESOLVED:
        resolved_at = issue.last_seen or created_at

    return Incident(
        id=issue.id,
        title=issue.title or issue.culprit or UNKNOWN_INCIDENT_TITLE,
        status=status,
        severity=map_severity(issue),
        affected_services=infer_affected_services(issue),
        created_at=created_at,
        resolved_at=resolved_at,
        updates=synthesize_updates(issue, status),
        count=issue.count,
        user_count=issue.user_count,
        permalink=issue.permalink,
        short_id=issue.short_id,
        platform=issue.platform,
    )


def classify_issues(issues: list[RawIssue], now: datetime | None = None) -> list[Incident]:
    now = now or datetime.now(timezone.utc)
    return [classify_issue(issue, now) for issue in issues]


def _find_entry(event: RawEvent, entry_type: str) -> dict | None:
    for entry in event.entries:
        if entry.get("type") == entry_type:
            data = entry.get("data")
            return data if isinstance(data, dict) else None
    return None


def build_detailed_error(event: RawEvent, breadcrumb_limit: int = 10) -> DetailedError:
    """Enrich one event for the debugging panel. Keeps the most recent breadcrumbs only."""
    crumbs = (_find_entry(event, "breadcrumbs") or {}).get("values") or []
    crumbs = [c for c in crumbs if isinstance(c, dict)]

    return DetailedError(
        id=event.id,
        title=event.title or event.message or UNKNOWN_ERROR_TITLE,
        level=event.level,
        timestamp=event.date_created,
        user=event.user,
        device=event.contexts.device,
        os=event.contexts.os,
        app=event.contexts.app,
        stack_trace=_find_entry(event, "exception"),
        breadcrumbs=crumbs[-breadcrumb_limit:] if breadcrumb_limit > 0 else [],
        tags=list(event.tags),
    )
