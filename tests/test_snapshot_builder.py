"""Tests for snapshot assembly under full and partial upstream failure."""

import asyncio

from fakes import NOW, FakeErrorTracking, FakeMobileHealth, make_issue
from statuspage.aggregation.models import ServiceState
from statuspage.classification.models import IncidentStatus, Severity
from statuspage.gateways.mock_data import default_health_report
from statuspage.gateways.result import DataSource, GatewayResult
from statuspage.snapshot.builder import SnapshotBuilder, fallback_snapshot
from statuspage.snapshot.models import StatusSnapshot


def build(settings, error_tracking=None, mobile_health=None) -> StatusSnapshot:
    builder = SnapshotBuilder(
        error_tracking or FakeErrorTracking(),
        mobile_health or FakeMobileHealth(),
        settings,
    )
    return asyncio.run(builder.build(NOW))


def test_fatal_auth_issue_takes_overall_down(settings):
    issue = make_issue(level="fatal", title="auth timeout", tags=[{"key": "service", "value": "auth"}])
    snapshot = build(settings, FakeErrorTracking(issues=GatewayResult.success([issue])))

    assert snapshot.incidents[0].severity == Severity.CRITICAL
    assert snapshot.incidents[0].status == IncidentStatus.INVESTIGATING
    assert snapshot.status.services["auth"].status == ServiceState.DOWN
    assert snapshot.status.overall.status == ServiceState.DOWN
    assert snapshot.sources.issues == DataSource.LIVE


def test_resolved_issue_leaves_everything_operational(settings):
    issue = make_issue(level="warning", title="generic issue", status="resolved")
    snapshot = build(settings, FakeErrorTracking(issues=GatewayResult.success([issue])))

    assert snapshot.incidents[0].status == IncidentStatus.RESOLVED
    assert snapshot.status.overall.status == ServiceState.OPERATIONAL
    assert snapshot.status.total_active_issues == 0


def test_empty_feeds_are_operational(settings):
    snapshot = build(settings)

    assert snapshot.status.overall.status == ServiceState.OPERATIONAL
    assert snapshot.status.total_active_issues == 0
    assert snapshot.incidents == []


def test_failed_issue_feed_uses_mock_issues(settings):
    error_tracking = FakeErrorTracking(
        issues=GatewayResult.failure("auth token not configured"),
        events=GatewayResult.failure("auth token not configured"),
    )
    snapshot = build(settings, error_tracking)

    assert snapshot.sources.issues == DataSource.MOCK
    assert snapshot.sources.events == DataSource.MOCK
    assert snapshot.incidents
    assert snapshot.detailed_errors
    assert snapshot.status.total_active_issues == 1


def test_both_gateways_rejecting_still_yields_valid_operational_snapshot(settings):
    snapshot = build(
        settings,
        FakeErrorTracking(issues=RuntimeError("boom"), events=RuntimeError("boom")),
        FakeMobileHealth(
            status=RuntimeError("boom"),
            uptime=RuntimeError("boom"),
            response_time=RuntimeError("boom"),
        ),
    )

    assert snapshot.status.overall.status == ServiceState.OPERATIONAL
    assert snapshot.incidents == []
    assert snapshot.detailed_errors == []
    assert snapshot.health.overall.status == ServiceState.OPERATIONAL
    assert snapshot.sources.issues == DataSource.DEFAULT
    assert snapshot.sources.health == DataSource.DEFAULT

    payload = snapshot.to_payload()
    for key in ("status", "incidents", "detailedErrors", "health", "history", "sources", "lastUpdated"):
        assert key in payload


def test_one_gateway_failing_does_not_affect_the_other(settings):
    issue = make_issue(level="error", title="upload stalled")
    snapshot = build(
        settings,
        FakeErrorTracking(issues=GatewayResult.success([issue])),
        FakeMobileHealth(status=RuntimeError("boom")),
    )

    assert snapshot.status.services["storage"].status == ServiceState.DEGRADED
    assert snapshot.sources.issues == DataSource.LIVE
    assert snapshot.sources.health == DataSource.DEFAULT


def test_missing_history_is_synthetic_and_labelled(settings):
    snapshot = build(settings)

    assert snapshot.sources.uptime == DataSource.SYNTHETIC
    assert snapshot.sources.response_time == DataSource.SYNTHETIC
    assert len(snapshot.history.uptime) == settings.uptime_days
    assert len(snapshot.history.response_time) == settings.response_time_hours
    assert snapshot.history.uptime[-1].date == NOW.date()
    assert all(50 <= e.response_time <= 250 for e in snapshot.history.response_time)


def test_seeded_synthetic_history_is_deterministic(settings):
    first = build(settings).history
    second = build(settings).history
    assert first == second


def test_probed_health_keeps_its_provenance(settings):
    mobile = FakeMobileHealth(status=GatewayResult.success(default_health_report(NOW), DataSource.PROBED))
    assert build(settings, mobile_health=mobile).sources.health == DataSource.PROBED


def test_incident_list_is_capped_but_aggregation_sees_everything(settings):
    settings.incident_limit = 3
    issues = [make_issue(issue_id=str(i), title="api failure") for i in range(5)]
    snapshot = build(settings, FakeErrorTracking(issues=GatewayResult.success(issues)))

    assert [i.id for i in snapshot.incidents] == ["0", "1", "2"]
    assert snapshot.status.total_active_issues == 5
    assert snapshot.status.services["api"].issue_count == 5


def test_fallback_snapshot_shape():
    snapshot = fallback_snapshot(NOW)

    assert snapshot.status.overall.status == ServiceState.OPERATIONAL
    assert snapshot.status.total_active_issues == 0
    assert snapshot.incidents == []
    assert snapshot.last_updated == NOW
