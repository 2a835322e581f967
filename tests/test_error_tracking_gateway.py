"""Tests for the error-tracking gateway against a mocked HTTP transport."""

import asyncio

import httpx

from statuspage.config import ErrorTrackingConfig
from statuspage.gateways.error_tracking import ErrorTrackingGateway
from statuspage.gateways.mock_data import mock_issues
from statuspage.gateways.result import DataSource
from statuspage.ingestion.models import RawIssue, ServiceTag, UnrecognizedTag

CONFIG = ErrorTrackingConfig(
    org="acme",
    project="mobile",
    auth_token="secret-token",
    api_url="https://errors.example.com/api/0",
)

ISSUES = [
    {
        "id": "101",
        "title": "Upload failed",
        "culprit": "storage.put",
        "status": "unresolved",
        "level": "error",
        "firstSeen": "2026-10-17T09:00:00Z",
        "lastSeen": "2026-10-17T11:00:00.123Z",
        "count": "12",
        "userCount": 4,
        "tags": [{"key": "service", "value": "storage"}, {"key": "release", "value": "1.4.0"}],
        "permalink": "https://errors.example.com/issues/101/",
        "shortId": "MOBILE-7",
        "platform": "react-native",
    },
    {"title": "record without an id"},
]


def run_with(handler, config=CONFIG, call=lambda gw: gw.fetch_recent_issues("7d")):
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            return await call(ErrorTrackingGateway(config, http))

    return asyncio.run(_run())


def test_fetch_recent_issues_success():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200, json=ISSUES)

    result = run_with(handler)

    assert result.ok
    assert result.source == DataSource.LIVE
    assert len(result.value) == 1
    issue = result.value[0]
    assert isinstance(issue, RawIssue)
    assert issue.count == 12
    assert isinstance(issue.tags[0], ServiceTag)
    assert isinstance(issue.tags[1], UnrecognizedTag)

    request = seen["request"]
    assert request.url.path == "/api/0/projects/acme/mobile/issues/"
    assert request.url.params["statsPeriod"] == "7d"
    assert request.url.params["sort"] == "date"
    assert request.url.params["limit"] == "50"
    assert request.headers["Authorization"] == "Bearer secret-token"


def test_tag_query_forwarded():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = request.url.params
        return httpx.Response(200, json=[])

    run_with(handler, call=lambda gw: gw.fetch_recent_issues("24h", query="service:auth"))
    assert seen["params"]["query"] == "service:auth"


def test_unconfigured_token_makes_no_request():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=[])

    config = CONFIG.model_copy(update={"auth_token": ""})
    result = run_with(handler, config=config)

    assert not result.ok
    assert result.error == "auth token not configured"
    assert calls == []


def test_http_error_status_is_a_failure():
    result = run_with(lambda request: httpx.Response(401, json={"detail": "bad token"}))

    assert not result.ok
    assert result.error == "HTTP 401"


def test_network_failure_never_raises_and_settles_to_mock():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = run_with(handler)
    assert not result.ok

    settled = result.or_else(mock_issues, DataSource.MOCK)
    assert settled.source == DataSource.MOCK
    assert settled.value
    assert all(isinstance(issue, RawIssue) for issue in settled.value)


def test_timeout_is_a_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    result = run_with(handler)
    assert result.error == "timeout"


def test_non_list_payload_is_a_failure():
    result = run_with(lambda request: httpx.Response(200, json={"detail": "unexpected"}))
    assert not result.ok


def test_non_json_body_is_a_failure():
    result = run_with(lambda request: httpx.Response(200, text="<html>maintenance</html>"))
    assert result.error == "invalid JSON body"


def test_fetch_recent_events_applies_limit():
    events = [{"id": str(i), "title": f"event {i}", "dateCreated": "2026-10-17T10:00:00Z"} for i in range(5)]
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200, json=events)

    result = run_with(handler, call=lambda gw: gw.fetch_recent_events("24h", limit=3))

    assert result.ok
    assert [e.id for e in result.value] == ["0", "1", "2"]
    assert seen["request"].url.path == "/api/0/projects/acme/mobile/events/"
    assert seen["request"].url.params["statsPeriod"] == "24h"
    assert seen["request"].url.params["limit"] == "3"
