"""Error-tracking gateway — recent issues and events from the Sentry REST API."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from statuspage.config import ErrorTrackingConfig
from statuspage.gateways.result import GatewayResult
from statuspage.ingestion.models import RawEvent, RawIssue
from statuspage.ingestion.parser import parse_events, parse_issues
from statuspage.telemetry.metrics import upstream_request_duration, upstream_requests_total

logger = logging.getLogger("statuspage.gateways.error_tracking")

GATEWAY = "error_tracking"

_STATUS_HINTS = {
    401: "Authentication failed, check the auth token",
    403: "Access forbidden, the token needs org:read and project:read",
    404: "Endpoint not found, check the org and project names",
}


class ErrorTrackingGateway:
    def __init__(self, config: ErrorTrackingConfig, http: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=config.timeout_seconds)

    async def close(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    def _debug(self, msg: str, *args: Any) -> None:
        if self._config.debug:
            logger.info(msg, *args)

    async def _get_json(self, operation: str, path: str, params: dict) -> GatewayResult[Any]:
        """GET an API path. Every failure mode comes back as a failed result."""
        if not self._config.configured:
            self._debug("No auth token configured, skipping %s", operation)
            upstream_requests_total.labels(gateway=GATEWAY, operation=operation, outcome="unconfigured").inc()
            return GatewayResult.failure("auth token not configured")

        url = f"{self._config.api_url}{path}"
        self._debug("Fetching %s params=%s", url, params)

        start = time.perf_counter()
        outcome = "error"
        try:
            resp = await self._http.get(
                url,
                params=params,
                headers={
                    "Authorization": f"Bearer {self._config.auth_token}",
                    "Content-Type": "application/json",
                },
                timeout=self._config.timeout_seconds,
            )

            if not resp.is_success:
                outcome = f"http_{resp.status_code}"
                logger.warning(
                    "Error-tracking API %s returned %d: %s",
                    operation, resp.status_code, _STATUS_HINTS.get(resp.status_code, resp.reason_phrase),
                )
                self._debug("Response body: %s", resp.text[:500])
                return GatewayResult.failure(f"HTTP {resp.status_code}")

            try:
                body = resp.json()
            except ValueError:
                outcome = "invalid_json"
                logger.warning("Error-tracking API %s returned a non-JSON body", operation)
                return GatewayResult.failure("invalid JSON body")

            outcome = "success"
            return GatewayResult.success(body)

        except httpx.TimeoutException:
            outcome = "timeout"
            logger.warning(
                "Error-tracking API %s timed out after %.1fs", operation, self._config.timeout_seconds,
            )
            return GatewayResult.failure("timeout")
        except httpx.HTTPError as exc:
            logger.warning("Error-tracking API %s unavailable: %s", operation, exc)
            return GatewayResult.failure(f"network error: {exc}")
        except Exception as exc:
            logger.exception("Unexpected failure calling error-tracking API %s", operation)
            return GatewayResult.failure(f"unexpected error: {exc}")
        finally:
            upstream_request_duration.labels(gateway=GATEWAY, operation=operation).observe(
                time.perf_counter() - start
            )
            upstream_requests_total.labels(gateway=GATEWAY, operation=operation, outcome=outcome).inc()

    async def fetch_recent_issues(
        self, window: str = "7d", query: str = "", sort: str = "date",
    ) -> GatewayResult[list[RawIssue]]:
        """Issues seen within ``window``, newest first."""
        params: dict = {"statsPeriod": window, "limit": self._config.issue_limit, "sort": sort}
        if query:
            params["query"] = query

        result = await self._get_json(
            "issues", f"/projects/{self._config.org}/{self._config.project}/issues/", params,
        )
        if not result.ok:
            return GatewayResult.failure(result.error)
        if not isinstance(result.value, list):
            return GatewayResult.failure("issues payload was not a list")

        issues = parse_issues(result.value)
        self._debug("Received %d issues for window=%s", len(issues), window)
        return GatewayResult.success(issues)

    async def fetch_recent_events(
        self, window: str = "24h", limit: int = 20, query: str = "",
    ) -> GatewayResult[list[RawEvent]]:
        """Raw events within ``window``, capped at ``limit``."""
        result = await self._get_json(
            "events",
            f"/projects/{self._config.org}/{self._config.project}/events/",
            {"query": query, "statsPeriod": window, "limit": limit},
        )
        if not result.ok:
            return GatewayResult.failure(result.error)
        if not isinstance(result.value, list):
            return GatewayResult.failure("events payload was not a list")

        events = parse_events(result.value)[:limit]
        self._debug("Received %d events for window=%s", len(events), window)
        return GatewayResult.success(events)
