"""Mobile health gateway — backend health and history from the mobile status service.

``fetch_system_status`` asks the remote status endpoint first; when that
fails it probes the backend directly (API liveness, a data-listing call and
the storage provider's ping) in parallel and merges the probe results.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any

import httpx
from pydantic import ValidationError

from statuspage.aggregation.aggregator import worst_of
from statuspage.aggregation.models import OverallStatus, ServiceState
from statuspage.config import MobileHealthConfig
from statuspage.gateways.models import HealthReport, ResponseTimeEntry, ServiceHealth, UptimeEntry
from statuspage.gateways.result import DataSource, GatewayResult
from statuspage.ingestion.models import parse_timestamp
from statuspage.telemetry.metrics import upstream_request_duration, upstream_requests_total

logger = logging.getLogger("statuspage.gateways.mobile_health")

GATEWAY = "mobile_health"

_REMOTE_STATES = {
    "healthy": ServiceState.OPERATIONAL,
    "operational": ServiceState.OPERATIONAL,
    "degraded": ServiceState.DEGRADED,
    "down": ServiceState.DOWN,
}


def _remote_state(raw: Any) -> ServiceState:
    return _REMOTE_STATES.get(str(raw).lower(), ServiceState.OPERATIONAL)


def merge_probe_states(states: list[ServiceState]) -> ServiceState:
    """All operational → operational; any down → down; otherwise degraded."""
    if all(s == ServiceState.OPERATIONAL for s in states):
        return ServiceState.OPERATIONAL
    return worst_of(states)


class MobileHealthGateway:
    def __init__(self, config: MobileHealthConfig, http: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=config.timeout_seconds)

    async def close(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _get_json(self, operation: str, url: str, params: dict | None = None) -> GatewayResult[Any]:
        start = time.perf_counter()
        outcome = "error"
        try:
            resp = await self._http.get(url, params=params, timeout=self._config.timeout_seconds)
            if not resp.is_success:
                outcome = f"http_{resp.status_code}"
                return GatewayResult.failure(f"HTTP {resp.status_code}")
            body = resp.json()
            outcome = "success"
            return GatewayResult.success(body)
        except httpx.TimeoutException:
            outcome = "timeout"
            return GatewayResult.failure("timeout")
        except httpx.HTTPError as exc:
            return GatewayResult.failure(f"network error: {exc}")
        except ValueError:
            outcome = "invalid_json"
            return GatewayResult.failure("invalid JSON body")
        except Exception as exc:
            logger.exception("Unexpected failure calling mobile status service %s", operation)
            return GatewayResult.failure(f"unexpected error: {exc}")
        finally:
            upstream_request_duration.labels(gateway=GATEWAY, operation=operation).observe(
                time.perf_counter() - start
            )
            upstream_requests_total.labels(gateway=GATEWAY, operation=operation, outcome=outcome).inc()

    # ── System status ─────────────────────────────────────────────

    async def fetch_system_status(self) -> GatewayResult[HealthReport]:
        try:
            result = await self._get_json("status", f"{self._config.status_url}/api/status")
            if result.ok and isinstance(result.value, dict):
                return GatewayResult.success(self._transform_remote_status(result.value))

            logger.warning(
                "Mobile status endpoint unavailable (%s), falling back to direct health probes",
                result.error or "unexpected payload",
            )
            return GatewayResult.success(await self.probe_services(), DataSource.PROBED)
        except Exception as exc:
            logger.exception("Mobile health check failed")
            return GatewayResult.failure(f"unexpected error: {exc}")

    def _transform_remote_status(self, data: dict) -> HealthReport:
        now = datetime.now(timezone.utc)
        updated = parse_timestamp(data.get("lastUpdated")) or now

        services = {}
        raw_services = data.get("services")
        for name, service in (raw_services if isinstance(raw_services, dict) else {}).items():
            if not isinstance(service, dict):
                continue
            response_time = service.get("responseTime")
            services[str(name)] = ServiceHealth(
                status=_remote_state(service.get("status")),
                last_checked=parse_timestamp(service.get("lastChecked")) or updated,
                response_time=response_time if isinstance(response_time, (int, float)) else None,
            )

        return HealthReport(
            overall=OverallStatus(status=_remote_state(data.get("status")), last_checked=updated),
            services=services,
            last_updated=updated,
        )

    async def _probe(self, url: str, params: dict | None, unreachable: ServiceState) -> ServiceHealth:
        """One health probe. Non-2xx reads as degraded, no answer as ``unreachable``."""
        start = time.perf_counter()
        try:
            resp = await self._http.get(url, params=params, timeout=self._config.timeout_seconds)
            status = ServiceState.OPERATIONAL if resp.is_success else ServiceState.DEGRADED
        except httpx.HTTPError as exc:
            logger.warning("Health probe %s failed: %s", url, exc)
            status = unreachable
        elapsed_ms = (time.perf_counter() - start) * 1000
        return ServiceHealth(
            status=status,
            last_checked=datetime.now(timezone.utc),
            response_time=round(elapsed_ms),
        )

    async def probe_services(self) -> HealthReport:
        api_url = self._config.api_url
        probes = {
            "api": self._probe(f"{api_url}/health", None, ServiceState.DOWN),
            "database": self._probe(f"{api_url}/posts", {"limit": 1}, ServiceState.DOWN),
            # Storage is not critical to the app; unreachable only degrades it.
            "storage": self._probe(self._config.storage_ping_url, None, ServiceState.DEGRADED),
        }
        results = await asyncio.gather(*probes.values(), return_exceptions=True)

        now = datetime.now(timezone.utc)
        services = {}
        for name, result in zip(probes, results):
            if isinstance(result, BaseException):
                logger.error("Health probe %s raised: %r", name, result)
                result = ServiceHealth(status=ServiceState.DOWN, last_checked=now, response_time=0)
            services[name] = result

        overall = merge_probe_states([s.status for s in services.values()])
        logger.info(
            "Direct health probes: overall=%s %s",
            overall.value,
            " ".join(f"{name}={s.status.value}" for name, s in services.items()),
        )
        return HealthReport(
            overall=OverallStatus(status=overall, last_checked=now),
            services=services,
            last_updated=now,
        )

    # ── History ───────────────────────────────────────────────────

    async def fetch_uptime_history(self, days: int = 30) -> GatewayResult[list[UptimeEntry]]:
        result = await self._get_json(
            "uptime_history", f"{self._config.status_url}/api/uptime-history", {"days": days},
        )
        return self._parse_history(result, UptimeEntry, "uptime history")

    async def fetch_response_time_history(self, hours: int = 24) -> GatewayResult[list[ResponseTimeEntry]]:
        result = await self._get_json(
            "response_time_history", f"{self._config.status_url}/api/response-time-history", {"hours": hours},
        )
        return self._parse_history(result, ResponseTimeEntry, "response time history")

    def _parse_history(self, result: GatewayResult[Any], model: type, label: str) -> GatewayResult:
        if not result.ok:
            logger.warning("Failed to fetch %s from mobile status service: %s", label, result.error)
            return GatewayResult.failure(result.error)

        raw = result.value.get("history") if isinstance(result.value, dict) else None
        if not isinstance(raw, list):
            return GatewayResult.failure(f"{label} payload had no history list")

        entries = []
        for item in raw:
            try:
                entries.append(model.model_validate(item))
            except ValidationError:
                logger.warning("Skipping malformed %s entry: %s", label, item)

        if not entries:
            return GatewayResult.failure(f"{label} was empty")
        return GatewayResult.success(entries)
