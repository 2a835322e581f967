"""Prometheus metrics definitions."""

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest

http_request_duration = Histogram(
    "http_request_duration_seconds",
    "Duration of HTTP requests in seconds",
    labelnames=["method", "endpoint", "status_code"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

http_requests_total = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    labelnames=["method", "endpoint", "status_code"],
)

upstream_request_duration = Histogram(
    "upstream_request_duration_seconds",
    "Duration of outbound calls to upstream status sources",
    labelnames=["gateway", "operation"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

upstream_requests_total = Counter(
    "upstream_requests_total",
    "Outbound calls to upstream status sources by outcome",
    labelnames=["gateway", "operation", "outcome"],
)

snapshot_fallbacks_total = Counter(
    "snapshot_fallbacks_total",
    "Snapshot sections served from substituted data",
    labelnames=["section", "source"],
)

snapshot_failures_total = Counter(
    "snapshot_failures_total",
    "Snapshot requests answered with the all-operational fallback payload",
)

active_incidents_gauge = Gauge(
    "status_active_incidents",
    "Open incidents in the most recent snapshot",
)

service_state_gauge = Gauge(
    "status_service_state",
    "Service state in the most recent snapshot (0=operational, 1=degraded, 2=down)",
    labelnames=["service"],
)


def get_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST
