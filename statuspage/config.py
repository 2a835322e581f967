"""Service configuration — upstream endpoints, windows, and cache tuning."""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel
from pydantic_settings import BaseSettings


class ErrorTrackingConfig(BaseModel):
    """Connection details for the error-tracking API."""

    model_config = {"frozen": True}

    org: str
    project: str
    auth_token: str = ""
    api_url: str = "https://sentry.io/api/0"
    timeout_seconds: float = 5.0
    issue_limit: int = 50
    debug: bool = False

    @property
    def configured(self) -> bool:
        return bool(self.auth_token)


class MobileHealthConfig(BaseModel):
    """Endpoints used to judge the mobile backend's health."""

    model_config = {"frozen": True}

    status_url: str = "http://localhost:8081/status"
    api_url: str = "http://localhost:5000/api"
    storage_ping_url: str = "https://api.cloudinary.com/v1_1/demo/ping"
    timeout_seconds: float = 5.0


class Settings(BaseSettings):
    model_config = {"env_prefix": "STATUSPAGE_"}

    # Error tracking
    sentry_org: str = "coding-factory-classrooms"
    sentry_project: str = "react-native"
    sentry_auth_token: str = ""
    sentry_api_url: str = "https://sentry.io/api/0"
    sentry_debug: bool = False
    issue_window: str = "7d"
    issue_limit: int = 50
    event_window: str = "24h"
    event_limit: int = 20

    # Mobile backend
    mobile_status_url: str = "http://localhost:8081/status"
    mobile_api_url: str = "http://localhost:5000/api"
    storage_ping_url: str = "https://api.cloudinary.com/v1_1/demo/ping"
    request_timeout_seconds: float = 5.0
    uptime_days: int = 30
    response_time_hours: int = 24

    # Snapshot shaping
    incident_limit: int = 20
    breadcrumb_limit: int = 10
    synthetic_seed: int | None = None

    # HTTP caching
    cache_max_age: int = 15
    cache_stale_while_revalidate: int = 30
    fallback_cache_max_age: int = 5
    fallback_cache_stale_while_revalidate: int = 15

    # Subscriptions
    subscriptions_file: str = "data/subscriptions.json"

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Telemetry
    otlp_endpoint: str = ""
    log_level: str = "INFO"

    def error_tracking(self) -> ErrorTrackingConfig:
        return ErrorTrackingConfig(
            org=self.sentry_org,
            project=self.sentry_project,
            auth_token=self.sentry_auth_token,
            api_url=self.sentry_api_url.rstrip("/"),
            timeout_seconds=self.request_timeout_seconds,
            issue_limit=self.issue_limit,
            debug=self.sentry_debug,
        )

    def mobile_health(self) -> MobileHealthConfig:
        return MobileHealthConfig(
            status_url=self.mobile_status_url.rstrip("/"),
            api_url=self.mobile_api_url.rstrip("/"),
            storage_ping_url=self.storage_ping_url,
            timeout_seconds=self.request_timeout_seconds,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
