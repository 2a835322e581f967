"""Shared fixtures for the status page tests."""

from __future__ import annotations

import pytest

from statuspage.config import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        sentry_auth_token="",
        synthetic_seed=7,
        uptime_days=7,
        response_time_hours=6,
        subscriptions_file=str(tmp_path / "subscriptions.json"),
        otlp_endpoint="",
    )
