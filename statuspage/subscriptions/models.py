"""Data models for status notification subscriptions."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import Field, field_validator

from statuspage.base import CamelModel


class NotificationType(str, Enum):
    INCIDENT = "incident"
    MAINTENANCE = "maintenance"
    RESOLUTION = "resolution"


ALL_NOTIFICATION_TYPES = list(NotificationType)


class Subscription(CamelModel):
    id: str = Field(default_factory=lambda: uuid4().hex[:12])
    email: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    # No confirmation mail is sent, so subscriptions are active immediately.
    verified: bool = True
    types: list[NotificationType] = Field(default_factory=lambda: list(ALL_NOTIFICATION_TYPES))


class SubscribeRequest(CamelModel):
    email: str = ""
    types: list[NotificationType] | None = None

    @field_validator("email", mode="before")
    @classmethod
    def _missing_email_is_blank(cls, v: Any) -> Any:
        return "" if v is None else v
