"""Data models for raw error-tracking records."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, field_validator


def parse_timestamp(raw: Any) -> datetime | None:
    """Parse an upstream timestamp, returning None when it is missing or unreadable."""
    if isinstance(raw, datetime):
        return (raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)).astimezone(timezone.utc)
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        parsed = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


# ── Tags ──────────────────────────────────────────────────────────


class ServiceTag(BaseModel):
    key: Literal["service"]
    value: str


class ComponentTag(BaseModel):
    key: Literal["component"]
    value: str


class IncidentSeverityTag(BaseModel):
    key: Literal["incident_severity"]
    value: str


class IncidentTypeTag(BaseModel):
    key: Literal["incident_type"]
    value: str


class UnrecognizedTag(BaseModel):
    """Any tag the status logic does not read. Kept for debugging display."""

    key: str
    value: str = ""


IssueTag = Annotated[
    Union[ServiceTag, ComponentTag, IncidentSeverityTag, IncidentTypeTag, UnrecognizedTag],
    Field(union_mode="left_to_right"),
]


def normalize_tags(raw: Any) -> list[dict[str, str]]:
    """Coerce the shapes upstream uses for tags into a list of key/value dicts.

    Accepts ``[{"key": ..., "value": ...}]``, ``[["key", "value"]]`` and plain
    mappings. Anything else yields an empty list.
    """
    if isinstance(raw, dict):
        items: list[Any] = [{"key": k, "value": v} for k, v in raw.items()]
    elif isinstance(raw, list):
        items = raw
    else:
        return []

    tags = []
    for item in items:
        if isinstance(item, dict) and item.get("key"):
            key, value = item.get("key"), item.get("value")
        elif isinstance(item, (list, tuple)) and len(item) == 2 and item[0]:
            key, value = item
        else:
            continue
        tags.append({"key": str(key), "value": "" if value is None else str(value)})
    return tags


# ── Issues ────────────────────────────────────────────────────────


class RawIssue(BaseModel):
    """A single issue from the error-tracking issue feed."""

    id: str
    title: str = ""
    culprit: str = ""
    status: str = ""
    level: str = "error"
    first_seen: datetime | None = Field(alias="firstSeen", default=None)
    last_seen: datetime | None = Field(alias="lastSeen", default=None)
    count: int = 0
    user_count: int = Field(alias="userCount", default=0)
    tags: list[IssueTag] = []
    permalink: str | None = None
    short_id: str | None = Field(alias="shortId", default=None)
    platform: str | None = None

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str:
        if v is None or v == "":
            raise ValueError("issue id is required")
        return str(v)

    @field_validator("title", "culprit", "status", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("level", mode="before")
    @classmethod
    def _coerce_level(cls, v: Any) -> str:
        return str(v).lower() if v else "error"

    @field_validator("first_seen", "last_seen", mode="before")
    @classmethod
    def _coerce_ts(cls, v: Any) -> datetime | None:
        return parse_timestamp(v)

    @field_validator("count", "user_count", mode="before")
    @classmethod
    def _coerce_count(cls, v: Any) -> int:
        try:
            return max(int(v), 0)
        except (TypeError, ValueError):
            return 0

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, v: Any) -> list[dict[str, str]]:
        return normalize_tags(v)

    def tag_values(self, tag_type: type[BaseModel]) -> list[str]:
        return [t.value for t in self.tags if isinstance(t, tag_type)]


# ── Events ────────────────────────────────────────────────────────


class EventContexts(BaseModel):
    device: dict | None = None
    os: dict | None = None
    app: dict | None = None

    model_config = {"extra": "ignore"}

    @field_validator("device", "os", "app", mode="before")
    @classmethod
    def _only_mappings(cls, v: Any) -> dict | None:
        return v if isinstance(v, dict) else None


class RawEvent(BaseModel):
    """A single event from the error-tracking event feed."""

    id: str
    title: str = ""
    message: str = ""
    level: str = "error"
    date_created: datetime | None = Field(alias="dateCreated", default=None)
    user: dict | None = None
    contexts: EventContexts = EventContexts()
    entries: list[dict] = []
    tags: list[IssueTag] = []

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str:
        if v is None or v == "":
            raise ValueError("event id is required")
        return str(v)

    @field_validator("title", "message", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("level", mode="before")
    @classmethod
    def _coerce_level(cls, v: Any) -> str:
        return str(v).lower() if v else "error"

    @field_validator("date_created", mode="before")
    @classmethod
    def _coerce_ts(cls, v: Any) -> datetime | None:
        return parse_timestamp(v)

    @field_validator("user", mode="before")
    @classmethod
    def _coerce_user(cls, v: Any) -> dict | None:
        return v if isinstance(v, dict) else None

    @field_validator("contexts", mode="before")
    @classmethod
    def _coerce_contexts(cls, v: Any) -> dict:
        return v if isinstance(v, dict) else {}

    @field_validator("entries", mode="before")
    @classmethod
    def _coerce_entries(cls, v: Any) -> list[dict]:
        if not isinstance(v, list):
            return []
        return [e for e in v if isinstance(e, dict)]

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, v: Any) -> list[dict[str, str]]:
        return normalize_tags(v)
