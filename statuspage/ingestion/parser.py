"""Turn decoded error-tracking payloads into RawIssue / RawEvent lists."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from statuspage.ingestion.models import RawEvent, RawIssue

logger = logging.getLogger("statuspage.ingestion")


def parse_issues(payload: Any) -> list[RawIssue]:
    """Parse an issue-list payload. Non-list payloads yield an empty list."""
    if not isinstance(payload, list):
        logger.warning("Issues payload is not a list: %s", type(payload).__name__)
        return []

    issues = []
    for record in payload:
        if not isinstance(record, dict):
            continue
        try:
            issues.append(RawIssue.model_validate(record))
        except ValidationError:
            logger.warning("Skipping malformed issue record: id=%s", record.get("id"))
    return issues


def parse_events(payload: Any) -> list[RawEvent]:
    """Parse an event-list payload. Non-list payloads yield an empty list."""
    if not isinstance(payload, list):
        logger.warning("Events payload is not a list: %s", type(payload).__name__)
        return []

    events = []
    for record in payload:
        if not isinstance(record, dict):
            continue
        try:
            events.append(RawEvent.model_validate(record))
        except ValidationError:
            logger.warning("Skipping malformed event record: id=%s", record.get("id"))
    return events
