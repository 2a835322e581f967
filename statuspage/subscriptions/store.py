"""Flat-file subscription store — one JSON document holding every subscription."""

from __future__ import annotations

import json
import logging
import re
import threading
from pathlib import Path

from pydantic import ValidationError

from statuspage.subscriptions.models import NotificationType, Subscription

logger = logging.getLogger("statuspage.subscriptions")

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class SubscriptionStoreError(Exception):
    """The subscription file could not be read or written."""


class InvalidEmailError(ValueError):
    pass


def normalize_email(email: str) -> str:
    normalized = (email or "").strip().lower()
    if not _EMAIL_RE.match(normalized):
        raise InvalidEmailError(f"Invalid email address: {email!r}")
    return normalized


class SubscriptionStore:
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> list[Subscription]:
        if not self._path.exists():
            return []
        try:
            raw = json.loads(self._path.read_text())
        except (OSError, ValueError) as exc:
            raise SubscriptionStoreError(f"Failed to read {self._path}") from exc

        subscriptions = []
        for record in raw if isinstance(raw, list) else []:
            try:
                subscriptions.append(Subscription.model_validate(record))
            except ValidationError:
                logger.warning("Skipping malformed subscription record: %s", record)
        return subscriptions

    def _save(self, subscriptions: list[Subscription]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps([s.to_payload() for s in subscriptions], indent=2))
        except OSError as exc:
            raise SubscriptionStoreError(f"Failed to write {self._path}") from exc

    def list(self) -> list[Subscription]:
        with self._lock:
            return self._load()

    def add(
        self, email: str, types: list[NotificationType] | None = None,
    ) -> tuple[Subscription, bool]:
        """Subscribe an email. Returns the subscription and whether it was newly created."""
        normalized = normalize_email(email)
        with self._lock:
            subscriptions = self._load()
            for existing in subscriptions:
                if existing.email == normalized:
                    return existing, False

            subscription = Subscription(email=normalized)
            if types:
                subscription.types = list(dict.fromkeys(types))
            subscriptions.append(subscription)
            self._save(subscriptions)

        logger.info("New subscription: id=%s", subscription.id)
        return subscription, True

    def remove(self, email: str) -> bool:
        normalized = normalize_email(email)
        with self._lock:
            subscriptions = self._load()
            remaining = [s for s in subscriptions if s.email != normalized]
            if len(remaining) == len(subscriptions):
                return False
            self._save(remaining)

        logger.info("Subscription removed")
        return True
