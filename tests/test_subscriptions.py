"""Tests for the flat-file subscription store and its endpoints."""

import json

import pytest
from fastapi.testclient import TestClient

from fakes import FakeErrorTracking, FakeMobileHealth
from statuspage.main import create_app
from statuspage.subscriptions.models import NotificationType
from statuspage.subscriptions.store import InvalidEmailError, SubscriptionStore, normalize_email


@pytest.fixture
def store(tmp_path):
    return SubscriptionStore(tmp_path / "data" / "subscriptions.json")


class TestStore:
    def test_add_normalizes_and_persists(self, store, tmp_path):
        subscription, created = store.add("  Ops@Example.COM ")

        assert created
        assert subscription.email == "ops@example.com"
        assert subscription.verified
        assert subscription.types == list(NotificationType)
        saved = json.loads((tmp_path / "data" / "subscriptions.json").read_text())
        assert saved[0]["email"] == "ops@example.com"
        assert "createdAt" in saved[0]

    def test_duplicate_is_not_added_twice(self, store):
        store.add("ops@example.com")
        _, created = store.add("OPS@example.com")

        assert not created
        assert len(store.list()) == 1

    def test_custom_types(self, store):
        subscription, _ = store.add("a@b.io", [NotificationType.MAINTENANCE, NotificationType.MAINTENANCE])
        assert subscription.types == [NotificationType.MAINTENANCE]

    def test_remove(self, store):
        store.add("a@b.io")

        assert store.remove("A@B.io")
        assert not store.remove("a@b.io")
        assert store.list() == []

    @pytest.mark.parametrize("email", ["", "nope", "a@b", "a b@c.io"])
    def test_invalid_email_rejected(self, email):
        with pytest.raises(InvalidEmailError):
            normalize_email(email)

    def test_missing_file_reads_empty(self, store):
        assert store.list() == []


class TestEndpoints:
    @pytest.fixture
    def client(self, settings):
        app = create_app(settings, error_tracking=FakeErrorTracking(), mobile_health=FakeMobileHealth())
        with TestClient(app) as client:
            yield client

    def test_subscribe(self, client):
        resp = client.post("/api/subscribe", json={"email": "ops@example.com"})

        assert resp.status_code == 201
        assert resp.json()["subscription"]["email"] == "ops@example.com"

    def test_subscribe_twice(self, client):
        client.post("/api/subscribe", json={"email": "ops@example.com"})
        resp = client.post("/api/subscribe", json={"email": "ops@example.com"})

        assert resp.status_code == 200
        assert resp.json()["message"] == "Email already subscribed"

    def test_subscribe_invalid_email(self, client):
        resp = client.post("/api/subscribe", json={"email": "not-an-email"})
        assert resp.status_code == 400

    def test_unsubscribe(self, client):
        client.post("/api/subscribe", json={"email": "ops@example.com"})

        assert client.delete("/api/subscribe", params={"email": "ops@example.com"}).status_code == 200
        assert client.delete("/api/subscribe", params={"email": "ops@example.com"}).status_code == 404

    def test_subscribe_without_email(self, client):
        resp = client.post("/api/subscribe", json={"email": None})

        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid email address"

    def test_unsubscribe_without_email(self, client):
        resp = client.delete("/api/subscribe")

        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid email address"


def test_unwritable_store_returns_500(settings, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = SubscriptionStore(blocker / "subscriptions.json")
    app = create_app(
        settings, error_tracking=FakeErrorTracking(), mobile_health=FakeMobileHealth(), subscriptions=store,
    )

    with TestClient(app) as client:
        resp = client.post("/api/subscribe", json={"email": "ops@example.com"})

    assert resp.status_code == 500
    assert resp.json()["error"] == "Failed to save subscription"
