"""Tests for the trigger endpoints."""
from __future__ import annotations

from datetime import timedelta


def test_health_endpoint(client) -> None:
    """Ensure the health check returns the expected response."""
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_requires_token(client) -> None:
    assert client.get("/api/triggers").status_code == 401


def test_rejects_non_numeric_identity(client, auth_headers) -> None:
    response = client.get("/api/triggers", headers=auth_headers("someone"))
    assert response.status_code == 401
    assert response.get_json()["error"]["code"] == "UNAUTHORIZED"


def test_create_trigger_applies_defaults(client, auth_headers) -> None:
    response = client.post("/api/triggers", json={"title": "Stuck in traffic"}, headers=auth_headers())
    assert response.status_code == 201
    body = response.get_json()
    assert body["title"] == "Stuck in traffic"
    assert body["emotion_category"] == "other"
    assert body["intensity"] == 5
    assert body["recovery_minutes"] is None
    assert body["context_tags"] == []
    assert body["user_id"] == 1
    assert body["occurred_at"]
    assert "deleted_at" not in body


def test_create_trigger_full_body(client, auth_headers) -> None:
    payload = {
        "title": "<b>Meeting</b> ran over",
        "emotion_category": "frustration",
        "intensity": 7,
        "context_tags": ["work"],
        "people_involved": ["manager"],
        "recovery_minutes": 0,
        "occurred_at": "2026-01-05T10:00:00+02:00",
        "unknown_field": "ignored",
    }
    response = client.post("/api/triggers", json=payload, headers=auth_headers())
    assert response.status_code == 201
    body = response.get_json()
    assert body["title"] == "Meeting ran over"
    assert body["recovery_minutes"] == 0
    assert body["context_tags"] == ["work"]
    assert body["occurred_at"].startswith("2026-01-05T08:00:00")


def test_create_trigger_validation(client, auth_headers) -> None:
    headers = auth_headers()
    cases = [
        ({}, "title"),
        ({"title": "<i></i>"}, "title"),
        ({"title": "x", "intensity": 11}, "intensity"),
        ({"title": "x", "intensity": 0}, "intensity"),
        ({"title": "x", "intensity": 4.5}, "intensity"),
        ({"title": "x", "emotion_category": "boredom"}, "emotion_category"),
        ({"title": "x", "recovery_minutes": -1}, "recovery_minutes"),
    ]
    for payload, field in cases:
        response = client.post("/api/triggers", json=payload, headers=headers)
        assert response.status_code == 400, payload
        error = response.get_json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert field in error["fields"], payload


def test_list_triggers_newest_first_and_paginated(client, auth_headers, add_trigger) -> None:
    add_trigger(title="old", ago=timedelta(days=3))
    add_trigger(title="new", ago=timedelta(hours=1))
    add_trigger(title="middle", ago=timedelta(days=1))

    response = client.get("/api/triggers", headers=auth_headers())
    assert response.status_code == 200
    assert [t["title"] for t in response.get_json()["data"]] == ["new", "middle", "old"]

    response = client.get("/api/triggers?limit=1&offset=1", headers=auth_headers())
    assert [t["title"] for t in response.get_json()["data"]] == ["middle"]


def test_list_triggers_rejects_bad_limit(client, auth_headers) -> None:
    response = client.get("/api/triggers?limit=lots", headers=auth_headers())
    assert response.status_code == 400


def test_users_only_see_their_own_triggers(client, auth_headers, add_trigger) -> None:
    mine = add_trigger(user_id=1, title="mine")
    theirs = add_trigger(user_id=2, title="theirs")

    response = client.get("/api/triggers", headers=auth_headers(1))
    assert [t["title"] for t in response.get_json()["data"]] == ["mine"]

    assert client.get(f"/api/triggers/{mine.id}", headers=auth_headers(1)).status_code == 200
    assert client.get(f"/api/triggers/{theirs.id}", headers=auth_headers(1)).status_code == 404
    assert client.delete(f"/api/triggers/{theirs.id}", headers=auth_headers(1)).status_code == 404


def test_update_trigger(client, auth_headers, add_trigger) -> None:
    trigger = add_trigger(title="Loud neighbours", intensity=4)
    response = client.patch(
        f"/api/triggers/{trigger.id}",
        json={"intensity": 8, "recovery_minutes": 25, "occurred_at": None},
        headers=auth_headers(),
    )
    assert response.status_code == 200
    body = response.get_json()
    assert body["intensity"] == 8
    assert body["recovery_minutes"] == 25
    assert body["title"] == "Loud neighbours"
    assert body["emotion_category"] == "other"


def test_update_trigger_requires_known_fields(client, auth_headers, add_trigger) -> None:
    trigger = add_trigger()
    response = client.patch(f"/api/triggers/{trigger.id}", json={"colour": "red"}, headers=auth_headers())
    assert response.status_code == 400
    assert response.get_json()["error"]["message"] == "No valid fields to update."


def test_update_trigger_validates_values(client, auth_headers, add_trigger) -> None:
    trigger = add_trigger()
    response = client.patch(f"/api/triggers/{trigger.id}", json={"intensity": 12}, headers=auth_headers())
    assert response.status_code == 400


def test_update_trigger_unknown_cluster(client, auth_headers, add_trigger) -> None:
    trigger = add_trigger()
    response = client.patch(f"/api/triggers/{trigger.id}", json={"cluster_id": 999}, headers=auth_headers())
    assert response.status_code == 404


def test_delete_trigger_is_soft(client, auth_headers, add_trigger) -> None:
    trigger = add_trigger()
    response = client.delete(f"/api/triggers/{trigger.id}", headers=auth_headers())
    assert response.status_code == 200
    assert response.get_json() == {"ok": True}

    assert client.get(f"/api/triggers/{trigger.id}", headers=auth_headers()).status_code == 404
    assert client.get("/api/triggers", headers=auth_headers()).get_json()["data"] == []
