"""Tests for the score endpoints."""
from __future__ import annotations

from datetime import timedelta

from trigger_tracker import db
from trigger_tracker.models import ScoreSnapshotRecord
from trigger_tracker.util.timeutil import utcnow


def test_current_scores_without_triggers(client, auth_headers) -> None:
    response = client.get("/api/scores/current", headers=auth_headers())
    assert response.status_code == 200
    body = response.get_json()
    assert body["stability_score"] == 100
    assert body["reactivity_index"] == 100
    assert body["trigger_density_score"] == 100
    assert body["recovery_speed_score"] == 50
    assert body["composite_score"] == 90.0
    assert body["dominant_emotion"] is None
    assert body["period_days"] == 30
    assert body["volatility"]["trend"] == "stable"


def test_current_scores_use_window_and_owner(client, auth_headers, add_trigger) -> None:
    add_trigger(emotion_category="anger", intensity=9, ago=timedelta(hours=2))
    add_trigger(emotion_category="calm", intensity=3, ago=timedelta(days=1))
    add_trigger(emotion_category="fear", intensity=10, ago=timedelta(days=20))
    add_trigger(user_id=2, emotion_category="fear", intensity=10, ago=timedelta(hours=1))

    response = client.get("/api/scores/current?days=7", headers=auth_headers())
    body = response.get_json()
    assert body["trigger_count"] == 2
    assert body["avg_intensity"] == 6.0
    assert body["stability_score"] == 52.0
    assert body["trigger_density_score"] == 94.29
    # rows are scored oldest first, so the tie goes to the earlier "calm"
    assert body["dominant_emotion"] == "calm"
    assert body["volatility"] == {"trend": "declining", "delta": 6.0, "recent_avg": 6.0, "prior_avg": 0}


def test_current_scores_ignore_deleted_triggers(client, auth_headers, add_trigger) -> None:
    trigger = add_trigger(intensity=10)
    client.delete(f"/api/triggers/{trigger.id}", headers=auth_headers())
    body = client.get("/api/scores/current", headers=auth_headers()).get_json()
    assert body["trigger_count"] == 0


def test_current_scores_follow_configured_volatility(app, client, auth_headers, add_trigger) -> None:
    app.config["VOLATILITY_THRESHOLD"] = 10
    add_trigger(intensity=9, ago=timedelta(hours=1))
    body = client.get("/api/scores/current", headers=auth_headers()).get_json()
    assert body["volatility"]["trend"] == "stable"


def test_save_snapshot_and_history(client, auth_headers, add_trigger) -> None:
    add_trigger(intensity=6, recovery_minutes=60, ago=timedelta(hours=3))

    response = client.post("/api/scores/snapshots", json={"days": 7}, headers=auth_headers())
    assert response.status_code == 201
    record = response.get_json()
    assert record["period_days"] == 7
    assert record["trigger_count"] == 1
    assert record["recovery_speed_score"] == 50.0
    assert record["volatility_trend"] == "declining"

    history = client.get("/api/scores/history", headers=auth_headers()).get_json()
    assert [h["id"] for h in history] == [record["id"]]
    assert client.get("/api/scores/history", headers=auth_headers(2)).get_json() == []


def test_save_snapshot_defaults_to_configured_period(client, auth_headers) -> None:
    response = client.post("/api/scores/snapshots", headers=auth_headers())
    assert response.status_code == 201
    assert response.get_json()["period_days"] == 30


def test_save_snapshot_rejects_bad_window(client, auth_headers) -> None:
    response = client.post("/api/scores/snapshots", json={"days": 0}, headers=auth_headers())
    assert response.status_code == 400
    assert "days" in response.get_json()["error"]["fields"]


def test_history_is_limited_to_months(client, auth_headers) -> None:
    now = utcnow()
    for age_days in (400, 40, 2):
        db.session.add(ScoreSnapshotRecord(
            user_id=1,
            period_start=now - timedelta(days=age_days + 7),
            period_end=now - timedelta(days=age_days),
            period_days=7,
            stability_score=70,
            reactivity_index=60,
            trigger_density_score=80,
            recovery_speed_score=50,
            composite_score=66,
            volatility_trend="stable",
            volatility_delta=0,
            trigger_count=3,
            avg_intensity=5,
            dominant_emotion="anger",
            created_at=now - timedelta(days=age_days),
        ))
    db.session.commit()

    history = client.get("/api/scores/history?months=6", headers=auth_headers()).get_json()
    assert len(history) == 2
    assert history[0]["created_at"] < history[1]["created_at"]

    history = client.get("/api/scores/history?months=1", headers=auth_headers()).get_json()
    assert len(history) == 1


def test_heatmap(client, auth_headers, add_trigger) -> None:
    add_trigger(emotion_category="anger", intensity=8, ago=timedelta(days=2))
    add_trigger(emotion_category="anger", intensity=4, ago=timedelta(days=2))
    add_trigger(emotion_category="joy", intensity=2, ago=timedelta(minutes=5))
    add_trigger(emotion_category="joy", intensity=2, ago=timedelta(days=100))

    body = client.get("/api/scores/heatmap?days=90", headers=auth_headers()).get_json()
    assert sum(day["count"] for day in body["days"]) == 3
    assert body["categories"] == [
        {"emotion_category": "anger", "count": 2},
        {"emotion_category": "joy", "count": 1},
    ]


def test_window_out_of_range_is_rejected_everywhere(client, auth_headers) -> None:
    headers = auth_headers()
    responses = [
        client.get("/api/scores/current?days=1000", headers=headers),
        client.get("/api/scores/current?days=0", headers=headers),
        client.get("/api/scores/heatmap?days=366", headers=headers),
        client.post("/api/scores/snapshots", json={"days": 1000}, headers=headers),
    ]
    for response in responses:
        assert response.status_code == 400
        assert "days" in response.get_json()["error"]["fields"]


def test_window_at_upper_bound_is_accepted(client, auth_headers) -> None:
    response = client.get("/api/scores/current?days=365", headers=auth_headers())
    assert response.status_code == 200
    assert response.get_json()["period_days"] == 365
