"""Score snapshots backed by the database.

Loads a user's triggers for a look-back window, runs them through the
pure scoring engine and, when asked, stores the result as a
``ScoreSnapshotRecord``. The evaluation instant ``now`` is passed in
by the caller so a request computes every score against one clock
reading.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import List

from dateutil.relativedelta import relativedelta
from flask import current_app

from trigger_tracker import db
from trigger_tracker.models import ScoreSnapshotRecord
from trigger_tracker.services import trigger_service
from trigger_tracker.services.scoring import (
    ScoreSnapshot,
    VolatilityConfig,
    build_score_snapshot,
    daily_heatmap,
    emotion_breakdown,
)

logger = logging.getLogger(__name__)


def volatility_config() -> VolatilityConfig:
    """Build the trend detector settings from the app configuration."""
    return VolatilityConfig(
        window_days=int(current_app.config["VOLATILITY_WINDOW_DAYS"]),
        threshold=float(current_app.config["VOLATILITY_THRESHOLD"]),
    )


def compute_snapshot(user_id: int, days: int, now: datetime) -> ScoreSnapshot:
    """Score the user's triggers from the last ``days`` days up to ``now``."""
    triggers = trigger_service.triggers_in_window(user_id, now - timedelta(days=days), now)
    events = [t.to_event() for t in triggers]
    return build_score_snapshot(events, days, now, volatility_config())


def save_snapshot(user_id: int, days: int, now: datetime) -> ScoreSnapshotRecord:
    """Compute a snapshot and keep it in the user's score history."""
    snapshot = compute_snapshot(user_id, days, now)
    record = ScoreSnapshotRecord(
        user_id=user_id,
        period_start=now - timedelta(days=days),
        period_end=now,
        period_days=days,
        stability_score=snapshot.stability,
        reactivity_index=snapshot.reactivity,
        trigger_density_score=snapshot.density,
        recovery_speed_score=snapshot.recovery,
        composite_score=snapshot.composite,
        volatility_trend=snapshot.volatility.trend,
        volatility_delta=snapshot.volatility.delta,
        trigger_count=snapshot.trigger_count,
        avg_intensity=snapshot.avg_intensity,
        dominant_emotion=snapshot.dominant_emotion,
        created_at=now,
    )
    db.session.add(record)
    db.session.commit()
    logger.info(
        "Saved score snapshot %s for user %s (composite %.2f over %s days)",
        record.id, user_id, record.composite_score, days,
    )
    return record


def snapshot_history(user_id: int, months: int, now: datetime) -> List[ScoreSnapshotRecord]:
    """Return persisted snapshots from the last ``months`` months, oldest first."""
    cutoff = now - relativedelta(months=months)
    return (
        ScoreSnapshotRecord.query
        .filter(ScoreSnapshotRecord.user_id == user_id, ScoreSnapshotRecord.created_at >= cutoff)
        .order_by(ScoreSnapshotRecord.created_at.asc(), ScoreSnapshotRecord.id.asc())
        .all()
    )


def heatmap(user_id: int, days: int, now: datetime) -> dict:
    """Daily trigger counts and per-emotion totals for the dashboard."""
    triggers = trigger_service.triggers_in_window(user_id, now - timedelta(days=days), now)
    events = [t.to_event() for t in triggers]
    return {
        "days": daily_heatmap(events),
        "categories": emotion_breakdown(events),
    }
