"""
Database models for the Emotional Trigger Tracker.

Three tables back the API. ``Trigger`` holds the raw events a user
logs, ``ScoreSnapshotRecord`` stores score snapshots a user chose to
keep as history, and ``PatternCluster`` stores the result of grouping
triggers by emotion. Users themselves are managed by the identity
provider that issues JWTs, so every row simply carries the owning
``user_id`` taken from the token.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from . import db
from .services.scoring import TriggerEvent
from .util.timeutil import utcnow


class EmotionCategory(str, enum.Enum):
    """Enumeration of emotion categories a trigger may be tagged with."""
    ANGER = "anger"
    FEAR = "fear"
    SADNESS = "sadness"
    JOY = "joy"
    DISGUST = "disgust"
    SURPRISE = "surprise"
    SHAME = "shame"
    ANXIETY = "anxiety"
    GRIEF = "grief"
    FRUSTRATION = "frustration"
    OVERWHELM = "overwhelm"
    CALM = "calm"
    OTHER = "other"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class Trigger(db.Model):
    __allow_unmapped__ = True
    """A single emotional trigger logged by a user.

    ``occurred_at`` is when the user says the event happened, which is
    not necessarily when it was inserted. ``recovery_minutes`` is left
    ``NULL`` when the user did not record a recovery time; ``0`` means
    an immediate recovery.
    """
    __tablename__ = "triggers"

    id: int = db.Column(db.Integer, primary_key=True)
    user_id: int = db.Column(db.Integer, nullable=False, index=True)
    title: str = db.Column(db.String(200), nullable=False)
    description: Optional[str] = db.Column(db.Text)
    emotion_category: str = db.Column(
        db.String(20), nullable=False, default=EmotionCategory.OTHER.value
    )
    intensity: int = db.Column(db.Integer, nullable=False, default=5)
    body_sensation: Optional[str] = db.Column(db.String(255))
    context_tags = db.Column(db.JSON, nullable=False, default=list)
    location: Optional[str] = db.Column(db.String(255))
    people_involved = db.Column(db.JSON, nullable=False, default=list)
    thought_pattern: Optional[str] = db.Column(db.String(255))
    regulation_used: Optional[str] = db.Column(db.String(255))
    recovery_minutes: Optional[int] = db.Column(db.Integer)
    occurred_at: datetime = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    cluster_id: Optional[int] = db.Column(db.Integer, db.ForeignKey("pattern_clusters.id"))
    created_at: datetime = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at: datetime = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    # Soft delete timestamp; deleted triggers no longer count towards scores
    deleted_at = db.Column(db.DateTime, nullable=True)

    __table_args__ = (
        db.CheckConstraint("intensity >= 1 AND intensity <= 10", name="ck_trigger_intensity"),
        db.CheckConstraint(
            "recovery_minutes IS NULL OR recovery_minutes >= 0", name="ck_trigger_recovery"
        ),
    )

    def to_event(self) -> TriggerEvent:
        """Return the immutable view of this row used by the scoring engine."""
        return TriggerEvent(
            intensity=self.intensity,
            emotion_category=self.emotion_category,
            occurred_at=self.occurred_at,
            recovery_minutes=self.recovery_minutes,
        )

    def __repr__(self) -> str:
        return f"<Trigger {self.id} user={self.user_id} {self.emotion_category}/{self.intensity}>"


class ScoreSnapshotRecord(db.Model):
    __allow_unmapped__ = True
    """A score snapshot persisted as part of a user's history."""
    __tablename__ = "score_snapshots"

    id: int = db.Column(db.Integer, primary_key=True)
    user_id: int = db.Column(db.Integer, nullable=False, index=True)
    period_start: datetime = db.Column(db.DateTime, nullable=False)
    period_end: datetime = db.Column(db.DateTime, nullable=False)
    period_days: int = db.Column(db.Integer, nullable=False)

    stability_score: float = db.Column(db.Float, nullable=False)
    reactivity_index: float = db.Column(db.Float, nullable=False)
    trigger_density_score: float = db.Column(db.Float, nullable=False)
    recovery_speed_score: float = db.Column(db.Float, nullable=False)
    composite_score: float = db.Column(db.Float, nullable=False)

    volatility_trend: str = db.Column(db.String(10), nullable=False)
    volatility_delta: float = db.Column(db.Float, nullable=False)
    trigger_count: int = db.Column(db.Integer, nullable=False)
    avg_intensity: float = db.Column(db.Float, nullable=False)
    dominant_emotion: Optional[str] = db.Column(db.String(20))

    created_at: datetime = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    def __repr__(self) -> str:
        return f"<ScoreSnapshotRecord user={self.user_id} composite={self.composite_score}>"


class PatternCluster(db.Model):
    __allow_unmapped__ = True
    """A group of triggers that share an emotion category."""
    __tablename__ = "pattern_clusters"

    id: int = db.Column(db.Integer, primary_key=True)
    user_id: int = db.Column(db.Integer, nullable=False, index=True)
    cluster_name: str = db.Column(db.String(100), nullable=False)
    description: Optional[str] = db.Column(db.String(255))
    trigger_ids = db.Column(db.JSON, nullable=False, default=list)
    centroid_emotion: str = db.Column(db.String(20), nullable=False)
    avg_intensity: float = db.Column(db.Float, nullable=False)
    frequency: int = db.Column(db.Integer, nullable=False)
    last_seen: datetime = db.Column(db.DateTime, nullable=False, default=utcnow)
    created_at: datetime = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<PatternCluster {self.cluster_name} x{self.frequency}>"
