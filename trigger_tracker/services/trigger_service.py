"""Data access for triggers.

Every function takes the owning ``user_id`` explicitly and filters on
it, so one user's triggers never leak into another user's scores.
Soft-deleted triggers (``deleted_at`` set) are invisible to all reads.

Changes are committed here because each HTTP request maps to exactly
one of these operations.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from trigger_tracker import db
from trigger_tracker.errors import NotFoundError, ValidationError
from trigger_tracker.models import PatternCluster, Trigger
from trigger_tracker.util.timeutil import utcnow

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "title",
    "description",
    "emotion_category",
    "intensity",
    "body_sensation",
    "context_tags",
    "location",
    "people_involved",
    "thought_pattern",
    "regulation_used",
    "recovery_minutes",
    "occurred_at",
    "cluster_id",
)

# Columns that may not be cleared by sending ``null``
_NON_NULLABLE = {"title", "emotion_category", "intensity", "occurred_at", "context_tags", "people_involved"}


def _active(user_id: int):
    return Trigger.query.filter(Trigger.user_id == user_id, Trigger.deleted_at.is_(None))


def list_triggers(user_id: int, limit: int, offset: int) -> List[Trigger]:
    """Return a page of a user's triggers, newest first."""
    return (
        _active(user_id)
        .order_by(Trigger.occurred_at.desc(), Trigger.id.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )


def get_trigger(user_id: int, trigger_id: int) -> Trigger:
    trigger = _active(user_id).filter(Trigger.id == trigger_id).first()
    if trigger is None:
        raise NotFoundError("Trigger not found.")
    return trigger


def triggers_in_window(user_id: int, since: datetime, until: Optional[datetime] = None) -> List[Trigger]:
    """Return a user's triggers with ``since <= occurred_at <= until``.

    Rows come back in ascending ``occurred_at`` order (then by id), which
    fixes the traversal order used for tie-breaking in the scoring engine.
    """
    query = _active(user_id).filter(Trigger.occurred_at >= since)
    if until is not None:
        query = query.filter(Trigger.occurred_at <= until)
    return query.order_by(Trigger.occurred_at.asc(), Trigger.id.asc()).all()


def _check_cluster(user_id: int, cluster_id: Optional[int]) -> None:
    if cluster_id is None:
        return
    if PatternCluster.query.filter_by(id=cluster_id, user_id=user_id).first() is None:
        raise NotFoundError("Pattern cluster not found.")


def create_trigger(user_id: int, data: dict) -> Trigger:
    """Insert a trigger from already-validated input."""
    _check_cluster(user_id, data.get("cluster_id"))
    if data.get("occurred_at") is None:
        data = dict(data, occurred_at=utcnow())
    trigger = Trigger(user_id=user_id, **data)
    db.session.add(trigger)
    db.session.commit()
    logger.info(
        "Trigger %s created for user %s (%s, intensity %s)",
        trigger.id, user_id, trigger.emotion_category, trigger.intensity,
    )
    return trigger


def update_trigger(user_id: int, trigger_id: int, data: dict) -> Trigger:
    """Apply a partial update from already-validated input."""
    changes = {
        key: value
        for key, value in data.items()
        if key in UPDATABLE_FIELDS and not (value is None and key in _NON_NULLABLE)
    }
    if not changes:
        raise ValidationError("No valid fields to update.")

    trigger = get_trigger(user_id, trigger_id)
    _check_cluster(user_id, changes.get("cluster_id"))

    for key, value in changes.items():
        setattr(trigger, key, value)
    db.session.commit()
    logger.info("Trigger %s updated for user %s: %s", trigger_id, user_id, sorted(changes))
    return trigger


def delete_trigger(user_id: int, trigger_id: int) -> None:
    """Soft delete a trigger so it drops out of lists and scores."""
    trigger = get_trigger(user_id, trigger_id)
    trigger.deleted_at = utcnow()
    db.session.commit()
    logger.info("Trigger %s deleted for user %s", trigger_id, user_id)
