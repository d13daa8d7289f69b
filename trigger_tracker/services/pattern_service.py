"""Pattern clusters.

Groups a user's recent triggers by emotion category. Each group is
stored as a ``PatternCluster`` and its triggers are linked to it
through ``Trigger.cluster_id``. Grouping is deterministic: clusters are
created in the order their emotion is first met while walking the
triggers newest first.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Dict, List

from trigger_tracker import db
from trigger_tracker.errors import ValidationError
from trigger_tracker.models import PatternCluster, Trigger
from trigger_tracker.services import trigger_service
from trigger_tracker.services.scoring import round2

logger = logging.getLogger(__name__)

MIN_TRIGGERS_TO_CLUSTER = 3
MAX_CLUSTERS_LISTED = 50


def group_by_emotion(triggers: List[Trigger]) -> Dict[str, List[Trigger]]:
    """Bucket triggers by emotion category, keeping first-seen order."""
    groups: Dict[str, List[Trigger]] = {}
    for trigger in triggers:
        groups.setdefault(trigger.emotion_category or "other", []).append(trigger)
    return groups


def list_clusters(user_id: int) -> List[PatternCluster]:
    return (
        PatternCluster.query
        .filter_by(user_id=user_id)
        .order_by(PatternCluster.last_seen.desc(), PatternCluster.id.desc())
        .limit(MAX_CLUSTERS_LISTED)
        .all()
    )


def cluster_triggers(user_id: int, days: int, now: datetime) -> List[PatternCluster]:
    """Create one cluster per emotion from the last ``days`` days of triggers.

    Raises ``ValidationError`` when fewer than three triggers fall in the
    window, since a pattern needs more than a couple of data points.
    """
    triggers = trigger_service.triggers_in_window(user_id, now - timedelta(days=days), now)
    if len(triggers) < MIN_TRIGGERS_TO_CLUSTER:
        raise ValidationError(
            f"Need at least {MIN_TRIGGERS_TO_CLUSTER} triggers to find patterns.",
            fields={"triggers": len(triggers)},
        )

    newest_first = list(reversed(triggers))
    clusters: List[PatternCluster] = []
    for emotion, members in group_by_emotion(newest_first).items():
        cluster = PatternCluster(
            user_id=user_id,
            cluster_name=f"{emotion.upper()} Cluster",
            description=f"Auto cluster by emotion category: {emotion}",
            trigger_ids=[t.id for t in members],
            centroid_emotion=emotion,
            avg_intensity=round2(sum(t.intensity for t in members) / len(members)),
            frequency=len(members),
            last_seen=max(t.occurred_at for t in members),
            created_at=now,
        )
        db.session.add(cluster)
        # Flush so the cluster id exists before linking its triggers
        db.session.flush()
        for trigger in members:
            trigger.cluster_id = cluster.id
        clusters.append(cluster)

    db.session.commit()
    logger.info(
        "Clustered %s triggers into %s patterns for user %s",
        len(triggers), len(clusters), user_id,
    )
    return clusters
