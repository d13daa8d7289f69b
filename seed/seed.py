"""Seed script for demo data.

Running this script populates the database with two weeks of example
triggers for a demo user and stores one score snapshot, so the
dashboard has something to show. Execute it with
``python seed/seed.py`` from the repository root.
"""
from __future__ import annotations

from datetime import timedelta

from trigger_tracker import create_app, db
from trigger_tracker.models import Trigger
from trigger_tracker.services import score_service
from trigger_tracker.util.timeutil import utcnow

DEMO_USER_ID = 1

# (days ago, hours ago, title, emotion, intensity, recovery minutes)
DEMO_TRIGGERS = [
    (13, 2, "Missed the train to work", "frustration", 6, 40),
    (12, 5, "Argument about chores", "anger", 8, 90),
    (10, 1, "Presentation feedback", "anxiety", 7, None),
    (9, 3, "Long walk in the park", "calm", 2, 0),
    (6, 4, "Inbox overflowing on Monday", "overwhelm", 6, 30),
    (5, 2, "Friend cancelled plans", "sadness", 5, 60),
    (3, 6, "Deadline moved up", "anxiety", 6, 45),
    (2, 1, "Good news from family", "joy", 3, 0),
    (1, 2, "Traffic jam", "frustration", 4, 15),
]


def run_seeds() -> None:
    """Insert demo triggers and a first snapshot into the database."""
    app = create_app()
    with app.app_context():
        db.create_all()
        now = utcnow()
        triggers = [
            Trigger(
                user_id=DEMO_USER_ID,
                title=title,
                emotion_category=emotion,
                intensity=intensity,
                recovery_minutes=recovery,
                occurred_at=now - timedelta(days=days_ago, hours=hours_ago),
            )
            for days_ago, hours_ago, title, emotion, intensity, recovery in DEMO_TRIGGERS
        ]
        db.session.add_all(triggers)
        db.session.commit()
        score_service.save_snapshot(DEMO_USER_ID, 14, now)
        print("Seed data inserted successfully.")


if __name__ == "__main__":
    run_seeds()
