"""Shared pytest fixtures.

Each test gets a fresh app bound to an in-memory SQLite database, so no
external database is needed. Tokens are minted with the same secret the
app verifies, standing in for the identity provider.
"""
from __future__ import annotations

from datetime import timedelta

import pytest
from flask_jwt_extended import create_access_token

from trigger_tracker import create_app, db
from trigger_tracker.models import Trigger
from trigger_tracker.util.timeutil import utcnow

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    "JWT_SECRET_KEY": "test-secret-key-with-enough-bytes-for-hs256",
    "LOG_LEVEL": "WARNING",
}


@pytest.fixture()
def app():
    app = create_app(TEST_CONFIG)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture()
def auth_headers(app):
    """Return a function building Authorization headers for a user id."""
    def _headers(user_id: int = 1) -> dict:
        token = create_access_token(identity=str(user_id))
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture()
def add_trigger(app):
    """Insert a trigger directly, ``ago`` before now."""
    def _add(user_id: int = 1, ago: timedelta = timedelta(hours=1), **fields) -> Trigger:
        values = {
            "title": "Something happened",
            "emotion_category": "other",
            "intensity": 5,
        }
        values.update(fields)
        trigger = Trigger(user_id=user_id, occurred_at=utcnow() - ago, **values)
        db.session.add(trigger)
        db.session.commit()
        return trigger
    return _add
