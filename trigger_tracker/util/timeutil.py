"""Time helpers.

All timestamps are stored as naive UTC ``datetime`` values. Incoming
ISO 8601 strings may carry an offset, so they are converted to UTC and
the ``tzinfo`` is dropped before they reach the database or the
scoring engine.
"""
from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC time as a naive ``datetime``."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
