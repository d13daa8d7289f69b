"""
Serialization schemas using Marshmallow for the Trigger Tracker.

Two kinds of schema live here. The ``*Schema`` classes built on
``SQLAlchemyAutoSchema`` turn model instances into JSON-friendly
dictionaries for responses. ``TriggerInputSchema`` validates incoming
request bodies before anything reaches the database or the scoring
engine: intensity must be 1–10, the emotion category must be one of
the known values and recovery time must be non-negative.
"""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validate
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from .models import EmotionCategory, PatternCluster, ScoreSnapshotRecord, Trigger
from .util.sanitization import strip_tags
from .util.timeutil import to_naive_utc

_TEXT_FIELDS = (
    "title",
    "description",
    "body_sensation",
    "location",
    "thought_pattern",
    "regulation_used",
)


class TriggerSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``Trigger`` objects."""

    context_tags = fields.List(fields.String())
    people_involved = fields.List(fields.String())

    class Meta:
        model = Trigger
        include_fk = True
        exclude = ("deleted_at",)


class ScoreSnapshotRecordSchema(SQLAlchemyAutoSchema):
    """Schema for serialising persisted score snapshots."""

    class Meta:
        model = ScoreSnapshotRecord
        include_fk = True


class PatternClusterSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``PatternCluster`` objects."""

    trigger_ids = fields.List(fields.Integer())

    class Meta:
        model = PatternCluster
        include_fk = True


class TriggerInputSchema(Schema):
    """Validate a trigger body for create (full) or update (``partial=True``).

    Unknown keys are dropped rather than rejected, so clients can send a
    whole trigger object back on update.
    """

    title = fields.String(required=True, validate=validate.Length(max=200))
    description = fields.String(allow_none=True, load_default=None)
    emotion_category = fields.String(
        load_default=EmotionCategory.OTHER.value,
        validate=validate.OneOf(EmotionCategory.values()),
    )
    intensity = fields.Integer(strict=True, load_default=5, validate=validate.Range(min=1, max=10))
    body_sensation = fields.String(allow_none=True, load_default=None, validate=validate.Length(max=255))
    context_tags = fields.List(fields.String(validate=validate.Length(max=50)), load_default=list)
    location = fields.String(allow_none=True, load_default=None, validate=validate.Length(max=255))
    people_involved = fields.List(fields.String(validate=validate.Length(max=100)), load_default=list)
    thought_pattern = fields.String(allow_none=True, load_default=None, validate=validate.Length(max=255))
    regulation_used = fields.String(allow_none=True, load_default=None, validate=validate.Length(max=255))
    recovery_minutes = fields.Integer(strict=True, allow_none=True, load_default=None, validate=validate.Range(min=0))
    occurred_at = fields.DateTime(allow_none=True, load_default=None)
    cluster_id = fields.Integer(strict=True, allow_none=True)

    class Meta:
        unknown = EXCLUDE

    @post_load
    def clean(self, data: dict, **kwargs) -> dict:
        for name in _TEXT_FIELDS:
            if data.get(name):
                data[name] = strip_tags(data[name])
        if "title" in data and not data["title"]:
            raise ValidationError("title is required.", field_name="title")
        if data.get("occurred_at") is not None:
            data["occurred_at"] = to_naive_utc(data["occurred_at"])
        return data


class WindowSchema(Schema):
    """Validate a ``days`` look-back window in a request body."""

    days = fields.Integer(strict=True, load_default=30, validate=validate.Range(min=1, max=365))

    class Meta:
        unknown = EXCLUDE
