"""Routes for derived scores.

These endpoints compute wellbeing scores from the current user's
triggers, keep selected snapshots as history and expose the daily
aggregates behind the dashboard heatmap. The arithmetic lives in
``trigger_tracker.services.scoring``; each request reads the clock
once and passes that instant down.
"""
from __future__ import annotations

from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError as SchemaValidationError

from ..errors import ValidationError
from ..schemas import ScoreSnapshotRecordSchema, WindowSchema
from ..services import score_service
from ..util.identity import current_user_id
from ..util.params import int_arg
from ..util.timeutil import utcnow

scores_bp = Blueprint("scores", __name__)

MAX_WINDOW_DAYS = 365


@scores_bp.route("/scores/current", methods=["GET"])
@jwt_required()
def current_scores() -> tuple[dict, int]:
    """Return a fresh score snapshot over the last ``days`` days.

    Nothing is stored. ``days`` defaults to ``SCORE_PERIOD_DAYS`` and must
    be 1–365.
    """
    days = int_arg(
        "days", current_app.config["SCORE_PERIOD_DAYS"], minimum=1, maximum=MAX_WINDOW_DAYS, clamp=False
    )
    now = utcnow()
    snapshot = score_service.compute_snapshot(current_user_id(), days, now)
    payload = snapshot.to_dict()
    payload["period_days"] = days
    payload["computed_at"] = now.isoformat()
    return payload, 200


@scores_bp.route("/scores/snapshots", methods=["POST"])
@jwt_required()
def create_snapshot() -> tuple[dict, int]:
    """Compute a snapshot and save it to the user's score history."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}
    body.setdefault("days", current_app.config["SCORE_PERIOD_DAYS"])
    try:
        data = WindowSchema().load(body)
    except SchemaValidationError as err:
        raise ValidationError("Invalid snapshot window.", fields=err.messages)
    record = score_service.save_snapshot(current_user_id(), data["days"], utcnow())
    return ScoreSnapshotRecordSchema().dump(record), 201


@scores_bp.route("/scores/history", methods=["GET"])
@jwt_required()
def score_history() -> tuple[list[dict], int]:
    """Return saved snapshots from the last ``months`` months (default 6)."""
    months = int_arg("months", 6, minimum=1, maximum=24)
    records = score_service.snapshot_history(current_user_id(), months, utcnow())
    return ScoreSnapshotRecordSchema(many=True).dump(records), 200


@scores_bp.route("/scores/heatmap", methods=["GET"])
@jwt_required()
def score_heatmap() -> tuple[dict, int]:
    days = int_arg("days", 90, minimum=1, maximum=MAX_WINDOW_DAYS, clamp=False)
    return score_service.heatmap(current_user_id(), days, utcnow()), 200
