"""Routes for trigger pattern clusters."""
from __future__ import annotations

from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError as SchemaValidationError

from ..errors import ValidationError
from ..schemas import PatternClusterSchema, WindowSchema
from ..services import pattern_service
from ..util.identity import current_user_id
from ..util.timeutil import utcnow

patterns_bp = Blueprint("patterns", __name__)


@patterns_bp.route("/patterns", methods=["GET"])
@jwt_required()
def list_patterns() -> tuple[list[dict], int]:
    """List the user's clusters, most recently seen first."""
    clusters = pattern_service.list_clusters(current_user_id())
    return PatternClusterSchema(many=True).dump(clusters), 200


@patterns_bp.route("/patterns/cluster", methods=["POST"])
@jwt_required()
def cluster_patterns() -> tuple[dict, int]:
    """Group the last ``days`` days of triggers (default 30) by emotion.

    Returns 400 when fewer than three triggers fall in the window.
    """
    try:
        data = WindowSchema().load(request.get_json(silent=True) or {})
    except SchemaValidationError as err:
        raise ValidationError("Invalid clustering window.", fields=err.messages)
    clusters = pattern_service.cluster_triggers(current_user_id(), data["days"], utcnow())
    return {"clusters": PatternClusterSchema(many=True).dump(clusters)}, 200
