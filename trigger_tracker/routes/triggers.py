"""
Routes for logging and managing emotional triggers.

Every endpoint operates on the authenticated user's own triggers only.
Request bodies are validated with ``TriggerInputSchema`` before they
reach the service layer; deletions are soft so history is preserved.
"""

from __future__ import annotations

from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError as SchemaValidationError

from ..errors import ValidationError
from ..schemas import TriggerInputSchema, TriggerSchema
from ..services import trigger_service
from ..util.identity import current_user_id
from ..util.params import int_arg


triggers_bp = Blueprint("triggers", __name__)


def _load(partial: bool = False) -> dict:
    data = request.get_json(silent=True) or {}
    try:
        return TriggerInputSchema().load(data, partial=partial)
    except SchemaValidationError as err:
        raise ValidationError("Invalid trigger.", fields=err.messages)


@triggers_bp.route("/triggers", methods=["GET"])
@jwt_required()
def list_triggers() -> tuple[dict, int]:
    """List the current user's triggers, newest first.

    Supports ``limit`` (default 50, capped at ``MAX_PAGE_SIZE``) and
    ``offset`` query parameters.
    """
    limit = int_arg("limit", 50, minimum=1, maximum=current_app.config["MAX_PAGE_SIZE"])
    offset = int_arg("offset", 0, minimum=0)
    triggers = trigger_service.list_triggers(current_user_id(), limit, offset)
    return {"data": TriggerSchema(many=True).dump(triggers)}, 200


@triggers_bp.route("/triggers", methods=["POST"])
@jwt_required()
def create_trigger() -> tuple[dict, int]:
    """Log a new trigger.

    Requires ``title``. ``emotion_category`` defaults to ``other``,
    ``intensity`` to 5 and ``occurred_at`` to the current time.
    """
    data = _load()
    trigger = trigger_service.create_trigger(current_user_id(), data)
    return TriggerSchema().dump(trigger), 201


@triggers_bp.route("/triggers/<int:trigger_id>", methods=["GET"])
@jwt_required()
def get_trigger(trigger_id: int) -> tuple[dict, int]:
    trigger = trigger_service.get_trigger(current_user_id(), trigger_id)
    return TriggerSchema().dump(trigger), 200


@triggers_bp.route("/triggers/<int:trigger_id>", methods=["PATCH"])
@jwt_required()
def update_trigger(trigger_id: int) -> tuple[dict, int]:
    """Update some fields of a trigger; unknown fields are ignored."""
    data = _load(partial=True)
    trigger = trigger_service.update_trigger(current_user_id(), trigger_id, data)
    return TriggerSchema().dump(trigger), 200


@triggers_bp.route("/triggers/<int:trigger_id>", methods=["DELETE"])
@jwt_required()
def delete_trigger(trigger_id: int) -> tuple[dict, int]:
    trigger_service.delete_trigger(current_user_id(), trigger_id)
    return {"ok": True}, 200
