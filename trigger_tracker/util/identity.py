"""Resolve the user making the current request.

Tokens are issued by the identity provider with the numeric user id
as the JWT subject. Route handlers call ``current_user_id()`` after
``@jwt_required()`` and pass the result explicitly to the service
layer.
"""
from __future__ import annotations

from flask_jwt_extended import get_jwt_identity

from ..errors import UnauthorizedError


def current_user_id() -> int:
    """Return the integer user id from the verified JWT."""
    try:
        return int(get_jwt_identity())
    except (TypeError, ValueError):
        raise UnauthorizedError("Token subject is not a valid user id.")
