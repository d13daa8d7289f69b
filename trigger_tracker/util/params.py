"""Query-string parsing helpers shared by the route modules."""
from __future__ import annotations

from flask import request

from ..errors import ValidationError


def int_arg(
    name: str,
    default: int,
    minimum: int,
    maximum: int | None = None,
    clamp: bool = True,
) -> int:
    """Read an integer query parameter bounded by ``[minimum, maximum]``.

    A value that is not an integer is always rejected. An out-of-range
    value is clamped when ``clamp`` is true, as pagination limits are,
    and rejected otherwise, as look-back windows are.
    """
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer.", fields={name: raw})
    too_small = value < minimum
    too_large = maximum is not None and value > maximum
    if not clamp and (too_small or too_large):
        raise ValidationError(
            f"{name} must be between {minimum} and {maximum}.", fields={name: raw}
        )
    value = max(value, minimum)
    if maximum is not None:
        value = min(value, maximum)
    return value
