"""Service layer for the Emotional Trigger Tracker.

This package contains business logic that sits between the
Flask route handlers and the database models. Separating
services into their own modules keeps the routes thin and
makes the scoring engine easy to unit test on its own.

Nothing in this package should perform any HTTP handling.
Services return simple Python data structures or database
objects, and raise exceptions defined in
``trigger_tracker.errors`` when something goes wrong.

Only the pure scoring engine is re-exported here. The
database-backed services (``trigger_service``,
``score_service`` and ``pattern_service``) import the models,
which in turn import the engine, so they are imported by
module path instead.
"""

from .scoring import (
    DEFAULT_VOLATILITY,
    ScoreSnapshot,
    TriggerEvent,
    VolatilityConfig,
    VolatilityTrend,
    build_score_snapshot,
    calc_composite_score,
    calc_reactivity_index,
    calc_recovery_speed_score,
    calc_stability_score,
    calc_trigger_density_score,
    daily_heatmap,
    detect_volatility_trend,
    emotion_breakdown,
)

__all__ = [
    "DEFAULT_VOLATILITY",
    "ScoreSnapshot",
    "TriggerEvent",
    "VolatilityConfig",
    "VolatilityTrend",
    "build_score_snapshot",
    "calc_composite_score",
    "calc_reactivity_index",
    "calc_recovery_speed_score",
    "calc_stability_score",
    "calc_trigger_density_score",
    "daily_heatmap",
    "detect_volatility_trend",
    "emotion_breakdown",
]
