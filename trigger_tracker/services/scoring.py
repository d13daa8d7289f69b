"""Emotional score computation engine.

These functions turn a set of trigger events into the derived scores
shown on the dashboard. Every score is normalised to the range 0–100
where a higher value always means "healthier": more stable, less
reactive, fewer triggers per day and faster recovery.

The engine is pure. It performs no I/O, reads no clock and keeps no
state between calls, so the same events, period length and ``now``
always produce the same snapshot. Callers are responsible for loading
the events (see ``trigger_service``) and for persisting a snapshot if
they want a historical record (see ``score_service``).

Inputs are assumed to be valid: ``intensity`` in 1–10 and
``recovery_minutes`` either ``None`` or non-negative. Validation
happens at the HTTP boundary in ``trigger_tracker.schemas``.

Public API
----------
calc_stability_score(triggers)                      -> float
calc_reactivity_index(triggers)                     -> float
calc_trigger_density_score(trigger_count, days)     -> float
calc_recovery_speed_score(triggers)                 -> float
calc_composite_score(stability, reactivity, density, recovery) -> float
detect_volatility_trend(triggers, now, config)      -> VolatilityTrend
build_score_snapshot(triggers, days_in_period, now, config) -> ScoreSnapshot
daily_heatmap(triggers)                             -> list[dict]
emotion_breakdown(triggers)                         -> list[dict]
"""
from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence

HIGH_INTENSITY = 8
SUDDEN_ONSET_MINUTES = 30
SUDDEN_ONSET_WEIGHT = 1.5
SUSTAINED_WEIGHT = 1.0
FULL_RECOVERY_MINUTES = 120
NEUTRAL_RECOVERY_SCORE = 50.0

COMPOSITE_WEIGHTS = {
    "stability": 0.35,
    "reactivity": 0.25,
    "density": 0.20,
    "recovery": 0.20,
}


@dataclass(frozen=True)
class TriggerEvent:
    """A single trigger as seen by the engine."""

    intensity: int
    emotion_category: str
    occurred_at: datetime
    recovery_minutes: Optional[int] = None


@dataclass(frozen=True)
class VolatilityConfig:
    """Window length and dead-band used by the trend detector."""

    window_days: int = 7
    threshold: float = 0.5


DEFAULT_VOLATILITY = VolatilityConfig()


@dataclass(frozen=True)
class VolatilityTrend:
    trend: str
    delta: float
    recent_avg: float
    prior_avg: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ScoreSnapshot:
    stability: float
    reactivity: float
    density: float
    recovery: float
    composite: float
    volatility: VolatilityTrend
    trigger_count: int
    avg_intensity: float
    dominant_emotion: Optional[str]

    def to_dict(self) -> dict:
        """Serialise using the field names the API exposes."""
        return {
            "stability_score": self.stability,
            "reactivity_index": self.reactivity,
            "trigger_density_score": self.density,
            "recovery_speed_score": self.recovery,
            "composite_score": self.composite,
            "volatility": self.volatility.to_dict(),
            "trigger_count": self.trigger_count,
            "avg_intensity": self.avg_intensity,
            "dominant_emotion": self.dominant_emotion,
        }


def round2(value: float) -> float:
    """Round half up to two decimal places."""
    return math.floor(value * 100 + 0.5) / 100


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def calc_stability_score(triggers: Sequence[TriggerEvent]) -> float:
    """Emotional stability.

    Starts from 100 and subtracts three penalties:

    * intensity: ``(avg / 10) * 40``
    * variance: ``(population std dev / 10) * 30``
    * share of entries with intensity >= 8: ``ratio * 30``

    An empty set is treated as fully stable.
    """
    if not triggers:
        return 100.0

    intensities = [t.intensity for t in triggers]
    n = len(intensities)
    avg = sum(intensities) / n
    variance = sum((i - avg) ** 2 for i in intensities) / n
    std_dev = math.sqrt(variance)
    high_ratio = sum(1 for i in intensities if i >= HIGH_INTENSITY) / n

    score = 100 - (avg / 10) * 40 - (std_dev / 10) * 30 - high_ratio * 30
    return _clamp(round2(score))


def calc_reactivity_index(triggers: Sequence[TriggerEvent]) -> float:
    """Reactivity index, weighting sudden spikes above sustained ones.

    A trigger with no predecessor in the previous 30 minutes counts as a
    sudden onset and is weighted 1.5; otherwise it is weighted 1.0.
    ``raw = sum(intensity * weight) / n`` and the score is
    ``100 - raw * 10``.
    """
    if not triggers:
        return 100.0

    # sorted() is stable, so equal timestamps keep their input order
    ordered = sorted(triggers, key=lambda t: t.occurred_at)

    weighted_sum = 0.0
    previous: Optional[TriggerEvent] = None
    for trigger in ordered:
        if previous is None:
            gap_minutes = math.inf
        else:
            gap_minutes = (trigger.occurred_at - previous.occurred_at).total_seconds() / 60
        weight = SUDDEN_ONSET_WEIGHT if gap_minutes > SUDDEN_ONSET_MINUTES else SUSTAINED_WEIGHT
        weighted_sum += trigger.intensity * weight
        previous = trigger

    raw_reactivity = weighted_sum / len(ordered)
    score = 100 - (raw_reactivity / 10) * 100
    return _clamp(round2(score))


def calc_trigger_density_score(trigger_count: int, days_in_period: int) -> float:
    """Triggers per day; five or more per day scores zero."""
    if not days_in_period or not trigger_count:
        return 100.0
    density = trigger_count / days_in_period
    score = 100 - min(density * 20, 100)
    return _clamp(round2(score))


def calc_recovery_speed_score(triggers: Sequence[TriggerEvent]) -> float:
    """Average recovery time, where 0 minutes is 100 and 120+ minutes is 0.

    Only triggers with a recorded recovery time take part. When none do,
    the neutral score of 50 is returned rather than 100.
    """
    recorded = [
        t.recovery_minutes
        for t in triggers
        if t.recovery_minutes is not None and t.recovery_minutes >= 0
    ]
    if not recorded:
        return NEUTRAL_RECOVERY_SCORE

    avg_recovery = sum(recorded) / len(recorded)
    score = 100 - min((avg_recovery / FULL_RECOVERY_MINUTES) * 100, 100)
    return _clamp(round2(score))


def calc_composite_score(
    stability: float, reactivity: float, density: float, recovery: float
) -> float:
    composite = (
        stability * COMPOSITE_WEIGHTS["stability"]
        + reactivity * COMPOSITE_WEIGHTS["reactivity"]
        + density * COMPOSITE_WEIGHTS["density"]
        + recovery * COMPOSITE_WEIGHTS["recovery"]
    )
    return round2(composite)


def detect_volatility_trend(
    triggers: Iterable[TriggerEvent],
    now: datetime,
    config: VolatilityConfig = DEFAULT_VOLATILITY,
) -> VolatilityTrend:
    """Compare mean intensity of the latest window against the one before it.

    With the default configuration the recent bucket is the last 7 days
    and the prior bucket is days 8–14. Anything older is ignored. This is
    a point-in-time comparison; small samples give noisy trends.
    """
    window = timedelta(days=config.window_days)
    recent_start = now - window
    prior_start = now - 2 * window

    recent: List[int] = []
    prior: List[int] = []
    for trigger in triggers:
        if trigger.occurred_at >= recent_start:
            recent.append(trigger.intensity)
        elif trigger.occurred_at >= prior_start:
            prior.append(trigger.intensity)

    recent_avg = _mean(recent)
    prior_avg = _mean(prior)
    delta = recent_avg - prior_avg

    if delta < -config.threshold:
        trend = "improving"
    elif delta > config.threshold:
        trend = "declining"
    else:
        trend = "stable"

    return VolatilityTrend(
        trend=trend,
        delta=round2(delta),
        recent_avg=round2(recent_avg),
        prior_avg=round2(prior_avg),
    )


def _dominant_emotion(triggers: Sequence[TriggerEvent]) -> Optional[str]:
    counts = Counter(t.emotion_category for t in triggers)
    if not counts:
        return None
    # Counter keeps insertion order and max() returns the first maximum
    return max(counts.items(), key=lambda item: item[1])[0]


def build_score_snapshot(
    triggers: Sequence[TriggerEvent],
    days_in_period: int,
    now: datetime,
    config: VolatilityConfig = DEFAULT_VOLATILITY,
) -> ScoreSnapshot:
    """Compute every score for one set of triggers."""
    triggers = list(triggers)

    stability = calc_stability_score(triggers)
    reactivity = calc_reactivity_index(triggers)
    density = calc_trigger_density_score(len(triggers), days_in_period)
    recovery = calc_recovery_speed_score(triggers)
    composite = calc_composite_score(stability, reactivity, density, recovery)
    volatility = detect_volatility_trend(triggers, now, config)

    avg_intensity = round2(_mean([t.intensity for t in triggers]))

    return ScoreSnapshot(
        stability=stability,
        reactivity=reactivity,
        density=density,
        recovery=recovery,
        composite=composite,
        volatility=volatility,
        trigger_count=len(triggers),
        avg_intensity=avg_intensity,
        dominant_emotion=_dominant_emotion(triggers),
    )


def daily_heatmap(triggers: Iterable[TriggerEvent]) -> List[dict]:
    """Bucket triggers by calendar day, oldest day first."""
    by_day: dict = {}
    for trigger in triggers:
        by_day.setdefault(trigger.occurred_at.date(), []).append(trigger.intensity)
    return [
        {
            "date": day.isoformat(),
            "count": len(intensities),
            "avg_intensity": round2(_mean(intensities)),
        }
        for day, intensities in sorted(by_day.items())
    ]


def emotion_breakdown(triggers: Iterable[TriggerEvent]) -> List[dict]:
    """Count triggers per emotion category, most frequent first."""
    counts = Counter(t.emotion_category for t in triggers)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [{"emotion_category": emotion, "count": count} for emotion, count in ranked]
