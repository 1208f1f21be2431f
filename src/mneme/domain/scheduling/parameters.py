"""
Tunable parameters for the analyzer and scheduler.

Every algorithm function takes a ``SchedulingParameters`` argument defaulting
to ``DEFAULT_PARAMETERS``. Override with ``dataclasses.replace``.
"""

from dataclasses import dataclass

from mneme.domain import constants as c


@dataclass(frozen=True)
class SchedulingParameters:
    # Analyzer
    recent_window: int = c.RECENT_WINDOW
    default_time_minutes: float = c.DEFAULT_TIME_MINUTES
    default_confidence: int = c.DEFAULT_CONFIDENCE
    default_correctness: float = c.DEFAULT_CORRECTNESS
    correctness_weight: float = c.CORRECTNESS_WEIGHT
    confidence_weight: float = c.CONFIDENCE_WEIGHT
    efficiency_weight: float = c.EFFICIENCY_WEIGHT
    score_bounds: tuple[float, float] = c.SCORE_BOUNDS
    reference_minutes: float = c.REFERENCE_MINUTES
    time_efficiency_bounds: tuple[float, float] = c.TIME_EFFICIENCY_BOUNDS

    # Scheduler
    new_concept_interval: int = c.NEW_CONCEPT_INTERVAL
    interval_bounds: tuple[int, int] = c.INTERVAL_BOUNDS
    improving_multiplier: float = c.IMPROVING_INTERVAL_MULTIPLIER
    declining_multiplier: float = c.DECLINING_INTERVAL_MULTIPLIER
    high_variance_threshold: float = c.HIGH_VARIANCE_THRESHOLD
    low_variance_threshold: float = c.LOW_VARIANCE_THRESHOLD
    high_variance_multiplier: float = c.HIGH_VARIANCE_MULTIPLIER
    low_variance_multiplier: float = c.LOW_VARIANCE_MULTIPLIER
    time_efficiency_factor_bounds: tuple[float, float] = c.TIME_EFFICIENCY_FACTOR_BOUNDS
    ease_bounds: tuple[float, float] = c.EASE_BOUNDS
    ease_trend_step: float = c.EASE_TREND_STEP


DEFAULT_PARAMETERS = SchedulingParameters()
