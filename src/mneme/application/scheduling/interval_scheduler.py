"""
Interval scheduler: an SM-2 variant driven by a PerformanceAnalysis.

Builds the next interval and ease factor by:
1. Scaling the previous interval by a score tier
2. Adjusting for confidence trend, consistency and time efficiency
3. Clamping the results into their valid ranges

Pure computation, no I/O.
"""

import math
from collections.abc import Callable
from datetime import datetime, timedelta

from mneme.application.scheduling.performance_analyzer import clamp
from mneme.domain.constants import DEFAULT_EASE_FACTOR, EASE_BOUNDS
from mneme.domain.scheduling.models import (
    ConfidenceTrend,
    PerformanceAnalysis,
    ScheduleState,
)
from mneme.domain.scheduling.parameters import DEFAULT_PARAMETERS, SchedulingParameters

# (lower_bound, formula) pairs, checked top to bottom; the first tier whose
# lower bound is <= score wins, so a score of exactly 0.8 is in the top tier.
IntervalFormula = Callable[[float, float], float]  # (base, score) -> interval
EaseFormula = Callable[[float], float]  # score -> ease

INTERVAL_TIERS: tuple[tuple[float, IntervalFormula], ...] = (
    (0.8, lambda base, p: base * (2.5 + (p - 0.8) * 2)),
    (0.6, lambda base, p: base * (1.5 + (p - 0.6) * 1.5)),
    (0.4, lambda base, p: base * (1.0 + (p - 0.4) * 0.5)),
    (-math.inf, lambda base, p: max(1, base * (0.5 + p * 0.5))),
)

EASE_TIERS: tuple[tuple[float, EaseFormula], ...] = (
    (0.8, lambda p: 2.8 + (p - 0.8) * 0.5),
    (0.6, lambda p: DEFAULT_EASE_FACTOR + (p - 0.6) * 0.3),
    (0.4, lambda p: DEFAULT_EASE_FACTOR),
    (-math.inf, lambda p: max(EASE_BOUNDS[0], DEFAULT_EASE_FACTOR - (0.4 - p) * 2)),
)


def select_tier(tiers, score: float):
    """Return the formula of the first tier whose lower bound is <= score."""
    for lower_bound, formula in tiers:
        if score >= lower_bound:
            return formula
    raise ValueError(f"No tier covers score {score}")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class IntervalScheduler:
    """
    Computes (interval_days, ease_factor) from an analysis and the previous
    schedule, and builds the replacement ScheduleState.

    Stateless and side-effect free.
    """

    def __init__(self, params: SchedulingParameters = DEFAULT_PARAMETERS):
        self.params = params

    def schedule(
        self, analysis: PerformanceAnalysis, previous: ScheduleState | None
    ) -> tuple[int, float]:
        return (
            self.compute_interval(analysis, previous),
            self.compute_ease_factor(analysis),
        )

    def compute_interval(
        self, analysis: PerformanceAnalysis, previous: ScheduleState | None
    ) -> int:
        """
        Next review gap in whole days.

        A concept with no previous schedule starts from the new-concept base.
        Intermediate values are never clamped; only the final result is.
        """
        p = self.params
        base = previous.interval_days if previous else p.new_concept_interval

        interval = select_tier(INTERVAL_TIERS, analysis.overall_score)(
            base, analysis.overall_score
        )
        interval *= self._trend_multiplier(analysis.confidence_trend)
        interval *= self._variance_multiplier(analysis.performance_variance)
        interval *= clamp(analysis.time_efficiency, p.time_efficiency_factor_bounds)

        return round_half_up(clamp(interval, p.interval_bounds))

    def compute_ease_factor(self, analysis: PerformanceAnalysis) -> float:
        ease = select_tier(EASE_TIERS, analysis.overall_score)(analysis.overall_score)

        if analysis.confidence_trend is ConfidenceTrend.IMPROVING:
            ease += self.params.ease_trend_step
        elif analysis.confidence_trend is ConfidenceTrend.DECLINING:
            ease -= self.params.ease_trend_step

        return clamp(ease, self.params.ease_bounds)

    def next_state(
        self,
        user_id: str,
        concept_id: str,
        concept_title: str,
        analysis: PerformanceAnalysis,
        previous: ScheduleState | None,
        now: datetime,
    ) -> ScheduleState:
        """
        Build the schedule that replaces ``previous`` after a review at ``now``.
        """
        interval_days, ease_factor = self.schedule(analysis, previous)
        return ScheduleState(
            user_id=user_id,
            concept_id=concept_id,
            concept_title=concept_title,
            ease_factor=ease_factor,
            interval_days=interval_days,
            repetitions=(previous.repetitions if previous else 0) + 1,
            last_reviewed=now,
            next_review=now + timedelta(days=interval_days),
        )

    def _trend_multiplier(self, trend: ConfidenceTrend) -> float:
        if trend is ConfidenceTrend.IMPROVING:
            return self.params.improving_multiplier
        if trend is ConfidenceTrend.DECLINING:
            return self.params.declining_multiplier
        return 1.0

    def _variance_multiplier(self, variance: float) -> float:
        """
        Erratic performance shortens the interval, consistent performance
        lengthens it.
        """
        p = self.params
        if variance > p.high_variance_threshold:
            return p.high_variance_multiplier
        if variance < p.low_variance_threshold:
            return p.low_variance_multiplier
        return 1.0
