"""
Performance analyzer for deriving a scheduling summary from review history.

This is a pure computation module with no I/O.
"""

import math
from collections.abc import Sequence

from mneme.domain.constants import (
    CONFIDENCE_RANGE,
    CONFIDENCE_SCALE,
    CORRECTNESS_RANGE,
    EFFICIENCY_SCALE,
    EMPTY_AVERAGE_CONFIDENCE,
    EMPTY_OVERALL_SCORE,
    EMPTY_RECENT_CORRECTNESS,
    EMPTY_TIME_EFFICIENCY,
    MIN_AVERAGE_MINUTES,
)
from mneme.domain.errors import ValidationError
from mneme.domain.scheduling.models import (
    ConfidenceTrend,
    PerformanceAnalysis,
    ReviewEvent,
)
from mneme.domain.scheduling.parameters import DEFAULT_PARAMETERS, SchedulingParameters


def clamp(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    return max(low, min(high, value))


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_event(event: ReviewEvent) -> None:
    """
    Reject an event whose fields fall outside their declared domains.

    Absent (None) fields are allowed and take their defaults later.

    Raises:
        ValidationError: On the first offending field.
    """
    low, high = CORRECTNESS_RANGE
    if event.correctness is not None:
        if not _is_number(event.correctness) or not low <= event.correctness <= high:
            raise ValidationError("correctness", event.correctness, f"a number in [{low}, {high}]")

    low, high = CONFIDENCE_RANGE
    if event.confidence_after is not None:
        if (
            not isinstance(event.confidence_after, int)
            or isinstance(event.confidence_after, bool)
            or not low <= event.confidence_after <= high
        ):
            raise ValidationError(
                "confidence_after", event.confidence_after, f"an integer in [{low}, {high}]"
            )

    if event.time_taken_minutes is not None:
        minutes = event.time_taken_minutes
        if not _is_number(minutes) or not math.isfinite(minutes) or minutes <= 0:
            raise ValidationError("time_taken_minutes", minutes, "a positive number of minutes")


def _mean(values: list[float]) -> float:
    return sum(values) / len(values)


class PerformanceAnalyzer:
    """
    Turns review history (most recent first) into a PerformanceAnalysis.

    Stateless and side-effect free.
    """

    def __init__(self, params: SchedulingParameters = DEFAULT_PARAMETERS):
        self.params = params

    def analyze(self, history: Sequence[ReviewEvent]) -> PerformanceAnalysis:
        """
        Summarize a learner's performance on one concept.

        Every event is validated before anything is computed, so a single
        malformed event fails the whole call.

        Raises:
            ValidationError: If any event is malformed.
        """
        for event in history:
            validate_event(event)

        if not history:
            return PerformanceAnalysis(
                overall_score=EMPTY_OVERALL_SCORE,
                confidence_trend=ConfidenceTrend.STABLE,
                time_efficiency=EMPTY_TIME_EFFICIENCY,
                recent_correctness=EMPTY_RECENT_CORRECTNESS,
                average_confidence=EMPTY_AVERAGE_CONFIDENCE,
                performance_variance=0.0,
            )

        p = self.params
        recent = list(history[: p.recent_window])
        older = list(history[p.recent_window :])

        recent_correctness = _mean([self._correctness(e) for e in recent])

        recent_confidence = _mean([self._confidence(e) for e in recent])
        older_confidence = (
            _mean([self._confidence(e) for e in older]) if older else recent_confidence
        )
        trend = self._compute_trend(recent_confidence, older_confidence)

        time_efficiency = self._compute_time_efficiency(recent)

        overall_score = clamp(
            p.correctness_weight * recent_correctness
            + p.confidence_weight * (recent_confidence / CONFIDENCE_SCALE)
            + p.efficiency_weight * (time_efficiency / EFFICIENCY_SCALE),
            p.score_bounds,
        )

        return PerformanceAnalysis(
            overall_score=overall_score,
            confidence_trend=trend,
            time_efficiency=time_efficiency,
            recent_correctness=recent_correctness,
            average_confidence=recent_confidence,
            performance_variance=self._compute_variance(history),
        )

    def _correctness(self, event: ReviewEvent) -> float:
        if event.correctness is None:
            return self.params.default_correctness
        return event.correctness

    def _confidence(self, event: ReviewEvent) -> float:
        if event.confidence_after is None:
            return self.params.default_confidence
        return event.confidence_after

    def _minutes(self, event: ReviewEvent) -> float:
        if event.time_taken_minutes is None:
            return self.params.default_time_minutes
        return event.time_taken_minutes

    def _compute_trend(self, recent: float, older: float) -> ConfidenceTrend:
        if recent > older:
            return ConfidenceTrend.IMPROVING
        if recent < older:
            return ConfidenceTrend.DECLINING
        return ConfidenceTrend.STABLE

    def _compute_time_efficiency(self, recent: list[ReviewEvent]) -> float:
        """
        Faster reviews mean higher efficiency: reference minutes / average minutes.
        """
        average_time = _mean([self._minutes(e) for e in recent])
        return clamp(
            self.params.reference_minutes / max(average_time, MIN_AVERAGE_MINUTES),
            self.params.time_efficiency_bounds,
        )

    def _compute_variance(self, history: Sequence[ReviewEvent]) -> float:
        """
        Population standard deviation of correctness over the full history.

        Named "variance" for compatibility with stored analyses; it is the
        square root of the variance.
        """
        values = [self._correctness(e) for e in history]
        mean = _mean(values)
        variance = sum((v - mean) ** 2 for v in values) / len(values)
        return math.sqrt(variance)
