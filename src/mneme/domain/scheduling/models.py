"""
Domain models for adaptive scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from mneme.domain.errors import ValidationError


class ConfidenceTrend(str, Enum):
    """Direction of self-reported confidence, recent reviews vs. older ones."""

    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


@dataclass(frozen=True)
class ReviewEvent:
    """
    A single review outcome for a concept.

    Attributes:
        timestamp: When the review happened.
        correctness: Fraction answered correctly (0.0-1.0). None counts as 0.
        confidence_after: Self-reported confidence (1-5). None counts as 3.
        time_taken_minutes: Minutes spent on the review. None counts as 30.
    """

    timestamp: datetime
    correctness: float | None = None
    confidence_after: int | None = None
    time_taken_minutes: float | None = None


@dataclass(frozen=True)
class PerformanceAnalysis:
    """
    Summary of a learner's recent performance on one concept.

    Attributes:
        overall_score: Blended score (0.1-1.0) driving the interval tiers.
        confidence_trend: Recent vs. older confidence direction.
        time_efficiency: 60 / average minutes, clamped to 0.1-2.0.
        recent_correctness: Mean correctness over the recent window.
        average_confidence: Mean confidence over the recent window.
        performance_variance: Standard deviation of correctness over all history.
    """

    overall_score: float
    confidence_trend: ConfidenceTrend
    time_efficiency: float
    recent_correctness: float
    average_confidence: float
    performance_variance: float


@dataclass(frozen=True)
class ScheduleState:
    """
    Persisted schedule for a (user, concept) pair.

    Replaced wholesale on every review; repetitions only ever grows.
    """

    user_id: str
    concept_id: str
    concept_title: str
    ease_factor: float
    interval_days: int
    repetitions: int
    last_reviewed: datetime
    next_review: datetime


@dataclass(frozen=True)
class RescheduleResult:
    """The stored schedule together with the analysis that produced it."""

    schedule: ScheduleState
    analysis: PerformanceAnalysis


def to_utc(timestamp: datetime) -> datetime:
    """
    Convert an aware timestamp to UTC so review instants order correctly.

    Raises:
        ValidationError: If the timestamp carries no UTC offset.
    """
    if timestamp.tzinfo is None or timestamp.utcoffset() is None:
        raise ValidationError("timestamp", timestamp, "a timezone-aware datetime")
    return timestamp.astimezone(timezone.utc)
