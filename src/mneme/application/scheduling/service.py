"""
Rescheduling service: application layer orchestrator.

Coordinates fetching history and the previous schedule, running the analyzer
and scheduler, and writing the new schedule back.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from mneme.domain.constants import HISTORY_LIMIT, MAX_WRITE_RETRIES
from mneme.domain.errors import StaleScheduleError
from mneme.domain.scheduling.models import RescheduleResult
from mneme.domain.scheduling.ports import ReviewHistoryProvider, ScheduleStore

from .interval_scheduler import IntervalScheduler
from .performance_analyzer import PerformanceAnalyzer

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReschedulingService:
    """
    Application service that reschedules a concept after a review.

    Follows Dependency Inversion: depends on the ReviewHistoryProvider and
    ScheduleStore abstractions, not concrete adapter implementations.
    """

    def __init__(
        self,
        history: ReviewHistoryProvider,
        store: ScheduleStore,
        analyzer: PerformanceAnalyzer | None = None,
        scheduler: IntervalScheduler | None = None,
        history_limit: int = HISTORY_LIMIT,
        max_write_retries: int = MAX_WRITE_RETRIES,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            history: The port for fetching review events.
            store: The port for reading and writing schedules.
            analyzer: Optional custom analyzer; uses default if not provided.
            scheduler: Optional custom scheduler; uses default if not provided.
            history_limit: Maximum number of events fed to the analyzer.
            max_write_retries: Attempts before a stale write is given up on.
            clock: Source of the review timestamp.
        """
        if max_write_retries < 1:
            raise ValueError("max_write_retries must be at least 1")

        self._history = history
        self._store = store
        self._analyzer = analyzer or PerformanceAnalyzer()
        self._scheduler = scheduler or IntervalScheduler()
        self._history_limit = history_limit
        self._max_write_retries = max_write_retries
        self._clock = clock

    async def record_review_and_reschedule(
        self, user_id: str, concept_id: str, topic_label: str
    ) -> RescheduleResult:
        """
        Analyze the learner's history and store the next schedule for a concept.

        Each attempt re-reads both history and the stored schedule, so a
        writer that loses a race recomputes from the freshest state.

        Args:
            user_id: The learner.
            concept_id: The concept just reviewed.
            topic_label: Human-readable title stored with the schedule.

        Returns:
            RescheduleResult with the stored schedule and the analysis used.

        Raises:
            ValidationError: If the history contains a malformed event.
            StaleScheduleError: If every attempt lost a concurrent write.
            PersistenceError: If the history provider or store fails.
        """
        attempt = 0
        while True:
            attempt += 1
            events = await self._history.fetch(user_id, concept_id, self._history_limit)
            previous = await self._store.get(user_id, concept_id)

            analysis = self._analyzer.analyze(events)
            state = self._scheduler.next_state(
                user_id=user_id,
                concept_id=concept_id,
                concept_title=topic_label,
                analysis=analysis,
                previous=previous,
                now=self._clock(),
            )

            try:
                stored = await self._store.upsert(state)
            except StaleScheduleError as e:
                if attempt == self._max_write_retries:
                    raise
                logger.warning(f"Retrying reschedule ({attempt}/{self._max_write_retries}): {e}")
                continue

            logger.info(
                f"Rescheduled user={user_id} concept={concept_id}: "
                f"score={analysis.overall_score:.2f} trend={analysis.confidence_trend.value} "
                f"interval={stored.interval_days}d ease={stored.ease_factor:.2f} "
                f"reps={stored.repetitions}"
            )
            return RescheduleResult(schedule=stored, analysis=analysis)
