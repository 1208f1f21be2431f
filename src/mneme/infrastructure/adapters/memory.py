"""
In-memory adapters for the scheduling ports.

Useful for tests and for running the service without a database.
"""

from collections import defaultdict
from dataclasses import replace

from mneme.domain.errors import StaleScheduleError
from mneme.domain.scheduling.models import ReviewEvent, ScheduleState, to_utc
from mneme.domain.scheduling.ports import ReviewHistoryProvider, ScheduleStore


class InMemoryReviewHistory(ReviewHistoryProvider):
    """Review events kept per (user, concept), oldest first."""

    def __init__(self):
        self._events: dict[tuple[str, str], list[ReviewEvent]] = defaultdict(list)

    def add_event(self, user_id: str, concept_id: str, event: ReviewEvent) -> None:
        """Append a review event; its timestamp must be timezone-aware."""
        event = replace(event, timestamp=to_utc(event.timestamp))
        self._events[(user_id, concept_id)].append(event)

    async def fetch(
        self, user_id: str, concept_id: str, limit: int
    ) -> list[ReviewEvent]:
        events = sorted(
            self._events.get((user_id, concept_id), []),
            key=lambda e: e.timestamp,
            reverse=True,
        )
        return events[:limit]


class InMemoryScheduleStore(ScheduleStore):
    """
    Dict-backed schedule store with the same conditional-write rule as SQLite.
    """

    def __init__(self):
        self._items: dict[tuple[str, str], ScheduleState] = {}

    async def get(self, user_id: str, concept_id: str) -> ScheduleState | None:
        return self._items.get((user_id, concept_id))

    async def upsert(self, state: ScheduleState) -> ScheduleState:
        key = (state.user_id, state.concept_id)
        expected = state.repetitions - 1

        current = self._items.get(key)
        current_reps = current.repetitions if current else 0
        if current_reps != expected:
            raise StaleScheduleError(state.user_id, state.concept_id, expected)
        self._items[key] = state

        return state
