"""
Ports (interfaces) for review history and schedule persistence.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import ReviewEvent, ScheduleState


class ReviewHistoryProvider(ABC):
    """
    Port for reading a learner's review history.

    Implementations:
        - InMemoryReviewHistory: Dict-backed, for tests and ephemeral runs.
        - SqliteReviewHistory: Reads the progress_logs table.
    """

    @abstractmethod
    async def fetch(
        self, user_id: str, concept_id: str, limit: int
    ) -> list[ReviewEvent]:
        """
        Fetch review events for a (user, concept) pair.

        Args:
            user_id: The learner.
            concept_id: The concept being reviewed.
            limit: Maximum number of events to return.

        Returns:
            At most ``limit`` events, most recent first.

        Raises:
            PersistenceError: If the underlying storage fails.
        """
        pass


class ScheduleStore(ABC):
    """
    Port for reading and writing schedules, keyed by (user_id, concept_id).

    ``upsert`` is a conditional write: a state with ``repetitions = n + 1``
    is accepted only while the stored record has ``repetitions = n`` (or no
    record exists and ``n == 0``). Otherwise it raises StaleScheduleError.
    """

    @abstractmethod
    async def get(self, user_id: str, concept_id: str) -> ScheduleState | None:
        """Return the current schedule, or None for a concept never reviewed."""
        pass

    @abstractmethod
    async def upsert(self, state: ScheduleState) -> ScheduleState:
        """
        Replace the stored schedule with ``state``.

        Returns:
            The schedule as stored.

        Raises:
            StaleScheduleError: If a concurrent writer got there first.
            PersistenceError: If the underlying storage fails.
        """
        pass
