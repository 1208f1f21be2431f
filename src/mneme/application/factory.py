"""
Scheduling Factory
Centralizes the logic for selecting storage adapters and wiring the service.
"""

from mneme.application.config import AppConfig
from mneme.application.scheduling.interval_scheduler import IntervalScheduler
from mneme.application.scheduling.performance_analyzer import PerformanceAnalyzer
from mneme.application.scheduling.service import ReschedulingService
from mneme.domain.scheduling.ports import ReviewHistoryProvider, ScheduleStore
from mneme.infrastructure.adapters.memory import InMemoryReviewHistory, InMemoryScheduleStore
from mneme.infrastructure.adapters.sqlite import (
    SqliteDatabase,
    SqliteReviewHistory,
    SqliteScheduleStore,
)


def get_repositories(config: AppConfig) -> tuple[ReviewHistoryProvider, ScheduleStore]:
    """
    Returns the history provider and schedule store selected by config.
    """
    if config.backend == "memory":
        return InMemoryReviewHistory(), InMemoryScheduleStore()

    db = SqliteDatabase(config.db_path)
    return SqliteReviewHistory(db), SqliteScheduleStore(db)


def build_rescheduling_service(config: AppConfig) -> ReschedulingService:
    """
    Wires a ReschedulingService with the configured adapters and tuning.
    """
    history, store = get_repositories(config)
    params = config.tuning.to_parameters()
    return ReschedulingService(
        history=history,
        store=store,
        analyzer=PerformanceAnalyzer(params),
        scheduler=IntervalScheduler(params),
        history_limit=config.history_limit,
        max_write_retries=config.max_write_retries,
    )
