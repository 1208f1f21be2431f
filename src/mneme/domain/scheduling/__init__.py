# Domain Scheduling Package
from .models import (
    ConfidenceTrend,
    PerformanceAnalysis,
    RescheduleResult,
    ReviewEvent,
    ScheduleState,
    to_utc,
)
from .parameters import DEFAULT_PARAMETERS, SchedulingParameters
from .ports import ReviewHistoryProvider, ScheduleStore

__all__ = [
    "ReviewEvent",
    "ConfidenceTrend",
    "PerformanceAnalysis",
    "ScheduleState",
    "RescheduleResult",
    "SchedulingParameters",
    "DEFAULT_PARAMETERS",
    "ReviewHistoryProvider",
    "ScheduleStore",
    "to_utc",
]
