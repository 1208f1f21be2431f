# Application Scheduling Package
from .interval_scheduler import IntervalScheduler
from .performance_analyzer import PerformanceAnalyzer, validate_event
from .service import ReschedulingService

__all__ = ["PerformanceAnalyzer", "IntervalScheduler", "ReschedulingService", "validate_event"]
