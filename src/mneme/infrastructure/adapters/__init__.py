# Infrastructure Scheduling Adapters Package
from .memory import InMemoryReviewHistory, InMemoryScheduleStore
from .sqlite import SqliteDatabase, SqliteReviewHistory, SqliteScheduleStore

__all__ = [
    "InMemoryReviewHistory",
    "InMemoryScheduleStore",
    "SqliteDatabase",
    "SqliteReviewHistory",
    "SqliteScheduleStore",
]
