"""
SQLite adapters for the scheduling ports.

Implements ReviewHistoryProvider over the ``progress_logs`` table and
ScheduleStore over ``spaced_items``.
"""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from mneme.domain.errors import PersistenceError, StaleScheduleError
from mneme.domain.scheduling.models import ReviewEvent, ScheduleState, to_utc
from mneme.domain.scheduling.ports import ReviewHistoryProvider, ScheduleStore

logger = logging.getLogger(__name__)

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS progress_logs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        concept_id TEXT NOT NULL,
        created_at TEXT NOT NULL,
        correctness REAL,
        confidence_after INTEGER,
        time_taken_minutes REAL
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_progress_user_concept "
    "ON progress_logs(user_id, concept_id, created_at);",
    """
    CREATE TABLE IF NOT EXISTS spaced_items (
        user_id TEXT NOT NULL,
        concept_id TEXT NOT NULL,
        concept_title TEXT NOT NULL,
        ease_factor REAL NOT NULL,
        interval_days INTEGER NOT NULL,
        repetitions INTEGER NOT NULL,
        last_reviewed TEXT NOT NULL,
        next_review TEXT NOT NULL,
        PRIMARY KEY (user_id, concept_id)
    );
    """,
)


class SqliteDatabase:
    """
    A SQLite file holding both tables. Connections are opened per operation.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._initialized = False

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        """
        Yield a connection inside a transaction.

        Any sqlite3 or filesystem error is re-raised as PersistenceError.
        """
        try:
            if not self._initialized:
                self._init_db()
            conn = sqlite3.connect(self.db_path, timeout=10.0)
            conn.row_factory = sqlite3.Row
            try:
                with conn:
                    yield conn
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            raise PersistenceError(f"Storage error on {self.db_path}: {e}") from e

    def _init_db(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path, timeout=10.0)
        try:
            with conn:
                for statement in SCHEMA:
                    conn.execute(statement)
        finally:
            conn.close()
        self._initialized = True
        logger.debug(f"Initialized schedule database at {self.db_path}")


class SqliteReviewHistory(ReviewHistoryProvider):
    """Reads review events from ``progress_logs``."""

    def __init__(self, db: SqliteDatabase):
        self.db = db

    async def fetch(
        self, user_id: str, concept_id: str, limit: int
    ) -> list[ReviewEvent]:
        query = (
            "SELECT created_at, correctness, confidence_after, time_taken_minutes "
            "FROM progress_logs WHERE user_id = ? AND concept_id = ? "
            "ORDER BY created_at DESC, id DESC LIMIT ?"
        )
        with self.db.connect() as conn:
            rows = conn.execute(query, (user_id, concept_id, limit)).fetchall()

        return [
            ReviewEvent(
                timestamp=datetime.fromisoformat(row["created_at"]),
                correctness=row["correctness"],
                confidence_after=row["confidence_after"],
                time_taken_minutes=row["time_taken_minutes"],
            )
            for row in rows
        ]

    def add_event(self, user_id: str, concept_id: str, event: ReviewEvent) -> None:
        """
        Append a review event. Used for seeding and imports.

        ``created_at`` is stored as fixed-width UTC text so ordering by it
        follows review time across offsets.
        """
        created_at = to_utc(event.timestamp).isoformat(timespec="microseconds")
        with self.db.connect() as conn:
            conn.execute(
                "INSERT INTO progress_logs("
                "user_id, concept_id, created_at, correctness, confidence_after, time_taken_minutes"
                ") VALUES (?, ?, ?, ?, ?, ?)",
                (
                    user_id,
                    concept_id,
                    created_at,
                    event.correctness,
                    event.confidence_after,
                    event.time_taken_minutes,
                ),
            )


class SqliteScheduleStore(ScheduleStore):
    """
    Stores schedules in ``spaced_items`` with a conditional write.

    The first schedule for a pair is inserted only if no row exists; later
    ones update only the row whose repetitions is one behind the new state.
    """

    def __init__(self, db: SqliteDatabase):
        self.db = db

    async def get(self, user_id: str, concept_id: str) -> ScheduleState | None:
        with self.db.connect() as conn:
            row = conn.execute(
                "SELECT * FROM spaced_items WHERE user_id = ? AND concept_id = ?",
                (user_id, concept_id),
            ).fetchone()

        if row is None:
            return None
        return self._row_to_state(row)

    async def upsert(self, state: ScheduleState) -> ScheduleState:
        expected = state.repetitions - 1
        values = (
            state.concept_title,
            state.ease_factor,
            state.interval_days,
            state.repetitions,
            state.last_reviewed.isoformat(),
            state.next_review.isoformat(),
        )

        with self.db.connect() as conn:
            if expected == 0:
                cur = conn.execute(
                    "INSERT INTO spaced_items("
                    "user_id, concept_id, concept_title, ease_factor, interval_days, "
                    "repetitions, last_reviewed, next_review"
                    ") VALUES (?, ?, ?, ?, ?, ?, ?, ?) "
                    "ON CONFLICT(user_id, concept_id) DO NOTHING",
                    (state.user_id, state.concept_id, *values),
                )
            else:
                cur = conn.execute(
                    "UPDATE spaced_items SET concept_title = ?, ease_factor = ?, "
                    "interval_days = ?, repetitions = ?, last_reviewed = ?, next_review = ? "
                    "WHERE user_id = ? AND concept_id = ? AND repetitions = ?",
                    (*values, state.user_id, state.concept_id, expected),
                )

            if cur.rowcount != 1:
                raise StaleScheduleError(state.user_id, state.concept_id, expected)

        return state

    def _row_to_state(self, row: sqlite3.Row) -> ScheduleState:
        return ScheduleState(
            user_id=row["user_id"],
            concept_id=row["concept_id"],
            concept_title=row["concept_title"],
            ease_factor=row["ease_factor"],
            interval_days=row["interval_days"],
            repetitions=row["repetitions"],
            last_reviewed=datetime.fromisoformat(row["last_reviewed"]),
            next_review=datetime.fromisoformat(row["next_review"]),
        )
