"""Learner progress store: completions, bookmarks, review schedule and pace.

The store owns four independently persisted records. Each mutation notifies
the registered listeners with the name of the record that changed; the store
registers its own `save` as the first listener, so every change is written
through to SQLite. Storage problems are logged and never raised: the
in-memory state stays authoritative for the running session.
"""
import json
import sqlite3
from datetime import date, datetime, timezone
from functools import partial
from typing import Callable

from loguru import logger

from devsecops_tutor import catalog
from devsecops_tutor.db import init_db, read_record, write_record
from devsecops_tutor.models import ReviewEntry
from devsecops_tutor.pace import PROJECTED, PaceEstimate, estimate
from devsecops_tutor.scheduler import REVIEW_INTERVALS, advance_schedule, compute_due

COMPLETED = "completed_topics"
BOOKMARKS = "bookmarked_topics"
SCHEDULE = "review_schedule"
LEARNING_RATE = "learning_rate"
RECORDS = (COMPLETED, BOOKMARKS, SCHEDULE, LEARNING_RATE)


class RecordDecodeError(ValueError):
    """A persisted record parsed as JSON but has the wrong shape."""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value) -> datetime:
    """Parse an ISO-8601 string; a trailing Z and naive values are read as UTC."""
    if not isinstance(value, str):
        raise RecordDecodeError(f"expected ISO-8601 string, got {value!r}")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def decode_topic_set(raw: str) -> dict[str, bool]:
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise RecordDecodeError(f"expected an object, got {type(data).__name__}")
    return {topic: True for topic, flag in data.items() if flag}


def decode_schedule(raw: str, intervals: tuple[int, ...] = REVIEW_INTERVALS) -> dict[str, ReviewEntry]:
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise RecordDecodeError(f"expected an object, got {type(data).__name__}")
    schedule = {}
    for topic, entry in data.items():
        if not isinstance(entry, dict):
            raise RecordDecodeError(f"schedule entry for {topic!r} is not an object")
        index = entry.get("intervalIndex")
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(intervals):
            raise RecordDecodeError(f"bad intervalIndex for {topic!r}: {index!r}")
        schedule[topic] = ReviewEntry(
            next_review_date=parse_timestamp(entry.get("nextReviewDate")),
            interval_index=index,
        )
    return schedule


def decode_learning_rate(raw: str) -> int:
    rate = json.loads(raw)
    if isinstance(rate, bool) or not isinstance(rate, int):
        raise RecordDecodeError(f"expected an integer, got {rate!r}")
    return rate


def encode_schedule(schedule: dict[str, ReviewEntry]) -> str:
    return json.dumps({
        topic: {
            "nextReviewDate": entry.next_review_date.isoformat(),
            "intervalIndex": entry.interval_index,
        }
        for topic, entry in schedule.items()
    })


class ProgressStore:
    def __init__(
        self,
        db_path: str,
        default_learning_rate: int = catalog.DEFAULT_LEARNING_RATE,
        intervals: tuple[int, ...] = REVIEW_INTERVALS,
        topics: tuple[str, ...] = catalog.ALL_TOPICS,
    ):
        self.db_path = db_path
        self.default_learning_rate = default_learning_rate
        self.intervals = intervals
        self.topics = topics
        self._completed: dict[str, bool] = {}
        self._bookmarks: dict[str, bool] = {}
        self._schedule: dict[str, ReviewEntry] = {}
        self._learning_rate = default_learning_rate
        self._due: set[str] = set()
        self._listeners: list[Callable[[str], None]] = [self.save]

    # --- records -------------------------------------------------------

    @property
    def completed(self) -> dict[str, bool]:
        return dict(self._completed)

    @property
    def bookmarks(self) -> dict[str, bool]:
        return dict(self._bookmarks)

    @property
    def schedule(self) -> dict[str, ReviewEntry]:
        return dict(self._schedule)

    @property
    def learning_rate(self) -> int:
        return self._learning_rate

    # --- lifecycle -----------------------------------------------------

    def load(self) -> tuple[dict[str, bool], dict[str, bool], dict[str, ReviewEntry], int]:
        """Read all four records; a bad record falls back to its default alone."""
        try:
            init_db(self.db_path)
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Could not initialize progress database {self.db_path}: {e}")
        self._completed = self._load_record(COMPLETED, decode_topic_set, {})
        self._bookmarks = self._load_record(BOOKMARKS, decode_topic_set, {})
        self._schedule = self._load_record(SCHEDULE, partial(decode_schedule, intervals=self.intervals), {})
        self._learning_rate = self._load_record(LEARNING_RATE, decode_learning_rate, self.default_learning_rate)
        self.refresh_due()
        logger.debug(
            f"Loaded progress: {len(self._completed)} completed, {len(self._bookmarks)} bookmarked, "
            f"{len(self._schedule)} scheduled, {len(self._due)} due"
        )
        return self.completed, self.bookmarks, self.schedule, self.learning_rate

    def _load_record(self, key: str, decode, default):
        try:
            raw = read_record(self.db_path, key)
        except sqlite3.Error as e:
            logger.warning(f"Could not read {key}, using default: {e}")
            return default
        if raw is None:
            return default
        try:
            return decode(raw)
        except (ValueError, TypeError) as e:
            logger.warning(f"Discarding malformed {key} record: {e}")
            return default

    def _encode(self, record: str) -> str:
        if record == COMPLETED:
            return json.dumps(self._completed)
        if record == BOOKMARKS:
            return json.dumps(self._bookmarks)
        if record == SCHEDULE:
            return encode_schedule(self._schedule)
        if record == LEARNING_RATE:
            return json.dumps(self._learning_rate)
        raise ValueError(f"unknown progress record: {record}")

    def save(self, record: str) -> None:
        """Persist one record. Failures are logged; memory state is kept."""
        try:
            write_record(self.db_path, record, self._encode(record))
        except (sqlite3.Error, OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save {record}: {e}")

    def add_listener(self, listener: Callable[[str], None]) -> None:
        self._listeners.append(listener)

    def _notify(self, record: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(record)
            except Exception as e:
                logger.error(f"Progress listener {listener!r} failed on {record}: {e}")

    # --- mutations -----------------------------------------------------

    def toggle_bookmark(self, topic: str) -> bool:
        """Flip the bookmark on `topic`; returns whether it is now bookmarked."""
        if self._bookmarks.pop(topic, False):
            bookmarked = False
        else:
            self._bookmarks[topic] = True
            bookmarked = True
        self._notify(BOOKMARKS)
        return bookmarked

    def mark_complete(self, topic: str, now: datetime | None = None) -> None:
        now = now or utcnow()
        if not self._completed.get(topic):
            self._completed[topic] = True
            self._notify(COMPLETED)
        self._schedule = advance_schedule(self._schedule, topic, now, self.intervals)
        self._notify(SCHEDULE)
        # Just reviewed: not due again this session.
        self._due = compute_due(self._schedule, now)
        self._due.discard(topic)
        logger.info(f"Completed {topic!r}")

    def set_learning_rate(self, rate: int) -> None:
        if isinstance(rate, bool) or not isinstance(rate, int) or rate <= 0:
            raise ValueError(f"Learning rate must be a positive integer, got {rate!r}")
        self._learning_rate = rate
        self._notify(LEARNING_RATE)

    def reset_progress(self) -> None:
        """Forget completions and the review schedule; bookmarks and pace stay."""
        self._completed = {}
        self._schedule = {}
        self._due = set()
        self._notify(COMPLETED)
        self._notify(SCHEDULE)

    # --- queries -------------------------------------------------------

    def refresh_due(self, now: datetime | None = None) -> set[str]:
        self._due = compute_due(self._schedule, now or utcnow())
        return set(self._due)

    def due_topics(self) -> set[str]:
        return set(self._due)

    def is_bookmarked(self, topic: str) -> bool:
        return bool(self._bookmarks.get(topic))

    def is_completed(self, topic: str) -> bool:
        return bool(self._completed.get(topic))

    @property
    def completed_count(self) -> int:
        return sum(1 for topic in self.topics if self._completed.get(topic))

    def completion_ratio(self) -> float:
        if not self.topics:
            return 0.0
        return self.completed_count / len(self.topics)

    def pace(self, today: date | None = None) -> PaceEstimate:
        return estimate(self.completed_count, len(self.topics), self._learning_rate, today)

    def projected_completion_date(self, today: date | None = None) -> date | str:
        """The projected date, or "complete" / "indeterminate"."""
        result = self.pace(today)
        if result.status == PROJECTED:
            return result.projected_date
        return result.status
