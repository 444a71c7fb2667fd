# tests/test_review.py
from datetime import datetime, timedelta, timezone

from devsecops_tutor.review import get_due_topics, get_mastered_topics, get_review_queue
from devsecops_tutor.scheduler import REVIEW_INTERVALS

NOW = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)
SAST = "Static Application Security Testing (SAST)"
DAST = "Dynamic Application Security Testing (DAST)"


def test_empty_queue(store):
    assert get_review_queue(store, NOW) == []
    assert get_due_topics(store) == []


def test_queue_sorted_soonest_first(store):
    store.mark_complete(SAST, now=NOW)
    store.mark_complete(DAST, now=NOW - timedelta(days=2))
    queue = get_review_queue(store, NOW)
    assert [row["topic"] for row in queue] == [DAST, SAST]
    assert queue[1]["rung"] == f"1/{len(REVIEW_INTERVALS)}"
    assert queue[1]["in_days"] == 3


def test_due_flag_follows_store(store):
    store.mark_complete(SAST, now=NOW - timedelta(days=30))
    store.mark_complete(DAST, now=NOW)
    store.refresh_due(now=NOW)
    rows = {row["topic"]: row for row in get_review_queue(store, NOW)}
    assert rows[SAST]["due"] is True
    assert rows[DAST]["due"] is False
    assert get_due_topics(store) == [SAST]


def test_mastered_topics(store):
    for _ in range(len(REVIEW_INTERVALS) + 1):
        store.mark_complete(SAST, now=NOW)
    store.mark_complete(DAST, now=NOW)
    assert get_mastered_topics(store) == [SAST]
