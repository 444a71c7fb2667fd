"""Review queue: which completed topics are due, and when the rest come back."""
from datetime import datetime

from devsecops_tutor.progress import ProgressStore, utcnow
from devsecops_tutor.scheduler import next_review_in_days


def get_review_queue(store: ProgressStore, now: datetime | None = None) -> list[dict]:
    """Scheduled topics, soonest first, flagged with whether they are due now."""
    now = now or utcnow()
    due = store.due_topics()
    rows = [
        {
            "topic": topic,
            "next_review_date": entry.next_review_date,
            "interval_index": entry.interval_index,
            "rung": f"{entry.interval_index + 1}/{len(store.intervals)}",
            "in_days": next_review_in_days(entry, now),
            "due": topic in due,
        }
        for topic, entry in store.schedule.items()
    ]
    return sorted(rows, key=lambda r: (r["next_review_date"], r["topic"]))


def get_due_topics(store: ProgressStore) -> list[str]:
    return [row["topic"] for row in get_review_queue(store) if row["due"]]


def get_mastered_topics(store: ProgressStore) -> list[str]:
    """Completed topics that have left the review ladder."""
    schedule = store.schedule
    return [topic for topic in store.topics if store.is_completed(topic) and topic not in schedule]
