"""Fixed-ladder spaced repetition for completed topics."""
from datetime import datetime, timedelta

from devsecops_tutor.models import ReviewEntry

REVIEW_INTERVALS = (3, 7, 14, 30)  # days


def advance_schedule(
    schedule: dict[str, ReviewEntry],
    topic: str,
    now: datetime,
    intervals: tuple[int, ...] = REVIEW_INTERVALS,
) -> dict[str, ReviewEntry]:
    """Return the schedule after one completion of `topic`.

    Args:
        schedule: Current schedule; not modified.
        topic: Topic that was just completed.
        now: Completion time.
        intervals: Ascending day counts, one per rung.

    Returns:
        A new schedule. A first completion enters the ladder at rung 0, each
        later completion climbs exactly one rung, and completing the top rung
        removes the topic (mastered).
    """
    updated = dict(schedule)
    current = updated.get(topic)
    if current is None:
        next_index = 0
    else:
        next_index = current.interval_index + 1

    if next_index < len(intervals):
        updated[topic] = ReviewEntry(
            next_review_date=now + timedelta(days=intervals[next_index]),
            interval_index=next_index,
        )
    else:
        del updated[topic]
    return updated


def compute_due(schedule: dict[str, ReviewEntry], now: datetime) -> set[str]:
    return {topic for topic, entry in schedule.items() if entry.next_review_date <= now}


def next_review_in_days(entry: ReviewEntry, now: datetime) -> int:
    """Whole days until the review is due; negative when overdue."""
    return (entry.next_review_date.date() - now.date()).days
