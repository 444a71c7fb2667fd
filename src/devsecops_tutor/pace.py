"""Learning pace projection."""
from dataclasses import dataclass
from datetime import date, timedelta

COMPLETE = "complete"
INDETERMINATE = "indeterminate"
PROJECTED = "projected"


@dataclass
class PaceEstimate:
    status: str
    projected_date: date | None = None
    weeks_remaining: float = 0.0


def estimate(
    completed_count: int,
    total_count: int,
    rate_per_week: int,
    today: date | None = None,
) -> PaceEstimate:
    """Project when the remaining topics will be finished at `rate_per_week`."""
    remaining = total_count - completed_count
    if remaining <= 0:
        return PaceEstimate(status=COMPLETE)
    if rate_per_week <= 0:
        return PaceEstimate(status=INDETERMINATE)
    today = today or date.today()
    weeks = remaining / rate_per_week
    return PaceEstimate(
        status=PROJECTED,
        projected_date=today + timedelta(days=int(weeks * 7)),
        weeks_remaining=weeks,
    )


def format_estimate(pace: PaceEstimate) -> str:
    if pace.status == COMPLETE:
        return "All topics complete!"
    if pace.status == INDETERMINATE:
        return "Pick a learning pace to see an estimate."
    d = pace.projected_date
    return f"{d.strftime('%B')} {d.day}, {d.year}"
