"""Progress dashboard figures."""
from devsecops_tutor import catalog
from devsecops_tutor.pace import COMPLETE, INDETERMINATE
from devsecops_tutor.progress import ProgressStore


def get_progress_label(ratio: float) -> str:
    if ratio >= 1.0:
        return "COMPLETE"
    elif ratio >= 0.6:
        return "ADVANCED"
    elif ratio >= 0.2:
        return "ON TRACK"
    return "GETTING STARTED"


def get_progress_color(ratio: float) -> str:
    if ratio >= 1.0:
        return "green"
    elif ratio >= 0.6:
        return "cyan"
    elif ratio >= 0.2:
        return "yellow"
    return "dark_orange"


def get_pace_color(status: str) -> str:
    if status == COMPLETE:
        return "green"
    elif status == INDETERMINATE:
        return "yellow"
    return "cyan"


def get_tier_progress(store: ProgressStore) -> list[dict]:
    results = []
    for tier, topics in catalog.TOPICS.items():
        completed = sum(1 for t in topics if store.is_completed(t))
        results.append({
            "tier": tier,
            "name": catalog.TIER_LABELS[tier],
            "completed": completed,
            "total": len(topics),
            "bookmarked": sum(1 for t in topics if store.is_bookmarked(t)),
            "percent": round(completed / len(topics) * 100, 1) if topics else 0.0,
        })
    return results


def get_study_stats(store: ProgressStore) -> dict:
    return {
        "completed": store.completed_count,
        "total": len(store.topics),
        "percent": round(store.completion_ratio() * 100, 1),
        "bookmarked": len(store.bookmarks),
        "scheduled": len(store.schedule),
        "due": len(store.due_topics()),
        "learning_rate": store.learning_rate,
    }
