"""Dynamic priority tiers from due-date proximity - no I/O dependencies."""

from dataclasses import replace
from datetime import datetime, timezone

from .items import PriorityTier, WorkItem
from .windows import TimeWindows

# Undated items sort after every dated one.
_FAR_FUTURE = datetime.max.replace(tzinfo=timezone.utc)


def score(item: WorkItem, windows: TimeWindows) -> PriorityTier:
    """
    Tier for an item relative to `windows.now`. First match wins:

    - no due instant: NONE
    - due today: CRITICAL
    - due tomorrow: HIGH
    - due this week: MEDIUM
    - anything else (later, or overdue from an earlier week): LOW
    """
    due = item.due_instant
    if due is None:
        return PriorityTier.NONE
    if windows.today_window().contains(due):
        return PriorityTier.CRITICAL
    if windows.day_window(1).contains(due):
        return PriorityTier.HIGH
    if windows.week_window(0).contains(due):
        return PriorityTier.MEDIUM
    return PriorityTier.LOW


def assign_tiers(items: list[WorkItem], windows: TimeWindows) -> list[WorkItem]:
    """Copies of `items` with priority_tier recomputed for this pass."""
    return [replace(item, priority_tier=score(item, windows)) for item in items]


def sort_key(item: WorkItem) -> tuple:
    """Tier descending, then due ascending, then title, then id."""
    return (
        -int(item.priority_tier),
        item.due_instant or _FAR_FUTURE,
        item.title,
        item.id,
    )


def sort_by_priority(items: list[WorkItem]) -> list[WorkItem]:
    return sorted(items, key=sort_key)
