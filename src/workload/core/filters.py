"""Pure item filtering - staleness, duplicates, past-due."""

import logging
from datetime import timedelta

from .errors import InvariantViolation
from .items import SourceKind, WorkItem
from .windows import TimeWindows

logger = logging.getLogger(__name__)

DEFAULT_STALE_CUTOFF_DAYS = 7


def dedupe(items: list[WorkItem], strict: bool = False) -> list[WorkItem]:
    """
    Drop repeated (source_kind, id) pairs, last occurrence wins.

    The surviving item keeps the position of the first occurrence.
    In strict mode a duplicate raises InvariantViolation instead.
    """
    seen: dict[tuple[SourceKind, str], WorkItem] = {}
    for item in items:
        key = (item.source_kind, item.id)
        if key in seen:
            if strict:
                raise InvariantViolation(f"Duplicate {item.source_kind.value} id {item.id!r}")
            logger.warning(f"Duplicate {item.source_kind.value} id {item.id!r}, keeping latest")
        seen[key] = item
    return list(seen.values())


def is_stale(item: WorkItem, windows: TimeWindows, cutoff_days: int = DEFAULT_STALE_CUTOFF_DAYS) -> bool:
    """Incomplete synced assignment due more than `cutoff_days` before today."""
    if not item.is_synced or item.is_completed or item.due_instant is None:
        return False
    cutoff = windows.today_window().start - timedelta(days=cutoff_days)
    return item.due_instant < cutoff


def filter_stale(
    items: list[WorkItem],
    windows: TimeWindows,
    cutoff_days: int = DEFAULT_STALE_CUTOFF_DAYS,
) -> list[WorkItem]:
    """
    Hide long-abandoned synced assignments.

    Manual tasks and completed items are never dropped by this rule.
    """
    kept = [item for item in items if not is_stale(item, windows, cutoff_days)]
    if len(kept) != len(items):
        logger.debug(f"Dropped {len(items) - len(kept)} stale assignments (cutoff {cutoff_days}d)")
    return kept


def filter_items(
    items: list[WorkItem],
    windows: TimeWindows,
    cutoff_days: int = DEFAULT_STALE_CUTOFF_DAYS,
    strict: bool = False,
) -> list[WorkItem]:
    """Dedupe, then drop stale assignments."""
    return filter_stale(dedupe(items, strict=strict), windows, cutoff_days)


def filter_past_due(items: list[WorkItem], windows: TimeWindows) -> list[WorkItem]:
    """Incomplete items due before today, most recent first."""
    today_start = windows.today_window().start
    overdue = [
        item
        for item in items
        if not item.is_completed and item.due_instant is not None and item.due_instant < today_start
    ]
    return sorted(overdue, key=lambda item: (-item.due_instant.timestamp(), item.title))


def filter_unscheduled(items: list[WorkItem]) -> list[WorkItem]:
    """Incomplete items with no due instant, by title."""
    return sorted(
        (item for item in items if item.due_instant is None and not item.is_completed),
        key=lambda item: (item.title, item.id),
    )
