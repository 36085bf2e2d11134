"""Pure aggregation of scored work items into day and week views."""

import logging
import math
from dataclasses import dataclass, field

from .errors import InvariantViolation
from .filters import filter_past_due, filter_unscheduled
from .items import WorkItem
from .priority import sort_by_priority, sort_key
from .windows import TimeWindow, TimeWindows

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_WEEKS = 4
DEFAULT_UPCOMING_WEEKS = 4


def completion_percentage(completed: int, total: int) -> int:
    """Whole-number percentage, halves rounded up. 0 for an empty set."""
    if total == 0:
        return 0
    return math.floor(completed * 100 / total + 0.5)


@dataclass
class WeeklyGroup:
    """Items due within one week, with completion statistics."""

    window: TimeWindow
    items: list[WorkItem]
    total_count: int
    completed_count: int
    completion_percentage: int
    is_current_week: bool


@dataclass
class WeeklyProgress:
    """The current week plus non-empty neighbouring weeks."""

    current: WeeklyGroup
    previous: list[WeeklyGroup] = field(default_factory=list)
    upcoming: list[WeeklyGroup] = field(default_factory=list)


@dataclass
class WorkloadView:
    """Every view derived from one aggregation pass."""

    today: list[WorkItem]
    due_this_week: list[WorkItem]
    completed_today: list[WorkItem]
    past_due: list[WorkItem]
    unscheduled: list[WorkItem]
    weekly: WeeklyProgress
    day_buckets: dict[str, list[WorkItem]]


def weekly_group(items: list[WorkItem], windows: TimeWindows, offset_weeks: int = 0) -> WeeklyGroup:
    """Completed and pending items due in the week at `offset_weeks`."""
    window = windows.week_window(offset_weeks)
    members = sorted(
        (item for item in items if window.contains(item.due_instant)),
        key=lambda item: (item.due_instant, item.title, item.id),
    )
    completed = sum(1 for item in members if item.is_completed)
    return WeeklyGroup(
        window=window,
        items=members,
        total_count=len(members),
        completed_count=completed,
        completion_percentage=completion_percentage(completed, len(members)),
        is_current_week=offset_weeks == 0,
    )


def weekly_progress(
    items: list[WorkItem],
    windows: TimeWindows,
    history_weeks: int = DEFAULT_HISTORY_WEEKS,
    upcoming_weeks: int = DEFAULT_UPCOMING_WEEKS,
) -> WeeklyProgress:
    """
    Current week (always present) plus previous and upcoming weeks.

    Neighbouring weeks with no items are left out. Previous weeks are
    ordered most recent first.
    """
    previous = [weekly_group(items, windows, -i) for i in range(1, history_weeks + 1)]
    upcoming = [weekly_group(items, windows, i) for i in range(1, upcoming_weeks + 1)]
    return WeeklyProgress(
        current=weekly_group(items, windows, 0),
        previous=[g for g in previous if g.total_count > 0],
        upcoming=[g for g in upcoming if g.total_count > 0],
    )


def due_today(items: list[WorkItem], windows: TimeWindows) -> list[WorkItem]:
    """Pending items due today, in priority order."""
    window = windows.today_window()
    return sort_by_priority([i for i in items if not i.is_completed and window.contains(i.due_instant)])


def due_this_week(items: list[WorkItem], windows: TimeWindows) -> list[WorkItem]:
    """Pending items due this week, in priority order."""
    window = windows.week_window(0)
    return sort_by_priority([i for i in items if not i.is_completed and window.contains(i.due_instant)])


def completed_today(items: list[WorkItem], windows: TimeWindows) -> list[WorkItem]:
    """
    Items finished today.

    Manual tasks count when their completion timestamp is today. Synced
    assignments have no such timestamp, so they count when completed and
    due today.
    """
    window = windows.today_window()
    done = []
    for item in items:
        if not item.is_completed:
            continue
        if item.is_manual and window.contains(item.completed_at):
            done.append(item)
        elif item.is_synced and window.contains(item.due_instant):
            done.append(item)
    return sort_by_priority(done)


def day_buckets(items: list[WorkItem], windows: TimeWindows) -> dict[str, list[WorkItem]]:
    """Dated items grouped by local day; pending before completed within a day."""
    buckets: dict[str, list[WorkItem]] = {}
    for item in items:
        if item.due_instant is None:
            continue
        buckets.setdefault(windows.day_bucket_key(item.due_instant), []).append(item)
    return {
        key: sorted(buckets[key], key=lambda item: (item.is_completed, sort_key(item)))
        for key in sorted(buckets)
    }


def _check_partition(items: list[WorkItem], buckets: dict[str, list[WorkItem]]) -> None:
    dated = sum(1 for item in items if item.due_instant is not None)
    bucketed = sum(len(b) for b in buckets.values())
    if dated != bucketed:
        raise InvariantViolation(f"{dated} dated items but {bucketed} bucket entries")


def aggregate(
    items: list[WorkItem],
    windows: TimeWindows,
    history_weeks: int = DEFAULT_HISTORY_WEEKS,
    upcoming_weeks: int = DEFAULT_UPCOMING_WEEKS,
    strict: bool = False,
) -> WorkloadView:
    """
    Build every view from scored items.

    Pure function - no I/O. Completion state is read from `items` as given,
    never from an earlier pass.
    """
    buckets = day_buckets(items, windows)
    if strict:
        _check_partition(items, buckets)

    view = WorkloadView(
        today=due_today(items, windows),
        due_this_week=due_this_week(items, windows),
        completed_today=completed_today(items, windows),
        past_due=filter_past_due(items, windows),
        unscheduled=filter_unscheduled(items),
        weekly=weekly_progress(items, windows, history_weeks, upcoming_weeks),
        day_buckets=buckets,
    )
    logger.debug(
        f"Aggregated {len(items)} items: {len(view.today)} today, "
        f"{view.weekly.current.total_count} this week, {len(buckets)} days"
    )
    return view
