"""Pure rendering of workload views - no I/O dependencies."""

from .aggregate import WeeklyGroup, WorkloadView
from .engine import Workload
from .freetime import FreeTimeEstimate
from .items import PriorityTier, WorkItem
from .windows import TimeWindows


def _iso(dt) -> str | None:
    return dt.isoformat() if dt else None


def format_due(item: WorkItem, windows: TimeWindows) -> str:
    """Relative due description, e.g. "due TODAY 17:00" or "OVERDUE by 2d"."""
    if item.due_instant is None:
        return "no due date"
    local = item.due_instant.astimezone(windows.tz)
    days = windows.days_until(item.due_instant)
    if days < 0:
        return f"OVERDUE by {-days}d"
    if days == 0:
        return f"due TODAY {local.strftime('%H:%M')}"
    if days == 1:
        return f"due tomorrow {local.strftime('%H:%M')}"
    return f"due {local.strftime('%a %b %d %H:%M')}"


def format_item_line(item: WorkItem, windows: TimeWindows) -> str:
    """
    Format a single item for display.

    Pure function - no I/O.
    """
    check = "x" if item.is_completed else " "
    tier = f"[{item.priority_tier.label}] " if item.priority_tier is not PriorityTier.NONE else ""
    course = f", {item.course_label}" if item.course_label else ""
    return f"- [{check}] {tier}{item.title} ({format_due(item, windows)}{course}) #{item.id}"


def format_items(items: list[WorkItem], windows: TimeWindows, empty: str = "Nothing here.") -> str:
    return "\n".join(format_item_line(i, windows) for i in items) or empty


def format_weekly_group(group: WeeklyGroup, windows: TimeWindows) -> str:
    """Header with progress, then one line per item."""
    label = "This week" if group.is_current_week else "Week"
    header = (
        f"{label} {group.window.format()}: "
        f"{group.completed_count}/{group.total_count} done ({group.completion_percentage}%)"
    )
    return f"{header}\n{format_items(group.items, windows, 'No items due.')}"


def format_day_buckets(buckets: dict[str, list[WorkItem]], windows: TimeWindows) -> str:
    sections = [f"### {key}\n{format_items(items, windows)}" for key, items in buckets.items()]
    return "\n\n".join(sections) or "No dated items."


def format_free_time(estimate: FreeTimeEstimate) -> str:
    if not estimate.is_estimate_ready:
        return "Free time: N/A (set wake_up_time and bed_time)"
    return (
        f"Free time today: {estimate.available_hours:.1f} hrs "
        f"(awake {estimate.awake_hours:.1f}h - essentials {estimate.essential_hours:.1f}h "
        f"- committed {estimate.committed_hours:.1f}h)"
    )


def format_status(workload: Workload) -> str:
    """Compact multi-line summary."""
    view = workload.view
    week = view.weekly.current
    return "\n".join(
        [
            f"Due today: {len(view.today)}",
            f"Completed today: {len(view.completed_today)}",
            f"This week: {week.completed_count}/{week.total_count} ({week.completion_percentage}%)",
            f"Past due: {len(view.past_due)}",
            format_free_time(workload.free_time),
        ]
    )


# ============== JSON ==============


def item_to_dict(item: WorkItem) -> dict:
    return {
        "id": item.id,
        "title": item.title,
        "due": _iso(item.due_instant),
        "source": item.source_kind.value,
        "course": item.course_label,
        "completed": item.is_completed,
        "completed_at": _iso(item.completed_at),
        "estimated_hours": item.estimated_hours,
        "priority": item.priority_tier.label,
    }


def weekly_group_to_dict(group: WeeklyGroup) -> dict:
    return {
        "start": group.window.start.isoformat(),
        "end": group.window.end.isoformat(),
        "total": group.total_count,
        "completed": group.completed_count,
        "percentage": group.completion_percentage,
        "is_current_week": group.is_current_week,
        "items": [item_to_dict(i) for i in group.items],
    }


def free_time_to_dict(estimate: FreeTimeEstimate) -> dict:
    return {
        "available_hours": estimate.available_hours,
        "ready": estimate.is_estimate_ready,
        "awake_hours": estimate.awake_hours,
        "essential_hours": estimate.essential_hours,
        "committed_hours": estimate.committed_hours,
    }


def view_to_dict(view: WorkloadView) -> dict:
    return {
        "today": [item_to_dict(i) for i in view.today],
        "due_this_week": [item_to_dict(i) for i in view.due_this_week],
        "completed_today": [item_to_dict(i) for i in view.completed_today],
        "past_due": [item_to_dict(i) for i in view.past_due],
        "unscheduled": [item_to_dict(i) for i in view.unscheduled],
        "weekly": {
            "current": weekly_group_to_dict(view.weekly.current),
            "previous": [weekly_group_to_dict(g) for g in view.weekly.previous],
            "upcoming": [weekly_group_to_dict(g) for g in view.weekly.upcoming],
        },
        "days": {key: [item_to_dict(i) for i in items] for key, items in view.day_buckets.items()},
    }


def workload_to_dict(workload: Workload) -> dict:
    return {
        "now": workload.now.isoformat(),
        **view_to_dict(workload.view),
        "free_time": free_time_to_dict(workload.free_time),
    }
