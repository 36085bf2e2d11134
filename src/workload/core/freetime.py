"""Daily free-time heuristic - pure, no I/O."""

from dataclasses import dataclass
from datetime import time

from .errors import MalformedInputError
from .items import ScheduledEvent, WorkItem
from .windows import TimeWindows

ESSENTIAL_HOURS = 6.0
OVERDUE_SURCHARGE_HOURS = 1.5
DISTRIBUTION_DAYS = 3
DEFAULT_EVENT_HOURS = 1.0


def parse_clock(value: str) -> time:
    """Parse "HH:MM" (24h)."""
    try:
        hour_str, minute_str = value.strip().split(":")
        return time(int(hour_str), int(minute_str))
    except (AttributeError, ValueError) as e:
        raise MalformedInputError(f"Expected HH:MM, got {value!r}") from e


@dataclass(frozen=True)
class SleepConfig:
    """When the user wakes up and goes to bed."""

    wake_up_time: time
    bed_time: time

    @classmethod
    def from_strings(cls, wake_up_time: str, bed_time: str) -> "SleepConfig":
        return cls(wake_up_time=parse_clock(wake_up_time), bed_time=parse_clock(bed_time))

    def awake_hours(self) -> float:
        """Hours from wake to bed, wrapping past midnight. Equal times mean a full day."""
        wake = self.wake_up_time.hour * 60 + self.wake_up_time.minute
        bed = self.bed_time.hour * 60 + self.bed_time.minute
        return ((bed - wake) % (24 * 60) or 24 * 60) / 60


@dataclass
class FreeTimeEstimate:
    """Estimated free hours left today."""

    available_hours: float
    is_estimate_ready: bool
    awake_hours: float = 0.0
    essential_hours: float = 0.0
    committed_hours: float = 0.0

    @classmethod
    def not_ready(cls) -> "FreeTimeEstimate":
        return cls(available_hours=0.0, is_estimate_ready=False)


def events_today(events: list[ScheduledEvent], windows: TimeWindows) -> list[ScheduledEvent]:
    """Events that start or end within today."""
    window = windows.today_window()
    return [e for e in events if window.contains(e.start) or window.contains(e.end)]


def distributed_hours(
    items: list[WorkItem],
    windows: TimeWindows,
    distribution_days: int = DISTRIBUTION_DAYS,
) -> float:
    """
    Today's share of effort for pending items due by midnight
    `distribution_days` from now, overdue ones included.

    Overdue synced assignments are left to the surcharge instead.
    """
    cutoff = windows.day_window(distribution_days).start
    today_start = windows.today_window().start
    total = 0.0
    for item in items:
        if item.is_completed or item.due_instant is None or item.due_instant > cutoff:
            continue
        if item.is_synced and item.due_instant < today_start:
            continue
        total += item.estimated_hours / max(1, windows.days_until(item.due_instant))
    return total


def overdue_assignments(items: list[WorkItem], windows: TimeWindows) -> list[WorkItem]:
    """Pending synced assignments due before today."""
    today_start = windows.today_window().start
    return [
        item
        for item in items
        if item.is_synced
        and not item.is_completed
        and item.due_instant is not None
        and item.due_instant < today_start
    ]


def estimate_free_time(
    items: list[WorkItem],
    events: list[ScheduledEvent],
    sleep: SleepConfig | None,
    windows: TimeWindows,
    essential_hours: float = ESSENTIAL_HOURS,
    overdue_surcharge_hours: float = OVERDUE_SURCHARGE_HOURS,
    distribution_days: int = DISTRIBUTION_DAYS,
) -> FreeTimeEstimate:
    """
    Estimate today's free hours.

    awake hours - essentials - (today's events + distributed task effort +
    a surcharge per overdue assignment), floored at 0 and rounded to one
    decimal. Without a sleep schedule the estimate is reported as not ready
    rather than guessed.
    """
    if sleep is None:
        return FreeTimeEstimate.not_ready()

    awake = sleep.awake_hours()
    available = max(0.0, awake - essential_hours)

    committed = sum(e.duration_hours(DEFAULT_EVENT_HOURS) for e in events_today(events, windows))
    committed += distributed_hours(items, windows, distribution_days)
    committed += overdue_surcharge_hours * len(overdue_assignments(items, windows))

    return FreeTimeEstimate(
        available_hours=round(max(0.0, available - committed), 1),
        is_estimate_ready=True,
        awake_hours=round(awake, 1),
        essential_hours=essential_hours,
        committed_hours=round(committed, 1),
    )
