"""Pipeline wiring: raw collections in, one Workload snapshot out."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo

from .aggregate import DEFAULT_HISTORY_WEEKS, DEFAULT_UPCOMING_WEEKS, WorkloadView, aggregate
from .filters import DEFAULT_STALE_CUTOFF_DAYS, dedupe, filter_stale
from .freetime import (
    DISTRIBUTION_DAYS,
    ESSENTIAL_HOURS,
    OVERDUE_SURCHARGE_HOURS,
    FreeTimeEstimate,
    SleepConfig,
    estimate_free_time,
)
from .items import (
    DEFAULT_COURSE_LABEL,
    DEFAULT_ESTIMATED_HOURS,
    SourceKind,
    WorkItem,
    normalize_all,
    normalize_events,
)
from .priority import assign_tiers
from .windows import TimeWindows

logger = logging.getLogger(__name__)


@dataclass
class EngineSettings:
    """Every tunable the pipeline reads."""

    tz: tzinfo = timezone.utc
    week_start: int = 0
    stale_cutoff_days: int = DEFAULT_STALE_CUTOFF_DAYS
    history_weeks: int = DEFAULT_HISTORY_WEEKS
    upcoming_weeks: int = DEFAULT_UPCOMING_WEEKS
    essential_hours: float = ESSENTIAL_HOURS
    overdue_surcharge_hours: float = OVERDUE_SURCHARGE_HOURS
    default_estimated_hours: float = DEFAULT_ESTIMATED_HOURS
    distribution_days: int = DISTRIBUTION_DAYS
    fallback_course_label: str = DEFAULT_COURSE_LABEL
    reinterpret_end_of_day: bool = True
    strict: bool = False

    def windows(self, now: datetime) -> TimeWindows:
        return TimeWindows(now, self.tz, self.week_start)

    def normalize_options(self) -> dict:
        return {
            "fallback_course_label": self.fallback_course_label,
            "reinterpret_end_of_day": self.reinterpret_end_of_day,
            "default_estimated_hours": self.default_estimated_hours,
        }


@dataclass
class Workload:
    """Result of one full pipeline pass."""

    now: datetime
    items: list[WorkItem]
    view: WorkloadView
    free_time: FreeTimeEstimate


def normalize_items(
    tasks: list[dict],
    events: list[dict],
    windows: TimeWindows,
    settings: EngineSettings,
) -> list[WorkItem]:
    """Normalize raw records and drop repeated ids."""
    items = normalize_all(tasks, events, windows, **settings.normalize_options())
    return dedupe(items, strict=settings.strict)


def prepare_items(items: list[WorkItem], windows: TimeWindows, settings: EngineSettings) -> list[WorkItem]:
    """Hide stale assignments and score the rest for display."""
    return assign_tiers(filter_stale(items, windows, settings.stale_cutoff_days), windows)


def build_workload(
    tasks: list[dict],
    events: list[dict],
    now: datetime,
    settings: EngineSettings | None = None,
    sleep: SleepConfig | None = None,
) -> Workload:
    """
    Run the full pipeline over a snapshot of the raw collections.

    Pure function - no I/O. `now` is the only notion of time used; calling
    this twice with the same arguments gives equal results.
    """
    settings = settings or EngineSettings()
    windows = settings.windows(now)

    normalized = normalize_items(tasks, events, windows, settings)
    items = prepare_items(normalized, windows, settings)
    view = aggregate(
        items,
        windows,
        history_weeks=settings.history_weeks,
        upcoming_weeks=settings.upcoming_weeks,
        strict=settings.strict,
    )
    # Stale assignments still cost time today
    free_time = estimate_free_time(
        normalized,
        normalize_events(events, windows),
        sleep,
        windows,
        essential_hours=settings.essential_hours,
        overdue_surcharge_hours=settings.overdue_surcharge_hours,
        distribution_days=settings.distribution_days,
    )
    logger.debug(f"Built workload with {len(items)} items at {now.isoformat()}")
    return Workload(now=now, items=items, view=view, free_time=free_time)


def find_item(items: list[WorkItem], item_id: str, source_kind: SourceKind | None = None) -> WorkItem | None:
    """Look up an item by id, optionally restricted to one source."""
    for item in items:
        if item.id == item_id and (source_kind is None or item.source_kind is source_kind):
            return item
    return None
