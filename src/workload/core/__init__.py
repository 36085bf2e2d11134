"""Functional core - pure business logic with no I/O."""

from .windows import TimeWindow, TimeWindows, parse_weekday
from .items import PriorityTier, ScheduledEvent, SourceKind, WorkItem, normalize, normalize_all
from .filters import dedupe, filter_items, filter_stale
from .priority import assign_tiers, score, sort_by_priority
from .aggregate import WeeklyGroup, WeeklyProgress, WorkloadView, aggregate, weekly_group
from .freetime import FreeTimeEstimate, SleepConfig, estimate_free_time
from .toggle import CompletionUpdate, apply_update, toggle
from .engine import EngineSettings, Workload, build_workload, find_item

__all__ = [
    # Windows
    "TimeWindow",
    "TimeWindows",
    "parse_weekday",
    # Items
    "PriorityTier",
    "ScheduledEvent",
    "SourceKind",
    "WorkItem",
    "normalize",
    "normalize_all",
    # Filters
    "dedupe",
    "filter_items",
    "filter_stale",
    # Priority
    "assign_tiers",
    "score",
    "sort_by_priority",
    # Aggregation
    "WeeklyGroup",
    "WeeklyProgress",
    "WorkloadView",
    "aggregate",
    "weekly_group",
    # Free time
    "FreeTimeEstimate",
    "SleepConfig",
    "estimate_free_time",
    # Toggle
    "CompletionUpdate",
    "apply_update",
    "toggle",
    # Engine
    "EngineSettings",
    "Workload",
    "build_workload",
    "find_item",
]
