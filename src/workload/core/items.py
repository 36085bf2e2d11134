"""Normalization of raw task and calendar records - no I/O dependencies."""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from enum import Enum, IntEnum

from .windows import TimeWindows

logger = logging.getLogger(__name__)

DEFAULT_ESTIMATED_HOURS = 2.0
DEFAULT_COURSE_LABEL = "Synced Course"
ASSIGNMENT_EVENT_TYPE = "assignment"

END_OF_DAY_SENTINEL = time(23, 59, 59)

_COURSE_PATTERN = re.compile(r"\[([^\]]+)\]")


class SourceKind(Enum):
    """Where a work item came from."""

    MANUAL = "manual"
    SYNCED_ASSIGNMENT = "synced_assignment"


class PriorityTier(IntEnum):
    """Due-date proximity tier. Higher value sorts first."""

    NONE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class WorkItem:
    """A manual task or synced assignment in a single shape."""

    id: str
    title: str
    due_instant: datetime | None
    source_kind: SourceKind
    course_label: str | None = None
    is_completed: bool = False
    completed_at: datetime | None = None
    estimated_hours: float = DEFAULT_ESTIMATED_HOURS
    priority_tier: PriorityTier = PriorityTier.NONE

    @property
    def is_manual(self) -> bool:
        return self.source_kind is SourceKind.MANUAL

    @property
    def is_synced(self) -> bool:
        return self.source_kind is SourceKind.SYNCED_ASSIGNMENT


@dataclass(frozen=True)
class ScheduledEvent:
    """A non-assignment calendar entry that blocks time."""

    id: str
    title: str
    start: datetime
    end: datetime | None

    def duration_hours(self, default: float = 1.0) -> float:
        """Hours between start and end; `default` if no usable end."""
        if self.end is None or self.end < self.start:
            return default
        return (self.end - self.start).total_seconds() / 3600


def parse_instant(value, windows: TimeWindows) -> datetime | None:
    """
    Parse an ISO-8601 string into an aware datetime.

    Naive values (including bare dates) are taken as local time in the
    configured zone. Returns None for empty or unparseable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(str(value).strip())
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=windows.tz)
    return dt


def _is_end_of_day_sentinel(dt: datetime) -> bool:
    return dt.utcoffset() == timedelta(0) and dt.time() == END_OF_DAY_SENTINEL


def extract_course_label(title: str, fallback: str = DEFAULT_COURSE_LABEL) -> str:
    """First bracketed substring of the title, e.g. "[CS-101] Essay" -> "CS-101"."""
    match = _COURSE_PATTERN.search(title or "")
    if match and match.group(1).strip():
        return match.group(1).strip()
    return fallback


def _estimated_hours(value, default: float) -> float:
    if value is None:
        return default
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return default
    return hours if hours > 0 else default


def normalize_manual(
    raw: dict,
    windows: TimeWindows,
    default_estimated_hours: float = DEFAULT_ESTIMATED_HOURS,
) -> WorkItem:
    """Build a WorkItem from a manual task record."""
    due = parse_instant(raw.get("due_date"), windows)
    if due is None and raw.get("due_date"):
        logger.warning(f"Unparseable due_date {raw.get('due_date')!r} on task {raw.get('id')}")

    is_completed = raw.get("completion_status") == "completed"
    completed_at = parse_instant(raw.get("completed_at"), windows) if is_completed else None

    return WorkItem(
        id=str(raw["id"]),
        title=raw.get("title") or "Untitled",
        due_instant=due,
        source_kind=SourceKind.MANUAL,
        course_label=raw.get("course_name") or None,
        is_completed=is_completed,
        completed_at=completed_at,
        estimated_hours=_estimated_hours(raw.get("estimated_hours"), default_estimated_hours),
    )


def resolve_assignment_due(
    raw: dict,
    windows: TimeWindows,
    reinterpret_end_of_day: bool = True,
) -> datetime | None:
    """
    Due instant of a synced assignment.

    Prefers start_time, falls back to end_time. A UTC 23:59:59 value marks
    "end of the day" and is moved to 23:59:59 local on the same date.
    """
    for field_name in ("start_time", "end_time"):
        value = raw.get(field_name)
        if not value:
            continue
        dt = parse_instant(value, windows)
        if dt is None:
            logger.warning(f"Unparseable {field_name} {value!r} on assignment {raw.get('id')}")
            continue
        if reinterpret_end_of_day and _is_end_of_day_sentinel(dt):
            return datetime.combine(dt.date(), END_OF_DAY_SENTINEL, tzinfo=windows.tz)
        return dt
    return None


def normalize_assignment(
    raw: dict,
    windows: TimeWindows,
    fallback_course_label: str = DEFAULT_COURSE_LABEL,
    reinterpret_end_of_day: bool = True,
    default_estimated_hours: float = DEFAULT_ESTIMATED_HOURS,
) -> WorkItem:
    """Build a WorkItem from a synced calendar assignment record."""
    title = raw.get("title") or "Untitled"
    return WorkItem(
        id=str(raw["id"]),
        title=title,
        due_instant=resolve_assignment_due(raw, windows, reinterpret_end_of_day),
        source_kind=SourceKind.SYNCED_ASSIGNMENT,
        course_label=raw.get("course_name") or extract_course_label(title, fallback_course_label),
        is_completed=bool(raw.get("is_completed")),
        # Synced sources carry no trustworthy completion time.
        completed_at=None,
        estimated_hours=default_estimated_hours,
    )


def normalize(raw: dict, source_kind: SourceKind, windows: TimeWindows, **options) -> WorkItem:
    """Dispatch to the normalizer for `source_kind`."""
    if source_kind is SourceKind.MANUAL:
        return normalize_manual(
            raw, windows, default_estimated_hours=options.get("default_estimated_hours", DEFAULT_ESTIMATED_HOURS)
        )
    return normalize_assignment(raw, windows, **options)


def is_assignment(raw: dict) -> bool:
    return raw.get("event_type") == ASSIGNMENT_EVENT_TYPE


def select_assignments(events: list[dict]) -> list[dict]:
    """Only assignment records are work items; the rest are calendar events."""
    return [e for e in events if is_assignment(e)]


def normalize_all(
    tasks: list[dict],
    events: list[dict],
    windows: TimeWindows,
    **options,
) -> list[WorkItem]:
    """Normalize both raw collections. Records without an id are skipped."""
    items = []
    for raw in tasks:
        if raw.get("id") is None:
            logger.warning(f"Skipping task without id: {raw.get('title')!r}")
            continue
        items.append(normalize(raw, SourceKind.MANUAL, windows, **options))
    for raw in select_assignments(events):
        if raw.get("id") is None:
            logger.warning(f"Skipping assignment without id: {raw.get('title')!r}")
            continue
        items.append(normalize(raw, SourceKind.SYNCED_ASSIGNMENT, windows, **options))
    logger.debug(f"Normalized {len(items)} items from {len(tasks)} tasks and {len(events)} events")
    return items


def normalize_event(raw: dict, windows: TimeWindows) -> ScheduledEvent | None:
    """Build a ScheduledEvent from a non-assignment record, or None if undated."""
    start = parse_instant(raw.get("start_time"), windows)
    if start is None:
        return None
    return ScheduledEvent(
        id=str(raw.get("id", "")),
        title=raw.get("title") or "Untitled",
        start=start,
        end=parse_instant(raw.get("end_time"), windows),
    )


def normalize_events(events: list[dict], windows: TimeWindows) -> list[ScheduledEvent]:
    """Scheduled (non-assignment) events with a parseable start time."""
    scheduled = []
    for raw in events:
        if is_assignment(raw):
            continue
        event = normalize_event(raw, windows)
        if event is not None:
            scheduled.append(event)
    return scheduled
