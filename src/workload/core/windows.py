"""Pure calendar window arithmetic - no I/O, no system clock."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

END_OF_DAY = time(23, 59, 59, 999000)


def parse_weekday(name: str) -> int:
    """Weekday number (Monday=0) from a day name or three-letter prefix."""
    key = name.strip().lower()
    for i, day in enumerate(WEEKDAYS):
        if key == day or (len(key) >= 3 and day.startswith(key)):
            return i
    raise ValueError(f"Unknown weekday: {name!r}")


@dataclass(frozen=True)
class TimeWindow:
    """A closed time window; both ends are inclusive."""

    start: datetime
    end: datetime

    def contains(self, dt: datetime | None) -> bool:
        if dt is None:
            return False
        return self.start <= dt <= self.end

    def format(self) -> str:
        if self.start.date() == self.end.date():
            return self.start.strftime("%a %b %d")
        return f"{self.start.strftime('%b %d')} - {self.end.strftime('%b %d')}"


class TimeWindows:
    """
    Day and week windows around a fixed reference instant.

    `now` is supplied by the caller and never read from the clock, so every
    window computed from the same instance is reproducible.
    """

    def __init__(self, now: datetime, tz: tzinfo, week_start: int = 0):
        if now.tzinfo is None or now.utcoffset() is None:
            raise ValueError("now must be timezone-aware")
        if not 0 <= week_start <= 6:
            raise ValueError(f"week_start must be 0-6, got {week_start}")
        self.now = now
        self.tz = tz
        self.week_start = week_start

    @property
    def today(self) -> date:
        """Calendar date of `now` in the configured zone."""
        return self.now.astimezone(self.tz).date()

    def _window_for_dates(self, first: date, last: date) -> TimeWindow:
        return TimeWindow(
            start=datetime.combine(first, time.min, tzinfo=self.tz),
            end=datetime.combine(last, END_OF_DAY, tzinfo=self.tz),
        )

    def today_window(self) -> TimeWindow:
        return self.day_window(0)

    def day_window(self, offset_days: int = 0) -> TimeWindow:
        """Window for the calendar day `offset_days` away from today."""
        d = self.today + timedelta(days=offset_days)
        return self._window_for_dates(d, d)

    def week_window(self, offset_weeks: int = 0) -> TimeWindow:
        """
        Window for the week containing now + offset_weeks * 7 days.

        Starts at midnight on the configured week-start day and ends six
        days later at 23:59:59.999.
        """
        shifted = self.today + timedelta(weeks=offset_weeks)
        first = shifted - timedelta(days=(shifted.weekday() - self.week_start) % 7)
        return self._window_for_dates(first, first + timedelta(days=6))

    def local_date(self, instant: datetime) -> date:
        return instant.astimezone(self.tz).date()

    def day_bucket_key(self, instant: datetime) -> str:
        """Stable YYYY-MM-DD key for grouping by local calendar day."""
        return self.local_date(instant).isoformat()

    def days_until(self, instant: datetime) -> int:
        """Calendar days from today to the instant's local date (negative if past)."""
        return (self.local_date(instant) - self.today).days
