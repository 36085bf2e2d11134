"""Configuration management for Workload."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .core.engine import EngineSettings
from .core.errors import MalformedInputError, MissingConfigurationError
from .core.freetime import SleepConfig
from .core.windows import parse_weekday

logger = logging.getLogger(__name__)

WORKLOAD_HOME = Path(os.environ.get("WORKLOAD_HOME", Path.home() / "workload"))
CONFIG_FILE = WORKLOAD_HOME / "config" / "workload.conf"
DATA_DIR = WORKLOAD_HOME / "data"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class Config:
    """Workload configuration."""

    timezone: str = "UTC"
    week_start_day: str = "Monday"
    # Empty until the user sets a sleep schedule
    wake_up_time: str = ""
    bed_time: str = ""
    stale_cutoff_days: int = 7
    history_weeks: int = 4
    upcoming_weeks: int = 4
    essential_hours: float = 6.0
    overdue_surcharge_hours: float = 1.5
    default_estimated_hours: float = 2.0
    distribution_days: int = 3
    fallback_course_label: str = "Synced Course"
    reinterpret_end_of_day: bool = True
    strict: bool = False
    # Storage
    store: str = "file"
    data_dir: str = ""
    api_url: str = ""
    api_key: str = ""
    user_id: str = ""

    def tzinfo(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise MissingConfigurationError(f"Unknown timezone: {self.timezone!r}") from e

    def engine_settings(self) -> EngineSettings:
        """Engine tunables from this configuration."""
        try:
            week_start = parse_weekday(self.week_start_day)
        except ValueError:
            logger.warning(f"Unknown WEEK_START_DAY {self.week_start_day!r}, using Monday")
            week_start = 0
        return EngineSettings(
            tz=self.tzinfo(),
            week_start=week_start,
            stale_cutoff_days=self.stale_cutoff_days,
            history_weeks=self.history_weeks,
            upcoming_weeks=self.upcoming_weeks,
            essential_hours=self.essential_hours,
            overdue_surcharge_hours=self.overdue_surcharge_hours,
            default_estimated_hours=self.default_estimated_hours,
            distribution_days=self.distribution_days,
            fallback_course_label=self.fallback_course_label,
            reinterpret_end_of_day=self.reinterpret_end_of_day,
            strict=self.strict,
        )

    def sleep_config(self) -> SleepConfig | None:
        """Sleep schedule, or None if unset or unparseable."""
        if not self.wake_up_time or not self.bed_time:
            return None
        try:
            return SleepConfig.from_strings(self.wake_up_time, self.bed_time)
        except MalformedInputError as e:
            logger.warning(f"Ignoring sleep schedule: {e}")
            return None


def _unquote(value: str) -> str:
    """Handle quoted values with inline comments: "value" # comment"""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _as_int(key: str, value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {key.upper()}: {value!r}")
        return default


def _as_float(key: str, value: str, default: float) -> float:
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Invalid number for {key.upper()}: {value!r}")
        return default


def _as_bool(key: str, value: str, default: bool) -> bool:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    logger.warning(f"Invalid boolean for {key.upper()}: {value!r}")
    return default


def load_config(path: Path | None = None) -> Config:
    """Load configuration from workload.conf file."""
    path = path or CONFIG_FILE
    config = Config()

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "timezone":
                config.timezone = value
            case "week_start_day":
                config.week_start_day = value
            case "wake_up_time":
                config.wake_up_time = value
            case "bed_time":
                config.bed_time = value
            case "stale_cutoff_days":
                config.stale_cutoff_days = _as_int(key, value, config.stale_cutoff_days)
            case "history_weeks":
                config.history_weeks = _as_int(key, value, config.history_weeks)
            case "upcoming_weeks":
                config.upcoming_weeks = _as_int(key, value, config.upcoming_weeks)
            case "essential_hours":
                config.essential_hours = _as_float(key, value, config.essential_hours)
            case "overdue_surcharge_hours":
                config.overdue_surcharge_hours = _as_float(key, value, config.overdue_surcharge_hours)
            case "default_estimated_hours":
                config.default_estimated_hours = _as_float(key, value, config.default_estimated_hours)
            case "distribution_days":
                config.distribution_days = _as_int(key, value, config.distribution_days)
            case "fallback_course_label":
                config.fallback_course_label = value
            case "reinterpret_end_of_day":
                config.reinterpret_end_of_day = _as_bool(key, value, config.reinterpret_end_of_day)
            case "strict":
                config.strict = _as_bool(key, value, config.strict)
            case "store":
                config.store = value.lower()
            case "data_dir":
                config.data_dir = value
            case "api_url":
                config.api_url = value
            case "api_key":
                config.api_key = value
            case "user_id":
                config.user_id = value
            case _:
                logger.debug(f"Ignoring unknown config key {key.upper()}")

    return config
