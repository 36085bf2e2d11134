"""Workload CLI - prioritized view of tasks and synced assignments."""

import json
import logging
import sys
from datetime import datetime

import click

from .adapters.rest_api import ApiError
from .config import Config, load_config
from .core.engine import Workload
from .core.errors import WorkloadError
from .core.items import SourceKind
from .core.report import (
    format_day_buckets,
    format_free_time,
    format_items,
    format_status,
    format_weekly_group,
    free_time_to_dict,
    item_to_dict,
    weekly_group_to_dict,
    workload_to_dict,
)
from .workflows import load_workload, set_completion


def _now(config: Config, as_of: str | None) -> datetime:
    """The single wall-clock read, unless --as-of pins it."""
    tz = config.tzinfo()
    if not as_of:
        return datetime.now(tz)
    try:
        now = datetime.fromisoformat(as_of)
    except ValueError:
        raise click.BadParameter(f"not an ISO-8601 timestamp: {as_of!r}", param_hint="--as-of")
    return now if now.tzinfo else now.replace(tzinfo=tz)


def _load(as_of: str | None) -> tuple[Config, Workload]:
    config = load_config()
    try:
        return config, load_workload(config, _now(config, as_of))
    except (WorkloadError, ApiError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2))


as_of_option = click.option(
    "--as-of", "as_of", default=None, help="Reference time (ISO-8601), defaults to now"
)
json_option = click.option("--json", "as_json", is_flag=True, help="Output as JSON")


@click.group()
@click.version_option(package_name="workload")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Workload - what is due, and how much time is left."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
@json_option
@as_of_option
def today(as_json: bool, as_of: str | None):
    """List pending items due today, most urgent first."""
    config, workload = _load(as_of)
    items = workload.view.today
    if as_json:
        _echo_json([item_to_dict(i) for i in items])
        return
    windows = config.engine_settings().windows(workload.now)
    click.echo(format_items(items, windows, "Nothing due today."))


@main.command()
@json_option
@as_of_option
@click.option("--history", is_flag=True, help="Include previous weeks")
@click.option("--upcoming", is_flag=True, help="Include upcoming weeks")
def week(as_json: bool, as_of: str | None, history: bool, upcoming: bool):
    """Show this week's items with completion progress."""
    config, workload = _load(as_of)
    progress = workload.view.weekly
    groups = [progress.current]
    if history:
        groups = list(reversed(progress.previous)) + groups
    if upcoming:
        groups = groups + progress.upcoming

    if as_json:
        _echo_json([weekly_group_to_dict(g) for g in groups])
        return
    windows = config.engine_settings().windows(workload.now)
    click.echo("\n\n".join(format_weekly_group(g, windows) for g in groups))


@main.command()
@json_option
@as_of_option
def days(as_json: bool, as_of: str | None):
    """Show every dated item grouped by day."""
    config, workload = _load(as_of)
    buckets = workload.view.day_buckets
    if as_json:
        _echo_json({key: [item_to_dict(i) for i in items] for key, items in buckets.items()})
        return
    windows = config.engine_settings().windows(workload.now)
    click.echo(format_day_buckets(buckets, windows))


@main.command()
@json_option
@as_of_option
def completed(as_json: bool, as_of: str | None):
    """List items completed today."""
    config, workload = _load(as_of)
    items = workload.view.completed_today
    if as_json:
        _echo_json([item_to_dict(i) for i in items])
        return
    windows = config.engine_settings().windows(workload.now)
    click.echo(format_items(items, windows, "Nothing completed today yet."))


@main.command("past-due")
@json_option
@as_of_option
def past_due(as_json: bool, as_of: str | None):
    """List pending items whose due date has passed."""
    config, workload = _load(as_of)
    items = workload.view.past_due
    if as_json:
        _echo_json([item_to_dict(i) for i in items])
        return
    windows = config.engine_settings().windows(workload.now)
    click.echo(format_items(items, windows, "Nothing past due."))


@main.command("free-time")
@json_option
@as_of_option
def free_time(as_json: bool, as_of: str | None):
    """Estimate free hours left today."""
    _, workload = _load(as_of)
    if as_json:
        _echo_json(free_time_to_dict(workload.free_time))
        return
    click.echo(format_free_time(workload.free_time))


@main.command()
@json_option
@as_of_option
def status(as_json: bool, as_of: str | None):
    """Quick summary of today, this week and free time."""
    _, workload = _load(as_of)
    if as_json:
        _echo_json(workload_to_dict(workload))
        return
    click.echo(format_status(workload))


_SOURCES = {"manual": SourceKind.MANUAL, "assignment": SourceKind.SYNCED_ASSIGNMENT}

source_option = click.option(
    "--source",
    type=click.Choice(list(_SOURCES)),
    default=None,
    help="Which collection the id belongs to, when a task and an assignment share it",
)


def _set_completion(item_id: str, completed: bool, as_of: str | None, source: str | None) -> None:
    config = load_config()
    source_kind = _SOURCES[source] if source else None
    try:
        update, workload = set_completion(
            config, item_id, completed, _now(config, as_of), source_kind=source_kind
        )
    except (WorkloadError, ApiError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    state = "completed" if completed else "pending"
    click.echo(f"✓ {update.source_kind.value} {update.id} marked {state}\n")
    click.echo(format_status(workload))


@main.command()
@click.argument("item_id")
@as_of_option
@source_option
def done(item_id: str, as_of: str | None, source: str | None):
    """Mark a task or assignment completed."""
    _set_completion(item_id, True, as_of, source)


@main.command()
@click.argument("item_id")
@as_of_option
@source_option
def undo(item_id: str, as_of: str | None, source: str | None):
    """Mark a task or assignment pending again."""
    _set_completion(item_id, False, as_of, source)


if __name__ == "__main__":
    main()
