"""Tests for the aggregation views."""

from dataclasses import replace
from datetime import datetime, timezone

import pytest

from workload.core.aggregate import (
    aggregate,
    completed_today,
    completion_percentage,
    day_buckets,
    due_today,
    weekly_group,
    weekly_progress,
)
from workload.core.items import PriorityTier, SourceKind, WorkItem
from workload.core.priority import assign_tiers
from workload.core.windows import TimeWindows


@pytest.fixture
def now():
    # Thursday
    return datetime(2024, 3, 14, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def windows(now):
    return TimeWindows(now, timezone.utc)


def at(day, hour=12, month=3):
    return datetime(2024, month, day, hour, 0, tzinfo=timezone.utc)


def make_item(id, due, kind=SourceKind.MANUAL, completed=False, completed_at=None, title=None):
    return WorkItem(
        id=id,
        title=title or f"Item {id}",
        due_instant=due,
        source_kind=kind,
        is_completed=completed,
        completed_at=completed_at,
    )


@pytest.fixture
def sample_items(windows):
    """Items covering today, tomorrow, this week, other weeks and undated."""
    return assign_tiers(
        [
            make_item("today-late", at(14, 17), title="Essay"),
            make_item("today-early", at(14, 10), kind=SourceKind.SYNCED_ASSIGNMENT, title="Quiz"),
            make_item("today-done", at(14, 8), completed=True, completed_at=at(14, 8)),
            make_item("tomorrow", at(15)),
            make_item("monday-done", at(11), completed=True, completed_at=at(11)),
            make_item("sunday", at(17)),
            make_item("last-week", at(6), kind=SourceKind.SYNCED_ASSIGNMENT),
            make_item("next-week", at(20)),
            make_item("far-future", at(15, month=5)),
            make_item("undated", None),
        ],
        windows,
    )


class TestCompletionPercentage:
    def test_empty(self):
        assert completion_percentage(0, 0) == 0

    def test_rounds_half_up(self):
        assert completion_percentage(1, 8) == 13
        assert completion_percentage(2, 3) == 67
        assert completion_percentage(1, 3) == 33

    def test_full(self):
        assert completion_percentage(4, 4) == 100


class TestDueToday:
    def test_pending_today_in_priority_order(self, sample_items, windows):
        assert [i.id for i in due_today(sample_items, windows)] == ["today-early", "today-late"]

    def test_all_critical(self, sample_items, windows):
        assert {i.priority_tier for i in due_today(sample_items, windows)} == {PriorityTier.CRITICAL}


class TestWeeklyGroup:
    def test_current_week_counts(self, sample_items, windows):
        group = weekly_group(sample_items, windows, 0)
        assert [i.id for i in group.items] == [
            "monday-done",
            "today-done",
            "today-early",
            "today-late",
            "tomorrow",
            "sunday",
        ]
        assert group.total_count == 6
        assert group.completed_count == 2
        assert group.completion_percentage == 33
        assert group.is_current_week is True

    def test_empty_week(self, windows):
        group = weekly_group([], windows, 0)
        assert group.items == []
        assert group.total_count == 0
        assert group.completion_percentage == 0

    def test_offset_week_not_current(self, sample_items, windows):
        group = weekly_group(sample_items, windows, -1)
        assert [i.id for i in group.items] == ["last-week"]
        assert group.is_current_week is False

    def test_completion_bound(self, sample_items, windows):
        for offset in range(-4, 5):
            group = weekly_group(sample_items, windows, offset)
            assert 0 <= group.completed_count <= group.total_count == len(group.items)


class TestWeeklyProgress:
    def test_omits_empty_neighbours(self, sample_items, windows):
        progress = weekly_progress(sample_items, windows)
        assert [g.window.start.date().isoformat() for g in progress.previous] == ["2024-03-04"]
        assert [g.window.start.date().isoformat() for g in progress.upcoming] == ["2024-03-18"]

    def test_far_future_outside_range(self, sample_items, windows):
        progress = weekly_progress(sample_items, windows, upcoming_weeks=4)
        upcoming_ids = [i.id for g in progress.upcoming for i in g.items]
        assert "far-future" not in upcoming_ids

    def test_previous_most_recent_first(self, windows):
        items = [make_item("a", at(1)), make_item("b", at(8))]
        progress = weekly_progress(items, windows)
        assert [g.items[0].id for g in progress.previous] == ["b", "a"]

    def test_empty_input(self, windows):
        progress = weekly_progress([], windows)
        assert progress.current.total_count == 0
        assert progress.previous == []
        assert progress.upcoming == []


class TestDayBuckets:
    def test_keys_sorted_and_undated_excluded(self, sample_items, windows):
        buckets = day_buckets(sample_items, windows)
        assert list(buckets) == sorted(buckets)
        assert "undated" not in [i.id for items in buckets.values() for i in items]

    def test_pending_before_completed(self, sample_items, windows):
        buckets = day_buckets(sample_items, windows)
        assert [i.id for i in buckets["2024-03-14"]] == ["today-early", "today-late", "today-done"]

    def test_partition(self, sample_items, windows):
        buckets = day_buckets(sample_items, windows)
        bucketed = [i.id for items in buckets.values() for i in items]
        dated = [i.id for i in sample_items if i.due_instant is not None]
        assert sorted(bucketed) == sorted(dated)
        assert len(bucketed) == len(set(bucketed))


class TestCompletedToday:
    def test_manual_uses_completion_time(self, windows):
        done_today = make_item("a", at(10), completed=True, completed_at=at(14, 8))
        done_yesterday = make_item("b", at(14), completed=True, completed_at=at(13, 20))
        assert completed_today([done_today, done_yesterday], windows) == [done_today]

    def test_manual_without_timestamp_excluded(self, windows):
        item = make_item("a", at(14), completed=True, completed_at=None)
        assert completed_today([item], windows) == []

    def test_synced_uses_due_date(self, windows):
        due_today_done = make_item("a", at(14), kind=SourceKind.SYNCED_ASSIGNMENT, completed=True)
        due_yesterday_done = make_item("b", at(13), kind=SourceKind.SYNCED_ASSIGNMENT, completed=True)
        assert completed_today([due_today_done, due_yesterday_done], windows) == [due_today_done]


class TestAggregate:
    def test_views(self, sample_items, windows):
        view = aggregate(sample_items, windows)
        assert [i.id for i in view.today] == ["today-early", "today-late"]
        assert [i.id for i in view.due_this_week] == ["today-early", "today-late", "tomorrow", "sunday"]
        assert [i.id for i in view.completed_today] == ["today-done"]
        assert [i.id for i in view.past_due] == ["last-week"]
        assert [i.id for i in view.unscheduled] == ["undated"]
        assert view.weekly.current.total_count == 6

    def test_idempotent(self, sample_items, windows):
        assert aggregate(sample_items, windows) == aggregate(sample_items, windows)

    def test_strict_partition_check_passes(self, sample_items, windows):
        aggregate(sample_items, windows, strict=True)

    def test_reads_current_completion(self, sample_items, windows):
        before = aggregate(sample_items, windows)
        flipped = [
            replace(i, is_completed=True) if i.id == "today-early" else i
            for i in sample_items
        ]
        after = aggregate(flipped, windows)
        assert [i.id for i in before.today] == ["today-early", "today-late"]
        assert [i.id for i in after.today] == ["today-late"]
        assert after.weekly.current.completed_count == before.weekly.current.completed_count + 1
