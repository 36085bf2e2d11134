"""Tests for the full pipeline."""

from datetime import datetime, timedelta, timezone

import pytest

from workload.core.engine import EngineSettings, build_workload, find_item
from workload.core.errors import InvariantViolation
from workload.core.freetime import SleepConfig
from workload.core.items import PriorityTier, SourceKind
from workload.core.toggle import CompletionUpdate, apply_update, toggle

UTC_MINUS_5 = timezone(timedelta(hours=-5))


@pytest.fixture
def now():
    # Thursday
    return datetime(2024, 3, 14, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def tasks():
    return [
        {
            "id": "t1",
            "title": "Read chapter 4",
            "due_date": "2024-03-14T17:00:00Z",
            "completion_status": "pending",
            "estimated_hours": 2,
        },
        {"id": "t2", "title": "Outline essay", "due_date": "2024-03-16T17:00:00Z", "estimated_hours": 6},
        {"id": "t3", "title": "Someday", "completion_status": "pending"},
    ]


@pytest.fixture
def events():
    return [
        {
            "id": "e1",
            "title": "[CS-101] Problem set",
            "event_type": "assignment",
            "start_time": "2024-03-15T12:00:00Z",
            "is_completed": False,
        },
        {
            "id": "e2",
            "title": "[CS-101] Old quiz",
            "event_type": "assignment",
            "start_time": "2024-02-20T12:00:00Z",
            "is_completed": False,
        },
        {
            "id": "e3",
            "title": "[CS-101] Lab 1",
            "event_type": "assignment",
            "start_time": "2024-03-12T12:00:00Z",
            "is_completed": False,
        },
        {
            "id": "e4",
            "title": "Lecture",
            "event_type": "class",
            "start_time": "2024-03-14T13:00:00Z",
            "end_time": "2024-03-14T14:00:00Z",
        },
    ]


class TestScenarios:
    def test_manual_task_due_today_is_critical(self, now):
        workload = build_workload(
            [{"id": "t1", "title": "Essay", "due_date": "2024-03-14T17:00:00Z"}], [], now
        )
        (item,) = workload.view.today
        assert item.id == "t1"
        assert item.priority_tier is PriorityTier.CRITICAL

    def test_end_of_day_sentinel_stays_on_local_day(self):
        now = datetime(2024, 3, 10, 12, 0, tzinfo=UTC_MINUS_5)
        events = [
            {
                "id": "e1",
                "title": "Essay",
                "event_type": "assignment",
                "start_time": "2024-03-10T23:59:59+00:00",
            }
        ]
        workload = build_workload([], events, now, EngineSettings(tz=UTC_MINUS_5, week_start=6))
        (item,) = workload.items
        assert item.due_instant == datetime(2024, 3, 10, 23, 59, 59, tzinfo=UTC_MINUS_5)
        assert list(workload.view.day_buckets) == ["2024-03-10"]
        assert [i.id for i in workload.view.today] == ["e1"]

    def test_free_time_spreads_effort(self, now):
        workload = build_workload(
            [{"id": "t1", "title": "Project", "due_date": "2024-03-16T17:00:00Z", "estimated_hours": 6}],
            [],
            now,
            sleep=SleepConfig.from_strings("07:00", "23:00"),
        )
        assert workload.free_time.is_estimate_ready
        assert workload.free_time.available_hours == 7.0

    def test_empty_collections(self, now):
        workload = build_workload([], [], now)
        current = workload.view.weekly.current
        assert current.total_count == 0
        assert current.completion_percentage == 0
        assert workload.view.weekly.previous == []
        assert workload.view.weekly.upcoming == []
        assert workload.view.day_buckets == {}
        assert workload.free_time.is_estimate_ready is False


class TestBuildWorkload:
    def test_views(self, tasks, events, now):
        view = build_workload(tasks, events, now).view
        assert [i.id for i in view.today] == ["t1"]
        assert [i.id for i in view.due_this_week] == ["t1", "e1", "e3", "t2"]
        assert [i.id for i in view.past_due] == ["e3"]
        assert [i.id for i in view.unscheduled] == ["t3"]

    def test_only_assignments_become_items(self, tasks, events, now):
        workload = build_workload(tasks, events, now)
        assert find_item(workload.items, "e4") is None

    def test_stale_assignment_hidden_everywhere(self, tasks, events, now):
        workload = build_workload(tasks, events, now)
        assert find_item(workload.items, "e2") is None
        assert "2024-02-20" not in workload.view.day_buckets

    def test_completed_old_assignment_kept(self, tasks, events, now):
        events[1]["is_completed"] = True
        workload = build_workload(tasks, events, now)
        assert find_item(workload.items, "e2") is not None
        assert "2024-02-20" in workload.view.day_buckets

    def test_stale_cutoff_is_configurable(self, tasks, events, now):
        workload = build_workload(tasks, events, now, EngineSettings(stale_cutoff_days=60))
        assert find_item(workload.items, "e2") is not None

    def test_idempotent(self, tasks, events, now):
        sleep = SleepConfig.from_strings("07:00", "23:00")
        assert build_workload(tasks, events, now, sleep=sleep) == build_workload(tasks, events, now, sleep=sleep)

    def test_free_time_counts_events_and_overdue(self, tasks, events, now):
        free_time = build_workload(tasks, events, now, sleep=SleepConfig.from_strings("07:00", "23:00")).free_time
        # lecture 1h + t1 2h + t2 6/2 + e1 2h + overdue e3 and e2 1.5h each
        assert free_time.committed_hours == 11.0
        assert free_time.available_hours == 0.0

    def test_hidden_stale_assignment_still_costs_time(self, now):
        events = [
            {"id": "e1", "title": "Old essay", "event_type": "assignment", "start_time": "2024-03-04T12:00:00Z"},
        ]
        workload = build_workload([], events, now, sleep=SleepConfig.from_strings("07:00", "23:00"))
        assert workload.items == []
        assert workload.free_time.committed_hours == 1.5
        assert workload.free_time.available_hours == 8.5

    def test_strict_rejects_duplicates(self, now):
        tasks = [{"id": "t1", "title": "a"}, {"id": "t1", "title": "b"}]
        with pytest.raises(InvariantViolation):
            build_workload(tasks, [], now, EngineSettings(strict=True))

    def test_lenient_keeps_latest_duplicate(self, now):
        tasks = [{"id": "t1", "title": "a"}, {"id": "t1", "title": "b"}]
        (item,) = build_workload(tasks, [], now).items
        assert item.title == "b"

    def test_week_start_setting(self, now):
        tasks = [{"id": "t1", "title": "Sunday task", "due_date": "2024-03-10T12:00:00Z"}]
        monday_weeks = build_workload(tasks, [], now)
        sunday_weeks = build_workload(tasks, [], now, EngineSettings(week_start=6))
        assert monday_weeks.view.weekly.current.total_count == 0
        assert sunday_weeks.view.weekly.current.total_count == 1


class TestRecomputeAfterToggle:
    def test_completing_moves_item(self, tasks, events, now):
        before = build_workload(tasks, events, now)
        update = toggle(find_item(before.items, "t1"), True, now)
        after = build_workload(apply_update(tasks, update), events, now)

        assert [i.id for i in after.view.today] == []
        assert [i.id for i in after.view.completed_today] == ["t1"]
        assert after.view.weekly.current.completed_count == before.view.weekly.current.completed_count + 1

    def test_synced_completion_counts_when_due_today(self, now):
        events = [{"id": "e1", "title": "Quiz", "event_type": "assignment", "start_time": "2024-03-14T15:00:00Z"}]
        update = CompletionUpdate(SourceKind.SYNCED_ASSIGNMENT, "e1", {"is_completed": True})
        workload = build_workload([], apply_update(events, update), now)
        assert [i.id for i in workload.view.completed_today] == ["e1"]


class TestFindItem:
    def test_by_id(self, tasks, events, now):
        items = build_workload(tasks, events, now).items
        assert find_item(items, "e1").source_kind is SourceKind.SYNCED_ASSIGNMENT

    def test_restricted_to_source(self, tasks, events, now):
        items = build_workload(tasks, events, now).items
        assert find_item(items, "e1", SourceKind.MANUAL) is None

    def test_missing(self):
        assert find_item([], "nope") is None
