"""Tests for the record model."""
import pytest
from datetime import date, datetime, time, timedelta
from models import (
    CanonicalHour, DailyStats, Schedule, Score, Task, TaskStatus, WeeklyStats,
    default_schedule, generate_task_id,
)


class TestScore:
    """Test score validity and arithmetic."""

    @pytest.mark.parametrize("work,play,learn", [(0, 0, 0), (5, 5, 5), (3, 0, 5), (1, 2, 4)])
    def test_in_range_is_valid(self, work, play, learn):
        assert Score(work, play, learn).is_valid() is True

    @pytest.mark.parametrize("work,play,learn", [(-1, 0, 0), (0, 6, 0), (0, 0, 10), (6, -1, 3)])
    def test_out_of_range_is_invalid(self, work, play, learn):
        assert Score(work, play, learn).is_valid() is False

    def test_construction_does_not_enforce_range(self):
        score = Score(9, 9, 9)
        assert score.work == 9

    def test_total(self):
        assert Score(4, 1, 3).total() == 8

    def test_average_is_exact_float(self):
        assert Score(4, 1, 3).average() == 8 / 3
        assert Score(3, 3, 3).average() == 3.0

    def test_add(self):
        assert Score(1, 2, 3) + Score(4, 0, 1) == Score(5, 2, 4)

    def test_floordiv_truncates(self):
        assert Score(20, 6, 13).floordiv(7) == Score(2, 0, 1)

    def test_from_dict_defaults_missing_components(self):
        assert Score.from_dict({'work': 2}) == Score(2, 0, 0)
        assert Score.from_dict(None) == Score()


class TestTaskLifecycle:
    """Test task state transitions and time accounting."""

    @pytest.fixture
    def t0(self):
        return datetime(2024, 1, 1, 9, 0, 0)

    def test_new_task_is_pending(self):
        task = Task("Plan day")
        assert task.status is TaskStatus.PENDING
        assert task.id.startswith("task_")
        assert task.actual_seconds == 0

    def test_generated_ids_are_unique(self):
        ids = {generate_task_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_start(self, t0):
        task = Task("Plan day")
        task.start(now=t0)
        assert task.status is TaskStatus.ACTIVE
        assert task.start_time == t0
        assert task.updated_at == t0
        assert task.is_active()

    def test_start_when_active_keeps_running_interval(self, t0):
        task = Task("Plan day")
        task.start(now=t0)
        task.start(now=t0 + timedelta(minutes=10))
        assert task.start_time == t0
        assert task.updated_at == t0
        task.pause(now=t0 + timedelta(minutes=25))
        assert task.actual_seconds == 1500

    def test_pause_accumulates_elapsed_time(self, t0):
        task = Task("Plan day")
        task.start(now=t0)
        task.pause(now=t0 + timedelta(minutes=25))
        assert task.status is TaskStatus.PAUSED
        assert task.actual_seconds == 1500
        assert task.start_time is None

    def test_pause_when_not_active_is_noop(self, t0):
        task = Task("Plan day", updated_at=t0)
        task.pause(now=t0 + timedelta(minutes=5))
        assert task.status is TaskStatus.PENDING
        assert task.updated_at == t0

    def test_resume_restarts_timer(self, t0):
        task = Task("Plan day")
        task.start(now=t0)
        task.pause(now=t0 + timedelta(minutes=10))
        task.resume(now=t0 + timedelta(minutes=20))
        assert task.status is TaskStatus.ACTIVE
        assert task.start_time == t0 + timedelta(minutes=20)
        assert task.actual_seconds == 600

    def test_resume_when_not_paused_is_noop(self, t0):
        task = Task("Plan day")
        task.resume(now=t0)
        assert task.status is TaskStatus.PENDING
        assert task.start_time is None

    def test_complete_folds_running_interval(self, t0):
        task = Task("Plan day")
        task.start(now=t0)
        task.pause(now=t0 + timedelta(minutes=10))
        task.resume(now=t0 + timedelta(minutes=15))
        done = t0 + timedelta(minutes=45)
        task.complete(now=done)
        assert task.status is TaskStatus.COMPLETED
        assert task.actual_seconds == 600 + 1800
        assert task.end_time == done
        assert task.completed_at == done
        assert task.start_time is None
        assert task.is_completed()

    def test_complete_without_start(self, t0):
        task = Task("Plan day")
        task.complete(now=t0)
        assert task.actual_seconds == 0
        assert task.completed_at == t0

    def test_cancel_keeps_time_spent(self, t0):
        task = Task("Plan day")
        task.start(now=t0)
        task.cancel(now=t0 + timedelta(minutes=5))
        assert task.status is TaskStatus.CANCELLED
        assert task.actual_seconds == 300
        assert task.completed_at is None

    def test_reopen_clears_completion(self, t0):
        task = Task("Plan day")
        task.complete(now=t0)
        task.reopen(now=t0 + timedelta(minutes=1))
        assert task.status is TaskStatus.PENDING
        assert task.completed_at is None
        assert task.end_time is None

    def test_elapsed_seconds_includes_running_interval(self, t0):
        task = Task("Plan day", actual_seconds=60)
        task.start(now=t0)
        assert task.elapsed_seconds(now=t0 + timedelta(seconds=30)) == 90

    def test_tags_are_deduplicated(self):
        task = Task("Plan day")
        task.add_tag("focus")
        task.add_tag("focus")
        task.add_tag("  ")
        assert task.tags == ["focus"]
        task.remove_tag("focus")
        assert task.tags == []


class TestTaskSerialization:
    """Test task dictionary conversion."""

    def test_round_trip_preserves_every_field(self):
        task = Task(
            "Write report",
            description="Quarterly numbers",
            score=Score(5, 1, 3),
            status=TaskStatus.PAUSED,
            estimated_seconds=3600,
            actual_seconds=1234,
            end_time=datetime(2024, 1, 1, 11, 0),
            scheduled_time=datetime(2024, 1, 1, 9, 0),
            canonical_hour="Prime",
            tags=["work", "report"],
            completed_at=datetime(2024, 1, 1, 11, 0, 0, 123456),
            notes="draft done",
            reflection="went well",
        )
        assert Task.from_dict(task.to_dict()) == task

    def test_status_is_serialized_as_string(self):
        assert Task("x", status=TaskStatus.ACTIVE).to_dict()['status'] == "active"

    def test_missing_optional_fields_default(self):
        data = {
            'id': 'task_1', 'title': 'Old', 'status': 'pending',
            'created_at': '2024-01-01T09:00:00',
        }
        task = Task.from_dict(data)
        assert task.tags == []
        assert task.score == Score()
        assert task.updated_at == datetime(2024, 1, 1, 9, 0)

    def test_missing_required_field_raises(self):
        with pytest.raises(KeyError):
            Task.from_dict({'id': 'task_1', 'status': 'pending', 'created_at': '2024-01-01T09:00:00'})

    def test_unknown_status_raises(self):
        with pytest.raises(ValueError):
            Task.from_dict({
                'id': 'task_1', 'title': 'x', 'status': 'sleeping',
                'created_at': '2024-01-01T09:00:00',
            })


class TestCanonicalHour:
    """Test time-of-day matching for canonical hours."""

    @pytest.fixture
    def prime(self):
        return CanonicalHour("Prime", "09:00", "12:00", Score(5, 1, 3))

    @pytest.mark.parametrize("t,expected", [
        ("09:00", True),
        ("11:59", True),
        ("12:00", False),
        ("08:59", False),
    ])
    def test_is_active_boundaries(self, prime, t, expected):
        assert prime.is_active(t) is expected

    def test_is_active_ignores_date(self, prime):
        assert prime.is_active(datetime(1999, 12, 31, 10, 15))
        assert prime.is_active(datetime(2030, 6, 1, 10, 15))
        assert not prime.is_active(datetime(2030, 6, 1, 12, 0, 30))

    def test_is_active_accepts_time(self, prime):
        assert prime.is_active(time(9, 0))

    def test_duration_seconds(self, prime):
        assert prime.duration_seconds == 3 * 3600

    def test_block_running_to_midnight(self):
        vigil = CanonicalHour("Vigil", "20:00", "24:00", Score(1, 1, 1))
        assert vigil.is_active("23:59")
        assert vigil.duration_seconds == 4 * 3600
        assert CanonicalHour.from_dict(vigil.to_dict()) == vigil

    @pytest.mark.parametrize("bad", ["9:00", "24:30", "12:60", "noon", ""])
    def test_from_dict_rejects_malformed_times(self, bad):
        data = CanonicalHour("Prime", "09:00", "12:00").to_dict()
        data["end_time"] = bad
        with pytest.raises(ValueError):
            CanonicalHour.from_dict(data)


class TestSchedule:
    """Test schedule lookups and the default schedule."""

    def test_default_schedule_blocks(self):
        schedule = default_schedule()
        assert [h.name for h in schedule.hours] == [
            "Matins", "Lauds", "Prime", "Terce", "Sext", "None", "Vespers", "Compline",
        ]
        assert schedule.hours[0].start_time == "06:00"
        assert schedule.hours[-1].end_time == "20:00"
        assert schedule.get_hour_by_name("Vespers").default_score == Score(2, 2, 5)

    def test_default_schedule_is_contiguous(self):
        hours = default_schedule().hours
        for prev, nxt in zip(hours, hours[1:]):
            assert prev.end_time == nxt.start_time

    def test_get_current_hour(self):
        schedule = default_schedule()
        assert schedule.get_current_hour("07:30").name == "Lauds"
        assert schedule.get_current_hour(datetime(2024, 1, 1, 15, 10)).name == "None"
        assert schedule.get_current_hour("05:59") is None
        assert schedule.get_current_hour("20:00") is None

    def test_overlapping_blocks_return_first(self):
        schedule = Schedule("Overlap", [
            CanonicalHour("A", "09:00", "11:00"),
            CanonicalHour("B", "10:00", "12:00"),
        ])
        assert schedule.get_current_hour("10:30").name == "A"
        assert schedule.get_current_hour("11:30").name == "B"

    def test_get_hour_by_name_missing(self):
        assert default_schedule().get_hour_by_name("Nocturns") is None

    def test_round_trip(self):
        schedule = default_schedule()
        assert Schedule.from_dict(schedule.to_dict()) == schedule


class TestDailyStats:
    """Test daily statistics."""

    def test_completion_rate(self):
        stats = DailyStats(date=date(2024, 1, 1), total_tasks=10, completed_tasks=7)
        assert stats.completion_rate() == 70.0

    def test_completion_rate_no_tasks(self):
        assert DailyStats(date=date(2024, 1, 1)).completion_rate() == 0.0

    def test_empty(self):
        stats = DailyStats.empty(date(2024, 1, 1))
        assert stats.date == date(2024, 1, 1)
        assert stats.total_tasks == 0
        assert stats.total_score == Score()
        assert stats.hourly_breakdown == {}

    def test_round_trip(self):
        stats = DailyStats(
            date=date(2024, 1, 1), total_tasks=3, completed_tasks=2,
            total_score=Score(8, 7, 9), average_score=Score(2, 2, 3),
            time_spent_seconds=5400,
            hourly_breakdown={"Prime": Score(5, 1, 3), "Sext": Score(1, 4, 1)},
        )
        assert DailyStats.from_dict(stats.to_dict()) == stats


class TestWeeklyStats:
    """Test weekly statistics helpers."""

    def test_completion_rate_over_week(self):
        week = WeeklyStats(
            start_date=date(2024, 1, 1), end_date=date(2024, 1, 7),
            daily_stats=[
                DailyStats(date=date(2024, 1, 1), total_tasks=4, completed_tasks=1),
                DailyStats(date=date(2024, 1, 2), total_tasks=0, completed_tasks=0),
                DailyStats(date=date(2024, 1, 3), total_tasks=4, completed_tasks=3),
            ],
        )
        assert week.completion_rate() == 50.0

    def test_completion_rate_empty_week(self):
        week = WeeklyStats(start_date=date(2024, 1, 1), end_date=date(2024, 1, 7))
        assert week.completion_rate() == 0.0
