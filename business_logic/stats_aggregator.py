"""Daily and weekly statistics built on the file store."""
import logging
from datetime import date, timedelta
from typing import TYPE_CHECKING, Iterable, List, Optional

from config import config
from models import DailyStats, Schedule, Score, Task, TaskStatus, WeeklyStats

if TYPE_CHECKING:
    from file_store import FileStore

logger = logging.getLogger(__name__)


class StatsAggregator:
    """
    Compute statistics from stored tasks and daily records.

    Weekly statistics are never persisted: they are folded on demand from
    the seven daily records of the window, each read through the store.
    """

    def __init__(self, store: 'FileStore'):
        """
        Initialize StatsAggregator.

        Args:
            store: FileStore used for all reads and writes
        """
        self.store = store

    def get_weekly_stats(self, start_date: date) -> WeeklyStats:
        """
        Aggregate the week [start_date, start_date + 6 days].

        Days without a stats file contribute a zero-valued record. The weekly
        average divides each score component by the week length using
        integer division, so a work total of 20 averages to 2.

        Args:
            start_date: First day of the window

        Returns:
            WeeklyStats with the daily records in date order

        Raises:
            StoreError: Whatever the first failing daily read raises; the
                aggregation is aborted
        """
        week_length = config.week_length
        end_date = start_date + timedelta(days=week_length - 1)

        daily_stats = []
        weekly_total = Score()
        total_time = 0

        for offset in range(week_length):
            day_stats = self.store.get_daily_stats(start_date + timedelta(days=offset))
            daily_stats.append(day_stats)
            weekly_total = weekly_total + day_stats.total_score
            total_time += day_stats.time_spent_seconds

        return WeeklyStats(
            start_date=start_date,
            end_date=end_date,
            daily_stats=daily_stats,
            weekly_total=weekly_total,
            weekly_average=weekly_total.floordiv(week_length),
            total_time_spent_seconds=total_time,
        )

    @staticmethod
    def hour_name_for(task: Task, schedule: Optional[Schedule]) -> Optional[str]:
        """
        Canonical hour a task belongs to.

        Uses the task's own canonical_hour when set; otherwise the schedule
        block active at its scheduled time (or creation time).
        """
        if task.canonical_hour:
            return task.canonical_hour
        if schedule is None:
            return None
        hour = schedule.get_current_hour(task.scheduled_time or task.created_at)
        return hour.name if hour else None

    @staticmethod
    def task_dates(task: Task) -> List[date]:
        """Dates whose task lists include the task: created, scheduled and completed."""
        stamps = (task.created_at, task.scheduled_time, task.completed_at)
        return sorted({stamp.date() for stamp in stamps if stamp is not None})

    @classmethod
    def calculate_daily_stats(
        cls, tasks: Iterable[Task], day: date, schedule: Optional[Schedule] = None
    ) -> DailyStats:
        """
        Fold a day's tasks into a DailyStats record.

        Args:
            tasks: Tasks belonging to the day
            day: The date the record is stamped with
            schedule: Schedule used to place tasks without a canonical hour

        Returns:
            DailyStats with counts, summed and average scores, time spent
            and a per-canonical-hour score breakdown. Tasks that fall in no
            block are counted but left out of the breakdown.
        """
        stats = DailyStats.empty(day)

        for task in tasks:
            stats.total_tasks += 1
            if task.status is TaskStatus.COMPLETED:
                stats.completed_tasks += 1
            stats.total_score = stats.total_score + task.score
            stats.time_spent_seconds += task.actual_seconds

            hour_name = cls.hour_name_for(task, schedule)
            if hour_name:
                stats.hourly_breakdown[hour_name] = (
                    stats.hourly_breakdown.get(hour_name, Score()) + task.score
                )

        if stats.total_tasks:
            stats.average_score = stats.total_score.floordiv(stats.total_tasks)
        return stats

    def refresh_daily_stats(self, day: date) -> DailyStats:
        """Recalculate a day's record from its tasks and save it."""
        tasks = self.store.list_tasks_by_date(day)
        schedule = self.store.get_schedule()
        stats = self.calculate_daily_stats(tasks, day, schedule)
        self.store.save_daily_stats(stats)
        logger.debug(
            "Refreshed daily stats date=%s tasks=%d completed=%d",
            day.isoformat(), stats.total_tasks, stats.completed_tasks,
        )
        return stats

    def refresh_task_dates(self, tasks: Iterable[Task], *days: date) -> List[DailyStats]:
        """Refresh the given days and every date the tasks belong to, in date order."""
        affected = set(days)
        for task in tasks:
            affected.update(self.task_dates(task))
        return [self.refresh_daily_stats(day) for day in sorted(affected)]
