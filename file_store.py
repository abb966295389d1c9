"""Read and write tasks, the schedule and daily statistics as JSON files."""
import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, List, Optional, TypeVar, Union

from business_logic import backup
from config import config
from errors import DecodeError, DuplicateIDError, NotFoundError, StoreIOError
from models import DailyStats, Schedule, Task, TaskStatus, default_schedule
from utils.rwlock import ReadWriteLock

logger = logging.getLogger(__name__)

T = TypeVar("T")

DayLike = Union[date, datetime]


def _as_date(day: DayLike) -> date:
    if isinstance(day, datetime):
        return day.date()
    return day


class FileStore:
    """File-backed store for tasks, schedule and per-date statistics.

    Layout under data_dir:
    - tasks.json: array of tasks, in creation (append) order
    - schedule.json: the schedule object
    - stats/<YYYY-MM-DD>.json: one DailyStats record per date
    - backups/data_<YYYYMMDD_HHMMSS>/: snapshots written by backup()

    Every operation holds the store's reader/writer lock for its whole
    read-modify-write cycle: reads share it, writes take it exclusively.
    Writes rewrite whole files and are not crash-atomic.

    Two stores pointed at the same directory do not coordinate.
    """

    def __init__(self, data_dir: Optional[Union[str, Path]] = None):
        """
        Initialize FileStore.

        Creates the data and stats directories and seeds tasks.json with an
        empty list and schedule.json with the default schedule when missing.

        Args:
            data_dir: Optional data directory. If None, uses config.data_dir.

        Raises:
            StoreIOError: If the directories or initial files cannot be created
        """
        if data_dir is None:
            self.data_dir = config.data_dir
        else:
            self.data_dir = Path(data_dir).expanduser()
        self._lock = ReadWriteLock()

        try:
            self.stats_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreIOError(f"Failed to create data directory {self.data_dir}: {e}") from e

        with self._lock.write_locked():
            self._init_files()
        logger.info("FileStore ready data_dir=%s", self.data_dir)

    @property
    def tasks_file(self) -> Path:
        return self.data_dir / "tasks.json"

    @property
    def schedule_file(self) -> Path:
        return self.data_dir / "schedule.json"

    @property
    def stats_dir(self) -> Path:
        return self.data_dir / "stats"

    @property
    def backups_dir(self) -> Path:
        return self.data_dir / "backups"

    def get_stats_file(self, day: DayLike) -> Path:
        """Get the stats file path for a given date (YYYY-MM-DD.json)."""
        return self.stats_dir / f"{_as_date(day).isoformat()}.json"

    def close(self):
        """Nothing to release; files are opened per operation."""

    # ---- low-level helpers (caller holds the lock) ----

    def _init_files(self):
        if not self.tasks_file.exists():
            self._write_json(self.tasks_file, [])
            logger.info("Initialized empty task list at %s", self.tasks_file)
        if not self.schedule_file.exists():
            self._write_json(self.schedule_file, default_schedule().to_dict())
            logger.info("Seeded default schedule at %s", self.schedule_file)

    def _write_json(self, path: Path, data: Any):
        """Truncate and rewrite path with pretty-printed JSON."""
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=config.json_indent)
                f.write("\n")
        except OSError as e:
            logger.warning("Write failed path=%s err=%s", path, e)
            raise StoreIOError(f"Failed to write {path}: {e}") from e

    def _read_json(self, path: Path, decode: Callable[[Any], T]) -> T:
        """Read path and convert its JSON content with decode.

        Raises:
            NotFoundError: If the file does not exist
            StoreIOError: If the file cannot be read
            DecodeError: If the content is not valid JSON or not a valid record
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
        except FileNotFoundError as e:
            raise NotFoundError(f"File {path} not found") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Malformed JSON path=%s err=%s", path, e)
            raise DecodeError(f"Malformed JSON in {path}: {e}") from e
        except OSError as e:
            logger.warning("Read failed path=%s err=%s", path, e)
            raise StoreIOError(f"Failed to read {path}: {e}") from e

        try:
            return decode(raw)
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Invalid record path=%s err=%r", path, e)
            raise DecodeError(f"Invalid record in {path}: {e!r}") from e

    def _load_tasks(self) -> List[Task]:
        return self._read_json(self.tasks_file, lambda raw: [Task.from_dict(t) for t in raw])

    def _save_tasks(self, tasks: List[Task]):
        self._write_json(self.tasks_file, [t.to_dict() for t in tasks])

    @staticmethod
    def _index_of(tasks: List[Task], task_id: str) -> int:
        for i, task in enumerate(tasks):
            if task.id == task_id:
                return i
        raise NotFoundError(f"Task with ID {task_id} not found")

    # ---- tasks ----

    def create_task(self, task: Task):
        """Append a new task.

        Raises:
            DuplicateIDError: If a task with the same id already exists
        """
        with self._lock.write_locked():
            tasks = self._load_tasks()
            if any(existing.id == task.id for existing in tasks):
                raise DuplicateIDError(f"Task with ID {task.id} already exists")
            tasks.append(task)
            self._save_tasks(tasks)
        logger.debug("Created task id=%s title=%r", task.id, task.title)

    def get_task(self, task_id: str) -> Task:
        """Get a task by id.

        Raises:
            NotFoundError: If no task has that id
        """
        with self._lock.read_locked():
            tasks = self._load_tasks()
            return tasks[self._index_of(tasks, task_id)]

    def update_task(self, task: Task):
        """Replace the stored task with the same id (full overwrite).

        Stamps task.updated_at with the current time before persisting.

        Raises:
            NotFoundError: If no task has that id
        """
        with self._lock.write_locked():
            tasks = self._load_tasks()
            index = self._index_of(tasks, task.id)
            task.updated_at = datetime.now()
            tasks[index] = task
            self._save_tasks(tasks)
        logger.debug("Updated task id=%s status=%s", task.id, task.status)

    def delete_task(self, task_id: str):
        """Remove a task by id.

        Raises:
            NotFoundError: If no task has that id
        """
        with self._lock.write_locked():
            tasks = self._load_tasks()
            del tasks[self._index_of(tasks, task_id)]
            self._save_tasks(tasks)
        logger.debug("Deleted task id=%s", task_id)

    def list_tasks(self) -> List[Task]:
        """Return all tasks in store (append) order."""
        with self._lock.read_locked():
            return self._load_tasks()

    def list_tasks_by_date(self, day: DayLike) -> List[Task]:
        """Return tasks created, scheduled or completed on a calendar date.

        Args:
            day: The date to match (a datetime is reduced to its date)

        Returns:
            Matching tasks sorted by creation time
        """
        day = _as_date(day)
        with self._lock.read_locked():
            tasks = self._load_tasks()

        def matches(task: Task) -> bool:
            return any(
                ts is not None and ts.date() == day
                for ts in (task.created_at, task.scheduled_time, task.completed_at)
            )

        return sorted((t for t in tasks if matches(t)), key=lambda t: t.created_at)

    def list_tasks_by_status(self, status: TaskStatus) -> List[Task]:
        """Return tasks with exactly the given status, in store order."""
        with self._lock.read_locked():
            return [t for t in self._load_tasks() if t.status is status]

    # ---- schedule ----

    def save_schedule(self, schedule: Schedule):
        """Overwrite the stored schedule."""
        with self._lock.write_locked():
            self._write_json(self.schedule_file, schedule.to_dict())
        logger.debug("Saved schedule name=%r hours=%d", schedule.name, len(schedule.hours))

    def get_schedule(self) -> Schedule:
        """Read the stored schedule."""
        with self._lock.read_locked():
            return self._read_json(self.schedule_file, Schedule.from_dict)

    # ---- statistics ----

    def get_daily_stats(self, day: DayLike) -> DailyStats:
        """Load statistics for a date.

        Returns:
            The stored record, or a zero-valued record for that date when no
            stats file exists yet
        """
        day = _as_date(day)
        path = self.get_stats_file(day)
        with self._lock.read_locked():
            try:
                return self._read_json(path, DailyStats.from_dict)
            except NotFoundError:
                return DailyStats.empty(day)

    def save_daily_stats(self, stats: DailyStats):
        """Overwrite the stats file for stats.date."""
        with self._lock.write_locked():
            self._write_json(self.get_stats_file(stats.date), stats.to_dict())
        logger.debug("Saved daily stats date=%s", stats.date.isoformat())

    # ---- backup ----

    def backup(self) -> Path:
        """Snapshot tasks, schedule and stats into a timestamped directory.

        Returns:
            Path of the new snapshot directory

        Raises:
            StoreIOError: If any copy fails (a partial snapshot may remain)
        """
        with self._lock.read_locked():
            return backup.create_backup(
                self.tasks_file, self.schedule_file, self.stats_dir, self.backups_dir
            )
