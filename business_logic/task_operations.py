"""Task lifecycle operations on stored tasks.

Each operation loads a task from the store, applies one lifecycle
transition and writes it back. Store errors (NotFoundError, StoreIOError,
DecodeError) propagate to the caller unchanged.

Classes:
    TaskOperations: create, start, pause, resume, complete, cancel, reopen
"""
import logging
from collections import Counter
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Dict, Iterable, Optional

from models import Schedule, Score, Task, TaskStatus

if TYPE_CHECKING:
    from file_store import FileStore

logger = logging.getLogger(__name__)


class TaskOperations:
    """Lifecycle round trips (get, transition, update) against a FileStore."""

    def __init__(self, store: 'FileStore'):
        self.store = store

    @staticmethod
    def new_task(
        title: str,
        schedule: Optional[Schedule] = None,
        now: Optional[datetime] = None,
        score: Optional[Score] = None,
        **fields,
    ) -> Task:
        """
        Build a pending task, pre-scored from the current canonical hour.

        When no score is given and a schedule block is active at the
        scheduled time (or now, if unscheduled), the block's default score
        and name are used.

        Args:
            title: Task title
            schedule: Schedule used for the default score
            now: Creation time (defaults to the current time)
            score: Explicit score, overriding the block default
            **fields: Any other Task fields (description, tags, ...)

        Returns:
            The new, unsaved task
        """
        now = now or datetime.now()
        when = fields.get('scheduled_time') or now
        hour = schedule.get_current_hour(when) if schedule else None

        if score is None:
            score = Score(**hour.default_score.to_dict()) if hour else Score()
        if hour and not fields.get('canonical_hour'):
            fields['canonical_hour'] = hour.name

        return Task(title=title, score=score, created_at=now, updated_at=now, **fields)

    def add_task(self, title: str, schedule: Optional[Schedule] = None, **kwargs) -> Task:
        """Build a task with new_task and store it."""
        task = self.new_task(title, schedule=schedule, **kwargs)
        self.store.create_task(task)
        logger.info("Added task id=%s hour=%s", task.id, task.canonical_hour or "-")
        return task

    def _transition(self, task_id: str, action: Callable[[Task], None]) -> Task:
        task = self.store.get_task(task_id)
        previous = task.status
        action(task)
        self.store.update_task(task)
        logger.debug("Task id=%s %s -> %s", task_id, previous, task.status)
        return task

    def start_task(self, task_id: str) -> Task:
        return self._transition(task_id, Task.start)

    def pause_task(self, task_id: str) -> Task:
        return self._transition(task_id, Task.pause)

    def resume_task(self, task_id: str) -> Task:
        return self._transition(task_id, Task.resume)

    def complete_task(self, task_id: str) -> Task:
        return self._transition(task_id, Task.complete)

    def cancel_task(self, task_id: str) -> Task:
        return self._transition(task_id, Task.cancel)

    def reopen_task(self, task_id: str) -> Task:
        return self._transition(task_id, Task.reopen)

    def toggle_timer(self, task_id: str) -> Task:
        """Start a pending task, pause an active one, resume a paused one.

        Completed and cancelled tasks are returned unchanged.
        """
        def toggle(task: Task):
            if task.status is TaskStatus.ACTIVE:
                task.pause()
            elif task.status is TaskStatus.PAUSED:
                task.resume()
            elif task.status is TaskStatus.PENDING:
                task.start()

        return self._transition(task_id, toggle)

    def toggle_complete(self, task_id: str) -> Task:
        """Complete an unfinished task, or reopen a completed one."""
        def toggle(task: Task):
            if task.is_completed():
                task.reopen()
            else:
                task.complete()

        return self._transition(task_id, toggle)

    @staticmethod
    def summarize(tasks: Iterable[Task]) -> Dict[TaskStatus, int]:
        """Count tasks per status (every status present, zero if unused)."""
        counts = Counter(task.status for task in tasks)
        return {status: counts.get(status, 0) for status in TaskStatus}
