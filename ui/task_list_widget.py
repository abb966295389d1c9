"""Task list widget for displaying and navigating a day's tasks."""
from datetime import datetime
from typing import List, Optional

from rich.markup import escape
from textual.widgets import Static

from models import Task, TaskStatus
from utils.time_utils import format_clock, format_duration

STATUS_MARKERS = {
    TaskStatus.PENDING: "[dim]\\[ ][/dim]",
    TaskStatus.ACTIVE: "[yellow]\\[>][/yellow]",
    TaskStatus.PAUSED: "[cyan]\\[=][/cyan]",
    TaskStatus.COMPLETED: "[green]\\[x][/green]",
    TaskStatus.CANCELLED: "[red]\\[-][/red]",
}


class TaskListWidget(Static):
    """Widget to display the list of tasks for one day."""

    def __init__(self, tasks: Optional[List[Task]] = None):
        super().__init__()
        self.tasks: List[Task] = tasks or []
        self.selected_index = 0

    @staticmethod
    def format_score(task: Task) -> str:
        """Format the score as "W:4 P:1 L:3", red when out of range."""
        text = f"W:{task.score.work} P:{task.score.play} L:{task.score.learn}"
        if not task.score.is_valid():
            return f"[red]{text}[/red]"
        return f"[dim]{text}[/dim]"

    @staticmethod
    def format_time_display(task: Task, now: Optional[datetime] = None) -> str:
        """
        Format time tracking display for a task.

        Returns Rich-formatted string like:
        - Active timer: [yellow][1:23/30m][/yellow] (live M:SS of total time)
        - Estimate and/or actual time: [dim][est:30m, act:25m][/dim]
        - Nothing tracked: ""
        """
        if task.is_active() and task.start_time is not None:
            elapsed = format_clock(task.elapsed_seconds(now))
            est_str = format_duration(task.estimated_seconds) if task.estimated_seconds else "??"
            return f" [yellow]\\[{elapsed}/{est_str}][/yellow]"

        parts = []
        if task.estimated_seconds is not None:
            parts.append(f"est:{format_duration(task.estimated_seconds)}")
        if task.actual_seconds > 0:
            parts.append(f"act:{format_duration(task.actual_seconds)}")
        if parts:
            return f" [dim]\\[{', '.join(parts)}][/dim]"
        return ""

    def format_task_line(self, index: int, now: Optional[datetime] = None) -> str:
        task = self.tasks[index]
        title = escape(task.title)
        if task.status is TaskStatus.COMPLETED:
            title = f"[strike]{title}[/strike]"
        hour = f" [dim]@{escape(task.canonical_hour)}[/dim]" if task.canonical_hour else ""
        line = (
            f"{STATUS_MARKERS[task.status]} {title} "
            f"{self.format_score(task)}{hour}{self.format_time_display(task, now)}"
        )
        if index == self.selected_index:
            return f"[reverse]{line}[/reverse]"
        return line

    def render(self) -> str:
        """Render the task list."""
        if not self.tasks:
            return "[dim]No tasks for this day. Press 'a' to add one.[/dim]"
        now = datetime.now()
        return "\n".join(self.format_task_line(i, now) for i in range(len(self.tasks)))

    def move_selection(self, delta: int) -> None:
        """Move the selection up or down, clamped to the list."""
        if not self.tasks:
            return
        self.selected_index = max(0, min(len(self.tasks) - 1, self.selected_index + delta))
        self.refresh()

    def clamp_selection(self) -> None:
        if not self.tasks:
            self.selected_index = 0
        else:
            self.selected_index = min(self.selected_index, len(self.tasks) - 1)

    def get_selected_task(self) -> Optional[Task]:
        """Get the currently selected task."""
        if 0 <= self.selected_index < len(self.tasks):
            return self.tasks[self.selected_index]
        return None
