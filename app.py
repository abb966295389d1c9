"""Main TUI application for qomoboro."""
import argparse
import logging
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Callable, Iterable, List, Optional
from textual.app import App, ComposeResult
from textual.widgets import Header, Static, Input
from textual.containers import Container
from textual.binding import Binding
from textual import events
from business_logic import backup
from business_logic.stats_aggregator import StatsAggregator
from business_logic.task_operations import TaskOperations
from config import config
from errors import StoreError
from file_store import FileStore
from logging_setup import setup_logging
from models import Task, TaskStatus
from ui.help_screen import HelpScreen
from ui.schedule_screen import ScheduleScreen
from ui.statistics_screen import StatisticsScreen
from ui.task_list_widget import TaskListWidget
from ui.widgets import StatusFooter
from utils.time_utils import parse_duration, parse_scheduled_time

logger = logging.getLogger(__name__)


def parse_task_input(value: str, now: Optional[datetime] = None) -> tuple[str, Optional[datetime]]:
    """
    Split add-task input into a title and an optional scheduled time.

    "Write report @ 09:30" -> ("Write report", today 09:30)
    "Write report" -> ("Write report", None)

    An unparseable time after "@" is kept as part of the title.
    """
    title, sep, when = value.rpartition("@")
    if sep and title.strip():
        scheduled = parse_scheduled_time(when, now)
        if scheduled is not None:
            return title.strip(), scheduled
    return value.strip(), None


def week_start(day: date) -> date:
    """Monday of the week containing day."""
    return day - timedelta(days=day.weekday())


class QomoApp(App):
    """A terminal task tracker organized around canonical hours."""

    TITLE = "qomoboro"

    CSS = """
    Screen {
        background: #1a1a2e;
    }

    Header {
        background: #2d2d44;
        color: #F0DFAF;
    }

    #date_header {
        height: 3;
        content-align: center middle;
        background: #688060;
        color: #ffffff;
        text-style: bold;
    }

    #task_list {
        height: 1fr;
        padding: 1 2;
        overflow-y: auto;
        background: #1a1a2e;
    }

    TaskListWidget {
        height: auto;
        color: #e2e8f0;
    }

    #input_container {
        height: auto;
        padding: 1;
        background: #1a1a2e;
    }

    Input {
        margin: 0 1;
        background: #2d2d44;
        color: #ffffff;
        border: tall #8CD0D3;
    }

    Input:focus {
        border: tall #F0DFAF;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=False),
        Binding("h", "show_help", "Help", show=False),
        Binding("a", "add_task", "Add", show=False),
        Binding("x", "toggle_complete", "Complete", show=False),
        Binding("space", "toggle_complete", "Complete", show=False),
        Binding("t", "toggle_timer", "Timer", show=False),
        Binding("c", "cancel_task", "Cancel", show=False),
        Binding("d", "delete_task", "Delete", show=False),
        Binding("e", "set_estimate", "Estimate", show=False),
        Binding("n", "edit_notes", "Notes", show=False),
        Binding("j", "move_down", "Down", show=False),
        Binding("k", "move_up", "Up", show=False),
        Binding("down", "move_down", "Down", show=False),
        Binding("up", "move_up", "Up", show=False),
        Binding("left", "prev_day", "Prev Day", show=False),
        Binding("right", "next_day", "Next Day", show=False),
        Binding("g", "today", "Today", show=False),
        Binding("S", "show_statistics", "Stats", show=False),
        Binding("s", "show_schedule", "Schedule", show=False),
        Binding("b", "backup", "Backup", show=False),
    ]

    def __init__(self, store: Optional[FileStore] = None):
        super().__init__()
        self.store = store or FileStore()
        self.operations = TaskOperations(self.store)
        self.aggregator = StatsAggregator(self.store)
        self.current_date = date.today()
        self.tasks: List[Task] = []
        # Input state: the handler to call with the submitted value
        self.input_handler: Optional[Callable[[str], None]] = None
        self.input_task_id: Optional[str] = None
        self.timer_refresh_interval = None

    def compose(self) -> ComposeResult:
        """Compose the UI."""
        yield Header()
        yield Static(id="date_header")
        yield Container(TaskListWidget(self.tasks), id="task_list")
        yield Container(id="input_container")
        yield StatusFooter()

    def on_mount(self) -> None:
        """Load the current day and start the live timer refresh."""
        self.reload_tasks()
        self.timer_refresh_interval = self.set_interval(1.0, self._refresh_timer_display)

    def _refresh_timer_display(self) -> None:
        """Refresh the task list while a timer is running (for live seconds)."""
        if any(task.is_active() for task in self.tasks):
            self.query_one(TaskListWidget).refresh()

    def _run_store_action(self, description: str, action: Callable[[], object]) -> bool:
        """Run a store call, reporting StoreError in the footer.

        Returns:
            True if the action succeeded
        """
        try:
            action()
        except StoreError as e:
            logger.warning("%s failed: %s", description, e)
            self.query_one(StatusFooter).show_error(f"{description} failed: {e}")
            return False
        return True

    def update_date_header(self) -> None:
        """Update the date header with the day and the active canonical hour."""
        header = self.query_one("#date_header", Static)
        text = self.current_date.strftime("%A, %B %d, %Y")
        if self.current_date == date.today():
            try:
                hour = self.store.get_schedule().get_current_hour(datetime.now())
            except StoreError as e:
                logger.warning("Schedule unavailable: %s", e)
                hour = None
            if hour is not None:
                text += f"  •  {hour.name} ({hour.start_time}-{hour.end_time})"
        counts = self.operations.summarize(self.tasks)
        text += (
            f"\n{counts[TaskStatus.PENDING]} pending, {counts[TaskStatus.ACTIVE]} active, "
            f"{counts[TaskStatus.COMPLETED]} completed"
        )
        header.update(text)

    def reload_tasks(self) -> None:
        """Reload the viewed day's tasks from the store and redraw."""
        def load():
            self.tasks = self.store.list_tasks_by_date(self.current_date)

        self._run_store_action("Loading tasks", load)
        task_widget = self.query_one(TaskListWidget)
        task_widget.tasks = self.tasks
        task_widget.clamp_selection()
        task_widget.refresh(layout=True)
        self.update_date_header()

    def after_change(self, message: str, tasks: Iterable[Task] = ()) -> None:
        """Refresh stats for the viewed day and the changed tasks' days, then reload."""
        if self._run_store_action(
            "Updating stats",
            lambda: self.aggregator.refresh_task_dates(tasks, self.current_date),
        ):
            self.query_one(StatusFooter).show_message(message)
        self.reload_tasks()

    def _selected_task(self) -> Optional[Task]:
        return self.query_one(TaskListWidget).get_selected_task()

    def _apply(self, operation: Callable[[str], Optional[Task]], message: str) -> None:
        task = self._selected_task()
        if task is None:
            return
        changed = [task]

        def run():
            result = operation(task.id)
            if result is not None:
                changed.append(result)

        if self._run_store_action(message, run):
            self.after_change(f"{message}: {task.title}", changed)
        else:
            self.reload_tasks()

    def action_move_down(self) -> None:
        """Move selection down."""
        self.query_one(TaskListWidget).move_selection(1)

    def action_move_up(self) -> None:
        """Move selection up."""
        self.query_one(TaskListWidget).move_selection(-1)

    def action_toggle_complete(self) -> None:
        """Complete the selected task, or reopen it if already completed."""
        self._apply(self.operations.toggle_complete, "Toggled completion")

    def action_toggle_timer(self) -> None:
        """Start, pause or resume the selected task."""
        self._apply(self.operations.toggle_timer, "Toggled timer")

    def action_cancel_task(self) -> None:
        self._apply(self.operations.cancel_task, "Cancelled")

    def action_delete_task(self) -> None:
        """Delete the selected task."""
        self._apply(self._delete, "Deleted")

    def _delete(self, task_id: str) -> None:
        self.store.delete_task(task_id)

    def _navigate_to_date(self, new_date: date) -> None:
        self.current_date = new_date
        self.query_one(TaskListWidget).selected_index = 0
        self.query_one(StatusFooter).reset()
        self.reload_tasks()

    def action_next_day(self) -> None:
        self._navigate_to_date(self.current_date + timedelta(days=1))

    def action_prev_day(self) -> None:
        self._navigate_to_date(self.current_date - timedelta(days=1))

    def action_today(self) -> None:
        self._navigate_to_date(date.today())

    def action_show_help(self) -> None:
        self.push_screen(HelpScreen())

    def action_show_schedule(self) -> None:
        """Show the canonical hours schedule."""
        try:
            schedule = self.store.get_schedule()
        except StoreError as e:
            logger.warning("Schedule unavailable: %s", e)
            self.query_one(StatusFooter).show_error(f"Loading schedule failed: {e}")
            return
        self.push_screen(ScheduleScreen(schedule))

    def action_show_statistics(self) -> None:
        """Show the statistics modal screen for the viewed day and its week."""
        try:
            daily = self.aggregator.refresh_daily_stats(self.current_date)
            weekly = self.aggregator.get_weekly_stats(week_start(self.current_date))
        except StoreError as e:
            logger.warning("Statistics unavailable: %s", e)
            self.query_one(StatusFooter).show_error(f"Loading statistics failed: {e}")
            return
        self.push_screen(StatisticsScreen(daily, weekly))

    def action_backup(self) -> None:
        """Snapshot the data files."""
        try:
            path = self.store.backup()
        except StoreError as e:
            logger.warning("Backup failed: %s", e)
            self.query_one(StatusFooter).show_error(f"Backup failed: {e}")
            return
        self.query_one(StatusFooter).show_message(f"Backup written to {path}")

    def _prompt(self, placeholder: str, handler: Callable[[str], None], value: str = "") -> None:
        """Mount an input; its submitted value goes to handler."""
        if self.input_handler is not None:
            return
        self.input_handler = handler
        container = self.query_one("#input_container")
        input_widget = Input(value=value, placeholder=placeholder)
        container.mount(input_widget)
        input_widget.focus()

    def action_add_task(self) -> None:
        """Show input to add a new task."""
        self._prompt("Task title (optionally '@ HH:MM')...", self._handle_add_task_input)

    def action_set_estimate(self) -> None:
        """Show input to set the selected task's estimate."""
        task = self._selected_task()
        if task is None:
            return
        self.input_task_id = task.id
        self._prompt("Estimate (e.g., 30, 45m, 1h30m)", self._handle_estimate_input)

    def action_edit_notes(self) -> None:
        """Show input to edit the selected task's notes."""
        task = self._selected_task()
        if task is None:
            return
        self.input_task_id = task.id
        self._prompt("Notes", self._handle_notes_input, value=task.notes)

    def _handle_add_task_input(self, value: str) -> None:
        if not value:
            return
        title, scheduled = parse_task_input(value)
        viewing_today = self.current_date == date.today()
        if scheduled is not None and not viewing_today:
            scheduled = datetime.combine(self.current_date, scheduled.time())
        elif scheduled is None and not viewing_today:
            # Keep tasks added to another day on that day's list
            scheduled = datetime.combine(self.current_date, datetime.now().time())

        added = []

        def add():
            schedule = self.store.get_schedule()
            added.append(self.operations.add_task(
                title, schedule=schedule, scheduled_time=scheduled,
            ))

        if self._run_store_action("Adding task", add):
            self.after_change(f"Added: {title}", added)

    def _handle_estimate_input(self, value: str) -> None:
        seconds = parse_duration(value) if value else None
        if seconds is None:
            return

        def update():
            task = self.store.get_task(self.input_task_id)
            task.estimated_seconds = seconds
            self.store.update_task(task)

        if self._run_store_action("Setting estimate", update):
            self.reload_tasks()

    def _handle_notes_input(self, value: str) -> None:
        def update():
            task = self.store.get_task(self.input_task_id)
            task.notes = value
            self.store.update_task(task)

        if self._run_store_action("Saving notes", update):
            self.reload_tasks()

    def _clear_input_state(self) -> None:
        self.input_handler = None
        self.input_task_id = None

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle input submission by dispatching to the pending handler."""
        handler = self.input_handler
        value = event.value.strip()
        event.input.remove()
        try:
            if handler is not None:
                handler(value)
        finally:
            self._clear_input_state()

    def on_key(self, event: events.Key) -> None:
        """Cancel input with escape; keep typed keys away from bindings."""
        focused = self.focused
        if isinstance(focused, Input):
            if event.key == "escape":
                focused.remove()
                self._clear_input_state()
                event.prevent_default()
            return


LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="qomoboro", description="Canonical hours task tracker")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help=f"data directory (default: {config.data_dir})")
    parser.add_argument("--backup", action="store_true", help="write a backup snapshot and exit")
    parser.add_argument("--list-backups", action="store_true", help="list backup snapshots and exit")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS,
                        default=config.log_level, help="file log level")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the application."""
    args = build_parser().parse_args(argv)
    data_dir = args.data_dir or config.data_dir

    try:
        setup_logging(data_dir, file_level=args.log_level)
    except OSError as e:
        print(f"qomoboro: cannot write log in {data_dir}: {e}")
        return 1

    try:
        store = FileStore(data_dir)
        if args.backup:
            print(f"Backup written to {store.backup()}")
            return 0
        if args.list_backups:
            for path in backup.list_backups(store.backups_dir):
                print(path)
            return 0
    except StoreError as e:
        logger.error("Startup failed: %s", e)
        print(f"qomoboro: {e}")
        return 1

    QomoApp(store).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
