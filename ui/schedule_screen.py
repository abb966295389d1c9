"""Schedule screen listing the canonical hours."""
from datetime import datetime
from typing import Optional
from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import Static
from textual.containers import VerticalScroll
from textual.binding import Binding
from textual import events
from models import Schedule
from utils.time_utils import format_duration


class ScheduleScreen(Screen):
    """Modal screen showing the schedule, with the current block highlighted."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close", show=False),
    ]

    CSS = """
    ScheduleScreen {
        align: center middle;
        background: rgba(26, 26, 46, 0.9);
    }

    #schedule_container {
        width: 90;
        height: auto;
        max-height: 90%;
        background: #2d2d44;
        border: thick #688060;
        padding: 1 2;
    }

    #schedule_title {
        text-align: center;
        text-style: bold;
        color: #F0DFAF;
        margin-bottom: 1;
    }

    #schedule_content {
        height: auto;
        color: #e2e8f0;
    }
    """

    def __init__(self, schedule: Schedule, now: Optional[datetime] = None):
        super().__init__()
        self.schedule = schedule
        self.now = now

    def compose(self) -> ComposeResult:
        """Compose the schedule screen."""
        with VerticalScroll(id="schedule_container"):
            yield Static(self.schedule.name, id="schedule_title")
            yield Static(self.get_schedule_text(), id="schedule_content")

    def get_schedule_text(self) -> str:
        """Get formatted schedule text, one block per line."""
        now = self.now or datetime.now()
        current = self.schedule.get_current_hour(now)
        lines = []
        for hour in self.schedule.hours:
            score = hour.default_score
            line = (
                f"{hour.start_time} - {hour.end_time}  {hour.name:<9} "
                f"{format_duration(hour.duration_seconds):>6}  "
                f"[dim]W:{score.work} P:{score.play} L:{score.learn}[/dim]"
            )
            if hour.description:
                line += f"  {hour.description}"
            if current is not None and hour is current:
                line = f"[reverse]{line}[/reverse]"
            lines.append(line)
        if not lines:
            lines.append("[dim]No canonical hours defined[/dim]")
        lines.append("")
        lines.append("[dim]Press Esc to close this screen[/dim]")
        return "\n".join(lines)

    def on_key(self, event: events.Key) -> None:
        """Handle key events - block all except Esc and arrow keys."""
        if event.key not in ("escape", "up", "down"):
            event.prevent_default()
            event.stop()

    def action_dismiss(self) -> None:
        """Close the schedule screen."""
        self.dismiss()
