"""Statistics screen showing daily and weekly score summaries."""
from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import Static
from textual.containers import VerticalScroll
from textual.binding import Binding
from textual import events
from models import DailyStats, Score, WeeklyStats
from utils.time_utils import format_duration


def format_score_triple(score: Score) -> str:
    return f"Work {score.work}, Play {score.play}, Learn {score.learn}"


class StatisticsScreen(Screen):
    """Modal screen showing a day's statistics and its week."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close", show=False),
    ]

    CSS = """
    StatisticsScreen {
        align: center middle;
        background: rgba(26, 26, 46, 0.9);
    }

    #stats_container {
        width: 80;
        height: auto;
        max-height: 90%;
        background: #2d2d44;
        border: thick #688060;
        padding: 1 2;
    }

    #stats_title {
        text-align: center;
        text-style: bold;
        color: #F0DFAF;
        margin-bottom: 1;
    }

    #stats_content {
        height: auto;
        overflow-y: auto;
        color: #e2e8f0;
    }
    """

    def __init__(self, daily_stats: DailyStats, weekly_stats: WeeklyStats):
        """
        Initialize statistics screen.

        Args:
            daily_stats: Statistics for the viewed day
            weekly_stats: Statistics for the week starting at the viewed day's Monday
        """
        super().__init__()
        self.daily_stats = daily_stats
        self.weekly_stats = weekly_stats

    def compose(self) -> ComposeResult:
        """Compose the statistics screen."""
        with VerticalScroll(id="stats_container"):
            yield Static("Statistics", id="stats_title")
            yield Static(self.get_stats_text(), id="stats_content")

    def get_daily_text(self) -> str:
        ds = self.daily_stats
        lines = [
            f"[bold]{ds.date.strftime('%A, %B %d, %Y')}[/bold]",
            f"Tasks:            {ds.total_tasks} total, {ds.completed_tasks} completed "
            f"({ds.completion_rate():.0f}%)",
            f"Scores:           {format_score_triple(ds.total_score)}",
            f"Average:          {format_score_triple(ds.average_score)}",
            f"Time:             {format_duration(ds.time_spent_seconds)}",
        ]
        if ds.hourly_breakdown:
            lines.append("")
            lines.append("[bold]By Canonical Hour[/bold]")
            for name, score in ds.hourly_breakdown.items():
                lines.append(f"{name:<17} {format_score_triple(score)}")
        return "\n".join(lines)

    def get_weekly_text(self) -> str:
        ws = self.weekly_stats
        lines = [
            f"[bold]Week {ws.start_date.isoformat()} to {ws.end_date.isoformat()}[/bold]",
            f"Total:            {format_score_triple(ws.weekly_total)}",
            f"Daily Average:    {format_score_triple(ws.weekly_average)}",
            f"Time:             {format_duration(ws.total_time_spent_seconds)}",
            f"Completion:       {ws.completion_rate():.0f}%",
            "",
        ]
        for day in ws.daily_stats:
            bar = "█" * day.total_score.total()
            lines.append(
                f"{day.date.strftime('%a %m-%d')}  {day.completed_tasks}/{day.total_tasks}  "
                f"[green]{bar}[/green] {day.total_score.total()}"
            )
        return "\n".join(lines)

    def get_stats_text(self) -> str:
        """Get formatted statistics text."""
        return (
            f"{self.get_daily_text()}\n\n{self.get_weekly_text()}\n\n"
            "[dim]Press Esc to close this screen[/dim]"
        )

    def on_key(self, event: events.Key) -> None:
        """Handle key events - block all except Esc and arrow keys."""
        if event.key not in ("escape", "up", "down"):
            event.prevent_default()
            event.stop()

    def action_dismiss(self) -> None:
        """Close the statistics screen."""
        self.dismiss()
