"""Help screen widget showing keyboard shortcuts."""
from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import Static
from textual.containers import VerticalScroll
from textual.binding import Binding
from textual import events


class HelpScreen(Screen):
    """Modal screen showing keyboard shortcuts."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close", show=False),
    ]

    CSS = """
    HelpScreen {
        align: center middle;
        background: rgba(26, 26, 46, 0.9);
    }

    #help_container {
        width: 80;
        height: auto;
        max-height: 90%;
        background: #2d2d44;
        border: thick #688060;
        padding: 1 2;
    }

    #help_title {
        text-align: center;
        text-style: bold;
        color: #F0DFAF;
        margin-bottom: 1;
    }

    #help_content {
        height: auto;
        overflow-y: auto;
        color: #e2e8f0;
    }
    """

    def compose(self) -> ComposeResult:
        """Compose the help screen."""
        with VerticalScroll(id="help_container"):
            yield Static("Keyboard Shortcuts", id="help_title")
            yield Static(self.get_help_text(), id="help_content")

    def get_help_text(self) -> str:
        """Get formatted help text."""
        return """[bold]Navigation[/bold]
↑/↓ or j/k    Move selection up/down
←/→           Previous/next day
g             Jump to today

[bold]Tasks[/bold]
a             Add task (title, optional "@ HH:MM" to schedule)
space or x    Complete / reopen task
t             Start, pause or resume timer
c             Cancel task
d             Delete task
e             Set estimate (e.g. 30, 45m, 1h30m)
n             Edit notes

[bold]Views[/bold]
S             Statistics (day and week)
s             Canonical hours schedule
b             Back up data files
h             This help
q             Quit

[bold]Status Markers[/bold]
[ ] pending   [>] active   [=] paused   \\[x] completed   [-] cancelled

[dim]Press Esc to close this screen[/dim]"""

    def on_key(self, event: events.Key) -> None:
        """Handle key events - block all except Esc and arrow keys."""
        if event.key not in ("escape", "up", "down"):
            event.prevent_default()
            event.stop()

    def action_dismiss(self) -> None:
        """Close the help screen."""
        self.dismiss()
