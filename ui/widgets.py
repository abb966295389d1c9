"""Custom UI widgets for qomoboro."""
from rich.markup import escape
from textual.widgets import Static

DEFAULT_HINT = "[dim]Press[/dim] [bold]H[/bold] [dim]for Help  •  [/dim][bold]Q[/bold] [dim]to Quit[/dim]"


class StatusFooter(Static):
    """Footer line showing messages, errors or the default key hint."""

    def __init__(self):
        super().__init__()
        self.update(DEFAULT_HINT)

    DEFAULT_CSS = """
    StatusFooter {
        background: transparent;
        color: #688060;
        dock: bottom;
        height: 3;
        text-align: center;
        border: thick #688060;
    }
    """

    def show_message(self, message: str) -> None:
        self.update(escape(message))

    def show_error(self, message: str) -> None:
        self.update(f"[bold red]Error:[/bold red] {escape(message)}")

    def reset(self) -> None:
        self.update(DEFAULT_HINT)
