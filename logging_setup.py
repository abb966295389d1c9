"""Logging configuration for qomoboro."""
import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FILE_NAME = "qomoboro.log"

# Top-level modules and packages whose loggers belong to this app.
_APP_LOGGERS = ("file_store", "app", "business_logic", "ui", "utils")


class _ConsoleNoiseFilter(logging.Filter):
    """Keep app logs on the console; only errors from third-party libraries."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == "__main__" or name.split(".", 1)[0] in _APP_LOGGERS:
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    log_dir: Union[str, Path],
    file_level: Union[int, str] = logging.DEBUG,
    console_level: Optional[int] = None,
) -> Path:
    """
    Configure root logging.

    - File handler: full logs in <log_dir>/qomoboro.log
    - Console handler (stderr): only when console_level is given; the TUI
      owns the terminal, so it is left off while the app runs.

    Call this once, early, before the first log call.

    Args:
        log_dir: Directory for the log file (created if missing)
        file_level: Level for the file handler
        console_level: Level for the console handler, or None for no console

    Returns:
        Path of the log file
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove pre-existing handlers to avoid duplicates on repeated setup.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    if console_level is not None:
        ch = logging.StreamHandler(sys.stderr)
        ch.setLevel(console_level)
        ch.setFormatter(fmt)
        ch.addFilter(_ConsoleNoiseFilter())
        root.addHandler(ch)

    logging.captureWarnings(True)
    return log_file
