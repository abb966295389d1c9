"""Configuration settings for the qomoboro task tracker."""
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

APP_NAME = "qomoboro"


def resolve_data_dir(app_name: str = APP_NAME, environ: Optional[Mapping[str, str]] = None) -> Path:
    """Resolve the data directory for the application.

    Order of precedence:
    - $QOMOBORO_DATA_DIR (explicit override)
    - $XDG_DATA_HOME/<app_name>
    - $HOME/.local/share/<app_name>

    Args:
        app_name: Directory name used under the XDG data home
        environ: Environment mapping to read (defaults to os.environ)

    Returns:
        Path to the data directory (not created here)
    """
    if environ is None:
        environ = os.environ

    override = environ.get(f"{app_name.upper()}_DATA_DIR")
    if override:
        return Path(override).expanduser()

    xdg_data_home = environ.get("XDG_DATA_HOME")
    if xdg_data_home:
        return Path(xdg_data_home).expanduser() / app_name

    home = environ.get("HOME")
    base = Path(home) if home else Path.home()
    return base / ".local" / "share" / app_name


@dataclass
class Config:
    """Application configuration settings.

    Centralized configuration to avoid hardcoded values throughout the codebase.
    """
    app_name: str = APP_NAME

    # File system
    data_dir: Path = field(default_factory=resolve_data_dir)
    json_indent: int = 2

    # Logging
    log_level: str = "DEBUG"

    # Statistics
    week_length: int = 7

    # Colors
    color_primary: str = "#688060"  # Green - titles and borders
    color_secondary: str = "#8CD0D3"  # Cyan - active items
    color_accent: str = "#F0DFAF"  # Sand - headers and highlights
    color_error: str = "#DCA3A3"  # Rose - errors
    color_muted: str = "#7F7F7F"  # Grey - help text
    color_bg_dark: str = "#1a1a2e"  # Dark background
    color_bg_medium: str = "#2d2d44"  # Medium background
    color_text: str = "#e2e8f0"  # Light text

    @classmethod
    def load(cls, environ: Optional[Mapping[str, str]] = None) -> 'Config':
        """
        Load configuration.

        Reads the data directory and log level from the environment;
        everything else uses defaults. An unknown log level falls back to
        DEBUG.

        Args:
            environ: Environment mapping to read (defaults to os.environ)

        Returns:
            Config instance with default or loaded values
        """
        if environ is None:
            environ = os.environ
        log_level = environ.get(f"{APP_NAME.upper()}_LOG_LEVEL", "DEBUG").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            log_level = "DEBUG"
        return cls(
            data_dir=resolve_data_dir(APP_NAME, environ),
            log_level=log_level,
        )


# Global config instance
config = Config.load()
