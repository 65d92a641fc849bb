"""Logging setup for screen-melt.

Everything goes to a rotating log file. The console (stderr) only shows
warnings and errors so that normal command-line output stays clean.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"
CONSOLE_HANDLER = "screen_melt.console"


def _default_log_dir() -> Path:
    local_appdata = os.getenv("LOCALAPPDATA")
    if local_appdata:
        return Path(local_appdata) / "ScreenMelt" / "logs"
    return Path.home() / ".screen_melt" / "logs"


def _level_from_env() -> int:
    level = logging.getLevelName(
        os.getenv("SCREEN_MELT_LOG_LEVEL", "INFO").upper()
    )
    return level if isinstance(level, int) else logging.INFO


def _is_console(handler: logging.Handler) -> bool:
    return handler.get_name() == CONSOLE_HANDLER


def init_logging(
    app_name: str = "screen_melt", console_level: int = logging.WARNING
) -> Path:
    """Initialize logging and return the log file path."""
    log_dir = _default_log_dir()
    log_path = log_dir / "screen-melt.log"
    level = _level_from_env()
    root = logging.getLogger()
    root.setLevel(level)

    if not any(_is_console(h) for h in root.handlers):
        console = logging.StreamHandler()
        console.set_name(CONSOLE_HANDLER)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        root.addHandler(console)
    set_console_level(console_level)

    if not any(isinstance(h, RotatingFileHandler) for h in root.handlers):
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_path,
                maxBytes=2_000_000,
                backupCount=5,
                encoding="utf-8",
            )
        except OSError:
            logging.getLogger(app_name).warning(
                "Cannot write log file %s", log_path, exc_info=True
            )
            return log_path
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root.addHandler(file_handler)

    logging.getLogger(app_name).info("Logging initialized at %s", log_path)
    return log_path


def set_console_level(level: int) -> None:
    """Adjust console (stderr) handler level."""
    for handler in logging.getLogger().handlers:
        if _is_console(handler):
            handler.setLevel(level)
