# src/tasksync/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

APP_LOGGER = "tasksync"
# Per-request logs of the in-process server: WARNING+ on the console.
SERVER_LOGGER = "tasksync.server"
LOG_FILE_NAME = "tasksync.log"

# Libraries whose DEBUG/INFO chatter is not worth keeping even in the file.
QUIET_LIBRARIES = ("httpx", "httpcore")

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _is_under(name: str, parent: str) -> bool:
    return name == parent or name.startswith(parent + ".")


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console only:
    - client / cli logs pass at the handler level
    - server request logs only from WARNING
    - anything else (libraries, captured warnings) only from ERROR
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if _is_under(record.name, SERVER_LOGGER):
            return record.levelno >= logging.WARNING
        if _is_under(record.name, APP_LOGGER):
            return True
        return record.levelno >= logging.ERROR


def resolve_level(level: str | int, default: int = logging.INFO) -> int:
    """Accept 10 / "DEBUG" / "debug"; unknown names give `default`."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else default


def setup_logging(
    *,
    log_dir: str | Path = ".local/tasksync",
    console_level: str | int = logging.INFO,
    file_level: str | int = logging.DEBUG,
) -> Path:
    """
    Route all logging to stderr (filtered) and to <log_dir>/tasksync.log (full).

    Replaces whatever handlers the root logger had, so call it once at startup.
    Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(resolve_level(console_level))
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(resolve_level(file_level, logging.DEBUG))
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    for name in QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
    return log_file
