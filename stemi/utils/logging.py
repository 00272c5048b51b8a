"""
Logging setup for the STEMI detector.

Console lines look like ``[2026-01-01T00:00:00+00:00] INFO     [stemi.main] ...``,
coloured by level when stdout is a terminal. An optional log file gets a
plain pipe-separated format.
"""
import logging
import sys
from datetime import datetime, timezone
from typing import Optional, Union

FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_RESET = "\033[0m"
_LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}


class StructuredFormatter(logging.Formatter):
    """One line per record: UTC timestamp, level, logger name, message."""

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        # Stamp with the record's own creation time, not the time of formatting
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        line = f"[{stamp}] {record.levelname:8} [{record.name}] {record.getMessage()}"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        if self.use_color:
            color = _LEVEL_COLORS.get(record.levelno)
            if color:
                line = f"{color}{line}{_RESET}"
        return line


def _resolve_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def setup_logging(level: Union[str, int] = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure the root logger.

    Replaces any existing root handlers with a stdout handler and, when
    ``log_file`` is given, a file handler.

    Raises:
        ValueError: If ``level`` is not a known logging level name.
    """
    root = logging.getLogger()
    root.setLevel(_resolve_level(level))
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(StructuredFormatter(use_color=sys.stdout.isatty()))
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Module logger; call with ``__name__``."""
    return logging.getLogger(name)
