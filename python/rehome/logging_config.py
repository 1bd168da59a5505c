"""
Logging configuration for rehome.

The MCP server speaks JSON-RPC on stdout, so nothing here ever logs there.
Records go to .rehome/logs/rehome-YYYY-MM-DD.log under the working
directory (rotated at midnight), and optionally to stderr.
"""

import logging
import logging.handlers
import sys
from datetime import date
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class FlushingHandler(logging.handlers.TimedRotatingFileHandler):
    """Daily log file that flushes every record, so a crash loses nothing."""

    def emit(self, record):
        super().emit(record)
        self.flush()


def _is_stderr_handler(handler: logging.Handler) -> bool:
    return type(handler) is logging.StreamHandler and handler.stream is sys.stderr


def _file_handler(log_dir: Path, backup_count: int) -> FlushingHandler:
    log_dir.mkdir(parents=True, exist_ok=True)
    return FlushingHandler(
        log_dir / f"rehome-{date.today().isoformat()}.log",
        when="midnight",
        backupCount=backup_count,
        encoding="utf-8",
    )


def setup_logging(
    log_dir: Optional[Path] = None,
    level: int = logging.INFO,
    backup_count: int = 30,
    console: bool = False,
) -> logging.Logger:
    """
    Configure the ``rehome`` logger. Repeated calls only add missing handlers.

    Args:
        log_dir: Where daily log files go (default: ./.rehome/logs)
        level: Level for the ``rehome`` logger hierarchy
        backup_count: Rotated files to keep
        console: Also log to stderr

    Returns:
        The ``rehome`` logger
    """
    logger = logging.getLogger("rehome")
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if not any(isinstance(h, FlushingHandler) for h in logger.handlers):
        handler = _file_handler(log_dir or Path.cwd() / ".rehome" / "logs", backup_count)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.info(f"📝 rehome logging initialized ({logging.getLevelName(level)}) → {handler.baseFilename}")

    if console and not any(_is_stderr_handler(h) for h in logger.handlers):
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setFormatter(formatter)
        logger.addHandler(stderr_handler)

    return logger


def get_logger(name: str = "rehome") -> logging.Logger:
    return logging.getLogger(name)
