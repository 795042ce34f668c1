# ============================================================================
# src/prescription_tracker/utils/logging.py
# ============================================================================
"""
Logging setup for the tracker and the API.

Console output always goes to stdout; a log file and JSON lines are
optional (see LoggingSettings). Chatty third-party loggers are held at
WARNING so search traces stay readable.
"""

import functools
import json
import logging
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from .exceptions import ConfigurationError

TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
TEXT_DATEFMT = '%Y-%m-%d %H:%M:%S'

QUIET_LOGGERS = ("aiohttp.access", "aiohttp.client", "uvicorn.access")

# LogRecord attributes that are not caller-supplied extras
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    format_json: bool = False,
    quiet: Iterable[str] = QUIET_LOGGERS
) -> None:
    """
    Configure the root logger.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_file: Also append to this file (parent folders are created)
        format_json: One JSON object per line instead of plain text
        quiet: Logger names capped at WARNING
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ConfigurationError(f"Unknown log level: {level}")

    formatter = JsonFormatter() if format_json else logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)

    for name in quiet:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


class JsonFormatter(logging.Formatter):
    """JSON lines; values passed through `extra=` are kept as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'function': record.funcName,
            'line': record.lineno,
        }

        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and key not in entry:
                entry[key] = value

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def log_performance(logger: logging.Logger, operation: str):
    """
    Log how long an awaited call took, and log failures before re-raising.

    Usage:
        @log_performance(logger, "Medication search")
        async def search(self, query): ...
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            started = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                logger.error(f"{operation} failed after {time.perf_counter() - started:.3f}s: {e}")
                raise
            logger.info(f"{operation} completed in {time.perf_counter() - started:.3f}s")
            return result

        return wrapper
    return decorator
