"""Logging setup for numberdesk.

Records of the ``numberdesk`` logger tree go to three places:
- the terminal, through rich, for warnings and errors only
- ``logs/app.log``, one JSON object per record
- ``logs/events.log``, only records emitted through ``log_event``

Tokens and credentials are masked before any handler formats a record.
"""

import functools
import json
import logging
import re
import time
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.logging import RichHandler

from .paths import LOGS_DIR

ROOT_LOGGER_NAME = "numberdesk"

APP_LOG_BYTES = 5 * 1024 * 1024
EVENT_LOG_BYTES = 2 * 1024 * 1024
REDACTED = "[REDACTED]"


def _level_number(level: str) -> int:
    number = logging.getLevelName(level.upper())
    if not isinstance(number, int):
        raise ValueError(f"Invalid logging level: {level}")
    return number


## Formatting and Masking

class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "message": record.getMessage(),
        }

        for attr in ("event_type", "context"):
            value = getattr(record, attr, None)
            if value is not None:
                entry[attr] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class SensitiveDataMasker:
    """Redacts credentials from log text and structured context."""

    SENSITIVE_KEYS = frozenset({
        "access_token",
        "api_key",
        "apikey",
        "authorization",
        "cookie",
        "password",
        "secret",
        "token",
    })

    # key=value, key: value and "key": "value"; a Bearer prefix stays visible
    INLINE_PATTERN = re.compile(
        r'(?P<key>authorization|access_token|api[_-]?key|token|password|secret)'
        r'(?P<sep>["\']?\s*[:=]\s*["\']?(?:bearer\s+)?)'
        r'(?P<value>[^"\'}\s,]+)',
        re.IGNORECASE,
    )

    def mask_string(self, text: str) -> str:
        if not isinstance(text, str) or not text:
            return text
        return self.INLINE_PATTERN.sub(
            lambda m: f"{m.group('key')}{m.group('sep')}{REDACTED}", text
        )

    def mask_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        masked: Dict[str, Any] = {}
        for key, value in data.items():
            if str(key).lower() in self.SENSITIVE_KEYS:
                masked[key] = REDACTED
            elif isinstance(value, dict):
                masked[key] = self.mask_dict(value)
            elif isinstance(value, str):
                masked[key] = self.mask_string(value)
            else:
                masked[key] = value
        return masked


class SensitiveDataFilter(logging.Filter):
    """Apply SensitiveDataMasker to the message and context of each record."""

    def __init__(self):
        super().__init__()
        self.masker = SensitiveDataMasker()

    def filter(self, record: logging.LogRecord) -> bool:
        if record.args:
            record.msg = record.getMessage()
            record.args = None
        if isinstance(record.msg, str):
            record.msg = self.masker.mask_string(record.msg)

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            record.context = self.masker.mask_dict(context)

        return True


## Log Manager

class LogManager:
    """Owns the handlers attached to the ``numberdesk`` logger."""

    def __init__(self, log_level: str = "INFO", log_dir: Optional[Path] = None):
        self.log_dir = log_dir or LOGS_DIR
        self.root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        self.root_logger.setLevel(logging.DEBUG)

        self.console_handler = self._build_console_handler()
        self.app_handler, self.event_handler = self._build_file_handlers()
        self.root_logger.handlers = [self.console_handler, self.app_handler, self.event_handler]

        self.set_level(log_level)

    def _build_console_handler(self) -> logging.Handler:
        handler = RichHandler(show_path=False, markup=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler.addFilter(SensitiveDataFilter())
        return handler

    def _build_file_handlers(self) -> List[logging.Handler]:
        from .errors import FileSystemError

        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            app_handler = RotatingFileHandler(
                self.log_dir / "app.log", maxBytes=APP_LOG_BYTES, backupCount=5, encoding="utf-8"
            )
            event_handler = RotatingFileHandler(
                self.log_dir / "events.log", maxBytes=EVENT_LOG_BYTES, backupCount=3, encoding="utf-8"
            )
        except OSError as e:
            raise FileSystemError(f"Cannot open log files in {self.log_dir}: {e}") from e

        event_handler.setLevel(logging.INFO)
        event_handler.addFilter(lambda record: hasattr(record, "event_type"))

        for handler in (app_handler, event_handler):
            handler.setFormatter(JSONFormatter())
            handler.addFilter(SensitiveDataFilter())

        return [app_handler, event_handler]

    def set_level(self, level: str) -> None:
        """Set the app.log level; the terminal never shows less than WARNING."""
        number = _level_number(level)
        self.log_level = number
        self.app_handler.setLevel(number)
        self.console_handler.setLevel(max(number, logging.WARNING))

    def get_logger(self, name: Optional[str] = None) -> logging.Logger:
        """Logger below ``numberdesk``; package module names are used as-is."""
        if not name or name == ROOT_LOGGER_NAME:
            return self.root_logger
        if not name.startswith(f"{ROOT_LOGGER_NAME}."):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        return logging.getLogger(name)

    def log_event(self, event_type: str, message: str, level: str = "INFO", **context) -> None:
        self.root_logger.log(
            _level_number(level),
            message,
            extra={"event_type": event_type, "context": context or None},
        )


## Call Tracing Decorators

def _trace(name: str, started: float, error: Optional[BaseException] = None) -> None:
    elapsed = time.perf_counter() - started
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if error is None:
        logger.debug(f"<- {name} ({elapsed:.3f}s)")
    else:
        logger.debug(f"<- {name} raised {type(error).__name__} after {elapsed:.3f}s")


def log_call(func):
    """Log entry, exit and duration of a call at DEBUG."""
    name = f"{func.__module__}.{func.__qualname__}"

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logging.getLogger(ROOT_LOGGER_NAME).debug(f"-> {name}")
        started = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            _trace(name, started, e)
            raise
        _trace(name, started)
        return result

    return wrapper


def async_log_call(func):
    """Coroutine variant of ``log_call``."""
    name = f"{func.__module__}.{func.__qualname__}"

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        logging.getLogger(ROOT_LOGGER_NAME).debug(f"-> {name} (async)")
        started = time.perf_counter()
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            _trace(name, started, e)
            raise
        _trace(name, started)
        return result

    return wrapper


## Module-level Access

_log_manager: Optional[LogManager] = None


def init_logging(log_level: str = "INFO") -> LogManager:
    """Create the LogManager on first use; later calls only change the level."""
    global _log_manager

    if _log_manager is None:
        _log_manager = LogManager(log_level)
    else:
        _log_manager.set_level(log_level)

    return _log_manager


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if _log_manager is None:
        init_logging()
    return _log_manager.get_logger(name)


def log_event(event_type: str, message: str, level: str = "INFO", **context) -> None:
    """Log a structured event; it also lands in events.log."""
    if _log_manager is None:
        init_logging()
    _log_manager.log_event(event_type, message, level, **context)
