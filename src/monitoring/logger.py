"""
Logging configuration for the registration harness.

Console output goes through rich in text mode or one JSON object per line in
json mode. Every handler sanitizes records first, since the scenario types a
password, an SSN and a phone number into the application.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

from src.config.settings import get_settings
from src.security.sanitizer import DataSanitizer

HARNESS_EXTRAS = ("test_case", "step_name", "status", "duration_ms", "event_type")

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, carrying the step fields when present."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in HARNESS_EXTRAS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


class SanitizingHandler(logging.Handler):
    """Log handler that sanitizes messages before passing to wrapped handler."""

    def __init__(self, handler: logging.Handler, sanitizer: Optional[DataSanitizer] = None):
        super().__init__()
        self.handler = handler
        self.sanitizer = sanitizer or DataSanitizer()
        self.setLevel(handler.level)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.handler.emit(self.sanitizer.sanitize_log_record(record))
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        self.handler.flush()

    def close(self) -> None:
        self.handler.close()
        super().close()


def _formatted(handler: logging.Handler, formatter: logging.Formatter, level: int) -> logging.Handler:
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return SanitizingHandler(handler)


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Replace the root handlers with the harness console (and optional file) handler.

    Args:
        log_level: Logging level (defaults to settings)
        log_format: 'json' or 'text' (defaults to settings)
        log_file: Optional log file path (defaults to settings)

    Returns:
        Root logger instance
    """
    settings = get_settings()
    level = getattr(logging, (log_level or settings.log_level).upper())
    format_type = log_format or settings.log_format
    file_path = log_file or settings.log_file

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if format_type == "json":
        console_handler = _formatted(logging.StreamHandler(sys.stdout), JSONFormatter(), level)
    else:
        rich_handler = RichHandler(
            console=Console(stderr=True), rich_tracebacks=True, show_path=False
        )
        rich_handler.setLevel(level)
        console_handler = SanitizingHandler(rich_handler)
    root_logger.addHandler(console_handler)

    if file_path:
        formatter = JSONFormatter() if format_type == "json" else logging.Formatter(FILE_FORMAT)
        root_logger.addHandler(_formatted(logging.FileHandler(file_path), formatter, level))

    root_logger.setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_step_event(
    event_type: str,
    test_case: str,
    step_name: str,
    data: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Log a step lifecycle event (started, passed, failed).

    Args:
        event_type: step_started, step_passed or step_failed
        test_case: Test case identifier
        step_name: Human-readable step name
        data: status, duration_ms and error where known
    """
    logger = logging.getLogger("harness.steps")

    extra = {
        "event_type": event_type,
        "test_case": test_case,
        "step_name": step_name,
    }
    if data:
        extra.update(data)

    level = logging.ERROR if event_type == "step_failed" else logging.INFO
    if event_type == "step_started":
        message = f"Executing: {step_name}"
    elif event_type == "step_failed":
        message = f"{step_name} - FAILED: {extra.get('error', '')}"
    else:
        message = f"{step_name} - {extra.get('status', 'PASSED')} ({extra.get('duration_ms', 0)}ms)"

    logger.log(level, message, extra=extra)
