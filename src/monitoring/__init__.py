"""
Monitoring module exports.
"""

from src.monitoring.logger import (
    get_logger,
    log_step_event,
    setup_logging,
    JSONFormatter,
    SanitizingHandler,
)

from src.monitoring.reporter import ReportGenerator

__all__ = [
    # Logger
    "setup_logging",
    "get_logger",
    "log_step_event",
    "JSONFormatter",
    "SanitizingHandler",

    # Reporter
    "ReportGenerator",
]
