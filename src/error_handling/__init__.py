"""
Error handling for the registration test harness.
"""

from .exceptions import (
    HarnessError,
    NavigationError,
    InteractionError,
    VerificationError,
    ApplicationError,
    ReportingError,
    BrowserUnavailableError,
    ReadinessError,
)

__all__ = [
    "HarnessError",
    "NavigationError",
    "InteractionError",
    "VerificationError",
    "ApplicationError",
    "ReportingError",
    "BrowserUnavailableError",
    "ReadinessError",
]
