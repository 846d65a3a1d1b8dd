"""
Exception hierarchy for the registration test harness.

Each class maps to one failure category surfaced in reports: page loads,
element interaction, outcome verification, report persistence, browser
availability and external readiness.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


class HarnessError(Exception):
    """Base exception for all harness errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None
        }


class NavigationError(HarnessError):
    """Page failed to load or did not look like the expected page."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        expected_title: Optional[str] = None,
        actual_title: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.url = url
        self.expected_title = expected_title
        self.actual_title = actual_title
        self.details.update({
            "url": url,
            "expected_title": expected_title,
            "actual_title": actual_title
        })


class InteractionError(HarnessError):
    """Element not found, not clickable, or a fill that did not stick."""

    def __init__(
        self,
        message: str,
        selector: Optional[str] = None,
        action: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.selector = selector
        self.action = action
        self.details.update({
            "selector": selector,
            "action": action
        })


class VerificationError(HarnessError):
    """No success indicator appeared after submitting the form."""

    def __init__(
        self,
        message: str,
        indicators_tried: Optional[List[str]] = None,
        screenshot_path: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.indicators_tried = indicators_tried or []
        self.screenshot_path = screenshot_path
        self.details.update({
            "indicators_tried": self.indicators_tried,
            "screenshot_path": screenshot_path
        })


class ApplicationError(VerificationError):
    """The application rendered an error element instead of a success page."""

    def __init__(self, message: str, error_text: str, **kwargs):
        super().__init__(message, **kwargs)
        self.error_text = error_text
        self.details["error_text"] = error_text


class ReportingError(HarnessError):
    """Report or artifact could not be written."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.path = path
        self.details["path"] = path


class BrowserUnavailableError(HarnessError):
    """The browser could not be launched."""
    pass


class ReadinessError(HarnessError):
    """An external dependency never reported healthy."""

    def __init__(self, message: str, url: str, attempts: int, **kwargs):
        super().__init__(message, **kwargs)
        self.url = url
        self.attempts = attempts
        self.details.update({
            "url": url,
            "attempts": attempts
        })
