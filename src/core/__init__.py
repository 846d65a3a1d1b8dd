"""
Core types and interfaces for the registration test harness.
"""

from src.core.interfaces import PageDriver
from src.core.types import (
    ErrorRecord,
    RegistrationData,
    StepRecord,
    StepStatus,
    TestResult,
    TestStatus,
)

__all__ = [
    "PageDriver",
    "ErrorRecord",
    "RegistrationData",
    "StepRecord",
    "StepStatus",
    "TestResult",
    "TestStatus",
]
