"""
Core data models for the registration test harness.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TestStatus(str, Enum):
    """Overall status of a test run."""

    PENDING = "PENDING"
    PASSED = "PASSED"
    FAILED = "FAILED"


class StepStatus(str, Enum):
    """Outcome of a single recorded step."""

    PASSED = "PASSED"
    FAILED = "FAILED"


class StepRecord(BaseModel):
    """A timed, recorded unit of interaction. Immutable once appended."""

    model_config = ConfigDict(frozen=True)

    name: str
    status: StepStatus
    duration_ms: int = Field(..., ge=0)
    timestamp: datetime = Field(default_factory=utc_now)
    error: Optional[str] = None


class ErrorRecord(BaseModel):
    """Error captured when a step fails."""

    model_config = ConfigDict(frozen=True)

    step: str
    error: str
    timestamp: datetime = Field(default_factory=utc_now)


class TestResult(BaseModel):
    """Mutable record of one scenario run."""

    test_case: str = "TC 001"
    description: str = "Verify that user can register a new customer"
    status: TestStatus = TestStatus.PENDING
    start_time: datetime = Field(default_factory=utc_now)
    end_time: Optional[datetime] = None
    steps: List[StepRecord] = Field(default_factory=list)
    username: Optional[str] = None
    errors: List[ErrorRecord] = Field(default_factory=list)
    test_suite_title: Optional[str] = None

    @property
    def total_duration_ms(self) -> int:
        return sum(step.duration_ms for step in self.steps)

    @property
    def passed_count(self) -> int:
        return len([s for s in self.steps if s.status == StepStatus.PASSED])

    @property
    def failed_count(self) -> int:
        return len([s for s in self.steps if s.status == StepStatus.FAILED])

    def record_step(self, record: StepRecord) -> None:
        self.steps.append(record)

    def record_error(self, step: str, error: str) -> ErrorRecord:
        record = ErrorRecord(step=step, error=error)
        self.errors.append(record)
        return record

    def finalize(self, status: TestStatus) -> None:
        """Stamp the final status and end time."""
        self.status = status
        self.end_time = utc_now()


class RegistrationData(BaseModel):
    """Form data submitted by the registration scenario."""

    first_name: str = "John"
    last_name: str = "Smith"
    address: str = "123 Main Street"
    city: str = "New York"
    state: str = "NY"
    zip_code: str = "10001"
    phone: str = "555-123-4567"
    ssn: str = "123-45-6789"
    username: str
    password: str = "SecurePass123!"
