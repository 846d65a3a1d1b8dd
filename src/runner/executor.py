"""
Timed, recorded execution of a single scenario step.
"""

import time
from typing import Any, Awaitable, Callable

from src.core.types import StepRecord, StepStatus, TestResult
from src.monitoring.logger import get_logger, log_step_event

StepAction = Callable[[], Awaitable[Any]]

logger = get_logger(__name__)


class StepExecutor:
    """Wraps step actions with timing and records the outcome on a TestResult.

    A failing action is recorded as a FAILED step plus an error entry, and the
    original exception is re-raised to the caller.
    """

    def __init__(self, result: TestResult) -> None:
        self.result = result

    async def execute(self, name: str, action: StepAction) -> Any:
        """
        Run one step.

        Args:
            name: Human-readable step name
            action: Zero-argument coroutine function performing the step

        Returns:
            Whatever the action returned
        """
        log_step_event("step_started", self.result.test_case, name)
        started = time.perf_counter()

        try:
            outcome = await action()
        except Exception as e:
            duration_ms = self._elapsed_ms(started)
            message = str(e) or e.__class__.__name__
            self.result.record_step(
                StepRecord(
                    name=name,
                    status=StepStatus.FAILED,
                    duration_ms=duration_ms,
                    error=message,
                )
            )
            self.result.record_error(name, message)
            log_step_event(
                "step_failed",
                self.result.test_case,
                name,
                {"status": StepStatus.FAILED.value, "duration_ms": duration_ms, "error": message},
            )
            raise

        duration_ms = self._elapsed_ms(started)
        self.result.record_step(
            StepRecord(name=name, status=StepStatus.PASSED, duration_ms=duration_ms)
        )
        log_step_event(
            "step_passed",
            self.result.test_case,
            name,
            {"status": StepStatus.PASSED.value, "duration_ms": duration_ms},
        )
        return outcome

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int(round((time.perf_counter() - started) * 1000))
