"""
Scenario execution exports.
"""

from src.runner.executor import StepExecutor
from src.runner.harness import TestHarness, load_test_suite
from src.runner.scenario import (
    SCENARIO_STEPS,
    RegistrationScenario,
    generate_username,
    success_indicators,
)

__all__ = [
    "StepExecutor",
    "TestHarness",
    "load_test_suite",
    "SCENARIO_STEPS",
    "RegistrationScenario",
    "generate_username",
    "success_indicators",
]
