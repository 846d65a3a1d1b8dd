"""
Tests for the registration scenario and username generation.
"""

import random
import re

import pytest

from conftest import FakePage
from src.core.types import StepStatus, TestResult, TestStatus
from src.error_handling.exceptions import (
    ApplicationError,
    InteractionError,
    NavigationError,
    VerificationError,
)
from src.runner.scenario import (
    FORM_FIELDS,
    SCENARIO_STEPS,
    STEP_FILL_FORM,
    STEP_OPEN_REGISTRATION,
    USERNAME_SELECTOR,
    RegistrationScenario,
    generate_username,
    success_indicators,
)

USERNAME_RE = re.compile(r"^user\d+[a-z0-9]*$")


class TestGenerateUsername:
    """Username generation."""

    def test_length_and_shape(self):
        for _ in range(50):
            username = generate_username()
            assert len(username) <= 10
            assert USERNAME_RE.match(username)

    def test_uses_last_four_clock_digits(self):
        username = generate_username(now_ms=1700000012345, rng=random.Random(1))

        assert username.startswith("user2345")
        assert len(username) == 10

    def test_short_clock_value_still_truncated(self):
        username = generate_username(now_ms=7, rng=random.Random(3))

        assert username.startswith("user7")
        assert len(username) == 9

    def test_different_seeds_differ(self):
        first = generate_username(now_ms=1700000012345, rng=random.Random(1))
        second = generate_username(now_ms=1700000012345, rng=random.Random(2))

        assert first != second

    def test_different_times_differ(self):
        rng_seed = 42
        first = generate_username(now_ms=1700000010000, rng=random.Random(rng_seed))
        second = generate_username(now_ms=1700000019999, rng=random.Random(rng_seed))

        assert first != second


class TestSuccessIndicators:
    def test_most_specific_first(self):
        indicators = success_indicators("user1234ab")

        assert indicators[0] == "text=Welcome user1234ab"
        assert indicators[1] == "text=user1234ab"
        assert indicators[-1] == 'h1:has-text("Welcome")'
        assert len(indicators) == 7


def _scenario(page, settings, username="user1234ab"):
    result = TestResult()
    return RegistrationScenario(page, result, settings, username=username), result


class TestRegistrationScenario:
    """Step sequencing and failure handling."""

    @pytest.mark.asyncio
    async def test_all_steps_pass(self, fake_page, settings):
        scenario, result = _scenario(fake_page, settings)

        await scenario.run()

        assert result.status == TestStatus.PASSED
        assert [s.name for s in result.steps] == list(SCENARIO_STEPS)
        assert all(s.status == StepStatus.PASSED for s in result.steps)
        assert result.errors == []
        assert result.username == "user1234ab"
        assert fake_page.screenshots == []

    @pytest.mark.asyncio
    async def test_generates_username_when_not_given(self, fake_page, settings):
        result = TestResult()
        scenario = RegistrationScenario(fake_page, result, settings)

        await scenario.run()

        assert USERNAME_RE.match(result.username)
        filled = dict((args[0], args[1]) for op, args in fake_page.calls if op == "fill")
        assert filled[USERNAME_SELECTOR] == result.username

    @pytest.mark.asyncio
    async def test_navigation_uses_configured_target(self, fake_page, settings):
        scenario, _ = _scenario(fake_page, settings)

        await scenario.run()

        op, args = fake_page.calls[0]
        assert op == "goto"
        assert args == (settings.target_url, "networkidle", settings.navigation_timeout)

    @pytest.mark.asyncio
    async def test_fills_every_field(self, fake_page, settings):
        scenario, _ = _scenario(fake_page, settings)

        await scenario.run()

        filled = [args for op, args in fake_page.calls if op == "fill"]
        assert len(filled) == len(FORM_FIELDS)
        assert filled[-1][1] == "SecurePass123!"
        assert filled[-2][1] == "SecurePass123!"

    @pytest.mark.asyncio
    async def test_title_mismatch_fails_navigation(self, settings):
        page = FakePage(title="Some Other Bank")
        scenario, result = _scenario(page, settings)

        with pytest.raises(NavigationError, match="ParaBank page did not load correctly"):
            await scenario.run()

        assert len(result.steps) == 1
        assert result.steps[0].status == StepStatus.FAILED
        assert result.status == TestStatus.FAILED

    @pytest.mark.asyncio
    async def test_register_link_failure_aborts(self, settings):
        page = FakePage(fail_on={"wait_for_url": NavigationError("URL did not match")})
        scenario, result = _scenario(page, settings)

        with pytest.raises(NavigationError):
            await scenario.run()

        assert len(result.steps) == 2
        assert result.steps[-1].name == STEP_OPEN_REGISTRATION
        assert result.steps[-1].status == StepStatus.FAILED
        assert len(result.errors) == 1
        assert result.status == TestStatus.FAILED
        assert "fill" not in page.ops()

    @pytest.mark.asyncio
    async def test_third_step_failure_stops_remaining_steps(self, settings):
        page = FakePage(fail_on={"fill": InteractionError("field not found")})
        scenario, result = _scenario(page, settings)

        with pytest.raises(InteractionError):
            await scenario.run()

        assert len(result.steps) == 3
        assert [s.status for s in result.steps] == [
            StepStatus.PASSED,
            StepStatus.PASSED,
            StepStatus.FAILED,
        ]
        assert result.steps[2].name == STEP_FILL_FORM
        assert len(result.errors) == 1
        assert result.status == TestStatus.FAILED
        assert "wait_for_load_state" not in page.ops()

    @pytest.mark.asyncio
    async def test_username_read_back_mismatch(self, settings):
        page = FakePage(echo_fill=False)
        scenario, result = _scenario(page, settings)

        with pytest.raises(InteractionError, match="Username field was not filled correctly"):
            await scenario.run()

        assert result.steps[-1].name == STEP_FILL_FORM

    @pytest.mark.asyncio
    async def test_failure_captures_screenshot(self, settings):
        page = FakePage(fail_on={"fill": InteractionError("field not found")})
        scenario, _ = _scenario(page, settings)

        with pytest.raises(InteractionError):
            await scenario.run()

        assert page.screenshots == [settings.failure_screenshot_path]

    @pytest.mark.asyncio
    async def test_screenshot_failure_does_not_mask_step_error(self, settings):
        page = FakePage(
            fail_on={"fill": InteractionError("field not found")},
            screenshot_error=RuntimeError("page crashed"),
        )
        scenario, _ = _scenario(page, settings)

        with pytest.raises(InteractionError, match="field not found"):
            await scenario.run()


class TestVerification:
    """Success indicator evaluation."""

    @pytest.mark.asyncio
    async def test_first_matching_indicator_wins(self, settings):
        page = FakePage(visible_text=("successfully",))
        scenario, result = _scenario(page, settings)

        await scenario.run()

        waits = [args[0] for op, args in page.calls if op == "wait_for_selector"]
        assert waits[-1] == "text=successfully"
        assert waits[1:] == success_indicators("user1234ab")[:4]
        assert result.status == TestStatus.PASSED

    @pytest.mark.asyncio
    async def test_application_error_text_surfaces(self, settings):
        page = FakePage(visible_text=(), error_text="  This username already exists.  ")
        scenario, result = _scenario(page, settings)

        with pytest.raises(ApplicationError) as exc_info:
            await scenario.run()

        assert exc_info.value.error_text == "This username already exists."
        assert "This username already exists." in result.errors[0].error
        assert len(result.steps) == 5

    @pytest.mark.asyncio
    async def test_no_indicator_takes_debug_screenshot(self, settings):
        page = FakePage(visible_text=())
        scenario, result = _scenario(page, settings)

        with pytest.raises(VerificationError, match="Could not verify successful registration"):
            await scenario.run()

        assert settings.debug_screenshot_path in page.screenshots
        assert page.screenshots[-1] == settings.failure_screenshot_path
        assert result.status == TestStatus.FAILED
        assert result.errors[0].step == SCENARIO_STEPS[-1]
