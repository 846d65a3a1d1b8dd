"""
TC 001: register a new ParaBank customer.

The scenario is fixed: navigate, open the registration form, fill it with a
freshly generated username, submit, and verify the welcome page. Any failing
step aborts the remaining ones.
"""

import random
import string
import time
from typing import List, Optional, Tuple

from src.config.settings import Settings, get_settings
from src.core.interfaces import PageDriver
from src.core.types import RegistrationData, TestResult, TestStatus
from src.error_handling.exceptions import (
    ApplicationError,
    InteractionError,
    NavigationError,
    VerificationError,
)
from src.monitoring.logger import get_logger
from src.runner.executor import StepExecutor

logger = get_logger(__name__)

USERNAME_PREFIX = "user"
USERNAME_MAX_LENGTH = 10
_BASE36 = string.digits + string.ascii_lowercase

STEP_NAVIGATE = "Navigate to ParaBank website"
STEP_OPEN_REGISTRATION = "Click on Register link"
STEP_FILL_FORM = "Fill registration form with unique data"
STEP_SUBMIT = "Submit registration form"
STEP_VERIFY = "Verify welcome message with new username"

SCENARIO_STEPS = (
    STEP_NAVIGATE,
    STEP_OPEN_REGISTRATION,
    STEP_FILL_FORM,
    STEP_SUBMIT,
    STEP_VERIFY,
)

USERNAME_SELECTOR = '[name="customer.username"], [id*="username"]'
SUBMIT_SELECTOR = 'input[type="submit"], button[type="submit"]'
ERROR_SELECTOR = '.error, [class*="error"]'

# (selector, RegistrationData attribute), filled in order
FORM_FIELDS: Tuple[Tuple[str, str], ...] = (
    ('[name="customer.firstName"], [id*="firstName"]', "first_name"),
    ('[name="customer.lastName"], [id*="lastName"]', "last_name"),
    ('[name="customer.address.street"], [id*="address"]', "address"),
    ('[name="customer.address.city"], [id*="city"]', "city"),
    ('[name="customer.address.state"], [id*="state"]', "state"),
    ('[name="customer.address.zipCode"], [id*="zipCode"]', "zip_code"),
    ('[name="customer.phoneNumber"], [id*="phoneNumber"]', "phone"),
    ('[name="customer.ssn"], [id*="ssn"]', "ssn"),
    (USERNAME_SELECTOR, "username"),
    ('[name="customer.password"], [id*="password"]', "password"),
    ('[name="repeatedPassword"], [id*="repeatedPassword"]', "password"),
)


def generate_username(
    now_ms: Optional[int] = None, rng: Optional[random.Random] = None
) -> str:
    """
    Build a short, probably-unique username.

    ``user`` + last four digits of the millisecond clock + four random base-36
    characters, cut to ten characters. No collision check is made.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    rng = rng or random.Random()
    suffix = "".join(rng.choice(_BASE36) for _ in range(4))
    return f"{USERNAME_PREFIX}{str(now_ms)[-4:]}{suffix}"[:USERNAME_MAX_LENGTH]


def success_indicators(username: str) -> List[str]:
    """Selectors that denote a successful registration, most specific first."""
    return [
        f"text=Welcome {username}",
        f"text={username}",
        "text=Welcome",
        "text=successfully",
        "text=created",
        '.title:has-text("Welcome")',
        'h1:has-text("Welcome")',
    ]


class RegistrationScenario:
    """Drives the registration steps through a StepExecutor."""

    def __init__(
        self,
        page: PageDriver,
        result: TestResult,
        settings: Optional[Settings] = None,
        username: Optional[str] = None,
    ) -> None:
        self.page = page
        self.result = result
        self.settings = settings or get_settings()
        self.executor = StepExecutor(result)
        self._username = username
        self.data: Optional[RegistrationData] = None

    def prepare_data(self) -> RegistrationData:
        """Generate the username once and build the form data around it."""
        username = self._username or generate_username()
        self.result.username = username
        logger.info(f"Generated unique username: {username}")
        self.data = RegistrationData(username=username)
        return self.data

    async def run(self) -> TestResult:
        """
        Execute every step in order.

        Raises:
            Exception: the first step failure, after the result is marked FAILED
                and a failure screenshot has been attempted
        """
        logger.info(f"Starting {self.result.test_case} - {self.result.description}")
        self.prepare_data()

        try:
            await self.executor.execute(STEP_NAVIGATE, self.navigate)
            await self.executor.execute(STEP_OPEN_REGISTRATION, self.open_registration)
            await self.executor.execute(STEP_FILL_FORM, self.fill_form)
            await self.executor.execute(STEP_SUBMIT, self.submit)
            await self.executor.execute(STEP_VERIFY, self.verify)
        except Exception as e:
            self.result.status = TestStatus.FAILED
            logger.error(f"{self.result.test_case} failed: {e}")
            await self._capture_failure_screenshot()
            raise

        self.result.status = TestStatus.PASSED
        logger.info(f"{self.result.test_case} completed successfully")
        return self.result

    async def navigate(self) -> None:
        settings = self.settings
        await self.page.goto(
            settings.target_url,
            wait_until="networkidle",
            timeout=settings.navigation_timeout,
        )
        await self.page.wait_for_selector("body", timeout=settings.element_timeout)
        title = await self.page.title()
        if settings.expected_title not in title:
            raise NavigationError(
                f"{settings.expected_title} page did not load correctly",
                url=settings.target_url,
                expected_title=settings.expected_title,
                actual_title=title,
            )

    async def open_registration(self) -> None:
        await self.page.click(
            self.settings.registration_link_selector,
            timeout=self.settings.element_timeout,
        )
        await self.page.wait_for_url(
            self.settings.registration_url_pattern,
            timeout=self.settings.element_timeout,
        )

    async def fill_form(self) -> None:
        data = self.data or self.prepare_data()
        for selector, attribute in FORM_FIELDS:
            await self.page.fill(selector, getattr(data, attribute))

        # Read back to catch fills that silently did nothing
        written = await self.page.input_value(USERNAME_SELECTOR)
        if written != data.username:
            raise InteractionError(
                "Username field was not filled correctly",
                selector=USERNAME_SELECTOR,
                action="fill",
                details={"expected": data.username, "actual": written},
            )

    async def submit(self) -> None:
        await self.page.click(SUBMIT_SELECTOR, timeout=self.settings.submit_timeout)
        await self.page.wait_for_load_state(
            "networkidle", timeout=self.settings.settle_timeout
        )

    async def verify(self) -> str:
        """
        Return the first success indicator that shows up.

        Falls back to the page's error element text, then to a debug
        screenshot and a generic failure.
        """
        indicators = success_indicators(self.result.username or "")
        for selector in indicators:
            try:
                await self.page.wait_for_selector(
                    selector, timeout=self.settings.indicator_timeout
                )
            except Exception as e:
                logger.debug(f"Indicator not found: {selector} ({e})")
                continue
            logger.info(f"Success verified with selector: {selector}")
            return selector

        error_text = await self.page.first_text(ERROR_SELECTOR)
        if error_text is not None:
            error_text = error_text.strip()
            raise ApplicationError(
                f"Registration failed with error: {error_text}",
                error_text=error_text,
                indicators_tried=indicators,
            )

        debug_path = self.settings.debug_screenshot_path
        await self.page.screenshot(debug_path, full_page=True)
        raise VerificationError(
            "Could not verify successful registration - no welcome message found",
            indicators_tried=indicators,
            screenshot_path=str(debug_path),
        )

    async def _capture_failure_screenshot(self) -> None:
        path = self.settings.failure_screenshot_path
        try:
            await self.page.screenshot(path, full_page=True)
            logger.info(f"Failure screenshot saved to {path}")
        except Exception as e:
            logger.error(f"Failed to take screenshot: {e}")
