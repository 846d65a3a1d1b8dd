"""
Top-level run of the registration scenario.

Owns the browser for the duration of the run, always writes the reports,
and turns the outcome into a process exit code.
"""

from pathlib import Path
from typing import Callable, Optional

from src.config.settings import Settings, get_settings
from src.core.interfaces import PageDriver
from src.core.types import TestResult, TestStatus
from src.error_handling.exceptions import ReportingError
from src.monitoring.logger import get_logger
from src.monitoring.reporter import ReportGenerator
from src.runner.scenario import RegistrationScenario

logger = get_logger(__name__)

PageFactory = Callable[[], PageDriver]

INIT_PHASE = "Initialize test harness"
BROWSER_PHASE = "Start browser"
SCENARIO_PHASE = "Run scenario"


def load_test_suite(path: Path) -> Optional[str]:
    """Read the test suite document, or return None when it is missing."""
    try:
        content = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.warning(f"Test suite document not found: {path}")
        return None
    logger.info(f"Test suite loaded from {path}")
    return content


def suite_title(content: Optional[str]) -> Optional[str]:
    """First markdown heading of the test suite document."""
    if not content:
        return None
    for line in content.splitlines():
        stripped = line.strip()
        if stripped.startswith("#"):
            return stripped.lstrip("#").strip() or None
    return None


def _default_page_factory(settings: Settings) -> PageFactory:
    def factory() -> PageDriver:
        from src.browser.driver import PlaywrightDriver

        return PlaywrightDriver(
            headless=settings.browser_headless,
            viewport_width=settings.browser_viewport_width,
            viewport_height=settings.browser_viewport_height,
            timeout=settings.browser_timeout,
        )

    return factory


class TestHarness:
    """Runs TC 001 end to end and reports on it."""

    __test__ = False

    def __init__(
        self,
        settings: Optional[Settings] = None,
        page_factory: Optional[PageFactory] = None,
        reporter: Optional[ReportGenerator] = None,
        username: Optional[str] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.page_factory = page_factory or _default_page_factory(self.settings)
        self.reporter = reporter or ReportGenerator(self.settings)
        self.username = username
        self.result = TestResult()
        self.page: Optional[PageDriver] = None

    def initialize(self) -> None:
        logger.info("Initializing test harness", extra=self.settings.summary())
        self.settings.create_directories()
        content = load_test_suite(self.settings.test_suite_file)
        self.result.test_suite_title = suite_title(content)

    async def run(self) -> int:
        """
        Execute the scenario and write reports.

        Returns:
            0 when the scenario passed and reports were written, 1 otherwise
        """
        exit_code = 0
        phase = INIT_PHASE
        try:
            try:
                self.initialize()
                phase = BROWSER_PHASE
                self.page = self.page_factory()
                await self.page.start()
                phase = SCENARIO_PHASE
                await RegistrationScenario(
                    self.page, self.result, self.settings, username=self.username
                ).run()
            except Exception as e:
                logger.error(f"Test run failed: {e}")
                # Step failures are already recorded by the step executor
                if phase != SCENARIO_PHASE or not self.result.errors:
                    self.result.record_error(phase, str(e) or e.__class__.__name__)
                self.result.status = TestStatus.FAILED
                exit_code = 1

            status = self.result.status
            if status == TestStatus.PENDING:
                status = TestStatus.FAILED
                exit_code = 1
            self.result.finalize(status)

            if not self.write_reports():
                exit_code = 1
        finally:
            await self.cleanup()

        logger.info(f"Test status: {self.result.status.value}")
        return exit_code

    def write_reports(self) -> bool:
        """Write both reports; failures are logged, never raised."""
        try:
            html_path, json_path = self.reporter.generate(self.result)
        except ReportingError as e:
            logger.error(f"Failed to generate report: {e}")
            return False
        except Exception as e:
            logger.exception(f"Failed to generate report: {e}")
            return False
        logger.info(f"Reports generated in {html_path.parent}")
        return True

    async def cleanup(self) -> None:
        """Close the browser once, even if it never finished starting."""
        if self.page is None:
            return
        logger.info("Cleaning up")
        page, self.page = self.page, None
        try:
            await page.stop()
        except Exception as e:
            logger.error(f"Failed to close browser: {e}")
