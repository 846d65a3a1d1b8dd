"""
Playwright browser driver implementation.
"""

import asyncio
import re
from pathlib import Path
from typing import Awaitable, Callable, Optional

from playwright.async_api import Browser, BrowserContext, Page, async_playwright
from playwright.async_api import Error as PlaywrightError

from src.config.settings import get_settings
from src.core.interfaces import PageDriver
from src.error_handling.exceptions import (
    BrowserUnavailableError,
    InteractionError,
    NavigationError,
)
from src.monitoring.logger import get_logger

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
]


class PlaywrightDriver(PageDriver):
    """Playwright-based page driver with one browser and one page."""

    def __init__(
        self,
        headless: Optional[bool] = None,
        viewport_width: Optional[int] = None,
        viewport_height: Optional[int] = None,
        timeout: Optional[int] = None,
    ) -> None:
        """
        Initialize the Playwright driver.

        Args:
            headless: Run browser in headless mode
            viewport_width: Browser viewport width
            viewport_height: Browser viewport height
            timeout: Default timeout in milliseconds
        """
        settings = get_settings()
        self.headless = headless if headless is not None else settings.browser_headless
        self.viewport_width = viewport_width or settings.browser_viewport_width
        self.viewport_height = viewport_height or settings.browser_viewport_height
        self.timeout = timeout or settings.browser_timeout

        self.logger = get_logger("browser.driver")
        self._playwright = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    @property
    def page(self) -> Page:
        if not self._page:
            raise RuntimeError("Browser not started. Call start() first.")
        return self._page

    async def start(self) -> None:
        """Start the browser and create a page."""
        self.logger.info(
            "Starting browser",
            extra={
                "headless": self.headless,
                "viewport": f"{self.viewport_width}x{self.viewport_height}",
            },
        )
        try:
            if self._playwright is None:
                self._playwright = await async_playwright().start()

            if self._browser is None:
                self._browser = await self._playwright.chromium.launch(
                    headless=self.headless,
                    args=LAUNCH_ARGS,
                )

            if self._context is None:
                self._context = await self._browser.new_context(
                    viewport={
                        "width": self.viewport_width,
                        "height": self.viewport_height,
                    },
                )
                self._context.set_default_timeout(self.timeout)

            if self._page is None:
                self._page = await self._context.new_page()
        except PlaywrightError as e:
            raise BrowserUnavailableError(
                f"Failed to launch browser: {e}", cause=e
            ) from e

        self.logger.info("Browser started successfully")

    async def stop(self) -> None:
        """Stop the browser and cleanup resources.

        Every handle is released and cleared even when an earlier close fails.
        """
        page, self._page = self._page, None
        context, self._context = self._context, None
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None

        if page:
            await self._close("page", page.close)
        if context:
            await self._close("context", context.close)
        if browser:
            await self._close("browser", browser.close)
        if playwright:
            await self._close("playwright", playwright.stop)

        self.logger.info("Browser stopped")

    async def _close(self, name: str, close: Callable[[], Awaitable[None]]) -> None:
        try:
            await close()
        except Exception as e:
            self.logger.warning(f"Failed to close {name}: {e}")

    async def goto(
        self, url: str, wait_until: str = "networkidle", timeout: int = 30000
    ) -> None:
        """Navigate to a URL."""
        self.logger.info("Navigating to URL", extra={"url": url})
        start_time = asyncio.get_running_loop().time()

        try:
            await self.page.goto(url, wait_until=wait_until, timeout=timeout)
        except PlaywrightError as e:
            raise NavigationError(
                f"Failed to load {url}: {e}", url=url, cause=e
            ) from e

        elapsed_ms = (asyncio.get_running_loop().time() - start_time) * 1000
        self.logger.debug(
            f"Loaded {url} in {elapsed_ms:.0f}ms", extra={"duration_ms": round(elapsed_ms)}
        )

    async def wait_for_selector(self, selector: str, timeout: int = 10000) -> None:
        try:
            await self.page.wait_for_selector(selector, timeout=timeout)
        except PlaywrightError as e:
            raise InteractionError(
                f"Timed out waiting for {selector}", selector=selector,
                action="wait", cause=e,
            ) from e

    async def title(self) -> str:
        return await self.page.title()

    async def click(self, selector: str, timeout: int = 10000) -> None:
        """Click the first visible match of ``selector``."""
        locator = self.page.locator(selector).first
        try:
            await locator.wait_for(state="visible", timeout=timeout)
            await locator.click()
        except PlaywrightError as e:
            raise InteractionError(
                f"Could not click {selector}: {e}", selector=selector,
                action="click", cause=e,
            ) from e
        self.logger.debug("Clicked element", extra={"selector": selector})

    async def fill(self, selector: str, value: str) -> None:
        try:
            await self.page.fill(selector, value)
        except PlaywrightError as e:
            raise InteractionError(
                f"Could not fill {selector}: {e}", selector=selector,
                action="fill", cause=e,
            ) from e

    async def input_value(self, selector: str) -> str:
        try:
            return await self.page.input_value(selector)
        except PlaywrightError as e:
            raise InteractionError(
                f"Could not read {selector}: {e}", selector=selector,
                action="read", cause=e,
            ) from e

    async def wait_for_url(self, pattern: str, timeout: int = 10000) -> None:
        try:
            await self.page.wait_for_url(re.compile(pattern), timeout=timeout)
        except PlaywrightError as e:
            raise NavigationError(
                f"URL did not match /{pattern}/: {self.page.url}",
                url=self.page.url, cause=e,
            ) from e

    async def wait_for_load_state(
        self, state: str = "networkidle", timeout: int = 15000
    ) -> None:
        try:
            await self.page.wait_for_load_state(state, timeout=timeout)
        except PlaywrightError as e:
            raise NavigationError(
                f"Page did not reach {state}: {e}", url=self.page.url, cause=e
            ) from e

    async def screenshot(self, path: Path, full_page: bool = True) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        await self.page.screenshot(path=str(path), full_page=full_page)
        self.logger.info(f"Screenshot saved to {path}")

    async def first_text(self, selector: str) -> Optional[str]:
        elements = await self.page.locator(selector).all()
        if not elements:
            return None
        return await elements[0].text_content()

    async def __aenter__(self) -> "PlaywrightDriver":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()
