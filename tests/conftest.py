"""
Shared fixtures: an in-memory page driver and isolated settings.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import pytest

from src.config.settings import Settings
from src.core.interfaces import PageDriver
from src.error_handling.exceptions import InteractionError

PARABANK_TITLE = "ParaBank | Welcome | Online Banking"


class FakePage(PageDriver):
    """Scriptable stand-in for the Playwright page.

    ``visible_text`` lists substrings; ``wait_for_selector`` succeeds for
    ``body`` and for any selector containing one of them. ``fail_on`` maps an
    operation name to the exception it raises.
    """

    def __init__(
        self,
        title: str = PARABANK_TITLE,
        visible_text: Iterable[str] = ("Welcome",),
        fail_on: Optional[Dict[str, Exception]] = None,
        error_text: Optional[str] = None,
        echo_fill: bool = True,
        screenshot_error: Optional[Exception] = None,
    ) -> None:
        self._title = title
        self.visible_text = tuple(visible_text)
        self.fail_on = dict(fail_on or {})
        self.error_text = error_text
        self.echo_fill = echo_fill
        self.screenshot_error = screenshot_error
        self.calls: List[Tuple[str, tuple]] = []
        self.values: Dict[str, str] = {}
        self.screenshots: List[Path] = []
        self.start_count = 0
        self.stop_count = 0

    def _record(self, op: str, *args) -> None:
        self.calls.append((op, args))
        if op in self.fail_on:
            raise self.fail_on[op]

    def ops(self) -> List[str]:
        return [op for op, _ in self.calls]

    async def start(self) -> None:
        self.start_count += 1
        self._record("start")

    async def stop(self) -> None:
        self.stop_count += 1
        self._record("stop")

    async def goto(self, url, wait_until="networkidle", timeout=30000) -> None:
        self._record("goto", url, wait_until, timeout)

    async def wait_for_selector(self, selector, timeout=10000) -> None:
        self._record("wait_for_selector", selector, timeout)
        if selector == "body":
            return
        if not any(text in selector for text in self.visible_text):
            raise InteractionError(f"Timed out waiting for {selector}", selector=selector)

    async def title(self) -> str:
        self._record("title")
        return self._title

    async def click(self, selector, timeout=10000) -> None:
        self._record("click", selector, timeout)

    async def fill(self, selector, value) -> None:
        self._record("fill", selector, value)
        self.values[selector] = value if self.echo_fill else ""

    async def input_value(self, selector) -> str:
        self._record("input_value", selector)
        return self.values.get(selector, "")

    async def wait_for_url(self, pattern, timeout=10000) -> None:
        self._record("wait_for_url", pattern, timeout)

    async def wait_for_load_state(self, state="networkidle", timeout=15000) -> None:
        self._record("wait_for_load_state", state, timeout)

    async def screenshot(self, path, full_page=True) -> None:
        self._record("screenshot", path, full_page)
        if self.screenshot_error:
            raise self.screenshot_error
        self.screenshots.append(Path(path))

    async def first_text(self, selector) -> Optional[str]:
        self._record("first_text", selector)
        return self.error_text


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings writing into a temporary reports directory."""
    return Settings(
        reports_dir=tmp_path / "reports",
        test_suite_file=tmp_path / "Testsuite.md",
        indicator_timeout=100,
    )


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()
