"""
Core interfaces for the registration test harness.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional


class PageDriver(ABC):
    """Browser page capability consumed by the scenario runner.

    Every operation may raise on timeout or when an element cannot be found;
    the harness treats any such exception as the failure of the current step.
    """

    @abstractmethod
    async def start(self) -> None:
        """Acquire the browser and open a page."""
        pass

    @abstractmethod
    async def stop(self) -> None:
        """Release the browser. Must be safe to call after a failed start."""
        pass

    @abstractmethod
    async def goto(
        self, url: str, wait_until: str = "networkidle", timeout: int = 30000
    ) -> None:
        """Open a URL and wait for the given load condition."""
        pass

    @abstractmethod
    async def wait_for_selector(self, selector: str, timeout: int = 10000) -> None:
        """Wait until a selector (or text= pattern) is visible."""
        pass

    @abstractmethod
    async def title(self) -> str:
        """Return the current page title."""
        pass

    @abstractmethod
    async def click(self, selector: str, timeout: int = 10000) -> None:
        """Click the first element matched by the selector once visible."""
        pass

    @abstractmethod
    async def fill(self, selector: str, value: str) -> None:
        """Fill an input matched by the selector."""
        pass

    @abstractmethod
    async def input_value(self, selector: str) -> str:
        """Read the current value of an input."""
        pass

    @abstractmethod
    async def wait_for_url(self, pattern: str, timeout: int = 10000) -> None:
        """Wait until the page URL matches the regex pattern."""
        pass

    @abstractmethod
    async def wait_for_load_state(
        self, state: str = "networkidle", timeout: int = 15000
    ) -> None:
        """Wait for the page to reach a load state."""
        pass

    @abstractmethod
    async def screenshot(self, path: Path, full_page: bool = True) -> None:
        """Capture a screenshot to a file."""
        pass

    @abstractmethod
    async def first_text(self, selector: str) -> Optional[str]:
        """Return text of the first element matching selector, or None if absent."""
        pass
