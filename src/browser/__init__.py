"""
Browser automation module exports.
"""

from src.browser.driver import PlaywrightDriver

__all__ = [
    "PlaywrightDriver",
]
