"""
Readiness probe exports.
"""

from src.probe.readiness import check_health, run_with_readiness, wait_for_ready

__all__ = [
    "check_health",
    "run_with_readiness",
    "wait_for_ready",
]
