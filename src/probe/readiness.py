"""
Readiness probe for a locally served application under test.

Polls a health endpoint until it answers with a 2xx status, then hands off to
an external test command.
"""

import asyncio
from typing import Optional, Sequence

import httpx

from src.error_handling.exceptions import ReadinessError
from src.monitoring.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_INTERVAL_SECONDS = 2.0


async def check_health(client: httpx.AsyncClient, url: str) -> bool:
    """Single probe. Connection problems count as not ready."""
    try:
        response = await client.get(url)
    except httpx.TransportError as e:
        logger.debug(f"Health check failed: {e.__class__.__name__}: {url}")
        return False
    if response.is_success:
        return True
    logger.debug(f"Health check returned status {response.status_code}")
    return False


async def wait_for_ready(
    url: str,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    interval: float = DEFAULT_INTERVAL_SECONDS,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = 5.0,
) -> int:
    """
    Poll ``url`` until healthy.

    Args:
        url: Health endpoint
        max_attempts: Number of probes before giving up
        interval: Seconds between probes
        client: Optional httpx.AsyncClient (for test injection)
        timeout: Per-request timeout in seconds

    Returns:
        The attempt number that succeeded

    Raises:
        ReadinessError: if no probe succeeded
    """
    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=timeout)
    try:
        for attempt in range(1, max_attempts + 1):
            logger.info(f"Waiting for server... attempt {attempt}/{max_attempts}")
            if await check_health(client, url):
                logger.info(f"Server is ready at {url}")
                return attempt
            if attempt < max_attempts:
                await asyncio.sleep(interval)
    finally:
        if owns_client:
            await client.aclose()

    raise ReadinessError(
        f"Server at {url} not ready after {max_attempts} attempts",
        url=url,
        attempts=max_attempts,
    )


async def run_command(command: Sequence[str]) -> int:
    """Run the external test command and return its exit code."""
    logger.info(f"Running: {' '.join(command)}")
    process = await asyncio.create_subprocess_exec(*command)
    return await process.wait()


async def run_with_readiness(
    command: Sequence[str],
    url: str,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    interval: float = DEFAULT_INTERVAL_SECONDS,
    client: Optional[httpx.AsyncClient] = None,
) -> int:
    """Wait for ``url`` then run ``command``; 1 if the server never came up."""
    try:
        await wait_for_ready(url, max_attempts, interval, client=client)
    except ReadinessError as e:
        logger.error(str(e))
        return 1
    return await run_command(command)
