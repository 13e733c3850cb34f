"""Navigation and readiness waits."""

from __future__ import annotations

import logging

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

logger = logging.getLogger(__name__)

# load: window load event; domcontentloaded: parse complete; networkidle: network settled
READINESS_STATES = ("load", "domcontentloaded", "networkidle")


class ReadinessTimeout(Exception):
    """The page did not reach its readiness state within the budget."""

    def __init__(self, url: str, state: str, timeout_seconds: float):
        self.url = url
        self.state = state
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Page {url} did not reach '{state}' within {timeout_seconds:g}s"
        )


def _validate_state(state: str) -> None:
    if state not in READINESS_STATES:
        raise ValueError(f"Unknown readiness state: {state}")


async def open_page(page: Page, url: str, readiness: str = "load", timeout_seconds: float = 15.0) -> None:
    """Navigate to ``url`` and block until ``readiness`` is reached."""
    _validate_state(readiness)
    logger.debug("Navigating to %s (wait_until=%s)", url, readiness)
    try:
        response = await page.goto(url, wait_until=readiness, timeout=timeout_seconds * 1000)
    except PlaywrightTimeoutError as e:
        raise ReadinessTimeout(url, readiness, timeout_seconds) from e
    if response is not None and not response.ok:
        logger.warning("Navigation to %s returned HTTP %s", url, response.status)


async def reload_page(page: Page, readiness: str = "load", timeout_seconds: float = 15.0) -> None:
    """Reload the current page and block until ``readiness`` is reached."""
    _validate_state(readiness)
    try:
        await page.reload(wait_until=readiness, timeout=timeout_seconds * 1000)
    except PlaywrightTimeoutError as e:
        raise ReadinessTimeout(page.url, readiness, timeout_seconds) from e


async def wait_until_ready(page: Page, readiness: str, timeout_seconds: float = 15.0) -> None:
    """Wait for an additional load state on an already-open page."""
    _validate_state(readiness)
    try:
        await page.wait_for_load_state(readiness, timeout=timeout_seconds * 1000)
    except PlaywrightTimeoutError as e:
        raise ReadinessTimeout(page.url, readiness, timeout_seconds) from e
