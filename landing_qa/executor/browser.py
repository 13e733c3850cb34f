"""Browser utilities — launch Chromium and open isolated per-check contexts."""

from __future__ import annotations

from playwright.async_api import Browser, BrowserContext, Playwright

from landing_qa.models.config import ViewportConfig

# Keep rendering deterministic between runs so screenshots stay comparable.
_RENDERING_ARGS = [
    "--font-render-hinting=none",
    "--disable-lcd-text",
    "--force-color-profile=srgb",
    "--hide-scrollbars",
]


async def launch_browser(playwright: Playwright, headless: bool = True) -> Browser:
    """Launch Chromium with deterministic rendering flags."""
    return await playwright.chromium.launch(headless=headless, args=_RENDERING_ARGS)


async def create_isolated_context(
    browser: Browser,
    viewport: ViewportConfig,
    default_timeout_ms: float | None = None,
) -> BrowserContext:
    """Create a fresh browser context sized to ``viewport``.

    Every check gets its own context so viewport, hover and zoom state never
    leak between checks.
    """
    context = await browser.new_context(
        viewport=viewport.as_size(),
        device_scale_factor=1,
        locale="en-US",
        timezone_id="UTC",
    )
    if default_timeout_ms is not None:
        context.set_default_timeout(default_timeout_ms)
    return context
