"""Per-check execution context handed to every check routine."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

from playwright.async_api import Locator, Page

from landing_qa.baselines.image_diff import compare_images
from landing_qa.baselines.registry import BaselineStore
from landing_qa.models.check_result import FactResult
from landing_qa.models.config import HarnessConfig, ViewportConfig
from landing_qa.models.visual_baseline import VisualBaselineRegistry

from . import axe_scanner
from .fact_checker import compare_fact
from .page_loader import open_page, reload_page, wait_until_ready

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*(-?\d+)")

_HAS_HORIZONTAL_SCROLL = (
    "() => document.documentElement.scrollWidth > document.documentElement.clientWidth"
)


class CheckContext:
    """Wraps the page under test and accumulates fact results for one check.

    Check routines navigate, interact and extract through this object and
    record every comparison with :meth:`expect`. Nothing here raises on a
    mismatch; all facts of a check are evaluated and reported together.
    """

    def __init__(
        self,
        page: Page,
        config: HarnessConfig,
        viewport: ViewportConfig,
        evidence_dir: Path,
        readiness: str = "load",
        baseline_store: BaselineStore | None = None,
        baseline_registry: VisualBaselineRegistry | None = None,
        update_baselines: bool = False,
        run_id: str = "",
    ):
        self.page = page
        self.config = config
        self.viewport = viewport
        self.evidence_dir = evidence_dir
        self.readiness = readiness
        self.baseline_store = baseline_store
        self.baseline_registry = baseline_registry
        self.update_baselines = update_baselines
        self.run_id = run_id
        self.facts: list[FactResult] = []
        self.screenshots: list[str] = []
        self.diff_images: list[str] = []
        self.baselines_created: list[str] = []

    # --- navigation -------------------------------------------------------

    async def goto(self, path: str = "/", readiness: str | None = None) -> None:
        await open_page(
            self.page, self.config.page_url(path),
            readiness or self.readiness, self.config.readiness_timeout_seconds,
        )

    async def reload(self, readiness: str | None = None) -> None:
        await reload_page(self.page, readiness or self.readiness, self.config.readiness_timeout_seconds)

    async def wait_for(self, readiness: str) -> None:
        await wait_until_ready(self.page, readiness, self.config.readiness_timeout_seconds)

    async def use_viewport(self, name: str) -> ViewportConfig:
        """Resize the rendering surface to a viewport from the configured table."""
        vp = self.config.viewport(name)
        await self.page.set_viewport_size(vp.as_size())
        self.viewport = vp
        logger.debug("Viewport set to %s (%dx%d)", vp.name, vp.width, vp.height)
        return vp

    async def visit(self, viewport_name: str, readiness: str | None = None) -> ViewportConfig:
        """Resize to ``viewport_name`` then load the page fresh."""
        vp = await self.use_viewport(viewport_name)
        await self.goto(readiness=readiness)
        return vp

    # --- extraction -------------------------------------------------------

    def locator(self, selector: str) -> Locator:
        return self.page.locator(selector)

    async def count(self, selector: str) -> int:
        return await self.page.locator(selector).count()

    async def attribute(self, selector: str, name: str) -> str | None:
        """Attribute of the first match, or None when nothing matches."""
        loc = self.page.locator(selector)
        if await loc.count() == 0:
            return None
        return await loc.first.get_attribute(name)

    async def computed_style(self, selector: str, prop: str) -> str:
        """Computed CSS value (kebab-case property) of the first match of ``selector``."""
        return await self.page.locator(selector).first.evaluate(
            "(el, prop) => window.getComputedStyle(el).getPropertyValue(prop)", prop
        )

    async def computed_styles(self, selector: str, props: list[str]) -> dict[str, str]:
        return await self.page.locator(selector).first.evaluate(
            """(el, props) => {
                const styles = window.getComputedStyle(el);
                const out = {};
                for (const p of props) out[p] = styles.getPropertyValue(p);
                return out;
            }""",
            props,
        )

    async def computed_px(self, selector: str, prop: str) -> int:
        """Computed CSS length truncated to whole pixels, like ``parseInt('42px')``."""
        return px(await self.computed_style(selector, prop))

    async def has_horizontal_overflow(self) -> bool:
        return await self.page.evaluate(_HAS_HORIZONTAL_SCROLL)

    # --- comparison -------------------------------------------------------

    def expect(self, fact: str, actual: Any, expected: Any = None, op: str = "equals") -> bool:
        """Record one fact comparison. Returns whether it passed."""
        result = compare_fact(fact, op, expected, actual)
        self.facts.append(result)
        return result.passed

    async def expect_no_violations(self, tags: list[str]) -> bool:
        violations = await axe_scanner.scan(self.page, self.config.axe_script_url, tags)
        return self.expect(
            f"axe violations [{', '.join(tags)}]",
            [v.summary() for v in violations],
            op="empty",
        )

    async def match_snapshot(self, name: str, target: Locator | None = None, full_page: bool = False) -> bool:
        """Capture ``target`` (or the page) and compare it with the stored baseline.

        With no stored baseline, or when baselines are being refreshed, the
        capture becomes the new baseline and the fact passes.
        """
        if self.baseline_store is None or self.baseline_registry is None:
            raise RuntimeError("match_snapshot needs a baseline store")

        vp = self.viewport
        current_path = self.evidence_dir / f"{name}.png"
        if target is None:
            await self.page.screenshot(
                path=str(current_path), full_page=full_page,
                animations="disabled", caret="hide",
            )
        else:
            await target.screenshot(path=str(current_path), animations="disabled", caret="hide")
        self.screenshots.append(str(current_path))

        fact = f"snapshot {name} [{vp.name}]"
        key = self.baseline_store.baseline_key(name, vp.name)
        entry = None
        if not self.update_baselines:
            entry = self.baseline_store.get_baseline(self.baseline_registry, name, vp.name)

        if entry is None:
            self.baseline_store.store_baseline(
                self.baseline_registry, name, vp.name, vp.width, vp.height,
                current_path, self.run_id,
            )
            self.baselines_created.append(key)
            message = "Baseline refreshed" if self.update_baselines else "No baseline found, created from this run"
            self.facts.append(FactResult(
                fact=fact, comparison="matches_baseline",
                expected="baseline", actual="created", passed=True, message=message,
            ))
            return True

        diff = compare_images(
            self.baseline_store.get_baseline_image_path(entry),
            current_path,
            pixel_threshold=self.config.pixel_threshold,
            max_diff_pixel_ratio=self.config.max_diff_pixel_ratio,
            diff_output_path=self.evidence_dir / f"{name}-diff.png",
        )
        if diff.diff_image_path:
            self.diff_images.append(diff.diff_image_path)
        self.facts.append(FactResult(
            fact=fact,
            comparison="matches_baseline",
            expected=f"<= {self.config.max_diff_pixel_ratio:.2%} differing pixels",
            actual=diff.message,
            passed=diff.passed,
            message=f"{fact}: {diff.message}",
        ))
        return diff.passed


def px(value: str | None) -> int:
    """Parse a CSS pixel length the way ``parseInt`` does; unparseable values become 0."""
    match = _LEADING_INT.match(value or "")
    return int(match.group(1)) if match else 0
