"""Accessibility scanning via axe-core injected into the page."""

from __future__ import annotations

import logging
from typing import Any

from playwright.async_api import Page
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

WCAG21_AA_TAGS = ["wcag2a", "wcag2aa", "wcag21a", "wcag21aa"]

_AXE_RUN = """
async (tags) => {
    return await axe.run(document, {
        runOnly: { type: 'tag', values: tags },
        resultTypes: ['violations'],
    });
}
"""


class AxeViolation(BaseModel):
    id: str
    impact: str | None = None
    description: str = ""
    help: str = ""
    help_url: str = ""
    tags: list[str] = Field(default_factory=list)
    targets: list[str] = Field(default_factory=list)

    @classmethod
    def from_axe(cls, raw: dict[str, Any]) -> "AxeViolation":
        targets = []
        for node in raw.get("nodes", []):
            target = node.get("target") or []
            targets.append(" ".join(str(t) for t in target))
        return cls(
            id=raw.get("id", ""),
            impact=raw.get("impact"),
            description=raw.get("description", ""),
            help=raw.get("help", ""),
            help_url=raw.get("helpUrl", ""),
            tags=raw.get("tags", []),
            targets=targets,
        )

    def summary(self) -> str:
        where = f" at {', '.join(self.targets[:3])}" if self.targets else ""
        return f"{self.id} ({self.impact or 'n/a'}): {self.help}{where}"


async def ensure_axe(page: Page, script_url: str) -> None:
    """Inject axe-core into the page unless it is already present."""
    loaded = await page.evaluate("() => typeof window.axe !== 'undefined'")
    if not loaded:
        logger.debug("Injecting axe-core from %s", script_url)
        await page.add_script_tag(url=script_url)


async def scan(page: Page, script_url: str, tags: list[str]) -> list[AxeViolation]:
    """Run axe restricted to ``tags`` and return the violations found."""
    await ensure_axe(page, script_url)
    results = await page.evaluate(_AXE_RUN, tags)
    violations = [AxeViolation.from_axe(v) for v in (results or {}).get("violations", [])]
    if violations:
        logger.info("axe %s: %d violation(s)", ",".join(tags), len(violations))
    return violations
