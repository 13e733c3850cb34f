"""Accessibility checks: axe-core scans plus a few DOM-level rules."""

from __future__ import annotations

from landing_qa.executor.axe_scanner import WCAG21_AA_TAGS
from landing_qa.executor.context import CheckContext

from .registry import check

MIN_FONT_SIZE_PX = 12
MIN_TOUCH_TARGET_PX = 44
TOUCH_AREA_FACTOR = 0.7
EXPECTED_LANG = "en"


@check("accessibility.wcag21-aa", "WCAG 2.1 A/AA scan", "accessibility")
async def wcag21_aa(ctx: CheckContext) -> None:
    """No automatically detectable WCAG 2.1 A/AA violations."""
    await ctx.goto()
    await ctx.expect_no_violations(WCAG21_AA_TAGS)


@check("accessibility.color-contrast", "Colour contrast", "accessibility")
async def color_contrast(ctx: CheckContext) -> None:
    await ctx.goto()
    await ctx.expect_no_violations(["cat.color"])


@check("accessibility.keyboard", "Keyboard navigation", "accessibility")
async def keyboard(ctx: CheckContext) -> None:
    await ctx.goto()
    await ctx.expect_no_violations(["cat.keyboard"])


@check("accessibility.screen-reader", "Screen reader navigation", "accessibility")
async def screen_reader(ctx: CheckContext) -> None:
    """ARIA usage and name/role/value rules."""
    await ctx.goto()
    await ctx.expect_no_violations(["cat.aria", "cat.name-role-value"])


@check("accessibility.focus", "Focus indicators", "accessibility")
async def focus(ctx: CheckContext) -> None:
    """Tab moves focus onto an element."""
    await ctx.goto()
    await ctx.page.keyboard.press("Tab")
    tag = await ctx.page.evaluate(
        "() => document.activeElement ? document.activeElement.tagName : ''"
    )
    ctx.expect("focused element", tag, op="truthy")
    ctx.expect("focused element", tag, "BODY", op="not_equals")


@check("accessibility.link-names", "Accessible links", "accessibility")
async def link_names(ctx: CheckContext) -> None:
    """Every link has text or an aria-label, and an href."""
    await ctx.goto()
    links = await ctx.page.evaluate(
        """() => Array.from(document.querySelectorAll('a')).map(a => ({
            text: (a.textContent || '').trim(),
            ariaLabel: a.getAttribute('aria-label'),
            href: a.getAttribute('href'),
        }))"""
    )
    unnamed = [i for i, link in enumerate(links) if not (link["text"] or link["ariaLabel"])]
    missing_href = [i for i, link in enumerate(links) if not link["href"]]
    ctx.expect("links without accessible name", unnamed, op="empty")
    ctx.expect("links without href", missing_href, op="empty")


@check("accessibility.lang", "Language attribute", "accessibility")
async def lang(ctx: CheckContext) -> None:
    await ctx.goto()
    ctx.expect("html lang", await ctx.attribute("html", "lang"), EXPECTED_LANG)


@check("accessibility.font-sizes", "Readable font sizes", "accessibility")
async def font_sizes(ctx: CheckContext) -> None:
    """Text-bearing elements render at 12px or more."""
    await ctx.goto()
    sizes = await ctx.page.evaluate(
        """() => Array.from(document.querySelectorAll('body, p, span, a, div'))
            .filter(el => el.textContent.trim().length > 0)
            .map(el => parseFloat(window.getComputedStyle(el).fontSize))"""
    )
    too_small = [s for s in sizes if s < MIN_FONT_SIZE_PX]
    ctx.expect(f"text below {MIN_FONT_SIZE_PX}px", too_small, op="empty")


@check("accessibility.heading-order", "Heading order for screen readers", "accessibility")
async def heading_order(ctx: CheckContext) -> None:
    await ctx.goto()
    levels = await ctx.page.evaluate(
        "() => Array.from(document.querySelectorAll('h1, h2, h3, h4, h5, h6'))"
        ".map(h => parseInt(h.tagName[1]))"
    )
    if ctx.expect("heading count", len(levels), 0, op="greater_than"):
        ctx.expect("first heading level", levels[0], 1)
    for prev, cur in zip(levels, levels[1:]):
        ctx.expect(f"heading step h{prev} -> h{cur}", cur - prev, 1, op="at_most")


@check("accessibility.touch-targets", "Touch-friendly targets", "accessibility", viewport="mobile")
async def touch_targets(ctx: CheckContext) -> None:
    """Interactive elements meet the 44px touch target guideline on mobile."""
    await ctx.goto()
    boxes = await ctx.page.evaluate(
        """() => Array.from(document.querySelectorAll('a, button, .tag')).map(el => {
            const r = el.getBoundingClientRect();
            return { tag: el.tagName, cls: el.className, width: r.width, height: r.height };
        })"""
    )
    min_area = MIN_TOUCH_TARGET_PX * MIN_TOUCH_TARGET_PX * TOUCH_AREA_FACTOR
    undersized = [
        f"{b['tag'].lower()}.{b['cls']} {b['width']:.0f}x{b['height']:.0f}"
        for b in boxes
        if not (
            (b["width"] >= MIN_TOUCH_TARGET_PX or b["height"] >= MIN_TOUCH_TARGET_PX)
            and b["width"] * b["height"] >= min_area
        )
    ]
    ctx.expect("undersized touch targets", undersized, op="empty")


@check("accessibility.landmarks", "Landmarks for assistive technology", "accessibility")
async def landmarks(ctx: CheckContext) -> None:
    await ctx.goto()
    ctx.expect(
        "contentinfo landmarks",
        await ctx.count('footer, [role="contentinfo"]'),
        1, op="at_least",
    )
