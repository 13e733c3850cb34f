"""Visual regression checks: baseline snapshots plus colour and typography literals."""

from __future__ import annotations

from landing_qa.executor.context import CheckContext

from .registry import check

TRANSITION_SETTLE_MS = 300
LOAD_SETTLE_MS = 500
ZOOM_LEVELS = [0.5, 0.75, 1.0, 1.25, 1.5]

EXPECTED_PAGE_COLORS = {
    "body background": ("body", "background-color", "rgb(10, 10, 10)"),
    "body text": ("body", "color", "rgb(216, 216, 216)"),
    "h1 text": ("h1", "color", "rgb(255, 255, 255)"),
    "subtitle text": (".subtitle", "color", "rgb(136, 136, 136)"),
    "bio text": (".bio", "color", "rgb(192, 192, 192)"),
}
EXPECTED_BUTTON_COLORS = {
    "contact background": (".contact-link", "background-color", "rgb(13, 157, 204)"),
    "contact text": (".contact-link", "color", "rgb(10, 10, 10)"),
}
EXPECTED_BORDER_COLORS = {
    "tag border": (".tag", "border-top-color", "rgb(34, 34, 34)"),
    "info-row bottom border": (".info-row", "border-bottom-color", "rgb(26, 26, 26)"),
    "footer top border": ("footer", "border-top-color", "rgb(26, 26, 26)"),
}
EXPECTED_FONT_FAMILY = "Inter"


def _page_snapshot(check_id: str, name: str, snapshot: str, viewport: str) -> None:
    async def routine(ctx: CheckContext) -> None:
        """Full-page render matches the stored baseline."""
        await ctx.goto()
        await ctx.match_snapshot(snapshot, full_page=True)

    check(check_id, name, "visual", viewport=viewport, readiness="networkidle")(routine)


def _element_snapshot(
    check_id: str,
    name: str,
    snapshot: str,
    selector: str,
    viewport: str = "desktop",
    hover: bool = False,
) -> None:
    async def routine(ctx: CheckContext) -> None:
        """Element render matches the stored baseline."""
        await ctx.goto()
        target = ctx.locator(selector).first
        if hover:
            await target.hover()
            await ctx.page.wait_for_timeout(TRANSITION_SETTLE_MS)
        await ctx.match_snapshot(snapshot, target)

    check(check_id, name, "visual", viewport=viewport, readiness="networkidle")(routine)


_page_snapshot("visual.homepage-desktop", "Desktop homepage snapshot", "homepage-desktop", "desktop")
_page_snapshot("visual.homepage-mobile", "Mobile homepage snapshot", "homepage-mobile", "mobile")
_page_snapshot("visual.homepage-tablet", "Tablet homepage snapshot", "homepage-tablet", "tablet")

_element_snapshot("visual.header", "Header snapshot", "header-section", "h1")
_element_snapshot("visual.tags", "Tags snapshot", "tags-section", ".tags")
_element_snapshot("visual.contact-button", "Contact button snapshot", "contact-button", ".contact-link")
_element_snapshot("visual.contact-button-hover", "Contact button hover snapshot",
                  "contact-button-hover", ".contact-link", hover=True)
_element_snapshot("visual.tag-hover", "Tag hover snapshot", "tag-hover", ".tag", hover=True)
_element_snapshot("visual.info-row", "Info row snapshot", "info-row", ".info-row")
_element_snapshot("visual.footer", "Footer snapshot", "footer", "footer")
_element_snapshot("visual.info-row-mobile", "Mobile info row snapshot",
                  "info-row-mobile", ".info-row", viewport="mobile")


@check("visual.page-load", "No visual glitches during load", "visual", readiness="domcontentloaded")
async def page_load(ctx: CheckContext) -> None:
    """Render right after parsing and after the network settles both match baselines."""
    await ctx.goto()
    await ctx.match_snapshot("page-load-initial", full_page=True)
    await ctx.wait_for("networkidle")
    await ctx.page.wait_for_timeout(LOAD_SETTLE_MS)
    await ctx.match_snapshot("page-load-complete", full_page=True)


async def _expect_colors(ctx: CheckContext, table: dict[str, tuple[str, str, str]]) -> None:
    for fact, (selector, prop, expected) in table.items():
        ctx.expect(fact, await ctx.computed_style(selector, prop), expected)


@check("visual.page-colors", "Page colours", "visual")
async def page_colors(ctx: CheckContext) -> None:
    await ctx.goto()
    await _expect_colors(ctx, EXPECTED_PAGE_COLORS)


@check("visual.button-colors", "Button colours", "visual")
async def button_colors(ctx: CheckContext) -> None:
    await ctx.goto()
    await _expect_colors(ctx, EXPECTED_BUTTON_COLORS)


@check("visual.borders", "Border colours", "visual")
async def borders(ctx: CheckContext) -> None:
    await ctx.goto()
    await _expect_colors(ctx, EXPECTED_BORDER_COLORS)


@check("visual.fonts", "Web font applied", "visual", readiness="networkidle")
async def fonts(ctx: CheckContext) -> None:
    await ctx.goto()
    ctx.expect("body font-family", await ctx.computed_style("body", "font-family"),
               EXPECTED_FONT_FAMILY, op="contains")


@check("visual.zoom", "Layout holds under zoom", "visual")
async def zoom(ctx: CheckContext) -> None:
    """Key elements stay visible and nothing overflows at each zoom level."""
    await ctx.goto()
    for level in ZOOM_LEVELS:
        await ctx.page.evaluate("z => { document.body.style.zoom = z; }", level)
        for selector in (".container", "h1", ".contact-link"):
            ctx.expect(f"{selector} visible [zoom {level}]",
                       await ctx.locator(selector).first.is_visible(), True)
        ctx.expect(f"horizontal overflow [zoom {level}]", await ctx.has_horizontal_overflow(), False)


@check("visual.transitions", "Smooth transitions", "visual")
async def transitions(ctx: CheckContext) -> None:
    await ctx.goto()
    tag = await ctx.computed_style(".tag", "transition")
    ctx.expect(".tag transition", tag, "all", op="contains")
    ctx.expect(".tag transition", tag, "0.2s", op="contains")

    button = await ctx.computed_style(".contact-link", "transition")
    ctx.expect(".contact-link transition", button, "background", op="contains")
    ctx.expect(".contact-link transition", button, "0.2s", op="contains")
