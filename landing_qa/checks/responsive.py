"""Responsive layout checks across the viewport table."""

from __future__ import annotations

from landing_qa.executor.context import CheckContext, px
from landing_qa.models.config import ViewportConfig, default_viewports

from .registry import check

# Widths at or below the breakpoint get the mobile layout.
MOBILE_BREAKPOINT_PX = 640
CONTAINER_MAX_WIDTH_PX = 640
DESKTOP_PADDING = {"top": 120, "left": 32, "right": 32}
MOBILE_PADDING = {"top": 80, "left": 24, "right": 24}
DESKTOP_H1_PX = 42
MOBILE_H1_PX = 32
MIN_BODY_FONT_PX = 14
MIN_LINE_HEIGHT_RATIO = 1.5
MIN_CONTACT_HEIGHT_PX = 40
CENTERING_TOLERANCE_PX = 5

_PADDING_PROPS = ["padding-top", "padding-left", "padding-right"]


def is_mobile_width(width: int) -> bool:
    return width <= MOBILE_BREAKPOINT_PX


async def container_padding(ctx: CheckContext) -> dict[str, int]:
    styles = await ctx.computed_styles(".container", _PADDING_PROPS)
    return {prop.removeprefix("padding-"): px(value) for prop, value in styles.items()}


async def container_width(ctx: CheckContext) -> float:
    return await ctx.locator(".container").evaluate("el => el.getBoundingClientRect().width")


def _register_viewport_checks(vp: ViewportConfig) -> None:
    async def renders(ctx: CheckContext) -> None:
        """Body, container and every section are visible."""
        await ctx.goto()
        ctx.expect("body visible", await ctx.locator("body").is_visible(), True)
        ctx.expect(".container visible", await ctx.locator(".container").is_visible(), True)
        for i, section in enumerate(await ctx.locator("section").all()):
            ctx.expect(f"section[{i}] visible", await section.is_visible(), True)

    async def no_overflow(ctx: CheckContext) -> None:
        """Document is no wider than the viewport."""
        await ctx.goto()
        ctx.expect("horizontal overflow", await ctx.has_horizontal_overflow(), False)

    async def breakpoint_values(ctx: CheckContext) -> None:
        """Padding and h1 size use the literal for this side of the breakpoint."""
        await ctx.goto()
        mobile = is_mobile_width(ctx.viewport.width)
        ctx.expect("container padding", await container_padding(ctx),
                   MOBILE_PADDING if mobile else DESKTOP_PADDING)
        ctx.expect("h1 font-size px", await ctx.computed_px("h1", "font-size"),
                   MOBILE_H1_PX if mobile else DESKTOP_H1_PX)

    where = f"{vp.label} ({vp.width}x{vp.height})"
    check(f"responsive.render.{vp.name}", f"Renders on {where}",
          "responsive", viewport=vp.name)(renders)
    check(f"responsive.no-overflow.{vp.name}", f"No horizontal scroll on {where}",
          "responsive", viewport=vp.name)(no_overflow)
    check(f"responsive.breakpoint.{vp.name}", f"Breakpoint values on {where}",
          "responsive", viewport=vp.name)(breakpoint_values)


for _vp in default_viewports():
    _register_viewport_checks(_vp)


@check("responsive.container-width-desktop", "Container width on desktop", "responsive")
async def container_width_desktop(ctx: CheckContext) -> None:
    await ctx.goto()
    ctx.expect("container width", await container_width(ctx), CONTAINER_MAX_WIDTH_PX, op="at_most")


@check("responsive.container-width-mobile", "Container width on mobile", "responsive", viewport="mobile")
async def container_width_mobile(ctx: CheckContext) -> None:
    await ctx.goto()
    ctx.expect("container width", await container_width(ctx), ctx.viewport.width, op="at_most")


@check("responsive.h1-font-size", "Heading scales down on mobile", "responsive")
async def h1_font_size(ctx: CheckContext) -> None:
    """h1 is 42px on desktop and 32px on mobile."""
    await ctx.visit("desktop")
    desktop = await ctx.computed_px("h1", "font-size")
    await ctx.use_viewport("mobile")
    await ctx.reload()
    mobile = await ctx.computed_px("h1", "font-size")

    ctx.expect("mobile h1 < desktop h1", mobile, desktop, op="less_than")
    ctx.expect("mobile h1 font-size px", mobile, MOBILE_H1_PX)
    ctx.expect("desktop h1 font-size px", desktop, DESKTOP_H1_PX)


@check("responsive.info-row-direction", "Info rows stack on mobile", "responsive")
async def info_row_direction(ctx: CheckContext) -> None:
    await ctx.visit("desktop")
    desktop = await ctx.computed_style(".info-row", "flex-direction")
    await ctx.use_viewport("mobile")
    await ctx.reload()
    mobile = await ctx.computed_style(".info-row", "flex-direction")

    ctx.expect("desktop .info-row flex-direction", desktop, "row")
    ctx.expect("mobile .info-row flex-direction", mobile, "column")


@check("responsive.padding-mobile", "Container padding on mobile", "responsive", viewport="mobile")
async def padding_mobile(ctx: CheckContext) -> None:
    await ctx.goto()
    ctx.expect("container padding", await container_padding(ctx), MOBILE_PADDING)


@check("responsive.padding-desktop", "Container padding on desktop", "responsive")
async def padding_desktop(ctx: CheckContext) -> None:
    await ctx.goto()
    ctx.expect("container padding", await container_padding(ctx), DESKTOP_PADDING)


@check("responsive.no-overflow-all", "No horizontal scroll on any viewport", "responsive")
async def no_overflow_all(ctx: CheckContext) -> None:
    for vp in ctx.config.viewports:
        await ctx.visit(vp.name)
        ctx.expect(f"horizontal overflow [{vp.name}]", await ctx.has_horizontal_overflow(), False)


@check("responsive.tags-wrap", "Tags wrap on mobile", "responsive", viewport="mobile")
async def tags_wrap(ctx: CheckContext) -> None:
    await ctx.goto()
    styles = await ctx.computed_styles(".tags", ["display", "flex-wrap"])
    ctx.expect(".tags display", styles["display"], "flex")
    ctx.expect(".tags flex-wrap", styles["flex-wrap"], "wrap")


@check("responsive.readability", "Readability at all viewport sizes", "responsive")
async def readability(ctx: CheckContext) -> None:
    """Body text is at least 14px and bio line height at least 1.5."""
    for vp in ctx.config.viewports:
        await ctx.visit(vp.name)
        ctx.expect(f"body font-size px [{vp.name}]",
                   await ctx.computed_px("body", "font-size"), MIN_BODY_FONT_PX, op="at_least")
        ratio = await ctx.locator(".bio").first.evaluate(
            """el => {
                const s = window.getComputedStyle(el);
                return parseFloat(s.lineHeight) / parseFloat(s.fontSize);
            }"""
        )
        ctx.expect(f".bio line-height ratio [{vp.name}]", ratio, MIN_LINE_HEIGHT_RATIO, op="at_least")


@check("responsive.contact-button", "Contact button accessible on all viewports", "responsive")
async def contact_button(ctx: CheckContext) -> None:
    for vp in ctx.config.viewports:
        await ctx.visit(vp.name)
        button = ctx.locator(".contact-link")
        if not ctx.expect(f"contact link visible [{vp.name}]", await button.is_visible(), True):
            continue
        box = await button.bounding_box()
        ctx.expect(f"contact link width [{vp.name}]", box["width"], 0, op="greater_than")
        ctx.expect(f"contact link height [{vp.name}]", box["height"], MIN_CONTACT_HEIGHT_PX, op="at_least")


@check("responsive.section-spacing", "Section spacing on all viewports", "responsive")
async def section_spacing(ctx: CheckContext) -> None:
    for vp in ctx.config.viewports:
        await ctx.visit(vp.name)
        margins = await ctx.page.evaluate(
            """() => Array.from(document.querySelectorAll('section'))
                .map(s => parseInt(window.getComputedStyle(s).marginBottom))"""
        )
        for i, margin in enumerate(margins):
            ctx.expect(f"section[{i}] margin-bottom [{vp.name}]", margin, 0, op="greater_than")


@check("responsive.centered", "Content centred on large screens", "responsive", viewport="desktop_large")
async def centered(ctx: CheckContext) -> None:
    await ctx.goto()
    margins = await ctx.locator(".container").evaluate(
        """el => {
            const r = el.getBoundingClientRect();
            return { left: r.left, right: window.innerWidth - r.right };
        }"""
    )
    ctx.expect("container margin imbalance px", abs(margins["left"] - margins["right"]),
               CENTERING_TOLERANCE_PX, op="less_than")


@check("responsive.tag-consistency", "Consistent tag appearance", "responsive")
async def tag_consistency(ctx: CheckContext) -> None:
    """Tag font size and radius match the first viewport in the table everywhere."""
    reference = None
    for vp in ctx.config.viewports:
        await ctx.visit(vp.name)
        styles = await ctx.computed_styles(".tag", ["font-size", "border-radius"])
        if reference is None:
            reference = styles
            continue
        ctx.expect(f".tag font-size [{vp.name}]", styles["font-size"], reference["font-size"])
        ctx.expect(f".tag border-radius [{vp.name}]", styles["border-radius"], reference["border-radius"])
