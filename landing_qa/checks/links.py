"""Link integrity checks."""

from __future__ import annotations

from landing_qa.executor.context import CheckContext

from .registry import check

CONTACT_SELECTOR = "a.contact-link"
CONTACT_HOST = "smp16.simplex.im"
CONTACT_TOKEN = "2ezKSyifGZbk_Se0QYcbzVSzQXOpGb3MML0dZ7RA1nA"
FONT_STYLESHEET_SELECTOR = 'link[href*="fonts.googleapis.com"]'
HOVER_SETTLE_MS = 300

_LINK_FACTS = """() => Array.from(document.querySelectorAll('a')).map(a => ({
    text: (a.textContent || '').trim(),
    href: a.getAttribute('href'),
    ariaLabel: a.getAttribute('aria-label'),
    target: a.target,
    rel: a.rel,
    external: /^https?:/i.test(a.getAttribute('href') || ''),
}))"""

_IS_UNCOVERED = """el => {
    const r = el.getBoundingClientRect();
    const hit = document.elementFromPoint(r.left + r.width / 2, r.top + r.height / 2);
    return el.contains(hit);
}"""

# Malformed percent-escapes are looked up verbatim instead of rejecting the evaluate.
UNRESOLVED_FRAGMENTS = """() => {
    const decode = id => {
        try { return decodeURIComponent(id); } catch (e) { return id; }
    };
    return Array.from(document.querySelectorAll('a[href^="#"]'))
        .map(a => a.getAttribute('href').substring(1))
        .filter(id => id && !document.getElementById(decode(id)));
}"""


@check("links.hrefs", "Links have href", "links")
async def hrefs(ctx: CheckContext) -> None:
    await ctx.goto()
    links = await ctx.page.evaluate(_LINK_FACTS)
    ctx.expect("link count", len(links), 0, op="greater_than")
    empty = [i for i, link in enumerate(links) if not (link["href"] or "").strip()]
    ctx.expect("links with empty href", empty, op="empty")


@check("links.contact-url", "Contact link URL", "links")
async def contact_url(ctx: CheckContext) -> None:
    """The SimpleX contact link points at the expected server and address."""
    await ctx.goto()
    href = await ctx.attribute(CONTACT_SELECTOR, "href")
    ctx.expect("contact link href", href, CONTACT_HOST, op="contains")
    ctx.expect("contact link href", href, CONTACT_TOKEN, op="contains")


@check("links.font-stylesheet", "Web font stylesheet reachable", "links")
async def font_stylesheet(ctx: CheckContext) -> None:
    await ctx.goto()
    href = await ctx.attribute(FONT_STYLESHEET_SELECTOR, "href")
    if not ctx.expect("font stylesheet href", href, op="truthy"):
        return
    response = await ctx.page.request.get(href)
    try:
        ctx.expect(f"GET {href} ok", response.ok, True)
    finally:
        await response.dispose()


@check("links.external-security", "External link isolation", "links")
async def external_security(ctx: CheckContext) -> None:
    """Links opening a new browsing context carry rel=noopener."""
    await ctx.goto()
    links = await ctx.page.evaluate(_LINK_FACTS)
    exposed = [
        link["href"] for link in links
        if link["external"] and link["target"] == "_blank" and "noopener" not in (link["rel"] or "")
    ]
    ctx.expect("_blank links without noopener", exposed, op="empty")


@check("links.clickable", "Links visible and clickable", "links")
async def clickable(ctx: CheckContext) -> None:
    """Every link is visible and not covered by another element."""
    await ctx.goto()
    links = await ctx.locator("a").all()
    for i, link in enumerate(links):
        label = f"link[{i}]"
        if not ctx.expect(f"{label} visible", await link.is_visible(), True):
            continue
        await link.scroll_into_view_if_needed()
        ctx.expect(f"{label} uncovered", await link.evaluate(_IS_UNCOVERED), True)


@check("links.contact-hover", "Contact link hover state", "links")
async def contact_hover(ctx: CheckContext) -> None:
    """Hovering the contact link changes its background colour."""
    await ctx.goto()
    before = await ctx.computed_style(CONTACT_SELECTOR, "background-color")
    await ctx.locator(CONTACT_SELECTOR).hover()
    await ctx.page.wait_for_timeout(HOVER_SETTLE_MS)
    after = await ctx.computed_style(CONTACT_SELECTOR, "background-color")
    ctx.expect("contact link hover background", after, before, op="not_equals")


@check("links.tag-hover", "Tag hover state", "links")
async def tag_hover(ctx: CheckContext) -> None:
    """Hovering a tag changes its text or border colour."""
    await ctx.goto()
    props = ["color", "border-top-color"]
    before = await ctx.computed_styles(".tag", props)
    await ctx.locator(".tag").first.hover()
    await ctx.page.wait_for_timeout(HOVER_SETTLE_MS)
    after = await ctx.computed_styles(".tag", props)
    ctx.expect("tag hover style", after, before, op="not_equals")


@check("links.descriptive-text", "Descriptive link text", "links")
async def descriptive_text(ctx: CheckContext) -> None:
    await ctx.goto()
    links = await ctx.page.evaluate(_LINK_FACTS)
    undescribed = [link["href"] for link in links if not (link["text"] or link["ariaLabel"])]
    ctx.expect("links without description", undescribed, op="empty")


@check("links.internal-anchors", "Internal anchors resolve", "links")
async def internal_anchors(ctx: CheckContext) -> None:
    """Every #fragment link targets an existing id."""
    await ctx.goto()
    broken = await ctx.page.evaluate(UNRESOLVED_FRAGMENTS)
    ctx.expect("unresolved fragment targets", broken, op="empty")


@check("links.touch-spacing", "Link spacing on touch devices", "links", viewport="mobile")
async def touch_spacing(ctx: CheckContext) -> None:
    """Neighbouring links within 100px of each other vertically do not overlap."""
    await ctx.goto()
    boxes = [await link.bounding_box() for link in await ctx.locator("a").all()]
    overlapping = []
    for i, (cur, nxt) in enumerate(zip(boxes, boxes[1:])):
        if cur is None or nxt is None or abs(cur["y"] - nxt["y"]) >= 100:
            continue
        dx = min(cur["x"] + cur["width"], nxt["x"] + nxt["width"]) - max(cur["x"], nxt["x"])
        dy = min(cur["y"] + cur["height"], nxt["y"] + nxt["height"]) - max(cur["y"], nxt["y"])
        if dx > 0 and dy > 0:
            overlapping.append(f"link[{i}] / link[{i + 1}]")
    ctx.expect("overlapping adjacent links", overlapping, op="empty")
