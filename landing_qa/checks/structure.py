"""HTML structure checks."""

from __future__ import annotations

from landing_qa.executor.context import CheckContext

from .registry import check

EXPECTED_TITLE = "Security Operations & Infrastructure"
EXPECTED_CHARSET = "UTF-8"


@check("structure.doctype", "Valid HTML5 doctype", "structure")
async def doctype(ctx: CheckContext) -> None:
    """Document declares the HTML5 doctype."""
    await ctx.goto()
    node = await ctx.page.evaluate(
        "() => document.doctype ? { name: document.doctype.name } : null"
    )
    if ctx.expect("doctype present", node is not None, True):
        ctx.expect("doctype name", node["name"], "html")


@check("structure.meta-tags", "Required meta tags", "structure")
async def meta_tags(ctx: CheckContext) -> None:
    """Charset is UTF-8 and the viewport meta enables device-width scaling."""
    await ctx.goto()
    charset = await ctx.attribute("meta[charset]", "charset")
    ctx.expect("meta charset", charset, EXPECTED_CHARSET)

    viewport = await ctx.attribute('meta[name="viewport"]', "content")
    ctx.expect("meta viewport", viewport, "width=device-width", op="contains")
    ctx.expect("meta viewport", viewport, "initial-scale=1.0", op="contains")


@check("structure.title", "Document title", "structure")
async def title(ctx: CheckContext) -> None:
    await ctx.goto()
    ctx.expect("title", await ctx.page.title(), EXPECTED_TITLE)


@check("structure.document-roots", "Single html/head/body", "structure")
async def document_roots(ctx: CheckContext) -> None:
    """Exactly one document root, head and body."""
    await ctx.goto()
    for tag in ("html", "head", "body"):
        ctx.expect(f"{tag} count", await ctx.count(tag), 1)


@check("structure.sections", "Page sections", "structure")
async def sections(ctx: CheckContext) -> None:
    """One container, one h1, at least one section and one footer."""
    await ctx.goto()
    ctx.expect(".container count", await ctx.count(".container"), 1)
    ctx.expect("h1 count", await ctx.count("h1"), 1)
    ctx.expect("section count", await ctx.count("section"), 0, op="greater_than")
    ctx.expect("footer count", await ctx.count("footer"), 1)


@check("structure.unique-ids", "No duplicate ids", "structure")
async def unique_ids(ctx: CheckContext) -> None:
    await ctx.goto()
    ids = await ctx.page.evaluate(
        "() => Array.from(document.querySelectorAll('[id]')).map(el => el.id)"
    )
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    ctx.expect("duplicate ids", duplicates, op="empty")


@check("structure.heading-hierarchy", "Heading hierarchy", "structure")
async def heading_hierarchy(ctx: CheckContext) -> None:
    """One h1, at least one h2, first heading is h1 and levels never skip downward."""
    await ctx.goto()
    levels = await ctx.page.evaluate(
        "() => Array.from(document.querySelectorAll('h1, h2, h3, h4, h5, h6'))"
        ".map(h => parseInt(h.tagName[1]))"
    )
    ctx.expect("h1 count", levels.count(1), 1)
    ctx.expect("h2 count", levels.count(2), 0, op="greater_than")
    if ctx.expect("heading count", len(levels), 0, op="greater_than"):
        ctx.expect("first heading level", levels[0], 1)
    skips = [
        f"h{prev} -> h{cur}"
        for prev, cur in zip(levels, levels[1:])
        if cur - prev > 1
    ]
    ctx.expect("skipped heading levels", skips, op="empty")
