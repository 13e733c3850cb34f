"""Tests for individual check routines against a mocked page."""

from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

from conftest import make_locator
from landing_qa.checks import accessibility, links, responsive, structure, visual
from landing_qa.checks.registry import select_checks


def _routine(check_id):
    (definition,) = select_checks([check_id])
    return definition.routine


def _failed(ctx):
    return [f for f in ctx.facts if not f.passed]


class TestStructureChecks:

    @pytest.mark.asyncio
    async def test_title_matches(self, check_context, mock_page):
        mock_page.title.return_value = "Security Operations & Infrastructure"
        await structure.title(check_context)
        assert not _failed(check_context)

    @pytest.mark.asyncio
    async def test_title_mismatch(self, check_context, mock_page):
        mock_page.title.return_value = "Home"
        await structure.title(check_context)
        (fact,) = _failed(check_context)
        assert fact.message == "title: expected == Security Operations & Infrastructure, got Home"

    @pytest.mark.asyncio
    async def test_missing_doctype(self, check_context, mock_page):
        mock_page.evaluate.return_value = None
        await structure.doctype(check_context)
        assert [f.fact for f in _failed(check_context)] == ["doctype present"]

    @pytest.mark.asyncio
    async def test_meta_tags(self, check_context, mock_page):
        charset = make_locator(attribute="UTF-8")
        viewport = make_locator(attribute="width=device-width, initial-scale=1.0")
        mock_page.locator.side_effect = lambda sel: charset if "charset" in sel else viewport
        await structure.meta_tags(check_context)
        assert len(check_context.facts) == 3
        assert not _failed(check_context)

    @pytest.mark.asyncio
    async def test_missing_viewport_meta_fails_without_crashing(self, check_context, mock_page):
        charset = make_locator(attribute="UTF-8")
        missing = make_locator(count=0)
        mock_page.locator.side_effect = lambda sel: charset if "charset" in sel else missing
        await structure.meta_tags(check_context)
        assert [f.fact for f in _failed(check_context)] == ["meta viewport", "meta viewport"]

    @pytest.mark.asyncio
    async def test_duplicate_ids(self, check_context, mock_page):
        mock_page.evaluate.return_value = ["about", "contact", "about"]
        await structure.unique_ids(check_context)
        (fact,) = _failed(check_context)
        assert fact.actual == '["about"]'

    @pytest.mark.asyncio
    async def test_heading_hierarchy_ok(self, check_context, mock_page):
        mock_page.evaluate.return_value = [1, 2, 2, 3, 2]
        await structure.heading_hierarchy(check_context)
        assert not _failed(check_context)

    @pytest.mark.asyncio
    async def test_heading_hierarchy_skip(self, check_context, mock_page):
        mock_page.evaluate.return_value = [1, 3]
        await structure.heading_hierarchy(check_context)
        facts = {f.fact for f in _failed(check_context)}
        assert facts == {"h2 count", "skipped heading levels"}


class TestAccessibilityChecks:

    @pytest.mark.asyncio
    async def test_lang(self, check_context, mock_page):
        mock_page.locator.return_value = make_locator(attribute="de")
        await accessibility.lang(check_context)
        (fact,) = _failed(check_context)
        assert fact.message == "html lang: expected == en, got de"

    @pytest.mark.asyncio
    async def test_focus_leaves_body(self, check_context, mock_page):
        mock_page.evaluate.return_value = "A"
        await accessibility.focus(check_context)
        mock_page.keyboard.press.assert_awaited_once_with("Tab")
        assert not _failed(check_context)

    @pytest.mark.asyncio
    async def test_font_sizes(self, check_context, mock_page):
        mock_page.evaluate.return_value = [16, 13, 11.5]
        await accessibility.font_sizes(check_context)
        (fact,) = _failed(check_context)
        assert fact.actual == "[11.5]"

    @pytest.mark.asyncio
    async def test_touch_targets(self, check_context, mock_page):
        mock_page.evaluate.return_value = [
            {"tag": "A", "cls": "contact-link", "width": 220, "height": 48},
            {"tag": "SPAN", "cls": "tag", "width": 72, "height": 44},
            {"tag": "A", "cls": "tiny", "width": 30, "height": 20},
            {"tag": "A", "cls": "thin", "width": 100, "height": 10},
        ]
        await accessibility.touch_targets(check_context)
        (fact,) = _failed(check_context)
        assert "a.tiny 30x20" in fact.actual
        assert "a.thin 100x10" in fact.actual

    @pytest.mark.asyncio
    async def test_heading_order(self, check_context, mock_page):
        mock_page.evaluate.return_value = [2, 1]
        await accessibility.heading_order(check_context)
        assert [f.fact for f in _failed(check_context)] == ["first heading level"]


class TestLinkChecks:

    @pytest.mark.asyncio
    async def test_contact_url(self, check_context, mock_page):
        mock_page.locator.return_value = make_locator(
            attribute=f"https://{links.CONTACT_HOST}/a#{links.CONTACT_TOKEN}",
        )
        await links.contact_url(check_context)
        assert len(check_context.facts) == 2
        assert not _failed(check_context)

    @pytest.mark.asyncio
    async def test_contact_url_missing_link(self, check_context, mock_page):
        mock_page.locator.return_value = make_locator(count=0)
        await links.contact_url(check_context)
        assert len(_failed(check_context)) == 2

    @pytest.mark.asyncio
    async def test_external_security(self, check_context, mock_page):
        mock_page.evaluate.return_value = [
            {"href": "https://a.test", "external": True, "target": "_blank", "rel": "noopener noreferrer"},
            {"href": "https://b.test", "external": True, "target": "_blank", "rel": ""},
            {"href": "#about", "external": False, "target": "", "rel": ""},
        ]
        await links.external_security(check_context)
        (fact,) = _failed(check_context)
        assert fact.actual == '["https://b.test"]'

    @pytest.mark.asyncio
    async def test_font_stylesheet_reachable(self, check_context, mock_page):
        mock_page.locator.return_value = make_locator(attribute="https://fonts.googleapis.com/css2?family=Inter")
        response = Mock(ok=True)
        response.dispose = AsyncMock()
        mock_page.request.get = AsyncMock(return_value=response)

        await links.font_stylesheet(check_context)

        mock_page.request.get.assert_awaited_once_with("https://fonts.googleapis.com/css2?family=Inter")
        response.dispose.assert_awaited_once()
        assert not _failed(check_context)

    @pytest.mark.asyncio
    async def test_contact_hover_needs_a_change(self, check_context, mock_page):
        mock_page.locator.return_value = make_locator(evaluate="rgb(13, 157, 204)")
        await links.contact_hover(check_context)
        (fact,) = _failed(check_context)
        assert fact.comparison == "not_equals"

    @pytest.mark.asyncio
    async def test_internal_anchors_reports_unresolved(self, check_context, mock_page):
        mock_page.evaluate = AsyncMock(return_value=["%E0%A4%A"])
        await links.internal_anchors(check_context)

        (fact,) = _failed(check_context)
        assert fact.fact == "unresolved fragment targets"
        assert "%E0%A4%A" in fact.actual
        script = mock_page.evaluate.await_args.args[0]
        assert script is links.UNRESOLVED_FRAGMENTS
        assert "catch" in script

    @pytest.mark.asyncio
    async def test_touch_spacing_detects_overlap(self, check_context, mock_page):
        boxes = [
            {"x": 0, "y": 0, "width": 100, "height": 44},
            {"x": 50, "y": 10, "width": 100, "height": 44},
            {"x": 0, "y": 400, "width": 100, "height": 44},
        ]
        link_locs = [make_locator() for _ in boxes]
        for loc, box in zip(link_locs, boxes):
            loc.bounding_box = AsyncMock(return_value=box)
        mock_page.locator.return_value = make_locator(all=link_locs)

        await links.touch_spacing(check_context)
        (fact,) = _failed(check_context)
        assert fact.actual == '["link[0] / link[1]"]'


class TestResponsiveChecks:

    def test_breakpoint(self):
        assert responsive.is_mobile_width(375)
        assert responsive.is_mobile_width(640)
        assert not responsive.is_mobile_width(768)

    @pytest.mark.asyncio
    async def test_mobile_breakpoint_values(self, check_context, mock_page):
        await check_context.use_viewport("mobile")
        mock_page.locator.return_value = make_locator()
        mock_page.locator.return_value.evaluate.side_effect = [
            {"padding-top": "80px", "padding-left": "24px", "padding-right": "24px"},
            "32px",
        ]
        await _routine("responsive.breakpoint.mobile")(check_context)
        assert not _failed(check_context)

    @pytest.mark.asyncio
    async def test_desktop_values_at_mobile_width_fail(self, check_context, mock_page):
        await check_context.use_viewport("mobile")
        mock_page.locator.return_value = make_locator()
        mock_page.locator.return_value.evaluate.side_effect = [
            {"padding-top": "120px", "padding-left": "32px", "padding-right": "32px"},
            "42px",
        ]
        await _routine("responsive.breakpoint.mobile")(check_context)
        messages = [f.message for f in _failed(check_context)]
        assert "h1 font-size px: expected == 32, got 42" in messages
        assert len(messages) == 2

    @pytest.mark.asyncio
    async def test_no_overflow(self, check_context, mock_page):
        mock_page.evaluate.return_value = True
        await _routine("responsive.no-overflow.desktop_large")(check_context)
        (fact,) = _failed(check_context)
        assert fact.fact == "horizontal overflow"

    @pytest.mark.asyncio
    async def test_h1_font_size_across_viewports(self, check_context, mock_page):
        mock_page.locator.return_value = make_locator()
        mock_page.locator.return_value.evaluate.side_effect = ["42px", "32px"]
        await responsive.h1_font_size(check_context)
        assert not _failed(check_context)
        assert mock_page.set_viewport_size.await_count == 2
        mock_page.reload.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_info_row_direction(self, check_context, mock_page):
        mock_page.locator.return_value = make_locator()
        mock_page.locator.return_value.evaluate.side_effect = ["row", "row"]
        await responsive.info_row_direction(check_context)
        (fact,) = _failed(check_context)
        assert fact.fact == "mobile .info-row flex-direction"

    @pytest.mark.asyncio
    async def test_no_overflow_all_visits_every_viewport(self, check_context, mock_page):
        mock_page.evaluate.return_value = False
        await responsive.no_overflow_all(check_context)
        assert mock_page.goto.await_count == 6
        assert len(check_context.facts) == 6

    @pytest.mark.asyncio
    async def test_centered(self, check_context, mock_page):
        mock_page.locator.return_value = make_locator(evaluate={"left": 640, "right": 640})
        await responsive.centered(check_context)
        assert not _failed(check_context)


class TestVisualChecks:

    @pytest.mark.asyncio
    async def test_page_colors(self, check_context, mock_page):
        expected = {sel: value for sel, _, value in visual.EXPECTED_PAGE_COLORS.values()}

        def locator(sel):
            return make_locator(evaluate=expected[sel])

        mock_page.locator.side_effect = locator
        await visual.page_colors(check_context)
        assert len(check_context.facts) == 5
        assert not _failed(check_context)

    @pytest.mark.asyncio
    async def test_transitions(self, check_context, mock_page):
        mock_page.locator.return_value = make_locator()
        mock_page.locator.return_value.evaluate.side_effect = [
            "all 0.2s ease 0s",
            "background 0.2s ease 0s",
        ]
        await visual.transitions(check_context)
        assert not _failed(check_context)

    @pytest.mark.asyncio
    async def test_page_load_captures_two_snapshots(self, check_context, mock_page, create_png_helper):
        async def write(path, **kwargs):
            create_png_helper(Path(path))

        mock_page.screenshot.side_effect = write
        await _routine("visual.page-load")(check_context)

        assert check_context.baselines_created == [
            "page-load-initial__desktop", "page-load-complete__desktop",
        ]
        mock_page.wait_for_load_state.assert_awaited_once()
