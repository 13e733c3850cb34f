"""Tests for the evidence collector module."""

import json
from unittest.mock import AsyncMock, Mock

import pytest

from landing_qa.executor.evidence_collector import EvidenceCollector


@pytest.fixture
def collector(tmp_path):
    return EvidenceCollector(tmp_path / "evidence", "visual.footer", "mobile")


def _attached(collector):
    callbacks = {}
    page = Mock()
    page.on = Mock(side_effect=lambda event, cb: callbacks.update({event: cb}))
    collector.attach(page)
    return callbacks


class TestListeners:

    def test_registers_all_events(self, collector):
        assert set(_attached(collector)) == {"console", "pageerror", "response", "requestfailed"}

    def test_console_and_page_errors(self, collector):
        callbacks = _attached(collector)
        msg = Mock()
        msg.type = "error"
        msg.text = "Failed to load resource: net::ERR_NAME_NOT_RESOLVED"
        callbacks["console"](msg)
        callbacks["pageerror"](ValueError("boom"))

        assert collector.console_logs == [
            "[error] Failed to load resource: net::ERR_NAME_NOT_RESOLVED",
            "[pageerror] boom",
        ]

    def test_failed_requests(self, collector):
        callbacks = _attached(collector)
        ok = Mock(url="http://127.0.0.1:8080/", status=200)
        ok.request = Mock(method="GET", resource_type="document")
        missing = Mock(url="http://127.0.0.1:8080/favicon.ico", status=404)
        missing.request = Mock(method="GET", resource_type="other")
        blocked = Mock(
            url="https://fonts.googleapis.com/css2?family=Inter", method="GET",
            resource_type="stylesheet", failure="net::ERR_NAME_NOT_RESOLVED",
        )
        callbacks["response"](ok)
        callbacks["response"](missing)
        callbacks["requestfailed"](blocked)

        assert len(collector.network_log) == 3
        assert [e["url"] for e in collector.failed_requests] == [
            "http://127.0.0.1:8080/favicon.ico",
            "https://fonts.googleapis.com/css2?family=Inter",
        ]
        assert collector.failed_requests[1]["status"] is None


class TestCaptureFailure:

    @pytest.mark.asyncio
    async def test_named_by_check_and_viewport(self, collector):
        page = AsyncMock()
        path = await collector.capture_failure(page)

        assert path.endswith("visual.footer-mobile-failure.png")
        assert page.screenshot.await_args.kwargs["full_page"] is True

    @pytest.mark.asyncio
    async def test_closed_page(self, collector):
        page = AsyncMock()
        page.screenshot = AsyncMock(side_effect=RuntimeError("Target closed"))
        assert await collector.capture_failure(page) is None


class TestFlushAndEvidence:

    def test_flush_writes_logs(self, collector):
        collector.console_logs = ["[error] Failed", "[info] Loaded"]
        collector.network_log = [{"url": "http://127.0.0.1:8080/", "method": "GET", "status": 200}]
        collector.flush()

        assert (collector.evidence_dir / "console.log").read_text() == "[error] Failed\n[info] Loaded"
        data = json.loads((collector.evidence_dir / "network.json").read_text())
        assert data[0]["status"] == 200

    def test_to_evidence_copies_logs(self, collector):
        collector.console_logs = ["[log] hi"]
        evidence = collector.to_evidence(["a.png"], ["a-diff.png"])
        collector.console_logs.append("[log] later")

        assert evidence.screenshots == ["a.png"]
        assert evidence.diff_images == ["a-diff.png"]
        assert evidence.console_logs == ["[log] hi"]
        assert collector.to_evidence([]).diff_images == []
