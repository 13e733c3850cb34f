"""Per-check evidence: console output, page errors, network traffic, failure captures."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from playwright.async_api import ConsoleMessage, Page, Request, Response

from landing_qa.models.check_result import Evidence

logger = logging.getLogger(__name__)


class EvidenceCollector:
    """Records what the browser reported while a single check ran.

    Console lines are stored as ``[type] text`` so the HTML report can pick
    out ``[error]`` entries. Uncaught page exceptions are stored the same way
    under the ``pageerror`` type. The network log keeps every response plus
    requests that never got one (DNS failures, blocked CDNs), the latter with
    ``status`` set to None and the failure text attached.
    """

    def __init__(self, evidence_dir: Path, check_id: str, viewport_name: str):
        self.evidence_dir = evidence_dir
        self.check_id = check_id
        self.viewport_name = viewport_name
        self.evidence_dir.mkdir(parents=True, exist_ok=True)
        self.console_logs: list[str] = []
        self.network_log: list[dict[str, Any]] = []

    def attach(self, page: Page) -> None:
        page.on("console", self._on_console)
        page.on("pageerror", self._on_page_error)
        page.on("response", self._on_response)
        page.on("requestfailed", self._on_request_failed)

    def _on_console(self, msg: ConsoleMessage) -> None:
        self.console_logs.append(f"[{msg.type}] {msg.text}")

    def _on_page_error(self, error: Exception) -> None:
        self.console_logs.append(f"[pageerror] {error}")

    def _on_response(self, resp: Response) -> None:
        self.network_log.append({
            "url": resp.url,
            "method": resp.request.method,
            "status": resp.status,
            "resource_type": resp.request.resource_type,
        })

    def _on_request_failed(self, req: Request) -> None:
        self.network_log.append({
            "url": req.url,
            "method": req.method,
            "status": None,
            "resource_type": req.resource_type,
            "failure": req.failure,
        })

    @property
    def failed_requests(self) -> list[dict[str, Any]]:
        return [
            entry for entry in self.network_log
            if entry["status"] is None or entry["status"] >= 400
        ]

    async def capture_failure(self, page: Page) -> str | None:
        """Full-page capture of the state a failing check left behind.

        Returns None when the page can no longer be captured (closed target,
        crashed renderer); the check result stands without it.
        """
        path = self.evidence_dir / f"{self.check_id}-{self.viewport_name}-failure.png"
        try:
            await page.screenshot(path=str(path), full_page=True)
        except Exception as e:
            logger.warning("Failure capture for %s skipped: %s", self.check_id, e)
            return None
        return str(path)

    def flush(self) -> None:
        (self.evidence_dir / "console.log").write_text(
            "\n".join(self.console_logs), encoding="utf-8",
        )
        (self.evidence_dir / "network.json").write_text(
            json.dumps(self.network_log, indent=2), encoding="utf-8",
        )
        if self.failed_requests:
            logger.debug(
                "%s: %d request(s) failed during the check",
                self.check_id, len(self.failed_requests),
            )

    def to_evidence(self, screenshots: list[str], diff_images: list[str] | None = None) -> Evidence:
        return Evidence(
            screenshots=screenshots,
            console_logs=list(self.console_logs),
            network_log=list(self.network_log),
            diff_images=list(diff_images or []),
        )
