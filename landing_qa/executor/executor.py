"""Check executor — runs registered checks against the target using Playwright."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from pathlib import Path

from playwright.async_api import Browser, async_playwright

from landing_qa.baselines.registry import BaselineStore
from landing_qa.checks.registry import CheckDefinition
from landing_qa.models.check_result import CheckResult, FactResult, RunResult
from landing_qa.models.config import HarnessConfig
from landing_qa.models.visual_baseline import VisualBaselineRegistry

from .browser import create_isolated_context, launch_browser
from .context import CheckContext
from .evidence_collector import EvidenceCollector
from .page_loader import ReadinessTimeout

logger = logging.getLogger(__name__)


class Executor:
    """Executes checks against a live page, one isolated browser context per check."""

    def __init__(
        self,
        config: HarnessConfig,
        runs_dir: Path,
        baseline_store: BaselineStore,
        baseline_registry: VisualBaselineRegistry,
        update_baselines: bool = False,
    ):
        self.config = config
        self.runs_dir = runs_dir
        self.run_id = f"run_{uuid.uuid4().hex[:8]}"
        self.run_dir = runs_dir / self.run_id
        self.run_dir.mkdir(parents=True, exist_ok=True)
        self.baseline_store = baseline_store
        self.baseline_registry = baseline_registry
        self.update_baselines = update_baselines

    async def execute(self, checks: list[CheckDefinition]) -> RunResult:
        """Run every check and return the aggregated results.

        Checks run concurrently, bounded by ``max_parallel_contexts``. Each
        check gets a fresh browser context so viewport and hover state never
        leak between checks, and one failing check never blocks another.
        """
        started_at = time.strftime("%Y-%m-%dT%H:%M:%SZ")
        start_time = time.time()
        total = len(checks)
        logger.info("Starting run %s (%d checks) against %s",
                    self.run_id, total, self.config.base_url)

        async with async_playwright() as p:
            logger.debug("Launching Chromium (headless=%s)...", self.config.headless)
            browser = await launch_browser(p, headless=self.config.headless)
            semaphore = asyncio.Semaphore(self.config.max_parallel_contexts)

            async def _run_one(index: int, definition: CheckDefinition) -> CheckResult:
                async with semaphore:
                    logger.info("Running check [%d/%d]: %s", index + 1, total, definition.check_id)
                    result = await self.run_check(browser, definition)
                    logger.info("[%s] %s (%.1fs)", result.result.upper(),
                                definition.check_id, result.duration_seconds)
                    return result

            check_results = list(await asyncio.gather(
                *(_run_one(i, d) for i, d in enumerate(checks))
            ))

            await browser.close()

        duration = time.time() - start_time
        run_result = RunResult(
            run_id=self.run_id,
            base_url=self.config.base_url,
            started_at=started_at,
            completed_at=time.strftime("%Y-%m-%dT%H:%M:%SZ"),
            update_baselines=self.update_baselines,
            total_checks=len(check_results),
            passed=sum(1 for r in check_results if r.result == "pass"),
            failed=sum(1 for r in check_results if r.result == "fail"),
            skipped=sum(1 for r in check_results if r.result == "skip"),
            errors=sum(1 for r in check_results if r.result == "error"),
            baselines_created=sum(len(r.baselines_created) for r in check_results),
            duration_seconds=round(duration, 2),
            check_results=check_results,
        )
        logger.info(
            "Run complete: %d passed, %d failed, %d errors, %d baselines created (%.1fs)",
            run_result.passed, run_result.failed, run_result.errors,
            run_result.baselines_created, duration,
        )
        if run_result.skipped:
            logger.warning(
                "%d of %d checks skipped: %s", run_result.skipped, run_result.total_checks,
                ", ".join(r.check_id for r in check_results if r.result == "skip"),
            )
        for family in run_result.skipped_families:
            logger.warning("Every %s check was skipped; the run is not ok", family)
        return run_result

    async def run_check(self, browser: Browser, definition: CheckDefinition) -> CheckResult:
        """Run one check in its own browser context."""
        try:
            viewport = self.config.viewport(definition.viewport)
        except KeyError as e:
            return CheckResult(
                check_id=definition.check_id, name=definition.name,
                family=definition.family, viewport=definition.viewport,
                result="skip", failure_reason=str(e.args[0]),
            )

        start = time.time()
        context = None
        try:
            context = await create_isolated_context(
                browser, viewport,
                default_timeout_ms=self.config.readiness_timeout_seconds * 1000,
            )
            page = await context.new_page()
            evidence_dir = self.run_dir / "evidence" / definition.check_id
            collector = EvidenceCollector(evidence_dir, definition.check_id, viewport.name)
            collector.attach(page)
            ctx = CheckContext(
                page, self.config, viewport, evidence_dir,
                readiness=definition.readiness,
                baseline_store=self.baseline_store,
                baseline_registry=self.baseline_registry,
                update_baselines=self.update_baselines,
                run_id=self.run_id,
            )
            return await self._run_routine(definition, ctx, collector)
        except Exception as e:
            logger.error("Check %s could not run: %s", definition.check_id, e)
            return CheckResult(
                check_id=definition.check_id, name=definition.name,
                family=definition.family, viewport=definition.viewport,
                result="error", error_kind="crash",
                failure_reason=f"{type(e).__name__}: {e}",
                duration_seconds=round(time.time() - start, 2),
            )
        finally:
            if context is not None:
                try:
                    await context.close()
                except Exception as e:
                    logger.warning("Closing context for %s failed: %s", definition.check_id, e)

    async def _run_routine(
        self, definition: CheckDefinition, ctx: CheckContext, collector: EvidenceCollector,
    ) -> CheckResult:
        start = time.time()
        error_kind = None
        failure_reason = None
        try:
            await asyncio.wait_for(definition.routine(ctx), timeout=self.config.check_timeout_seconds)
        except ReadinessTimeout as e:
            error_kind, failure_reason = "readiness_timeout", str(e)
        except asyncio.TimeoutError:
            error_kind = "timeout"
            failure_reason = f"Check exceeded its {self.config.check_timeout_seconds:g}s budget"
        except Exception as e:
            error_kind, failure_reason = "crash", f"{type(e).__name__}: {e}"
            logger.error("Check %s crashed: %s", definition.check_id, e)

        failed_facts: list[FactResult] = [f for f in ctx.facts if not f.passed]
        if error_kind is not None:
            status = "error"
            logger.warning("Check %s errored (%s): %s", definition.check_id, error_kind, failure_reason)
        elif failed_facts:
            status = "fail"
            error_kind = "assertion_mismatch"
            failure_reason = "; ".join(f.message for f in failed_facts)
        else:
            status = "pass"

        screenshots = list(ctx.screenshots)
        if status != "pass":
            shot = await collector.capture_failure(ctx.page)
            if shot:
                screenshots.append(shot)
        collector.flush()

        return CheckResult(
            check_id=definition.check_id,
            name=definition.name,
            family=definition.family,
            viewport=definition.viewport,
            result=status,
            error_kind=error_kind,
            failure_reason=failure_reason,
            duration_seconds=round(time.time() - start, 2),
            facts=ctx.facts,
            baselines_created=ctx.baselines_created,
            evidence=collector.to_evidence(screenshots, ctx.diff_images),
            facts_passed=len(ctx.facts) - len(failed_facts),
            facts_failed=len(failed_facts),
        )
