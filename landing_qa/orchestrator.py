"""Run orchestrator — coordinates check selection, execution, baselines, and reporting."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from pathlib import Path

from landing_qa.baselines.registry import BaselineStore
from landing_qa.checks.registry import CheckDefinition, select_checks
from landing_qa.executor.executor import Executor
from landing_qa.models.check_result import RunResult
from landing_qa.models.config import HarnessConfig
from landing_qa.models.visual_baseline import BaselineEntry
from landing_qa.reporter.reporter import Reporter

logger = logging.getLogger(__name__)


class Orchestrator:
    """Coordinates a harness run end to end."""

    def __init__(self, config: HarnessConfig):
        self.config = config
        self.runs_dir = Path(config.runs_dir)
        self.runs_dir.mkdir(parents=True, exist_ok=True)
        self.baseline_store = BaselineStore(Path(config.baselines_dir), config.base_url)

    def run(
        self,
        patterns: list[str] | tuple[str, ...] = (),
        families: list[str] | tuple[str, ...] = (),
        update_baselines: bool = False,
    ) -> dict:
        """Select, execute and report checks. Returns a summary dict."""
        return asyncio.run(self._run(patterns, families, update_baselines))

    async def _run(self, patterns, families, update_baselines: bool) -> dict:
        start = time.time()
        checks = select_checks(patterns, families)
        if not checks:
            raise ValueError("No checks match the given filters")
        logger.info("=== Running %d checks against %s ===", len(checks), self.config.base_url)

        run_result = await self._execute(checks, update_baselines)
        self._save_run_result(run_result)

        previous_run = self._load_previous_run_result(run_result.run_id)
        reporter = Reporter(self.config)
        reports = reporter.generate_reports(
            run_result,
            previous_run=previous_run,
            output_dir=Path(self.config.report_output_dir),
        )

        duration = time.time() - start
        logger.info("=== Run complete in %.1fs ===", duration)

        return {
            "run_id": run_result.run_id,
            "ok": run_result.ok,
            "duration": round(duration, 2),
            "results": {
                "total": run_result.total_checks,
                "passed": run_result.passed,
                "failed": run_result.failed,
                "skipped": run_result.skipped,
                "errors": run_result.errors,
                "baselines_created": run_result.baselines_created,
            },
            "failures": [
                {"check_id": r.check_id, "result": r.result,
                 "error_kind": r.error_kind, "reason": r.failure_reason}
                for r in run_result.check_results if r.result in ("fail", "error")
            ],
            "skipped_families": run_result.skipped_families,
            "summary": Reporter.basic_summary(run_result),
            "reports": reports,
        }

    async def _execute(self, checks: list[CheckDefinition], update_baselines: bool) -> RunResult:
        registry = self.baseline_store.load()
        executor = Executor(
            self.config, self.runs_dir,
            baseline_store=self.baseline_store,
            baseline_registry=registry,
            update_baselines=update_baselines,
        )
        result = await executor.execute(checks)
        # Saved once per run, after every check has finished
        self.baseline_store.save(registry)
        return result

    def list_checks(
        self,
        patterns: list[str] | tuple[str, ...] = (),
        families: list[str] | tuple[str, ...] = (),
    ) -> list[CheckDefinition]:
        return select_checks(patterns, families)

    def list_baselines(self) -> list[BaselineEntry]:
        registry = self.baseline_store.load()
        return sorted(registry.baselines.values(), key=lambda e: (e.name, e.viewport_name))

    def reset_baselines(self) -> int:
        """Remove every stored baseline; the next run recreates them."""
        return self.baseline_store.reset()

    def _save_run_result(self, run_result: RunResult) -> None:
        """Persist RunResult to the run directory for future regression comparison."""
        path = self.runs_dir / run_result.run_id / "run_result.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("Saving run result to %s", path)
        with open(path, "w") as f:
            json.dump(run_result.model_dump(), f, indent=2, default=str)

    def _load_previous_run_result(self, current_run_id: str) -> RunResult | None:
        """Load the most recent earlier RunResult from the runs directory."""
        result_files = sorted(
            self.runs_dir.glob("run_*/run_result.json"),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )

        for result_path in result_files:
            if result_path.parent.name == current_run_id:
                continue
            try:
                with open(result_path) as f:
                    data = json.load(f)
                return RunResult.model_validate(data)
            except Exception as e:
                logger.debug("Could not load previous run from %s: %s", result_path, e)
                continue

        return None
