"""Report generation orchestration."""

from __future__ import annotations

import logging
from pathlib import Path

from landing_qa.models.check_result import RunResult
from landing_qa.models.config import HarnessConfig

from .html_report import generate_html_report
from .json_report import generate_json_report
from .regression_detector import detect_regressions, unstable_checks

logger = logging.getLogger(__name__)


class Reporter:
    """Generates reports from run results."""

    def __init__(self, config: HarnessConfig):
        self.config = config

    def generate_reports(
        self,
        run_result: RunResult,
        previous_run: RunResult | None = None,
        output_dir: Path | None = None,
    ) -> dict[str, str]:
        """Generate all configured report formats. Returns format -> file path."""
        out_dir = output_dir or Path(self.config.report_output_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        generated = {}
        logger.debug("Report output directory: %s", out_dir)

        regressions = []
        unstable = []
        if previous_run:
            logger.debug("Comparing against previous run %s...", previous_run.run_id)
            regressions = detect_regressions(previous_run, run_result)
            unstable = unstable_checks(previous_run, run_result)
            if unstable:
                logger.info("%d check(s) changed outcome since %s", len(unstable), previous_run.run_id)

        if "html" in self.config.report_formats:
            path = out_dir / f"report_{run_result.run_id}.html"
            generate_html_report(run_result, regressions, path)
            generated["html"] = str(path)
            logger.info("HTML report: %s", path)

        if "json" in self.config.report_formats:
            path = out_dir / f"report_{run_result.run_id}.json"
            generate_json_report(run_result, regressions, path, unstable=unstable)
            generated["json"] = str(path)
            logger.info("JSON report: %s", path)

        return generated

    @staticmethod
    def basic_summary(run_result: RunResult) -> str:
        """One-paragraph plain text summary of a run."""
        parts = [
            f"Checked {run_result.base_url}: {run_result.total_checks} checks in {run_result.duration_seconds:.1f}s.",
            f"Results: {run_result.passed} passed, {run_result.failed} failed, "
            f"{run_result.errors} errors, {run_result.skipped} skipped.",
        ]
        if run_result.baselines_created:
            parts.append(f"{run_result.baselines_created} visual baseline(s) created; "
                         "those snapshots were stored, not compared.")
        failures = [r for r in run_result.check_results if r.result in ("fail", "error")]
        if failures:
            parts.append(f"Failing: {', '.join(f.check_id for f in failures[:5])}")
        if run_result.skipped_families:
            parts.append(f"Nothing checked for: {', '.join(run_result.skipped_families)}.")
        return " ".join(parts)
