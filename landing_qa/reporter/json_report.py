"""JSON report output."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path

from landing_qa.models.check_result import RunResult

from .regression_detector import Regression

OUTCOMES = ("pass", "fail", "error", "skip")


def family_totals(run_result: RunResult) -> dict[str, dict[str, int]]:
    """Outcome counts per check family, families in first-seen order."""
    totals: dict[str, dict[str, int]] = {}
    for r in run_result.check_results:
        counts = totals.setdefault(r.family, dict.fromkeys(OUTCOMES, 0))
        counts[r.result] = counts.get(r.result, 0) + 1
    return totals


def created_baselines(run_result: RunResult) -> list[dict[str, str]]:
    """Snapshots stored instead of compared during this run."""
    return [
        {"check_id": r.check_id, "baseline": key}
        for r in run_result.check_results
        for key in r.baselines_created
    ]


def generate_json_report(
    run_result: RunResult,
    regressions: list[Regression],
    output_path: Path,
    unstable: list[str] | None = None,
) -> None:
    """Write the full run model plus per-family totals, new baselines and regressions."""
    report = run_result.model_dump()
    report["ok"] = run_result.ok
    report["families"] = family_totals(run_result)
    report["skipped_families"] = run_result.skipped_families
    report["created_baselines"] = created_baselines(run_result)
    report["regressions"] = [asdict(r) for r in regressions]
    report["unstable_checks"] = unstable or []

    output_path.write_text(json.dumps(report, indent=2, default=str), encoding="utf-8")
