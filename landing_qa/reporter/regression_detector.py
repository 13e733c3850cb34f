"""Regression detection — compares run results to find outcome changes."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from landing_qa.models.check_result import RunResult

logger = logging.getLogger(__name__)


@dataclass
class Regression:
    check_id: str
    family: str
    previous_result: str
    current_result: str
    failure_reason: str | None = None


def detect_regressions(previous: RunResult, current: RunResult) -> list[Regression]:
    """Compare two runs and find checks that regressed (pass -> fail/error).

    Checks are matched by check_id; checks new in ``current`` are ignored.
    """
    prev_by_id = {r.check_id: r for r in previous.check_results}

    regressions = []
    for result in current.check_results:
        prev = prev_by_id.get(result.check_id)
        if prev and prev.result == "pass" and result.result in ("fail", "error"):
            regressions.append(Regression(
                check_id=result.check_id,
                family=result.family,
                previous_result=prev.result,
                current_result=result.result,
                failure_reason=result.failure_reason,
            ))

    if regressions:
        logger.warning("Detected %d regressions", len(regressions))
    return regressions


def unstable_checks(previous: RunResult, current: RunResult) -> list[str]:
    """Check ids whose outcome differs between two runs in either direction."""
    prev_by_id = {r.check_id: r.result for r in previous.check_results}
    return [
        r.check_id for r in current.check_results
        if r.check_id in prev_by_id and prev_by_id[r.check_id] != r.result
    ]
