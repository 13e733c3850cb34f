"""Fact checker — compares extracted page facts against expected values."""

from __future__ import annotations

import json
import logging
from typing import Any

from landing_qa.models.check_result import FactResult

logger = logging.getLogger(__name__)

_OPERATOR_TEXT = {
    "equals": "==",
    "not_equals": "!=",
    "contains": "contains",
    "at_most": "<=",
    "at_least": ">=",
    "less_than": "<",
    "greater_than": ">",
    "one_of": "in",
    "truthy": "is truthy",
    "empty": "is empty",
}


def render_value(value: Any) -> str | None:
    """Render a fact value for reports: strings verbatim, everything else as JSON."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, default=str)
    except (TypeError, ValueError):
        return repr(value)


def compare_fact(fact: str, comparison: str, expected: Any, actual: Any) -> FactResult:
    """Evaluate a single fact and return the result."""
    logger.debug("Checking fact %s: %s %s %r", fact, comparison, render_value(expected), actual)
    try:
        match comparison:
            case "equals":
                passed = actual == expected
            case "not_equals":
                passed = actual != expected
            case "contains":
                passed = actual is not None and expected in actual
            case "at_most":
                passed = actual <= expected
            case "at_least":
                passed = actual >= expected
            case "less_than":
                passed = actual < expected
            case "greater_than":
                passed = actual > expected
            case "one_of":
                passed = actual in expected
            case "truthy":
                passed = bool(actual)
            case "empty":
                passed = actual is not None and len(actual) == 0
            case _:
                return FactResult(
                    fact=fact, comparison=comparison,
                    expected=render_value(expected), actual=render_value(actual),
                    passed=False, message=f"Unknown comparison: {comparison}",
                )
    except TypeError as e:
        return FactResult(
            fact=fact, comparison=comparison,
            expected=render_value(expected), actual=render_value(actual),
            passed=False, message=f"Comparison error: {e}",
        )

    return FactResult(
        fact=fact,
        comparison=comparison,
        expected=render_value(expected),
        actual=render_value(actual),
        passed=passed,
        message=_message(fact, comparison, expected, actual, passed),
    )


def _message(fact: str, comparison: str, expected: Any, actual: Any, passed: bool) -> str:
    op = _OPERATOR_TEXT.get(comparison, comparison)
    if comparison in ("truthy", "empty"):
        expectation = f"expected value {op}"
    else:
        expectation = f"expected {op} {render_value(expected)}"
    if passed:
        return f"{fact}: {render_value(actual)}"
    return f"{fact}: {expectation}, got {render_value(actual)}"
