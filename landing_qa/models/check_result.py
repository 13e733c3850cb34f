"""Check result data structures produced by the executor."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class Evidence(BaseModel):
    screenshots: list[str] = Field(default_factory=list)  # file paths
    console_logs: list[str] = Field(default_factory=list)
    network_log: list[dict[str, Any]] = Field(default_factory=list)
    diff_images: list[str] = Field(default_factory=list)


class FactResult(BaseModel):
    """Result of comparing one extracted fact against its expectation."""
    fact: str
    comparison: str = "equals"
    expected: Optional[str] = None
    actual: Optional[str] = None
    passed: bool = False
    message: str = ""


class CheckResult(BaseModel):
    check_id: str
    name: str
    family: str
    viewport: str = ""
    result: str  # pass, fail, skip, error
    error_kind: Optional[str] = None  # assertion_mismatch, readiness_timeout, timeout, crash
    failure_reason: Optional[str] = None
    duration_seconds: float = 0.0
    facts: list[FactResult] = Field(default_factory=list)
    baselines_created: list[str] = Field(default_factory=list)
    evidence: Evidence = Field(default_factory=Evidence)
    facts_passed: int = 0
    facts_failed: int = 0


class RunResult(BaseModel):
    run_id: str
    base_url: str
    started_at: str
    completed_at: str
    update_baselines: bool = False
    total_checks: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    errors: int = 0
    baselines_created: int = 0
    duration_seconds: float = 0.0
    check_results: list[CheckResult] = Field(default_factory=list)

    @property
    def skipped_families(self) -> list[str]:
        """Families with at least one selected check, all of which were skipped."""
        outcomes: dict[str, set[str]] = {}
        for r in self.check_results:
            outcomes.setdefault(r.family, set()).add(r.result)
        return sorted(family for family, seen in outcomes.items() if seen == {"skip"})

    @property
    def ok(self) -> bool:
        return self.failed == 0 and self.errors == 0 and not self.skipped_families
