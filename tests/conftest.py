"""Pytest configuration and shared fixtures."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from PIL import Image

from landing_qa.baselines.registry import BaselineStore
from landing_qa.executor.context import CheckContext
from landing_qa.models.check_result import CheckResult, Evidence, FactResult, RunResult
from landing_qa.models.config import HarnessConfig, ViewportConfig


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def viewport_config() -> ViewportConfig:
    """Create a test viewport configuration."""
    return ViewportConfig(name="desktop", width=1280, height=720, label="Desktop")


@pytest.fixture
def harness_config(tmp_path: Path) -> HarnessConfig:
    """Create a harness config whose storage lives under tmp_path."""
    return HarnessConfig(
        base_url="http://127.0.0.1:8080",
        readiness_timeout_seconds=5,
        check_timeout_seconds=10,
        max_parallel_contexts=2,
        baselines_dir=str(tmp_path / "baselines"),
        runs_dir=str(tmp_path / "runs"),
        report_output_dir=str(tmp_path / "reports"),
    )


@pytest.fixture
def temp_config_file(harness_config: HarnessConfig, tmp_path: Path) -> Path:
    """Create a temporary config file."""
    config_file = tmp_path / "landing-qa.json"
    harness_config.save(config_file)
    return config_file


# ============================================================================
# Result Fixtures
# ============================================================================


def make_check_result(**kwargs) -> CheckResult:
    """Create a CheckResult with sensible defaults."""
    defaults = {
        "check_id": "structure.title",
        "name": "Document title",
        "family": "structure",
        "viewport": "desktop",
        "result": "pass",
        "duration_seconds": 0.4,
    }
    defaults.update(kwargs)
    return CheckResult(**defaults)


def make_run_result(check_results: list[CheckResult], run_id: str = "run_00000001") -> RunResult:
    """Create a RunResult whose counters agree with its check results."""
    return RunResult(
        run_id=run_id,
        base_url="http://127.0.0.1:8080",
        started_at="2025-01-01T00:00:00Z",
        completed_at="2025-01-01T00:01:00Z",
        total_checks=len(check_results),
        passed=sum(1 for r in check_results if r.result == "pass"),
        failed=sum(1 for r in check_results if r.result == "fail"),
        skipped=sum(1 for r in check_results if r.result == "skip"),
        errors=sum(1 for r in check_results if r.result == "error"),
        baselines_created=sum(len(r.baselines_created) for r in check_results),
        duration_seconds=60.0,
        check_results=check_results,
    )


@pytest.fixture
def failing_check_result() -> CheckResult:
    """Create a failed check result with one passing and one failing fact."""
    return make_check_result(
        check_id="responsive.h1-font-size",
        name="Heading scales down on mobile",
        family="responsive",
        result="fail",
        error_kind="assertion_mismatch",
        failure_reason="mobile h1 font-size px: expected == 32, got 40",
        facts=[
            FactResult(fact="desktop h1 font-size px", expected="42", actual="42",
                       passed=True, message="desktop h1 font-size px: 42"),
            FactResult(fact="mobile h1 font-size px", expected="32", actual="40",
                       passed=False, message="mobile h1 font-size px: expected == 32, got 40"),
        ],
        facts_passed=1,
        facts_failed=1,
        evidence=Evidence(console_logs=["[error] Failed to load resource"]),
    )


# ============================================================================
# Mock Fixtures
# ============================================================================


def make_locator(**attrs) -> MagicMock:
    """Create a Playwright-like locator: sync chaining, async actions."""
    loc = MagicMock()
    loc.count = AsyncMock(return_value=attrs.pop("count", 1))
    loc.get_attribute = AsyncMock(return_value=attrs.pop("attribute", None))
    loc.evaluate = AsyncMock(return_value=attrs.pop("evaluate", None))
    loc.is_visible = AsyncMock(return_value=attrs.pop("visible", True))
    loc.hover = AsyncMock()
    loc.screenshot = AsyncMock()
    loc.all = AsyncMock(return_value=attrs.pop("all", []))
    loc.first = loc
    return loc


@pytest.fixture
def mock_page() -> MagicMock:
    """Create a mock Playwright page.

    ``locator`` is synchronous in Playwright, so the page is a MagicMock with
    only the awaitable members swapped for AsyncMocks.
    """
    page = MagicMock()
    page.url = "http://127.0.0.1:8080/"
    page.goto = AsyncMock(return_value=Mock(ok=True, status=200))
    page.reload = AsyncMock()
    page.title = AsyncMock(return_value="Example")
    page.evaluate = AsyncMock()
    page.screenshot = AsyncMock()
    page.add_script_tag = AsyncMock()
    page.set_viewport_size = AsyncMock()
    page.wait_for_load_state = AsyncMock()
    page.wait_for_timeout = AsyncMock()
    page.keyboard = MagicMock()
    page.keyboard.press = AsyncMock()
    page.locator = Mock(return_value=make_locator())
    page.on = Mock()
    return page


@pytest.fixture
def baseline_store(tmp_path: Path) -> BaselineStore:
    return BaselineStore(tmp_path / "baselines", "http://127.0.0.1:8080")


@pytest.fixture
def check_context(mock_page, harness_config, baseline_store, tmp_path) -> CheckContext:
    """A CheckContext around the mock page, at the desktop viewport."""
    evidence_dir = tmp_path / "evidence"
    evidence_dir.mkdir()
    return CheckContext(
        mock_page,
        harness_config,
        harness_config.viewport("desktop"),
        evidence_dir,
        baseline_store=baseline_store,
        baseline_registry=baseline_store.load(),
        run_id="run_test0001",
    )


# ============================================================================
# Helper Functions
# ============================================================================


def create_png(path: Path, size: tuple[int, int] = (10, 10), color=(10, 10, 10)) -> Path:
    """Write a solid-colour PNG to ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path)
    return path


@pytest.fixture
def create_png_helper():
    """Fixture that provides the create_png function."""
    return create_png
