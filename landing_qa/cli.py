"""CLI entry point for the landing page harness."""

from __future__ import annotations

import contextlib
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from landing_qa.checks.registry import FAMILIES
from landing_qa.models.config import HarnessConfig
from landing_qa.orchestrator import Orchestrator
from landing_qa.server import serve_directory

console = Console()

DEFAULT_CONFIG = "landing-qa.json"


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load_config(config: str | None) -> HarnessConfig:
    """Load the config file, falling back to defaults when the default file is absent."""
    if config is None:
        if not Path(DEFAULT_CONFIG).exists():
            return HarnessConfig()
        config = DEFAULT_CONFIG
    try:
        return HarnessConfig.load(config)
    except FileNotFoundError:
        console.print(f"[red]Config file not found: {config}[/red]")
        console.print("Run 'landing-qa init' to create a default config.")
        sys.exit(1)


config_option = click.option("--config", "-c", default=None, help=f"Config file path (default: {DEFAULT_CONFIG})")
check_option = click.option("--check", "-k", "patterns", multiple=True,
                            help="Glob pattern on check ids, e.g. 'visual.*'. Repeatable.")
family_option = click.option("--family", "-f", "families", multiple=True,
                             type=click.Choice(FAMILIES), help="Restrict to a check family. Repeatable.")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Landing page verification harness"""
    setup_logging(verbose)


@cli.command()
@config_option
@check_option
@family_option
@click.option("--update-baselines", is_flag=True, help="Overwrite visual baselines with this run's captures")
@click.option("--base-url", default=None, help="Override the configured base URL")
@click.option("--serve", "serve_dir", default=None, type=click.Path(file_okay=False),
              help="Serve a local site directory and test it")
@click.option("--headed", is_flag=True, help="Show the browser window")
def run(
    config: str | None,
    patterns: tuple[str, ...],
    families: tuple[str, ...],
    update_baselines: bool,
    base_url: str | None,
    serve_dir: str | None,
    headed: bool,
) -> None:
    """Run all checks (or a filtered subset) against the landing page."""
    cfg = _load_config(config)
    if headed:
        cfg.headless = False

    with contextlib.ExitStack() as stack:
        if serve_dir:
            cfg.base_url = stack.enter_context(serve_directory(serve_dir))
        elif base_url:
            cfg.base_url = base_url

        orchestrator = Orchestrator(cfg)
        try:
            results = orchestrator.run(patterns, families, update_baselines=update_baselines)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            sys.exit(2)

    counts = results["results"]
    console.print("\n[bold green]Run Complete[/bold green]" if results["ok"]
                  else "\n[bold red]Run Failed[/bold red]")
    table = Table(title="Results Summary")
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Run ID", results["run_id"])
    table.add_row("Duration", f"{results['duration']}s")
    table.add_row("Total Checks", str(counts["total"]))
    table.add_row("Passed", f"[green]{counts['passed']}[/green]")
    table.add_row("Failed", f"[red]{counts['failed']}[/red]")
    table.add_row("Errors", f"[red]{counts['errors']}[/red]")
    table.add_row("Skipped", f"[yellow]{counts['skipped']}[/yellow]")
    table.add_row("Baselines Created", str(counts["baselines_created"]))
    console.print(table)

    if results["failures"]:
        failures = Table(title="Failures")
        failures.add_column("Check", style="bold")
        failures.add_column("Result")
        failures.add_column("Kind")
        failures.add_column("Reason", overflow="fold")
        for f in results["failures"]:
            failures.add_row(f["check_id"], f["result"], f["error_kind"] or "", f["reason"] or "")
        console.print(failures)

    for family in results.get("skipped_families", []):
        console.print(f"[yellow]Every {family} check was skipped (viewport missing from config?)[/yellow]")

    for fmt, path in results["reports"].items():
        console.print(f"  {fmt.upper()} report: [blue]{path}[/blue]")

    if not results["ok"]:
        sys.exit(1)


@cli.command("list")
@config_option
@check_option
@family_option
def list_checks(config: str | None, patterns: tuple[str, ...], families: tuple[str, ...]) -> None:
    """List registered checks."""
    cfg = _load_config(config)
    checks = Orchestrator(cfg).list_checks(patterns, families)
    table = Table(title=f"Checks ({len(checks)})")
    table.add_column("ID", style="bold")
    table.add_column("Family")
    table.add_column("Viewport")
    table.add_column("Name")
    for c in checks:
        table.add_row(c.check_id, c.family, c.viewport, c.name)
    console.print(table)


@cli.command()
@click.option("--base-url", "-u", prompt="Base URL", default="http://localhost:8080", help="Landing page URL")
@click.option("--path", "config_path", default=DEFAULT_CONFIG, help="Where to write the config")
def init(base_url: str, config_path: str) -> None:
    """Create a default configuration file."""
    path = Path(config_path)
    if path.exists():
        if not click.confirm(f"{path} already exists. Overwrite?"):
            return

    cfg = HarnessConfig(base_url=base_url)
    cfg.save(path)
    console.print(f"[green]Created {path}[/green]")
    console.print("\nYou can now customize this file and run:")
    console.print("  [blue]landing-qa run[/blue]")
    console.print("\nOr test the bundled sample page:")
    console.print("  [blue]landing-qa run --serve site[/blue]")


@cli.group()
def baselines() -> None:
    """Manage visual baselines."""
    pass


@baselines.command("list")
@config_option
def baselines_list(config: str | None) -> None:
    """List stored visual baselines."""
    cfg = _load_config(config)
    entries = Orchestrator(cfg).list_baselines()
    if not entries:
        console.print("[yellow]No baselines stored[/yellow]")
        return
    table = Table(title=f"Baselines ({len(entries)})")
    table.add_column("Snapshot", style="bold")
    table.add_column("Viewport")
    table.add_column("Size")
    table.add_column("Captured")
    table.add_column("Run")
    for e in entries:
        table.add_row(e.name, e.viewport_name, e.dimensions,
                      e.captured_at, e.run_id)
    console.print(table)


@baselines.command("reset")
@config_option
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def baselines_reset(config: str | None, yes: bool) -> None:
    """Delete all stored visual baselines."""
    cfg = _load_config(config)
    if not yes and not click.confirm(f"Delete all baselines under {cfg.baselines_dir}?"):
        return
    removed = Orchestrator(cfg).reset_baselines()
    console.print(f"[green]Removed {removed} baselines[/green]")


if __name__ == "__main__":
    cli()
