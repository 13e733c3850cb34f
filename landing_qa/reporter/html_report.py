"""HTML report generator — produces a self-contained HTML report with per-check detail."""

from __future__ import annotations

import base64
import html
import logging
from pathlib import Path

from landing_qa.models.check_result import CheckResult, FactResult, RunResult

from .regression_detector import Regression

logger = logging.getLogger(__name__)


def _embed_image(path: str) -> str:
    """Read a PNG and return a base64 data URI, or empty string on failure."""
    try:
        p = Path(path)
        if not p.exists() or p.stat().st_size == 0:
            return ""
        with open(p, "rb") as f:
            data = base64.b64encode(f.read()).decode()
        return f"data:image/png;base64,{data}"
    except OSError:
        return ""


def _fact_icon(passed: bool) -> str:
    if passed:
        return '<span class="icon pass-icon">&#10003;</span>'
    return '<span class="icon fail-icon">&#10007;</span>'


def _build_fact_row(fact: FactResult) -> str:
    row_class = "fact-pass" if fact.passed else "fact-fail"
    detail = ""
    if not fact.passed and fact.expected is not None:
        detail = (f' <span class="fact-expected">expected {html.escape(fact.comparison)} '
                  f'<code>{html.escape(fact.expected)}</code></span>')
    return f'''
    <div class="fact-row {row_class}">
      {_fact_icon(fact.passed)}
      <div class="fact-content">
        <div>{html.escape(fact.message or fact.fact)}{detail}</div>
      </div>
    </div>'''


def _build_gallery(title: str, paths: list[str]) -> str:
    items = ""
    for img_path in paths:
        data_uri = _embed_image(img_path)
        if not data_uri:
            continue
        label = html.escape(Path(img_path).stem)
        items += f'''
        <div class="screenshot-item">
          <img src="{data_uri}" alt="{label}" loading="lazy" onclick="this.classList.toggle('zoomed')"/>
          <div class="screenshot-label">{label}</div>
        </div>'''
    if not items:
        return ""
    return f'<div class="section"><h4>{title}</h4><div class="screenshots-grid">{items}</div></div>'


def _build_check_card(r: CheckResult) -> str:
    """Build a collapsible HTML card for a single check result."""
    border_color = {"pass": "#22c55e", "fail": "#ef4444", "skip": "#eab308", "error": "#f97316"}.get(r.result, "#94a3b8")
    baseline_badge = '<span class="badge baseline">BASELINE CREATED</span>' if r.baselines_created else ""

    card = f'''
    <div class="check-card" id="check-{html.escape(r.check_id)}">
      <div class="check-header" style="border-left: 4px solid {border_color};" onclick="this.parentElement.classList.toggle('expanded')">
        <div class="check-header-left">
          <span class="badge {r.result}">{r.result.upper()}</span>
          {baseline_badge}
          <strong>{html.escape(r.name)}</strong>
          <span class="badge family">{html.escape(r.family)}</span>
          <span class="check-meta">{html.escape(r.check_id)} &middot; {html.escape(r.viewport)} &middot; {r.duration_seconds:.1f}s &middot; {r.facts_passed}/{len(r.facts)} facts</span>
        </div>
        <span class="expand-arrow">&#9660;</span>
      </div>
      <div class="check-body">
    '''

    if r.failure_reason:
        kind = f" ({html.escape(r.error_kind)})" if r.error_kind else ""
        card += f'<div class="failure-banner"><strong>Failure{kind}:</strong> {html.escape(r.failure_reason)}</div>'

    if r.baselines_created:
        card += ('<div class="baseline-banner"><strong>Baseline created:</strong> '
                 f'{html.escape(", ".join(r.baselines_created))}. This run stored the reference '
                 'image instead of comparing against one.</div>')

    if r.facts:
        card += '<div class="section"><h4>Facts</h4>'
        card += "".join(_build_fact_row(f) for f in r.facts)
        card += '</div>'

    card += _build_gallery("Screenshots", [s for s in r.evidence.screenshots if s])
    card += _build_gallery("Diffs", r.evidence.diff_images)

    console_errors = [log for log in r.evidence.console_logs if log.lower().startswith("[error]")]
    if console_errors:
        card += '<div class="section"><h4>Console Errors</h4><pre class="console-log">'
        for err in console_errors[:20]:
            card += html.escape(err) + "\n"
        card += '</pre></div>'

    card += '</div></div>'
    return card


def generate_html_report(
    run_result: RunResult,
    regressions: list[Regression],
    output_path: Path,
) -> None:
    """Generate a self-contained HTML report with a card per check."""
    reg_section = ""
    if regressions:
        items = ""
        for r in regressions:
            reason = f" &mdash; {html.escape(r.failure_reason)}" if r.failure_reason else ""
            items += (f"<li><strong>{html.escape(r.check_id)}</strong> ({r.family}): "
                      f"{r.previous_result} &rarr; {r.current_result}{reason}</li>")
        reg_section = f'<div class="regressions"><h2>&#9888; Regressions ({len(regressions)})</h2><ul>{items}</ul></div>'

    cards = "".join(_build_check_card(r) for r in run_result.check_results)
    mode = " &middot; baselines refreshed" if run_result.update_baselines else ""

    report_html = f'''<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Landing QA Report &mdash; {html.escape(run_result.run_id)}</title>
<style>
  :root {{ --pass: #22c55e; --fail: #ef4444; --skip: #eab308; --error: #f97316; --bg: #f8fafc; --card: white; --border: #e2e8f0; --text: #1e293b; --muted: #64748b; --accent: #6366f1; }}
  * {{ margin: 0; padding: 0; box-sizing: border-box; }}
  body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background: var(--bg); color: var(--text); line-height: 1.6; padding: 1.5rem; }}
  .container {{ max-width: 1400px; margin: 0 auto; }}
  h1 {{ font-size: 1.8rem; margin-bottom: 0.3rem; }}
  .meta {{ color: var(--muted); margin-bottom: 1.5rem; font-size: 0.9rem; }}
  .summary {{ display: grid; grid-template-columns: repeat(auto-fit, minmax(130px, 1fr)); gap: 0.8rem; margin-bottom: 1.5rem; }}
  .stat {{ background: var(--card); border-radius: 8px; padding: 1rem; box-shadow: 0 1px 3px rgba(0,0,0,0.08); text-align: center; }}
  .stat .value {{ font-size: 1.8rem; font-weight: 700; }}
  .stat .label {{ font-size: 0.8rem; color: var(--muted); }}
  .stat.pass .value {{ color: var(--pass); }}
  .stat.fail .value {{ color: var(--fail); }}
  .stat.skip .value {{ color: var(--skip); }}
  .stat.error .value {{ color: var(--error); }}
  .stat.baseline .value {{ color: var(--accent); }}
  .badge {{ display: inline-block; padding: 0.15rem 0.55rem; border-radius: 9999px; font-size: 0.7rem; font-weight: 600; text-transform: uppercase; white-space: nowrap; }}
  .badge.pass {{ background: #dcfce7; color: #166534; }}
  .badge.fail {{ background: #fecaca; color: #991b1b; }}
  .badge.skip {{ background: #fef9c3; color: #854d0e; }}
  .badge.error {{ background: #fed7aa; color: #9a3412; }}
  .badge.family {{ background: #e0e7ff; color: #3730a3; }}
  .badge.baseline {{ background: #ede9fe; color: #5b21b6; border: 1px dashed #8b5cf6; }}
  .regressions {{ background: #fef2f2; border-radius: 8px; padding: 1.2rem; margin-bottom: 1.5rem; border-left: 4px solid var(--fail); }}
  .regressions h2 {{ color: var(--fail); font-size: 1rem; margin-bottom: 0.4rem; }}
  .regressions ul {{ margin-left: 1.2rem; font-size: 0.9rem; }}
  .check-card {{ background: var(--card); border-radius: 8px; margin-bottom: 0.6rem; box-shadow: 0 1px 3px rgba(0,0,0,0.08); overflow: hidden; }}
  .check-header {{ display: flex; justify-content: space-between; align-items: center; padding: 0.7rem 1rem; cursor: pointer; user-select: none; }}
  .check-header-left {{ display: flex; align-items: center; gap: 0.5rem; flex-wrap: wrap; }}
  .check-meta {{ font-size: 0.78rem; color: var(--muted); }}
  .expand-arrow {{ color: var(--muted); font-size: 0.7rem; transition: transform 0.2s; }}
  .check-card.expanded .expand-arrow {{ transform: rotate(180deg); }}
  .check-body {{ display: none; padding: 0 1rem 1rem 1rem; }}
  .check-card.expanded .check-body {{ display: block; }}
  .failure-banner {{ background: #fef2f2; border: 1px solid #fecaca; color: #991b1b; border-radius: 6px; padding: 0.6rem 0.8rem; margin-bottom: 0.8rem; font-size: 0.88rem; }}
  .baseline-banner {{ background: #f5f3ff; border: 1px solid #ddd6fe; color: #5b21b6; border-radius: 6px; padding: 0.6rem 0.8rem; margin-bottom: 0.8rem; font-size: 0.88rem; }}
  .section {{ margin-bottom: 1rem; }}
  .section h4 {{ font-size: 0.85rem; color: var(--muted); text-transform: uppercase; letter-spacing: 0.05em; margin-bottom: 0.4rem; padding-bottom: 0.25rem; border-bottom: 1px solid var(--border); }}
  .fact-row {{ display: flex; align-items: flex-start; gap: 0.5rem; padding: 0.35rem 0; border-bottom: 1px solid #f1f5f9; font-size: 0.85rem; }}
  .fact-fail {{ background: #fef8f8; }}
  .fact-content {{ flex: 1; }}
  .fact-expected {{ color: var(--muted); font-size: 0.8rem; }}
  .icon {{ width: 18px; height: 18px; display: inline-flex; align-items: center; justify-content: center; border-radius: 50%; font-size: 0.7rem; flex-shrink: 0; margin-top: 2px; }}
  .pass-icon {{ background: #dcfce7; color: #166534; }}
  .fail-icon {{ background: #fecaca; color: #991b1b; }}
  .screenshots-grid {{ display: grid; grid-template-columns: repeat(auto-fill, minmax(200px, 1fr)); gap: 0.6rem; }}
  .screenshot-item {{ text-align: center; }}
  .screenshot-item img {{ width: 100%; border-radius: 6px; border: 1px solid var(--border); cursor: pointer; }}
  .screenshot-item img.zoomed {{ position: fixed; top: 5%; left: 5%; width: 90%; height: 90%; object-fit: contain; z-index: 1000; background: rgba(0,0,0,0.85); border: none; border-radius: 8px; padding: 1rem; }}
  .screenshot-label {{ font-size: 0.75rem; color: var(--muted); margin-top: 0.2rem; }}
  .console-log {{ background: #1e293b; color: #f1f5f9; padding: 0.8rem; border-radius: 6px; font-size: 0.78rem; overflow-x: auto; max-height: 200px; overflow-y: auto; }}
</style>
</head>
<body>
<div class="container">
  <h1>Landing Page QA Report</h1>
  <p class="meta">Run: {html.escape(run_result.run_id)} &middot; Target: {html.escape(run_result.base_url)} &middot; {html.escape(run_result.started_at)} &middot; Duration: {run_result.duration_seconds}s{mode}</p>

  <div class="summary">
    <div class="stat"><div class="value">{run_result.total_checks}</div><div class="label">Total Checks</div></div>
    <div class="stat pass"><div class="value">{run_result.passed}</div><div class="label">Passed</div></div>
    <div class="stat fail"><div class="value">{run_result.failed}</div><div class="label">Failed</div></div>
    <div class="stat error"><div class="value">{run_result.errors}</div><div class="label">Errors</div></div>
    <div class="stat skip"><div class="value">{run_result.skipped}</div><div class="label">Skipped</div></div>
    <div class="stat baseline"><div class="value">{run_result.baselines_created}</div><div class="label">Baselines Created</div></div>
  </div>

  {reg_section}

  <div id="check-list">
    {cards}
  </div>
</div>
</body>
</html>'''

    with open(output_path, "w", encoding="utf-8") as f:
        f.write(report_html)
    logger.debug("Wrote HTML report to %s", output_path)
