"""JSON run reports for the consistency hook, and a read-only history view."""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

import click

REPORT_PREFIX = "consistency_"


def write_hook_report(hook_run, output_dir: Path) -> Path:
    """
    Write a structured report of one hook run to disk.

    Report format: JSON from HookRun.to_dict().
    Filename: consistency_{timestamp}.json
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    finished = hook_run.finished_at or datetime.now()
    timestamp = finished.strftime("%Y%m%d_%H%M%S_%f")
    report_path = output_dir / f"{REPORT_PREFIX}{timestamp}.json"

    report_path.write_text(json.dumps(hook_run.to_dict(), indent=2))

    return report_path


def find_reports(reports_dir: Path) -> list[dict]:
    """Load all hook reports, most recent first. Unreadable files are skipped."""
    reports = []
    reports_dir = Path(reports_dir)

    if not reports_dir.exists():
        return reports

    for f in reports_dir.glob(f"{REPORT_PREFIX}*.json"):
        try:
            data = json.loads(f.read_text())
        except (json.JSONDecodeError, OSError):
            continue
        if not isinstance(data, dict):
            continue
        data["_report_file"] = str(f)
        reports.append(data)

    reports.sort(key=lambda r: r.get("start_time") or "", reverse=True)
    return reports


def format_duration(seconds: float) -> str:
    """Format duration in human-readable form."""
    if seconds < 1:
        return f"{seconds*1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.0f}s"


def print_history(reports_dir: Path, limit: Optional[int] = 5) -> None:
    """Print the latest hook run and a short history."""
    reports = find_reports(reports_dir)

    click.echo("=" * 60)
    click.echo("POST-RELEASE FORMATTING HISTORY")
    click.echo("=" * 60)
    click.echo()

    if not reports:
        click.echo("No hook reports found.")
        click.echo(f"  Searched: {reports_dir}")
        return

    latest = reports[0]
    click.echo("LATEST RUN")
    click.echo("-" * 40)
    click.echo(f"  Outcome:     {latest.get('outcome')}")
    click.echo(f"  Duration:    {format_duration(latest.get('duration_seconds') or 0.0)}")
    click.echo(f"  Time:        {(latest.get('start_time') or '?')[:19]}")
    if latest.get("changed_paths"):
        click.echo(f"  Files:       {', '.join(latest['changed_paths'][:5])}")
    if latest.get("warning"):
        click.echo(f"  Warning:     {latest['warning'][:120]}")
    click.echo()

    if len(reports) > 1:
        click.echo("HISTORY")
        click.echo("-" * 40)
        shown = reports if limit is None else reports[:limit]
        for r in shown:
            icon = "✗" if r.get("warning") else "✓"
            click.echo(f"    {icon} {(r.get('start_time') or '?')[:16]} - {r.get('outcome')}")
        if limit is not None and len(reports) > limit:
            click.echo(f"    ... and {len(reports) - limit} more")
        click.echo()
