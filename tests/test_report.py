"""Tests for hook run reports and the history view."""

import json
from datetime import datetime, timedelta

from consistency_hook.hook import HookRun
from consistency_hook.outcome import PipelineOutcome
from consistency_hook.process import CommandInvocation
from consistency_hook.report import find_reports, format_duration, print_history, write_hook_report


def make_run(outcome, start, warning=None):
    return HookRun(
        outcome=outcome,
        invocations=[CommandInvocation("deno", ("fmt", "--check"), "", "", 1)],
        changed_paths=["foo.ts"],
        warning=warning,
        started_at=start,
        finished_at=start + timedelta(seconds=2),
    )


class TestWriteReport:

    def test_report_contents(self, tmp_path):
        run = make_run(PipelineOutcome.REPAIRED_AND_COMMITTED, datetime(2026, 1, 2, 3, 4, 5))
        
        path = write_hook_report(run, tmp_path / "reports")
        data = json.loads(path.read_text())
        
        assert path.name.startswith("consistency_20260102_030407")
        assert data["outcome"] == "repaired_and_committed"
        assert data["duration_seconds"] == 2.0
        assert data["invocations"][0]["command"] == "deno fmt --check"
        assert data["changed_paths"] == ["foo.ts"]


class TestFindReports:

    def test_missing_dir(self, tmp_path):
        assert find_reports(tmp_path / "none") == []

    def test_newest_first_and_skips_garbage(self, tmp_path):
        older = make_run(PipelineOutcome.NO_CHANGES_NEEDED, datetime(2026, 1, 1))
        newer = make_run(PipelineOutcome.REPAIR_FAILED, datetime(2026, 2, 1), warning="bad")
        write_hook_report(older, tmp_path)
        write_hook_report(newer, tmp_path)
        (tmp_path / "consistency_broken.json").write_text("{not json")
        
        reports = find_reports(tmp_path)
        
        assert [r["outcome"] for r in reports] == ["repair_failed", "no_changes_needed"]


class TestFormatDuration:

    def test_ranges(self):
        assert format_duration(0.25) == "250ms"
        assert format_duration(12.34) == "12.3s"
        assert format_duration(125) == "2m 5s"


class TestPrintHistory:

    def test_no_reports(self, tmp_path, capsys):
        print_history(tmp_path)
        assert "No hook reports found." in capsys.readouterr().out

    def test_latest_and_history(self, tmp_path, capsys):
        for day in range(1, 4):
            write_hook_report(make_run(PipelineOutcome.NO_CHANGES_NEEDED, datetime(2026, 3, day)), tmp_path)
        write_hook_report(
            make_run(PipelineOutcome.REPAIR_FAILED, datetime(2026, 3, 9), warning="Formatting failed: boom"),
            tmp_path,
        )
        
        print_history(tmp_path, limit=2)
        out = capsys.readouterr().out
        
        assert "Outcome:     repair_failed" in out
        assert "Formatting failed: boom" in out
        assert "... and 2 more" in out
