"""Unit tests for testsmith.reporting.reporter — history, export and console summary."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import pytest
from rich.console import Console

from testsmith.config import TestsmithConfig
from testsmith.errors import UnsupportedFormatError
from testsmith.reporting import (
    DetailedReport,
    ErrorValue,
    ReportFormat,
    Reporter,
    TestOutcome,
    TestStatus,
)


def _make_reporter(tmp_path: Path, **overrides) -> Reporter:
    defaults = {"output_dir": tmp_path / "reports"}
    defaults.update(overrides)
    return Reporter(**defaults)


def _record_console() -> Console:
    return Console(record=True, width=100, force_terminal=False, color_system=None)


# ---------------------------------------------------------------------------
# 1. Generation and history
# ---------------------------------------------------------------------------

class TestGeneration:
    """Generated reports are appended to the history in order."""

    def test_generate_report_appends_history(self, tmp_path, mixed_outcomes):
        reporter = _make_reporter(tmp_path)
        first = reporter.generate_report(mixed_outcomes)
        second = reporter.generate_detailed_report(mixed_outcomes)
        assert reporter.history == [first, second]
        assert isinstance(second, DetailedReport)

    def test_history_is_a_copy(self, tmp_path, mixed_outcomes):
        reporter = _make_reporter(tmp_path)
        reporter.generate_report(mixed_outcomes)
        reporter.history.clear()
        assert len(reporter.history) == 1

    def test_clear_history(self, tmp_path):
        reporter = _make_reporter(tmp_path)
        reporter.generate_report([])
        reporter.clear_history()
        assert reporter.history == []

    def test_detailed_uses_configured_delimiter(self, tmp_path):
        reporter = _make_reporter(tmp_path, delimiter=".")
        report = reporter.generate_detailed_report([TestOutcome("api.get", TestStatus.PASSED)])
        assert report.category_counts == {"api": 1}


# ---------------------------------------------------------------------------
# 2. Rendering
# ---------------------------------------------------------------------------

class TestRender:
    """render() picks the formatter and the detailed variant."""

    def test_default_format_is_text(self, tmp_path, mixed_outcomes):
        reporter = _make_reporter(tmp_path)
        assert "Total Tests: 10" in reporter.render(reporter.generate_report(mixed_outcomes))

    def test_detailed_report_uses_detailed_rendering(self, tmp_path, mixed_outcomes):
        reporter = _make_reporter(tmp_path)
        text = reporter.render(reporter.generate_detailed_report(mixed_outcomes), ReportFormat.TEXT)
        assert "Categories:" in text

    def test_unsupported_format(self, tmp_path):
        reporter = _make_reporter(tmp_path)
        with pytest.raises(UnsupportedFormatError):
            reporter.render(reporter.generate_report([]), "pdf")


# ---------------------------------------------------------------------------
# 3. Export
# ---------------------------------------------------------------------------

class TestExport:
    """export() writes UTF-8 files under output_dir."""

    def test_export_json(self, tmp_path, mixed_outcomes):
        reporter = _make_reporter(tmp_path)
        report = reporter.generate_report(mixed_outcomes)
        path = reporter.export(report, "json", "run.json")
        assert path == tmp_path / "reports" / "run.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["total_tests"] == 10
        assert data["passed_tests"] == 7

    def test_export_absolute_path(self, tmp_path, mixed_outcomes):
        reporter = _make_reporter(tmp_path)
        target = tmp_path / "elsewhere" / "report.xml"
        path = reporter.export(reporter.generate_report(mixed_outcomes), ReportFormat.XML, target)
        assert path == target
        assert target.read_text(encoding="utf-8").startswith("<?xml")

    def test_export_unicode(self, tmp_path):
        reporter = _make_reporter(tmp_path)
        report = reporter.generate_report([TestOutcome("café_ünïcode", TestStatus.PASSED)])
        path = reporter.export(report, "json", "u.json")
        assert "café_ünïcode" in json.loads(path.read_text(encoding="utf-8"))["outcomes"][0]["name"]

    def test_unsupported_format_writes_nothing(self, tmp_path, mixed_outcomes):
        reporter = _make_reporter(tmp_path)
        report = reporter.generate_report(mixed_outcomes)
        with pytest.raises(UnsupportedFormatError):
            reporter.export(report, "pdf", "run.pdf")
        assert not (tmp_path / "reports" / "run.pdf").exists()

    def test_write_failure_returns_none(self, tmp_path, caplog):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        reporter = _make_reporter(tmp_path, output_dir=blocker)
        with caplog.at_level(logging.ERROR, logger="testsmith.reporting.reporter"):
            assert reporter.export(reporter.generate_report([]), "txt", "run.txt") is None
        assert "Failed to write report" in caplog.text

    def test_export_async(self, tmp_path, mixed_outcomes):
        reporter = _make_reporter(tmp_path)
        report = reporter.generate_detailed_report(mixed_outcomes)
        path = asyncio.run(reporter.export_async(report, "html", "run.html"))
        assert path is not None
        assert "<h2>Categories</h2>" in path.read_text(encoding="utf-8")

    def test_from_config(self, tmp_project_dir, mixed_outcomes):
        reporter = Reporter.from_config(TestsmithConfig.from_file(tmp_project_dir / "config.yaml"))
        path = reporter.export(reporter.generate_report(mixed_outcomes), None, "nightly.json")
        assert path == tmp_project_dir / "reports" / "nightly.json"
        assert json.loads(path.read_text(encoding="utf-8"))["total_tests"] == 10
        assert reporter.render(reporter.generate_report([]), "txt").startswith("Nightly Report\n")


# ---------------------------------------------------------------------------
# 4. Console summary
# ---------------------------------------------------------------------------

class TestPrintSummary:
    """print_summary() renders a rich panel."""

    def test_failed_run(self, tmp_path, mixed_outcomes):
        console = _record_console()
        reporter = _make_reporter(tmp_path)
        reporter.print_summary(reporter.generate_detailed_report(mixed_outcomes), console=console)
        output = console.export_text()
        assert "TESTS FAILED" in output
        assert "7/10 passed" in output
        assert "70.00%" in output
        assert "Categories" in output
        assert "checkout" in output
        assert "Most common failure: TimeoutError" in output

    def test_passing_run(self, tmp_path):
        console = _record_console()
        reporter = _make_reporter(tmp_path)
        report = reporter.generate_report([TestOutcome("a", TestStatus.PASSED, 0.2)])
        reporter.print_summary(report, console=console)
        output = console.export_text()
        assert "ALL TESTS PASSED" in output
        assert "1/1 passed" in output

    def test_markup_in_names_is_not_interpreted(self, tmp_path):
        console = _record_console()
        reporter = _make_reporter(tmp_path)
        outcome = TestOutcome("[bold]x_y", TestStatus.FAILED, error=ErrorValue("[red]Boom"))
        reporter.print_summary(reporter.generate_detailed_report([outcome]), console=console)
        output = console.export_text()
        assert "[bold]x" in output
        assert "[red]Boom" in output
