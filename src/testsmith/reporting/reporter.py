"""Reporter — aggregation, rendering and export behind one object.

Usage::

    reporter = Reporter.from_config(find_config())
    report = reporter.generate_detailed_report(outcomes)
    reporter.export(report, "html", "nightly.html")
    reporter.print_summary(report)
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Iterable

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from testsmith.config import TestsmithConfig
from testsmith.models import DEFAULT_CATEGORY_DELIMITER, DEFAULT_OUTPUT_DIR, DEFAULT_PROJECT_DIR
from testsmith.reporting.aggregator import aggregate, aggregate_detailed
from testsmith.reporting.formatters import FormatterRegistry, ReportFormat
from testsmith.reporting.outcomes import AggregateReport, DetailedReport, TestOutcome

logger = logging.getLogger("testsmith.reporting.reporter")

Report = AggregateReport | DetailedReport


class Reporter:
    """Generates reports, keeps their history and writes them to disk."""

    def __init__(
        self,
        formatters: FormatterRegistry | None = None,
        output_dir: Path | None = None,
        delimiter: str = DEFAULT_CATEGORY_DELIMITER,
        default_format: ReportFormat | str = ReportFormat.TEXT,
    ) -> None:
        self.formatters = formatters if formatters is not None else FormatterRegistry.with_defaults()
        self.output_dir = output_dir if output_dir is not None else Path(DEFAULT_PROJECT_DIR) / DEFAULT_OUTPUT_DIR
        self.delimiter = delimiter
        self.default_format = default_format
        self._history: list[Report] = []

    @classmethod
    def from_config(cls, config: TestsmithConfig) -> Reporter:
        return cls(
            formatters=FormatterRegistry.with_defaults(config.report_title),
            output_dir=config.output_dir,
            delimiter=config.category_delimiter,
            default_format=config.default_format,
        )

    # -----------------------------------------------------------------------
    # Generation
    # -----------------------------------------------------------------------

    @property
    def history(self) -> list[Report]:
        return list(self._history)

    def clear_history(self) -> None:
        self._history.clear()

    def generate_report(self, outcomes: Iterable[TestOutcome]) -> AggregateReport:
        report = aggregate(outcomes)
        self._history.append(report)
        return report

    def generate_detailed_report(self, outcomes: Iterable[TestOutcome]) -> DetailedReport:
        report = aggregate_detailed(outcomes, delimiter=self.delimiter)
        self._history.append(report)
        return report

    # -----------------------------------------------------------------------
    # Rendering and export
    # -----------------------------------------------------------------------

    def render(self, report: Report, fmt: ReportFormat | str | None = None) -> str:
        """Render ``report``; detailed reports get the detailed rendering.

        Raises:
            UnsupportedFormatError: No formatter is registered for ``fmt``.
        """
        formatter = self.formatters.get(fmt or self.default_format)
        if isinstance(report, DetailedReport):
            return formatter.format_detailed(report)
        return formatter.format(report)

    def _target(self, path: Path | str) -> Path:
        target = Path(path)
        if not target.is_absolute():
            target = self.output_dir / target
        return target

    def export(self, report: Report, fmt: ReportFormat | str | None, path: Path | str) -> Path | None:
        """Render ``report`` and write it to ``path`` as UTF-8.

        Relative paths are resolved under ``output_dir``. An unsupported
        format raises before anything is written; a failed write is logged
        and returns None.

        Raises:
            UnsupportedFormatError: No formatter is registered for ``fmt``.
        """
        content = self.render(report, fmt)
        target = self._target(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to write report to %s: %s", target, exc)
            return None
        logger.info("Report written: %s (%d bytes)", target, len(content.encode("utf-8")))
        return target

    async def export_async(self, report: Report, fmt: ReportFormat | str | None, path: Path | str) -> Path | None:
        """``export`` with the file write moved to a worker thread."""
        return await asyncio.to_thread(self.export, report, fmt, path)

    # -----------------------------------------------------------------------
    # Console
    # -----------------------------------------------------------------------

    def print_summary(self, report: Report, console: Console | None = None) -> None:
        """Print a summary panel (and category table for detailed reports)."""
        console = console or Console()
        summary = report.summary if isinstance(report, DetailedReport) else report

        if summary.failed_tests == 0:
            border = "green"
            verdict = "[bold green]ALL TESTS PASSED[/bold green]"
        else:
            border = "red"
            verdict = "[bold red]TESTS FAILED[/bold red]"

        lines = [
            verdict,
            "",
            f"  Tests:     {summary.passed_tests}/{summary.total_tests} passed",
            f"  Failed:    {summary.failed_tests}",
            f"  Skipped:   {summary.skipped_tests}",
            f"  Rate:      {summary.success_rate * 100:.2f}%",
            f"  Duration:  {summary.total_duration:.2f}s",
        ]
        console.print(Panel("\n".join(lines), border_style=border))

        if isinstance(report, DetailedReport) and report.category_counts:
            table = Table(title="Categories", border_style="cyan")
            table.add_column("Category", style="bold")
            table.add_column("Tests", justify="right")
            for category, count in report.category_counts.items():
                table.add_row(escape(category), str(count))
            console.print(table)

            kind = report.error_analysis.most_common_error_type
            if kind:
                console.print(f"  [dim red]Most common failure: {escape(kind)}[/dim red]")
