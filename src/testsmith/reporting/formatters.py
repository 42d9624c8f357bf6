"""Report formatters — render aggregate and detailed reports as text.

Four formats are built in: plain text, JSON, HTML (Jinja2 templates) and XML
(ElementTree). Formatters are looked up through a ``FormatterRegistry`` keyed
by format name; projects can register their own before freezing it.

Rendering is best-effort: a formatter that cannot encode a report logs a
warning and returns a minimal valid document instead of raising.
"""

from __future__ import annotations

import json
import logging
import re
import xml.etree.ElementTree as ET
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Protocol, runtime_checkable

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from testsmith.errors import UnsupportedFormatError
from testsmith.models import DEFAULT_REPORT_TITLE
from testsmith.reporting.outcomes import (
    AggregateReport,
    DetailedReport,
    detailed_report_to_dict,
    report_to_dict,
)

logger = logging.getLogger("testsmith.reporting.formatters")

_TEMPLATES_DIR = Path(__file__).parent / "templates"

EMPTY_JSON = "{}"
EMPTY_HTML = "<!DOCTYPE html>\n<html><head><title>Test Report</title></head><body></body></html>"


class ReportFormat(str, Enum):
    """Built-in report formats; values double as file extensions."""

    TEXT = "txt"
    JSON = "json"
    HTML = "html"
    XML = "xml"


def format_key(fmt: ReportFormat | str) -> str:
    return str(getattr(fmt, "value", fmt)).strip().lower()


@runtime_checkable
class ReportFormatter(Protocol):
    """Renders reports in one output format."""

    def format(self, report: AggregateReport) -> str: ...

    def format_detailed(self, report: DetailedReport) -> str: ...


def _pct(rate: float) -> str:
    return f"{rate * 100:.2f}%"


def _secs(value: float) -> str:
    return f"{value:.2f}s"


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------

class TextReportFormatter:
    """Plain-text report."""

    def __init__(self, title: str = DEFAULT_REPORT_TITLE) -> None:
        self.title = title

    def format(self, report: AggregateReport) -> str:
        return "\n".join([
            self.title,
            "=" * len(self.title),
            f"Date: {report.generated_at.isoformat()}",
            f"Total Tests: {report.total_tests}",
            f"Passed: {report.passed_tests}",
            f"Failed: {report.failed_tests}",
            f"Skipped: {report.skipped_tests}",
            f"Success Rate: {_pct(report.success_rate)}",
            f"Total Duration: {_secs(report.total_duration)}",
        ])

    def format_detailed(self, report: DetailedReport) -> str:
        sections = [self.format(report.summary)]

        lines = ["Categories:"]
        for category, count in report.category_counts.items():
            lines.append(f"  {category}: {count}")
        if len(lines) == 1:
            lines.append("  (none)")
        sections.append("\n".join(lines))

        perf = report.performance
        sections.append(
            "Performance Metrics:\n"
            f"  Average Duration: {_secs(perf.average)}\n"
            f"  Min Duration: {_secs(perf.minimum)}\n"
            f"  Max Duration: {_secs(perf.maximum)}"
        )

        analysis = report.error_analysis
        lines = ["Error Analysis:", f"  Total Errors: {analysis.total_errors}"]
        for kind, count in analysis.error_type_counts.items():
            lines.append(f"  {kind}: {count}")
        if analysis.most_common_error_type:
            lines.append(f"  Most Common: {analysis.most_common_error_type}")
        sections.append("\n".join(lines))

        failures = [o for o in report.summary.outcomes if o.error is not None]
        if failures:
            lines = ["Failures:"]
            for o in failures:
                lines.append(f"  - {o.name} [{o.error.kind}] {o.error.message}")
            sections.append("\n".join(lines))

        return "\n\n".join(sections)


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

class JsonReportFormatter:
    """JSON report; durations are float seconds, timestamps ISO-8601."""

    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent

    def _dump(self, to_dict: Callable[[Any], dict[str, Any]], report: Any) -> str:
        try:
            return json.dumps(to_dict(report), indent=self.indent, allow_nan=False)
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning("JSON report encoding failed, writing empty report: %s", exc)
            return EMPTY_JSON

    def format(self, report: AggregateReport) -> str:
        return self._dump(report_to_dict, report)

    def format_detailed(self, report: DetailedReport) -> str:
        return self._dump(detailed_report_to_dict, report)


# ---------------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------------

class HtmlReportFormatter:
    """HTML report rendered from Jinja2 templates with autoescaping."""

    def __init__(self, title: str = DEFAULT_REPORT_TITLE, templates_dir: Path | None = None) -> None:
        self.title = title
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir or _TEMPLATES_DIR)),
            autoescape=select_autoescape(["html", "xml"]),
        )
        self._env.filters["pct"] = _pct
        self._env.filters["secs"] = _secs

    def _render(self, template_name: str, **context: Any) -> str:
        try:
            template = self._env.get_template(template_name)
            return template.render(title=self.title, **context)
        except TemplateError as exc:
            logger.warning("HTML report rendering failed (%s): %s", template_name, exc)
            return EMPTY_HTML

    def format(self, report: AggregateReport) -> str:
        return self._render("report.html", report=report, detailed=None)

    def format_detailed(self, report: DetailedReport) -> str:
        return self._render("report.html", report=report.summary, detailed=report)


# ---------------------------------------------------------------------------
# XML
# ---------------------------------------------------------------------------

# characters outside the XML 1.0 Char production (C0 controls, surrogates, U+FFFE/U+FFFF)
_XML_INVALID = re.compile(r"[^\t\n\r\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


def _xml_text(value: str) -> str:
    """Replace characters XML 1.0 cannot carry with U+FFFD."""
    return _XML_INVALID.sub("\ufffd", str(value))


class XmlReportFormatter:
    """XML report built with ElementTree (text and attributes are escaped)."""

    declaration = '<?xml version="1.0" encoding="UTF-8"?>\n'

    def _summary(self, root: ET.Element, report: AggregateReport) -> None:
        ET.SubElement(root, "timestamp").text = report.generated_at.isoformat()
        summary = ET.SubElement(root, "summary")
        for tag, value in (
            ("totalTests", report.total_tests),
            ("passedTests", report.passed_tests),
            ("failedTests", report.failed_tests),
            ("skippedTests", report.skipped_tests),
            ("successRate", report.success_rate),
            ("totalDuration", report.total_duration),
        ):
            ET.SubElement(summary, tag).text = str(value)

    def _outcomes(self, root: ET.Element, report: AggregateReport) -> None:
        outcomes = ET.SubElement(root, "outcomes")
        for o in report.outcomes:
            el = ET.SubElement(outcomes, "outcome")
            el.set("name", _xml_text(o.name))
            el.set("status", o.status.value)
            el.set("duration", f"{o.duration_seconds:.3f}")
            el.set("timestamp", o.timestamp.isoformat())
            if o.error is not None:
                err = ET.SubElement(el, "error")
                err.set("kind", _xml_text(o.error.kind))
                err.text = _xml_text(o.error.message)

    def _serialize(self, root: ET.Element) -> str:
        ET.indent(root, space="  ")
        return self.declaration + ET.tostring(root, encoding="unicode")

    def format(self, report: AggregateReport) -> str:
        root = ET.Element("testReport")
        self._summary(root, report)
        return self._serialize(root)

    def format_detailed(self, report: DetailedReport) -> str:
        root = ET.Element("testReport")
        self._summary(root, report.summary)

        categories = ET.SubElement(root, "categories")
        for name, count in report.category_counts.items():
            el = ET.SubElement(categories, "category")
            el.set("name", _xml_text(name))
            el.set("count", str(count))

        perf = report.performance
        el = ET.SubElement(root, "performance")
        el.set("average", str(perf.average))
        el.set("min", str(perf.minimum))
        el.set("max", str(perf.maximum))
        el.set("total", str(perf.total))

        analysis = report.error_analysis
        errors = ET.SubElement(root, "errorAnalysis")
        errors.set("totalErrors", str(analysis.total_errors))
        if analysis.most_common_error_type is not None:
            errors.set("mostCommon", _xml_text(analysis.most_common_error_type))
        for kind, count in analysis.error_type_counts.items():
            el = ET.SubElement(errors, "errorType")
            el.set("kind", _xml_text(kind))
            el.set("count", str(count))

        self._outcomes(root, report.summary)
        return self._serialize(root)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class FormatterRegistry:
    """Format name -> formatter mapping, mutable until frozen."""

    def __init__(self, formatters: dict[str, ReportFormatter] | None = None) -> None:
        self._formatters: dict[str, ReportFormatter] = {}
        self._frozen = False
        for fmt, formatter in (formatters or {}).items():
            self.register(fmt, formatter)

    @classmethod
    def with_defaults(cls, title: str = DEFAULT_REPORT_TITLE) -> FormatterRegistry:
        return cls({
            ReportFormat.TEXT: TextReportFormatter(title),
            ReportFormat.JSON: JsonReportFormatter(),
            ReportFormat.HTML: HtmlReportFormatter(title),
            ReportFormat.XML: XmlReportFormatter(),
        })

    @property
    def formats(self) -> list[str]:
        return list(self._formatters)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, fmt: ReportFormat | str, formatter: ReportFormatter) -> None:
        if self._frozen:
            raise RuntimeError("FormatterRegistry is frozen; register formatters during setup")
        if not isinstance(formatter, ReportFormatter):
            raise TypeError(f"{formatter!r} does not implement format() and format_detailed()")
        self._formatters[format_key(fmt)] = formatter

    def freeze(self) -> None:
        self._frozen = True

    def get(self, fmt: ReportFormat | str) -> ReportFormatter:
        """Return the formatter for ``fmt``.

        Raises:
            UnsupportedFormatError: Nothing is registered for ``fmt``.
        """
        formatter = self._formatters.get(format_key(fmt))
        if formatter is None:
            raise UnsupportedFormatError(fmt)
        return formatter

    def __contains__(self, fmt: object) -> bool:
        if not isinstance(fmt, str):
            return False
        return format_key(fmt) in self._formatters
