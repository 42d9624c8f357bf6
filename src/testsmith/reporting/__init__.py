"""Testsmith reporting — aggregate test outcomes and export reports.

Provides:
- TestOutcome / TestStatus / ErrorValue: outcome records from the host runner
- aggregate / aggregate_detailed / ResultAggregator: summary statistics
- ReportFormatter and the text, JSON, HTML and XML implementations
- FormatterRegistry: format name -> formatter lookup
- Reporter: report history, rendering, file export and console summaries
"""

from testsmith.reporting.aggregator import (
    ResultAggregator,
    aggregate,
    aggregate_detailed,
    extract_category,
)
from testsmith.reporting.formatters import (
    FormatterRegistry,
    HtmlReportFormatter,
    JsonReportFormatter,
    ReportFormat,
    ReportFormatter,
    TextReportFormatter,
    XmlReportFormatter,
)
from testsmith.reporting.outcomes import (
    AggregateReport,
    DetailedReport,
    ErrorAnalysis,
    ErrorValue,
    PerformanceSummary,
    TestOutcome,
    TestStatus,
)
from testsmith.reporting.reporter import Reporter

__all__ = [
    "AggregateReport",
    "DetailedReport",
    "ErrorAnalysis",
    "ErrorValue",
    "FormatterRegistry",
    "HtmlReportFormatter",
    "JsonReportFormatter",
    "PerformanceSummary",
    "ReportFormat",
    "ReportFormatter",
    "Reporter",
    "ResultAggregator",
    "TestOutcome",
    "TestStatus",
    "TextReportFormatter",
    "XmlReportFormatter",
    "aggregate",
    "aggregate_detailed",
    "extract_category",
]
