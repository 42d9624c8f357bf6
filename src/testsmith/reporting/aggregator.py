"""Result aggregation — folds test outcomes into summary reports.

``aggregate`` and ``aggregate_detailed`` are pure: the same outcomes always
give the same report apart from the ``generated_at`` stamp.
``ResultAggregator`` collects outcomes incrementally for runners that report
one test at a time.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Iterable

from testsmith.models import DEFAULT_CATEGORY_DELIMITER, UNKNOWN_CATEGORY
from testsmith.reporting.outcomes import (
    AggregateReport,
    DetailedReport,
    ErrorAnalysis,
    PerformanceSummary,
    TestOutcome,
    TestStatus,
)

logger = logging.getLogger("testsmith.reporting.aggregator")


def aggregate(outcomes: Iterable[TestOutcome], *, generated_at: dt.datetime | None = None) -> AggregateReport:
    """Count outcomes by status and sum their durations."""
    items = tuple(outcomes)
    total = len(items)
    passed = sum(1 for o in items if o.status is TestStatus.PASSED)
    failed = sum(1 for o in items if o.status is TestStatus.FAILED)
    skipped = sum(1 for o in items if o.status is TestStatus.SKIPPED)
    return AggregateReport(
        total_tests=total,
        passed_tests=passed,
        failed_tests=failed,
        skipped_tests=skipped,
        total_duration=float(sum(o.duration_seconds for o in items)),
        success_rate=passed / total if total > 0 else 0.0,
        outcomes=items,
        generated_at=generated_at or dt.datetime.now(dt.timezone.utc),
    )


def extract_category(name: str, delimiter: str = DEFAULT_CATEGORY_DELIMITER) -> str:
    """Token before the first delimiter, or the whole name without one."""
    token = name.split(delimiter, 1)[0] if delimiter else name
    return token or UNKNOWN_CATEGORY


def categorize(outcomes: Iterable[TestOutcome], delimiter: str = DEFAULT_CATEGORY_DELIMITER) -> dict[str, int]:
    categories: dict[str, int] = {}
    for o in outcomes:
        category = extract_category(o.name, delimiter)
        categories[category] = categories.get(category, 0) + 1
    return categories


def summarize_performance(outcomes: Iterable[TestOutcome]) -> PerformanceSummary:
    durations = [o.duration_seconds for o in outcomes]
    if not durations:
        return PerformanceSummary(average=0.0, minimum=0.0, maximum=0.0, total=0.0)
    total = float(sum(durations))
    return PerformanceSummary(
        average=total / len(durations),
        minimum=float(min(durations)),
        maximum=float(max(durations)),
        total=total,
    )


def analyze_errors(outcomes: Iterable[TestOutcome]) -> ErrorAnalysis:
    """Group failed outcomes by error kind.

    ``total_errors`` counts every failed outcome; only failures that carry an
    error contribute to the kind counts. Ties for the most common kind go to
    the kind seen first.
    """
    failed = [o for o in outcomes if o.status is TestStatus.FAILED]
    counts: dict[str, int] = {}
    for o in failed:
        if o.error is not None:
            counts[o.error.kind] = counts.get(o.error.kind, 0) + 1

    most_common: str | None = None
    best = 0
    for kind, count in counts.items():
        if count > best:
            most_common, best = kind, count

    return ErrorAnalysis(
        total_errors=len(failed),
        error_type_counts=counts,
        most_common_error_type=most_common,
    )


def aggregate_detailed(
    outcomes: Iterable[TestOutcome],
    *,
    delimiter: str = DEFAULT_CATEGORY_DELIMITER,
    generated_at: dt.datetime | None = None,
) -> DetailedReport:
    items = tuple(outcomes)
    return DetailedReport(
        summary=aggregate(items, generated_at=generated_at),
        category_counts=categorize(items, delimiter),
        performance=summarize_performance(items),
        error_analysis=analyze_errors(items),
    )


class ResultAggregator:
    """Collects outcomes as tests finish and builds reports on demand."""

    def __init__(self, delimiter: str = DEFAULT_CATEGORY_DELIMITER) -> None:
        self.delimiter = delimiter
        self._outcomes: list[TestOutcome] = []

    @property
    def outcomes(self) -> tuple[TestOutcome, ...]:
        return tuple(self._outcomes)

    def add(self, outcome: TestOutcome) -> None:
        self._outcomes.append(outcome)
        logger.debug("Outcome recorded: %s -> %s", outcome.name, outcome.status.value)

    def extend(self, outcomes: Iterable[TestOutcome]) -> None:
        for o in outcomes:
            self.add(o)

    def clear(self) -> None:
        self._outcomes.clear()

    def report(self) -> AggregateReport:
        return aggregate(self._outcomes)

    def detailed_report(self) -> DetailedReport:
        return aggregate_detailed(self._outcomes, delimiter=self.delimiter)

    def __len__(self) -> int:
        return len(self._outcomes)
