"""Outcome and report data types."""

from __future__ import annotations

import dataclasses
import datetime as dt
from enum import Enum
from typing import Any


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class TestStatus(str, Enum):
    """Status of an executed test."""

    __test__ = False

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclasses.dataclass(frozen=True)
class ErrorValue:
    """A failure reason with an explicit kind tag."""

    kind: str
    message: str = ""

    @classmethod
    def from_exception(cls, exc: BaseException, kind: str | None = None) -> ErrorValue:
        """Capture an exception; testsmith errors supply their own ``kind``."""
        tag = kind or getattr(exc, "kind", None) or type(exc).__name__
        return cls(kind=str(tag), message=str(exc))


@dataclasses.dataclass(frozen=True)
class TestOutcome:
    """Result of one executed test, as reported by the host runner."""

    __test__ = False

    name: str
    status: TestStatus
    duration_seconds: float = 0.0
    error: ErrorValue | None = None
    timestamp: dt.datetime = dataclasses.field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        # accept plain strings such as "passed"; unknown values raise ValueError
        object.__setattr__(self, "status", TestStatus(self.status))

    @property
    def passed(self) -> bool:
        return self.status is TestStatus.PASSED


@dataclasses.dataclass(frozen=True)
class AggregateReport:
    """Summary statistics over a set of outcomes."""

    total_tests: int
    passed_tests: int
    failed_tests: int
    skipped_tests: int
    total_duration: float
    success_rate: float
    outcomes: tuple[TestOutcome, ...]
    generated_at: dt.datetime = dataclasses.field(default_factory=_utcnow)


@dataclasses.dataclass(frozen=True)
class PerformanceSummary:
    average: float
    minimum: float
    maximum: float
    total: float


@dataclasses.dataclass(frozen=True)
class ErrorAnalysis:
    total_errors: int
    error_type_counts: dict[str, int]
    most_common_error_type: str | None


@dataclasses.dataclass(frozen=True)
class DetailedReport:
    """Aggregate report plus categories, timing and failure analysis."""

    summary: AggregateReport
    category_counts: dict[str, int]
    performance: PerformanceSummary
    error_analysis: ErrorAnalysis

    @property
    def total_tests(self) -> int:
        return self.summary.total_tests

    @property
    def passed_tests(self) -> int:
        return self.summary.passed_tests

    @property
    def failed_tests(self) -> int:
        return self.summary.failed_tests

    @property
    def skipped_tests(self) -> int:
        return self.summary.skipped_tests

    @property
    def success_rate(self) -> float:
        return self.summary.success_rate

    @property
    def generated_at(self) -> dt.datetime:
        return self.summary.generated_at


def outcome_to_dict(outcome: TestOutcome) -> dict[str, Any]:
    return {
        "name": outcome.name,
        "status": outcome.status.value,
        "duration_seconds": outcome.duration_seconds,
        "error": dataclasses.asdict(outcome.error) if outcome.error else None,
        "timestamp": outcome.timestamp.isoformat(),
    }


def report_to_dict(report: AggregateReport) -> dict[str, Any]:
    return {
        "total_tests": report.total_tests,
        "passed_tests": report.passed_tests,
        "failed_tests": report.failed_tests,
        "skipped_tests": report.skipped_tests,
        "total_duration": report.total_duration,
        "success_rate": report.success_rate,
        "generated_at": report.generated_at.isoformat(),
        "outcomes": [outcome_to_dict(o) for o in report.outcomes],
    }


def detailed_report_to_dict(report: DetailedReport) -> dict[str, Any]:
    data = report_to_dict(report.summary)
    data["categories"] = dict(report.category_counts)
    data["performance"] = dataclasses.asdict(report.performance)
    data["error_analysis"] = {
        "total_errors": report.error_analysis.total_errors,
        "error_type_counts": dict(report.error_analysis.error_type_counts),
        "most_common_error_type": report.error_analysis.most_common_error_type,
    }
    return data
