"""pytest integration — outcome collection and a per-test mock registry.

Enable it from a ``conftest.py``::

    pytest_plugins = ["testsmith.pytest_plugin"]

Fixtures:
- ``mock_registry``: a ``MockRegistry`` built from ``.testsmith/config.yaml``
  (or defaults); its cache is reset after every test.
- ``result_aggregator``: the session ``ResultAggregator`` holding one
  ``TestOutcome`` per finished test.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Iterator

import pytest

from testsmith.config import TestsmithConfig, find_config
from testsmith.mocking.registry import MockRegistry
from testsmith.reporting.aggregator import ResultAggregator
from testsmith.reporting.outcomes import ErrorValue, TestOutcome, TestStatus

_AGGREGATOR_KEY = pytest.StashKey[ResultAggregator]()
_CONFIG_KEY = pytest.StashKey[TestsmithConfig]()

_STATUS_MAP = {
    "passed": TestStatus.PASSED,
    "failed": TestStatus.FAILED,
    "skipped": TestStatus.SKIPPED,
}


def outcome_from_report(report: Any, strip_prefix: str = "test_") -> TestOutcome | None:
    """Convert a pytest ``TestReport`` into a ``TestOutcome``.

    Returns None for phases that do not decide the test result (passing
    setup, any teardown). The outcome name is the test function name with
    ``strip_prefix`` removed, so ``test_login_expired`` falls in the
    ``login`` category.
    """
    if report.when == "teardown":
        return None
    if report.when == "setup" and report.outcome == "passed":
        return None

    name = report.nodeid.split("::")[-1]
    if strip_prefix and name.startswith(strip_prefix) and len(name) > len(strip_prefix):
        name = name[len(strip_prefix):]

    error = getattr(report, "testsmith_error", None)
    if error is None and report.outcome == "failed":
        crash = getattr(report.longrepr, "reprcrash", None)
        message = crash.message if crash is not None else str(report.longrepr or "")
        kind, sep, _ = message.partition(":")
        kind = kind.strip() if sep else ""
        error = ErrorValue(kind=kind or "Failure", message=message)

    return TestOutcome(
        name=name,
        status=_STATUS_MAP.get(report.outcome, TestStatus.FAILED),
        duration_seconds=float(report.duration),
        error=error if report.outcome == "failed" else None,
        timestamp=dt.datetime.now(dt.timezone.utc),
    )


class OutcomeCollector:
    """Feeds finished test reports into a session aggregator."""

    def __init__(self) -> None:
        self.aggregator = ResultAggregator()

    def pytest_runtest_logreport(self, report: pytest.TestReport) -> None:
        outcome = outcome_from_report(report)
        if outcome is not None:
            self.aggregator.add(outcome)


def pytest_configure(config: pytest.Config) -> None:
    collector = OutcomeCollector()
    config.stash[_AGGREGATOR_KEY] = collector.aggregator
    config.pluginmanager.register(collector, "testsmith-outcomes")


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo[None]) -> Iterator[None]:
    outcome = yield
    report = outcome.get_result()
    if call.excinfo is not None and report.outcome == "failed":
        report.testsmith_error = ErrorValue.from_exception(call.excinfo.value)


@pytest.fixture(scope="session")
def testsmith_config(request: pytest.FixtureRequest) -> TestsmithConfig:
    if _CONFIG_KEY not in request.config.stash:
        request.config.stash[_CONFIG_KEY] = find_config(request.config.rootpath)
    return request.config.stash[_CONFIG_KEY]


@pytest.fixture
def mock_registry(testsmith_config: TestsmithConfig) -> Iterator[MockRegistry]:
    registry = MockRegistry.from_config(testsmith_config)
    yield registry
    registry.reset_mocks()


@pytest.fixture(scope="session")
def result_aggregator(request: pytest.FixtureRequest) -> ResultAggregator:
    return request.config.stash[_AGGREGATOR_KEY]
