"""Unit tests for testsmith.pytest_plugin — report conversion and fixtures."""

from __future__ import annotations

from types import SimpleNamespace

from testsmith.mocking import MockRegistry
from testsmith.pytest_plugin import outcome_from_report
from testsmith.reporting import ErrorValue, ResultAggregator, TestStatus


def _make_report(**overrides) -> SimpleNamespace:
    defaults = {
        "nodeid": "tests/test_auth.py::TestLogin::test_login_valid",
        "when": "call",
        "outcome": "passed",
        "duration": 0.25,
        "longrepr": None,
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


# ---------------------------------------------------------------------------
# 1. outcome_from_report()
# ---------------------------------------------------------------------------

class TestOutcomeFromReport:
    """pytest reports become TestOutcome values."""

    def test_passed_call(self):
        outcome = outcome_from_report(_make_report())
        assert outcome.name == "login_valid"
        assert outcome.status is TestStatus.PASSED
        assert outcome.duration_seconds == 0.25
        assert outcome.error is None

    def test_teardown_is_ignored(self):
        assert outcome_from_report(_make_report(when="teardown")) is None

    def test_passing_setup_is_ignored(self):
        assert outcome_from_report(_make_report(when="setup")) is None

    def test_skipped_setup_is_recorded(self):
        outcome = outcome_from_report(_make_report(when="setup", outcome="skipped"))
        assert outcome.status is TestStatus.SKIPPED

    def test_failure_uses_captured_error(self):
        report = _make_report(outcome="failed", testsmith_error=ErrorValue("NotConfigured", "ping"))
        assert outcome_from_report(report).error == ErrorValue("NotConfigured", "ping")

    def test_failure_parses_crash_message(self):
        crash = SimpleNamespace(message="AssertionError: assert 1 == 2")
        report = _make_report(outcome="failed", longrepr=SimpleNamespace(reprcrash=crash))
        error = outcome_from_report(report).error
        assert error.kind == "AssertionError"
        assert error.message == "AssertionError: assert 1 == 2"

    def test_failure_without_kind_prefix(self):
        report = _make_report(outcome="failed", longrepr="something broke")
        assert outcome_from_report(report).error.kind == "Failure"

    def test_prefix_kept_when_disabled(self):
        assert outcome_from_report(_make_report(), strip_prefix="").name == "test_login_valid"


# ---------------------------------------------------------------------------
# 2. Fixtures
# ---------------------------------------------------------------------------

class TestFixtures:
    """The plugin's fixtures are usable from ordinary tests."""

    def test_mock_registry_fixture(self, mock_registry):
        assert isinstance(mock_registry, MockRegistry)
        repo = mock_registry.generate_mock("UserRepository")
        assert repo.delete_user("u1") is True

    def test_result_aggregator_fixture(self, result_aggregator):
        assert isinstance(result_aggregator, ResultAggregator)


# ---------------------------------------------------------------------------
# 3. End to end
# ---------------------------------------------------------------------------

class TestPluginSession:
    """Outcomes from a real pytest run reach the session aggregator."""

    def test_outcomes_collected(self, pytester):
        pytester.makeconftest('pytest_plugins = ["testsmith.pytest_plugin"]\n')
        pytester.makepyfile(
            test_flow="""
            import pytest

            def test_login_ok():
                pass

            def test_login_timeout():
                raise TimeoutError("gateway timed out")

            @pytest.mark.skip(reason="later")
            def test_search_later():
                pass

            def test_zz_summary(result_aggregator):
                outcomes = {o.name: o for o in result_aggregator.outcomes}
                assert outcomes["login_ok"].status.value == "passed"
                assert outcomes["login_timeout"].status.value == "failed"
                assert outcomes["login_timeout"].error.kind == "TimeoutError"
                assert outcomes["search_later"].status.value == "skipped"
                detailed = result_aggregator.detailed_report()
                assert detailed.category_counts == {"login": 2, "search": 1}
            """
        )
        result = pytester.runpytest()
        result.assert_outcomes(passed=2, failed=1, skipped=1)

    def test_registry_reset_between_tests(self, pytester):
        pytester.makeconftest('pytest_plugins = ["testsmith.pytest_plugin"]\n')
        pytester.makepyfile(
            test_reset="""
            def test_first(mock_registry):
                mock = mock_registry.generate_mock("Svc")
                mock.ping()
                assert mock_registry.is_cached("Svc")

            def test_second(mock_registry):
                assert not mock_registry.is_cached("Svc")
            """
        )
        result = pytester.runpytest()
        result.assert_outcomes(passed=2)
