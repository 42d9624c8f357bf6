"""Unit tests for testsmith.mocking.verification — verify_* and assert_* helpers."""

from __future__ import annotations

import pytest

from testsmith.mocking import (
    Failure,
    MockInstance,
    assert_called,
    assert_called_in_order,
    assert_called_with,
    assert_never_called,
    verify_called,
    verify_called_in_order,
    verify_called_with,
    verify_never_called,
)


@pytest.fixture
def repo() -> MockInstance:
    mock = MockInstance("UserRepository")
    mock.fetch_user("u1")
    mock.save_user({"id": "u1"}, overwrite=True)
    mock.fetch_user("u2")
    return mock


# ---------------------------------------------------------------------------
# 1. Boolean verification
# ---------------------------------------------------------------------------

class TestVerify:
    """verify_* mirror the ledger queries."""

    def test_verify_called(self, repo):
        assert verify_called(repo, "fetch_user") is True
        assert verify_called(repo, "fetch_user", times=2) is True
        assert verify_called(repo, "delete_user") is False

    def test_verify_called_with(self, repo):
        assert verify_called_with(repo, "save_user", {"id": "u1"}, overwrite=True) is True
        assert verify_called_with(repo, "save_user", {"id": "u1"}) is False

    def test_verify_called_in_order(self, repo):
        assert verify_called_in_order(repo, ["fetch_user", "save_user"]) is True
        assert verify_called_in_order(repo, ["save_user", "fetch_user"]) is True
        assert verify_called_in_order(repo, ["save_user", "save_user"]) is False

    def test_verify_never_called(self, repo):
        assert verify_never_called(repo, "delete_user") is True
        assert verify_never_called(repo, "fetch_user") is False


# ---------------------------------------------------------------------------
# 2. Assertions
# ---------------------------------------------------------------------------

class TestAssertions:
    """assert_* raise AssertionError listing the recorded calls."""

    def test_passing_assertions_return_none(self, repo):
        assert assert_called(repo, "fetch_user", times=2) is None
        assert assert_called_with(repo, "fetch_user", "u2") is None
        assert assert_called_in_order(repo, ["fetch_user", "save_user"]) is None
        assert assert_never_called(repo, "delete_user") is None

    def test_assert_called_failure_lists_calls(self, repo):
        with pytest.raises(AssertionError) as exc_info:
            assert_called(repo, "fetch_user", times=5)
        message = str(exc_info.value)
        assert "UserRepository.fetch_user" in message
        assert "called 2 time(s)" in message
        assert "#1 fetch_user('u1')" in message
        assert "#2 save_user({'id': 'u1'}, overwrite=True)" in message

    def test_assert_called_with_failure(self, repo):
        with pytest.raises(AssertionError, match="to be called with"):
            assert_called_with(repo, "fetch_user", "u3")

    def test_assert_called_in_order_failure(self, repo):
        with pytest.raises(AssertionError, match="calls in order"):
            assert_called_in_order(repo, ["delete_user", "fetch_user"])

    def test_assert_never_called_failure(self, repo):
        with pytest.raises(AssertionError, match="never be called"):
            assert_never_called(repo, "save_user")

    def test_empty_ledger_message(self):
        with pytest.raises(AssertionError, match="no calls recorded"):
            assert_called(MockInstance("Empty"), "ping")


# ---------------------------------------------------------------------------
# 3. Timeout scenario
# ---------------------------------------------------------------------------

class TestFailureScenario:
    """A failing dependency is still verifiable after the error propagates."""

    def test_timeout_then_verify(self):
        api = MockInstance("APIService", Failure(TimeoutError("upstream timed out")))

        def load_dashboard():
            try:
                return api.get("/dashboard")
            except TimeoutError:
                return "cached"

        assert load_dashboard() == "cached"
        assert load_dashboard() == "cached"
        assert_called(api, "get", times=2)
        assert_called_with(api, "get", "/dashboard")
