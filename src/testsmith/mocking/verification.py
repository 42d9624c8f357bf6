"""Verification helpers over a mock's call ledger.

``verify_*`` return booleans; ``assert_*`` raise ``AssertionError`` with the
recorded calls in the message so a failed verification reads like any other
failed assertion in pytest output.
"""

from __future__ import annotations

from typing import Any, Iterable

from testsmith.mocking.instance import MockInstance


def verify_called(mock: MockInstance, method_id: str, times: int | None = None) -> bool:
    return mock.ledger.was_called(method_id, times)


def verify_called_with(mock: MockInstance, method_id: str, *args: Any, **kwargs: Any) -> bool:
    return mock.ledger.was_called_with(method_id, *args, **kwargs)


def verify_called_in_order(mock: MockInstance, method_ids: Iterable[str]) -> bool:
    return mock.ledger.was_called_in_order(method_ids)


def verify_never_called(mock: MockInstance, method_id: str) -> bool:
    return mock.ledger.was_never_called(method_id)


def _describe_calls(mock: MockInstance) -> str:
    records = mock.ledger.all_records()
    if not records:
        return "  (no calls recorded)"
    lines = []
    for r in records:
        parts = [repr(a) for a in r.arguments]
        parts += [f"{k}={v!r}" for k, v in r.kwargs.items()]
        lines.append(f"  #{r.sequence_number} {r.method_id}({', '.join(parts)})")
    return "\n".join(lines)


def assert_called(mock: MockInstance, method_id: str, times: int | None = None) -> None:
    if verify_called(mock, method_id, times):
        return
    count = mock.ledger.call_count(method_id)
    wanted = "at least once" if times is None else f"{times} time(s)"
    raise AssertionError(
        f"Expected {mock.capability}.{method_id} to be called {wanted}, "
        f"called {count} time(s). Calls:\n{_describe_calls(mock)}"
    )


def assert_called_with(mock: MockInstance, method_id: str, *args: Any, **kwargs: Any) -> None:
    if verify_called_with(mock, method_id, *args, **kwargs):
        return
    raise AssertionError(
        f"Expected {mock.capability}.{method_id} to be called with "
        f"args={args!r} kwargs={kwargs!r}. Calls:\n{_describe_calls(mock)}"
    )


def assert_called_in_order(mock: MockInstance, method_ids: Iterable[str]) -> None:
    expected = list(method_ids)
    if verify_called_in_order(mock, expected):
        return
    raise AssertionError(
        f"Expected {mock.capability} calls in order {expected}. Calls:\n{_describe_calls(mock)}"
    )


def assert_never_called(mock: MockInstance, method_id: str) -> None:
    if verify_never_called(mock, method_id):
        return
    raise AssertionError(
        f"Expected {mock.capability}.{method_id} to never be called. Calls:\n{_describe_calls(mock)}"
    )
