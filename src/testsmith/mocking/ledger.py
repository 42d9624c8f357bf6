"""Call ledger — ordered, append-only record of invocations on a mock."""

from __future__ import annotations

import dataclasses
import datetime as dt
import threading
from typing import Any, Iterable


@dataclasses.dataclass(frozen=True)
class CallRecord:
    """A single recorded invocation."""

    method_id: str
    arguments: tuple[Any, ...]
    sequence_number: int
    kwargs: dict[str, Any] = dataclasses.field(default_factory=dict)
    timestamp: dt.datetime = dataclasses.field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))

    def matches(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> bool:
        return self.arguments == tuple(args) and self.kwargs == kwargs


class CallLedger:
    """Records calls and answers verification queries.

    Appends take a lock so sequence numbers stay unique and ordered when
    several threads or tasks call the same mock. Queries never mutate.
    """

    def __init__(self) -> None:
        self._records: list[CallRecord] = []
        self._next_sequence = 1
        self._lock = threading.Lock()

    def record(self, method_id: str, arguments: Iterable[Any] = (), kwargs: dict[str, Any] | None = None) -> CallRecord:
        """Append a record and return it."""
        with self._lock:
            call = CallRecord(
                method_id=method_id,
                arguments=tuple(arguments),
                sequence_number=self._next_sequence,
                kwargs=dict(kwargs or {}),
            )
            self._next_sequence += 1
            self._records.append(call)
        return call

    def _snapshot(self) -> list[CallRecord]:
        with self._lock:
            return list(self._records)

    # -----------------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------------

    def all_records(self) -> list[CallRecord]:
        return self._snapshot()

    def history(self, method_id: str) -> list[CallRecord]:
        return [r for r in self._snapshot() if r.method_id == method_id]

    def call_count(self, method_id: str) -> int:
        return len(self.history(method_id))

    def call_arguments(self, method_id: str) -> list[tuple[Any, ...]]:
        return [r.arguments for r in self.history(method_id)]

    def was_called(self, method_id: str, times: int | None = None) -> bool:
        """True if called at least once, or exactly ``times`` times when given."""
        count = self.call_count(method_id)
        if times is None:
            return count > 0
        return count == times

    def was_called_with(self, method_id: str, *args: Any, **kwargs: Any) -> bool:
        """True if at least one call had exactly these arguments."""
        return any(r.matches(args, kwargs) for r in self.history(method_id))

    def was_called_in_order(self, method_ids: Iterable[str]) -> bool:
        """True if the calls contain ``method_ids`` as an ordered subsequence.

        Other calls may be interleaved. An empty sequence is trivially true.
        """
        expected = list(method_ids)
        if not expected:
            return True
        position = 0
        for r in sorted(self._snapshot(), key=lambda r: r.sequence_number):
            if r.method_id == expected[position]:
                position += 1
                if position == len(expected):
                    return True
        return False

    def was_never_called(self, method_id: str) -> bool:
        return self.call_count(method_id) == 0

    def clear(self) -> None:
        """Drop all records; sequence numbers keep increasing."""
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
