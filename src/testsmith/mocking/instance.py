"""Mock instances — per-method behaviors plus a call ledger.

Usage::

    repo = MockInstance("UserRepository")
    repo.set_response("fetch_user", {"id": "u1"})
    repo.set_error("delete_user", PermissionError("read-only"))

    repo.fetch_user("u1")             # -> {"id": "u1"}
    repo.resolve("save_user", ("u1",))  # -> True (default policy)

    assert repo.ledger.was_called_with("fetch_user", "u1")

Every call is recorded before its behavior is resolved, so failed calls count
too.

Attribute proxies only cover names that are not ``MockInstance`` members
(``RESERVED_METHOD_NAMES``: ``history``, ``reset``, ``resolve``, ``call_count``
and the rest of the public API). Templates declaring such a method are
rejected; untemplated mocks reach them through ``mock.proxy(name)``.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from typing import Any, Callable

from testsmith.errors import InvalidResponseTypeError, MockGenerationFailedError
from testsmith.mocking.behavior import (
    UNSET,
    Custom,
    Delayed,
    Failure,
    MockBehavior,
    Resolution,
    Success,
    resolve_behavior,
)
from testsmith.mocking.ledger import CallLedger, CallRecord
from testsmith.mocking.policy import DefaultPolicy
from testsmith.mocking.templates import MockTemplate

logger = logging.getLogger("testsmith.mocking.instance")


class MockInstance:
    """A configurable stand-in for one capability."""

    def __init__(
        self,
        capability: str = "Mock",
        default_behavior: MockBehavior | None = None,
        *,
        template: MockTemplate | None = None,
        policy: DefaultPolicy | None = None,
        return_values: dict[str, Any] | None = None,
        is_async: bool = False,
    ) -> None:
        if template is not None:
            _check_reserved(capability, template)
        self._capability = capability
        self._default_behavior: MockBehavior = default_behavior if default_behavior is not None else Success()
        self._template = template
        self._policy = policy if policy is not None else DefaultPolicy()
        self._is_async = is_async
        self._behaviors: dict[str, MockBehavior] = {}
        self._ledger = CallLedger()
        for method_id, value in (return_values or {}).items():
            self._behaviors[method_id] = Success(value)

    # -----------------------------------------------------------------------
    # Properties
    # -----------------------------------------------------------------------

    @property
    def capability(self) -> str:
        return self._capability

    @property
    def ledger(self) -> CallLedger:
        return self._ledger

    @property
    def template(self) -> MockTemplate | None:
        return self._template

    @property
    def policy(self) -> DefaultPolicy:
        return self._policy

    @property
    def default_behavior(self) -> MockBehavior:
        return self._default_behavior

    @default_behavior.setter
    def default_behavior(self, behavior: MockBehavior) -> None:
        self._default_behavior = behavior

    # -----------------------------------------------------------------------
    # Configuration
    # -----------------------------------------------------------------------

    def set_behavior(self, method_id: str, behavior: MockBehavior) -> None:
        self._behaviors[method_id] = behavior

    def behavior_for(self, method_id: str) -> MockBehavior:
        """Configured behavior for ``method_id``, else the instance default."""
        return self._behaviors.get(method_id, self._default_behavior)

    def set_response(self, method_id: str, value: Any) -> None:
        self._behaviors[method_id] = Success(value)

    def set_error(self, method_id: str, error: BaseException | type[BaseException]) -> None:
        self._behaviors[method_id] = Failure(error)

    def set_delay(self, method_id: str, seconds: float) -> None:
        """Delay ``method_id``, keeping any success value already configured."""
        existing = self._behaviors.get(method_id)
        value = existing.value if isinstance(existing, (Success, Delayed)) else UNSET
        self._behaviors[method_id] = Delayed(seconds, value)

    def set_implementation(self, method_id: str, resolver: Callable[[str, tuple[Any, ...]], Any]) -> None:
        self._behaviors[method_id] = Custom(resolver)

    def clear_behavior(self, method_id: str) -> None:
        self._behaviors.pop(method_id, None)

    def reset(self) -> None:
        """Drop configured behaviors and recorded calls."""
        self._behaviors.clear()
        self._ledger.clear()

    # -----------------------------------------------------------------------
    # Resolution
    # -----------------------------------------------------------------------

    def _expected(self, method_id: str, expected: type | None) -> type | None:
        if expected is not None:
            return expected
        if self._template is not None:
            return self._template.expected_type(method_id)
        return None

    def _plan(self, method_id: str, args: tuple[Any, ...], expected: type | None) -> Resolution:
        behavior = self.behavior_for(method_id)
        return resolve_behavior(method_id, behavior, args, self._policy, expected)

    def _finish(self, method_id: str, resolution: Resolution, expected: type | None) -> Any:
        if resolution.error is not None:
            logger.debug("%s.%s -> raising %r", self._capability, method_id, resolution.error)
            raise resolution.error
        value = resolution.value
        if expected is not None and not isinstance(value, expected):
            raise InvalidResponseTypeError(expected, value, method_id)
        return value

    def resolve(
        self,
        method_id: str,
        args: tuple[Any, ...] | list[Any] = (),
        kwargs: dict[str, Any] | None = None,
        *,
        expected: type | None = None,
    ) -> Any:
        """Record a call to ``method_id`` and return (or raise) its outcome.

        ``Delayed`` behaviors block the calling thread; use ``resolve_async``
        inside an event loop.

        Raises:
            NotConfiguredError: No behavior and no default value.
            InvalidResponseTypeError: The value is not an ``expected`` instance.
        """
        args = tuple(args)
        self._ledger.record(method_id, args, kwargs)
        expected = self._expected(method_id, expected)
        resolution = self._plan(method_id, args, expected)
        if resolution.delay > 0:
            time.sleep(resolution.delay)
        return self._finish(method_id, resolution, expected)

    async def resolve_async(
        self,
        method_id: str,
        args: tuple[Any, ...] | list[Any] = (),
        kwargs: dict[str, Any] | None = None,
        *,
        expected: type | None = None,
    ) -> Any:
        """Async variant of ``resolve``; delays are cancellable."""
        args = tuple(args)
        self._ledger.record(method_id, args, kwargs)
        return await self._complete_async(method_id, args, expected)

    async def _complete_async(self, method_id: str, args: tuple[Any, ...], expected: type | None) -> Any:
        expected = self._expected(method_id, expected)
        resolution = self._plan(method_id, args, expected)
        if resolution.delay > 0:
            try:
                await asyncio.sleep(resolution.delay)
            except asyncio.CancelledError:
                logger.debug("%s.%s: delayed response cancelled", self._capability, method_id)
                raise
        if inspect.isawaitable(resolution.value):
            resolution = Resolution(value=await resolution.value)
        return self._finish(method_id, resolution, expected)

    # -----------------------------------------------------------------------
    # Verification shortcuts
    # -----------------------------------------------------------------------

    def call_count(self, method_id: str) -> int:
        return self._ledger.call_count(method_id)

    def history(self, method_id: str) -> list[CallRecord]:
        return self._ledger.history(method_id)

    def was_called(self, method_id: str, times: int | None = None) -> bool:
        return self._ledger.was_called(method_id, times)

    # -----------------------------------------------------------------------
    # Attribute proxies
    # -----------------------------------------------------------------------

    def proxy(self, method_id: str) -> MockMethod:
        """Return the callable proxy for ``method_id``, reserved names included."""
        is_async = self._is_async
        if self._template is not None and self._template.is_async(method_id):
            is_async = True
        return MockMethod(self, method_id, is_async)

    def __getattr__(self, name: str) -> MockMethod:
        if name.startswith("_"):
            raise AttributeError(name)
        return self.proxy(name)

    def __repr__(self) -> str:
        return f"<MockInstance {self._capability} calls={len(self._ledger)}>"


# method names an attribute proxy can never reach
RESERVED_METHOD_NAMES = frozenset(name for name in dir(MockInstance) if not name.startswith("_"))


def _check_reserved(capability: str, template: MockTemplate) -> None:
    shadowed = sorted(set(template.methods) & RESERVED_METHOD_NAMES)
    if shadowed:
        raise MockGenerationFailedError(
            f"Capability {capability} declares methods that clash with MockInstance members: "
            f"{', '.join(shadowed)}\n\n"
            "To fix: rename the methods in the template, or create the mock without a "
            f"template and call them through mock.proxy({shadowed[0]!r})(...)"
        )


class MockMethod:
    """Callable bound to one method id of a ``MockInstance``."""

    def __init__(self, mock: MockInstance, method_id: str, is_async: bool = False) -> None:
        self._mock = mock
        self.method_id = method_id
        self._is_async = is_async

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        if not self._is_async:
            return self._mock.resolve(self.method_id, args, kwargs)
        # record at call time, even if the coroutine is never awaited
        self._mock.ledger.record(self.method_id, args, kwargs)
        return self._mock._complete_async(self.method_id, args, None)

    @property
    def call_count(self) -> int:
        return self._mock.ledger.call_count(self.method_id)

    def __repr__(self) -> str:
        return f"<MockMethod {self._mock.capability}.{self.method_id}>"
