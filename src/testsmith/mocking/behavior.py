"""Mock behaviors and the pure resolution step.

A behavior says how a mocked method answers. ``resolve_behavior`` turns a
behavior into a ``Resolution`` (value, error, delay) without performing any
side effect other than calling a ``Custom`` resolver; the mock instance then
applies the delay, raises the error or returns the value.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, Union

from testsmith.errors import NotConfiguredError
from testsmith.mocking.policy import NO_DEFAULT, DefaultPolicy
from testsmith.models import TEMPLATE_TYPE_NAMES


class _Unset:
    """Sentinel: no explicit value, use the default policy."""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclasses.dataclass(frozen=True)
class Success:
    """Resolve immediately with ``value`` (or the policy default when unset)."""

    value: Any = UNSET


@dataclasses.dataclass(frozen=True)
class Failure:
    """Resolve by raising ``error`` (an exception instance or class)."""

    error: BaseException | type[BaseException]


@dataclasses.dataclass(frozen=True)
class Delayed:
    """Wait ``seconds``, then resolve like ``Success(value)``."""

    seconds: float
    value: Any = UNSET

    def __post_init__(self) -> None:
        if self.seconds < 0:
            raise ValueError(f"Delay must be non-negative, got {self.seconds}")


@dataclasses.dataclass(frozen=True)
class Custom:
    """Resolve by calling ``resolver(method_id, args)``."""

    resolver: Callable[[str, tuple[Any, ...]], Any]


MockBehavior = Union[Success, Failure, Delayed, Custom]


@dataclasses.dataclass(frozen=True)
class Resolution:
    """What a call should do: wait ``delay`` seconds, then raise or return."""

    value: Any = None
    error: BaseException | type[BaseException] | None = None
    delay: float = 0.0

    @property
    def failed(self) -> bool:
        return self.error is not None


# builtin types whose no-argument call is a side-effect-free zero value
_ZERO_VALUE_TYPES = frozenset(TEMPLATE_TYPE_NAMES.values()) | {tuple, set, frozenset}


def type_default(expected: type | None) -> Any:
    """Zero value for ``expected`` (``bool()``, ``list()``, ...) or ``NO_DEFAULT``.

    Only builtin types are instantiated; user classes give ``NO_DEFAULT``.
    """
    if expected is None or expected is type(None):
        return None
    if expected not in _ZERO_VALUE_TYPES:
        return NO_DEFAULT
    return expected()


def _success_value(method_id: str, value: Any, policy: DefaultPolicy, expected: type | None) -> Any:
    if value is not UNSET:
        return value
    default = policy.default_for(method_id)
    if default is NO_DEFAULT:
        raise NotConfiguredError(method_id)
    if expected is not None and not isinstance(default, expected):
        # name heuristic disagrees with the declared return type
        default = type_default(expected)
        if default is NO_DEFAULT:
            raise NotConfiguredError(method_id)
    return default


def resolve_behavior(
    method_id: str,
    behavior: MockBehavior | None,
    args: tuple[Any, ...] = (),
    policy: DefaultPolicy | None = None,
    expected: type | None = None,
) -> Resolution:
    """Map a method call and its configured behavior to a ``Resolution``.

    Args:
        method_id: Identifier of the invoked method.
        behavior: Configured behavior, or None to use the policy default.
        args: Positional arguments of the call (passed to ``Custom``).
        policy: Default-value table; the built-in policy when omitted.
        expected: Declared return type. Policy defaults that do not match it
            are replaced by the type's zero value; explicit values are
            returned untouched and checked by the caller.

    Raises:
        NotConfiguredError: No value is configured and the policy has none.
        TypeError: ``behavior`` is not one of the known behavior kinds.
    """
    if policy is None:
        policy = DefaultPolicy()

    if behavior is None:
        return Resolution(value=_success_value(method_id, UNSET, policy, expected))
    if isinstance(behavior, Success):
        return Resolution(value=_success_value(method_id, behavior.value, policy, expected))
    if isinstance(behavior, Failure):
        return Resolution(error=behavior.error)
    if isinstance(behavior, Delayed):
        return Resolution(
            value=_success_value(method_id, behavior.value, policy, expected),
            delay=float(behavior.seconds),
        )
    if isinstance(behavior, Custom):
        return Resolution(value=behavior.resolver(method_id, args))
    raise TypeError(f"Unknown mock behavior: {behavior!r}")
