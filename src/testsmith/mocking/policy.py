"""Default return values for methods with no configured behavior.

The policy is an ordered table of ``(pattern, factory)`` rules matched against
the method identifier. It keeps the legacy name heuristics (``delete_user``
returns ``True``, ``fetch_users`` returns a one-element list, ...) as data so
projects can extend or disable them.
"""

from __future__ import annotations

import copy
import dataclasses
import logging
import re
from typing import Any, Callable

from testsmith.models import MOCK_USER

logger = logging.getLogger("testsmith.mocking.policy")


class _NoDefault:
    """Marker returned when no rule applies and the policy has no fallback."""

    _instance: _NoDefault | None = None

    def __new__(cls) -> _NoDefault:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_DEFAULT"

    def __bool__(self) -> bool:
        return False


NO_DEFAULT = _NoDefault()


@dataclasses.dataclass(frozen=True)
class PolicyRule:
    """One row of the default-policy table."""

    pattern: re.Pattern[str]
    factory: Callable[[], Any]
    description: str = ""

    def matches(self, method_id: str) -> bool:
        return self.pattern.search(method_id) is not None


def rule(pattern: str, value: Any = None, *, factory: Callable[[], Any] | None = None, description: str = "") -> PolicyRule:
    """Build a rule; ``value`` is deep-copied on every use so callers can mutate it."""
    if factory is None:
        factory = lambda: copy.deepcopy(value)  # noqa: E731
    return PolicyRule(
        pattern=re.compile(pattern, re.IGNORECASE),
        factory=factory,
        description=description or pattern,
    )


def _mock_user() -> dict[str, Any]:
    return dict(MOCK_USER)


def _mock_users() -> list[dict[str, Any]]:
    return [{"id": "mock_user_1", "name": "Mock User 1", "email": "mock1@example.com"}]


BUILTIN_RULES: tuple[PolicyRule, ...] = (
    rule(r"(^|_)(fetch|get)_?users$", factory=_mock_users, description="user collection"),
    rule(r"(^|_)(fetch|get)_?user$", factory=_mock_user, description="single user"),
    rule(r"delete|remove|save|create_?user|update_?user|modify_?user", True, description="mutation succeeded"),
    rule(r"^(get|fetch|retrieve|post|create|add|put|update|modify)", b"", description="raw payload"),
    rule(r"^(list|find_?all|all_)", [], description="empty collection"),
)


class DefaultPolicy:
    """Ordered method-name -> default value table.

    Rules are tried in order and the first match wins. When nothing matches,
    ``fallback`` is returned; a policy built with ``fallback=NO_DEFAULT``
    reports that no default exists so the caller can raise ``NotConfigured``.
    """

    def __init__(self, rules: list[PolicyRule] | tuple[PolicyRule, ...] = BUILTIN_RULES, fallback: Any = None) -> None:
        self._rules: list[PolicyRule] = list(rules)
        self._fallback = fallback

    @classmethod
    def strict(cls) -> DefaultPolicy:
        """A policy with no rules and no fallback."""
        return cls(rules=(), fallback=NO_DEFAULT)

    @classmethod
    def from_config(cls, entries: list[dict[str, Any]], strict: bool = False) -> DefaultPolicy:
        """Build a policy from config entries, placed ahead of the built-in rules.

        In strict mode only the configured entries apply and unmatched methods
        have no default.
        """
        extra = [rule(str(e["pattern"]), e.get("value")) for e in entries]
        if strict:
            return cls(rules=extra, fallback=NO_DEFAULT)
        return cls(rules=[*extra, *BUILTIN_RULES])

    @property
    def rules(self) -> list[PolicyRule]:
        return list(self._rules)

    @property
    def is_strict(self) -> bool:
        return self._fallback is NO_DEFAULT

    def prepend(self, new_rule: PolicyRule) -> None:
        self._rules.insert(0, new_rule)

    def default_for(self, method_id: str) -> Any:
        """Return the default value for ``method_id`` (or ``NO_DEFAULT``)."""
        for r in self._rules:
            if r.matches(method_id):
                logger.debug("Default policy: %s -> %s", method_id, r.description)
                return r.factory()
        if self._fallback is NO_DEFAULT:
            return NO_DEFAULT
        return copy.deepcopy(self._fallback)
