"""Testsmith mocking — configurable mocks with call recording.

Provides:
- MockRegistry: creates, caches and resets mocks per capability
- MockInstance: per-method behaviors, attribute proxies, sync/async resolution
- Success / Failure / Delayed / Custom: the behavior kinds
- DefaultPolicy: method-name -> default value table for unconfigured methods
- CallLedger: ordered call records backing verification
- verify_* / assert_*: verification helpers
"""

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
from testsmith.mocking.instance import MockInstance, MockMethod
from testsmith.mocking.ledger import CallLedger, CallRecord
from testsmith.mocking.policy import NO_DEFAULT, DefaultPolicy, PolicyRule, rule
from testsmith.mocking.registry import MockRegistry
from testsmith.mocking.templates import MockTemplate
from testsmith.mocking.verification import (
    assert_called,
    assert_called_in_order,
    assert_called_with,
    assert_never_called,
    verify_called,
    verify_called_in_order,
    verify_called_with,
    verify_never_called,
)

__all__ = [
    "CallLedger",
    "CallRecord",
    "Custom",
    "DefaultPolicy",
    "Delayed",
    "Failure",
    "MockBehavior",
    "MockInstance",
    "MockMethod",
    "MockRegistry",
    "MockTemplate",
    "NO_DEFAULT",
    "PolicyRule",
    "Resolution",
    "Success",
    "UNSET",
    "assert_called",
    "assert_called_in_order",
    "assert_called_with",
    "assert_never_called",
    "resolve_behavior",
    "rule",
    "verify_called",
    "verify_called_in_order",
    "verify_called_with",
    "verify_never_called",
]
