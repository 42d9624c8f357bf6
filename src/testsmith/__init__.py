"""Testsmith — mocks with call verification and multi-format test reports."""

from testsmith.config import TestsmithConfig, find_config
from testsmith.errors import (
    InvalidResponseTypeError,
    MockGenerationFailedError,
    NotConfiguredError,
    TestsmithConfigError,
    TestsmithError,
    UnsupportedFormatError,
)
from testsmith.mocking import Custom, Delayed, Failure, MockInstance, MockRegistry, Success
from testsmith.reporting import Reporter, ResultAggregator, TestOutcome, TestStatus

__version__ = "0.1.0"

__all__ = [
    "Custom",
    "Delayed",
    "Failure",
    "InvalidResponseTypeError",
    "MockGenerationFailedError",
    "MockInstance",
    "MockRegistry",
    "NotConfiguredError",
    "Reporter",
    "ResultAggregator",
    "Success",
    "TestOutcome",
    "TestStatus",
    "TestsmithConfig",
    "TestsmithConfigError",
    "TestsmithError",
    "UnsupportedFormatError",
    "find_config",
]
