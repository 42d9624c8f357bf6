"""Testsmith error types.

Every error carries a ``kind`` tag so reports can group failures without
introspecting class names.
"""

from __future__ import annotations

from typing import Any


class TestsmithError(Exception):
    """Base class for all testsmith errors."""

    __test__ = False
    kind = "TestsmithError"


class TestsmithConfigError(TestsmithError):
    """Raised when configuration is invalid or missing."""

    kind = "ConfigError"


# ---------------------------------------------------------------------------
# Mock errors
# ---------------------------------------------------------------------------

class MockError(TestsmithError):
    """Base class for mock resolution and generation failures."""

    kind = "MockError"


class NotConfiguredError(MockError):
    """No behavior is configured for a method and no default is available."""

    kind = "NotConfigured"

    def __init__(self, method_id: str) -> None:
        self.method_id = method_id
        super().__init__(
            f"Mock not configured for: {method_id}\n\n"
            f"To fix: mock.set_response({method_id!r}, value) or disable strict mode"
        )


class InvalidResponseTypeError(MockError):
    """The resolved value does not match the type the caller expects."""

    kind = "InvalidResponseType"

    def __init__(self, expected: Any, actual: Any = None, method_id: str | None = None) -> None:
        self.expected = expected
        self.actual = actual
        self.method_id = method_id
        expected_name = getattr(expected, "__name__", repr(expected))
        message = f"Invalid response type. Expected: {expected_name}"
        if actual is not None:
            message += f", got: {type(actual).__name__}"
        if method_id:
            message += f" (method: {method_id})"
        super().__init__(message)


class MockGenerationFailedError(MockError):
    """A mock could not be constructed for the requested capability."""

    kind = "MockGenerationFailed"


# ---------------------------------------------------------------------------
# Reporting errors
# ---------------------------------------------------------------------------

class ReportingError(TestsmithError):
    """Base class for reporting failures."""

    kind = "ReportingError"


class UnsupportedFormatError(ReportingError):
    """No formatter is registered for the requested format."""

    kind = "UnsupportedFormat"

    def __init__(self, fmt: Any) -> None:
        self.format = getattr(fmt, "value", fmt)
        super().__init__(f"Unsupported report format: {self.format}")
