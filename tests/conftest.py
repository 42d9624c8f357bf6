"""Shared fixtures for testsmith unit tests."""

from __future__ import annotations

import datetime as dt
from pathlib import Path

import pytest
import yaml

from testsmith.mocking import MockRegistry
from testsmith.reporting import ErrorValue, TestOutcome, TestStatus

pytest_plugins = ["testsmith.pytest_plugin", "pytester"]


# ---------------------------------------------------------------------------
# Fixture: temporary project directory with .testsmith/ structure
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Create a temporary .testsmith/ project directory with a config and templates."""
    project_dir = tmp_path / ".testsmith"
    (project_dir / "reports").mkdir(parents=True)

    config_data = {
        "output_dir": "reports",
        "templates_file": "templates.yaml",
        "category_delimiter": "_",
        "default_format": "json",
        "report_title": "Nightly Report",
    }
    (project_dir / "config.yaml").write_text(
        yaml.dump(config_data, default_flow_style=False), encoding="utf-8"
    )

    templates = {
        "capabilities": {
            "PaymentGateway": {
                "methods": {
                    "charge": "dict",
                    "refund": "bool",
                    "balance": "float",
                },
            },
        },
    }
    (project_dir / "templates.yaml").write_text(
        yaml.dump(templates, default_flow_style=False), encoding="utf-8"
    )

    return project_dir


# ---------------------------------------------------------------------------
# Fixture: sample config YAML string
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_config_yaml() -> str:
    """Return a valid testsmith config.yaml as a string."""
    return """\
output_dir: out
category_delimiter: "."
default_format: html
report_title: "Release Report"
strict_mocks: false
default_policy:
  - pattern: "^is_"
    value: false
  - pattern: "count$"
    value: 0
"""


# ---------------------------------------------------------------------------
# Fixture: a fresh registry per test
# ---------------------------------------------------------------------------

@pytest.fixture
def registry() -> MockRegistry:
    return MockRegistry()


# ---------------------------------------------------------------------------
# Fixture: a mixed set of outcomes (7 passed, 2 failed, 1 skipped)
# ---------------------------------------------------------------------------

FIXED_TIME = dt.datetime(2026, 2, 19, 10, 0, 0, tzinfo=dt.timezone.utc)


@pytest.fixture
def mixed_outcomes() -> list[TestOutcome]:
    outcomes = [
        TestOutcome(f"login_case{i}", TestStatus.PASSED, 1.0, timestamp=FIXED_TIME)
        for i in range(4)
    ]
    outcomes += [
        TestOutcome(f"checkout_case{i}", TestStatus.PASSED, 2.0, timestamp=FIXED_TIME)
        for i in range(3)
    ]
    outcomes.append(TestOutcome(
        "checkout_timeout", TestStatus.FAILED, 5.0,
        error=ErrorValue("TimeoutError", "gateway timed out"), timestamp=FIXED_TIME,
    ))
    outcomes.append(TestOutcome(
        "search_empty", TestStatus.FAILED, 0.5,
        error=ErrorValue("AssertionError", "expected 3 results"), timestamp=FIXED_TIME,
    ))
    outcomes.append(TestOutcome("search_slow", TestStatus.SKIPPED, 0.0, timestamp=FIXED_TIME))
    return outcomes
