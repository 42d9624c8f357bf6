"""Testsmith configuration management."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from testsmith.errors import TestsmithConfigError
from testsmith.models import (
    CONFIG_FILENAME,
    DEFAULT_CATEGORY_DELIMITER,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PROJECT_DIR,
    DEFAULT_REPORT_FORMAT,
    DEFAULT_REPORT_TITLE,
)

__all__ = ["TestsmithConfig", "TestsmithConfigError", "find_config"]

_REPORT_FORMATS = ("txt", "json", "html", "xml")


@dataclass
class TestsmithConfig:
    """Configuration for mocks and report export."""

    __test__ = False

    # Paths
    project_dir: Path = field(default_factory=lambda: Path(DEFAULT_PROJECT_DIR))
    output_dir: Path = field(default_factory=lambda: Path(DEFAULT_PROJECT_DIR) / DEFAULT_OUTPUT_DIR)
    templates_file: Path | None = None

    # Reporting
    category_delimiter: str = DEFAULT_CATEGORY_DELIMITER
    default_format: str = DEFAULT_REPORT_FORMAT
    report_title: str = DEFAULT_REPORT_TITLE

    # Mocks
    strict_mocks: bool = False
    default_policy: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_file(cls, config_path: Path) -> TestsmithConfig:
        """Load config from a YAML file."""
        if not config_path.exists():
            raise TestsmithConfigError(
                f"Config file not found: {config_path}\n\n"
                f"To fix: create {DEFAULT_PROJECT_DIR}/{CONFIG_FILENAME}"
            )
        with open(config_path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise TestsmithConfigError(f"Config file is not valid YAML: {config_path}\n\n{exc}") from exc
        if not isinstance(data, dict):
            raise TestsmithConfigError(f"Config file must contain a mapping: {config_path}")
        return cls._from_dict(data, config_path.parent)

    @classmethod
    def _from_dict(cls, data: dict[str, Any], project_dir: Path) -> TestsmithConfig:
        """Create config from a dictionary."""
        config = cls()
        config.project_dir = project_dir

        if "output_dir" in data:
            config.output_dir = project_dir / data["output_dir"]
        else:
            config.output_dir = project_dir / DEFAULT_OUTPUT_DIR

        if data.get("templates_file"):
            config.templates_file = project_dir / data["templates_file"]

        if "category_delimiter" in data:
            delimiter = str(data["category_delimiter"])
            if not delimiter:
                raise TestsmithConfigError("category_delimiter must not be empty")
            config.category_delimiter = delimiter
        if "default_format" in data:
            fmt = str(data["default_format"]).lower()
            if fmt not in _REPORT_FORMATS:
                raise TestsmithConfigError(
                    f"Unknown default_format: {fmt}\n\n"
                    f"To fix: use one of {', '.join(_REPORT_FORMATS)}"
                )
            config.default_format = fmt
        if "report_title" in data:
            config.report_title = str(data["report_title"])
        if "strict_mocks" in data:
            config.strict_mocks = bool(data["strict_mocks"])

        if "default_policy" in data:
            rules = data["default_policy"] or []
            if not isinstance(rules, list):
                raise TestsmithConfigError("default_policy must be a list of {pattern, value} entries")
            for rule in rules:
                if not isinstance(rule, dict) or "pattern" not in rule:
                    raise TestsmithConfigError(f"Invalid default_policy entry: {rule!r}")
                try:
                    re.compile(str(rule["pattern"]), re.IGNORECASE)
                except re.error as exc:
                    raise TestsmithConfigError(
                        f"Invalid default_policy pattern {rule['pattern']!r}: {exc}\n\n"
                        "To fix: use a valid regular expression (escape literal characters such as '(' or '[')"
                    ) from exc
            config.default_policy = list(rules)

        return config

    def load_templates(self) -> dict[str, dict[str, str]]:
        """Load capability templates from the templates YAML file.

        Returns an empty mapping when no templates file is configured.
        """
        if self.templates_file is None:
            return {}
        if not self.templates_file.exists():
            raise TestsmithConfigError(
                f"Templates file not found: {self.templates_file}\n\n"
                "To fix: create the file or remove templates_file from config.yaml"
            )
        with open(self.templates_file, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise TestsmithConfigError(
                    f"Templates file is not valid YAML: {self.templates_file}\n\n{exc}"
                ) from exc

        capabilities = data.get("capabilities", {}) if isinstance(data, dict) else None
        if not isinstance(capabilities, dict):
            raise TestsmithConfigError(f"Templates file must define a 'capabilities' mapping: {self.templates_file}")

        templates: dict[str, dict[str, str]] = {}
        for name, spec in capabilities.items():
            if spec is None:
                spec = {}
            if not isinstance(spec, dict):
                raise TestsmithConfigError(
                    f"Capability {name!r} must be a mapping, got {type(spec).__name__}\n\n"
                    f"To fix: declare it as\n  {name}:\n    methods:\n      method_name: type"
                )
            methods = spec.get("methods") or {}
            if not isinstance(methods, dict):
                raise TestsmithConfigError(f"Capability {name!r} must define a 'methods' mapping")
            templates[str(name)] = {str(m): str(t) for m, t in methods.items()}
        return templates


def find_config(start: Path | None = None) -> TestsmithConfig:
    """Locate ``.testsmith/config.yaml`` by searching upward from ``start``.

    Falls back to defaults rooted at ``start`` when no config file exists.
    """
    current = (start or Path.cwd()).resolve()
    for base in [current, *current.parents]:
        candidate = base / DEFAULT_PROJECT_DIR / CONFIG_FILENAME
        if candidate.is_file():
            return TestsmithConfig.from_file(candidate)
    project_dir = current / DEFAULT_PROJECT_DIR
    return TestsmithConfig(project_dir=project_dir, output_dir=project_dir / DEFAULT_OUTPUT_DIR)
