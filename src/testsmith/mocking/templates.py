"""Capability templates — the method shape a mock stands in for.

A template maps method identifiers to their expected return types. Templates
come from three places: the built-in defaults, a YAML templates file, or the
public methods of a class (``typing.Protocol`` or ABC) passed to the registry.
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
import typing
from typing import Any

from testsmith.errors import MockGenerationFailedError
from testsmith.models import DEFAULT_TEMPLATES, TEMPLATE_TYPE_NAMES

logger = logging.getLogger("testsmith.mocking.templates")


@dataclasses.dataclass(frozen=True)
class MockTemplate:
    """Method shape of a capability.

    ``methods`` maps a method id to its return type; ``None`` means the return
    value is not type-checked.
    """

    capability: str
    methods: dict[str, type | None] = dataclasses.field(default_factory=dict)
    async_methods: frozenset[str] = frozenset()

    def expected_type(self, method_id: str) -> type | None:
        return self.methods.get(method_id)

    def is_async(self, method_id: str) -> bool:
        return method_id in self.async_methods


def template_from_names(capability: str, methods: dict[str, str]) -> MockTemplate:
    """Build a template from ``{method: type_name}`` as written in YAML."""
    resolved: dict[str, type | None] = {}
    for method_id, type_name in methods.items():
        if type_name not in TEMPLATE_TYPE_NAMES:
            raise MockGenerationFailedError(
                f"Unknown return type {type_name!r} for {capability}.{method_id}\n\n"
                f"To fix: use one of {', '.join(sorted(TEMPLATE_TYPE_NAMES))}"
            )
        resolved[method_id] = TEMPLATE_TYPE_NAMES[type_name]
    return MockTemplate(capability=capability, methods=resolved)


def default_templates() -> dict[str, MockTemplate]:
    return {name: template_from_names(name, methods) for name, methods in DEFAULT_TEMPLATES.items()}


def _runtime_type(annotation: Any) -> type | None:
    """Reduce an annotation to something ``isinstance`` accepts, or None."""
    if annotation is inspect.Signature.empty or annotation is Any:
        return None
    if annotation is None or annotation is type(None):
        return type(None)
    origin = typing.get_origin(annotation)
    if origin is not None:
        # list[int] -> list; Union/Optional/Literal are not checked
        return origin if isinstance(origin, type) else None
    if isinstance(annotation, type):
        return annotation
    return None


def template_from_class(cls: type) -> MockTemplate:
    """Derive a template from the public methods of ``cls``.

    Raises:
        MockGenerationFailedError: The annotations cannot be resolved.
    """
    methods: dict[str, type | None] = {}
    async_methods: set[str] = set()
    for name, member in inspect.getmembers(cls, predicate=inspect.isfunction):
        if name.startswith("_"):
            continue
        try:
            hints = typing.get_type_hints(member)
        except Exception as exc:
            raise MockGenerationFailedError(
                f"Cannot read annotations of {cls.__name__}.{name}: {exc}"
            ) from exc
        methods[name] = _runtime_type(hints.get("return", inspect.Signature.empty))
        if inspect.iscoroutinefunction(member):
            async_methods.add(name)

    logger.debug(
        "Derived template for %s: %d methods (%d async)",
        cls.__name__, len(methods), len(async_methods),
    )
    return MockTemplate(
        capability=cls.__name__,
        methods=methods,
        async_methods=frozenset(async_methods),
    )
