"""Mock registry — creates, caches and resets mocks per capability.

The registry is a plain object: build one per test run (or use the
``mock_registry`` pytest fixture) and reset it between independent tests.

Usage::

    registry = MockRegistry()
    repo = registry.generate_mock("UserRepository")
    assert registry.generate_mock("UserRepository") is repo

    registry.reset_mock("UserRepository")
    assert registry.generate_mock("UserRepository") is not repo
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from testsmith.config import TestsmithConfig
from testsmith.errors import MockGenerationFailedError
from testsmith.mocking.behavior import Custom, MockBehavior, Success
from testsmith.mocking.instance import MockInstance
from testsmith.mocking.policy import DefaultPolicy
from testsmith.mocking.templates import (
    MockTemplate,
    default_templates,
    template_from_class,
    template_from_names,
)

logger = logging.getLogger("testsmith.mocking.registry")

Capability = str | type


def capability_key(capability: Capability) -> str:
    """Registry key for a capability: the string itself or the class name.

    Raises:
        MockGenerationFailedError: ``capability`` is neither a non-empty
            string nor a class.
    """
    if isinstance(capability, type):
        return capability.__name__
    if isinstance(capability, str) and capability.strip():
        return capability
    raise MockGenerationFailedError(
        f"Cannot generate a mock for {capability!r}: expected a capability name or a class"
    )


class MockRegistry:
    """Owns the mock cache for one test run."""

    def __init__(
        self,
        templates: dict[str, MockTemplate] | None = None,
        policy: DefaultPolicy | None = None,
        default_behavior: MockBehavior | None = None,
    ) -> None:
        self._templates: dict[str, MockTemplate] = default_templates()
        self._templates.update(templates or {})
        self._policy = policy if policy is not None else DefaultPolicy()
        self._default_behavior: MockBehavior = default_behavior if default_behavior is not None else Success()
        self._mocks: dict[str, MockInstance] = {}
        self._behaviors: dict[str, MockBehavior] = {}

    @classmethod
    def from_config(cls, config: TestsmithConfig) -> MockRegistry:
        """Build a registry with the config's default policy and templates."""
        try:
            templates = {
                name: template_from_names(name, methods)
                for name, methods in config.load_templates().items()
            }
        except MockGenerationFailedError:
            logger.error("Invalid templates file: %s", config.templates_file)
            raise
        policy = DefaultPolicy.from_config(config.default_policy, strict=config.strict_mocks)
        return cls(templates=templates, policy=policy)

    # -----------------------------------------------------------------------
    # Templates
    # -----------------------------------------------------------------------

    @property
    def templates(self) -> dict[str, MockTemplate]:
        return dict(self._templates)

    def register_template(self, template: MockTemplate) -> None:
        self._templates[template.capability] = template

    def _template_for(self, capability: Capability, key: str) -> MockTemplate | None:
        if key in self._templates:
            return self._templates[key]
        if isinstance(capability, type):
            return template_from_class(capability)
        return None

    # -----------------------------------------------------------------------
    # Creation
    # -----------------------------------------------------------------------

    def generate_mock(
        self,
        capability: Capability,
        behavior: MockBehavior | None = None,
        *,
        is_async: bool = False,
    ) -> MockInstance:
        """Return the cached mock for ``capability``, creating it on first use.

        ``behavior`` only applies when the mock is created; use
        ``set_behavior`` to change the behavior of a cached mock.

        Raises:
            MockGenerationFailedError: The capability's template declares a
                method named like a ``MockInstance`` member (``history``,
                ``reset``, ...).
        """
        key = capability_key(capability)
        existing = self._mocks.get(key)
        if existing is not None:
            return existing

        behavior = behavior if behavior is not None else self._behaviors.get(key, self._default_behavior)
        mock = MockInstance(
            key,
            behavior,
            template=self._template_for(capability, key),
            policy=self._policy,
            is_async=is_async,
        )
        self._mocks[key] = mock
        self._behaviors[key] = behavior
        logger.debug("Generated mock for %s (template=%s)", key, mock.template is not None)
        return mock

    def create_mock(
        self,
        behavior: MockBehavior | None = None,
        *,
        return_values: dict[str, Any] | None = None,
        implementation: Callable[[str, tuple[Any, ...]], Any] | None = None,
        capability: Capability | None = None,
        is_async: bool = False,
    ) -> MockInstance:
        """Build a fresh, uncached mock.

        Pass at most one of ``behavior`` (applies to every method),
        ``return_values`` (per-method success values) or ``implementation``
        (custom resolver for every method).
        """
        given = [x for x in (behavior, return_values, implementation) if x is not None]
        if len(given) > 1:
            raise TypeError("create_mock() accepts only one of behavior, return_values or implementation")

        if implementation is not None:
            behavior = Custom(implementation)
        key = capability_key(capability) if capability is not None else "Mock"
        template = self._template_for(capability, key) if capability is not None else None
        return MockInstance(
            key,
            behavior if behavior is not None else self._default_behavior,
            template=template,
            policy=self._policy,
            return_values=return_values,
            is_async=is_async,
        )

    # -----------------------------------------------------------------------
    # Behaviors
    # -----------------------------------------------------------------------

    def get_behavior(self, capability: Capability) -> MockBehavior | None:
        return self._behaviors.get(capability_key(capability))

    def set_behavior(self, capability: Capability, behavior: MockBehavior) -> None:
        """Set the default behavior for a capability, including a cached mock."""
        key = capability_key(capability)
        self._behaviors[key] = behavior
        if key in self._mocks:
            self._mocks[key].default_behavior = behavior

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------

    def is_cached(self, capability: Capability) -> bool:
        return capability_key(capability) in self._mocks

    def reset_mocks(self) -> None:
        """Forget every cached mock; references already handed out stay usable."""
        count = len(self._mocks)
        self._mocks.clear()
        self._behaviors.clear()
        if count:
            logger.info("Reset %d cached mock(s)", count)

    def reset_mock(self, capability: Capability) -> None:
        key = capability_key(capability)
        self._mocks.pop(key, None)
        self._behaviors.pop(key, None)

    def __len__(self) -> int:
        return len(self._mocks)

    def __contains__(self, capability: object) -> bool:
        if not isinstance(capability, (str, type)) or not capability:
            return False
        return self.is_cached(capability)
