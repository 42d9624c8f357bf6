"""Unit tests for testsmith.mocking.templates."""

from __future__ import annotations

from typing import Any, Optional

import pytest

from testsmith.errors import MockGenerationFailedError
from testsmith.mocking.templates import (
    MockTemplate,
    default_templates,
    template_from_class,
    template_from_names,
)


class Inventory:
    def count(self) -> int:
        return 0

    def items(self) -> list[str]:
        return []

    def find(self, sku: str) -> Optional[dict]:
        return None

    def raw(self) -> Any:
        return None

    def clear(self) -> None:
        pass

    def untyped(self):
        pass

    async def refresh(self) -> bool:
        return True

    def _internal(self) -> int:
        return 1


class Broken:
    def load(self) -> DoesNotExist:  # noqa: F821
        ...


class TestTemplateFromNames:
    def test_resolves_type_names(self):
        template = template_from_names("Svc", {"a": "bool", "b": "Data", "c": "Void", "d": "User"})
        assert template.methods == {"a": bool, "b": bytes, "c": type(None), "d": dict}

    def test_unknown_type_name(self):
        with pytest.raises(MockGenerationFailedError, match="To fix"):
            template_from_names("Svc", {"a": "Banana"})

    def test_default_templates(self):
        templates = default_templates()
        assert set(templates) == {"UserRepository", "APIService", "DatabaseService"}
        assert templates["UserRepository"].expected_type("fetch_user") is dict
        assert templates["DatabaseService"].expected_type("query") is object


class TestTemplateFromClass:
    def test_public_methods_and_return_types(self):
        template = template_from_class(Inventory)
        assert template.capability == "Inventory"
        assert template.methods["count"] is int
        assert template.methods["items"] is list
        assert template.methods["find"] is None
        assert template.methods["raw"] is None
        assert template.methods["clear"] is type(None)
        assert template.methods["untyped"] is None
        assert "_internal" not in template.methods

    def test_async_methods_detected(self):
        template = template_from_class(Inventory)
        assert template.is_async("refresh") is True
        assert template.is_async("count") is False

    def test_unresolvable_annotation(self):
        with pytest.raises(MockGenerationFailedError, match="Broken.load"):
            template_from_class(Broken)

    def test_unknown_method_has_no_expected_type(self):
        assert MockTemplate("Empty").expected_type("anything") is None
