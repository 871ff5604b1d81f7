"""
Tests for context loading from import paths.
"""

import pytest

from sbinit.context import ServiceBusContext, load_context
from sbinit.exceptions import ContextLoadError


class TestLoadContext:
    """Test suite for load_context."""

    def test_loads_class(self, context_module):
        context = load_context(f"{context_module}:ShopContext")

        assert isinstance(context, ServiceBusContext)
        assert context.name == "Shop"

    @pytest.mark.parametrize("path", ["shop_contexts", ":ShopContext", "shop_contexts:"])
    def test_malformed_path(self, path):
        with pytest.raises(ContextLoadError, match="expected 'package.module:ClassName'"):
            load_context(path)

    def test_missing_module(self):
        with pytest.raises(ContextLoadError) as exc_info:
            load_context("sbinit_no_such_module:Context")

        assert exc_info.value.details["path"] == "sbinit_no_such_module:Context"

    def test_missing_attribute(self, context_module):
        with pytest.raises(ContextLoadError, match="has no attribute 'Missing'"):
            load_context(f"{context_module}:Missing")

    def test_not_a_context(self, context_module):
        with pytest.raises(ContextLoadError, match="not a ServiceBusContext"):
            load_context(f"{context_module}:NotAContext")

    def test_abstract_context_cannot_be_declared_without_name(self):
        class Incomplete(ServiceBusContext):
            def build_service_bus_resource(self, service_bus_resource):
                pass

        with pytest.raises(TypeError):
            Incomplete()
