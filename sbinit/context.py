"""
Service Bus Context Abstract Interface.

Applications describe their topology by implementing a context: a name for the
resource and a method that populates it through the entity builders.
"""

import importlib
from abc import ABC, abstractmethod

from .entities import ServiceBusResource
from .exceptions import ContextLoadError


class ServiceBusContext(ABC):
    """
    Abstract base class for application topology declarations.

    Example:
        class ShopContext(ServiceBusContext):
            name = "Shop"

            def build_service_bus_resource(self, resource):
                resource.add_queue("Orders")
                resource.add_topic("Events").add_subscription("Handler", "Created")
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Resource name (normalized with the ``sb-`` prefix)."""
        pass

    @abstractmethod
    def build_service_bus_resource(self, service_bus_resource: ServiceBusResource) -> None:
        """
        Populate an empty resource with topics and queues.

        Args:
            service_bus_resource: Freshly constructed resource named after ``name``
        """
        pass


def load_context(path: str) -> ServiceBusContext:
    """
    Import and instantiate a context from a ``module:ClassName`` path.

    Raises:
        ContextLoadError: Path is malformed, not importable, or not a context
    """
    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise ContextLoadError(path, "expected 'package.module:ClassName'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ContextLoadError(path, str(e)) from e

    target = getattr(module, attribute, None)
    if target is None:
        raise ContextLoadError(path, f"module '{module_name}' has no attribute '{attribute}'")

    context = target() if isinstance(target, type) else target
    if not isinstance(context, ServiceBusContext):
        raise ContextLoadError(path, "not a ServiceBusContext")
    return context
