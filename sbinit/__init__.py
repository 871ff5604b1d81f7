"""
sbinit: Declarative Azure Service Bus Initializer

Declare queues, topics, subscriptions and filter rules in code and converge a
Service Bus namespace to them at application startup.
"""

__version__ = "0.1.0"

from .clients import AdministrationClient, AzureAdministrationClient, InMemoryAdministrationClient
from .context import ServiceBusContext
from .entities import (
    Filter,
    Queue,
    QueueOptions,
    ServiceBusResource,
    Subscription,
    SubscriptionOptions,
    Topic,
    TopicOptions,
)
from .initializer import ServiceBusInitializer, build_resource, create_service_bus_resource, reconcile
from .provisioner import ServiceBusProvisioner

__all__ = [
    "__version__",
    "AdministrationClient",
    "AzureAdministrationClient",
    "InMemoryAdministrationClient",
    "ServiceBusContext",
    "Filter",
    "Queue",
    "QueueOptions",
    "ServiceBusResource",
    "Subscription",
    "SubscriptionOptions",
    "Topic",
    "TopicOptions",
    "ServiceBusInitializer",
    "ServiceBusProvisioner",
    "build_resource",
    "create_service_bus_resource",
    "reconcile",
]
