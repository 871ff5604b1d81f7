"""
Service Bus Initializer.

Entry points that turn a context (or an already built resource) into provisioned
Service Bus entities:

* ``reconcile`` walks a resource against an administration client.
* ``create_service_bus_resource`` is the direct entry point taking a connection
  string and a resource.
* ``ServiceBusInitializer`` holds a registered context and client, the way an
  application's startup code wires them, and reports which one is missing.

Author: sbinit Contributors
Date: 2026-01-13
"""

import logging
from typing import Any, List, Optional, Type, Union

from .clients.azure_client import AzureAdministrationClient
from .clients.interface import AdministrationClient
from .context import ServiceBusContext
from .core.logging_config import get_logger, log_with_context, track_operation_time
from .entities import ServiceBusResource
from .exceptions import (
    ServiceBusAdministrationClientNotRegisteredError,
    ServiceBusContextNotRegisteredError,
)
from .provisioner import ServiceBusProvisioner

logger = get_logger(__name__)


def build_resource(context: ServiceBusContext) -> ServiceBusResource:
    """
    Build the desired-state tree declared by a context.

    Args:
        context: Application context

    Returns:
        Resource named after the context and populated by it
    """
    resource = ServiceBusResource(name=context.name)
    context.build_service_bus_resource(resource)
    return resource


@track_operation_time(logger, "reconcile")
async def reconcile(admin_client: AdministrationClient, resource: ServiceBusResource) -> ServiceBusResource:
    """
    Converge the namespace to a resource.

    Topics are ensured first, each directly followed by its subscriptions in
    declaration order; queues come last. The first failing call aborts the walk
    with its original exception, leaving earlier entities converged.

    Args:
        admin_client: Administrative client for the target namespace
        resource: Desired state

    Returns:
        The reconciled resource
    """
    provisioner = ServiceBusProvisioner(admin_client)
    log_with_context(
        logger,
        logging.INFO,
        f"Reconciling {resource.name}",
        resource=resource.name,
        topics=len(resource.topics),
        queues=len(resource.queues),
    )

    for topic in resource.topics:
        await provisioner.ensure_topic(topic)

        for subscription in topic.subscriptions:
            await provisioner.ensure_subscription(subscription, topic)

    for queue in resource.queues:
        await provisioner.ensure_queue(queue)

    return resource


async def create_service_bus_resource(connection_string: str, resource: ServiceBusResource) -> ServiceBusResource:
    """
    Provision a resource on the namespace addressed by a connection string.

    Raises:
        ValueError: Connection string is blank or malformed (before any call)
    """
    async with AzureAdministrationClient.from_connection_string(connection_string) as admin_client:
        return await reconcile(admin_client, resource)


ContextSpec = Union[ServiceBusContext, Type[ServiceBusContext]]


class ServiceBusInitializer:
    """
    Startup wiring for a context and an administration client.

    Example:
        initializer = ServiceBusInitializer().add_service_bus_context(ShopContext, conn_str)
        async with initializer:
            await initializer.create_service_bus_resource()
    """

    def __init__(
        self,
        admin_client: Optional[AdministrationClient] = None,
        context: Optional[ServiceBusContext] = None,
    ):
        self.admin_client = admin_client
        self.context = context
        self._owns_client = False
        self._replaced_clients: List[AdministrationClient] = []

    def add_service_bus_context(self, context: ContextSpec, connection_string: str) -> "ServiceBusInitializer":
        """
        Register a context and an Azure administration client.

        Args:
            context: ``ServiceBusContext`` subclass (instantiated without
                arguments) or instance
            connection_string: Namespace connection string

        Returns:
            This initializer

        Raises:
            ValueError: Connection string is blank or malformed
        """
        admin_client = AzureAdministrationClient.from_connection_string(connection_string)
        if self._owns_client and self.admin_client is not None:
            # Registration is synchronous; the replaced client is closed by close()
            self._replaced_clients.append(self.admin_client)
        self.context = context() if isinstance(context, type) else context
        self.admin_client = admin_client
        self._owns_client = True
        return self

    async def create_service_bus_resource(self) -> ServiceBusResource:
        """
        Build the registered context's resource and reconcile it.

        Raises:
            ServiceBusAdministrationClientNotRegisteredError: No client registered
            ServiceBusContextNotRegisteredError: No context registered
        """
        if self.admin_client is None:
            raise ServiceBusAdministrationClientNotRegisteredError()
        if self.context is None:
            raise ServiceBusContextNotRegisteredError()

        resource = build_resource(self.context)
        return await reconcile(self.admin_client, resource)

    async def close(self) -> None:
        """Close every administration client this initializer created."""
        while self._replaced_clients:
            await self._replaced_clients.pop().close()
        if self._owns_client and self.admin_client is not None:
            await self.admin_client.close()

    async def __aenter__(self) -> "ServiceBusInitializer":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
