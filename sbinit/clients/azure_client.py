"""
Azure Service Bus administration client.

Thin adapter over ``azure.servicebus.aio.management.ServiceBusAdministrationClient``.
The SDK has no existence checks, so they are answered by fetching the entity
and treating ``ResourceNotFoundError`` as absence.
"""

from typing import Any, Optional
from urllib.parse import urlparse

from azure.core.exceptions import ResourceNotFoundError
from azure.servicebus.aio.management import ServiceBusAdministrationClient
from azure.servicebus.management import (
    QueueProperties,
    SqlRuleFilter,
    SubscriptionProperties,
    TopicProperties,
)

from .interface import AdministrationClient


def _entity_path(address: Optional[str]) -> Optional[str]:
    """Reduce an absolute forwarding address (sb://<ns>/<entity>) to the entity path."""
    if not address or "://" not in address:
        return address
    return urlparse(address).path.lstrip("/") or address


class AzureAdministrationClient(AdministrationClient):
    """Administration client backed by the Azure SDK."""

    def __init__(self, client: ServiceBusAdministrationClient):
        self._client = client

    @classmethod
    def from_connection_string(cls, connection_string: str, **kwargs: Any) -> "AzureAdministrationClient":
        """
        Build a client from a namespace connection string.

        Raises:
            ValueError: Connection string is blank or malformed
        """
        return cls(ServiceBusAdministrationClient.from_connection_string(connection_string, **kwargs))

    async def close(self) -> None:
        await self._client.close()

    # ========== Queue Operations ==========

    async def queue_exists(self, queue_name: str) -> bool:
        try:
            await self._client.get_queue(queue_name)
        except ResourceNotFoundError:
            return False
        return True

    async def get_queue(self, queue_name: str) -> QueueProperties:
        return await self._client.get_queue(queue_name)

    async def create_queue(self, queue_name: str, **properties: Any) -> QueueProperties:
        return await self._client.create_queue(queue_name, **properties)

    async def update_queue(self, queue: QueueProperties) -> None:
        await self._client.update_queue(queue)

    async def delete_queue(self, queue_name: str) -> None:
        await self._client.delete_queue(queue_name)

    # ========== Topic Operations ==========

    async def topic_exists(self, topic_name: str) -> bool:
        try:
            await self._client.get_topic(topic_name)
        except ResourceNotFoundError:
            return False
        return True

    async def get_topic(self, topic_name: str) -> TopicProperties:
        return await self._client.get_topic(topic_name)

    async def create_topic(self, topic_name: str, **properties: Any) -> TopicProperties:
        return await self._client.create_topic(topic_name, **properties)

    async def update_topic(self, topic: TopicProperties) -> None:
        await self._client.update_topic(topic)

    async def delete_topic(self, topic_name: str) -> None:
        await self._client.delete_topic(topic_name)

    # ========== Subscription Operations ==========

    async def subscription_exists(self, topic_name: str, subscription_name: str) -> bool:
        try:
            await self._client.get_subscription(topic_name, subscription_name)
        except ResourceNotFoundError:
            return False
        return True

    async def get_subscription(self, topic_name: str, subscription_name: str) -> SubscriptionProperties:
        subscription = await self._client.get_subscription(topic_name, subscription_name)
        # The service reports forwarding targets as absolute addresses; declarations use entity names
        subscription.forward_dead_lettered_messages_to = _entity_path(
            subscription.forward_dead_lettered_messages_to
        )
        return subscription

    async def create_subscription(
        self,
        topic_name: str,
        subscription_name: str,
        **properties: Any
    ) -> SubscriptionProperties:
        return await self._client.create_subscription(topic_name, subscription_name, **properties)

    async def update_subscription(self, topic_name: str, subscription: SubscriptionProperties) -> None:
        await self._client.update_subscription(topic_name, subscription)

    async def delete_subscription(self, topic_name: str, subscription_name: str) -> None:
        await self._client.delete_subscription(topic_name, subscription_name)

    # ========== Rule Operations ==========

    async def rule_exists(self, topic_name: str, subscription_name: str, rule_name: str) -> bool:
        try:
            await self._client.get_rule(topic_name, subscription_name, rule_name)
        except ResourceNotFoundError:
            return False
        return True

    async def create_rule(
        self,
        topic_name: str,
        subscription_name: str,
        rule_name: str,
        sql_expression: str
    ) -> None:
        await self._client.create_rule(
            topic_name,
            subscription_name,
            rule_name,
            filter=SqlRuleFilter(sql_expression),
        )

    async def delete_rule(self, topic_name: str, subscription_name: str, rule_name: str) -> None:
        await self._client.delete_rule(topic_name, subscription_name, rule_name)
