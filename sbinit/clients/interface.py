"""
Administration Client Interface

Defines the administrative operations the provisioner needs from a Service Bus
namespace.

Author: sbinit Contributors
Date: 2026-01-12
"""

from abc import ABC, abstractmethod
from typing import Any


class AdministrationClient(ABC):
    """
    Abstract base class for Service Bus administration clients.

    **Implementations**:
    - AzureAdministrationClient: Azure SDK management client
    - InMemoryAdministrationClient: local broker stand-in

    **Properties objects**:
    ``get_*`` returns a mutable properties object whose attributes use the Azure
    SDK names (``default_message_time_to_live``, ``lock_duration``, ...). The
    provisioner assigns desired values onto it and passes it back to
    ``update_*``. ``create_*`` accepts the same names as keyword arguments.

    **Error Handling**:
    Implementations raise their own transport errors; callers let them
    propagate.
    """

    async def __aenter__(self) -> "AdministrationClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""
        pass

    # ========== Queue Operations ==========

    @abstractmethod
    async def queue_exists(self, queue_name: str) -> bool:
        pass

    @abstractmethod
    async def get_queue(self, queue_name: str) -> Any:
        pass

    @abstractmethod
    async def create_queue(self, queue_name: str, **properties: Any) -> Any:
        pass

    @abstractmethod
    async def update_queue(self, queue: Any) -> None:
        pass

    @abstractmethod
    async def delete_queue(self, queue_name: str) -> None:
        pass

    # ========== Topic Operations ==========

    @abstractmethod
    async def topic_exists(self, topic_name: str) -> bool:
        pass

    @abstractmethod
    async def get_topic(self, topic_name: str) -> Any:
        pass

    @abstractmethod
    async def create_topic(self, topic_name: str, **properties: Any) -> Any:
        pass

    @abstractmethod
    async def update_topic(self, topic: Any) -> None:
        pass

    @abstractmethod
    async def delete_topic(self, topic_name: str) -> None:
        pass

    # ========== Subscription Operations ==========

    @abstractmethod
    async def subscription_exists(self, topic_name: str, subscription_name: str) -> bool:
        pass

    @abstractmethod
    async def get_subscription(self, topic_name: str, subscription_name: str) -> Any:
        pass

    @abstractmethod
    async def create_subscription(
        self,
        topic_name: str,
        subscription_name: str,
        **properties: Any
    ) -> Any:
        pass

    @abstractmethod
    async def update_subscription(self, topic_name: str, subscription: Any) -> None:
        pass

    @abstractmethod
    async def delete_subscription(self, topic_name: str, subscription_name: str) -> None:
        pass

    # ========== Rule Operations ==========

    @abstractmethod
    async def rule_exists(self, topic_name: str, subscription_name: str, rule_name: str) -> bool:
        pass

    @abstractmethod
    async def create_rule(
        self,
        topic_name: str,
        subscription_name: str,
        rule_name: str,
        sql_expression: str
    ) -> None:
        """
        Create a SQL filter rule.

        Args:
            topic_name: Owning topic
            subscription_name: Owning subscription
            rule_name: Rule name
            sql_expression: SQL filter expression
        """
        pass

    @abstractmethod
    async def delete_rule(self, topic_name: str, subscription_name: str, rule_name: str) -> None:
        pass
