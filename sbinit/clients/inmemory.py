"""
In-Memory Administration Client

Broker stand-in that keeps Service Bus entity properties in memory. Behaves like
the management API where it matters to provisioning: new subscriptions get a
``$Default`` catch-all rule, deletes cascade, ``get_*`` returns detached copies,
and missing or duplicate entities raise errors.

Every call is journaled in ``calls`` so callers can assert on exactly which
administrative operations were issued.

Author: sbinit Contributors
Date: 2026-01-14
"""

import asyncio
import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..constants import (
    DEFAULT_DUPLICATE_DETECTION_WINDOW,
    DEFAULT_LOCK_DURATION,
    DEFAULT_RULE_EXPRESSION,
    DEFAULT_RULE_NAME,
    ERROR_QUEUE_ALREADY_EXISTS,
    ERROR_RULE_ALREADY_EXISTS,
    ERROR_RULE_NOT_FOUND,
    ERROR_SUBSCRIPTION_ALREADY_EXISTS,
    ERROR_SUBSCRIPTION_NOT_FOUND,
    ERROR_TOPIC_ALREADY_EXISTS,
    MAX_DURATION,
)
from ..core.logging_config import get_logger, log_with_context
from ..exceptions import EntityAlreadyExistsError, EntityNotFoundError
from .interface import AdministrationClient

logger = get_logger(__name__)


class EntityProperties(BaseModel):
    """Live properties shared by queues and topics."""
    model_config = ConfigDict(extra='forbid')

    name: str
    default_message_time_to_live: timedelta = MAX_DURATION
    requires_duplicate_detection: bool = False
    duplicate_detection_history_time_window: timedelta = DEFAULT_DUPLICATE_DETECTION_WINDOW
    enable_batched_operations: bool = True
    enable_partitioning: bool = False
    auto_delete_on_idle: timedelta = MAX_DURATION


class QueueProperties(EntityProperties):
    """Live queue properties."""


class TopicProperties(EntityProperties):
    """Live topic properties."""


class SubscriptionProperties(BaseModel):
    """Live subscription properties."""
    model_config = ConfigDict(extra='forbid')

    topic_name: str
    name: str
    default_message_time_to_live: timedelta = MAX_DURATION
    dead_lettering_on_message_expiration: bool = False
    lock_duration: timedelta = DEFAULT_LOCK_DURATION
    auto_delete_on_idle: timedelta = MAX_DURATION
    requires_session: bool = False
    forward_dead_lettered_messages_to: Optional[str] = None


class RuleProperties(BaseModel):
    """Live SQL filter rule."""
    model_config = ConfigDict(extra='forbid')

    name: str
    sql_expression: str


def _given(properties: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in properties.items() if v is not None}


class InMemoryAdministrationClient(AdministrationClient):
    """
    Administration client holding all entities in process memory.

    Attributes:
        calls: Journal of ``(operation, *args)`` tuples in call order
        _queues: Queue name to QueueProperties
        _topics: Topic name to TopicProperties
        _subscriptions: (topic, subscription) to SubscriptionProperties
        _rules: (topic, subscription) to rule name to RuleProperties
        _lock: Asyncio lock guarding the state above
    """

    def __init__(self):
        self.calls: List[Tuple[Any, ...]] = []
        self._queues: Dict[str, QueueProperties] = {}
        self._topics: Dict[str, TopicProperties] = {}
        self._subscriptions: Dict[Tuple[str, str], SubscriptionProperties] = {}
        self._rules: Dict[Tuple[str, str], Dict[str, RuleProperties]] = {}
        self._lock = asyncio.Lock()
        self.closed = False

    @property
    def operations(self) -> List[str]:
        """Operation names from the call journal."""
        return [call[0] for call in self.calls]

    def clear_calls(self) -> None:
        self.calls.clear()

    async def reset(self) -> None:
        """Drop all entities and the call journal."""
        async with self._lock:
            self._queues.clear()
            self._topics.clear()
            self._subscriptions.clear()
            self._rules.clear()
            self.calls.clear()

    async def close(self) -> None:
        self.closed = True

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, *args))
        log_with_context(logger, logging.DEBUG, f"admin call: {operation}", operation=operation, args=list(args))

    # ========== Queue Operations ==========

    async def queue_exists(self, queue_name: str) -> bool:
        self._record("queue_exists", queue_name)
        async with self._lock:
            return queue_name in self._queues

    async def get_queue(self, queue_name: str) -> QueueProperties:
        self._record("get_queue", queue_name)
        async with self._lock:
            if queue_name not in self._queues:
                raise EntityNotFoundError("queue", queue_name)
            return self._queues[queue_name].model_copy(deep=True)

    async def create_queue(self, queue_name: str, **properties: Any) -> QueueProperties:
        self._record("create_queue", queue_name)
        async with self._lock:
            if queue_name in self._queues:
                raise EntityAlreadyExistsError(
                    "queue", queue_name, ERROR_QUEUE_ALREADY_EXISTS.format(name=queue_name)
                )
            queue = QueueProperties(name=queue_name, **_given(properties))
            self._queues[queue_name] = queue
            return queue.model_copy(deep=True)

    async def update_queue(self, queue: QueueProperties) -> None:
        self._record("update_queue", queue.name)
        async with self._lock:
            if queue.name not in self._queues:
                raise EntityNotFoundError("queue", queue.name)
            self._queues[queue.name] = queue.model_copy(deep=True)

    async def delete_queue(self, queue_name: str) -> None:
        self._record("delete_queue", queue_name)
        async with self._lock:
            if queue_name not in self._queues:
                raise EntityNotFoundError("queue", queue_name)
            del self._queues[queue_name]

    # ========== Topic Operations ==========

    async def topic_exists(self, topic_name: str) -> bool:
        self._record("topic_exists", topic_name)
        async with self._lock:
            return topic_name in self._topics

    async def get_topic(self, topic_name: str) -> TopicProperties:
        self._record("get_topic", topic_name)
        async with self._lock:
            if topic_name not in self._topics:
                raise EntityNotFoundError("topic", topic_name)
            return self._topics[topic_name].model_copy(deep=True)

    async def create_topic(self, topic_name: str, **properties: Any) -> TopicProperties:
        self._record("create_topic", topic_name)
        async with self._lock:
            if topic_name in self._topics:
                raise EntityAlreadyExistsError(
                    "topic", topic_name, ERROR_TOPIC_ALREADY_EXISTS.format(name=topic_name)
                )
            topic = TopicProperties(name=topic_name, **_given(properties))
            self._topics[topic_name] = topic
            return topic.model_copy(deep=True)

    async def update_topic(self, topic: TopicProperties) -> None:
        self._record("update_topic", topic.name)
        async with self._lock:
            if topic.name not in self._topics:
                raise EntityNotFoundError("topic", topic.name)
            self._topics[topic.name] = topic.model_copy(deep=True)

    async def delete_topic(self, topic_name: str) -> None:
        self._record("delete_topic", topic_name)
        async with self._lock:
            if topic_name not in self._topics:
                raise EntityNotFoundError("topic", topic_name)
            del self._topics[topic_name]
            # Subscriptions and their rules go with the topic
            for key in [k for k in self._subscriptions if k[0] == topic_name]:
                del self._subscriptions[key]
                self._rules.pop(key, None)

    # ========== Subscription Operations ==========

    async def subscription_exists(self, topic_name: str, subscription_name: str) -> bool:
        self._record("subscription_exists", topic_name, subscription_name)
        async with self._lock:
            return (topic_name, subscription_name) in self._subscriptions

    async def get_subscription(self, topic_name: str, subscription_name: str) -> SubscriptionProperties:
        self._record("get_subscription", topic_name, subscription_name)
        async with self._lock:
            key = (topic_name, subscription_name)
            if key not in self._subscriptions:
                raise EntityNotFoundError(
                    "subscription",
                    subscription_name,
                    ERROR_SUBSCRIPTION_NOT_FOUND.format(name=subscription_name, topic=topic_name),
                )
            return self._subscriptions[key].model_copy(deep=True)

    async def create_subscription(
        self,
        topic_name: str,
        subscription_name: str,
        **properties: Any
    ) -> SubscriptionProperties:
        self._record("create_subscription", topic_name, subscription_name)
        async with self._lock:
            if topic_name not in self._topics:
                raise EntityNotFoundError("topic", topic_name)
            key = (topic_name, subscription_name)
            if key in self._subscriptions:
                raise EntityAlreadyExistsError(
                    "subscription",
                    subscription_name,
                    ERROR_SUBSCRIPTION_ALREADY_EXISTS.format(name=subscription_name, topic=topic_name),
                )
            subscription = SubscriptionProperties(
                topic_name=topic_name,
                name=subscription_name,
                **_given(properties),
            )
            self._subscriptions[key] = subscription
            # Brokers attach a pass-all rule to every new subscription
            self._rules[key] = {
                DEFAULT_RULE_NAME: RuleProperties(name=DEFAULT_RULE_NAME, sql_expression=DEFAULT_RULE_EXPRESSION)
            }
            return subscription.model_copy(deep=True)

    async def update_subscription(self, topic_name: str, subscription: SubscriptionProperties) -> None:
        self._record("update_subscription", topic_name, subscription.name)
        async with self._lock:
            key = (topic_name, subscription.name)
            if key not in self._subscriptions:
                raise EntityNotFoundError(
                    "subscription",
                    subscription.name,
                    ERROR_SUBSCRIPTION_NOT_FOUND.format(name=subscription.name, topic=topic_name),
                )
            self._subscriptions[key] = subscription.model_copy(deep=True)

    async def delete_subscription(self, topic_name: str, subscription_name: str) -> None:
        self._record("delete_subscription", topic_name, subscription_name)
        async with self._lock:
            key = (topic_name, subscription_name)
            if key not in self._subscriptions:
                raise EntityNotFoundError(
                    "subscription",
                    subscription_name,
                    ERROR_SUBSCRIPTION_NOT_FOUND.format(name=subscription_name, topic=topic_name),
                )
            del self._subscriptions[key]
            self._rules.pop(key, None)

    # ========== Rule Operations ==========

    async def rule_exists(self, topic_name: str, subscription_name: str, rule_name: str) -> bool:
        self._record("rule_exists", topic_name, subscription_name, rule_name)
        async with self._lock:
            return rule_name in self._rules.get((topic_name, subscription_name), {})

    async def create_rule(
        self,
        topic_name: str,
        subscription_name: str,
        rule_name: str,
        sql_expression: str
    ) -> None:
        self._record("create_rule", topic_name, subscription_name, rule_name)
        async with self._lock:
            key = (topic_name, subscription_name)
            if key not in self._subscriptions:
                raise EntityNotFoundError(
                    "subscription",
                    subscription_name,
                    ERROR_SUBSCRIPTION_NOT_FOUND.format(name=subscription_name, topic=topic_name),
                )
            rules = self._rules.setdefault(key, {})
            if rule_name in rules:
                raise EntityAlreadyExistsError(
                    "rule",
                    rule_name,
                    ERROR_RULE_ALREADY_EXISTS.format(name=rule_name, subscription=subscription_name),
                )
            rules[rule_name] = RuleProperties(name=rule_name, sql_expression=sql_expression)

    async def delete_rule(self, topic_name: str, subscription_name: str, rule_name: str) -> None:
        self._record("delete_rule", topic_name, subscription_name, rule_name)
        async with self._lock:
            rules = self._rules.get((topic_name, subscription_name), {})
            if rule_name not in rules:
                raise EntityNotFoundError(
                    "rule",
                    rule_name,
                    ERROR_RULE_NOT_FOUND.format(name=rule_name, subscription=subscription_name),
                )
            del rules[rule_name]

    # ========== Inspection ==========

    def list_rules(self, topic_name: str, subscription_name: str) -> List[RuleProperties]:
        """Rules currently attached to a subscription, in creation order (not journaled)."""
        return list(self._rules.get((topic_name, subscription_name), {}).values())
